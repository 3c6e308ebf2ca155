from fastapi import APIRouter, Depends, Form
from fastapi.responses import RedirectResponse

from arttrack.routes.deps import require_artist
from arttrack.services.errors import LocalValidationError, StoreError
from arttrack.services.viewer_sessions import ViewerSession

router = APIRouter(prefix="/types", tags=["types"])


@router.post("")
async def add_type(
    label: str = Form(""),
    viewer: ViewerSession = Depends(require_artist),
):
    try:
        viewer.type_registry().add(label)
    except (LocalValidationError, StoreError) as e:
        viewer.notices.append(e.message)
    return RedirectResponse(url="/?adding=1", status_code=303)


@router.post("/remove")
async def remove_type(
    label: str = Form(""),
    viewer: ViewerSession = Depends(require_artist),
):
    try:
        viewer.type_registry().remove(label)
    except (LocalValidationError, StoreError) as e:
        viewer.notices.append(e.message)
    return RedirectResponse(url="/?adding=1", status_code=303)

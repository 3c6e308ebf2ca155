import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import JSONResponse, RedirectResponse

from arttrack.routes.deps import require_artist, wants_json
from arttrack.services.errors import LocalValidationError
from arttrack.services.mutations import MutationResult
from arttrack.services.viewer_sessions import ViewerSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/commissions", tags=["commissions"])


def _respond(request: Request, viewer: ViewerSession, result: MutationResult, redirect_to: str = "/"):
    viewer.record_result(result)
    if wants_json(request):
        value = result.value
        return JSONResponse(
            {
                "ok": result.ok,
                "armed": result.armed,
                "notice": result.notice,
                "commission": value.to_storage() if hasattr(value, "to_storage") else None,
            },
            status_code=200 if result.ok else 502,
        )
    return RedirectResponse(url=redirect_to, status_code=303)


# ---------------------------------------------------------------------------
# Add commission
# ---------------------------------------------------------------------------
@router.post("")
async def create_commission(
    request: Request,
    client_name: str = Form(""),
    title: str = Form(""),
    description: str = Form(""),
    type: str = Form(""),
    price: str = Form(""),
    contact: str = Form(""),
    notes: str = Form(""),
    thumbnail_url: str = Form(""),
    viewer: ViewerSession = Depends(require_artist),
):
    await viewer.ensure_loaded()
    form = {
        "client_name": client_name,
        "title": title,
        "description": description,
        "type": type,
        "price": price,
        "contact": contact,
        "notes": notes,
        "thumbnail_url": thumbnail_url,
    }
    try:
        result = await viewer.coordinator.create(form, viewer.type_registry())
    except LocalValidationError as e:
        result = MutationResult(ok=False, notice=e.message)

    # The form closes only on success
    return _respond(request, viewer, result, redirect_to="/" if result.ok else "/?adding=1")


# ---------------------------------------------------------------------------
# Status steps
# ---------------------------------------------------------------------------
@router.post("/{commission_id}/advance")
async def advance_commission(
    commission_id: str,
    request: Request,
    viewer: ViewerSession = Depends(require_artist),
):
    await viewer.ensure_loaded()
    result = await viewer.coordinator.advance(commission_id)
    return _respond(request, viewer, result)


@router.post("/{commission_id}/retreat")
async def retreat_commission(
    commission_id: str,
    request: Request,
    viewer: ViewerSession = Depends(require_artist),
):
    await viewer.ensure_loaded()
    result = await viewer.coordinator.retreat(commission_id)
    return _respond(request, viewer, result)


# ---------------------------------------------------------------------------
# Delete (first click arms, second click deletes)
# ---------------------------------------------------------------------------
@router.post("/{commission_id}/delete")
async def delete_commission(
    commission_id: str,
    request: Request,
    viewer: ViewerSession = Depends(require_artist),
):
    await viewer.ensure_loaded()
    result = await viewer.coordinator.click_delete(commission_id)
    return _respond(request, viewer, result)

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from arttrack.routes.deps import get_viewer
from arttrack.services.dashboard_service import get_dashboard_data, listing_payload
from arttrack.services.session_gate import ViewMode
from arttrack.services.viewer_sessions import ViewerSession
from arttrack.template_config import templates

router = APIRouter(tags=["dashboard"])


@router.get("/", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    q: Optional[str] = None,
    status: Optional[str] = None,
    artist: Optional[str] = None,
    adding: bool = False,
    viewer: ViewerSession = Depends(get_viewer),
):
    """Client lookup or artist queue, depending on the viewer's mode."""
    if viewer.gate.needs_login:
        return RedirectResponse(url="/login", status_code=303)

    viewer.update_criteria(search_term=q, status=status, artist=artist)
    # Every page view is a fresh load so clients see the artist's latest changes
    await viewer.reload()

    context = get_dashboard_data(viewer, viewer.listing(), adding=adding)
    return templates.TemplateResponse(request, "dashboard/index.html", context)


@router.get("/api/commissions", response_class=JSONResponse)
async def current_listing(
    q: Optional[str] = None,
    status: Optional[str] = None,
    artist: Optional[str] = None,
    viewer: ViewerSession = Depends(get_viewer),
):
    viewer.update_criteria(search_term=q, status=status, artist=artist)
    await viewer.reload()
    payload = listing_payload(viewer.listing(), include_private=viewer.gate.is_admin)
    payload["mode"] = viewer.gate.mode.value
    return payload


@router.post("/mode/toggle")
async def toggle_mode(viewer: ViewerSession = Depends(get_viewer)):
    mode = viewer.toggle_mode()
    if mode == ViewMode.ADMIN and viewer.gate.needs_login:
        return RedirectResponse(url="/login", status_code=303)
    return RedirectResponse(url="/", status_code=303)


@router.post("/mode/client")
async def leave_admin(viewer: ViewerSession = Depends(get_viewer)):
    """Back to client lookup from the login and registration pages."""
    viewer.enter_client()
    return RedirectResponse(url="/", status_code=303)


@router.get("/reload")
async def reload(viewer: ViewerSession = Depends(get_viewer)):
    """Manual full reload; load errors render the error screens."""
    await viewer.reload()
    return RedirectResponse(url="/", status_code=303)


@router.get("/health", response_class=JSONResponse)
async def health():
    return {"ok": True}

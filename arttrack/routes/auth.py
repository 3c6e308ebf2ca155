import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from arttrack.routes.deps import get_viewer
from arttrack.services.errors import AuthError, LocalValidationError
from arttrack.services.viewer_sessions import ViewerSession
from arttrack.template_config import templates
from arttrack.utils.safe_redirect import safe_redirect_url

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    next: str = "/",
    error: str = None,
    viewer: ViewerSession = Depends(get_viewer),
):
    """Display the artist login page. Mode only changes once the form is posted."""
    if viewer.identity is not None:
        return RedirectResponse(url=safe_redirect_url(next), status_code=303)

    return templates.TemplateResponse(request, "auth/login.html", {
        "next": safe_redirect_url(next),
        "error": error,
    })


@router.post("/login")
async def login(
    email: str = Form(""),
    password: str = Form(""),
    next: str = Form("/"),
    viewer: ViewerSession = Depends(get_viewer),
):
    """Process login form."""
    next = safe_redirect_url(next)
    try:
        viewer.gate.sign_in(email, password)
    except (AuthError, LocalValidationError) as e:
        logger.info("Login failed (%s): %s", type(e).__name__, e.message)
        return RedirectResponse(
            url=f"/login?error={quote(e.message)}&next={quote(next)}",
            status_code=303
        )
    return RedirectResponse(url=next, status_code=303)


@router.get("/register", response_class=HTMLResponse)
async def register_page(
    request: Request,
    error: str = None,
    viewer: ViewerSession = Depends(get_viewer),
):
    return templates.TemplateResponse(request, "auth/register.html", {"error": error})


@router.post("/register")
async def register(
    email: str = Form(""),
    password: str = Form(""),
    display_name: str = Form(""),
    viewer: ViewerSession = Depends(get_viewer),
):
    """Create an artist account; the display name becomes the artistId."""
    try:
        viewer.gate.register(email, password, display_name)
    except (AuthError, LocalValidationError) as e:
        logger.info("Registration failed (%s): %s", type(e).__name__, e.message)
        return RedirectResponse(url=f"/register?error={quote(e.message)}", status_code=303)
    return RedirectResponse(url="/", status_code=303)


@router.post("/logout")
async def logout(viewer: ViewerSession = Depends(get_viewer)):
    """Log out and return to client lookup."""
    viewer.logout()
    return RedirectResponse(url="/", status_code=303)

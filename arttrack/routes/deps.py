"""Request-scoped lookups shared by the routers."""
from fastapi import Depends, Request

from arttrack.auth import read_session_cookie
from arttrack.services.errors import AdminRequiredError
from arttrack.services.viewer_sessions import ViewerSession


def get_viewer(request: Request) -> ViewerSession:
    """
    Return this browser's viewer session, creating one if needed.

    A fresh session (e.g. after a server restart) resumes the signed-in user
    recorded in the cookie. The session is stashed on request.state so the
    middleware can refresh the cookie.
    """
    data = read_session_cookie(request) or {}
    registry = request.app.state.viewers
    viewer = registry.get_or_create(data.get("sid"), data.get("user_id"))
    request.state.viewer = viewer
    return viewer


def require_artist(viewer: ViewerSession = Depends(get_viewer)) -> ViewerSession:
    """Admin mode with a signed-in artist, else AdminRequiredError."""
    if not viewer.gate.is_admin:
        raise AdminRequiredError()
    return viewer


def wants_json(request: Request) -> bool:
    return "application/json" in request.headers.get("accept", "")

from arttrack.routes.auth import router as auth_router
from arttrack.routes.dashboard import router as dashboard_router
from arttrack.routes.commissions import router as commissions_router
from arttrack.routes.types import router as types_router

__all__ = [
    'auth_router',
    'dashboard_router',
    'commissions_router',
    'types_router',
]

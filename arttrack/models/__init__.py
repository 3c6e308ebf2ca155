from arttrack.models.user import User
from arttrack.models.commission import Commission

__all__ = [
    "User",
    "Commission",
]

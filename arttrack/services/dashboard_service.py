from arttrack.services.pipeline import STATUS_FILTER_ALL
from arttrack.services.session_gate import ViewMode
from arttrack.services.viewer_sessions import ViewerSession
from arttrack.services.visibility import ARTIST_SCOPE_ALL, Listing


def get_dashboard_data(viewer: ViewerSession, listing: Listing, adding: bool = False) -> dict:
    is_admin = viewer.gate.mode == ViewMode.ADMIN
    identity = viewer.identity

    types = []
    default_type = None
    if is_admin and identity is not None:
        registry = viewer.type_registry()
        types = registry.list()
        default_type = registry.default_type()

    status_filter = viewer.status_filter
    if status_filter != STATUS_FILTER_ALL:
        status_filter = status_filter.value

    return {
        "mode": viewer.gate.mode.value,
        "is_admin": is_admin,
        "identity": identity,
        "listing": listing,
        "kind": listing.kind.value,
        "commissions": listing.items,
        "stats": listing.stats,
        "search_term": viewer.search_term,
        "status_filter": status_filter,
        "status_filter_all": STATUS_FILTER_ALL,
        "artist_scope": viewer.artist_scope,
        "artist_scope_all": ARTIST_SCOPE_ALL,
        "artists": viewer.artist_choices() if not is_admin else [],
        "armed_ids": viewer.confirmations.armed_ids() if is_admin else set(),
        "adding": adding and is_admin and identity is not None,
        "types": types,
        "default_type": default_type,
        "notices": viewer.pop_notices(),
    }


# Shown only to the owning artist, as on the HTML card
PRIVATE_FIELDS = ("contact", "notes", "price", "userId")


def _public(item: dict) -> dict:
    return {k: v for k, v in item.items() if k not in PRIVATE_FIELDS}


def listing_payload(listing: Listing, include_private: bool = False) -> dict:
    """JSON form of a listing for /api/commissions."""
    stats = listing.stats
    items = [c.to_storage() for c in listing.items]
    if not include_private:
        items = [_public(item) for item in items]
    return {
        "kind": listing.kind.value,
        "items": items,
        "stats": (
            {"queue": stats.queue, "active": stats.active, "done": stats.done}
            if stats is not None
            else None
        ),
    }

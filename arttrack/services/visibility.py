"""
Visibility & Filter Engine

Decides which commissions a viewer may see. Precedence:
1. Ownership scope - admin: only the signed-in artist's commissions;
   client: only the selected artist's, when an artist scope is chosen
2. Visibility gate - admin: open when signed in; client: open only once
   a search term is typed or an artist scope is chosen, so the landing
   page never lists every client's commission
3. Text match - case-insensitive substring of clientName, title or id
   (client mode also matches artistId)
4. Status filter - "all" or an exact stage

Stats are computed over the ownership-scoped set (after 1, before 3-4) so
the tiles always describe "all of mine" while the list is narrowed.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

from arttrack.services.identity import Identity
from arttrack.services.pipeline import (
    CommissionStatus,
    FIRST_STAGE,
    LAST_STAGE,
    STATUS_FILTER_ALL,
    is_active,
)
from arttrack.services.records import CommissionRecord

ARTIST_SCOPE_ALL = "all"

StatusFilter = Union[CommissionStatus, str]


@dataclass(frozen=True)
class ClientMode:
    """Anonymous viewer looking up a commission."""
    search_term: str = ""
    artist_scope: str = ARTIST_SCOPE_ALL


@dataclass(frozen=True)
class AdminMode:
    """Artist managing their own queue. identity is None until signed in."""
    identity: Optional[Identity] = None
    owned_records: Sequence[CommissionRecord] = ()
    search_term: str = ""


ViewerMode = Union[ClientMode, AdminMode]


class ListingKind(str, Enum):
    LOGIN = "login"  # admin without identity
    CLOSED = "closed"  # client gate closed
    EMPTY = "empty"  # admin owns nothing yet
    NO_MATCHES = "no_matches"
    LIST = "list"


@dataclass(frozen=True)
class Stats:
    queue: int = 0
    active: int = 0
    done: int = 0


@dataclass
class Listing:
    kind: ListingKind
    items: List[CommissionRecord] = field(default_factory=list)
    stats: Optional[Stats] = None


def compute_stats(records: Iterable[CommissionRecord]) -> Stats:
    queue = active = done = 0
    for c in records:
        if c.status == FIRST_STAGE:
            queue += 1
        elif c.status == LAST_STAGE:
            done += 1
        elif is_active(c.status):
            active += 1
    return Stats(queue=queue, active=active, done=done)


def matches_text(record: CommissionRecord, term: Optional[str], include_artist: bool = False) -> bool:
    """The term is lowercased but not trimmed; trimming only decides the gate."""
    needle = (term or "").lower()
    haystacks = [record.client_name, record.title, record.id]
    if include_artist:
        haystacks.append(record.artist_id)
    return any(needle in (h or "").lower() for h in haystacks)


def matches_status(record: CommissionRecord, status_filter: StatusFilter) -> bool:
    if status_filter == STATUS_FILTER_ALL:
        return True
    return record.status == status_filter


def ownership_scope(mode: ViewerMode, client_records: Sequence[CommissionRecord] = ()) -> List[CommissionRecord]:
    """Candidate set before text/status filtering."""
    if isinstance(mode, AdminMode):
        if mode.identity is None:
            return []
        name = mode.identity.display_name
        return [c for c in mode.owned_records if c.artist_id == name]
    if mode.artist_scope != ARTIST_SCOPE_ALL:
        return [c for c in client_records if c.artist_id == mode.artist_scope]
    return list(client_records)


def gate_open(mode: ViewerMode) -> bool:
    """Whether any list may be rendered at all."""
    if isinstance(mode, AdminMode):
        return mode.identity is not None
    return bool((mode.search_term or "").strip()) or mode.artist_scope != ARTIST_SCOPE_ALL


def filter_commissions(
    mode: ViewerMode,
    status_filter: StatusFilter = STATUS_FILTER_ALL,
    client_records: Sequence[CommissionRecord] = (),
) -> List[CommissionRecord]:
    """Scope, text and status predicates combined. Ignores the gate."""
    include_artist = isinstance(mode, ClientMode)
    return [
        c
        for c in ownership_scope(mode, client_records)
        if matches_text(c, mode.search_term, include_artist) and matches_status(c, status_filter)
    ]


def select_listing(
    mode: ViewerMode,
    status_filter: StatusFilter = STATUS_FILTER_ALL,
    client_records: Sequence[CommissionRecord] = (),
) -> Listing:
    """Single render-selection entry point for both viewer modes."""
    if isinstance(mode, AdminMode) and mode.identity is None:
        return Listing(kind=ListingKind.LOGIN)

    scoped = ownership_scope(mode, client_records)
    stats = compute_stats(scoped)

    if not gate_open(mode):
        return Listing(kind=ListingKind.CLOSED, stats=stats)

    if isinstance(mode, AdminMode) and not scoped:
        return Listing(kind=ListingKind.EMPTY, stats=stats)

    items = filter_commissions(mode, status_filter, client_records)
    if not items:
        return Listing(kind=ListingKind.NO_MATCHES, stats=stats)
    return Listing(kind=ListingKind.LIST, items=items, stats=stats)


def artist_choices(records: Iterable[CommissionRecord]) -> List[str]:
    """Distinct artist names for the client-mode scope selector."""
    return sorted({c.artist_id for c in records})

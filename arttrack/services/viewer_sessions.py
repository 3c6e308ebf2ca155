"""
Per-browser dashboard state.

Each browser carries a signed cookie naming its viewer session. The session
keeps what a single-page client would keep in memory: the mode, the loaded
collections, the search criteria, the delete-confirm state and any pending
notices.
"""
import logging
import os
import uuid
from collections import OrderedDict
from typing import Callable, List, Optional

from starlette.concurrency import run_in_threadpool

from arttrack.services.delete_confirm import DeleteConfirmations, DEFAULT_CONFIRM_SECONDS
from arttrack.services.identity import Identity, PasswordIdentityProvider
from arttrack.services.local_store import LocalStorage
from arttrack.services.mutations import MutationCoordinator, MutationResult
from arttrack.services.pipeline import STATUS_FILTER_ALL, parse_status_filter
from arttrack.services.records import CommissionRecord
from arttrack.services.session_gate import SessionGate, ViewMode
from arttrack.services.store import CommissionStore
from arttrack.services.type_registry import CommissionTypeRegistry
from arttrack.services.visibility import (
    ARTIST_SCOPE_ALL,
    AdminMode,
    ClientMode,
    Listing,
    ViewerMode,
    artist_choices,
    select_listing,
)

logger = logging.getLogger(__name__)

MAX_VIEWER_SESSIONS = int(os.getenv("MAX_VIEWER_SESSIONS", "1000"))


class ViewerSession:
    def __init__(
        self,
        session_id: str,
        store: CommissionStore,
        provider: PasswordIdentityProvider,
        storage: LocalStorage,
        confirmations: Optional[DeleteConfirmations] = None,
    ):
        self.id = session_id
        self.store = store
        self.storage = storage
        self.gate = SessionGate(provider)
        self.gate.on_identity_change(self._on_identity_changed)

        self.client_records: List[CommissionRecord] = []
        self.client_loaded = False
        self.owned_records: List[CommissionRecord] = []
        self.owned_loaded_for: Optional[str] = None

        self.search_term = ""
        self.status_filter = STATUS_FILTER_ALL
        self.artist_scope = ARTIST_SCOPE_ALL
        self.notices: List[str] = []

        self.confirmations = confirmations or DeleteConfirmations()
        self.coordinator = MutationCoordinator(
            store, self.gate, self.owned_records, self.confirmations
        )

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    @property
    def identity(self) -> Optional[Identity]:
        return self.gate.identity

    def _on_identity_changed(self, identity: Optional[Identity]) -> None:
        self.owned_records[:] = []
        self.owned_loaded_for = None
        self.confirmations.disarm_all()

    def logout(self) -> None:
        self.gate.logout()
        self.search_term = ""
        self.artist_scope = ARTIST_SCOPE_ALL

    def toggle_mode(self) -> ViewMode:
        self.confirmations.disarm_all()
        return self.gate.toggle_mode()

    def enter_client(self) -> None:
        self.confirmations.disarm_all()
        self.gate.enter_client()

    # ------------------------------------------------------------------
    # Criteria
    # ------------------------------------------------------------------
    def update_criteria(self, search_term=None, status=None, artist=None) -> None:
        if search_term is not None:
            self.search_term = search_term
        if status is not None:
            self.status_filter = parse_status_filter(status)
        if artist is not None:
            self.artist_scope = (artist or "").strip() or ARTIST_SCOPE_ALL

    def mode_state(self) -> ViewerMode:
        if self.gate.mode == ViewMode.ADMIN:
            return AdminMode(
                identity=self.identity,
                owned_records=self.owned_records,
                search_term=self.search_term,
            )
        return ClientMode(search_term=self.search_term, artist_scope=self.artist_scope)

    def listing(self) -> Listing:
        return select_listing(self.mode_state(), self.status_filter, self.client_records)

    def artist_choices(self) -> List[str]:
        return artist_choices(self.client_records)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    async def ensure_loaded(self) -> None:
        """
        Load whichever collection the current mode needs.

        Store errors propagate; the app renders them as a full-page error.
        """
        if self.gate.is_admin:
            name = self.identity.display_name
            if self.owned_loaded_for != name:
                records = await run_in_threadpool(self.store.list_for_owner, name)
                self.owned_records[:] = records
                self.owned_loaded_for = name
                logger.info("Loaded %d commissions for %s", len(records), name)
        elif self.gate.mode == ViewMode.CLIENT and not self.client_loaded:
            self.client_records = await run_in_threadpool(self.store.list_all)
            self.client_loaded = True

    async def reload(self) -> None:
        """Refetch the current mode's collection, as on a fresh page load."""
        self.client_loaded = False
        self.owned_loaded_for = None
        await self.ensure_loaded()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def type_registry(self) -> CommissionTypeRegistry:
        return CommissionTypeRegistry(self.storage, self.identity.display_name)

    def record_result(self, result: MutationResult) -> MutationResult:
        if result.notice:
            self.notices.append(result.notice)
        elif result.ok and not result.armed:
            # Client lookups refetch so they see the change.
            self.client_loaded = False
        return result

    def pop_notices(self) -> List[str]:
        notices, self.notices = self.notices, []
        return notices

    def close(self) -> None:
        self.confirmations.disarm_all()
        self.gate.close()


class ViewerSessionRegistry:
    """Viewer sessions by id, oldest evicted first beyond max_sessions."""

    def __init__(
        self,
        store: CommissionStore,
        provider_factory: Callable[[], PasswordIdentityProvider],
        storage: LocalStorage,
        scheduler=None,
        confirm_seconds: float = DEFAULT_CONFIRM_SECONDS,
        max_sessions: int = MAX_VIEWER_SESSIONS,
    ):
        self.store = store
        self.provider_factory = provider_factory
        self.storage = storage
        self.scheduler = scheduler
        self.confirm_seconds = confirm_seconds
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, ViewerSession]" = OrderedDict()

    def get(self, session_id: Optional[str]) -> Optional[ViewerSession]:
        session = self._sessions.get(session_id) if session_id else None
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def create(self, user_id: Optional[str] = None) -> ViewerSession:
        session = ViewerSession(
            session_id=uuid.uuid4().hex,
            store=self.store,
            provider=self.provider_factory(),
            storage=self.storage,
            confirmations=DeleteConfirmations(self.scheduler, self.confirm_seconds),
        )
        if user_id:
            session.gate.restore(user_id)
        self._sessions[session.id] = session
        while len(self._sessions) > self.max_sessions:
            _, evicted = self._sessions.popitem(last=False)
            evicted.close()
        return session

    def get_or_create(self, session_id: Optional[str], user_id: Optional[str] = None) -> ViewerSession:
        return self.get(session_id) or self.create(user_id)

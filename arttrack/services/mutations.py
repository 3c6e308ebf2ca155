"""
Mutation Coordinator

Create, advance/retreat and delete for the signed-in artist's own
commissions. Status changes and deletes are optimistic: the local list
changes first, the store call follows, and a failed call restores the
pre-mutation snapshot. Creates wait for the store before touching the list.

Store calls are blocking, so they run on the threadpool; the local list is
only ever touched on the event loop.
"""
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from starlette.concurrency import run_in_threadpool

from arttrack.services.delete_confirm import DeleteConfirmations
from arttrack.services.errors import AdminRequiredError, OwnershipError, StoreError
from arttrack.services.identity import Identity
from arttrack.services.pipeline import CommissionStatus, advance, retreat
from arttrack.services.records import CommissionData, CommissionRecord, today_str
from arttrack.services.session_gate import SessionGate
from arttrack.services.store import CommissionStore
from arttrack.services.type_registry import CommissionTypeRegistry
from arttrack.services.validators import apply_commission_defaults

logger = logging.getLogger(__name__)

CREATE_FAILED = "新增委託失敗"
STATUS_FAILED = "更新進度失敗，已還原"
DELETE_FAILED = "刪除失敗，已還原"


@dataclass
class MutationResult:
    ok: bool
    value: Any = None
    error: Optional[StoreError] = None
    notice: Optional[str] = None
    armed: bool = False  # delete needs a second click


async def run_optimistic(
    apply: Callable[[], None],
    remote: Callable[[], Awaitable[Any]],
    rollback: Callable[[], None],
) -> MutationResult:
    """
    Apply locally, then call the store; roll back if the store call fails.

    The local apply always happens before the remote call is issued, and the
    rollback only after that call has failed.
    """
    apply()
    try:
        value = await remote()
    except StoreError as e:
        rollback()
        logger.warning("Store call failed, local change rolled back: %s", e)
        return MutationResult(ok=False, error=e)
    return MutationResult(ok=True, value=value)


async def _threadpool(func, *args):
    return await run_in_threadpool(func, *args)


class MutationCoordinator:
    def __init__(
        self,
        store: CommissionStore,
        gate: SessionGate,
        records: List[CommissionRecord],
        confirmations: Optional[DeleteConfirmations] = None,
        today: Callable[[], str] = today_str,
        call: Callable[..., Awaitable[Any]] = _threadpool,
    ):
        self.store = store
        self.gate = gate
        # Shared with the viewer session; only ever mutated in place.
        self.records = records
        self.confirmations = confirmations or DeleteConfirmations()
        self.today = today
        self.call = call

    def _require_admin(self) -> Identity:
        if not self.gate.is_admin:
            raise AdminRequiredError()
        return self.gate.identity

    def _find_owned(self, commission_id: str) -> CommissionRecord:
        identity = self._require_admin()
        for c in self.records:
            if c.id == commission_id and c.artist_id == identity.display_name:
                return c
        raise OwnershipError()

    def _snapshot(self) -> List[CommissionRecord]:
        return [c.model_copy(deep=True) for c in self.records]

    def _restore(self, snapshot: List[CommissionRecord]) -> Callable[[], None]:
        def rollback():
            self.records[:] = snapshot
        return rollback

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------
    async def create(self, form: Dict[str, Any], registry: CommissionTypeRegistry) -> MutationResult:
        """
        Create a commission from raw form values.

        Raises:
            AdminRequiredError: not signed in as an artist
            LocalValidationError: unknown type label
        """
        identity = self._require_admin()
        fields = apply_commission_defaults(form, registry)
        today = self.today()
        data = CommissionData(
            **fields,
            artist_id=identity.display_name,
            user_id=identity.user_id,
            status=CommissionStatus.QUEUE,
            date_added=today,
            last_updated=today,
        )
        try:
            record = await self.call(self.store.create, data)
        except StoreError as e:
            logger.warning("Create failed for %s: %s", identity.display_name, e)
            return MutationResult(ok=False, error=e, notice=f"{CREATE_FAILED}：{e.message}")

        self.records.insert(0, record)
        return MutationResult(ok=True, value=record)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------
    async def _change_status(self, commission_id: str, step) -> MutationResult:
        current = self._find_owned(commission_id)
        target = step(current.status)
        if target == current.status:
            return MutationResult(ok=True, value=current)

        snapshot = self._snapshot()
        updated = current.model_copy(
            update={
                "status": target,
                "last_updated": max(self.today(), current.date_added),
            }
        )

        def apply():
            self.records[self.records.index(current)] = updated

        result = await run_optimistic(
            apply,
            lambda: self.call(self.store.set_status, commission_id, target),
            self._restore(snapshot),
        )
        if result.ok:
            result.value = updated
        else:
            result.notice = f"{STATUS_FAILED}：{result.error.message}"
        return result

    async def advance(self, commission_id: str) -> MutationResult:
        return await self._change_status(commission_id, advance)

    async def retreat(self, commission_id: str) -> MutationResult:
        return await self._change_status(commission_id, retreat)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------
    async def click_delete(self, commission_id: str) -> MutationResult:
        """First click arms the row; a second click within the window deletes."""
        self._find_owned(commission_id)
        if not self.confirmations.click(commission_id):
            return MutationResult(ok=True, armed=True)
        return await self.delete(commission_id)

    async def delete(self, commission_id: str) -> MutationResult:
        current = self._find_owned(commission_id)
        snapshot = self._snapshot()

        def apply():
            self.records[:] = [c for c in self.records if c is not current]

        result = await run_optimistic(
            apply,
            lambda: self.call(self.store.delete, commission_id),
            self._restore(snapshot),
        )
        if not result.ok:
            result.notice = f"{DELETE_FAILED}：{result.error.message}"
        return result

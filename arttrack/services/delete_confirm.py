"""
Two-click delete.

Each commission row moves Idle -> Armed(until) -> Idle. The first click
arms the row; a second click before `until` confirms. An armed row falls
back to Idle on its own after the timeout through a cancellable scheduled
call, and the deadline is also checked on every click so a late timer never
leaves a row confirmable.

Only one row is armed at a time: arming another row disarms the first.
"""
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol


DEFAULT_CONFIRM_SECONDS = 3.0


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class TimerScheduler(Protocol):
    def call_later(self, delay_seconds: float, func: Callable[[], None]) -> Cancellable: ...


@dataclass
class _Armed:
    until: float
    handle: Optional[Cancellable]


class DeleteConfirmations:
    """Delete-confirm state for every row of one viewer."""

    def __init__(
        self,
        scheduler: Optional[TimerScheduler] = None,
        timeout_seconds: float = DEFAULT_CONFIRM_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.scheduler = scheduler
        self.timeout_seconds = timeout_seconds
        self.clock = clock
        self._armed: Dict[str, _Armed] = {}

    def is_armed(self, commission_id: str) -> bool:
        armed = self._armed.get(commission_id)
        if armed is None:
            return False
        if self.clock() >= armed.until:
            self.disarm(commission_id)
            return False
        return True

    def click(self, commission_id: str) -> bool:
        """Register a delete click. Returns True when this click confirms."""
        if self.is_armed(commission_id):
            self.disarm(commission_id)
            return True
        self.arm(commission_id)
        return False

    def arm(self, commission_id: str) -> None:
        self.disarm_all()
        armed = _Armed(until=self.clock() + self.timeout_seconds, handle=None)
        self._armed[commission_id] = armed
        if self.scheduler is not None:
            armed.handle = self.scheduler.call_later(
                self.timeout_seconds, lambda: self._expire(commission_id, armed)
            )

    def disarm(self, commission_id: str) -> None:
        armed = self._armed.pop(commission_id, None)
        if armed is not None and armed.handle is not None:
            armed.handle.cancel()

    def disarm_all(self) -> None:
        """Cancel every pending timer, e.g. when the viewer leaves admin mode."""
        for commission_id in list(self._armed):
            self.disarm(commission_id)

    def armed_ids(self):
        return {cid for cid in list(self._armed) if self.is_armed(cid)}

    def _expire(self, commission_id: str, armed: _Armed) -> None:
        # Only clear the arming this timer belongs to, not a newer one.
        if self._armed.get(commission_id) is armed:
            self._armed.pop(commission_id, None)

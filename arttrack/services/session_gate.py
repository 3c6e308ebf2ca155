"""
Session / Identity Gate

Two viewer modes: "client" (anonymous lookup) and "admin" (artist queue
management). Entering admin mode does not require an identity, but without
one the only admin screen is login/registration. Flipping back to client
keeps the identity; only logout clears it and forces client mode.
"""
import logging
from enum import Enum
from typing import Callable, List, Optional

from arttrack.services.identity import Identity, PasswordIdentityProvider
from arttrack.services.validators import validate_login, validate_registration

logger = logging.getLogger(__name__)


class ViewMode(str, Enum):
    CLIENT = "client"
    ADMIN = "admin"


class SessionGate:
    def __init__(self, provider: PasswordIdentityProvider):
        self.provider = provider
        self.mode = ViewMode.CLIENT
        self._listeners: List[Callable[[Optional[Identity]], None]] = []
        self._unsubscribe = provider.subscribe(self._on_identity_changed)

    @property
    def identity(self) -> Optional[Identity]:
        return self.provider.current_identity()

    @property
    def is_admin(self) -> bool:
        """Admin mode with a signed-in artist: the only state that may mutate."""
        return self.mode == ViewMode.ADMIN and self.identity is not None

    @property
    def needs_login(self) -> bool:
        return self.mode == ViewMode.ADMIN and self.identity is None

    def on_identity_change(self, listener: Callable[[Optional[Identity]], None]) -> None:
        self._listeners.append(listener)

    def _on_identity_changed(self, identity: Optional[Identity]) -> None:
        if identity is None:
            self.mode = ViewMode.CLIENT
        for listener in list(self._listeners):
            listener(identity)

    # ------------------------------------------------------------------
    # Mode
    # ------------------------------------------------------------------
    def toggle_mode(self) -> ViewMode:
        if self.mode == ViewMode.CLIENT:
            self.mode = ViewMode.ADMIN
        else:
            self.mode = ViewMode.CLIENT
        return self.mode

    def enter_admin(self) -> None:
        self.mode = ViewMode.ADMIN

    def enter_client(self) -> None:
        self.mode = ViewMode.CLIENT

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    def sign_in(self, email: str, password: str) -> Identity:
        """
        Sign in and switch to admin mode.

        Raises:
            LocalValidationError: missing fields, nothing sent to the provider
            AuthError: classified provider failure
        """
        validate_login({"email": email, "password": password}).raise_if_invalid()
        identity = self.provider.sign_in(email, password)
        self.mode = ViewMode.ADMIN
        return identity

    def register(self, email: str, password: str, display_name: str) -> Identity:
        """Create an account whose display name becomes its artistId."""
        validate_registration(
            {"email": email, "password": password, "display_name": display_name}
        ).raise_if_invalid()
        identity = self.provider.sign_up(email, password, display_name)
        self.mode = ViewMode.ADMIN
        return identity

    def logout(self) -> None:
        self.provider.sign_out()
        self.mode = ViewMode.CLIENT

    def restore(self, user_id: Optional[str]) -> Optional[Identity]:
        return self.provider.restore(user_id)

    def close(self) -> None:
        self._unsubscribe()

"""
Identity collaborator.

Email/password accounts in the `users` table. The provider tracks the
current identity for one viewer and notifies subscribers whenever it
changes, including when a stored session is restored or found stale.
"""
import logging
import os
from dataclasses import dataclass
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from arttrack.auth import hash_password, verify_password
from arttrack.models import User
from arttrack.services.errors import (
    AuthDuplicateAccountError,
    AuthInvalidCredentialError,
    AuthOtherError,
    AuthProviderDisabledError,
    AuthWeakSecretError,
    LocalValidationError,
)

logger = logging.getLogger(__name__)

MIN_SECRET_LENGTH = 6
DISPLAY_NAME_TAKEN = "這個繪師名稱已經有人使用了"


def password_auth_enabled() -> bool:
    return os.getenv("ARTTRACK_PASSWORD_AUTH", "true").lower() == "true"


@dataclass(frozen=True)
class Identity:
    user_id: str  # stable account key
    display_name: str  # public name, becomes artistId
    email: str = ""


IdentityListener = Callable[[Optional[Identity]], None]


class PasswordIdentityProvider:
    def __init__(self, session_factory, enabled: Optional[bool] = None):
        self.session_factory = session_factory
        self.enabled = password_auth_enabled() if enabled is None else enabled
        self._identity: Optional[Identity] = None
        self._listeners: List[IdentityListener] = []

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------
    def current_identity(self) -> Optional[Identity]:
        return self._identity

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_identity(self, identity: Optional[Identity]) -> None:
        if identity == self._identity:
            return
        self._identity = identity
        for listener in list(self._listeners):
            listener(identity)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def sign_in(self, email: str, secret: str) -> Identity:
        if not self.enabled:
            raise AuthProviderDisabledError()
        email = (email or "").strip().lower()
        db = self.session_factory()
        try:
            user = db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            raise AuthOtherError(f"登入失敗：{e}") from e
        finally:
            db.close()

        if not user or not user.is_active or not verify_password(secret or "", user.password_hash):
            logger.info("Sign-in rejected for %s", email)
            raise AuthInvalidCredentialError()

        identity = _to_identity(user)
        self._set_identity(identity)
        return identity

    def sign_up(self, email: str, secret: str, display_name: str) -> Identity:
        """Create the account and its public display name in one commit."""
        display_name = (display_name or "").strip()
        if not display_name:
            raise LocalValidationError("請輸入公開顯示的繪師名稱")
        if not self.enabled:
            raise AuthProviderDisabledError()
        email = (email or "").strip().lower()
        if "@" not in email:
            raise AuthOtherError("Email 格式不正確")
        if len(secret or "") < MIN_SECRET_LENGTH:
            raise AuthWeakSecretError()

        db = self.session_factory()
        try:
            if db.query(User).filter(User.email == email).first():
                raise AuthDuplicateAccountError()
            # Ownership follows the display name, so it must stay unique
            if db.query(User).filter(User.display_name == display_name).first():
                raise AuthDuplicateAccountError(DISPLAY_NAME_TAKEN)
            user = User(
                email=email,
                password_hash=hash_password(secret),
                display_name=display_name,
                is_active=True,
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            identity = _to_identity(user)
        except IntegrityError as e:
            db.rollback()
            raise AuthDuplicateAccountError() from e
        except SQLAlchemyError as e:
            db.rollback()
            raise AuthOtherError(f"註冊失敗：{e}") from e
        finally:
            db.close()

        logger.info("Registered artist %s (%s)", display_name, email)
        self._set_identity(identity)
        return identity

    def sign_out(self) -> None:
        self._set_identity(None)

    def restore(self, user_id: Optional[str]) -> Optional[Identity]:
        """Resume a persisted session; a stale or unknown user clears the identity."""
        identity = None
        if user_id:
            db = self.session_factory()
            try:
                user = (
                    db.query(User)
                    .filter(User.id == int(user_id), User.is_active.is_(True))
                    .first()
                )
            except (SQLAlchemyError, ValueError) as e:
                logger.warning("Could not restore session for user %s: %s", user_id, e)
                user = None
            finally:
                db.close()
            if user:
                identity = _to_identity(user)
        self._set_identity(identity)
        return identity


def _to_identity(user: User) -> Identity:
    return Identity(user_id=str(user.id), display_name=user.display_name, email=user.email)

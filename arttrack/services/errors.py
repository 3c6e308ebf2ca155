"""
Shared error types.

Store failures, identity failures and local validation failures all derive
from ArtTrackError so routes can tell them apart with a single except chain.
Each auth class carries the message shown to the artist.
"""


class ArtTrackError(Exception):
    """Base class for all application errors."""

    message = "發生未知錯誤"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        self.message = message or self.message


# ============================================================
# PERSISTENCE
# ============================================================

class StoreError(ArtTrackError):
    """Any failure from a persistence collaborator."""

    message = "資料存取失敗"


class PermissionDeniedError(StoreError):
    """The backing store's access rules rejected the call.

    Never papered over with a fallback.
    """

    message = "資料庫拒絕存取，請檢查權限設定"


class TransportError(StoreError):
    """Network, driver or configuration failure."""


class IndexUnavailableError(StoreError):
    """The store cannot run an owner-scoped query (missing index or capability)."""

    message = "缺少查詢索引"


# ============================================================
# IDENTITY
# ============================================================

class AuthError(ArtTrackError):
    message = "登入失敗，請稍後再試"


class AuthInvalidCredentialError(AuthError):
    message = "帳號或密碼錯誤"


class AuthDuplicateAccountError(AuthError):
    message = "此 Email 已經註冊過了"


class AuthWeakSecretError(AuthError):
    message = "密碼強度不足，請至少輸入 6 個字元"


class AuthProviderDisabledError(AuthError):
    message = "尚未啟用 Email/密碼登入，請聯絡管理員"


class AuthOtherError(AuthError):
    pass


# ============================================================
# LOCAL GUARDS
# ============================================================

class LocalValidationError(ArtTrackError):
    """A required field was empty; caught before any network call."""

    message = "請填寫必填欄位"


class AdminRequiredError(ArtTrackError):
    message = "請先登入繪師後台"


class OwnershipError(ArtTrackError):
    message = "找不到這筆委託"

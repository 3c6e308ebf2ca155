"""
Form Validators

Local checks for the creation form and the registration form. These run
before any store or identity call.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Dict, Any, List

from arttrack.services.errors import LocalValidationError
from arttrack.services.type_registry import CommissionTypeRegistry


DEFAULT_CLIENT_NAME = "匿名委託人"
DEFAULT_TITLE = "未命名委託"


class ValidationResult:
    """Container for blocking validation errors."""
    def __init__(self):
        self.errors: List[str] = []

    def add_error(self, msg: str):
        self.errors.append(msg)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def raise_if_invalid(self):
        """Raise LocalValidationError if there are blocking errors."""
        if self.errors:
            raise LocalValidationError("；".join(self.errors))


def _is_empty(value: Any) -> bool:
    """Check if value is None or empty string."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return False


def _clean(value: Optional[str]) -> Optional[str]:
    if _is_empty(value):
        return None
    return value.strip()


def parse_price(value: Any) -> float:
    """Parse a price field; blank, unparsable or negative becomes 0."""
    if _is_empty(value):
        return 0.0
    try:
        price = Decimal(str(value).strip().replace(",", ""))
    except (InvalidOperation, ValueError):
        return 0.0
    if not price.is_finite() or price < 0:
        return 0.0
    return float(price)


# ============================================================
# COMMISSION FORM
# ============================================================

def apply_commission_defaults(
    data: Dict[str, Any],
    registry: CommissionTypeRegistry,
) -> Dict[str, Any]:
    """
    Normalize the creation form.

    Defaults: clientName => 匿名委託人, title => 未命名委託, price => 0.
    The type must be one of the artist's registered labels.

    Ownership and dates are not read from the form; the coordinator stamps
    them.

    Returns:
        Dict of CommissionData fields (snake_case)

    Raises:
        LocalValidationError: type is not registered
    """
    return {
        "client_name": _clean(data.get("client_name")) or DEFAULT_CLIENT_NAME,
        "title": _clean(data.get("title")) or DEFAULT_TITLE,
        "description": (data.get("description") or "").strip(),
        "type": registry.validate(data.get("type")),
        "price": parse_price(data.get("price")),
        "contact": _clean(data.get("contact")),
        "notes": _clean(data.get("notes")),
        "thumbnail_url": _clean(data.get("thumbnail_url")),
    }


# ============================================================
# REGISTRATION
# ============================================================

def validate_registration(data: Dict[str, Any]) -> ValidationResult:
    """
    Validate registration data.

    Required fields: email, password, display_name
    """
    result = ValidationResult()

    if _is_empty(data.get("display_name")):
        result.add_error("請輸入公開顯示的繪師名稱")

    if _is_empty(data.get("email")):
        result.add_error("請輸入 Email")

    if _is_empty(data.get("password")):
        result.add_error("請輸入密碼")

    return result


def validate_login(data: Dict[str, Any]) -> ValidationResult:
    result = ValidationResult()
    if _is_empty(data.get("email")):
        result.add_error("請輸入 Email")
    if _is_empty(data.get("password")):
        result.add_error("請輸入密碼")
    return result

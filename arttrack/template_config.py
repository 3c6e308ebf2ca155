"""Centralized Jinja2 template configuration with dashboard filters."""
from pathlib import Path

from fastapi.templating import Jinja2Templates

from arttrack.services.pipeline import CommissionStatus, STATUS_STEPS, progress, can_advance, can_retreat

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

# Badge colors per stage
STATUS_BADGES = {
    CommissionStatus.QUEUE: "badge-queue",
    CommissionStatus.SKETCH: "badge-sketch",
    CommissionStatus.LINEART: "badge-lineart",
    CommissionStatus.COLOR: "badge-color",
    CommissionStatus.RENDER: "badge-render",
    CommissionStatus.DONE: "badge-done",
}


def status_badge(status) -> str:
    """Jinja filter mapping a stage to its badge CSS class.

    Usage in templates:
        <span class="{{ commission.status | status_badge }}">
    """
    try:
        return STATUS_BADGES[CommissionStatus(status)]
    except ValueError:
        return "badge-queue"


def price(value) -> str:
    """Jinja filter: whole amounts without decimals, otherwise two places."""
    if value is None:
        return "0"
    value = float(value)
    if value.is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def create_templates() -> Jinja2Templates:
    """Create a Jinja2Templates instance with custom filters."""
    templates = Jinja2Templates(directory=str(TEMPLATE_DIR))

    templates.env.filters["status_badge"] = status_badge
    templates.env.filters["price"] = price
    templates.env.globals["STATUS_STEPS"] = STATUS_STEPS
    templates.env.globals["progress"] = progress
    templates.env.globals["can_advance"] = can_advance
    templates.env.globals["can_retreat"] = can_retreat

    return templates


# Singleton template instance - import this in route files
templates = create_templates()

from arttrack.services.pipeline import (
    CommissionStatus,
    STATUS_STEPS,
    advance,
    retreat,
    is_active,
)
from arttrack.services.visibility import (
    ClientMode,
    AdminMode,
    select_listing,
    compute_stats,
)
from arttrack.services.mutations import (
    MutationCoordinator,
    run_optimistic,
)

__all__ = [
    'CommissionStatus',
    'STATUS_STEPS',
    'advance',
    'retreat',
    'is_active',
    'ClientMode',
    'AdminMode',
    'select_listing',
    'compute_stats',
    'MutationCoordinator',
    'run_optimistic',
]

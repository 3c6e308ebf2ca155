"""
Status Pipeline

Stages, in order:
- 排單中 (queued)
- 草稿 (sketch)
- 線稿 (line art)
- 上色 (color)
- 完稿精修 (final render)
- 結案 (done)

A commission only ever moves one stage forward or back. Advancing at the
last stage and retreating at the first are no-ops, never errors.
"""

from enum import Enum
from typing import List, Dict, Union


class CommissionStatus(str, Enum):
    QUEUE = "排單中"
    SKETCH = "草稿"
    LINEART = "線稿"
    COLOR = "上色"
    RENDER = "完稿精修"
    DONE = "結案"


STATUS_STEPS: List[CommissionStatus] = [
    CommissionStatus.QUEUE,
    CommissionStatus.SKETCH,
    CommissionStatus.LINEART,
    CommissionStatus.COLOR,
    CommissionStatus.RENDER,
    CommissionStatus.DONE,
]

FIRST_STAGE = STATUS_STEPS[0]
LAST_STAGE = STATUS_STEPS[-1]

STATUS_FILTER_ALL = "all"


def position(status: CommissionStatus) -> int:
    """Index of the stage in the pipeline."""
    return STATUS_STEPS.index(CommissionStatus(status))


def advance(status: CommissionStatus) -> CommissionStatus:
    """
    Return the next stage.

    Stays at the last stage instead of wrapping.
    """
    index = position(status)
    if index >= len(STATUS_STEPS) - 1:
        return LAST_STAGE
    return STATUS_STEPS[index + 1]


def retreat(status: CommissionStatus) -> CommissionStatus:
    """
    Return the previous stage.

    Stays at the first stage instead of wrapping.
    """
    index = position(status)
    if index <= 0:
        return FIRST_STAGE
    return STATUS_STEPS[index - 1]


def can_advance(status: CommissionStatus) -> bool:
    return CommissionStatus(status) != LAST_STAGE


def can_retreat(status: CommissionStatus) -> bool:
    return CommissionStatus(status) != FIRST_STAGE


def is_active(status: CommissionStatus) -> bool:
    """In production: neither queued nor done."""
    return CommissionStatus(status) not in (FIRST_STAGE, LAST_STAGE)


def progress(status: CommissionStatus) -> List[Dict]:
    """
    Per-stage flags for rendering a progress bar.

    Returns:
        One dict per stage with keys: stage, completed, current
    """
    current = position(status)
    return [
        {
            "stage": stage,
            "completed": index < current,
            "current": index == current,
        }
        for index, stage in enumerate(STATUS_STEPS)
    ]


def parse_status_filter(value) -> Union[CommissionStatus, str]:
    """
    Normalize a status filter value from a query string.

    Anything that is not a known stage means "all".
    """
    if value is None:
        return STATUS_FILTER_ALL
    value = str(value).strip()
    for stage in STATUS_STEPS:
        if value == stage.value or value == stage.name:
            return stage
    return STATUS_FILTER_ALL

from typing import Optional

from app.api.core.config import settings
from app.api.modules.v1.performance.models.performance_event_model import PerformanceEventKind

MIN_PERCENTAGE = 0.0
MAX_PERCENTAGE = 100.0


def clamp_percentage(value: float) -> float:
    return max(MIN_PERCENTAGE, min(MAX_PERCENTAGE, value))


def performance_delta(kind: PerformanceEventKind) -> float:
    """
    Signed change to a profile's performance for one scoring event.

    Every approval earns the same flat reward and every rejection the same
    flat penalty. This intentionally replaces the older "+5 on every second
    approval" bonus, and a rejection no longer resets ``accepted_items_count``.
    """
    if kind == PerformanceEventKind.APPROVED:
        return settings.PERFORMANCE_ON_TIME_REWARD
    if kind == PerformanceEventKind.APPROVED_LATE:
        return -settings.PERFORMANCE_LATE_PENALTY
    return -settings.PERFORMANCE_REJECTION_PENALTY


def counts_as_accepted(kind: PerformanceEventKind) -> bool:
    return kind in (PerformanceEventKind.APPROVED, PerformanceEventKind.APPROVED_LATE)


def compute_workload(open_items: int, capacity: Optional[int] = None) -> float:
    """
    Workload percentage for a number of open work items.

    ``capacity`` open items is a full (100%) workload; anything above is capped.
    """
    capacity = capacity or settings.WORKLOAD_CAPACITY
    return clamp_percentage(open_items / capacity * 100)

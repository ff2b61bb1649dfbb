"""Read-only derivations shown on the dashboard screens.

Nothing here changes queue state; ordering and status come from the backend.
"""
from dataclasses import dataclass, field
from datetime import date as date_type
from typing import List, Optional, Sequence

from hospital_admin.models import Department, QueueItem, QueueStatus


@dataclass
class QueueSummary:
    """Queue as displayed: sorted by position with headline counts."""
    items: List[QueueItem] = field(default_factory=list)
    total: int = 0
    waiting_count: int = 0
    active_item: Optional[QueueItem] = None


@dataclass
class Overview:
    departments_count: int
    todays_appointments_count: int
    waiting_count: int
    active_item: Optional[QueueItem]
    preview: List[QueueItem]


def sort_queue(items: Sequence[QueueItem]) -> List[QueueItem]:
    """Return a new list ordered by queue position."""
    return sorted(items, key=lambda item: item.position)


def summarize_queue(items: Sequence[QueueItem]) -> QueueSummary:
    ordered = sort_queue(items)
    waiting = [item for item in ordered if item.status == QueueStatus.WAITING]
    active = next((item for item in ordered if item.status == QueueStatus.ACTIVE), None)
    return QueueSummary(
        items=ordered,
        total=len(ordered),
        waiting_count=len(waiting),
        active_item=active,
    )


def overview(
    departments: Sequence[Department],
    queue: Sequence[QueueItem],
    preview_size: int = 5,
) -> Overview:
    """
    Build the overview screen's numbers.

    Today's appointment count is the length of the selected department's
    queue; the backend exposes no separate daily count.
    """
    summary = summarize_queue(queue)
    return Overview(
        departments_count=len(departments),
        todays_appointments_count=summary.total,
        waiting_count=summary.waiting_count,
        active_item=summary.active_item,
        preview=summary.items[:preview_size],
    )


def today_iso(today: Optional[date_type] = None) -> str:
    """Local date as YYYY-MM-DD."""
    return (today or date_type.today()).strftime("%Y-%m-%d")


def format_header_date(value: Optional[date_type] = None) -> str:
    # e.g. "Mon, Jan 05"
    return (value or date_type.today()).strftime("%a, %b %d")

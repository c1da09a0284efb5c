"""Frame query over a precomputed plan.

Called on every presentation tick, so it is a pure filter: no
re-planning, no caching, no mutation.
"""

from __future__ import annotations

from collections.abc import Sequence

from oddiya.core.slideshow.models import PlacementRecord, SlideshowPlan


def _records(plan: SlideshowPlan | Sequence[PlacementRecord]) -> Sequence[PlacementRecord]:
    if isinstance(plan, SlideshowPlan):
        return plan.records
    return plan


def active_records_at_frame(
    plan: SlideshowPlan | Sequence[PlacementRecord], frame: int
) -> list[PlacementRecord]:
    """Records visible at ``frame``, in draw order.

    A record is active once its start frame has elapsed. The result is
    sorted by ``z_index`` ascending; ``sorted`` is stable, so records
    sharing a z-index keep their insertion order.

    Args:
        plan: SlideshowPlan or its record list.
        frame: Current frame number.

    Returns:
        Active records, back to front.
    """
    active = [r for r in _records(plan) if r.start_frame <= frame]
    return sorted(active, key=lambda r: r.z_index)


def plan_end_frame(plan: SlideshowPlan | Sequence[PlacementRecord]) -> int:
    """Last start frame in the plan (0 when empty)."""
    return max((r.start_frame for r in _records(plan)), default=0)


__all__ = [
    "active_records_at_frame",
    "plan_end_frame",
]

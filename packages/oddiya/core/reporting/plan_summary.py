"""Plan diagnostics - arrangement distribution and image reuse.

Summarizes a SlideshowPlan and raises flags for patterns that look
wrong on screen, such as one image shown on consecutive beats.
"""

from __future__ import annotations

from enum import Enum
import logging
from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from oddiya.core.slideshow.models import SlideshowPlan
from oddiya.core.slideshow.vocabulary import ArrangementKind

logger = logging.getLogger(__name__)

LOW_COVERAGE_RATIO = 0.5


class ReportFlagLevel(str, Enum):
    """Severity level for report flags."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ReportFlag(BaseModel):
    """Issue or warning in the summary."""

    level: ReportFlagLevel = Field(description="Severity level")
    code: str = Field(description="Machine-readable code (e.g., ADJACENT_REPEAT)")
    message: str = Field(description="Human-readable message")
    details: dict[str, Any] = Field(default_factory=dict, description="Additional context")

    model_config = ConfigDict(frozen=True)


class PlanSummary(BaseModel):
    """Statistics for one plan."""

    seed: float
    group_count: int = Field(ge=0)
    record_count: int = Field(ge=0)
    pool_size: int = Field(ge=0)
    arrangement_counts: dict[ArrangementKind, int] = Field(default_factory=dict)
    unique_images: int = Field(ge=0)
    max_reuse: int = Field(ge=0, description="Most placements of a single image")
    min_reuse_gap: int | None = Field(
        default=None, description="Fewest placements between two uses of one image"
    )
    coverage: float = Field(ge=0.0, le=1.0, description="Share of the pool that was used")
    end_frame: int = Field(ge=0)
    flags: list[ReportFlag] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


def summarize_plan(plan: SlideshowPlan, pool_size: int) -> PlanSummary:
    """Compute diagnostics for a plan.

    Args:
        plan: Plan to summarize.
        pool_size: Size of the candidate pool the plan was built from.

    Returns:
        PlanSummary with flags.

    Example:
        >>> summary = summarize_plan(plan, pool_size=12)
        >>> summary.arrangement_counts[ArrangementKind.GRID_2X2]
        3
    """
    counts: dict[ArrangementKind, int] = {}
    for group in plan.groups:
        counts[group.arrangement] = counts.get(group.arrangement, 0) + 1

    if not plan.records:
        return PlanSummary(
            seed=plan.seed,
            group_count=len(plan.groups),
            record_count=0,
            pool_size=pool_size,
            arrangement_counts=counts,
            unique_images=0,
            max_reuse=0,
            coverage=0.0,
            end_frame=0,
        )

    indices = np.array([r.image_index for r in plan.records], dtype=np.int64)
    usage = np.bincount(indices, minlength=max(pool_size, 1))
    unique_images = int(np.count_nonzero(usage))
    max_reuse = int(usage.max())
    min_gap = _min_reuse_gap(indices)
    coverage = unique_images / pool_size if pool_size else 0.0

    flags = _build_flags(plan, pool_size, unique_images, min_gap)
    for flag in flags:
        logger.debug(f"[{flag.level.value}] {flag.code}: {flag.message}")

    return PlanSummary(
        seed=plan.seed,
        group_count=len(plan.groups),
        record_count=len(plan.records),
        pool_size=pool_size,
        arrangement_counts=counts,
        unique_images=unique_images,
        max_reuse=max_reuse,
        min_reuse_gap=min_gap,
        coverage=min(coverage, 1.0),
        end_frame=plan.end_frame,
        flags=flags,
    )


def _min_reuse_gap(indices: np.ndarray) -> int | None:
    """Smallest distance (in records) between two placements of one image."""
    best: int | None = None
    for value in np.unique(indices):
        positions = np.flatnonzero(indices == value)
        if len(positions) < 2:
            continue
        gap = int(np.diff(positions).min())
        best = gap if best is None else min(best, gap)
    return best


def _build_flags(
    plan: SlideshowPlan,
    pool_size: int,
    unique_images: int,
    min_gap: int | None,
) -> list[ReportFlag]:
    flags: list[ReportFlag] = []

    if min_gap == 1 and pool_size > 1:
        flags.append(
            ReportFlag(
                level=ReportFlagLevel.WARNING,
                code="ADJACENT_REPEAT",
                message="An image is placed on two consecutive slots",
            )
        )

    expected = min(pool_size, len(plan.records))
    if expected and unique_images < expected * LOW_COVERAGE_RATIO:
        flags.append(
            ReportFlag(
                level=ReportFlagLevel.WARNING,
                code="LOW_COVERAGE",
                message=f"Only {unique_images} of {pool_size} images used",
                details={"unique_images": unique_images, "pool_size": pool_size},
            )
        )

    truncated = [g.group_index for g in plan.groups if g.truncated]
    if truncated:
        flags.append(
            ReportFlag(
                level=ReportFlagLevel.INFO,
                code="TRUNCATED_GROUP",
                message="Beat track ended inside a group",
                details={"group_indices": truncated},
            )
        )

    return flags


__all__ = [
    "PlanSummary",
    "ReportFlag",
    "ReportFlagLevel",
    "summarize_plan",
]

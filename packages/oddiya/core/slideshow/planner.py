"""Layout planner - turns a beat track and an image pool into placements.

Plan assembly walks the beat track once. At each unconsumed beat it
opens a group, decides the group's arrangement, fills one image per
beat slot the arrangement needs and advances past the consumed slots::

    SCANNING (beat_idx < len(track)) --emit group--> SCANNING
    SCANNING (beat_idx >= len(track)) --> done

The last group is truncated when fewer beats remain than it needs.
Given the same seed and inputs the output is identical; only
``derive_seed`` touches the clock.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from oddiya.core.slideshow.arrangements import (
    DEFAULT_ARRANGEMENT_TABLE,
    ArrangementChoice,
    ArrangementTable,
    create_arrangement_policy,
)
from oddiya.core.slideshow.beats import (
    DEFAULT_BEAT_TRACK,
    DEFAULT_SINGLE_BEATS,
    VIDEO_FPS,
    VIDEO_HEIGHT,
    VIDEO_WIDTH,
    BeatTrack,
)
from oddiya.core.slideshow.geometry import GeometryTable
from oddiya.core.slideshow.models import Image, LayoutGroup, PlacementRecord, SlideshowPlan
from oddiya.core.slideshow.seeding import derive_seed, seeded_shuffle
from oddiya.core.slideshow.selection import DEFAULT_RECENT_WINDOW, ImageSelector, RecentlyUsed
from oddiya.core.slideshow.vocabulary import (
    ArrangementKind,
    ArrangementPolicy,
    SelectionStrategy,
    StaggerMode,
)
from oddiya.core.utils.logging import get_logger, log_performance

_SELECT_SALT = 311
_SHUFFLE_SALT = 577


class PlannerSettings(BaseModel):
    """Knobs for one planner instance.

    Attributes:
        fps: Frames per second used for start frames.
        width: Frame width in pixels (grid cells).
        height: Frame height in pixels (grid cells).
        beat_track: Beat timestamps driving the plan.
        policy: Arrangement decision policy.
        stagger_mode: Start-frame policy inside multi-image groups.
        selection_strategy: Image pick strategy.
        recent_window: Size of the recently-used window.
        arrangement_table: Weighted table (weighted policy).
        single_beats: Forced single-image beats (alternating policy).
    """

    model_config = ConfigDict(frozen=True)

    fps: float = Field(default=VIDEO_FPS, gt=0.0)
    width: int = Field(default=VIDEO_WIDTH, gt=0)
    height: int = Field(default=VIDEO_HEIGHT, gt=0)
    beat_track: BeatTrack = DEFAULT_BEAT_TRACK
    policy: ArrangementPolicy = ArrangementPolicy.WEIGHTED
    stagger_mode: StaggerMode = StaggerMode.GROUP
    selection_strategy: SelectionStrategy = SelectionStrategy.UNIFORM
    recent_window: int = Field(default=DEFAULT_RECENT_WINDOW, ge=1, le=10)
    arrangement_table: ArrangementTable = DEFAULT_ARRANGEMENT_TABLE
    single_beats: frozenset[int] = DEFAULT_SINGLE_BEATS


class SlideshowPlanner:
    """Builds beat-synchronized slideshow plans.

    The planner holds configuration only; every call to :meth:`plan`
    creates its own arrangement policy, recently-used window and output
    lists, so one instance can be reused freely.

    Args:
        settings: Planner settings (defaults when None).

    Example:
        >>> planner = SlideshowPlanner()
        >>> plan = planner.plan([Image(url="a.jpg")], seed=42)
        >>> plan.records[0].image_index
        0
    """

    def __init__(self, settings: PlannerSettings | None = None) -> None:
        self._settings = settings or PlannerSettings()
        self._geometry = GeometryTable(self._settings.width, self._settings.height)

    @property
    def settings(self) -> PlannerSettings:
        return self._settings

    @log_performance
    def plan(self, images: Sequence[Image], seed: float) -> SlideshowPlan:
        """Build the plan for one invocation.

        Args:
            images: Candidate pool (not mutated).
            seed: Seed driving every pseudo-random decision.

        Returns:
            SlideshowPlan; empty when the pool is empty.
        """
        s = self._settings
        log = get_logger(__name__, seed=seed)

        if not images:
            log.info("No images available, returning empty plan")
            return SlideshowPlan(seed=seed, fps=s.fps, width=s.width, height=s.height)

        track = s.beat_track
        decider = create_arrangement_policy(s.policy, s.arrangement_table, s.single_beats)
        selector = ImageSelector(images, RecentlyUsed(s.recent_window), s.selection_strategy)

        groups: list[LayoutGroup] = []
        records: list[PlacementRecord] = []

        beat_idx = 0
        while beat_idx < len(track):
            group_index = beat_idx
            choice = decider.decide(group_index, seed)
            required = choice.kind.image_count
            take = min(required, len(track) - beat_idx)

            picks = self._select_images(selector, choice, beat_idx, take, seed)
            geometries = self._geometry.for_choice(choice, group_index, seed)
            group_start = track.start_frame(beat_idx, s.fps)

            for slot, image_index in enumerate(picks):
                beat = beat_idx + slot
                if s.stagger_mode == StaggerMode.PER_IMAGE:
                    start_frame = track.start_frame(beat, s.fps)
                else:
                    start_frame = group_start
                records.append(
                    PlacementRecord(
                        group_index=group_index,
                        image_index=image_index,
                        start_frame=start_frame,
                        z_index=group_index,
                        geometry=geometries[slot],
                        arrangement=choice.kind,
                        slot_index=slot,
                        beat_index=beat,
                    )
                )

            groups.append(
                LayoutGroup(
                    group_index=group_index,
                    arrangement=choice.kind,
                    variant=choice.variant,
                    beat_indices=tuple(range(beat_idx, beat_idx + take)),
                    start_frame=group_start,
                    truncated=take < required,
                )
            )
            log.debug(
                f"Group {group_index}: {choice.kind.value} beats={beat_idx}..{beat_idx + take - 1} "
                f"frame={group_start} images={picks}"
            )
            beat_idx += take

        counts = Counter(g.arrangement.value for g in groups)
        log.info(
            f"Planned {len(groups)} groups / {len(records)} placements "
            f"from {len(images)} images: {dict(counts)}"
        )
        return SlideshowPlan(
            seed=seed,
            fps=s.fps,
            width=s.width,
            height=s.height,
            groups=groups,
            records=records,
        )

    @staticmethod
    def _select_images(
        selector: ImageSelector,
        choice: ArrangementChoice,
        beat_idx: int,
        take: int,
        seed: float,
    ) -> list[int]:
        """Pick one image per consumed slot; grid picks are shuffled into cells."""
        picks = [
            selector.select(choice.prefers, (beat_idx + slot + 1) * _SELECT_SALT + seed)
            for slot in range(take)
        ]
        if choice.kind in (ArrangementKind.GRID_2X2, ArrangementKind.GRID_1X4):
            picks = seeded_shuffle(picks, (beat_idx + 1) * _SHUFFLE_SALT + seed)
        return picks


def coerce_images(images: Sequence[Image | Mapping[str, Any]]) -> list[Image]:
    """Accept Image instances or raw photo dicts from the photo API."""
    return [img if isinstance(img, Image) else Image.model_validate(img) for img in images]


def build_plan(
    images: Sequence[Image | Mapping[str, Any]],
    session_id: str | None = None,
    fps: float | None = None,
    beat_track: BeatTrack | Sequence[float] | None = None,
    *,
    seed: float | None = None,
    settings: PlannerSettings | None = None,
) -> list[PlacementRecord]:
    """Build the placement records for one "generate" action.

    Args:
        images: Candidate pool (Image instances or photo dicts).
        session_id: Trip/session id used to diversify the seed.
        fps: Frame rate (defaults to the settings' fps).
        beat_track: Beat track or plain seconds (defaults to the settings' track).
        seed: Explicit seed; derived from clock, session and pool when None.
        settings: Base planner settings.

    Returns:
        Placement records in insertion order; empty for an empty pool.
    """
    return build_slideshow_plan(
        images, session_id, fps, beat_track, seed=seed, settings=settings
    ).records


def build_slideshow_plan(
    images: Sequence[Image | Mapping[str, Any]],
    session_id: str | None = None,
    fps: float | None = None,
    beat_track: BeatTrack | Sequence[float] | None = None,
    *,
    seed: float | None = None,
    settings: PlannerSettings | None = None,
) -> SlideshowPlan:
    """Same as :func:`build_plan` but returns the full SlideshowPlan."""
    pool = coerce_images(images)
    base = settings or PlannerSettings()

    updates: dict[str, Any] = {}
    if fps is not None:
        updates["fps"] = fps
    if beat_track is not None:
        if not isinstance(beat_track, BeatTrack):
            beat_track = BeatTrack.from_seconds(list(beat_track))
        updates["beat_track"] = beat_track
    if updates:
        base = PlannerSettings.model_validate({**base.model_dump(), **updates})

    if seed is None:
        seed = derive_seed(session_id, pool)

    return SlideshowPlanner(base).plan(pool, seed)


__all__ = [
    "PlannerSettings",
    "SlideshowPlanner",
    "build_plan",
    "build_slideshow_plan",
    "coerce_images",
]

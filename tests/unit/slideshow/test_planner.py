"""Unit tests for the slideshow planner."""

from __future__ import annotations

import logging

import pytest

from oddiya.core.slideshow.beats import DEFAULT_BEAT_TRACK, DEFAULT_SINGLE_BEATS, BeatTrack
from oddiya.core.slideshow.geometry import grid_cells
from oddiya.core.slideshow.models import GridCell, Image, PercentBox
from oddiya.core.slideshow.planner import (
    PlannerSettings,
    SlideshowPlanner,
    build_plan,
    build_slideshow_plan,
)
from oddiya.core.slideshow.vocabulary import (
    ArrangementKind,
    ArrangementPolicy,
    CoordsVariant,
    Orientation,
    SelectionStrategy,
    StaggerMode,
)

SEED = 1_700_000_000_123.25


class TestEmptyPool:
    """An empty pool yields nothing to draw."""

    def test_build_plan_returns_empty_list(self) -> None:
        assert build_plan([], "trip-1", seed=SEED) == []

    def test_plan_is_empty(self) -> None:
        plan = SlideshowPlanner().plan([], seed=SEED)
        assert plan.is_empty
        assert plan.groups == []
        assert plan.end_frame == 0


class TestDeterminism:
    """Same seed and inputs give the same plan."""

    def test_same_seed_same_records(self, mixed_pool: list[Image]) -> None:
        a = build_plan(mixed_pool, seed=SEED)
        b = build_plan(mixed_pool, seed=SEED)
        assert a == b

    def test_planner_instance_is_reusable(self, mixed_pool: list[Image]) -> None:
        planner = SlideshowPlanner()
        assert planner.plan(mixed_pool, SEED) == planner.plan(mixed_pool, SEED)

    def test_alternating_policy_is_deterministic(self, mixed_pool: list[Image]) -> None:
        settings = PlannerSettings(policy=ArrangementPolicy.ALTERNATING)
        a = build_plan(mixed_pool, seed=SEED, settings=settings)
        b = build_plan(mixed_pool, seed=SEED, settings=settings)
        assert a == b

    def test_input_pool_not_mutated(self, mixed_pool: list[Image]) -> None:
        before = list(mixed_pool)
        build_plan(mixed_pool, seed=SEED)
        assert mixed_pool == before

    def test_different_seeds_vary_arrangements(self, mixed_pool: list[Image]) -> None:
        planner = SlideshowPlanner()
        sequences = {
            tuple(planner.plan(mixed_pool, SEED + i * 1000.5).arrangement_sequence())
            for i in range(30)
        }
        assert len(sequences) > 1

    def test_fresh_seed_when_omitted(self, mixed_pool: list[Image]) -> None:
        plan = build_slideshow_plan(mixed_pool, "trip-1")
        assert not plan.is_empty
        assert plan.seed > 0


class TestBeatCoverage:
    """Every beat slot is consumed exactly once, in order."""

    @pytest.mark.parametrize("offset", [0.0, 17.5, 3333.25, 98765.0])
    def test_groups_partition_track(self, mixed_pool: list[Image], offset: float) -> None:
        plan = SlideshowPlanner().plan(mixed_pool, SEED + offset)
        consumed = [b for g in plan.groups for b in g.beat_indices]
        assert consumed == list(range(len(DEFAULT_BEAT_TRACK)))

    @pytest.mark.parametrize("offset", [0.0, 42.0, 777.7])
    def test_one_record_per_beat(self, mixed_pool: list[Image], offset: float) -> None:
        plan = SlideshowPlanner().plan(mixed_pool, SEED + offset)
        assert [r.beat_index for r in plan.records] == list(range(len(DEFAULT_BEAT_TRACK)))

    def test_group_sizes_match_arrangement(self, mixed_pool: list[Image]) -> None:
        plan = SlideshowPlanner().plan(mixed_pool, SEED)
        for group in plan.groups:
            if not group.truncated:
                assert group.size == group.arrangement.image_count
            records = plan.records_for_group(group.group_index)
            assert len(records) == group.size
            assert [r.slot_index for r in records] == list(range(group.size))

    def test_image_indices_in_range(self, mixed_pool: list[Image]) -> None:
        records = build_plan(mixed_pool, seed=SEED)
        assert all(0 <= r.image_index < len(mixed_pool) for r in records)

    def test_z_index_equals_group_index(self, mixed_pool: list[Image]) -> None:
        records = build_plan(mixed_pool, seed=SEED)
        assert all(r.z_index == r.group_index for r in records)


class TestStartFrames:
    """Start-frame assignment for both stagger modes."""

    def test_four_beats_at_half_second(
        self, landscape_pool: list[Image], half_second_track: BeatTrack
    ) -> None:
        records = build_plan(landscape_pool, fps=30, beat_track=half_second_track, seed=SEED)
        assert records
        assert {r.start_frame for r in records} <= {0, 15, 30, 45}
        assert all(0 <= r.image_index <= 3 for r in records)

    def test_group_mode_uses_group_start(
        self, mixed_pool: list[Image], long_track: BeatTrack
    ) -> None:
        settings = PlannerSettings(beat_track=long_track, stagger_mode=StaggerMode.GROUP)
        plan = SlideshowPlanner(settings).plan(mixed_pool, SEED)
        for record in plan.records:
            assert record.start_frame == long_track.start_frame(record.group_index, 30)

    def test_per_image_mode_uses_own_beat(
        self, mixed_pool: list[Image], long_track: BeatTrack
    ) -> None:
        settings = PlannerSettings(beat_track=long_track, stagger_mode=StaggerMode.PER_IMAGE)
        plan = SlideshowPlanner(settings).plan(mixed_pool, SEED)
        for record in plan.records:
            assert record.start_frame == long_track.start_frame(record.beat_index, 30)

    def test_fps_override(self, landscape_pool: list[Image]) -> None:
        plan = build_slideshow_plan(landscape_pool, fps=60, beat_track=[0.0, 0.5], seed=SEED)
        assert plan.fps == 60
        assert {r.start_frame for r in plan.records} <= {0, 30}

    def test_start_frames_floor(self, landscape_pool: list[Image]) -> None:
        settings = PlannerSettings(stagger_mode=StaggerMode.PER_IMAGE)
        records = build_plan(landscape_pool, beat_track=[0.13, 1.0], seed=SEED, settings=settings)
        assert [r.start_frame for r in records] == [3, 30]


class TestSelection:
    """Image selection behaviour visible in plans."""

    def test_single_image_pool(self, image_factory, long_track: BeatTrack) -> None:
        records = build_plan(image_factory(1), beat_track=long_track, seed=SEED)
        assert len(records) == len(long_track)
        assert {r.image_index for r in records} == {0}

    def test_adjacent_groups_share_no_images(self, image_factory) -> None:
        pool = image_factory(20)
        plan = SlideshowPlanner().plan(pool, SEED)
        for group in plan.groups:
            indices = [r.image_index for r in plan.records_for_group(group.group_index)]
            assert len(indices) == len(set(indices))
        for prev, cur in zip(plan.groups, plan.groups[1:], strict=False):
            a = {r.image_index for r in plan.records_for_group(prev.group_index)}
            b = {r.image_index for r in plan.records_for_group(cur.group_index)}
            assert not a & b

    def test_portrait_pool_fills_landscape_grid(
        self, portrait_pool: list[Image], half_second_track: BeatTrack, grid_2x2_settings
    ) -> None:
        records = build_plan(
            portrait_pool, beat_track=half_second_track, seed=SEED, settings=grid_2x2_settings
        )
        assert len(records) == 4
        assert len({r.image_index for r in records}) == 4
        assert all(r.arrangement == ArrangementKind.GRID_2X2 for r in records)

    def test_orientation_preference_respected(
        self, mixed_pool: list[Image], long_track: BeatTrack, table_factory
    ) -> None:
        settings = PlannerSettings(
            beat_track=long_track,
            arrangement_table=table_factory(ArrangementKind.GRID_1X4, Orientation.PORTRAIT),
        )
        plan = SlideshowPlanner(settings).plan(mixed_pool, SEED)
        orientations = {mixed_pool[r.image_index].orientation for r in plan.records}
        assert orientations == {Orientation.PORTRAIT}

    def test_distance_strategy_builds_valid_plan(self, image_factory) -> None:
        pool = image_factory(15)
        settings = PlannerSettings(selection_strategy=SelectionStrategy.DISTANCE)
        records = build_plan(pool, seed=SEED, settings=settings)
        assert len(records) == len(DEFAULT_BEAT_TRACK)
        assert all(0 <= r.image_index < 15 for r in records)

    def test_accepts_photo_dicts(self) -> None:
        photos = [
            {"url": "a.jpg", "orientation": "portrait", "aspectRatio": 0.75},
            {"url": "b.jpg"},
        ]
        records = build_plan(photos, seed=SEED)
        assert {r.image_index for r in records} <= {0, 1}

    def test_diagonal_groups_use_landscape_images(self, image_factory) -> None:
        pool = image_factory(2, Orientation.PORTRAIT, prefix="tall") + image_factory(2)
        track = BeatTrack.from_seconds([0.0, 0.5])
        planner = SlideshowPlanner(PlannerSettings(beat_track=track))
        diagonal_groups = 0
        for i in range(300):
            plan = planner.plan(pool, SEED + i * 3.5)
            for group in plan.groups:
                if group.variant != CoordsVariant.DIAGONAL:
                    continue
                diagonal_groups += 1
                orientations = {
                    pool[r.image_index].orientation
                    for r in plan.records_for_group(group.group_index)
                }
                assert orientations == {Orientation.LANDSCAPE}
        assert diagonal_groups > 0

    @pytest.mark.parametrize(
        "policy", [ArrangementPolicy.WEIGHTED, ArrangementPolicy.ALTERNATING]
    )
    def test_images_match_arrangement_orientation(
        self, mixed_pool: list[Image], policy: ArrangementPolicy
    ) -> None:
        expected = {
            ArrangementKind.SINGLE_FULLSCREEN: Orientation.LANDSCAPE,
            ArrangementKind.GRID_2X2: Orientation.LANDSCAPE,
            ArrangementKind.GRID_1X4: Orientation.PORTRAIT,
        }
        planner = SlideshowPlanner(PlannerSettings(policy=policy))
        for i in range(20):
            plan = planner.plan(mixed_pool, SEED + i * 77.0)
            for group in plan.groups:
                if group.variant == CoordsVariant.DIAGONAL:
                    wanted = Orientation.LANDSCAPE
                else:
                    wanted = expected.get(group.arrangement)
                if wanted is None:
                    continue
                for record in plan.records_for_group(group.group_index):
                    assert mixed_pool[record.image_index].orientation == wanted


class TestTruncation:
    """The last group is cut short when the track runs out."""

    def test_grid_truncated_at_track_end(self, image_factory, table_factory) -> None:
        track = BeatTrack.from_seconds([i * 0.5 for i in range(6)])
        settings = PlannerSettings(
            beat_track=track,
            arrangement_table=table_factory(ArrangementKind.GRID_2X2, Orientation.LANDSCAPE),
        )
        plan = SlideshowPlanner(settings).plan(image_factory(8), SEED)

        assert [g.size for g in plan.groups] == [4, 2]
        assert [g.truncated for g in plan.groups] == [False, True]

        last = plan.records_for_group(4)
        cells = grid_cells(ArrangementKind.GRID_2X2, 1920, 1080)
        assert [r.geometry for r in last] == cells[:2]
        assert all(r.start_frame == track.start_frame(4, 30) for r in last)

    def test_exact_fit_is_not_truncated(self, image_factory, table_factory) -> None:
        track = BeatTrack.from_seconds([i * 0.5 for i in range(8)])
        settings = PlannerSettings(
            beat_track=track, arrangement_table=table_factory(ArrangementKind.GRID_1X4)
        )
        plan = SlideshowPlanner(settings).plan(image_factory(8), SEED)
        assert [g.size for g in plan.groups] == [4, 4]
        assert not any(g.truncated for g in plan.groups)


class TestGeometryAssignment:
    """Geometry type follows the arrangement family."""

    def test_grid_kinds_get_cells_and_coords_get_boxes(self, mixed_pool: list[Image]) -> None:
        for i in range(10):
            plan = SlideshowPlanner().plan(mixed_pool, SEED + i * 91.0)
            for record in plan.records:
                if record.arrangement.is_grid:
                    assert isinstance(record.geometry, GridCell)
                else:
                    assert isinstance(record.geometry, PercentBox)

    def test_single_fullscreen_covers_frame(
        self, landscape_pool: list[Image], table_factory
    ) -> None:
        settings = PlannerSettings(
            arrangement_table=table_factory(ArrangementKind.SINGLE_FULLSCREEN)
        )
        plan = SlideshowPlanner(settings).plan(landscape_pool, SEED)
        assert all(
            r.geometry == GridCell(cell_width=1920, cell_height=1080) for r in plan.records
        )
        assert len(plan.groups) == len(DEFAULT_BEAT_TRACK)


class TestAlternatingPolicy:
    """Planner behaviour under the alternating policy."""

    @pytest.mark.parametrize("offset", [0.0, 1.5, 250.0, 9999.9])
    def test_grids_never_follow_grids(self, mixed_pool: list[Image], offset: float) -> None:
        settings = PlannerSettings(policy=ArrangementPolicy.ALTERNATING)
        plan = SlideshowPlanner(settings).plan(mixed_pool, SEED + offset)
        multi_grids = {ArrangementKind.GRID_2X2, ArrangementKind.GRID_1X4}
        kinds = plan.arrangement_sequence()
        for prev, cur in zip(kinds, kinds[1:], strict=False):
            assert not (prev in multi_grids and cur in multi_grids)

    @pytest.mark.parametrize("offset", [0.0, 33.0, 4321.0])
    def test_forced_single_beats(self, mixed_pool: list[Image], offset: float) -> None:
        settings = PlannerSettings(policy=ArrangementPolicy.ALTERNATING)
        plan = SlideshowPlanner(settings).plan(mixed_pool, SEED + offset)
        for group in plan.groups:
            if group.group_index in DEFAULT_SINGLE_BEATS:
                assert group.size == 1


class TestPlannerLogging:
    """Planner log records carry the run's seed."""

    def test_summary_logged_with_seed(self, mixed_pool: list[Image], caplog) -> None:
        with caplog.at_level(logging.INFO, logger="oddiya.core.slideshow.planner"):
            SlideshowPlanner().plan(mixed_pool, SEED)

        summaries = [r for r in caplog.records if r.getMessage().startswith("Planned ")]
        assert len(summaries) == 1
        assert summaries[0].name == "oddiya.core.slideshow.planner"
        assert summaries[0].seed == SEED

    def test_empty_pool_logged_with_seed(self, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="oddiya.core.slideshow.planner"):
            SlideshowPlanner().plan([], SEED)

        records = [r for r in caplog.records if r.name == "oddiya.core.slideshow.planner"]
        assert [r.seed for r in records] == [SEED]

"""Beat-synchronized slideshow planning.

Decides, for every beat of a fixed track, which photo appears where and
in which arrangement, and answers "what is on screen at frame F".
"""

from oddiya.core.slideshow.arrangements import (
    DEFAULT_ARRANGEMENT_TABLE,
    AlternatingArrangementPolicy,
    ArrangementBand,
    ArrangementChoice,
    ArrangementTable,
    WeightedArrangementPolicy,
    create_arrangement_policy,
)
from oddiya.core.slideshow.beats import (
    COMPOSITION_DURATION_IN_FRAMES,
    DEFAULT_BEAT_TRACK,
    DEFAULT_SINGLE_BEATS,
    DURATION_IN_FRAMES,
    VIDEO_FPS,
    VIDEO_HEIGHT,
    VIDEO_WIDTH,
    BeatTrack,
)
from oddiya.core.slideshow.composition import (
    CompositionDocument,
    CompositionProps,
    FrameLayer,
    FrameState,
    SlideshowComposition,
)
from oddiya.core.slideshow.geometry import GeometryTable, coords_boxes, grid_cells
from oddiya.core.slideshow.models import (
    GridCell,
    Image,
    LayoutGroup,
    PercentBox,
    PlacementRecord,
    SlideshowPlan,
)
from oddiya.core.slideshow.planner import (
    PlannerSettings,
    SlideshowPlanner,
    build_plan,
    build_slideshow_plan,
)
from oddiya.core.slideshow.query import active_records_at_frame, plan_end_frame
from oddiya.core.slideshow.seeding import derive_seed, seeded_random_int, seeded_shuffle
from oddiya.core.slideshow.selection import ImageSelector, RecentlyUsed
from oddiya.core.slideshow.vocabulary import (
    ArrangementKind,
    ArrangementPolicy,
    CoordsVariant,
    Orientation,
    SelectionStrategy,
    StaggerMode,
)

__all__ = [
    # Planning
    "build_plan",
    "build_slideshow_plan",
    "SlideshowPlanner",
    "PlannerSettings",
    # Query / composition
    "active_records_at_frame",
    "plan_end_frame",
    "CompositionDocument",
    "CompositionProps",
    "FrameLayer",
    "FrameState",
    "SlideshowComposition",
    # Models
    "BeatTrack",
    "GridCell",
    "Image",
    "LayoutGroup",
    "PercentBox",
    "PlacementRecord",
    "SlideshowPlan",
    # Building blocks
    "AlternatingArrangementPolicy",
    "ArrangementBand",
    "ArrangementChoice",
    "ArrangementTable",
    "WeightedArrangementPolicy",
    "create_arrangement_policy",
    "GeometryTable",
    "coords_boxes",
    "grid_cells",
    "ImageSelector",
    "RecentlyUsed",
    "derive_seed",
    "seeded_random_int",
    "seeded_shuffle",
    # Vocabulary / constants
    "ArrangementKind",
    "ArrangementPolicy",
    "CoordsVariant",
    "Orientation",
    "SelectionStrategy",
    "StaggerMode",
    "DEFAULT_ARRANGEMENT_TABLE",
    "DEFAULT_BEAT_TRACK",
    "DEFAULT_SINGLE_BEATS",
    "COMPOSITION_DURATION_IN_FRAMES",
    "DURATION_IN_FRAMES",
    "VIDEO_FPS",
    "VIDEO_HEIGHT",
    "VIDEO_WIDTH",
]

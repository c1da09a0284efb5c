"""Slideshow vocabulary - controlled enums for the layout planner.

Single source of truth for arrangement kinds, orientations and the
planner's policy switches.
"""

from enum import Enum


class Orientation(str, Enum):
    """Photo orientation used for layout preferences.

    Attributes:
        LANDSCAPE: Wider than tall (aspect ratio > 1).
        PORTRAIT: Taller than wide, or square.
    """

    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"


class ArrangementKind(str, Enum):
    """Visual template governing one beat group.

    The number of images an arrangement places is also the number of
    beat slots it consumes.

    Attributes:
        SINGLE_FULLSCREEN: One image covering the whole frame.
        GRID_2X2: Four cells in two rows.
        GRID_1X4: Four full-height columns.
        COORDS_1: One free-positioned image.
        COORDS_2: Two free-positioned images.
        COORDS_3: Three free-positioned images.
        COORDS_4: Four free-positioned images.
    """

    SINGLE_FULLSCREEN = "single-fullscreen"
    GRID_2X2 = "grid-2x2"
    GRID_1X4 = "grid-1x4"
    COORDS_1 = "coords-1"
    COORDS_2 = "coords-2"
    COORDS_3 = "coords-3"
    COORDS_4 = "coords-4"

    @property
    def image_count(self) -> int:
        """Number of images (and beat slots) the arrangement consumes."""
        return _IMAGE_COUNT[self]

    @property
    def is_grid(self) -> bool:
        """True for pixel-cell arrangements (including full-screen)."""
        return self in (
            ArrangementKind.SINGLE_FULLSCREEN,
            ArrangementKind.GRID_2X2,
            ArrangementKind.GRID_1X4,
        )


_IMAGE_COUNT: dict[ArrangementKind, int] = {
    ArrangementKind.SINGLE_FULLSCREEN: 1,
    ArrangementKind.GRID_2X2: 4,
    ArrangementKind.GRID_1X4: 4,
    ArrangementKind.COORDS_1: 1,
    ArrangementKind.COORDS_2: 2,
    ArrangementKind.COORDS_3: 3,
    ArrangementKind.COORDS_4: 4,
}


class CoordsVariant(str, Enum):
    """Percentage-box template for coords arrangements.

    Attributes:
        CENTER: One image centred in the frame.
        STACKED: Two images, one above the other.
        DIAGONAL: Two images, upper-left to lower-right.
        TRIANGLE: Three images, two on top and one below.
        QUAD: Four images offset around the centre.
    """

    CENTER = "center"
    STACKED = "stacked"
    DIAGONAL = "diagonal"
    TRIANGLE = "triangle"
    QUAD = "quad"

    @property
    def image_count(self) -> int:
        """Number of boxes the template defines."""
        return _VARIANT_COUNT[self]


_VARIANT_COUNT: dict[CoordsVariant, int] = {
    CoordsVariant.CENTER: 1,
    CoordsVariant.STACKED: 2,
    CoordsVariant.DIAGONAL: 2,
    CoordsVariant.TRIANGLE: 3,
    CoordsVariant.QUAD: 4,
}


class StaggerMode(str, Enum):
    """How start frames are assigned inside a multi-image group.

    Attributes:
        GROUP: All images share the start frame of the group's first beat.
        PER_IMAGE: Each image starts on the beat slot it consumes.
    """

    GROUP = "group"
    PER_IMAGE = "per-image"


class ArrangementPolicy(str, Enum):
    """Arrangement decision policy.

    Attributes:
        WEIGHTED: Weighted table keyed by (group index, seed).
        ALTERNATING: Two-way grid/coords alternation with forced single beats.
    """

    WEIGHTED = "weighted"
    ALTERNATING = "alternating"


class SelectionStrategy(str, Enum):
    """Image selection strategy among the eligible candidates.

    Attributes:
        UNIFORM: Seeded uniform pick.
        DISTANCE: Prefer candidates far (by pool index) from recent picks.
    """

    UNIFORM = "uniform"
    DISTANCE = "distance"


__all__ = [
    "ArrangementKind",
    "ArrangementPolicy",
    "CoordsVariant",
    "Orientation",
    "SelectionStrategy",
    "StaggerMode",
]

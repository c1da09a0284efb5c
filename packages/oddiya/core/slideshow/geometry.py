"""Geometry templates for each arrangement.

Grid arrangements resolve to pixel cells derived from the frame size;
coords arrangements resolve to percentage boxes centred on
``(left_pct, top_pct)``.
"""

from __future__ import annotations

import logging

from oddiya.core.slideshow.arrangements import ArrangementChoice
from oddiya.core.slideshow.beats import VIDEO_HEIGHT, VIDEO_WIDTH
from oddiya.core.slideshow.models import Geometry, GridCell, PercentBox
from oddiya.core.slideshow.seeding import seeded_random_int
from oddiya.core.slideshow.vocabulary import ArrangementKind, CoordsVariant

logger = logging.getLogger(__name__)

_CENTER_SALT = 789

# Centre image: portrait shots slightly shorter than full height,
# landscape shots at 4/7 of the width.
_CENTER_PORTRAIT = PercentBox(left_pct=50, top_pct=50, width_pct=70, height_pct=85)
_CENTER_LANDSCAPE = PercentBox(left_pct=50, top_pct=50, width_pct=57, height_pct=100)

_COORDS_TEMPLATES: dict[CoordsVariant, tuple[PercentBox, ...]] = {
    CoordsVariant.STACKED: (
        PercentBox(left_pct=50, top_pct=28, width_pct=80, height_pct=45),
        PercentBox(left_pct=50, top_pct=72, width_pct=80, height_pct=45),
    ),
    CoordsVariant.DIAGONAL: (
        PercentBox(left_pct=25, top_pct=30, width_pct=80, height_pct=50),
        PercentBox(left_pct=75, top_pct=70, width_pct=80, height_pct=50),
    ),
    CoordsVariant.TRIANGLE: (
        PercentBox(left_pct=30, top_pct=30, width_pct=45, height_pct=40),
        PercentBox(left_pct=70, top_pct=30, width_pct=45, height_pct=40),
        PercentBox(left_pct=50, top_pct=72, width_pct=45, height_pct=40),
    ),
    CoordsVariant.QUAD: (
        PercentBox(left_pct=27, top_pct=28, width_pct=42, height_pct=42),
        PercentBox(left_pct=73, top_pct=28, width_pct=42, height_pct=42),
        PercentBox(left_pct=27, top_pct=72, width_pct=42, height_pct=42),
        PercentBox(left_pct=73, top_pct=72, width_pct=42, height_pct=42),
    ),
}


def grid_cells(kind: ArrangementKind, width: float, height: float) -> list[GridCell]:
    """Pixel cells for a grid arrangement, in slot order.

    Args:
        kind: SINGLE_FULLSCREEN, GRID_2X2 or GRID_1X4.
        width: Frame width in pixels.
        height: Frame height in pixels.

    Returns:
        One GridCell per slot.

    Raises:
        ValueError: If ``kind`` is not a grid arrangement.
    """
    if kind == ArrangementKind.SINGLE_FULLSCREEN:
        return [GridCell(cell_width=width, cell_height=height, top=0, left=0)]

    if kind == ArrangementKind.GRID_2X2:
        cell_w = width / 2
        cell_h = height / 2
        return [
            GridCell(
                cell_width=cell_w,
                cell_height=cell_h,
                top=(i // 2) * cell_h,
                left=(i % 2) * cell_w,
            )
            for i in range(4)
        ]

    if kind == ArrangementKind.GRID_1X4:
        cell_w = width / 4
        return [
            GridCell(cell_width=cell_w, cell_height=height, top=0, left=i * cell_w)
            for i in range(4)
        ]

    raise ValueError(f"{kind.value} is not a grid arrangement")


def coords_boxes(variant: CoordsVariant, seed_value: float = 0.0) -> list[PercentBox]:
    """Percentage boxes for a coords template, in slot order.

    ``CENTER`` picks its portrait- or landscape-style box with a seeded
    coin on ``seed_value``.
    """
    if variant == CoordsVariant.CENTER:
        if seeded_random_int(seed_value, 0, 1) == 0:
            return [_CENTER_PORTRAIT]
        return [_CENTER_LANDSCAPE]
    return list(_COORDS_TEMPLATES[variant])


class GeometryTable:
    """Resolves arrangement choices into per-slot geometry.

    Args:
        width: Frame width in pixels.
        height: Frame height in pixels.
    """

    def __init__(self, width: int = VIDEO_WIDTH, height: int = VIDEO_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Frame size must be positive, got {width}x{height}")
        self._width = width
        self._height = height

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def for_choice(
        self, choice: ArrangementChoice, group_index: int, seed: float
    ) -> list[Geometry]:
        """Geometry for every slot of a group.

        Args:
            choice: Resolved arrangement.
            group_index: Group index (salts the centre-box coin).
            seed: Run seed.

        Returns:
            ``choice.kind.image_count`` geometries in slot order.
        """
        if choice.kind.is_grid:
            return list(grid_cells(choice.kind, self._width, self._height))

        assert choice.variant is not None
        return list(coords_boxes(choice.variant, (group_index + 1) * _CENTER_SALT + seed))


__all__ = [
    "GeometryTable",
    "coords_boxes",
    "grid_cells",
]

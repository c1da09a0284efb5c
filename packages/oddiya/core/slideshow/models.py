"""Slideshow models - images, geometry and placement records.

Value objects shared by the planner, the frame query and the
composition layer.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from oddiya.core.slideshow.vocabulary import ArrangementKind, CoordsVariant, Orientation

logger = logging.getLogger(__name__)

DEFAULT_ASPECT_RATIO = 16 / 9


class Image(BaseModel):
    """Candidate photo for the slideshow.

    Only ``url`` is required. The photo API delivers camelCase keys,
    so ``aspectRatio`` is accepted as an alias.

    Attributes:
        url: Image location (opaque to the planner).
        orientation: Layout preference hint.
        aspect_ratio: Width / height.
        id: Optional photo id (pass-through).
        name: Optional display name (pass-through).
        timestamp: Optional capture time (pass-through).
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    url: str = Field(..., min_length=1)
    orientation: Orientation = Orientation.LANDSCAPE
    aspect_ratio: float = Field(default=DEFAULT_ASPECT_RATIO, gt=0.0, alias="aspectRatio")
    id: str | None = None
    name: str | None = None
    timestamp: float | None = None

    @field_validator("orientation", mode="before")
    @classmethod
    def coerce_orientation(cls, v: Any) -> Any:
        # Unknown orientation strings are opaque data: fall back to the default.
        if v is None:
            return Orientation.LANDSCAPE
        if isinstance(v, Orientation):
            return v
        try:
            return Orientation(str(v).lower())
        except ValueError:
            logger.debug(f"Unknown orientation {v!r}, using landscape")
            return Orientation.LANDSCAPE

    @classmethod
    def from_dimensions(cls, url: str, width: float, height: float, **extra: Any) -> Image:
        """Build an image from its pixel dimensions.

        Images that report no usable size keep the 16:9 default, which
        classifies them as landscape.

        Args:
            url: Image location.
            width: Natural width in pixels.
            height: Natural height in pixels.
            **extra: Pass-through fields (id, name, timestamp).

        Returns:
            Image with derived aspect ratio and orientation.
        """
        if width > 0 and height > 0:
            aspect_ratio = width / height
        else:
            aspect_ratio = DEFAULT_ASPECT_RATIO
        orientation = Orientation.LANDSCAPE if aspect_ratio > 1 else Orientation.PORTRAIT
        return cls(url=url, orientation=orientation, aspect_ratio=aspect_ratio, **extra)


class GridCell(BaseModel):
    """Pixel cell for grid and full-screen arrangements."""

    model_config = ConfigDict(frozen=True)

    type: Literal["grid"] = "grid"
    cell_width: float = Field(..., gt=0.0)
    cell_height: float = Field(..., gt=0.0)
    top: float = Field(default=0.0, ge=0.0)
    left: float = Field(default=0.0, ge=0.0)


class PercentBox(BaseModel):
    """Percentage box for free-positioned (coords) arrangements.

    ``left_pct``/``top_pct`` locate the box centre; the renderer
    translates the box by -50% on both axes.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["box"] = "box"
    left_pct: float
    top_pct: float
    width_pct: float = Field(..., gt=0.0)
    height_pct: float = Field(..., gt=0.0)


Geometry = Annotated[GridCell | PercentBox, Field(discriminator="type")]


class PlacementRecord(BaseModel):
    """One timed, positioned image instance ready for rendering.

    Attributes:
        group_index: Index of the originating group (its first beat index).
        image_index: Index into the candidate pool.
        start_frame: First frame on which the image is visible.
        z_index: Stacking order; always equal to ``group_index``.
        geometry: Grid cell or percentage box.
        arrangement: Arrangement kind of the originating group.
        slot_index: Position within the group (0-based).
        beat_index: Beat slot this image consumed.
    """

    model_config = ConfigDict(frozen=True)

    group_index: int = Field(..., ge=0)
    image_index: int = Field(..., ge=0)
    start_frame: int = Field(..., ge=0)
    z_index: int
    geometry: Geometry
    arrangement: ArrangementKind
    slot_index: int = Field(default=0, ge=0)
    beat_index: int = Field(..., ge=0)

    @model_validator(mode="after")
    def validate_z_index(self) -> PlacementRecord:
        if self.z_index != self.group_index:
            raise ValueError(
                f"z_index ({self.z_index}) must equal group_index ({self.group_index})"
            )
        return self


class LayoutGroup(BaseModel):
    """A span of consecutive beat slots sharing one arrangement.

    Attributes:
        group_index: First beat index consumed (also the z-order).
        arrangement: Arrangement kind.
        variant: Coords template, None for grid arrangements.
        beat_indices: Consecutive beat slots consumed.
        start_frame: Start frame of the first consumed beat.
        truncated: True when the track ran out before the group filled.
    """

    model_config = ConfigDict(frozen=True)

    group_index: int = Field(..., ge=0)
    arrangement: ArrangementKind
    variant: CoordsVariant | None = None
    beat_indices: tuple[int, ...] = Field(..., min_length=1)
    start_frame: int = Field(..., ge=0)
    truncated: bool = False

    @model_validator(mode="after")
    def validate_beats(self) -> LayoutGroup:
        if self.beat_indices[0] != self.group_index:
            raise ValueError("LayoutGroup must start at its group_index beat")
        for prev, cur in zip(self.beat_indices, self.beat_indices[1:], strict=False):
            if cur != prev + 1:
                raise ValueError(f"LayoutGroup beats must be consecutive: {self.beat_indices}")
        return self

    @property
    def size(self) -> int:
        """Number of beat slots consumed."""
        return len(self.beat_indices)


class SlideshowPlan(BaseModel):
    """Complete output of one planning invocation.

    Attributes:
        seed: Seed that drove every pseudo-random decision.
        fps: Frame rate the start frames were computed for.
        width: Frame width in pixels.
        height: Frame height in pixels.
        groups: Beat groups in track order.
        records: Placement records in insertion order.
    """

    model_config = ConfigDict(frozen=True)

    seed: float
    fps: float = Field(..., gt=0.0)
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    groups: list[LayoutGroup] = Field(default_factory=list)
    records: list[PlacementRecord] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.records

    @property
    def end_frame(self) -> int:
        """Last start frame in the plan (0 when empty)."""
        return max((r.start_frame for r in self.records), default=0)

    def arrangement_sequence(self) -> list[ArrangementKind]:
        """Arrangement kinds in group order."""
        return [g.arrangement for g in self.groups]

    def records_for_group(self, group_index: int) -> list[PlacementRecord]:
        return [r for r in self.records if r.group_index == group_index]


__all__ = [
    "DEFAULT_ASPECT_RATIO",
    "Geometry",
    "GridCell",
    "Image",
    "LayoutGroup",
    "PercentBox",
    "PlacementRecord",
    "SlideshowPlan",
]

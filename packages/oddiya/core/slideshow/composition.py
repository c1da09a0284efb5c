"""Composition contract between the planner and a frame renderer.

The renderer asks for a :class:`FrameState` every tick and draws its
layers back to front into absolutely positioned boxes. The title and
music are carried through untouched.
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from oddiya.core.slideshow.beats import COMPOSITION_DURATION_IN_FRAMES
from oddiya.core.slideshow.models import (
    GridCell,
    Image,
    PercentBox,
    PlacementRecord,
    SlideshowPlan,
)
from oddiya.core.slideshow.query import active_records_at_frame

logger = logging.getLogger(__name__)

ObjectFit = Literal["cover", "contain"]

# Grid images are cropped around the upper-middle band where faces usually are.
GRID_OBJECT_POSITION = "center 25%"


class CompositionProps(BaseModel):
    """Inputs of the slideshow composition.

    Attributes:
        title: Overlay title (may be empty).
        images: Candidate pool.
        music: Background audio reference, if any.
        trip_id: Trip identifier, if any.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = ""
    images: list[Image] = Field(default_factory=list)
    music: str | None = None
    trip_id: str | None = Field(default=None, alias="tripId")


class FrameLayer(BaseModel):
    """One drawable layer of a frame."""

    model_config = ConfigDict(frozen=True)

    record: PlacementRecord
    url: str
    object_fit: ObjectFit
    object_position: str | None = None

    @property
    def z_index(self) -> int:
        return self.record.z_index

    def css_box(self) -> dict[str, str]:
        """Absolute-position box for DOM-style renderers."""
        geometry = self.record.geometry
        if isinstance(geometry, GridCell):
            return {
                "width": f"{geometry.cell_width:g}px",
                "height": f"{geometry.cell_height:g}px",
                "top": f"{geometry.top:g}px",
                "left": f"{geometry.left:g}px",
            }
        return {
            "width": f"{geometry.width_pct:g}%",
            "height": f"{geometry.height_pct:g}%",
            "top": f"{geometry.top_pct:g}%",
            "left": f"{geometry.left_pct:g}%",
            "transform": "translate(-50%, -50%)",
        }


class FrameState(BaseModel):
    """Everything a renderer needs for one frame."""

    model_config = ConfigDict(frozen=True)

    frame: int
    layers: list[FrameLayer] = Field(default_factory=list)
    title: str = ""
    music: str | None = None

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to draw (show a placeholder)."""
        return not self.layers


class CompositionDocument(BaseModel):
    """Serializable pairing of composition props and their plan.

    Attributes:
        props: Composition inputs.
        plan: Plan built from ``props.images``.
        duration_in_frames: Length of the rendered composition.
    """

    model_config = ConfigDict(frozen=True)

    props: CompositionProps
    plan: SlideshowPlan
    duration_in_frames: int = Field(default=COMPOSITION_DURATION_IN_FRAMES, gt=0)


class SlideshowComposition:
    """Pairs composition props with a plan and answers per-frame queries.

    Args:
        props: Composition inputs (title, images, music).
        plan: Plan built from ``props.images``.
        duration_in_frames: Length of the rendered composition; placements
            starting at or after it are never shown.

    Raises:
        ValueError: If ``duration_in_frames`` is not positive.
    """

    def __init__(
        self,
        props: CompositionProps,
        plan: SlideshowPlan,
        duration_in_frames: int = COMPOSITION_DURATION_IN_FRAMES,
    ) -> None:
        if duration_in_frames <= 0:
            raise ValueError(f"duration_in_frames must be positive, got {duration_in_frames}")
        self._props = props
        self._plan = plan
        self._duration_in_frames = duration_in_frames

    @property
    def plan(self) -> SlideshowPlan:
        return self._plan

    @property
    def props(self) -> CompositionProps:
        return self._props

    @property
    def duration_in_frames(self) -> int:
        return self._duration_in_frames

    def hidden_records(self) -> list[PlacementRecord]:
        """Placements that start at or after the end of the composition."""
        return [r for r in self._plan.records if r.start_frame >= self._duration_in_frames]

    @classmethod
    def from_document(cls, document: CompositionDocument) -> SlideshowComposition:
        return cls(document.props, document.plan, document.duration_in_frames)

    def to_document(self) -> CompositionDocument:
        return CompositionDocument(
            props=self._props, plan=self._plan, duration_in_frames=self._duration_in_frames
        )

    def frame_state(self, frame: int) -> FrameState:
        """Resolve the layers visible at ``frame``."""
        layers: list[FrameLayer] = []
        images = self._props.images
        for record in active_records_at_frame(self._plan, frame):
            if record.image_index >= len(images):
                logger.warning(
                    f"Record references image {record.image_index} outside pool of {len(images)}"
                )
                continue
            if isinstance(record.geometry, PercentBox):
                layer = FrameLayer(
                    record=record, url=images[record.image_index].url, object_fit="contain"
                )
            else:
                layer = FrameLayer(
                    record=record,
                    url=images[record.image_index].url,
                    object_fit="cover",
                    object_position=GRID_OBJECT_POSITION,
                )
            layers.append(layer)

        return FrameState(
            frame=frame, layers=layers, title=self._props.title, music=self._props.music
        )


__all__ = [
    "GRID_OBJECT_POSITION",
    "CompositionDocument",
    "CompositionProps",
    "FrameLayer",
    "FrameState",
    "SlideshowComposition",
]

"""Arrangement decision - which visual template each beat group uses.

Two policies are available:

- **Weighted** (default): a discrete table over ``0..99`` keyed by
  ``seeded_random_int(group_index * 99 + seed, 0, 99)``.
- **Alternating**: grid and coords groups alternate, a grid is never
  followed directly by another grid, and accent beats always show a
  single image.

Both are pure functions of ``(group_index, seed)`` plus, for the
alternating policy, the decisions already taken in the same run.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, model_validator

from oddiya.core.slideshow.seeding import seeded_random_int
from oddiya.core.slideshow.vocabulary import (
    ArrangementKind,
    ArrangementPolicy,
    CoordsVariant,
    Orientation,
)

logger = logging.getLogger(__name__)

_TABLE_MAX = 99

# Salts for the independent sub-draws of one group.
_KIND_SALT = 99
_VARIANT_SALT = 123
_GRID_SALT = 456

_DEFAULT_VARIANT: dict[ArrangementKind, CoordsVariant] = {
    ArrangementKind.COORDS_1: CoordsVariant.CENTER,
    ArrangementKind.COORDS_2: CoordsVariant.DIAGONAL,
    ArrangementKind.COORDS_3: CoordsVariant.TRIANGLE,
    ArrangementKind.COORDS_4: CoordsVariant.QUAD,
}

# Templates whose frames only fit one orientation, whatever the band says.
_VARIANT_PREFERS: dict[CoordsVariant, Orientation] = {
    CoordsVariant.DIAGONAL: Orientation.LANDSCAPE,
}


class ArrangementChoice(BaseModel):
    """Resolved arrangement for one group.

    Attributes:
        kind: Arrangement kind.
        variant: Coords template (None for grid kinds).
        prefers: Orientation preference for image selection.
    """

    model_config = ConfigDict(frozen=True)

    kind: ArrangementKind
    variant: CoordsVariant | None = None
    prefers: Orientation | None = None

    @model_validator(mode="after")
    def validate_variant(self) -> ArrangementChoice:
        if self.kind.is_grid:
            if self.variant is not None:
                raise ValueError(f"{self.kind.value} takes no coords variant")
        elif self.variant is None:
            raise ValueError(f"{self.kind.value} requires a coords variant")
        elif self.variant.image_count != self.kind.image_count:
            raise ValueError(
                f"Variant {self.variant.value} places {self.variant.image_count} images, "
                f"{self.kind.value} needs {self.kind.image_count}"
            )
        return self


class ArrangementBand(BaseModel):
    """One row of a weighted arrangement table.

    The band covers ``(previous upper, upper]``; the first band starts at 0.

    Attributes:
        upper: Inclusive upper bound of the band (0-99).
        kind: Arrangement kind for draws in the band.
        variants: Candidate coords templates; several are chosen between
            by a seeded draw. Empty means the kind's default template.
        prefers: Orientation preference for image selection. A resolved
            diagonal template always prefers landscape.
    """

    model_config = ConfigDict(frozen=True)

    upper: int = Field(..., ge=0, le=_TABLE_MAX)
    kind: ArrangementKind
    variants: tuple[CoordsVariant, ...] = ()
    prefers: Orientation | None = None

    @model_validator(mode="after")
    def validate_variants(self) -> ArrangementBand:
        if self.kind.is_grid and self.variants:
            raise ValueError(f"{self.kind.value} takes no coords variants")
        for variant in self.variants:
            if variant.image_count != self.kind.image_count:
                raise ValueError(
                    f"Variant {variant.value} does not fit {self.kind.value}"
                )
        return self

    def resolve(self, group_index: int, seed: float) -> ArrangementChoice:
        """Resolve the band into a concrete choice for a group."""
        if self.kind.is_grid:
            return ArrangementChoice(kind=self.kind, prefers=self.prefers)
        if not self.variants:
            variant = _DEFAULT_VARIANT[self.kind]
        elif len(self.variants) == 1:
            variant = self.variants[0]
        else:
            pick = seeded_random_int(
                (group_index + 1) * _VARIANT_SALT + seed, 0, len(self.variants) - 1
            )
            variant = self.variants[pick]
        prefers = _VARIANT_PREFERS.get(variant, self.prefers)
        return ArrangementChoice(kind=self.kind, variant=variant, prefers=prefers)


class ArrangementTable(BaseModel):
    """Weighted discrete distribution of arrangements over 0..99."""

    model_config = ConfigDict(frozen=True)

    bands: tuple[ArrangementBand, ...] = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_bands(self) -> ArrangementTable:
        uppers = [b.upper for b in self.bands]
        for prev, cur in zip(uppers, uppers[1:], strict=False):
            if cur <= prev:
                raise ValueError(f"Band bounds must be strictly increasing: {uppers}")
        if uppers[-1] != _TABLE_MAX:
            raise ValueError(f"Last band must end at {_TABLE_MAX}, got {uppers[-1]}")
        return self

    def band_for(self, value: int) -> ArrangementBand:
        """Return the band covering ``value``."""
        for band in self.bands:
            if value <= band.upper:
                return band
        raise ValueError(f"Value {value} outside arrangement table range")

    def probabilities(self) -> dict[ArrangementKind, float]:
        """Probability mass per arrangement kind."""
        result: dict[ArrangementKind, float] = {}
        lower = 0
        for band in self.bands:
            share = (band.upper - lower + 1) / (_TABLE_MAX + 1)
            result[band.kind] = result.get(band.kind, 0.0) + share
            lower = band.upper + 1
        return result


DEFAULT_ARRANGEMENT_TABLE = ArrangementTable(
    bands=(
        ArrangementBand(
            upper=9, kind=ArrangementKind.SINGLE_FULLSCREEN, prefers=Orientation.LANDSCAPE
        ),
        ArrangementBand(
            upper=19, kind=ArrangementKind.COORDS_1, variants=(CoordsVariant.CENTER,)
        ),
        ArrangementBand(
            upper=39,
            kind=ArrangementKind.COORDS_2,
            variants=(CoordsVariant.STACKED, CoordsVariant.DIAGONAL),
        ),
        ArrangementBand(upper=69, kind=ArrangementKind.GRID_2X2, prefers=Orientation.LANDSCAPE),
        ArrangementBand(upper=79, kind=ArrangementKind.GRID_1X4, prefers=Orientation.PORTRAIT),
        ArrangementBand(
            upper=99,
            kind=ArrangementKind.COORDS_2,
            variants=(CoordsVariant.DIAGONAL,),
            prefers=Orientation.LANDSCAPE,
        ),
    )
)


class ArrangementDecider(Protocol):
    """Protocol shared by the arrangement policies."""

    def decide(self, group_index: int, seed: float) -> ArrangementChoice:
        """Choose the arrangement for the group starting at ``group_index``."""
        ...


class WeightedArrangementPolicy:
    """Weighted table lookup keyed by ``(group_index, seed)``.

    Args:
        table: Arrangement table (defaults to the built-in table).
    """

    def __init__(self, table: ArrangementTable | None = None) -> None:
        self._table = table or DEFAULT_ARRANGEMENT_TABLE

    @property
    def table(self) -> ArrangementTable:
        return self._table

    def draw(self, group_index: int, seed: float) -> int:
        """Raw table draw in ``0..99`` for a group."""
        return seeded_random_int(group_index * _KIND_SALT + seed, 0, _TABLE_MAX)

    def decide(self, group_index: int, seed: float) -> ArrangementChoice:
        value = self.draw(group_index, seed)
        choice = self._table.band_for(value).resolve(group_index, seed)
        logger.debug(
            f"Group {group_index}: draw={value} -> {choice.kind.value}"
            + (f" ({choice.variant.value})" if choice.variant else "")
        )
        return choice


class AlternatingArrangementPolicy:
    """Two-way grid/coords policy with forced single-image beats.

    Rules:

    - At a forced beat the group is a single image, full-screen or
      centred by a seeded coin.
    - A grid is always followed by coords.
    - Otherwise a seeded coin picks grid or coords, flipped when it
      would repeat the previous non-single arrangement.

    The policy remembers the previous decision, so one instance serves
    exactly one planning run.

    Args:
        single_beats: Beat indices that must start a one-image group.
    """

    def __init__(self, single_beats: Iterable[int] = ()) -> None:
        self._single_beats = frozenset(single_beats)
        self._last_layout: str | None = None
        self._last_was_grid = False

    def decide(self, group_index: int, seed: float) -> ArrangementChoice:
        coin_seed = group_index * _KIND_SALT + seed

        if group_index in self._single_beats:
            if seeded_random_int(coin_seed, 0, 1) == 0:
                self._last_was_grid = False
                logger.debug(f"Group {group_index}: forced single -> full-screen")
                return ArrangementChoice(
                    kind=ArrangementKind.SINGLE_FULLSCREEN, prefers=Orientation.LANDSCAPE
                )
            layout = "coords"
            logger.debug(f"Group {group_index}: forced single -> centred")
        elif self._last_was_grid:
            layout = "coords"
        else:
            layout = "grid" if seeded_random_int(coin_seed, 0, 1) == 0 else "coords"
            if layout == self._last_layout:
                layout = "coords" if layout == "grid" else "grid"

        self._last_layout = layout
        self._last_was_grid = layout == "grid"

        if layout == "grid":
            if seeded_random_int((group_index + 1) * _GRID_SALT + seed, 0, 1) == 0:
                return ArrangementChoice(
                    kind=ArrangementKind.GRID_2X2, prefers=Orientation.LANDSCAPE
                )
            return ArrangementChoice(kind=ArrangementKind.GRID_1X4, prefers=Orientation.PORTRAIT)

        if group_index in self._single_beats:
            count = 1
        else:
            count = seeded_random_int((group_index + 1) * _VARIANT_SALT + seed, 1, 2)
        if count == 1:
            return ArrangementChoice(kind=ArrangementKind.COORDS_1, variant=CoordsVariant.CENTER)
        return ArrangementChoice(
            kind=ArrangementKind.COORDS_2,
            variant=CoordsVariant.DIAGONAL,
            prefers=Orientation.LANDSCAPE,
        )


def create_arrangement_policy(
    policy: ArrangementPolicy,
    table: ArrangementTable | None = None,
    single_beats: Iterable[int] = (),
) -> ArrangementDecider:
    """Create a fresh decider for one planning run.

    Args:
        policy: Which policy to use.
        table: Weighted table (weighted policy only).
        single_beats: Forced single-image beats (alternating policy only).

    Returns:
        Arrangement decider.
    """
    if policy == ArrangementPolicy.ALTERNATING:
        return AlternatingArrangementPolicy(single_beats)
    return WeightedArrangementPolicy(table)


__all__ = [
    "DEFAULT_ARRANGEMENT_TABLE",
    "AlternatingArrangementPolicy",
    "ArrangementBand",
    "ArrangementChoice",
    "ArrangementDecider",
    "ArrangementTable",
    "WeightedArrangementPolicy",
    "create_arrangement_policy",
]

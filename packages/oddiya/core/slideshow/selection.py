"""Fair image selection for beat slots.

Balances randomness against repetition: recently shown images are kept
out of the candidate set while doing so still leaves something to pick,
and orientation preferences are dropped when no image satisfies them.
Selection therefore always succeeds on a non-empty pool.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator, Sequence
import logging

from oddiya.core.slideshow.models import Image
from oddiya.core.slideshow.seeding import seeded_random_int
from oddiya.core.slideshow.vocabulary import Orientation, SelectionStrategy

logger = logging.getLogger(__name__)

DEFAULT_RECENT_WINDOW = 8
_TOP_CHOICES = 3


class RecentlyUsed:
    """Bounded FIFO of recently selected pool indices.

    Args:
        maxlen: Number of selections remembered; the oldest entry is
            evicted once the bound is exceeded.
    """

    def __init__(self, maxlen: int = DEFAULT_RECENT_WINDOW) -> None:
        if maxlen < 1:
            raise ValueError(f"maxlen must be >= 1, got {maxlen}")
        self._items: deque[int] = deque(maxlen=maxlen)

    @property
    def maxlen(self) -> int:
        return self._items.maxlen or 0

    def push(self, index: int) -> None:
        self._items.append(index)

    def __contains__(self, index: object) -> bool:
        return index in self._items

    def __iter__(self) -> Iterator[int]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def as_list(self) -> list[int]:
        return list(self._items)


class ImageSelector:
    """Chooses which pool image fills a beat slot.

    Args:
        images: Candidate pool (must be non-empty).
        recent: Rolling window of recent picks, updated on every selection.
        strategy: UNIFORM or DISTANCE.

    Raises:
        ValueError: If ``images`` is empty.
    """

    def __init__(
        self,
        images: Sequence[Image],
        recent: RecentlyUsed | None = None,
        strategy: SelectionStrategy = SelectionStrategy.UNIFORM,
    ) -> None:
        if not images:
            raise ValueError("ImageSelector requires a non-empty image pool")
        self._images = images
        self._recent = recent if recent is not None else RecentlyUsed()
        self._strategy = strategy

    @property
    def recent(self) -> RecentlyUsed:
        return self._recent

    def candidates(self, orientation: Orientation | None = None) -> list[int]:
        """Eligible pool indices after both fallbacks are applied."""
        pool = list(range(len(self._images)))

        if orientation is not None:
            matching = [i for i in pool if self._images[i].orientation == orientation]
            if matching:
                pool = matching
            else:
                logger.debug(f"No {orientation.value} images, using full pool")

        fresh = [i for i in pool if i not in self._recent]
        if fresh:
            return fresh

        logger.debug("All candidates used recently, ignoring recent window")
        return pool

    def select(self, orientation: Orientation | None, draw_seed: float) -> int:
        """Pick an image index and record it as recently used.

        Args:
            orientation: Preferred orientation, or None for any.
            draw_seed: Seed for this slot's draw.

        Returns:
            Valid index into the pool.
        """
        candidates = self.candidates(orientation)

        if self._strategy == SelectionStrategy.DISTANCE and len(self._recent) > 0:
            chosen = self._pick_distant(candidates, draw_seed)
        else:
            chosen = candidates[seeded_random_int(draw_seed, 0, len(candidates) - 1)]

        self._recent.push(chosen)
        return chosen

    def _pick_distant(self, candidates: list[int], draw_seed: float) -> int:
        """Pick among the top candidates farthest from recent picks."""
        recent = self._recent.as_list()
        ranked = sorted(
            candidates,
            key=lambda idx: (-min(abs(idx - used) for used in recent), idx),
        )
        top = ranked[:_TOP_CHOICES]
        return top[seeded_random_int(draw_seed, 0, len(top) - 1)]


__all__ = [
    "DEFAULT_RECENT_WINDOW",
    "ImageSelector",
    "RecentlyUsed",
]

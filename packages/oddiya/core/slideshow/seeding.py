"""Seed derivation and the seeded pseudo-random helpers.

Seed derivation is the only non-deterministic step of planning. Every
later decision is a pure function of the derived seed.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
import math
import random
import time
from typing import TypeVar

from oddiya.core.slideshow.models import Image

logger = logging.getLogger(__name__)

T = TypeVar("T")

_JITTER_RANGE = 1000.0


def derive_seed(
    session_id: str | None,
    images: Sequence[Image],
    *,
    now_ms: float | None = None,
    jitter: float | None = None,
) -> float:
    """Derive a fresh seed for one planning invocation.

    The seed changes on every call (wall clock plus jitter) and is
    nudged by the session id and the image set so that different trips
    diverge naturally.

    Args:
        session_id: Trip/session identifier, may be None.
        images: Candidate pool.
        now_ms: Wall-clock milliseconds (defaults to ``time.time()``).
        jitter: Extra entropy in [0, 1000) (defaults to ``random.random()``).

    Returns:
        Scalar seed.
    """
    if now_ms is None:
        now_ms = time.time() * 1000.0
    if jitter is None:
        jitter = random.random() * _JITTER_RANGE

    image_hash = sum(len(img.url) for img in images)
    session_len = len(session_id) if session_id else 0
    seed = now_ms + jitter + session_len + image_hash
    logger.debug(f"Derived seed {seed} (session={session_id!r}, images={len(images)})")
    return seed


def seeded_random_int(seed: float, min_value: int, max_value: int) -> int:
    """Map a seed to an integer in ``[min_value, max_value]``.

    Uses the sine hash ``frac(sin(seed) * 10000)``; the same seed always
    yields the same value.

    Args:
        seed: Any finite scalar.
        min_value: Inclusive lower bound.
        max_value: Inclusive upper bound.

    Returns:
        Integer in range.

    Raises:
        ValueError: If ``max_value < min_value``.

    Example:
        >>> seeded_random_int(42, 0, 99) == seeded_random_int(42, 0, 99)
        True
    """
    if max_value < min_value:
        raise ValueError(f"max_value ({max_value}) must be >= min_value ({min_value})")

    x = math.sin(seed) * 10000
    frac = x - math.floor(x)
    value = math.floor(min_value + frac * (max_value - min_value + 1))
    # frac can round up to 1.0 for huge |x|
    return min(value, max_value)


def seeded_shuffle(items: Sequence[T], seed: float) -> list[T]:
    """Return a Fisher-Yates shuffle of ``items`` driven by ``seed``."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = seeded_random_int(seed + i * 17, 0, i)
        result[i], result[j] = result[j], result[i]
    return result


__all__ = [
    "derive_seed",
    "seeded_random_int",
    "seeded_shuffle",
]

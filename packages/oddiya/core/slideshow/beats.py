"""Beat track - fixed beat timestamps that cue visual changes.

Provides the BeatTrack model plus the application's built-in track and
video constants.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

VIDEO_FPS = 30
VIDEO_WIDTH = 1920
VIDEO_HEIGHT = 1080

# Player length used for rendered plans; a bare composition defaults shorter.
DURATION_IN_FRAMES = 450
COMPOSITION_DURATION_IN_FRAMES = 300


class BeatTrack(BaseModel):
    """Ordered, non-decreasing beat timestamps in seconds.

    Attributes:
        times_s: Beat instants in seconds (each >= 0, non-decreasing).

    Example:
        >>> track = BeatTrack(times_s=(0.0, 0.5, 1.0))
        >>> track.start_frame(1, fps=30)
        15
    """

    model_config = ConfigDict(frozen=True)

    times_s: tuple[float, ...] = Field(default=(), description="Beat instants in seconds")

    @field_validator("times_s")
    @classmethod
    def validate_times(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        for i, t in enumerate(v):
            if t < 0:
                raise ValueError(f"Beat {i} is negative: {t}")
            if i > 0 and t < v[i - 1]:
                raise ValueError(f"Beat {i} ({t}s) precedes beat {i - 1} ({v[i - 1]}s)")
        return v

    @classmethod
    def from_seconds(cls, times: list[float] | tuple[float, ...]) -> BeatTrack:
        """Build a track from a plain sequence of seconds."""
        return cls(times_s=tuple(float(t) for t in times))

    def __len__(self) -> int:
        return len(self.times_s)

    def __getitem__(self, index: int) -> float:
        return self.times_s[index]

    def start_frame(self, index: int, fps: float) -> int:
        """Frame at which beat ``index`` fires.

        Args:
            index: Beat index (0-based).
            fps: Frames per second.

        Returns:
            ``floor(times_s[index] * fps)``.
        """
        return math.floor(self.times_s[index] * fps)

    def frames(self, fps: float) -> list[int]:
        """Start frames for every beat in the track."""
        return [math.floor(t * fps) for t in self.times_s]

    @property
    def duration_s(self) -> float:
        """Timestamp of the last beat (0.0 for an empty track)."""
        return self.times_s[-1] if self.times_s else 0.0


DEFAULT_BEAT_TIMES: tuple[float, ...] = (
    0.13,
    1.00, 1.20, 1.28, 1.40, 1.60,
    2.1,
    2.78, 3.25, 3.29, 3.50,
    4.1,
    5.10, 5.40, 5.70,
    6.12,
    7.00, 7.60, 7.9,
    8.30,
    8.70, 8.90, 9.60, 9.81, 10.00,
    10.50,
    11.08, 11.42, 11.90, 12.65,
    13.16,
    13.71,
    14.19,
    14.74,
    15.25,
    16.05,
)  # fmt: skip

DEFAULT_BEAT_TRACK = BeatTrack(times_s=DEFAULT_BEAT_TIMES)

# Accent beats of the default track that always show a single image.
DEFAULT_SINGLE_BEATS: frozenset[int] = frozenset({0, 6, 11, 15, 19, 25})


__all__ = [
    "COMPOSITION_DURATION_IN_FRAMES",
    "DEFAULT_BEAT_TIMES",
    "DEFAULT_BEAT_TRACK",
    "DEFAULT_SINGLE_BEATS",
    "DURATION_IN_FRAMES",
    "VIDEO_FPS",
    "VIDEO_HEIGHT",
    "VIDEO_WIDTH",
    "BeatTrack",
]

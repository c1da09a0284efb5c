"""Configuration models for Oddiya."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field

from oddiya.core.slideshow.arrangements import ArrangementBand, ArrangementTable
from oddiya.core.slideshow.beats import (
    DEFAULT_BEAT_TIMES,
    DEFAULT_SINGLE_BEATS,
    VIDEO_FPS,
    VIDEO_HEIGHT,
    VIDEO_WIDTH,
    BeatTrack,
)
from oddiya.core.slideshow.planner import PlannerSettings
from oddiya.core.slideshow.selection import DEFAULT_RECENT_WINDOW
from oddiya.core.slideshow.vocabulary import ArrangementPolicy, SelectionStrategy, StaggerMode


class ConfigBase(BaseModel):
    """Base class for Oddiya configuration files.

    Subclasses must implement default_path() to specify their default location.
    """

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    @classmethod
    def default_path(cls) -> Path:
        """Return the default config file path for this config type."""
        raise NotImplementedError(f"{cls.__name__} must implement default_path()")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        """Load config from path or use default path.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValidationError: If config is invalid
        """
        # AppConfig needs environment overrides
        if cls.__name__ == "AppConfig":
            from oddiya.core.config.loader import load_app_config

            return load_app_config(path)  # type: ignore[return-value]

        from oddiya.core.config.loader import load_config

        if path is None:
            path = cls.default_path()
        raw = load_config(path)
        return cls.model_validate(raw)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON log lines")
    filename: str | None = Field(default=None, description="Log file (stdout when None)")


class SlideshowConfig(BaseModel):
    """Slideshow planner configuration.

    ``None`` for ``beat_times``, ``arrangement_table`` or ``single_beats``
    selects the built-in values.
    """

    model_config = ConfigDict(extra="forbid")

    fps: float = Field(default=VIDEO_FPS, gt=0.0, description="Frames per second")
    width: int = Field(default=VIDEO_WIDTH, gt=0, description="Frame width in pixels")
    height: int = Field(default=VIDEO_HEIGHT, gt=0, description="Frame height in pixels")

    beat_times: list[float] | None = Field(
        default=None, description="Beat timestamps in seconds (built-in track when None)"
    )

    policy: ArrangementPolicy = Field(
        default=ArrangementPolicy.WEIGHTED, description="Arrangement decision policy"
    )
    stagger_mode: StaggerMode = Field(
        default=StaggerMode.GROUP, description="Start-frame policy inside a group"
    )
    selection_strategy: SelectionStrategy = Field(
        default=SelectionStrategy.UNIFORM, description="Image selection strategy"
    )
    recent_window: int = Field(
        default=DEFAULT_RECENT_WINDOW, ge=1, le=10, description="Recently-used window size"
    )

    arrangement_table: list[ArrangementBand] | None = Field(
        default=None, description="Weighted arrangement bands (built-in table when None)"
    )
    single_beats: list[int] | None = Field(
        default=None, description="Forced single-image beats for the alternating policy"
    )

    def to_settings(self) -> PlannerSettings:
        """Build validated planner settings."""
        data: dict = {
            "fps": self.fps,
            "width": self.width,
            "height": self.height,
            "beat_track": BeatTrack.from_seconds(
                self.beat_times if self.beat_times is not None else DEFAULT_BEAT_TIMES
            ),
            "policy": self.policy,
            "stagger_mode": self.stagger_mode,
            "selection_strategy": self.selection_strategy,
            "recent_window": self.recent_window,
            "single_beats": frozenset(
                self.single_beats if self.single_beats is not None else DEFAULT_SINGLE_BEATS
            ),
        }
        if self.arrangement_table is not None:
            data["arrangement_table"] = ArrangementTable(bands=tuple(self.arrangement_table))
        return PlannerSettings.model_validate(data)


class AppConfig(ConfigBase):
    """Application-level configuration (shared across jobs)."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    slideshow: SlideshowConfig = Field(default_factory=SlideshowConfig)

    @classmethod
    def default_path(cls) -> Path:
        return Path("config.json")


class JobConfig(ConfigBase):
    """One slideshow job: which photos, for which trip, written where.

    Attributes:
        images_path: JSON file with the photo list (relative to the job file).
        session_id: Trip/session id used for seed diversification.
        seed: Fixed seed; a fresh one is derived when None.
        title: Overlay title passed through to the renderer.
        music: Background audio reference passed through to the renderer.
        output_path: Where to write the plan JSON.
    """

    images_path: str = Field(..., min_length=1)
    session_id: str | None = None
    seed: float | None = None
    title: str = ""
    music: str | None = None
    output_path: str = "plan.json"

    @classmethod
    def default_path(cls) -> Path:
        return Path("job_config.json")


__all__ = [
    "AppConfig",
    "ConfigBase",
    "JobConfig",
    "LoggingConfig",
    "SlideshowConfig",
]

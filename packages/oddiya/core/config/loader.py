"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from oddiya.core.config.models import AppConfig, JobConfig
from oddiya.core.slideshow.models import Image
from oddiya.core.utils.json import read_json_any
from oddiya.core.utils.logging import configure_logging as _configure_logging

logger = logging.getLogger(__name__)

# Default app config path (can be overridden)
_DEFAULT_APP_CONFIG_PATH = Path("config.json")
_app_config_cache: AppConfig | None = None

LOG_LEVEL_ENV = "ODDIYA_LOG_LEVEL"


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("config.json")
        'json'
        >>> detect_format("config.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def _load_raw(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)
    if fmt == "json":
        try:
            return read_json_any(path)
        except ValueError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Supports both JSON and YAML formats, detected from the extension.

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)
    content = _load_raw(path)
    # safe_load returns None for empty files
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ValueError(f"Expected a mapping in {path}, got {type(content).__name__}")
    return content


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    Missing files yield the defaults. ``ODDIYA_LOG_LEVEL`` overrides the
    configured log level.

    Raises:
        ValidationError: If config is invalid
    """
    global _app_config_cache

    if path is None:
        path = _DEFAULT_APP_CONFIG_PATH

    if _app_config_cache is not None and path == _DEFAULT_APP_CONFIG_PATH:
        return _app_config_cache

    if Path(path).exists():
        config = AppConfig.model_validate(load_config(path))
    else:
        logger.debug(f"No app config at {path}, using defaults")
        config = AppConfig()

    _apply_env_overrides(config)

    if path == _DEFAULT_APP_CONFIG_PATH:
        _app_config_cache = config

    return config


def clear_app_config_cache() -> None:
    """Forget the cached default app config."""
    global _app_config_cache
    _app_config_cache = None


def _apply_env_overrides(config: AppConfig) -> None:
    level = os.getenv(LOG_LEVEL_ENV)
    if level:
        logger.debug(f"Loaded {LOG_LEVEL_ENV} from environment")
        config.logging = config.logging.model_validate(
            {**config.logging.model_dump(), "level": level.upper()}
        )


def configure_logging(config: AppConfig | None = None) -> None:
    """Configure Python logging from app config."""
    if config is None:
        config = load_app_config()

    _configure_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )


def load_job_config(path: str | Path) -> JobConfig:
    """Load and validate a job configuration (JSON or YAML).

    Raises:
        ValidationError: If config is invalid
    """
    return JobConfig.model_validate(load_config(path))


def _image_from_entry(item: Any) -> Image:
    """Build an Image from one photo entry.

    Entries that carry pixel ``width`` and ``height`` but no explicit
    orientation get their orientation and aspect ratio from the size.
    """
    if (
        isinstance(item, dict)
        and "orientation" not in item
        and isinstance(item.get("width"), (int, float))
        and isinstance(item.get("height"), (int, float))
    ):
        extra = {key: item[key] for key in ("id", "name", "timestamp") if key in item}
        return Image.from_dimensions(
            item.get("url", ""), float(item["width"]), float(item["height"]), **extra
        )
    return Image.model_validate(item)


def load_images(path: str | Path) -> list[Image]:
    """Load a photo list.

    Accepts either a JSON/YAML list of photo objects or a mapping with
    an ``images`` (or ``photos``) list, as returned by the photo API.
    Entries with pixel ``width``/``height`` and no orientation are
    classified from their size.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file holds neither shape
        ValidationError: If a photo entry is invalid
    """
    path = Path(path)
    raw = _load_raw(path)
    if isinstance(raw, dict):
        raw = raw.get("images", raw.get("photos"))
    if not isinstance(raw, list):
        raise ValueError(f"Expected a list of images in {path}")
    images = [_image_from_entry(item) for item in raw]
    logger.debug(f"Loaded {len(images)} images from {path}")
    return images


def resolve_job_path(job_config_path: str | Path, target: str | Path) -> Path:
    """Resolve a path from a job file relative to the job file's directory."""
    target = Path(target)
    if target.is_absolute():
        return target
    return Path(job_config_path).parent / target


__all__ = [
    "clear_app_config_cache",
    "configure_logging",
    "detect_format",
    "load_app_config",
    "load_config",
    "load_images",
    "load_job_config",
    "resolve_job_path",
]

"""Configuration management for Oddiya."""

from oddiya.core.config.loader import (
    clear_app_config_cache,
    configure_logging,
    load_app_config,
    load_config,
    load_images,
    load_job_config,
    resolve_job_path,
)
from oddiya.core.config.models import (
    AppConfig,
    JobConfig,
    LoggingConfig,
    SlideshowConfig,
)

__all__ = [
    # Loaders
    "load_config",
    "load_app_config",
    "load_job_config",
    "load_images",
    "resolve_job_path",
    "clear_app_config_cache",
    "configure_logging",
    # Models
    "AppConfig",
    "JobConfig",
    "LoggingConfig",
    "SlideshowConfig",
]

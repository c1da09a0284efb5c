"""Shared utilities for Oddiya."""

from oddiya.core.utils.json import dumps_json, read_json, read_json_any, write_json
from oddiya.core.utils.logging import configure_logging, get_logger, log_performance

__all__ = [
    "configure_logging",
    "dumps_json",
    "get_logger",
    "log_performance",
    "read_json",
    "read_json_any",
    "write_json",
]

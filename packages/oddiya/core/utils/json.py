"""JSON utilities with numpy, Path and pydantic support."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import numpy as np
from pydantic import BaseModel

logger = logging.getLogger(__name__)


def _json_default(obj: Any) -> Any:
    """JSON serializer for types not supported by default.

    Handles:
    - pydantic models -> dict (JSON mode)
    - pathlib.Path -> str
    - numpy arrays -> list
    - numpy scalars -> Python scalars
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, Path):
        return str(obj)

    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)

    return str(obj)


def dumps_json(obj: Any) -> str:
    """Serialize ``obj`` with pretty formatting."""
    return json.dumps(obj, indent=2, ensure_ascii=False, default=_json_default)


def write_json(path: str | Path, obj: Any) -> None:
    """Write object to JSON file with pretty formatting.

    Args:
        path: Output file path (parent directories are created).
        obj: Object to serialize.
    """
    path_obj = Path(path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)
    path_obj.write_text(dumps_json(obj), encoding="utf-8")
    logger.debug(f"Wrote {path_obj}")


def read_json_any(path: str | Path) -> Any:
    """Read and parse a JSON file of any top-level type."""
    return json.loads(Path(path).read_text(encoding="utf-8"))


def read_json(path: str | Path) -> dict[str, Any]:
    """Read and parse a JSON file holding an object.

    Args:
        path: Input file path

    Returns:
        Parsed JSON as dictionary

    Raises:
        ValueError: If the top-level value is not an object.
    """
    data = read_json_any(path)
    if not isinstance(data, dict):
        raise ValueError(f"Expected JSON object, got {type(data).__name__}")
    return data


__all__ = [
    "dumps_json",
    "read_json",
    "read_json_any",
    "write_json",
]

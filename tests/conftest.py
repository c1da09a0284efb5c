"""Shared pytest fixtures for oddiya tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from oddiya.core.slideshow.arrangements import ArrangementBand, ArrangementTable
from oddiya.core.slideshow.beats import BeatTrack
from oddiya.core.slideshow.models import Image
from oddiya.core.slideshow.planner import PlannerSettings
from oddiya.core.slideshow.vocabulary import ArrangementKind, Orientation

# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def isolated_logging():
    """Restore root logger handlers and level after a test reconfigures logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


# ============================================================================
# Image Pool Fixtures
# ============================================================================


def _make_images(
    count: int,
    orientation: Orientation = Orientation.LANDSCAPE,
    prefix: str = "photo",
) -> list[Image]:
    """Create ``count`` images with distinct URLs."""
    return [
        Image(url=f"https://cdn.example.com/{prefix}_{i}.jpg", orientation=orientation)
        for i in range(count)
    ]


@pytest.fixture
def landscape_pool() -> list[Image]:
    """Four landscape photos."""
    return _make_images(4)


@pytest.fixture
def portrait_pool() -> list[Image]:
    """Four portrait photos."""
    return _make_images(4, Orientation.PORTRAIT, prefix="tall")


@pytest.fixture
def mixed_pool() -> list[Image]:
    """Twelve photos alternating landscape / portrait."""
    return [
        Image(
            url=f"https://cdn.example.com/mixed_{i}.jpg",
            orientation=Orientation.LANDSCAPE if i % 2 == 0 else Orientation.PORTRAIT,
        )
        for i in range(12)
    ]


# ============================================================================
# Timing Fixtures
# ============================================================================


@pytest.fixture
def half_second_track() -> BeatTrack:
    """Four beats, half a second apart (frames 0/15/30/45 at 30 fps)."""
    return BeatTrack.from_seconds([0.0, 0.5, 1.0, 1.5])


@pytest.fixture
def long_track() -> BeatTrack:
    """Twenty evenly spaced beats."""
    return BeatTrack.from_seconds([i * 0.4 for i in range(20)])


# ============================================================================
# Planner Fixtures
# ============================================================================


def _only_table(
    kind: ArrangementKind,
    prefers: Orientation | None = None,
) -> ArrangementTable:
    """Table that always yields ``kind``."""
    return ArrangementTable(bands=(ArrangementBand(upper=99, kind=kind, prefers=prefers),))


@pytest.fixture
def grid_2x2_settings() -> PlannerSettings:
    """Settings whose every group is a landscape-preferring 2x2 grid."""
    return PlannerSettings(
        arrangement_table=_only_table(ArrangementKind.GRID_2X2, Orientation.LANDSCAPE)
    )


@pytest.fixture
def image_factory():
    """Factory fixture building image pools."""
    return _make_images


@pytest.fixture
def table_factory():
    """Factory fixture building single-kind arrangement tables."""
    return _only_table

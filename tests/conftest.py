"""Shared pytest fixtures for tests."""

import pytest

from cascade_layout.constants import (
    HINT_THRESHOLD_ENV,
    MAX_APPS_ENV,
    MIN_VISIBLE_AREA_ENV,
    TARGET_COVERAGE_ENV,
    Archetype,
    Role,
)
from cascade_layout.models import Rect, ScreenSize, WindowPlacement


@pytest.fixture
def screen():
    """Typical laptop display."""
    return ScreenSize(1440, 900)


@pytest.fixture
def small_screen():
    """Too narrow for every archetype minimum at once."""
    return ScreenSize(800, 600)


@pytest.fixture
def coding_apps():
    return ["Cursor", "Terminal", "Arc"]


@pytest.fixture
def placement():
    """Factory for hand-built WindowPlacement values."""

    def _make(app, x, y, w, h, layer, role=Role.CORNER, focused=False, **kwargs):
        return WindowPlacement(
            app=app,
            rect=Rect(x, y, w, h),
            layer=layer,
            role=role,
            focused=focused,
            archetype=kwargs.pop("archetype", Archetype.UNKNOWN),
            **kwargs,
        )

    return _make


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep CASCADE_LAYOUT_* settings from the developer shell out of tests."""
    for var in (MAX_APPS_ENV, TARGET_COVERAGE_ENV, MIN_VISIBLE_AREA_ENV, HINT_THRESHOLD_ENV):
        monkeypatch.delenv(var, raising=False)

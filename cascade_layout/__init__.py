"""
cascade_layout
--------------

Contextual cascade layout engine: given running app names, a free-text
intent and a screen size, decide each window's rectangle, stacking layer
and which one gets focus.

    >>> from cascade_layout import compute_layout, ScreenSize
    >>> result = compute_layout(["Cursor", "Terminal", "Arc"], "i want to code",
    ...                         ScreenSize(1440, 900))
    >>> result.primary.app
    'Cursor'
"""

from cascade_layout.config import EngineConfig
from cascade_layout.focus import EmptyInputError
from cascade_layout.layout import compute_layout
from cascade_layout.models import (
    LayoutResult,
    ManualOverride,
    PreferenceHint,
    Rect,
    RunningApp,
    ScreenSize,
    WindowPlacement,
)

__all__ = [
    "EmptyInputError",
    "EngineConfig",
    "LayoutResult",
    "ManualOverride",
    "PreferenceHint",
    "Rect",
    "RunningApp",
    "ScreenSize",
    "WindowPlacement",
    "compute_layout",
]

"""
cascade_layout.models
---------------------

Value types that flow between the pipeline stages.

Design
~~~~~~
- Engine-internal results (``Rect``, ``WindowPlacement``, ``LayoutResult`` …)
  are frozen, slotted dataclasses: every stage returns new values and nothing
  is mutated after construction.
- Data supplied by collaborators across the library boundary (running apps,
  manual overrides, preference hints) is validated with pydantic.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import Archetype, ContextCategory, PreferredSide, Role

# --------------------------------------------------------------------------- #
# Geometry primitives                                                         #
# --------------------------------------------------------------------------- #

_SCREEN_RE = re.compile(r"^\s*(\d+)\s*[xX×]\s*(\d+)\s*$")


@dataclass(frozen=True, slots=True)
class ScreenSize:
    """Screen dimensions in the positioning collaborator's units (pixels)."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Screen size must be positive, got {self.width}x{self.height}")

    @classmethod
    def parse(cls, raw: str) -> "ScreenSize":
        """Parse ``"1440x900"`` style strings."""
        match = _SCREEN_RE.match(raw)
        if not match:
            raise ValueError(f"Invalid screen size '{raw}' (expected WIDTHxHEIGHT)")
        return cls(int(match.group(1)), int(match.group(2)))

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned rectangle expressed as fractions of the screen."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)

    def intersection(self, other: "Rect") -> Optional["Rect"]:
        """Return the overlapping rectangle, or None when the two are disjoint."""
        left = max(self.x, other.x)
        top = max(self.y, other.y)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        if right <= left or bottom <= top:
            return None
        return Rect(left, top, right - left, bottom - top)

    def within_screen(self, epsilon: float = 1e-6) -> bool:
        return (
            self.x >= -epsilon
            and self.y >= -epsilon
            and self.width > 0
            and self.height > 0
            and self.right <= 1.0 + epsilon
            and self.bottom <= 1.0 + epsilon
        )

    def moved_to(self, x: float, y: float) -> "Rect":
        return Rect(x, y, self.width, self.height)

    def mirrored(self) -> "Rect":
        """Reflect horizontally across the vertical centre line of the screen."""
        return Rect(1.0 - self.right, self.y, self.width, self.height)

    def to_pixels(self, screen: ScreenSize) -> tuple[int, int, int, int]:
        """Denormalise to ``(left, top, width, height)`` in screen units."""
        left = round(self.x * screen.width)
        top = round(self.y * screen.height)
        right = round(self.right * screen.width)
        bottom = round(self.bottom * screen.height)
        return left, top, max(1, right - left), max(1, bottom - top)

    def rounded(self, digits: int = 6) -> "Rect":
        return Rect(
            round(self.x, digits),
            round(self.y, digits),
            round(self.width, digits),
            round(self.height, digits),
        )


# --------------------------------------------------------------------------- #
# Pipeline values                                                             #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class AppDescriptor:
    """An application name together with its classified archetype."""

    name: str
    archetype: Archetype


@dataclass(frozen=True, slots=True)
class RoleAssignment:
    app: str
    role: Role


@dataclass(frozen=True, slots=True)
class WindowPlacement:
    """Where one app's window goes; the externally visible result unit."""

    app: str
    rect: Rect
    layer: int  # 0 = back … N-1 = front
    role: Role
    focused: bool = False
    archetype: Archetype = Archetype.UNKNOWN
    relaxed: tuple[str, ...] = ()  # constraint tags the generator had to bend
    overridden: bool = False  # rect supplied verbatim by a manual override

    def to_dict(self) -> dict:
        return {
            "app": self.app,
            "rect": {
                "x": self.rect.x,
                "y": self.rect.y,
                "width": self.rect.width,
                "height": self.rect.height,
            },
            "layer": self.layer,
            "role": self.role.value,
            "focused": self.focused,
            "archetype": self.archetype.value,
            **({"relaxed": list(self.relaxed)} if self.relaxed else {}),
            **({"overridden": True} if self.overridden else {}),
        }


@dataclass(frozen=True, slots=True)
class Diagnostics:
    """Soft-failure report attached to every layout."""

    coverage_achieved: float
    target_coverage: float
    degraded: bool = False
    context: ContextCategory = ContextCategory.GENERAL
    hidden: dict[str, float] = field(default_factory=dict)
    relaxed: dict[str, tuple[str, ...]] = field(default_factory=dict)
    invalid_overrides: dict[str, str] = field(default_factory=dict)

    @property
    def coverage_shortfall(self) -> float:
        return max(0.0, self.target_coverage - self.coverage_achieved)

    def to_dict(self) -> dict:
        return {
            "coverageAchieved": self.coverage_achieved,
            "targetCoverage": self.target_coverage,
            "coverageShortfall": self.coverage_shortfall,
            "degraded": self.degraded,
            "context": self.context.value,
            "hidden": dict(self.hidden),
            "relaxed": {app: list(tags) for app, tags in self.relaxed.items()},
            "invalidOverrides": dict(self.invalid_overrides),
        }


@dataclass(frozen=True, slots=True)
class LayoutResult:
    """Ordered placements (one per selected app) plus diagnostics."""

    placements: tuple[WindowPlacement, ...]
    diagnostics: Diagnostics

    @property
    def primary(self) -> WindowPlacement:
        return next(p for p in self.placements if p.focused)

    def placement_for(self, app: str) -> Optional[WindowPlacement]:
        return next((p for p in self.placements if p.app == app), None)

    @property
    def apps(self) -> list[str]:
        return [p.app for p in self.placements]

    def to_dict(self) -> dict:
        return {
            "placements": [p.to_dict() for p in self.placements],
            "diagnostics": self.diagnostics.to_dict(),
        }


# --------------------------------------------------------------------------- #
# Boundary payloads (validated)                                               #
# --------------------------------------------------------------------------- #


class RunningApp(BaseModel):
    """One entry from the window enumeration service."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    name: str = Field(min_length=1)
    is_minimized: bool = False


class ManualOverride(BaseModel):
    """Caller-pinned geometry for one app.

    Field types are validated here and non-finite numbers are rejected.
    Screen bounds are checked by the pipeline, which reports an
    out-of-bounds override as a diagnostic.
    """

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True, allow_inf_nan=False)

    app: str = Field(min_length=1)
    x: float
    y: float
    width: float
    height: float
    layer: Optional[int] = None
    focus: bool = False

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


class PreferenceHint(BaseModel):
    """Soft bias learned elsewhere for an (app, context) pair."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    app: str = Field(min_length=1)
    context: ContextCategory = ContextCategory.GENERAL
    preferred_side: PreferredSide = PreferredSide.CENTER
    preferred_width_fraction: Optional[float] = Field(default=None, gt=0.0, le=1.0)
    confidence: float = Field(ge=0.0, le=1.0)

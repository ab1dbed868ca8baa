"""
cascade_layout.coverage
-----------------------

Post-process generated placements towards full-screen coverage while
keeping every window clickable.

Two passes:

1. **Coverage** – while the union of all rectangles is below the target,
   grow windows (lowest layer first, primary last) by pushing free edges out
   to the screen edge, honouring hard caps.
2. **Visibility** – walking the stack from the top, any window whose
   unoccluded area is below the minimum is moved to another position its
   role allows; if none works it is reported in ``Diagnostics.hidden``.

Areas are exact: rectangles are decomposed on the grid of their own edge
coordinates, which is cheap for the handful of windows involved.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional, Sequence

from .constants import (
    CORNER_MAX_FRACTION,
    EPSILON,
    PEEK_OFFSET_RANGE,
    SIDE_COLUMN_CAP,
    TEXT_STREAM_FOCUSED_CAP,
    Archetype,
    ContextCategory,
    Role,
)
from .models import Diagnostics, LayoutResult, Rect, ScreenSize, WindowPlacement

_LOG = logging.getLogger(__name__)


# --------------------------------------------------------------------------- #
# Area helpers                                                                #
# --------------------------------------------------------------------------- #


def union_area(rects: Iterable[Rect]) -> float:
    """Area covered by the union of *rects*."""
    boxes = [r for r in rects if r.width > 0 and r.height > 0]
    if not boxes:
        return 0.0
    xs = sorted({r.x for r in boxes} | {r.right for r in boxes})
    ys = sorted({r.y for r in boxes} | {r.bottom for r in boxes})
    total = 0.0
    for x0, x1 in zip(xs, xs[1:]):
        cx = (x0 + x1) / 2.0
        column = [r for r in boxes if r.x <= cx < r.right]
        if not column:
            continue
        for y0, y1 in zip(ys, ys[1:]):
            cy = (y0 + y1) / 2.0
            if any(r.y <= cy < r.bottom for r in column):
                total += (x1 - x0) * (y1 - y0)
    return total


def screen_coverage(rects: Iterable[Rect]) -> float:
    """Union area clipped to the unit screen."""
    screen = Rect(0.0, 0.0, 1.0, 1.0)
    clipped = [c for c in (r.intersection(screen) for r in rects) if c is not None]
    return union_area(clipped)


def occluded_area(rect: Rect, occluders: Iterable[Rect]) -> float:
    overlaps = [o for o in (rect.intersection(r) for r in occluders) if o is not None]
    return union_area(overlaps)


def visible_area(rect: Rect, occluders: Iterable[Rect]) -> float:
    """Area of *rect* not hidden behind any of *occluders*."""
    return max(0.0, rect.area - occluded_area(rect, occluders))


# --------------------------------------------------------------------------- #
# Coverage pass                                                               #
# --------------------------------------------------------------------------- #


def _max_extent(placement: WindowPlacement) -> tuple[float, float]:
    """Hard (width, height) ceilings for growth."""
    if placement.role is Role.SIDE_COLUMN:
        return max(SIDE_COLUMN_CAP, placement.rect.width), 1.0
    if placement.archetype is Archetype.TEXT_STREAM and placement.role is Role.PRIMARY:
        return max(TEXT_STREAM_FOCUSED_CAP, placement.rect.width), 1.0
    if placement.role is Role.CORNER:
        return (
            max(CORNER_MAX_FRACTION, placement.rect.width),
            max(CORNER_MAX_FRACTION, placement.rect.height),
        )
    return 1.0, 1.0


_GROW_EDGES = ("right", "bottom", "left", "top")


def _grown(placement: WindowPlacement, edge: str) -> Optional[Rect]:
    """Push one edge of the placement out to the screen edge, within its caps."""
    r = placement.rect
    max_w, max_h = _max_extent(placement)
    if edge == "right":
        grown = Rect(r.x, r.y, min(1.0, r.x + max_w) - r.x, r.height)
    elif edge == "bottom":
        grown = Rect(r.x, r.y, r.width, min(1.0, r.y + max_h) - r.y)
    elif edge == "left":
        left = max(0.0, r.right - max_w)
        grown = Rect(left, r.y, r.right - left, r.height)
    else:
        top = max(0.0, r.bottom - max_h)
        grown = Rect(r.x, top, r.width, r.bottom - top)
    return grown if grown.area > r.area + EPSILON else None


def _coverage_pass(
    placements: dict[str, WindowPlacement], target: float
) -> float:
    coverage = screen_coverage(p.rect for p in placements.values())
    if coverage >= target - EPSILON:
        return coverage

    for name in sorted(placements, key=lambda n: placements[n].layer):
        if placements[name].overridden:
            continue
        for edge in _GROW_EDGES:
            candidate = _grown(placements[name], edge)
            if candidate is None:
                continue
            trial = [
                candidate if other == name else p.rect for other, p in placements.items()
            ]
            trial_coverage = screen_coverage(trial)
            if trial_coverage > coverage + EPSILON:
                _LOG.debug(
                    "Grew %s %s edge: coverage %.3f -> %.3f",
                    name,
                    edge,
                    coverage,
                    trial_coverage,
                )
                placements[name] = _replace_rect(placements[name], candidate)
                coverage = trial_coverage
                if coverage >= target - EPSILON:
                    return coverage
    return coverage


def _replace_rect(placement: WindowPlacement, rect: Rect) -> WindowPlacement:
    return WindowPlacement(
        app=placement.app,
        rect=rect,
        layer=placement.layer,
        role=placement.role,
        focused=placement.focused,
        archetype=placement.archetype,
        relaxed=placement.relaxed,
        overridden=placement.overridden,
    )


# --------------------------------------------------------------------------- #
# Visibility pass                                                             #
# --------------------------------------------------------------------------- #


def _position_candidates(
    placement: WindowPlacement, anchor: Optional[Rect]
) -> list[tuple[float, float]]:
    """Positions the placement's role may occupy, nearest to the current one first."""
    r = placement.rect
    max_x = max(0.0, 1.0 - r.width)
    max_y = max(0.0, 1.0 - r.height)
    if placement.role is Role.SIDE_COLUMN:
        spots = [(max_x, r.y), (0.0, r.y)]
    elif placement.role is Role.PEEK_LAYER:
        base = anchor.x if anchor is not None else 0.0
        off_min, off_max = PEEK_OFFSET_RANGE
        steps = 4
        xs = [base + off_min + (off_max - off_min) * i / steps for i in range(steps + 1)]
        xs += [r.x, max_x]
        spots = [(min(max(x, 0.0), max_x), y) for x in xs for y in (r.y, max_y, 0.0)]
    else:
        spots = [(max_x, max_y), (0.0, max_y), (max_x, 0.0), (0.0, 0.0), (r.x, r.y)]

    unique: list[tuple[float, float]] = []
    for spot in spots:
        if spot not in unique:
            unique.append(spot)
    unique.sort(key=lambda s: abs(s[0] - r.x) + abs(s[1] - r.y))
    return unique


def _visibility_pass(
    placements: dict[str, WindowPlacement],
    min_visible_area: float,
    exempt: frozenset[str],
) -> dict[str, float]:
    hidden: dict[str, float] = {}
    stack = sorted(placements, key=lambda n: -placements[n].layer)
    anchor = next((placements[n].rect for n in stack if placements[n].focused), None)

    for depth, name in enumerate(stack):
        current = placements[name]
        if current.focused or name in exempt:
            continue
        above = [placements[n].rect for n in stack[:depth]]
        visible = visible_area(current.rect, above)
        if visible >= min_visible_area - EPSILON:
            continue

        if current.overridden:
            hidden[name] = visible
            continue

        best_rect, best_visible, best_coverage = current.rect, visible, -1.0
        others = [p.rect for n, p in placements.items() if n != name]
        found = False
        for x, y in _position_candidates(current, anchor):
            candidate = current.rect.moved_to(x, y)
            candidate_visible = visible_area(candidate, above)
            if candidate_visible >= min_visible_area - EPSILON:
                candidate_coverage = screen_coverage(others + [candidate])
                if not found or candidate_coverage > best_coverage + EPSILON:
                    best_rect, best_visible, best_coverage = (
                        candidate,
                        candidate_visible,
                        candidate_coverage,
                    )
                    found = True
            elif not found and candidate_visible > best_visible + EPSILON:
                best_rect, best_visible = candidate, candidate_visible

        if best_rect != current.rect:
            _LOG.debug(
                "Nudged %s to (%.3f, %.3f): visible %.4f -> %.4f",
                name,
                best_rect.x,
                best_rect.y,
                visible,
                best_visible,
            )
            placements[name] = _replace_rect(current, best_rect)
        if not found:
            hidden[name] = best_visible
    return hidden


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #


def normalize(
    placements: Sequence[WindowPlacement],
    screen: ScreenSize,
    target_coverage: float,
    min_visible_area: float,
    *,
    exempt: Iterable[str] = (),
    context: ContextCategory = ContextCategory.GENERAL,
    invalid_overrides: Optional[Mapping[str, str]] = None,
    epsilon: float = EPSILON,
) -> LayoutResult:
    """
    Finalise *placements* into a :class:`LayoutResult`.

    *exempt* names (minimised windows) skip the visibility minimum.
    Overridden placements are never moved or resized.  Shortfalls are
    reported in the diagnostics, never raised.
    """
    by_name = {p.app: p for p in placements}
    _LOG.debug(
        "Normalising %d placements for %s (target %.2f, min visible %.4f)",
        len(by_name),
        screen,
        target_coverage,
        min_visible_area,
    )

    _coverage_pass(by_name, target_coverage)
    hidden = _visibility_pass(by_name, min_visible_area, frozenset(exempt))
    coverage = screen_coverage(p.rect for p in by_name.values())

    final = tuple(by_name[p.app] for p in placements)
    relaxed = {p.app: p.relaxed for p in final if p.relaxed}
    degraded = coverage < target_coverage - epsilon or bool(hidden) or bool(relaxed)
    diagnostics = Diagnostics(
        coverage_achieved=coverage,
        target_coverage=target_coverage,
        degraded=degraded,
        context=context,
        hidden=hidden,
        relaxed=relaxed,
        invalid_overrides=dict(invalid_overrides or {}),
    )
    return LayoutResult(placements=final, diagnostics=diagnostics)

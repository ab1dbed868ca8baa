"""
cascade_layout.geometry
-----------------------

Cascade geometry: give every selected app a role, a rectangle and a layer.

Roles
~~~~~
- primary      – the focused app, flush to the leading (left) edge.
- sideColumn   – first ``TEXT_STREAM`` app, full height on the trailing edge.
- peekLayer    – first ``CONTENT_CANVAS`` app, overlapping the primary by a
                 cascade offset so part of the primary stays reachable.
- corner       – everything else, parked in the least-occupied quadrant.

All fractions come from closed-form formulas over the app count and screen
size, so ``generate`` is deterministic.  When a rule cannot be honoured
(e.g. a readable side column wider than its cap on a small screen) the rule
is bent and the placement carries a ``relaxed`` tag that the normalizer
reports as degradation.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from .classifier import normalize_name
from .constants import (
    CORNER_DEFAULT_FRACTION,
    CORNER_MAX_FRACTION,
    CORNER_MIN_FRACTION,
    CORNER_MIN_PX,
    DEFAULT_HINT_THRESHOLD,
    EPSILON,
    PEEK_HEIGHT_RANGE,
    PEEK_MIN_PX,
    PEEK_MIN_WIDTH,
    PEEK_OFFSET_RANGE,
    PRIMARY_HEIGHT_RANGE,
    PRIMARY_SHRINK_PER_APP,
    PRIMARY_WIDTH_RANGE,
    ROLE_STACK_RANK,
    SIDE_COLUMN_CAP,
    SIDE_COLUMN_MIN_PX,
    SIDE_COLUMN_WIDTH_MANY,
    SIDE_COLUMN_WIDTHS,
    TEXT_STREAM_FOCUSED_CAP,
    Archetype,
    ContextCategory,
    PreferredSide,
    Role,
)
from .coverage import visible_area
from .focus import rank_for_focus
from .models import (
    AppDescriptor,
    PreferenceHint,
    Rect,
    RoleAssignment,
    ScreenSize,
    WindowPlacement,
)

_LOG = logging.getLogger(__name__)

# Relaxed-constraint tags.
RELAXED_SIDE_WIDTH = "side_column_min_width"
RELAXED_PEEK_OFFSET = "peek_offset_out_of_range"
RELAXED_PEEK_WIDTH = "peek_min_width"
RELAXED_CORNER_SIZE = "corner_min_size"
RELAXED_CLAMPED = "clamped_to_screen"


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# --------------------------------------------------------------------------- #
# Roles & stacking                                                            #
# --------------------------------------------------------------------------- #


def assign_roles(
    apps: Sequence[AppDescriptor], primary: str, context: ContextCategory
) -> list[RoleAssignment]:
    """
    Assign exactly one primary; the best-ranked text stream gets the side
    column, the best-ranked content canvas the peek layer, the rest corners.

    Returned in input order.
    """
    roles: dict[str, Role] = {}
    side_taken = peek_taken = False
    for app in rank_for_focus(apps, context):
        if app.name == primary:
            roles[app.name] = Role.PRIMARY
        elif app.archetype is Archetype.TEXT_STREAM and not side_taken:
            roles[app.name] = Role.SIDE_COLUMN
            side_taken = True
        elif app.archetype is Archetype.CONTENT_CANVAS and not peek_taken:
            roles[app.name] = Role.PEEK_LAYER
            peek_taken = True
        else:
            roles[app.name] = Role.CORNER

    if primary not in roles:
        raise ValueError(f"Primary app {primary!r} is not among the candidates")
    return [RoleAssignment(app=a.name, role=roles[a.name]) for a in apps]


def stacking_order(
    apps: Sequence[AppDescriptor],
    assignments: Sequence[RoleAssignment],
    context: ContextCategory,
) -> list[str]:
    """App names front-to-back: role rank first, focus priority second."""
    role_of = {a.app: a.role for a in assignments}
    ranked = [a.name for a in rank_for_focus(apps, context)]
    return sorted(ranked, key=lambda name: (ROLE_STACK_RANK[role_of[name]], ranked.index(name)))


# --------------------------------------------------------------------------- #
# Preference hints                                                            #
# --------------------------------------------------------------------------- #


def find_hint(
    app: str,
    context: ContextCategory,
    hints: Iterable[PreferenceHint],
    threshold: float,
) -> Optional[PreferenceHint]:
    """First hint for (*app*, *context*) whose confidence reaches *threshold*."""
    wanted = normalize_name(app)
    for hint in hints:
        if (
            hint.context is context
            and hint.confidence >= threshold
            and normalize_name(hint.app) == wanted
        ):
            return hint
    return None


def blend_width(formula: float, hint: Optional[PreferenceHint]) -> float:
    """Pull *formula* toward the hinted width in proportion to confidence."""
    if hint is None or hint.preferred_width_fraction is None:
        return formula
    c = hint.confidence
    return (1.0 - c) * formula + c * hint.preferred_width_fraction


# --------------------------------------------------------------------------- #
# Per-role sizing                                                             #
# --------------------------------------------------------------------------- #


def primary_rect(
    archetype: Archetype, app_count: int, hint: Optional[PreferenceHint] = None
) -> Rect:
    w_min, w_max = PRIMARY_WIDTH_RANGE
    h_min, h_max = PRIMARY_HEIGHT_RANGE
    shrink = PRIMARY_SHRINK_PER_APP * (app_count - 1)
    width = _clamp(blend_width(_clamp(w_max - shrink, w_min, w_max), hint), w_min, w_max)
    if archetype is Archetype.TEXT_STREAM:
        width = min(width, TEXT_STREAM_FOCUSED_CAP)
    height = _clamp(h_max - shrink, h_min, h_max)
    return Rect(0.0, 0.0, width, height)


def side_column_rect(
    app_count: int,
    screen: ScreenSize,
    hint: Optional[PreferenceHint] = None,
) -> tuple[Rect, tuple[str, ...]]:
    cap = SIDE_COLUMN_CAP
    readable = SIDE_COLUMN_MIN_PX / screen.width
    base = SIDE_COLUMN_WIDTHS.get(app_count, SIDE_COLUMN_WIDTH_MANY)
    width = blend_width(max(base, readable), hint)
    width = max(width, readable)
    relaxed: tuple[str, ...] = ()
    if readable > cap:
        relaxed = (RELAXED_SIDE_WIDTH,)
    width = min(width, cap)
    return Rect(1.0 - width, 0.0, width, 1.0), relaxed


def peek_min_width(screen: ScreenSize) -> float:
    return min(1.0, max(PEEK_MIN_WIDTH, PEEK_MIN_PX / screen.width))


def peek_rect(
    app_count: int,
    screen: ScreenSize,
    anchor: Rect,
    right_bound: float,
    hint: Optional[PreferenceHint] = None,
) -> tuple[Rect, tuple[str, ...]]:
    """
    Content canvas cascading off *anchor* (the primary).

    The left edge sits ``offset`` to the right of the primary's left edge and
    the window stretches to *right_bound* (the side column, or the screen
    edge), never narrower than the functional minimum.
    """
    off_min, off_max = PEEK_OFFSET_RANGE
    h_min, h_max = PEEK_HEIGHT_RANGE
    steps = max(0, app_count - 2)
    offset = _clamp(off_max - PRIMARY_SHRINK_PER_APP * steps, off_min, off_max)
    height = _clamp(h_max - PRIMARY_SHRINK_PER_APP * steps, h_min, h_max)

    min_width = peek_min_width(screen)
    x = anchor.x + offset
    width = max(min_width, blend_width(right_bound - x, hint))

    relaxed: list[str] = []
    if x + width > right_bound + EPSILON:
        x = right_bound - width
        if x < anchor.x + off_min - EPSILON:
            relaxed.append(RELAXED_PEEK_OFFSET)
    if x < 0.0:
        x = 0.0
    if width > 1.0 - x:
        width = 1.0 - x
        relaxed.append(RELAXED_PEEK_WIDTH)
    return Rect(x, 1.0 - height, width, height), tuple(relaxed)


def corner_size(
    archetype: Archetype, screen: ScreenSize, hint: Optional[PreferenceHint] = None
) -> tuple[float, float, tuple[str, ...]]:
    """Smallest clickable size for monitors, a mid-range square otherwise."""
    min_w = max(CORNER_MIN_FRACTION, CORNER_MIN_PX[0] / screen.width)
    min_h = max(CORNER_MIN_FRACTION, CORNER_MIN_PX[1] / screen.height)
    if archetype is Archetype.GLANCEABLE_MONITOR:
        width, height = min_w, min_h
    else:
        width = max(CORNER_DEFAULT_FRACTION, min_w)
        height = max(CORNER_DEFAULT_FRACTION, min_h)
    width = max(min_w, blend_width(width, hint))

    relaxed: tuple[str, ...] = ()
    if width > CORNER_MAX_FRACTION or height > CORNER_MAX_FRACTION:
        if min_w > CORNER_MAX_FRACTION or min_h > CORNER_MAX_FRACTION:
            relaxed = (RELAXED_CORNER_SIZE,)
        width = min(width, CORNER_MAX_FRACTION)
        height = min(height, CORNER_MAX_FRACTION)
    return width, height, relaxed


def corner_candidates(
    width: float, height: float, side: PreferredSide = PreferredSide.CENTER
) -> list[tuple[float, float]]:
    """Quadrant anchors in preference order."""
    bottom_right = (1.0 - width, 1.0 - height)
    bottom_left = (0.0, 1.0 - height)
    top_right = (1.0 - width, 0.0)
    top_left = (0.0, 0.0)
    if side is PreferredSide.LEFT:
        return [bottom_left, top_left, bottom_right, top_right]
    if side is PreferredSide.RIGHT:
        return [bottom_right, top_right, bottom_left, top_left]
    return [bottom_right, bottom_left, top_right, top_left]


def place_corner(
    width: float,
    height: float,
    occupied: Sequence[Rect],
    side: PreferredSide = PreferredSide.CENTER,
) -> Rect:
    """Pick the quadrant where the fewest already-placed windows cover us."""
    best: Optional[Rect] = None
    best_visible = -1.0
    for x, y in corner_candidates(width, height, side):
        candidate = Rect(x, y, width, height)
        visible = visible_area(candidate, occupied)
        if visible > best_visible + EPSILON:
            best, best_visible = candidate, visible
    assert best is not None
    return best


def _clamp_to_screen(rect: Rect) -> tuple[Rect, bool]:
    width = _clamp(rect.width, EPSILON, 1.0)
    height = _clamp(rect.height, EPSILON, 1.0)
    x = _clamp(rect.x, 0.0, 1.0 - width)
    y = _clamp(rect.y, 0.0, 1.0 - height)
    clamped = Rect(x, y, width, height)
    changed = any(
        abs(a - b) > EPSILON
        for a, b in zip(
            (rect.x, rect.y, rect.width, rect.height),
            (clamped.x, clamped.y, clamped.width, clamped.height),
        )
    )
    return clamped, changed


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #


def generate(
    apps: Sequence[AppDescriptor],
    primary: str,
    context: ContextCategory,
    screen: ScreenSize,
    hints: Iterable[PreferenceHint] = (),
    hint_threshold: float = DEFAULT_HINT_THRESHOLD,
) -> list[WindowPlacement]:
    """
    Produce one pre-normalisation :class:`WindowPlacement` per app.

    Placements come back in the order of *apps*; layers run from
    ``len(apps) - 1`` (the primary, focused) down to 0.
    """
    if not apps:
        return []

    hints = tuple(hints)
    count = len(apps)
    by_name = {a.name: a for a in apps}
    assignments = assign_roles(apps, primary, context)
    role_of = {a.app: a.role for a in assignments}
    order = stacking_order(apps, assignments, context)

    def hint_for(name: str) -> Optional[PreferenceHint]:
        return find_hint(name, context, hints, hint_threshold)

    rects: dict[str, Rect] = {}
    relaxed: dict[str, tuple[str, ...]] = {}

    primary_box = primary_rect(by_name[primary].archetype, count, hint_for(primary))
    rects[primary] = primary_box

    side_app = next((n for n in order if role_of[n] is Role.SIDE_COLUMN), None)
    right_bound = 1.0
    mirror = False
    if side_app is not None:
        side_hint = hint_for(side_app)
        rects[side_app], relaxed[side_app] = side_column_rect(count, screen, side_hint)
        right_bound = rects[side_app].x
        # A confident "left" column flips the whole arrangement at the end.
        mirror = side_hint is not None and side_hint.preferred_side is PreferredSide.LEFT
        # A wide primary must not run under the column.
        if primary_box.right > right_bound:
            width = max(right_bound, PRIMARY_WIDTH_RANGE[0])
            primary_box = Rect(0.0, 0.0, width, primary_box.height)
            rects[primary] = primary_box

    peek_app = next((n for n in order if role_of[n] is Role.PEEK_LAYER), None)
    if peek_app is not None:
        rects[peek_app], relaxed[peek_app] = peek_rect(
            count, screen, primary_box, right_bound, hint_for(peek_app)
        )

    for name in order:
        if role_of[name] is not Role.CORNER:
            continue
        hint = hint_for(name)
        width, height, relaxed[name] = corner_size(by_name[name].archetype, screen, hint)
        side = hint.preferred_side if hint is not None else PreferredSide.CENTER
        if mirror and side is not PreferredSide.CENTER:
            side = PreferredSide.RIGHT if side is PreferredSide.LEFT else PreferredSide.LEFT
        occupied = [rects[n] for n in order if n in rects]
        rects[name] = place_corner(width, height, occupied, side)

    layers = {name: count - 1 - pos for pos, name in enumerate(order)}
    placements: list[WindowPlacement] = []
    for app in apps:
        rect = rects[app.name].mirrored() if mirror else rects[app.name]
        rect, changed = _clamp_to_screen(rect)
        tags = relaxed.get(app.name, ())
        if changed:
            tags = tags + (RELAXED_CLAMPED,)
        placements.append(
            WindowPlacement(
                app=app.name,
                rect=rect,
                layer=layers[app.name],
                role=role_of[app.name],
                focused=app.name == primary,
                archetype=app.archetype,
                relaxed=tags,
            )
        )
        _LOG.debug(
            "%-20s %-10s layer=%d rect=(%.3f, %.3f, %.3f, %.3f)%s",
            app.name,
            role_of[app.name].value,
            layers[app.name],
            rect.x,
            rect.y,
            rect.width,
            rect.height,
            f" relaxed={list(tags)}" if tags else "",
        )
    return placements

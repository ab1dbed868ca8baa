"""
cascade_layout.layout
---------------------

Pipeline entry point.

``compute_layout`` wires the stages together:

    filter_apps → resolve_primary → generate → (manual overrides) → normalize

and returns a fresh :class:`LayoutResult`.  It holds no state between calls;
identical inputs always produce an identical result.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping, Optional, Sequence, Union

from .classifier import normalize_name
from .config import EngineConfig
from .coverage import normalize
from .focus import EmptyInputError, resolve_primary
from .geometry import generate
from .models import (
    LayoutResult,
    ManualOverride,
    PreferenceHint,
    RunningApp,
    ScreenSize,
    WindowPlacement,
)
from .relevance import derive_context, filter_apps

_LOG = logging.getLogger(__name__)

AppInput = Union[str, RunningApp, Mapping[str, object]]


# --------------------------------------------------------------------------- #
# Input helpers                                                               #
# --------------------------------------------------------------------------- #


def _running_apps(apps: Iterable[AppInput]) -> list[RunningApp]:
    running: list[RunningApp] = []
    for app in apps:
        if isinstance(app, RunningApp):
            running.append(app)
        elif isinstance(app, str):
            running.append(RunningApp(name=app))
        else:
            running.append(RunningApp.model_validate(app))
    return running


def validate_override(override: ManualOverride, epsilon: float) -> Optional[str]:
    """Return a reason string when *override* cannot be accepted, else None."""
    rect = override.rect
    if not all(math.isfinite(v) for v in (rect.x, rect.y, rect.width, rect.height)):
        return "non-finite coordinates"
    if rect.width <= 0 or rect.height <= 0:
        return f"non-positive size {rect.width:g}x{rect.height:g}"
    if rect.x < -epsilon or rect.y < -epsilon:
        return f"origin ({rect.x:g}, {rect.y:g}) is off screen"
    if rect.right > 1.0 + epsilon or rect.bottom > 1.0 + epsilon:
        return f"extends past the screen edge (right={rect.right:g}, bottom={rect.bottom:g})"
    if override.layer is not None and override.layer < 0:
        return f"negative layer {override.layer}"
    return None


def _match_overrides(
    overrides: Iterable[ManualOverride],
    selected: Sequence[str],
    epsilon: float,
) -> tuple[dict[str, ManualOverride], dict[str, str]]:
    """Split overrides into accepted (keyed by selected app name) and rejected."""
    by_key = {normalize_name(name): name for name in selected}
    accepted: dict[str, ManualOverride] = {}
    rejected: dict[str, str] = {}
    for override in overrides:
        name = by_key.get(normalize_name(override.app))
        if name is None:
            _LOG.debug("Override for %r ignored: app not in layout", override.app)
            continue
        reason = validate_override(override, epsilon)
        if reason is not None:
            _LOG.warning("Rejected override for %s: %s", name, reason)
            rejected[name] = reason
            continue
        accepted[name] = override
    return accepted, rejected


def apply_overrides(
    placements: Sequence[WindowPlacement], overrides: Mapping[str, ManualOverride]
) -> list[WindowPlacement]:
    """
    Replace rectangles with validated overrides and re-rank layers.

    Requested layers reorder the stack; layers are then renumbered densely so
    they stay unique, and the focused placement is always on top.
    """
    if not overrides:
        return list(placements)

    def stack_key(p: WindowPlacement) -> tuple[int, float, int]:
        override = overrides.get(p.app)
        requested = override.layer if override is not None else None
        layer = p.layer if requested is None else requested
        # focused first; otherwise requested layer, overrides winning ties
        return (0 if p.focused else 1, -float(layer), 0 if requested is not None else 1)

    ordered = sorted(placements, key=stack_key)
    top = len(ordered) - 1
    new_layer = {p.app: top - pos for pos, p in enumerate(ordered)}

    result: list[WindowPlacement] = []
    for p in placements:
        override = overrides.get(p.app)
        result.append(
            WindowPlacement(
                app=p.app,
                rect=override.rect if override is not None else p.rect,
                layer=new_layer[p.app],
                role=p.role,
                focused=p.focused,
                archetype=p.archetype,
                relaxed=() if override is not None else p.relaxed,
                overridden=override is not None,
            )
        )
    return result


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #


def compute_layout(
    apps: Sequence[AppInput],
    intent_text: str,
    screen: ScreenSize,
    *,
    config: Optional[EngineConfig] = None,
    overrides: Iterable[ManualOverride] = (),
    hints: Iterable[PreferenceHint] = (),
    excluded: Iterable[str] = (),
    focus: Optional[str] = None,
) -> LayoutResult:
    """
    Decide rectangles, stacking and focus for *apps* given *intent_text*.

    Raises
    ------
    EmptyInputError
        When *apps* is empty.
    """
    cfg = config or EngineConfig()
    running = _running_apps(apps)
    if not running:
        raise EmptyInputError("No running applications supplied")

    names = [a.name for a in running]
    minimized = {a.name for a in running if a.is_minimized}
    context = derive_context(intent_text)

    selected = filter_apps(names, intent_text, cfg.max_apps, excluded=excluded)
    selected_names = [d.name for d in selected]

    accepted, rejected = _match_overrides(overrides, selected_names, cfg.epsilon)
    requested = focus or next(
        (name for name, o in accepted.items() if o.focus), None
    )
    primary = resolve_primary(selected, context, requested=requested)

    placements = generate(
        selected,
        primary,
        context,
        screen,
        hints=hints,
        hint_threshold=cfg.hint_confidence_threshold,
    )
    placements = apply_overrides(placements, accepted)

    result = normalize(
        placements,
        screen,
        cfg.target_coverage,
        cfg.min_visible_area,
        exempt=minimized & set(selected_names),
        context=context,
        invalid_overrides=rejected,
        epsilon=cfg.epsilon,
    )

    diag = result.diagnostics
    _LOG.info(
        "Layout for %s on %s: primary=%s apps=%s coverage=%.3f",
        context.value,
        screen,
        primary,
        selected_names,
        diag.coverage_achieved,
    )
    if diag.degraded:
        _LOG.warning(
            "Layout degraded: coverage %.3f (target %.2f), hidden=%s, relaxed=%s",
            diag.coverage_achieved,
            diag.target_coverage,
            sorted(diag.hidden),
            sorted(diag.relaxed),
        )
    return result

"""
cascade_layout.focus
--------------------

Pick the single app that receives focus and the primary role.

Every candidate is scored with ``FOCUS_TABLE`` plus the shared name bonus;
the maximum wins and ties go to the earliest candidate.  The choice never
depends on "first app of archetype X in list order".
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .classifier import normalize_name
from .constants import FOCUS_TABLE, ContextCategory
from .models import AppDescriptor
from .relevance import name_bonus

_LOG = logging.getLogger(__name__)


class EmptyInputError(ValueError):
    """Raised when focus resolution is asked to choose among zero apps."""


def focus_priority(app: AppDescriptor, context: ContextCategory) -> int:
    return FOCUS_TABLE[(app.archetype, context)] + name_bonus(
        app.name, app.archetype, context
    )


def rank_for_focus(
    apps: Sequence[AppDescriptor], context: ContextCategory
) -> list[AppDescriptor]:
    """Candidates ordered by focus priority, input order breaking ties."""
    indexed = sorted(
        enumerate(apps), key=lambda pair: (-focus_priority(pair[1], context), pair[0])
    )
    return [app for _, app in indexed]


def resolve_primary(
    apps: Sequence[AppDescriptor],
    context: ContextCategory,
    requested: Optional[str] = None,
) -> str:
    """
    Return the name of the app that should be primary.

    *requested* (an explicit user choice) wins when it names one of the
    candidates, compared case-insensitively.

    Raises
    ------
    EmptyInputError
        If *apps* is empty.
    """
    if not apps:
        raise EmptyInputError("Cannot resolve a primary app from an empty list")

    if requested:
        wanted = normalize_name(requested)
        for app in apps:
            if normalize_name(app.name) == wanted:
                _LOG.debug("Primary %s chosen by explicit request", app.name)
                return app.name
        _LOG.debug("Requested focus %r is not among the candidates", requested)

    best = rank_for_focus(apps, context)[0]
    _LOG.debug(
        "Primary %s (focus priority %d in %s context)",
        best.name,
        focus_priority(best, context),
        context.value,
    )
    return best.name

"""
cascade_layout.relevance
------------------------

Context derivation and relevance filtering.

``filter_apps`` narrows the running-app list down to the handful of windows
worth arranging for the user's stated intent.  Scores come from the
``(archetype, context)`` tables in :mod:`cascade_layout.constants`; a finer
``priority_score`` separates apps that share an archetype.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from .classifier import classify, normalize_name
from .constants import (
    CONTEXT_KEYWORDS,
    NAME_BONUS_RULES,
    PRIORITY_TABLE,
    RELEVANCE_TABLE,
    RELEVANCE_THRESHOLDS,
    THRESHOLD_STEP,
    Archetype,
    ContextCategory,
)
from .models import AppDescriptor

_LOG = logging.getLogger(__name__)

_WS_RE = re.compile(r"\s+")


def normalize_intent(intent_text: str) -> str:
    return _WS_RE.sub(" ", (intent_text or "").strip().lower())


def derive_context(intent_text: str) -> ContextCategory:
    """Map free-text intent to a :class:`ContextCategory` by keyword containment."""
    intent = normalize_intent(intent_text)
    for category, keywords in CONTEXT_KEYWORDS.items():
        if any(keyword in intent for keyword in keywords):
            return category
    return ContextCategory.GENERAL


# --------------------------------------------------------------------------- #
# Scoring                                                                     #
# --------------------------------------------------------------------------- #


def name_bonus(name: str, archetype: Archetype, context: ContextCategory) -> int:
    """Bonus from the first name rule of *archetype* that matches *name*."""
    normalized = normalize_name(name)
    for rule_archetype, pattern, bonus, contexts in NAME_BONUS_RULES:
        if rule_archetype is not archetype or not pattern.search(normalized):
            continue
        if contexts is not None and context not in contexts:
            continue
        return bonus
    return 0


def relevance_score(app: AppDescriptor, context: ContextCategory) -> float:
    return RELEVANCE_TABLE[(app.archetype, context)]


def priority_score(app: AppDescriptor, context: ContextCategory) -> int:
    return PRIORITY_TABLE[(app.archetype, context)] + name_bonus(
        app.name, app.archetype, context
    )


# --------------------------------------------------------------------------- #
# Filtering                                                                   #
# --------------------------------------------------------------------------- #


def _dedupe(apps: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    unique: list[str] = []
    for app in apps:
        if app not in seen:
            seen.add(app)
            unique.append(app)
    return unique


def filter_apps(
    apps: Sequence[str],
    intent_text: str,
    max_count: int,
    excluded: Iterable[str] = (),
) -> list[AppDescriptor]:
    """
    Return the most relevant apps for *intent_text*, best first.

    Never returns an empty list for a nonempty input: when nothing clears the
    context threshold it is lowered step by step, and as a last resort the
    input order is used.  *excluded* names (case-insensitive) are dropped
    before scoring unless that would leave nothing at all.
    """
    if max_count < 1:
        raise ValueError("max_count must be at least 1")

    names = _dedupe(apps)
    if not names:
        return []

    context = derive_context(intent_text)
    banned = {normalize_name(e) for e in excluded}
    allowed = [n for n in names if normalize_name(n) not in banned]
    if not allowed:
        _LOG.warning("Every candidate app is excluded; ignoring exclusions")
        allowed = names

    descriptors = [AppDescriptor(name=n, archetype=classify(n)) for n in allowed]
    scored = [
        (relevance_score(d, context), priority_score(d, context), idx, d)
        for idx, d in enumerate(descriptors)
    ]
    # Descending on scores; the input index keeps equal scores stable.
    scored.sort(key=lambda item: (-item[0], -item[1], item[2]))

    for relevance, priority, _, desc in scored:
        _LOG.debug(
            "%-24s %-18s relevance=%.1f priority=%d",
            desc.name,
            desc.archetype.value,
            relevance,
            priority,
        )

    threshold = RELEVANCE_THRESHOLDS[context]
    kept: list[AppDescriptor] = []
    while threshold > 0:
        kept = [d for rel, _, _, d in scored if rel >= threshold]
        if kept:
            break
        threshold -= THRESHOLD_STEP
        _LOG.debug("No app cleared threshold, lowering to %.1f", threshold)

    if not kept:
        kept = descriptors

    selected = kept[:max_count]
    _LOG.debug(
        "Context %s selected %s", context.value, [d.name for d in selected]
    )
    return selected

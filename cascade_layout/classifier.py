"""
cascade_layout.classifier
-------------------------

Map an application name to its behavioural :class:`Archetype`.

Resolution order:
1. exact lookup in ``KNOWN_APPS`` (small curated table);
2. the ordered ``ARCHETYPE_PATTERNS`` rules over the normalised name;
3. ``Archetype.UNKNOWN``.

Pure and stateless: the same name always yields the same archetype.
"""

from __future__ import annotations

import logging
import re

from .constants import ARCHETYPE_PATTERNS, KNOWN_APPS, Archetype
from .models import AppDescriptor

_LOG = logging.getLogger(__name__)

_WS_RE = re.compile(r"\s+")
# Trailing version / build noise, e.g. "PyCharm 2024.1" or "Firefox (beta)".
_NOISE_RE = re.compile(r"(\s+\(.*\)|\s+v?\d+([.\-]\d+)*)$")


def normalize_name(name: str) -> str:
    """Lower-case, collapse whitespace and strip version suffixes."""
    cleaned = _WS_RE.sub(" ", name.strip().lower())
    return _NOISE_RE.sub("", cleaned)


def classify(name: str) -> Archetype:
    """Return the archetype for *name*; never raises."""
    normalized = normalize_name(name)
    if not normalized:
        return Archetype.UNKNOWN

    known = KNOWN_APPS.get(normalized)
    if known is not None:
        return known

    for pattern, archetype in ARCHETYPE_PATTERNS:
        if pattern.search(normalized):
            _LOG.debug(
                "Classified %r as %s via pattern %r", name, archetype.value, pattern.pattern
            )
            return archetype

    return Archetype.UNKNOWN


def describe(name: str) -> AppDescriptor:
    return AppDescriptor(name=name, archetype=classify(name))

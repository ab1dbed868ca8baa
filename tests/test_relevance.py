"""
Tests for context derivation and the relevance filter.
"""

import pytest

from cascade_layout.constants import Archetype, ContextCategory
from cascade_layout.models import AppDescriptor
from cascade_layout.relevance import (
    derive_context,
    filter_apps,
    name_bonus,
    priority_score,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "intent, expected",
    [
        ("i want to code", ContextCategory.CODING),
        ("Debugging the build", ContextCategory.CODING),
        ("Design a new logo", ContextCategory.DESIGN),
        ("research competitors", ContextCategory.RESEARCH),
        ("reply to email", ContextCategory.COMMUNICATION),
        ("just hanging out", ContextCategory.GENERAL),
        ("", ContextCategory.GENERAL),
    ],
)
def test_derive_context(intent, expected):
    assert derive_context(intent) is expected


def test_filter_drops_irrelevant_and_orders_by_score():
    """Monitors fall below the coding threshold; terminals outrank chat apps."""
    apps = ["Spotify", "Cursor", "Slack", "Arc", "Finder", "Terminal"]
    selected = filter_apps(apps, "i want to code", 4)
    assert [d.name for d in selected] == ["Cursor", "Terminal", "Slack", "Arc"]


def test_filter_respects_max_count():
    apps = ["Spotify", "Cursor", "Slack", "Arc", "Finder", "Terminal"]
    selected = filter_apps(apps, "i want to code", 2)
    assert [d.name for d in selected] == ["Cursor", "Terminal"]


def test_filter_lowers_threshold_instead_of_returning_nothing():
    selected = filter_apps(["Spotify", "Finder"], "i want to code", 4)
    assert [d.name for d in selected] == ["Spotify", "Finder"]


def test_filter_unknown_apps_still_selected():
    selected = filter_apps(["Foo", "Bar"], "write some code", 4)
    assert [d.name for d in selected] == ["Foo", "Bar"]
    assert all(d.archetype is Archetype.UNKNOWN for d in selected)


def test_filter_empty_input_returns_empty():
    assert filter_apps([], "i want to code", 4) == []


def test_filter_rejects_non_positive_max_count():
    with pytest.raises(ValueError):
        filter_apps(["Cursor"], "", 0)


def test_filter_deduplicates_names():
    selected = filter_apps(["Cursor", "Cursor", "Terminal"], "code", 4)
    assert [d.name for d in selected] == ["Cursor", "Terminal"]


def test_filter_excluded_names_case_insensitive():
    selected = filter_apps(["Cursor", "Xcode", "Terminal"], "code", 4, excluded=["XCODE"])
    assert "Xcode" not in [d.name for d in selected]


def test_filter_all_excluded_falls_back_to_input():
    selected = filter_apps(["Cursor"], "code", 4, excluded=["cursor"])
    assert [d.name for d in selected] == ["Cursor"]


def test_name_bonus_prefers_modern_editors():
    ctx = ContextCategory.CODING
    assert name_bonus("Cursor", Archetype.CODE_WORKSPACE, ctx) > name_bonus(
        "Xcode", Archetype.CODE_WORKSPACE, ctx
    )


def test_name_bonus_is_context_scoped():
    assert name_bonus("Slack", Archetype.TEXT_STREAM, ContextCategory.COMMUNICATION) > 0
    assert name_bonus("Slack", Archetype.TEXT_STREAM, ContextCategory.CODING) == 0


def test_priority_separates_same_archetype():
    ctx = ContextCategory.CODING
    terminal = AppDescriptor("Terminal", Archetype.TEXT_STREAM)
    slack = AppDescriptor("Slack", Archetype.TEXT_STREAM)
    assert priority_score(terminal, ctx) > priority_score(slack, ctx)

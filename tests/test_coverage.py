"""
Tests for area helpers and the coverage normalizer.
"""

import pytest

from cascade_layout.constants import SIDE_COLUMN_CAP, TEXT_STREAM_FOCUSED_CAP, Archetype, Role
from cascade_layout.coverage import normalize, screen_coverage, union_area, visible_area
from cascade_layout.models import Rect

pytestmark = pytest.mark.unit


def test_union_area_overlapping():
    rects = [Rect(0, 0, 0.5, 0.5), Rect(0.25, 0.25, 0.5, 0.5)]
    assert union_area(rects) == pytest.approx(0.4375)


def test_union_area_empty_and_degenerate():
    assert union_area([]) == 0.0
    assert union_area([Rect(0.1, 0.1, 0.0, 0.5)]) == 0.0


def test_screen_coverage_clips_offscreen_parts():
    assert screen_coverage([Rect(0.5, 0.5, 1.0, 1.0)]) == pytest.approx(0.25)


def test_visible_area():
    rect = Rect(0, 0, 0.5, 0.5)
    assert visible_area(rect, []) == pytest.approx(0.25)
    assert visible_area(rect, [Rect(0, 0, 0.25, 0.5)]) == pytest.approx(0.125)
    assert visible_area(rect, [Rect(0, 0, 1, 1)]) == pytest.approx(0.0)


def test_normalize_grows_to_target(screen, placement):
    p = placement("Solo", 0, 0, 0.5, 0.5, 0, role=Role.PRIMARY, focused=True)
    result = normalize([p], screen, 0.95, 0.01)
    assert result.diagnostics.coverage_achieved >= 0.95
    assert not result.diagnostics.degraded
    assert result.placements[0].rect.within_screen()


def test_normalize_never_moves_overridden(screen, placement):
    p = placement("Solo", 0, 0, 0.5, 0.5, 0, role=Role.PRIMARY, focused=True, overridden=True)
    result = normalize([p], screen, 0.95, 0.01)
    assert result.placements[0].rect == Rect(0, 0, 0.5, 0.5)
    assert result.diagnostics.degraded
    assert result.diagnostics.coverage_shortfall == pytest.approx(0.70)


def test_normalize_side_column_growth_capped(screen, placement):
    p = placement("Terminal", 0.7, 0, 0.3, 1.0, 0, role=Role.SIDE_COLUMN)
    result = normalize([p], screen, 0.95, 0.01)
    assert result.placements[0].rect.width <= SIDE_COLUMN_CAP + 1e-9
    assert result.diagnostics.degraded


def test_normalize_nudges_buried_corner(screen, placement):
    primary = placement("Main", 0, 0, 0.6, 1.0, 1, role=Role.PRIMARY, focused=True)
    corner = placement("Clock", 0, 0.7, 0.3, 0.3, 0)
    result = normalize([primary, corner], screen, 0.5, 0.01)
    moved = result.placement_for("Clock")
    assert moved.rect.x == pytest.approx(0.7)
    assert result.diagnostics.hidden == {}


def test_normalize_reports_hidden_window(screen, placement):
    primary = placement("Main", 0, 0, 1.0, 1.0, 1, role=Role.PRIMARY, focused=True)
    corner = placement("Clock", 0.7, 0.7, 0.3, 0.3, 0)
    result = normalize([primary, corner], screen, 0.95, 0.01)
    assert "Clock" in result.diagnostics.hidden
    assert result.diagnostics.degraded


def test_normalize_exempt_window_not_reported(screen, placement):
    primary = placement("Main", 0, 0, 1.0, 1.0, 1, role=Role.PRIMARY, focused=True)
    corner = placement("Clock", 0.7, 0.7, 0.3, 0.3, 0)
    result = normalize([primary, corner], screen, 0.95, 0.01, exempt={"Clock"})
    assert result.diagnostics.hidden == {}
    assert not result.diagnostics.degraded


def test_normalize_copies_relaxed_tags(screen, placement):
    p = placement("Solo", 0, 0, 1.0, 1.0, 0, role=Role.PRIMARY, focused=True, relaxed=("x",))
    result = normalize([p], screen, 0.95, 0.01)
    assert result.diagnostics.relaxed == {"Solo": ("x",)}
    assert result.diagnostics.degraded


def test_normalize_text_stream_primary_growth_capped(screen, placement):
    p = placement(
        "Slack", 0, 0, 0.55, 0.9, 0, role=Role.PRIMARY, focused=True,
        archetype=Archetype.TEXT_STREAM,
    )
    result = normalize([p], screen, 0.95, 0.01)
    rect = result.placements[0].rect
    assert rect.width <= TEXT_STREAM_FOCUSED_CAP + 1e-9
    assert rect.height == pytest.approx(1.0)
    assert result.diagnostics.degraded

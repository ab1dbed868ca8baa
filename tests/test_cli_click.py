"""
Tests for the Click CLI.
"""

import json

import pytest
from click.testing import CliRunner

from cascade_layout.cli_click import cli
from cascade_layout.constants import MAX_APPS_ENV

pytestmark = pytest.mark.unit


@pytest.fixture
def runner():
    """Create a Click test runner."""
    return CliRunner()


def test_cli_help(runner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "cascade-layout" in result.output
    assert "Commands:" in result.output


def test_classify_command(runner):
    result = runner.invoke(cli, ["classify", "Cursor", "Spotify", "Quux"])
    assert result.exit_code == 0
    assert "code_workspace" in result.output
    assert "glanceable_monitor" in result.output
    assert "unknown" in result.output


def test_context_command(runner):
    result = runner.invoke(cli, ["context", "i", "want", "to", "code"])
    assert result.exit_code == 0
    assert result.output.strip() == "coding"


def test_plan_table_output(runner):
    result = runner.invoke(
        cli, ["plan", "Cursor", "Terminal", "Arc", "--intent", "i want to code"]
    )
    assert result.exit_code == 0, result.output
    assert "Context: coding" in result.output
    assert "primary" in result.output
    assert "sideColumn" in result.output
    assert "Coverage:" in result.output
    assert "DEGRADED" not in result.output


def test_plan_json_output(runner):
    result = runner.invoke(
        cli,
        ["plan", "Cursor", "Terminal", "Arc", "-i", "i want to code", "-s", "1440x900", "-o", "json"],
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["screen"] == {"width": 1440, "height": 900}
    assert len(data["placements"]) == 3
    focused = [p for p in data["placements"] if p["focused"]]
    assert focused[0]["app"] == "Cursor"
    assert focused[0]["pixels"]["left"] == 0
    assert data["diagnostics"]["degraded"] is False


def test_plan_reports_degraded_layout(runner):
    result = runner.invoke(
        cli,
        ["plan", "Cursor", "Terminal", "Arc", "Xcode", "-i", "i want to code", "-s", "800x600"],
    )
    assert result.exit_code == 0, result.output
    assert "DEGRADED" in result.output
    assert "relaxed: Terminal" in result.output


def test_plan_max_apps_option(runner):
    result = runner.invoke(
        cli, ["plan", "Cursor", "Terminal", "Arc", "-i", "code", "-n", "1", "-o", "json"]
    )
    assert result.exit_code == 0, result.output
    assert [p["app"] for p in json.loads(result.output)["placements"]] == ["Cursor"]


def test_plan_max_apps_from_env(runner):
    result = runner.invoke(
        cli,
        ["plan", "Cursor", "Terminal", "Arc", "-i", "code", "-o", "json"],
        env={MAX_APPS_ENV: "2"},
    )
    assert result.exit_code == 0, result.output
    assert len(json.loads(result.output)["placements"]) == 2


def test_plan_invalid_max_apps(runner):
    result = runner.invoke(cli, ["plan", "Cursor", "-n", "0"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_plan_invalid_screen(runner):
    result = runner.invoke(cli, ["plan", "Cursor", "--screen", "huge"])
    assert result.exit_code == 2
    assert "Invalid screen size" in result.output


def test_plan_requires_apps(runner):
    result = runner.invoke(cli, ["plan"])
    assert result.exit_code == 2


def test_plan_with_override_and_hint_files(runner, tmp_path):
    overrides = tmp_path / "overrides.json"
    overrides.write_text(
        json.dumps([{"app": "Terminal", "x": 0.68, "y": 0, "width": 0.32, "height": 1}])
    )
    hints = tmp_path / "hints.json"
    hints.write_text(
        json.dumps({"app": "Arc", "context": "coding", "confidence": 0.2})
    )
    result = runner.invoke(
        cli,
        [
            "plan", "Cursor", "Terminal", "Arc",
            "-i", "i want to code",
            "--overrides", str(overrides),
            "--hints", str(hints),
            "-o", "json",
        ],
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    terminal = next(p for p in data["placements"] if p["app"] == "Terminal")
    assert terminal["overridden"] is True
    assert terminal["rect"]["x"] == pytest.approx(0.68)


def test_plan_unreadable_override_file(runner, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    result = runner.invoke(cli, ["plan", "Cursor", "--overrides", str(bad)])
    assert result.exit_code == 2
    assert "Cannot read" in result.output


def test_plan_invalid_hint_payload(runner, tmp_path):
    bad = tmp_path / "hints.json"
    bad.write_text(json.dumps([{"app": "Arc", "confidence": 3}]))
    result = runner.invoke(cli, ["plan", "Cursor", "--hints", str(bad)])
    assert result.exit_code == 2


def test_plan_rejects_nan_override(runner, tmp_path):
    bad = tmp_path / "overrides.json"
    bad.write_text('[{"app": "Arc", "x": NaN, "y": 0, "width": 0.5, "height": 0.5}]')
    result = runner.invoke(cli, ["plan", "Cursor", "Arc", "--overrides", str(bad)])
    assert result.exit_code == 2

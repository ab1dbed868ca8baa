"""
cascade_layout.cli_click
------------------------

Click command-line interface for inspecting layout decisions.

Commands
--------
plan     : Compute a layout for a set of apps and an intent
classify : Show the archetype of one or more app names
context  : Show the context category derived from an intent
"""

from __future__ import annotations

import json
import logging
from importlib import metadata
from pathlib import Path
from typing import Optional, Type, TypeVar

import click
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ValidationError

from cascade_layout.classifier import classify
from cascade_layout.config import EngineConfig
from cascade_layout.constants import DEFAULT_SCREEN
from cascade_layout.focus import EmptyInputError
from cascade_layout.models import (
    ManualOverride,
    PreferenceHint,
    RunningApp,
    ScreenSize,
)
from cascade_layout.relevance import derive_context

_LOG = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _version() -> str:
    try:
        return metadata.version("cascade-layout")
    except metadata.PackageNotFoundError:  # pragma: no cover - source checkout
        return "0.0.0"


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
@click.version_option(_version())
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """cascade-layout – decide where each app window should go."""
    _configure_logging(verbose)
    # Best-effort .env loading so CASCADE_LAYOUT_* settings are visible
    discovered = find_dotenv(usecwd=True)
    if discovered:
        load_dotenv(discovered)
        _LOG.debug("Loaded .env at startup: %s", discovered)
    ctx.ensure_object(dict)


# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #


def _screen_from_str(raw: str) -> ScreenSize:
    try:
        return ScreenSize.parse(raw)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--screen") from exc


def _load_models(path: Optional[Path], model: Type[_M], option: str) -> list[_M]:
    """Read a JSON list of objects from *path* and validate each as *model*."""
    if path is None:
        return []
    try:
        raw = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        raise click.BadParameter(f"Cannot read {path}: {exc}", param_hint=option) from exc
    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list):
        raise click.BadParameter("Expected a JSON list of objects", param_hint=option)
    try:
        return [model.model_validate(item) for item in raw]
    except ValidationError as exc:
        raise click.BadParameter(str(exc), param_hint=option) from exc


# --------------------------------------------------------------------------- #
# plan command                                                                #
# --------------------------------------------------------------------------- #


@cli.command("plan")
@click.argument("apps", nargs=-1, required=True)
@click.option("-i", "--intent", default="", help="Free-text statement of intent.")
@click.option(
    "-s",
    "--screen",
    default=f"{DEFAULT_SCREEN[0]}x{DEFAULT_SCREEN[1]}",
    show_default=True,
    help="Screen size as WIDTHxHEIGHT.",
)
@click.option("-n", "--max-apps", type=int, help="Cap on arranged apps (default from env).")
@click.option("-f", "--focus", type=str, help="App that must receive focus.")
@click.option("--minimized", multiple=True, help="App that is currently minimised.")
@click.option("-x", "--exclude", multiple=True, help="App never to arrange.")
@click.option(
    "--overrides",
    "overrides_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="JSON file with manual overrides.",
)
@click.option(
    "--hints",
    "hints_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="JSON file with preference hints.",
)
@click.option(
    "-o",
    "--output",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    show_default=True,
    help="Output format.",
)
def cmd_plan(
    apps: tuple[str, ...],
    intent: str,
    screen: str,
    max_apps: Optional[int],
    focus: Optional[str],
    minimized: tuple[str, ...],
    exclude: tuple[str, ...],
    overrides_path: Optional[Path],
    hints_path: Optional[Path],
    output: str,
) -> None:
    """Compute and print a layout for APPS."""
    from cascade_layout.layout import compute_layout

    screen_size = _screen_from_str(screen)
    try:
        config = EngineConfig.from_env()
        if max_apps is not None:
            config = EngineConfig.model_validate({**config.model_dump(), "max_apps": max_apps})
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc

    overrides = _load_models(overrides_path, ManualOverride, "--overrides")
    hints = _load_models(hints_path, PreferenceHint, "--hints")
    running = [RunningApp(name=a, is_minimized=a in minimized) for a in apps]

    try:
        result = compute_layout(
            running,
            intent,
            screen_size,
            config=config,
            overrides=overrides,
            hints=hints,
            excluded=exclude,
            focus=focus,
        )
    except EmptyInputError as exc:
        raise click.ClickException(str(exc)) from exc

    if output == "json":
        payload = result.to_dict()
        payload["screen"] = {"width": screen_size.width, "height": screen_size.height}
        for entry, placement in zip(payload["placements"], result.placements):
            left, top, width, height = placement.rect.to_pixels(screen_size)
            entry["pixels"] = {"left": left, "top": top, "width": width, "height": height}
        click.echo(json.dumps(payload, indent=2))
        return

    diag = result.diagnostics
    click.echo(f"Context: {diag.context.value}   Screen: {screen_size}")
    header = (
        f"{'App':24}  {'Role':10}  {'Layer':5}  {'Focus':5}  "
        f"{'x':>5} {'y':>5} {'w':>5} {'h':>5}  Pixels"
    )
    click.echo(header)
    click.echo("-" * len(header))
    for p in sorted(result.placements, key=lambda p: -p.layer):
        r = p.rect
        left, top, width, height = r.to_pixels(screen_size)
        click.echo(
            f"{p.app[:24]:24}  {p.role.value:10}  {p.layer:5}  {'*' if p.focused else '':5}  "
            f"{r.x:5.2f} {r.y:5.2f} {r.width:5.2f} {r.height:5.2f}  "
            f"{left},{top} {width}x{height}"
        )
    click.echo("")
    click.echo(
        f"Coverage: {diag.coverage_achieved:.1%} (target {diag.target_coverage:.0%})"
        f"{'  DEGRADED' if diag.degraded else ''}"
    )
    for app, visible in diag.hidden.items():
        click.echo(f"  hidden: {app} (visible {visible:.2%} of screen)")
    for app, tags in diag.relaxed.items():
        click.echo(f"  relaxed: {app}: {', '.join(tags)}")
    for app, reason in diag.invalid_overrides.items():
        click.echo(f"  invalid override: {app}: {reason}", err=True)


# --------------------------------------------------------------------------- #
# classify / context commands                                                 #
# --------------------------------------------------------------------------- #


@cli.command("classify")
@click.argument("names", nargs=-1, required=True)
def cmd_classify(names: tuple[str, ...]) -> None:
    """Print the archetype of each NAME."""
    for name in names:
        click.echo(f"{name:30}  {classify(name).value}")


@cli.command("context")
@click.argument("intent", nargs=-1, required=True)
def cmd_context(intent: tuple[str, ...]) -> None:
    """Print the context category for INTENT."""
    click.echo(derive_context(" ".join(intent)).value)


def main() -> None:  # pragma: no cover
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()

"""WOD notation commands."""

import json
from pathlib import Path

import click

from ..db import get_db_path
from ..errors import LiftTrackerError
from ..models.workout import ParsedWorkout, SpecialFormat, WodExercise
from ..services.workouts import WorkoutService
from ..wod import WodParser
from .base import async_command, echo_error, echo_success, echo_warning, ensure_initialized, load_context


@click.group()
def wod():
    """Parse and save workouts written in WOD notation."""


def _describe(exercise: WodExercise) -> str:
    if exercise.reps is not None:
        return f"{exercise.reps} reps"
    if exercise.scheme is not None:
        return f"{exercise.scheme.display} ({exercise.scheme.type.value})"
    if exercise.error:
        return f"{exercise.scheme_text} (invalid)"
    return ""


def _print_parsed(parsed: ParsedWorkout, matches: dict[int, str | None] | None) -> None:
    for block in parsed.blocks:
        click.echo(click.style(block.name or "(untitled)", bold=True))
        for entry in block.entries:
            if isinstance(entry, SpecialFormat):
                click.echo(f"  {entry.format}" + (f" {entry.description}" if entry.description else ""))
                exercises, indent = entry.exercises, "    "
            elif isinstance(entry, WodExercise):
                exercises, indent = [entry], "  "
            else:
                continue
            for exercise in exercises:
                line = f"{indent}{exercise.name}: {_describe(exercise)}"
                if matches is not None:
                    match = matches.get(exercise.line_number)
                    line += f"  -> {match}" if match else "  -> (no match)"
                click.echo(line)
        click.echo()


@wod.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--user", "user_id", type=int, help="Match exercise names against this user's catalog")
@click.option("--json", "as_json", is_flag=True, help="Print the parsed structure as JSON")
@click.pass_context
@async_command
async def parse(ctx, path: Path, user_id: int | None, as_json: bool):
    """Parse a WOD file and show its blocks, schemes and errors.

    Invalid schemes are reported per line; the rest of the file still parses.

    Example:
        lift-tracker wod parse monday.wod --user 1
    """
    parsed = WodParser().parse(path.read_text())

    if as_json:
        click.echo(json.dumps(parsed.to_dict(), indent=2))
        return

    matches = None
    if user_id is not None:
        ensure_initialized(ctx)
        context = await load_context(ctx, user_id)
        resolved = await WorkoutService(get_db_path()).resolve(parsed, context)
        matches = {item.line.line_number: item.display_name for item in resolved}

    click.echo()
    _print_parsed(parsed, matches)

    for issue in parsed.errors:
        echo_warning(f"Line {issue.line_number}: {issue.message}")


@wod.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--user", "user_id", type=int, required=True, help="Owner user ID")
@click.option("--name", "-n", help="Workout name (defaults to the file name)")
@click.pass_context
@async_command
async def save(ctx, path: Path, user_id: int, name: str | None):
    """Save a WOD file as a workout."""
    ensure_initialized(ctx)
    context = await load_context(ctx, user_id)
    service = WorkoutService(get_db_path())
    try:
        workout = await service.create(context, name or path.stem, path.read_text())
    except LiftTrackerError as e:
        echo_error(str(e))
        ctx.exit(1)

    echo_success(f"Saved workout '{workout.name}' with ID: {workout.id}")
    if workout.wod_parsed is not None:
        for issue in workout.wod_parsed.errors:
            echo_warning(f"Line {issue.line_number}: {issue.message}")

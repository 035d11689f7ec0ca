"""TSV import and export commands."""

from pathlib import Path

import click

from ..db import get_db_path
from ..errors import TsvImportError
from ..services.tsv_import import ImportResult, TsvImporter
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    load_context,
)


@click.group(name="import")
@click.pass_context
def import_data(ctx):
    """Import tab separated data.

    Available sources:
    - lift-logs: date, time, exercise, weight, reps, rounds[, notes]
    - exercises: title[, exercise type]
    """
    ensure_initialized(ctx)


def _report(result: ImportResult) -> None:
    for message in result.errors():
        echo_warning(message)
    if result.has_new_data:
        echo_success(result.summary())
    else:
        echo_info(result.summary())


@import_data.command(name="lift-logs")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--user", "user_id", type=int, required=True, help="User ID to import for")
@click.pass_context
@async_command
async def lift_logs(ctx, path: Path, user_id: int):
    """Import lift logs from a TSV file.

    Rows that already exist (same exercise, time and sets) are skipped,
    so importing the same file twice creates nothing the second time.

    Example:
        lift-tracker import lift-logs workouts.tsv --user 1
    """
    context = await load_context(ctx, user_id)
    importer = TsvImporter(get_db_path())
    try:
        result = await importer.import_lift_logs(path.read_text(), context)
    except TsvImportError as e:
        echo_error(str(e))
        ctx.exit(1)
    _report(result)


@import_data.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--user", "user_id", type=int, required=True, help="User ID to import for")
@click.pass_context
@async_command
async def exercises(ctx, path: Path, user_id: int):
    """Import the user's exercises from a TSV file.

    Example:
        lift-tracker import exercises exercises.tsv --user 1
    """
    context = await load_context(ctx, user_id)
    importer = TsvImporter(get_db_path())
    try:
        result = await importer.import_exercises(path.read_text(), context)
    except TsvImportError as e:
        echo_error(str(e))
        ctx.exit(1)
    _report(result)


@click.command(name="export")
@click.option("--user", "user_id", type=int, required=True, help="User ID to export")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
              help="Write to a file instead of stdout")
@click.pass_context
@async_command
async def export_data(ctx, user_id: int, output: Path | None):
    """Export a user's lift logs as TSV (the lift-logs import format)."""
    ensure_initialized(ctx)
    context = await load_context(ctx, user_id)
    text = await TsvImporter(get_db_path()).export_lift_logs(context)

    if output:
        output.write_text(text + "\n" if text else "")
        echo_success(f"Exported to {output}")
    else:
        click.echo(text)

"""Personal record commands."""

import aiosqlite
import click
import questionary

from ..db import ExerciseRepository, LiftLogRepository, PersonalRecordRepository, get_db_path
from ..errors import LiftTrackerError
from ..services.pr_detection import PRRecalculationService
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    format_table,
    load_context,
)


@click.group()
@click.pass_context
def prs(ctx):
    """Inspect and rebuild personal records."""
    ensure_initialized(ctx)


@prs.command(name="calculate-historical")
@click.option("--user", "user_id", type=int, help="Only process this user ID")
@click.option("--exercise", "exercise_id", type=int, help="Only process this exercise ID")
@click.option("--dry-run", is_flag=True, help="Show what would change without writing")
@click.option("--force", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
@async_command
async def calculate_historical(
    ctx, user_id: int | None, exercise_id: int | None, dry_run: bool, force: bool
):
    """Recalculate PR flags and records from all historical lift logs.

    Every (user, exercise) combination with lift logs is replayed in
    chronological order. Existing PR records for a combination are
    replaced, so running this twice gives the same result as once.

    Examples:

        lift-tracker prs calculate-historical --dry-run

        lift-tracker prs calculate-historical --user 1 --exercise 3 --force
    """
    db_path = get_db_path()
    log_repo = LiftLogRepository(db_path)
    exercise_repo = ExerciseRepository(db_path)

    combinations = await log_repo.distinct_combinations(user_id, exercise_id)
    if not combinations:
        echo_error("No lift logs found to process.")
        ctx.exit(1)

    user_count = len({user for user, _ in combinations})
    echo_info(
        f"Found {len(combinations)} user/exercise combination(s) across {user_count} user(s)."
    )
    if dry_run:
        echo_warning("Dry run: no changes will be written.")

    if not force and not dry_run:
        confirmed = await questionary.confirm(
            "Clear and recalculate PR records for these combinations?",
            default=False,
        ).ask_async()
        if not confirmed:
            echo_info("Cancelled.")
            return

    service = PRRecalculationService(db_path)
    rows = []
    failures = 0
    total_logs = 0
    total_prs = 0

    for combo_user, combo_exercise in combinations:
        exercise = await exercise_repo.get(combo_exercise, include_deleted=True)
        title = exercise.title if exercise else f"#{combo_exercise}"
        try:
            result = await service.recalculate(combo_user, combo_exercise, dry_run=dry_run)
        except (LiftTrackerError, aiosqlite.Error) as e:
            failures += 1
            echo_error(f"User {combo_user}, {title}: {e}")
            continue

        total_logs += result.logs_processed
        total_prs += result.prs
        rows.append([
            str(combo_user),
            title,
            str(result.logs_processed),
            str(result.prs),
            str(result.changed),
        ])

    if rows:
        click.echo()
        click.echo(format_table(["User", "Exercise", "Logs", "PRs", "Changed"], rows))
        click.echo()

    summary = f"Processed {total_logs} lift log(s), found {total_prs} PR(s)."
    if dry_run:
        summary += " Nothing was written."
    if failures:
        echo_error(f"{summary} {failures} combination(s) failed.")
        ctx.exit(1)
    echo_success(summary)


@prs.command(name="list")
@click.option("--user", "user_id", type=int, required=True, help="User ID")
@click.option("--exercise", "exercise_id", type=int, help="Only this exercise ID")
@click.pass_context
@async_command
async def list_prs(ctx, user_id: int, exercise_id: int | None):
    """List a user's personal records, newest first."""
    context = await load_context(ctx, user_id)
    db_path = get_db_path()
    records = await PersonalRecordRepository(db_path).list_for_user(context.user_id, exercise_id)

    if not records:
        echo_info("No personal records yet.")
        return

    exercise_repo = ExerciseRepository(db_path)
    titles: dict[int, str] = {}
    rows = []
    for record in records:
        if record.exercise_id not in titles:
            exercise = await exercise_repo.get(record.exercise_id, include_deleted=True)
            titles[record.exercise_id] = exercise.title if exercise else f"#{record.exercise_id}"
        previous = f"{record.previous_value:.1f}" if record.previous_value is not None else "-"
        rows.append([
            record.achieved_at.strftime("%Y-%m-%d") if record.achieved_at else "N/A",
            titles[record.exercise_id],
            f"{record.value:.1f}",
            previous,
            str(record.lift_log_id),
        ])

    click.echo()
    click.echo(format_table(["Date", "Exercise", "1RM", "Previous", "Log"], rows))

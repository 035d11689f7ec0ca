"""CLI entry point for lift-tracker."""

import click

from .commands import export_data, import_data, init, prs, serve, users, wod
from .config import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="lift-tracker")
@click.option("--log-level", default=None, help="Log level (default: LIFT_TRACKER_LOG_LEVEL or WARNING)")
def main(log_level: str | None):
    """lift-tracker: workout notation and lift logging.

    Parse workouts written in WOD notation, log lifts, and track
    personal records from estimated one rep maxes.

    Example usage:

        # Initialize the project with a first user
        lift-tracker init --user "Sam"

        # Import lift logs
        lift-tracker import lift-logs history.tsv --user 1

        # Rebuild PR flags from history
        lift-tracker prs calculate-historical --dry-run
    """
    configure_logging(log_level.upper() if log_level else None)


# Register commands
main.add_command(init)
main.add_command(users)
main.add_command(import_data)
main.add_command(export_data)
main.add_command(prs)
main.add_command(wod)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()

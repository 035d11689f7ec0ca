"""Initialize project command."""

import click

from ..config import get_settings
from ..db import UserRepository, get_db_path, init_db, seed_exercises
from ..models.user import User
from .base import async_command, echo_info, echo_success


@click.command()
@click.option("--user", "user_name", help="Also create a user with this name")
@click.option("--email", help="Email for the created user")
@async_command
async def init(user_name: str | None, email: str | None):
    """Initialize the lift-tracker database.

    Creates the data directory, the SQLite schema and the global
    exercise library. Safe to run more than once.
    """
    data_dir = get_settings().data_dir
    db_path = get_db_path(data_dir)

    echo_info(f"Initializing lift-tracker in {data_dir}")

    await init_db(db_path)
    echo_success("Database initialized")

    added = await seed_exercises(db_path)
    echo_success(f"Exercise library populated ({added} new global exercises)")

    if user_name:
        user = User(name=user_name, email=email)
        await UserRepository(db_path).create(user)
        echo_success(f"Created user '{user.name}' with ID: {user.id}")

    click.echo()
    click.echo("lift-tracker is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  lift-tracker import lift-logs <file.tsv> --user <id>")
    click.echo("  lift-tracker prs calculate-historical")
    click.echo("  lift-tracker serve")

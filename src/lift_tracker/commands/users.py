"""User management commands."""

import click

from ..db import UserRepository, get_db_path
from ..models.user import User
from .base import async_command, echo_error, echo_info, echo_success, ensure_initialized, format_table


@click.group()
@click.pass_context
def users(ctx):
    """Manage users."""
    ensure_initialized(ctx)


@users.command(name="add")
@click.argument("name")
@click.option("--email", help="Email address")
@click.option("--hide-global", is_flag=True, help="Hide the global exercise library")
@async_command
async def add_user(name: str, email: str | None, hide_global: bool):
    """Create a user."""
    user = User(name=name, email=email, show_global_exercises=not hide_global)
    await UserRepository(get_db_path()).create(user)
    echo_success(f"Created user '{user.name}' with ID: {user.id}")


@users.command(name="list")
@async_command
async def list_users():
    """List all users."""
    all_users = await UserRepository(get_db_path()).list_all()
    if not all_users:
        echo_info("No users found. Add one with 'lift-tracker users add NAME'")
        return

    rows = [
        [
            str(u.id),
            u.name,
            u.email or "",
            "yes" if u.show_global_exercises else "no",
            f"{u.bodyweight:g}" if u.bodyweight else "",
        ]
        for u in all_users
    ]
    click.echo()
    click.echo(format_table(["ID", "Name", "Email", "Global exercises", "Bodyweight"], rows))


@users.command(name="show-global")
@click.argument("user_id", type=int)
@click.argument("show", type=click.BOOL)
@click.pass_context
@async_command
async def show_global(ctx, user_id: int, show: bool):
    """Show or hide the global exercise library for a user."""
    repo = UserRepository(get_db_path())
    if await repo.get(user_id) is None:
        echo_error(f"User ID {user_id} not found")
        ctx.exit(1)
    await repo.set_show_global_exercises(user_id, show)
    echo_success(f"Global exercises {'shown' if show else 'hidden'} for user {user_id}")


@users.command(name="bodyweight")
@click.argument("user_id", type=int)
@click.argument("weight", type=click.FloatRange(min=0, min_open=True))
@click.pass_context
@async_command
async def set_bodyweight(ctx, user_id: int, weight: float):
    """Set the bodyweight added to bodyweight exercise 1RMs.

    Existing PRs are not re-evaluated; run 'lift-tracker prs
    calculate-historical --user ID' afterwards to update them.
    """
    repo = UserRepository(get_db_path())
    if await repo.get(user_id) is None:
        echo_error(f"User ID {user_id} not found")
        ctx.exit(1)
    await repo.set_bodyweight(user_id, weight)
    echo_success(f"Bodyweight set to {weight:g} for user {user_id}")

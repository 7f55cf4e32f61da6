"""Initialize project command."""

import click

from ..config import get_settings
from ..db import MIGRATIONS_DIR, seed_exercise_bank
from .base import async_command, echo_info, echo_success, open_backend


@click.command()
@click.option("--no-seed", is_flag=True, help="Do not add the starter exercises to the bank")
@async_command
async def init(no_seed: bool):
    """Initialize the database and exercise bank.

    With no backend URL configured this creates the local SQLite database.
    Against the hosted backend it checks that the migrated tables are
    reachable.
    """
    settings = get_settings()
    if settings.uses_rest_backend:
        echo_info(f"Checking hosted backend at {settings.backend_url}")
        echo_info(f"Its tables are created by the SQL files in {MIGRATIONS_DIR}")
    else:
        echo_info(f"Initializing local database at {settings.database_path}")

    async with open_backend() as backend:
        echo_success("Schema ready")

        if not no_seed:
            added = await seed_exercise_bank(backend)
            echo_success(f"Exercise bank populated ({added} new exercise(s))")

    click.echo()
    click.echo("mohero-admin is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  mohero-admin serve              # Start the dashboard API")
    click.echo("  mohero-admin programs list      # List programs")

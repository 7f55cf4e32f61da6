"""CLI entry point for mohero-admin."""

import click

from . import __version__
from .commands import bank, days, init, programs, serve, stats
from .config import get_settings
from .logger import setup_logger


@click.group()
@click.version_option(version=__version__, prog_name="mohero-admin")
@click.option("--log-level", default=None, help="Override MOHERO_LOG_LEVEL")
def main(log_level: str | None):
    """mohero-admin: administration tools for MoHero coaching programs.

    The backend is chosen from the environment: MOHERO_BACKEND_URL and
    MOHERO_BACKEND_KEY for the hosted backend, otherwise a local SQLite
    database at MOHERO_DATABASE_PATH.

    Example usage:

        # Create the local database and seed the exercise bank
        mohero-admin init

        # Start the dashboard API
        mohero-admin serve

        # Check that every program has all its days
        mohero-admin days sync <program-id>
    """
    settings = get_settings()
    setup_logger(level=(log_level or settings.log_level).upper(), log_file=settings.log_file)


# Register commands
main.add_command(init)
main.add_command(serve)
main.add_command(programs)
main.add_command(days)
main.add_command(bank)
main.add_command(stats)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()

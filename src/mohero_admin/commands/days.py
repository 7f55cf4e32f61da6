"""Day synchronization commands."""

import click

from ..services.day_sync import ProgramDaySynchronizer
from .base import async_command, echo_success, echo_warning, open_backend


@click.group()
def days():
    """Inspect and repair the days of a program."""


@days.command()
@click.argument("program_id")
@async_command
async def sync(program_id: str):
    """Create missing days and print the program's exercises per day."""
    async with open_backend() as backend:
        board = await ProgramDaySynchronizer(backend).load(program_id)

    if board.error:
        echo_warning(board.error)

    click.echo()
    click.echo(f"{board.program.name}: {len(board.days)}/{board.program.duration} day(s)")
    click.echo("-" * 40)
    for day in board.days:
        exercises = board.exercises_by_day.get(day.id, [])
        click.echo(f"Day {day.ordinal}:")
        if not exercises:
            click.echo("  (rest / no exercises)")
        for a in exercises:
            target = f" - {a.target_value}" if a.target_value else ""
            click.echo(f"  {a.ordinal}. {a.name} [{a.type.value}, level {a.level}]{target}")


@days.command()
@click.argument("program_id")
@async_command
async def prune(program_id: str):
    """Delete days beyond the program's duration, with their exercises."""
    async with open_backend() as backend:
        removed = await ProgramDaySynchronizer(backend).prune_days(program_id)
    echo_success(f"Removed {removed} day(s)")

"""Exercise bank commands."""

import click

from ..db import BankExerciseRepository, seed_exercise_bank
from ..models.exercises import ExerciseType
from .base import async_command, echo_info, echo_success, format_table, open_backend, truncate


@click.group()
def bank():
    """Browse and seed the shared exercise bank."""


@bank.command(name="list")
@click.option("--search", "-s", default=None, help="Filter by name")
@click.option(
    "--type",
    "-t",
    "exercise_type",
    type=click.Choice([t.value for t in ExerciseType]),
    default=None,
    help="Filter by exercise type",
)
@async_command
async def list_exercises(search: str | None, exercise_type: str | None):
    """List bank exercises."""
    async with open_backend() as backend:
        repo = BankExerciseRepository(backend)
        if exercise_type:
            exercises = await repo.filter_by_type(exercise_type)
        else:
            exercises = await repo.list_all()

    if search:
        exercises = [e for e in exercises if search.lower() in e.name.lower()]

    if not exercises:
        echo_info("No exercises found")
        return

    headers = ["ID", "Name", "Type", "Level", "Category"]
    rows = [
        [e.id, truncate(e.name), e.type.value, str(e.level), e.category]
        for e in exercises
    ]
    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(exercises)} exercise(s)")


@bank.command()
@async_command
async def seed():
    """Add the starter exercises that are not in the bank yet."""
    async with open_backend() as backend:
        added = await seed_exercise_bank(backend)
    echo_success(f"Added {added} exercise(s)")

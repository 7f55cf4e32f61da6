"""Statistics command."""

import click

from ..services.stats import StatsService
from .base import async_command, format_table, open_backend, truncate


@click.command()
@async_command
async def stats():
    """Show dashboard statistics."""
    async with open_backend() as backend:
        app_stats = await StatsService(backend).get_stats()

    click.echo()
    click.echo(f"Programs:        {app_stats.total_programs} ({app_stats.active_programs} active)")
    click.echo(f"Bank exercises:  {app_stats.bank_exercises}")
    click.echo(f"Assignments:     {app_stats.total_assignments}")
    click.echo(f"Blog posts:      {app_stats.blog_posts}")
    click.echo()
    click.echo("By type: " + ", ".join(f"{k}={v}" for k, v in app_stats.programs_by_type.items()))
    click.echo(
        "By difficulty: "
        + ", ".join(f"{k}={v}" for k, v in app_stats.programs_by_difficulty.items())
    )
    click.echo("By clan: " + ", ".join(f"{k}={v}" for k, v in app_stats.programs_by_clan.items()))

    if app_stats.program_content:
        click.echo()
        rows = [
            [truncate(c.name), str(c.days), str(c.exercises), str(c.empty_days)]
            for c in app_stats.program_content
        ]
        click.echo(format_table(["Program", "Days", "Exercises", "Empty days"], rows))

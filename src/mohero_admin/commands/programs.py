"""Program management commands."""

import click

from ..services.programs import ProgramService
from .base import async_command, echo_info, echo_success, format_table, open_backend, truncate


@click.group()
def programs():
    """Manage programs.

    Commands for listing, viewing, and deleting programs.
    """


@programs.command(name="list")
@async_command
async def list_programs():
    """List all programs."""
    async with open_backend() as backend:
        all_programs = await ProgramService(backend).list_programs()

    if not all_programs:
        echo_info("No programs found. Create one from the dashboard.")
        return

    headers = ["ID", "Name", "Type", "Days", "Difficulty", "Active"]
    rows = [
        [
            prog.id,
            truncate(prog.name),
            prog.type.value,
            str(prog.duration),
            prog.difficulty.value,
            "yes" if prog.active else "no",
        ]
        for prog in all_programs
    ]

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(all_programs)} program(s)")


@programs.command()
@click.argument("program_id")
@async_command
async def show(program_id: str):
    """Show details of a specific program."""
    async with open_backend() as backend:
        program = await ProgramService(backend).get_program(program_id)

    click.echo()
    click.echo("=" * 60)
    click.echo(f"Program: {program.name} (ID: {program.id})")
    click.echo("=" * 60)
    click.echo()
    click.echo(program.get_summary())


@programs.command()
@click.argument("program_id")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@async_command
async def delete(program_id: str, force: bool):
    """Delete a program with its days and exercises."""
    async with open_backend() as backend:
        service = ProgramService(backend)
        program = await service.get_program(program_id)

        if not force:
            click.echo(f"Program: {program.name}")
            if not click.confirm("Are you sure you want to delete this program?"):
                echo_info("Cancelled")
                return

        await service.delete_program(program_id)
    echo_success(f"Program {program_id} deleted")

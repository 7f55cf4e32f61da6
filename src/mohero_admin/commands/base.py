"""Shared CLI utilities."""

import asyncio
from contextlib import asynccontextmanager
from functools import wraps

import click

from ..config import get_settings
from ..db import create_backend, init_db
from ..errors import MoheroError


def async_command(f):
    """Decorator to run async Click commands.

    Domain errors are reported and turn into exit code 1.
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return asyncio.run(f(*args, **kwargs))
        except MoheroError as e:
            echo_error(str(e))
            raise SystemExit(1)

    return wrapper


@asynccontextmanager
async def open_backend():
    """Connect the configured backend for the duration of a command."""
    backend = create_backend(get_settings())
    async with backend:
        await init_db(backend)
        yield backend


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message, err=True)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def truncate(text: str, width: int = 30) -> str:
    return text[:width] + "..." if len(text) > width else text


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    # Calculate column widths
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = [
        "".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers)),
        "".join("-" * w + " " * padding for w in widths),
    ]
    for row in rows:
        lines.append("".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row)))

    return "\n".join(line.rstrip() for line in lines)

"""Backend construction and database initialization."""

from pathlib import Path

from ..config import Settings
from ..logger import get_logger
from ..models.exercises import STARTER_EXERCISES
from .backend import SQLiteBackend, TableBackend
from .rest import RestBackend
from .schema import EXERCISE_BANK, TABLES

log = get_logger("db")

# Schema for the hosted backend, applied with its own migration tooling
MIGRATIONS_DIR = Path(__file__).parent / "migrations"


def create_backend(settings: Settings) -> TableBackend:
    """Build the backend selected by the settings (not yet connected)."""
    if settings.uses_rest_backend:
        log.info(f"Using hosted backend at {settings.backend_url}")
        return RestBackend(settings.backend_url, settings.backend_key)

    log.info(f"Using local database at {settings.database_path}")
    return SQLiteBackend(settings.database_path)


async def init_db(backend: TableBackend) -> None:
    """Prepare the schema.

    The local database is created in place. The hosted schema is owned by
    the SQL migrations shipped in ``db/migrations``; here it is only checked
    to be reachable.
    """
    if isinstance(backend, SQLiteBackend):
        await backend.create_schema()
        log.info("Local schema ready")
        return

    for table in TABLES:
        await backend.select(table, limit=1)
    log.info("Hosted schema reachable")


async def seed_exercise_bank(backend: TableBackend) -> int:
    """Add the starter exercises missing from the bank. Returns how many were added."""
    existing = {row["name"].lower() for row in await backend.select(EXERCISE_BANK)}
    missing = [
        exercise.to_dict()
        for exercise in STARTER_EXERCISES
        if exercise.name.lower() not in existing
    ]
    if missing:
        await backend.insert(EXERCISE_BANK, missing)
    log.info(f"Seeded {len(missing)} bank exercise(s)")
    return len(missing)

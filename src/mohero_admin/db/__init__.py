"""Database layer for mohero-admin."""

from .backend import SQLiteBackend, TableBackend
from .engine import MIGRATIONS_DIR, create_backend, init_db, seed_exercise_bank
from .repositories import (
    BankExerciseRepository,
    BlogPostRepository,
    DayRepository,
    ExerciseAssignmentRepository,
    ProgramRepository,
)
from .rest import RestBackend

__all__ = [
    "BankExerciseRepository",
    "BlogPostRepository",
    "create_backend",
    "DayRepository",
    "ExerciseAssignmentRepository",
    "init_db",
    "ProgramRepository",
    "RestBackend",
    "seed_exercise_bank",
    "SQLiteBackend",
    "TableBackend",
]

"""Services for mohero-admin."""

from .day_sync import (
    AssignmentMutator,
    DayEnsurer,
    DayMutationQueue,
    ExerciseLoader,
    ManagerFeatures,
    MoveDirection,
    ProgramBoard,
    ProgramDaySynchronizer,
)
from .programs import ProgramService
from .stats import AppStats, StatsService

__all__ = [
    "AppStats",
    "AssignmentMutator",
    "DayEnsurer",
    "DayMutationQueue",
    "ExerciseLoader",
    "ManagerFeatures",
    "MoveDirection",
    "ProgramBoard",
    "ProgramDaySynchronizer",
    "ProgramService",
    "StatsService",
]

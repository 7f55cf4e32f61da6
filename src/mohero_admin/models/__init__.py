"""Data models for mohero-admin."""

from .blog import BlogPost
from .day import Day
from .exercises import BankExercise, ExerciseAssignment, ExerciseType
from .program import Difficulty, Phase, Program, ProgramType

__all__ = [
    "BankExercise",
    "BlogPost",
    "Day",
    "Difficulty",
    "ExerciseAssignment",
    "ExerciseType",
    "Phase",
    "Program",
    "ProgramType",
]

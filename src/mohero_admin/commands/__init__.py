"""CLI commands for mohero-admin."""

from .bank import bank
from .days import days
from .init import init
from .programs import programs
from .serve import serve
from .stats import stats

__all__ = [
    "bank",
    "days",
    "init",
    "programs",
    "serve",
    "stats",
]

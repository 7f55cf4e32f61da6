"""Pytest configuration and fixtures."""

import pytest
import pytest_asyncio

from mohero_admin.db.backend import SQLiteBackend
from mohero_admin.db.repositories import BankExerciseRepository, ProgramRepository
from mohero_admin.models.exercises import BankExercise, ExerciseType
from mohero_admin.models.program import Difficulty, Phase, Program, ProgramType


@pytest_asyncio.fixture
async def backend():
    """An in-memory SQLite backend with the schema created."""
    backend = SQLiteBackend(":memory:")
    await backend.connect()
    await backend.create_schema()
    yield backend
    await backend.close()


@pytest.fixture
def sample_program():
    """Create a sample program for testing."""
    return Program(
        name="Foundations",
        description="Three days to get started",
        duration=3,
        type=ProgramType.DISCOVERY,
        tags=["beginner", "bodyweight"],
        results=["Better posture", "More energy"],
        summary=[Phase(title="Week 1", subtitle="Basics", text="Learn the moves")],
        difficulty=Difficulty.EASY,
    )


@pytest.fixture
def push_ups():
    """A bank exercise template."""
    return BankExercise(
        name="Push-ups",
        type=ExerciseType.PUSH,
        level=1,
        zones=["chest", "triceps"],
        category="Strength",
        description="Classic push-up",
        variant="Knee push-ups",
    )


@pytest_asyncio.fixture
async def stored_program(backend, sample_program):
    """The sample program saved in the backend."""
    return await ProgramRepository(backend).create(sample_program)


@pytest_asyncio.fixture
async def stored_push_ups(backend, push_ups):
    """The push-ups template saved in the bank."""
    return await BankExerciseRepository(backend).create(push_ups)

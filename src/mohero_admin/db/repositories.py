"""Data access layer for mohero-admin."""

from datetime import datetime

from ..models.blog import BlogPost
from ..models.day import Day
from ..models.exercises import BankExercise, ExerciseAssignment
from ..models.program import Program
from .backend import Row, TableBackend
from .schema import BLOG_POSTS, DAYS, EXERCISE_ASSIGNMENTS, EXERCISE_BANK, PROGRAMS


def _parse_timestamp(value) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


class ProgramRepository:
    """Repository for programs."""

    def __init__(self, backend: TableBackend):
        self.backend = backend

    async def create(self, program: Program) -> Program:
        """Create a new program."""
        rows = await self.backend.insert(PROGRAMS, [program.to_dict()])
        return self._row_to_program(rows[0])

    async def get(self, program_id: str) -> Program | None:
        """Get a program by ID."""
        row = await self.backend.get(PROGRAMS, program_id)
        if row is None:
            return None
        return self._row_to_program(row)

    async def list_all(self) -> list[Program]:
        """List all programs by name."""
        rows = await self.backend.select(PROGRAMS, order_by="name")
        return [self._row_to_program(row) for row in rows]

    async def update(self, program: Program) -> Program | None:
        """Update an existing program. Returns None if it no longer exists."""
        if program.id is None:
            raise ValueError("Program must have an ID to update")

        rows = await self.backend.update(PROGRAMS, program.to_dict(), {"id": program.id})
        if not rows:
            return None
        return self._row_to_program(rows[0])

    async def delete(self, program_id: str) -> bool:
        """Delete a program row."""
        return await self.backend.delete(PROGRAMS, {"id": program_id}) > 0

    async def count(self, **filters) -> int:
        return await self.backend.count(PROGRAMS, filters or None)

    def _row_to_program(self, row: Row) -> Program:
        """Convert a database row to a Program."""
        return Program.from_dict(
            row,
            id=row["id"],
            created_at=_parse_timestamp(row.get("created_at")),
        )


class DayRepository:
    """Repository for program days."""

    def __init__(self, backend: TableBackend):
        self.backend = backend

    async def get(self, day_id: str) -> Day | None:
        """Get a day by ID."""
        row = await self.backend.get(DAYS, day_id)
        if row is None:
            return None
        return Day.from_dict(row, id=row["id"])

    async def list_for_program(self, program_id: str) -> list[Day]:
        """List a program's days by ordinal."""
        rows = await self.backend.select(DAYS, {"program_id": program_id}, order_by="ordinal")
        return [Day.from_dict(row, id=row["id"]) for row in rows]

    async def list_for_programs(self, program_ids: list[str]) -> list[Day]:
        """List the days of several programs."""
        if not program_ids:
            return []
        rows = await self.backend.select(DAYS, {"program_id": program_ids})
        return [Day.from_dict(row, id=row["id"]) for row in rows]

    async def create_many(self, program_id: str, ordinals: list[int]) -> list[Day]:
        """Create days for the given ordinals in a single batch."""
        if not ordinals:
            return []
        rows = await self.backend.insert(
            DAYS, [Day(program_id=program_id, ordinal=n).to_dict() for n in ordinals]
        )
        return [Day.from_dict(row, id=row["id"]) for row in rows]

    async def delete_many(self, day_ids: list[str]) -> int:
        if not day_ids:
            return 0
        return await self.backend.delete(DAYS, {"id": day_ids})


class ExerciseAssignmentRepository:
    """Repository for exercises assigned to days."""

    def __init__(self, backend: TableBackend):
        self.backend = backend

    async def get(self, assignment_id: str) -> ExerciseAssignment | None:
        """Get an assignment by ID."""
        row = await self.backend.get(EXERCISE_ASSIGNMENTS, assignment_id)
        if row is None:
            return None
        return self._row_to_assignment(row)

    async def list_for_day(self, day_id: str) -> list[ExerciseAssignment]:
        """List a day's assignments by ordinal."""
        rows = await self.backend.select(
            EXERCISE_ASSIGNMENTS, {"day_id": day_id}, order_by="ordinal"
        )
        return [self._row_to_assignment(row) for row in rows]

    async def list_for_days(self, day_ids: list[str]) -> list[ExerciseAssignment]:
        """List the assignments of several days in one request, by ordinal."""
        if not day_ids:
            return []
        rows = await self.backend.select(
            EXERCISE_ASSIGNMENTS, {"day_id": list(day_ids)}, order_by="ordinal"
        )
        return [self._row_to_assignment(row) for row in rows]

    async def create(self, assignment: ExerciseAssignment) -> ExerciseAssignment:
        """Create a new assignment."""
        rows = await self.backend.insert(EXERCISE_ASSIGNMENTS, [assignment.to_dict()])
        return self._row_to_assignment(rows[0])

    async def create_many(self, assignments: list[ExerciseAssignment]) -> list[ExerciseAssignment]:
        if not assignments:
            return []
        rows = await self.backend.insert(
            EXERCISE_ASSIGNMENTS, [a.to_dict() for a in assignments]
        )
        return [self._row_to_assignment(row) for row in rows]

    async def update(self, assignment_id: str, values: dict) -> ExerciseAssignment | None:
        """Update some columns of an assignment."""
        rows = await self.backend.update(EXERCISE_ASSIGNMENTS, values, {"id": assignment_id})
        if not rows:
            return None
        return self._row_to_assignment(rows[0])

    async def save_ordinals(self, assignments: list[ExerciseAssignment]) -> list[ExerciseAssignment]:
        """Write the ordinals of a day's assignments in one batch."""
        rows = await self.backend.upsert(
            EXERCISE_ASSIGNMENTS,
            [{"id": a.id, **a.to_dict()} for a in assignments],
        )
        return [self._row_to_assignment(row) for row in rows]

    async def delete(self, assignment_id: str) -> bool:
        return await self.backend.delete(EXERCISE_ASSIGNMENTS, {"id": assignment_id}) > 0

    async def delete_for_days(self, day_ids: list[str]) -> int:
        if not day_ids:
            return 0
        return await self.backend.delete(EXERCISE_ASSIGNMENTS, {"day_id": list(day_ids)})

    async def count_for_days(self, day_ids: list[str]) -> int:
        if not day_ids:
            return 0
        return await self.backend.count(EXERCISE_ASSIGNMENTS, {"day_id": list(day_ids)})

    def _row_to_assignment(self, row: Row) -> ExerciseAssignment:
        return ExerciseAssignment.from_dict(row, id=row["id"])


class BankExerciseRepository:
    """Repository for the shared exercise bank."""

    def __init__(self, backend: TableBackend):
        self.backend = backend

    async def create(self, exercise: BankExercise) -> BankExercise:
        """Add an exercise to the bank."""
        rows = await self.backend.insert(EXERCISE_BANK, [exercise.to_dict()])
        return self._row_to_exercise(rows[0])

    async def get(self, exercise_id: str) -> BankExercise | None:
        """Get a bank exercise by ID."""
        row = await self.backend.get(EXERCISE_BANK, exercise_id)
        if row is None:
            return None
        return self._row_to_exercise(row)

    async def list_all(self) -> list[BankExercise]:
        """List the whole bank by name."""
        rows = await self.backend.select(EXERCISE_BANK, order_by="name")
        return [self._row_to_exercise(row) for row in rows]

    async def search(self, query: str) -> list[BankExercise]:
        """Find exercises whose name contains the query (case-insensitive)."""
        needle = query.strip().lower()
        exercises = await self.list_all()
        if not needle:
            return exercises
        return [e for e in exercises if needle in e.name.lower()]

    async def filter_by_type(self, exercise_type: str) -> list[BankExercise]:
        """List bank exercises of one type."""
        rows = await self.backend.select(
            EXERCISE_BANK, {"type": exercise_type}, order_by="name"
        )
        return [self._row_to_exercise(row) for row in rows]

    async def update(self, exercise: BankExercise) -> BankExercise | None:
        """Update a bank exercise. Existing assignments are not touched."""
        if exercise.id is None:
            raise ValueError("Exercise must have an ID to update")
        rows = await self.backend.update(EXERCISE_BANK, exercise.to_dict(), {"id": exercise.id})
        if not rows:
            return None
        return self._row_to_exercise(rows[0])

    async def delete(self, exercise_id: str) -> bool:
        return await self.backend.delete(EXERCISE_BANK, {"id": exercise_id}) > 0

    async def count(self) -> int:
        return await self.backend.count(EXERCISE_BANK)

    def _row_to_exercise(self, row: Row) -> BankExercise:
        return BankExercise.from_dict(row, id=row["id"])


class BlogPostRepository:
    """Repository for blog posts."""

    def __init__(self, backend: TableBackend):
        self.backend = backend

    async def create(self, post: BlogPost) -> BlogPost:
        rows = await self.backend.insert(BLOG_POSTS, [post.to_dict()])
        return self._row_to_post(rows[0])

    async def get(self, post_id: str) -> BlogPost | None:
        row = await self.backend.get(BLOG_POSTS, post_id)
        if row is None:
            return None
        return self._row_to_post(row)

    async def list_all(self) -> list[BlogPost]:
        """List posts, newest first."""
        rows = await self.backend.select(BLOG_POSTS, order_by="created_at", descending=True)
        return [self._row_to_post(row) for row in rows]

    async def update(self, post: BlogPost) -> BlogPost | None:
        if post.id is None:
            raise ValueError("Post must have an ID to update")
        rows = await self.backend.update(BLOG_POSTS, post.to_dict(), {"id": post.id})
        if not rows:
            return None
        return self._row_to_post(rows[0])

    async def delete(self, post_id: str) -> bool:
        return await self.backend.delete(BLOG_POSTS, {"id": post_id}) > 0

    async def count(self) -> int:
        return await self.backend.count(BLOG_POSTS)

    def _row_to_post(self, row: Row) -> BlogPost:
        return BlogPost.from_dict(
            row, id=row["id"], created_at=_parse_timestamp(row.get("created_at"))
        )

"""Program day and exercise synchronization.

The dashboard edits a program through three steps that always run in the
same order:

1. ``DayEnsurer`` makes sure a day exists for every ordinal 1..duration.
2. ``ExerciseLoader`` fetches the assignments of those days and groups
   them by day id.
3. ``AssignmentMutator`` adds, deletes, reorders or edits assignments of
   one day. Mutations of the same day are serialised through a
   ``DayMutationQueue`` so two quick reorders cannot interleave their
   writes, and ordinals are always rewritten as one batch.

``ProgramDaySynchronizer`` ties the three together for one program and
reloads the whole board after each mutation.
"""

import asyncio
from collections import defaultdict
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass, field
from enum import Enum

from ..db.backend import TableBackend
from ..db.repositories import (
    BankExerciseRepository,
    DayRepository,
    ExerciseAssignmentRepository,
    ProgramRepository,
)
from ..errors import BackendError, FeatureDisabledError, IncompleteDaysError, NotFoundError
from ..logger import get_logger
from ..models.day import Day
from ..models.exercises import CONTENT_FIELDS, BankExercise, ExerciseAssignment, ExerciseType
from ..models.program import Program


class MoveDirection(str, Enum):
    """Direction of a one-step reorder."""

    UP = "up"
    DOWN = "down"


# Content fields an edit may change but never clear
REQUIRED_CONTENT_FIELDS = ("name", "type", "level", "target_value", "variant")
TEXT_CONTENT_FIELDS = tuple(f for f in CONTENT_FIELDS if f != "level")


class DayMutationQueue:
    """Runs mutations one at a time per key (a day or program id)."""

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    @asynccontextmanager
    async def hold(self, key: str):
        async with self._locks[key]:
            yield


def renumber(assignments: list[ExerciseAssignment]) -> list[ExerciseAssignment]:
    """Rewrite ordinals as 1..N following list order. Returns the changed ones."""
    changed = []
    for position, assignment in enumerate(assignments, start=1):
        if assignment.ordinal != position:
            assignment.ordinal = position
            changed.append(assignment)
    return changed


class DayEnsurer:
    """Keeps a contiguous day row for every ordinal of a program."""

    def __init__(
        self,
        backend: TableBackend,
        queue: DayMutationQueue | None = None,
        logger=None,
    ):
        self.backend = backend
        self.days = DayRepository(backend)
        self.assignments = ExerciseAssignmentRepository(backend)
        self.queue = queue or DayMutationQueue()
        self.log = logger or get_logger("day_sync")

    async def ensure(self, program_id: str, duration: int) -> list[Day]:
        """Create the missing days of a program and return days 1..duration.

        Missing ordinals are inserted in a single batch. Days beyond the
        duration are left in storage but not returned. If the insert fails,
        ``IncompleteDaysError`` carries the days that already existed.
        """
        if not program_id:
            raise ValueError("Program id is required")
        if duration < 1:
            raise ValueError(f"Duration must be at least 1, got {duration}")

        async with self.queue.hold(f"program:{program_id}"):
            existing = self._dedupe(await self.days.list_for_program(program_id))

            stale = [d for d in existing if d.ordinal > duration]
            if stale:
                self.log.warning(
                    f"Program {program_id} has {len(stale)} day(s) beyond its duration of {duration}"
                )
            current = [d for d in existing if d.ordinal <= duration]

            present = {d.ordinal for d in current}
            missing = [n for n in range(1, duration + 1) if n not in present]
            if not missing:
                return current

            try:
                created = await self.days.create_many(program_id, missing)
            except BackendError as e:
                self.log.error(f"Failed to create days {missing} for program {program_id}: {e}")
                raise IncompleteDaysError(program_id, current, e) from e

            self.log.info(f"Created {len(created)} day(s) for program {program_id}")
            return sorted(current + created, key=lambda d: d.ordinal)

    def _dedupe(self, days: list[Day]) -> list[Day]:
        seen: dict[int, Day] = {}
        for day in days:
            if day.ordinal in seen:
                self.log.warning(
                    f"Duplicate day {day.ordinal} ({day.id}) for program {day.program_id}, ignoring"
                )
                continue
            seen[day.ordinal] = day
        return sorted(seen.values(), key=lambda d: d.ordinal)

    async def prune(self, program_id: str, duration: int) -> int:
        """Delete days past the duration and their assignments. Returns days removed."""
        async with self.queue.hold(f"program:{program_id}"):
            stale = [
                d for d in await self.days.list_for_program(program_id)
                if d.ordinal > duration
            ]
            if not stale:
                return 0
            stale_ids = [d.id for d in stale]
            async with AsyncExitStack() as stack:
                # Wait for in-flight mutations of each stale day
                for day_id in sorted(stale_ids):
                    await stack.enter_async_context(self.queue.hold(day_id))
                async with self.backend.atomic():
                    await self.assignments.delete_for_days(stale_ids)
                    removed = await self.days.delete_many(stale_ids)
        self.log.info(f"Pruned {removed} day(s) beyond day {duration} of program {program_id}")
        return removed


class ExerciseLoader:
    """Fetches assignments for a set of days and groups them per day."""

    def __init__(self, backend: TableBackend):
        self.assignments = ExerciseAssignmentRepository(backend)

    async def load(self, day_ids: list[str]) -> dict[str, list[ExerciseAssignment]]:
        """Map every given day id to its assignments sorted by ordinal.

        Every id is present in the result, with an empty list when the day
        has no exercises. A failed fetch raises instead of returning a
        partial map.
        """
        if not day_ids:
            raise ValueError("At least one day id is required")

        grouped: dict[str, list[ExerciseAssignment]] = {day_id: [] for day_id in day_ids}
        for assignment in await self.assignments.list_for_days(list(grouped)):
            if assignment.day_id in grouped:
                grouped[assignment.day_id].append(assignment)

        for assignments in grouped.values():
            assignments.sort(key=lambda a: a.ordinal)
        return grouped


class AssignmentMutator:
    """Adds, deletes, reorders and edits the exercises of a day."""

    def __init__(
        self,
        backend: TableBackend,
        queue: DayMutationQueue | None = None,
        logger=None,
    ):
        self.backend = backend
        self.days = DayRepository(backend)
        self.assignments = ExerciseAssignmentRepository(backend)
        self.queue = queue or DayMutationQueue()
        self.log = logger or get_logger("day_sync")

    async def _require_day(self, day_id: str) -> Day:
        day = await self.days.get(day_id)
        if day is None:
            raise NotFoundError("Day", day_id)
        return day

    async def _require_assignment(self, assignment_id: str) -> ExerciseAssignment:
        assignment = await self.assignments.get(assignment_id)
        if assignment is None:
            raise NotFoundError("Exercise assignment", assignment_id)
        return assignment

    async def add(
        self,
        day_id: str,
        exercise: BankExercise,
        target_value: str,
        level: int | None = None,
    ) -> ExerciseAssignment:
        """Copy a bank exercise to the end of a day."""
        await self._require_day(day_id)

        async with self.queue.hold(day_id):
            current = await self.assignments.list_for_day(day_id)
            assignment = ExerciseAssignment.from_bank(
                day_id=day_id,
                ordinal=len(current) + 1,
                exercise=exercise,
                target_value=target_value.strip(),
                level=level,
            )
            created = await self.assignments.create(assignment)

        self.log.info(f"Added {created.name} to day {day_id} at position {created.ordinal}")
        return created

    async def delete(self, assignment_id: str) -> ExerciseAssignment:
        """Delete an assignment and close the gap it leaves."""
        assignment = await self._require_assignment(assignment_id)
        day_id = assignment.day_id

        async with self.queue.hold(day_id):
            async with self.backend.atomic():
                if not await self.assignments.delete(assignment_id):
                    raise NotFoundError("Exercise assignment", assignment_id)
                remaining = await self.assignments.list_for_day(day_id)
                changed = renumber(remaining)
                if changed:
                    await self.assignments.save_ordinals(changed)

        self.log.info(f"Deleted {assignment.name} from day {day_id}")
        return assignment

    async def reorder(
        self,
        day_id: str,
        index: int,
        direction: MoveDirection | str,
    ) -> list[ExerciseAssignment]:
        """Move the exercise at ``index`` one step up or down.

        Moving the first item up or the last item down changes nothing.
        Ordinals of the whole day are written back as 1..N in one batch.
        """
        direction = MoveDirection(direction)
        await self._require_day(day_id)

        async with self.queue.hold(day_id):
            current = await self.assignments.list_for_day(day_id)
            if index < 0 or index >= len(current):
                raise IndexError(f"No exercise at position {index} in day {day_id}")

            target = index - 1 if direction is MoveDirection.UP else index + 1
            if 0 <= target < len(current):
                current[index], current[target] = current[target], current[index]

            changed = renumber(current)
            if changed:
                async with self.backend.atomic():
                    await self.assignments.save_ordinals(changed)
                self.log.debug(f"Reordered day {day_id}: moved {index} {direction.value}")
            return current

    async def edit(self, assignment_id: str, patch: dict) -> ExerciseAssignment:
        """Update the content fields of an assignment."""
        unknown = set(patch) - set(CONTENT_FIELDS)
        if unknown:
            raise ValueError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")

        values = dict(patch)
        for name in REQUIRED_CONTENT_FIELDS:
            if name in values and values[name] is None:
                raise ValueError(f"Exercise {name} cannot be null")
        for name in TEXT_CONTENT_FIELDS:
            if values.get(name) is not None and not isinstance(values[name], str):
                raise ValueError(f"Exercise {name} must be text")

        if "type" in values:
            values["type"] = ExerciseType.parse(values["type"]).value
        if "level" in values:
            level = values["level"]
            if isinstance(level, bool) or not isinstance(level, int) or level not in (1, 2, 3):
                raise ValueError(f"Exercise level must be 1, 2 or 3, got {level!r}")
        if "name" in values and not values["name"].strip():
            raise ValueError("Exercise name cannot be empty")

        assignment = await self._require_assignment(assignment_id)
        async with self.queue.hold(assignment.day_id):
            updated = await self.assignments.update(assignment_id, values)
        if updated is None:
            raise NotFoundError("Exercise assignment", assignment_id)
        return updated

    async def copy_day(self, source_day_id: str, target_day_id: str) -> list[ExerciseAssignment]:
        """Append copies of every exercise of one day to another."""
        if source_day_id == target_day_id:
            raise ValueError("Source and target day must differ")
        await self._require_day(source_day_id)
        await self._require_day(target_day_id)

        async with self.queue.hold(target_day_id):
            source = await self.assignments.list_for_day(source_day_id)
            target = await self.assignments.list_for_day(target_day_id)
            copies = [
                ExerciseAssignment(
                    day_id=target_day_id,
                    ordinal=len(target) + position,
                    name=a.name,
                    type=a.type,
                    level=a.level,
                    target_value=a.target_value,
                    category=a.category,
                    description=a.description,
                    image_url=a.image_url,
                    video_url=a.video_url,
                    variant=a.variant,
                )
                for position, a in enumerate(source, start=1)
            ]
            created = await self.assignments.create_many(copies)

        self.log.info(f"Copied {len(created)} exercise(s) from day {source_day_id} to {target_day_id}")
        return created


@dataclass
class ManagerFeatures:
    """Affordances offered by the exercise manager."""

    edit: bool = True
    reorder: bool = True
    bank_panel: bool = True

    def require(self, feature: str) -> None:
        if not getattr(self, feature):
            raise FeatureDisabledError(feature)


@dataclass
class ProgramBoard:
    """Everything the exercise manager shows for one program."""

    program: Program
    days: list[Day]
    exercises_by_day: dict[str, list[ExerciseAssignment]] = field(default_factory=dict)
    error: str | None = None

    def exercises_for(self, ordinal: int) -> list[ExerciseAssignment]:
        for day in self.days:
            if day.ordinal == ordinal:
                return self.exercises_by_day.get(day.id, [])
        raise KeyError(f"Day {ordinal} is not part of this board")

    def to_dict(self) -> dict:
        """Convert to a JSON-ready dictionary."""
        return {
            "program": {"id": self.program.id, **self.program.to_dict()},
            "days": [
                {
                    "id": day.id,
                    "ordinal": day.ordinal,
                    "exercises": [
                        {"id": a.id, **a.to_dict()}
                        for a in self.exercises_by_day.get(day.id, [])
                    ],
                }
                for day in self.days
            ],
            "error": self.error,
        }


class ProgramDaySynchronizer:
    """Loads a program's days and exercises and applies user actions to them."""

    def __init__(
        self,
        backend: TableBackend,
        features: ManagerFeatures | None = None,
        queue: DayMutationQueue | None = None,
        logger=None,
    ):
        self.features = features or ManagerFeatures()
        self.log = logger or get_logger("day_sync")
        queue = queue or DayMutationQueue()
        self.programs = ProgramRepository(backend)
        self.days = DayRepository(backend)
        self.bank = BankExerciseRepository(backend)
        self.ensurer = DayEnsurer(backend, queue=queue, logger=self.log)
        self.loader = ExerciseLoader(backend)
        self.mutator = AssignmentMutator(backend, queue=queue, logger=self.log)

    async def _require_program(self, program_id: str) -> Program:
        program = await self.programs.get(program_id)
        if program is None:
            raise NotFoundError("Program", program_id)
        return program

    async def _require_program_day(self, program_id: str, day_id: str) -> Day:
        day = await self.days.get(day_id)
        if day is None or day.program_id != program_id:
            raise NotFoundError("Day", day_id)
        return day

    async def _require_program_assignment(self, program_id: str, assignment_id: str) -> None:
        assignment = await self.mutator.assignments.get(assignment_id)
        if assignment is None:
            raise NotFoundError("Exercise assignment", assignment_id)
        await self._require_program_day(program_id, assignment.day_id)

    async def load(self, program_id: str) -> ProgramBoard:
        """Ensure the program's days and load their exercises."""
        program = await self._require_program(program_id)

        error = None
        try:
            days = await self.ensurer.ensure(program.id, program.duration)
        except IncompleteDaysError as e:
            days = e.existing_days
            error = str(e)

        exercises: dict[str, list[ExerciseAssignment]] = {}
        if days:
            exercises = await self.loader.load([d.id for d in days])

        return ProgramBoard(program=program, days=days, exercises_by_day=exercises, error=error)

    async def add_exercise(
        self,
        program_id: str,
        day_id: str,
        bank_exercise_id: str,
        target_value: str,
        level: int | None = None,
    ) -> ProgramBoard:
        self.features.require("bank_panel")
        await self._require_program_day(program_id, day_id)
        exercise = await self.bank.get(bank_exercise_id)
        if exercise is None:
            raise NotFoundError("Bank exercise", bank_exercise_id)
        await self.mutator.add(day_id, exercise, target_value, level=level)
        return await self.load(program_id)

    async def delete_exercise(self, program_id: str, assignment_id: str) -> ProgramBoard:
        await self._require_program_assignment(program_id, assignment_id)
        await self.mutator.delete(assignment_id)
        return await self.load(program_id)

    async def reorder(
        self,
        program_id: str,
        day_id: str,
        index: int,
        direction: MoveDirection | str,
    ) -> ProgramBoard:
        self.features.require("reorder")
        await self._require_program_day(program_id, day_id)
        await self.mutator.reorder(day_id, index, direction)
        return await self.load(program_id)

    async def edit_exercise(self, program_id: str, assignment_id: str, patch: dict) -> ProgramBoard:
        self.features.require("edit")
        await self._require_program_assignment(program_id, assignment_id)
        await self.mutator.edit(assignment_id, patch)
        return await self.load(program_id)

    async def copy_day(self, program_id: str, source_day_id: str, target_day_id: str) -> ProgramBoard:
        await self._require_program_day(program_id, source_day_id)
        await self._require_program_day(program_id, target_day_id)
        await self.mutator.copy_day(source_day_id, target_day_id)
        return await self.load(program_id)

    async def prune_days(self, program_id: str) -> int:
        """Remove days left beyond the program's current duration."""
        program = await self._require_program(program_id)
        return await self.ensurer.prune(program.id, program.duration)

"""Program management service."""

from ..db.backend import TableBackend
from ..db.repositories import DayRepository, ExerciseAssignmentRepository, ProgramRepository
from ..errors import NotFoundError
from ..logger import get_logger
from ..models.program import Program


class ProgramService:
    """Creates, edits and deletes programs together with their days."""

    def __init__(self, backend: TableBackend, logger=None):
        self.backend = backend
        self.programs = ProgramRepository(backend)
        self.days = DayRepository(backend)
        self.assignments = ExerciseAssignmentRepository(backend)
        self.log = logger or get_logger("programs")

    async def list_programs(self) -> list[Program]:
        return await self.programs.list_all()

    async def get_program(self, program_id: str) -> Program:
        program = await self.programs.get(program_id)
        if program is None:
            raise NotFoundError("Program", program_id)
        return program

    async def create_program(self, program: Program) -> Program:
        created = await self.programs.create(program)
        self.log.info(f"Created program {created.name} ({created.id})")
        return created

    async def update_program(self, program_id: str, program: Program) -> Program:
        """Replace a program's fields.

        Shrinking the duration keeps the days past the new end (see
        ``DayEnsurer.prune`` to remove them).
        """
        program.id = program_id
        updated = await self.programs.update(program)
        if updated is None:
            raise NotFoundError("Program", program_id)
        self.log.info(f"Updated program {updated.name} ({program_id})")
        return updated

    async def delete_program(self, program_id: str) -> Program:
        """Delete a program, its days and their exercises in one go."""
        program = await self.get_program(program_id)

        async with self.backend.atomic():
            day_ids = [d.id for d in await self.days.list_for_program(program_id)]
            removed_exercises = await self.assignments.delete_for_days(day_ids)
            removed_days = await self.days.delete_many(day_ids)
            await self.programs.delete(program_id)

        self.log.info(
            f"Deleted program {program.name} ({program_id}) with "
            f"{removed_days} day(s) and {removed_exercises} exercise(s)"
        )
        return program

"""Day and exercise assignment routes.

Every mutation answers with the reloaded board of the program.
"""

from fastapi import APIRouter, Depends

from ...services.day_sync import ProgramDaySynchronizer
from ..dependencies import get_synchronizer
from ..schemas import AddExerciseIn, CopyDayIn, ExerciseEditIn, ReorderIn

router = APIRouter(prefix="/programs/{program_id}", tags=["days"])


@router.get("/board")
async def get_board(
    program_id: str,
    sync: ProgramDaySynchronizer = Depends(get_synchronizer),
):
    """Days of the program with their exercises, creating missing days."""
    board = await sync.load(program_id)
    return board.to_dict()


@router.post("/days/{day_id}/exercises", status_code=201)
async def add_exercise(
    program_id: str,
    day_id: str,
    body: AddExerciseIn,
    sync: ProgramDaySynchronizer = Depends(get_synchronizer),
):
    """Add a bank exercise at the end of a day."""
    board = await sync.add_exercise(
        program_id, day_id, body.bank_exercise_id, body.target_value, level=body.level
    )
    return board.to_dict()


@router.post("/days/{day_id}/reorder")
async def reorder_exercises(
    program_id: str,
    day_id: str,
    body: ReorderIn,
    sync: ProgramDaySynchronizer = Depends(get_synchronizer),
):
    """Move one exercise up or down."""
    board = await sync.reorder(program_id, day_id, body.index, body.direction)
    return board.to_dict()


@router.post("/days/{day_id}/copy")
async def copy_day(
    program_id: str,
    day_id: str,
    body: CopyDayIn,
    sync: ProgramDaySynchronizer = Depends(get_synchronizer),
):
    """Append the exercises of another day to this one."""
    board = await sync.copy_day(program_id, body.source_day_id, day_id)
    return board.to_dict()


@router.patch("/exercises/{assignment_id}")
async def edit_exercise(
    program_id: str,
    assignment_id: str,
    body: ExerciseEditIn,
    sync: ProgramDaySynchronizer = Depends(get_synchronizer),
):
    """Edit the content of an assigned exercise."""
    board = await sync.edit_exercise(program_id, assignment_id, body.to_patch())
    return board.to_dict()


@router.delete("/exercises/{assignment_id}")
async def delete_exercise(
    program_id: str,
    assignment_id: str,
    sync: ProgramDaySynchronizer = Depends(get_synchronizer),
):
    """Remove an exercise from its day."""
    board = await sync.delete_exercise(program_id, assignment_id)
    return board.to_dict()


@router.post("/prune-days")
async def prune_days(
    program_id: str,
    sync: ProgramDaySynchronizer = Depends(get_synchronizer),
):
    """Delete days beyond the program's duration."""
    removed = await sync.prune_days(program_id)
    return {"removed": removed}

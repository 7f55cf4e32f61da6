"""Exercise bank routes."""

from fastapi import APIRouter, Depends

from ...db.backend import TableBackend
from ...db.repositories import BankExerciseRepository
from ...errors import NotFoundError
from ...models.exercises import BankExercise, ExerciseType
from ..dependencies import get_backend
from ..schemas import BankExerciseIn

router = APIRouter(prefix="/bank", tags=["bank"])


def exercise_to_dict(exercise: BankExercise) -> dict:
    return {"id": exercise.id, **exercise.to_dict()}


@router.get("")
async def list_exercises(
    q: str | None = None,
    type: str | None = None,
    backend: TableBackend = Depends(get_backend),
):
    """List the bank, optionally searched by name or filtered by type."""
    repo = BankExerciseRepository(backend)
    if type:
        exercises = await repo.filter_by_type(ExerciseType.parse(type).value)
        if q:
            needle = q.strip().lower()
            exercises = [e for e in exercises if needle in e.name.lower()]
    elif q:
        exercises = await repo.search(q)
    else:
        exercises = await repo.list_all()
    return {"exercises": [exercise_to_dict(e) for e in exercises]}


@router.post("", status_code=201)
async def create_exercise(body: BankExerciseIn, backend: TableBackend = Depends(get_backend)):
    """Add an exercise to the bank."""
    exercise = await BankExerciseRepository(backend).create(body.to_exercise())
    return exercise_to_dict(exercise)


@router.get("/{exercise_id}")
async def get_exercise(exercise_id: str, backend: TableBackend = Depends(get_backend)):
    exercise = await BankExerciseRepository(backend).get(exercise_id)
    if exercise is None:
        raise NotFoundError("Bank exercise", exercise_id)
    return exercise_to_dict(exercise)


@router.put("/{exercise_id}")
async def update_exercise(
    exercise_id: str,
    body: BankExerciseIn,
    backend: TableBackend = Depends(get_backend),
):
    """Update a bank exercise. Exercises already assigned to days keep their copy."""
    exercise = body.to_exercise()
    exercise.id = exercise_id
    updated = await BankExerciseRepository(backend).update(exercise)
    if updated is None:
        raise NotFoundError("Bank exercise", exercise_id)
    return exercise_to_dict(updated)


@router.delete("/{exercise_id}")
async def delete_exercise(exercise_id: str, backend: TableBackend = Depends(get_backend)):
    if not await BankExerciseRepository(backend).delete(exercise_id):
        raise NotFoundError("Bank exercise", exercise_id)
    return {"deleted": exercise_id}

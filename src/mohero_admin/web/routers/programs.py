"""Program management routes."""

from fastapi import APIRouter, Depends

from ...db.backend import TableBackend
from ...models.program import Program
from ...services.programs import ProgramService
from ..dependencies import get_backend
from ..schemas import ProgramIn

router = APIRouter(prefix="/programs", tags=["programs"])


def program_to_dict(program: Program) -> dict:
    """Serialize a program for the dashboard."""
    return {
        "id": program.id,
        **program.to_dict(),
        "created_at": program.created_at.isoformat() if program.created_at else None,
    }


@router.get("")
async def list_programs(backend: TableBackend = Depends(get_backend)):
    """List all programs."""
    programs = await ProgramService(backend).list_programs()
    return {"programs": [program_to_dict(p) for p in programs]}


@router.post("", status_code=201)
async def create_program(body: ProgramIn, backend: TableBackend = Depends(get_backend)):
    """Create a program from the program form."""
    program = await ProgramService(backend).create_program(body.to_program())
    return program_to_dict(program)


@router.get("/{program_id}")
async def get_program(program_id: str, backend: TableBackend = Depends(get_backend)):
    """Get a single program."""
    program = await ProgramService(backend).get_program(program_id)
    return program_to_dict(program)


@router.put("/{program_id}")
async def update_program(
    program_id: str,
    body: ProgramIn,
    backend: TableBackend = Depends(get_backend),
):
    """Replace a program's fields."""
    program = await ProgramService(backend).update_program(program_id, body.to_program())
    return program_to_dict(program)


@router.delete("/{program_id}")
async def delete_program(program_id: str, backend: TableBackend = Depends(get_backend)):
    """Delete a program with its days and exercises."""
    program = await ProgramService(backend).delete_program(program_id)
    return {"deleted": program.id}

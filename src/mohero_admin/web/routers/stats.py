"""Statistics routes."""

from fastapi import APIRouter, Depends

from ...db.backend import TableBackend
from ...services.stats import StatsService
from ..dependencies import get_backend

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("")
async def get_stats(backend: TableBackend = Depends(get_backend)):
    """Dashboard-wide counters."""
    stats = await StatsService(backend).get_stats()
    return stats.to_dict()

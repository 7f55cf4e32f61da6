"""Objects shared by the routers."""

from fastapi import Request

from ..db.backend import TableBackend
from ..services.day_sync import ProgramDaySynchronizer


def get_backend(request: Request) -> TableBackend:
    """Get the backend from app state."""
    return request.app.state.backend


def get_synchronizer(request: Request) -> ProgramDaySynchronizer:
    """Build a synchronizer sharing the app-wide mutation queue."""
    return ProgramDaySynchronizer(
        request.app.state.backend,
        features=request.app.state.features,
        queue=request.app.state.queue,
    )

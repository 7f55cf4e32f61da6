"""FastAPI application for the mohero-admin dashboard."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from .. import __version__
from ..config import Settings, get_settings
from ..db.backend import TableBackend
from ..db.engine import create_backend, init_db
from ..errors import BackendError, FeatureDisabledError, NotFoundError
from ..logger import get_logger, setup_logger
from ..services.day_sync import DayMutationQueue, ManagerFeatures
from .routers import bank, blog, days, programs, stats

log = get_logger("web")


def create_app(settings: Settings | None = None, backend: TableBackend | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    backend = backend or create_backend(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the backend on startup and release it on shutdown."""
        await backend.connect()
        await init_db(backend)
        yield
        await backend.close()

    app = FastAPI(
        title="mohero-admin",
        description="Administration dashboard for MoHero coaching programs",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.backend = backend
    # Shared by every request so mutations of one day never interleave
    app.state.queue = DayMutationQueue()
    app.state.features = ManagerFeatures(
        edit=settings.enable_edit,
        reorder=settings.enable_reorder,
        bank_panel=settings.enable_bank_panel,
    )

    app.include_router(programs.router)
    app.include_router(days.router)
    app.include_router(bank.router)
    app.include_router(blog.router)
    app.include_router(stats.router)

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(FeatureDisabledError)
    async def feature_disabled(request: Request, exc: FeatureDisabledError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(BackendError)
    async def backend_error(request: Request, exc: BackendError):
        log.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=502, content={"detail": f"Backend error: {exc}"})

    @app.exception_handler(ValueError)
    async def invalid_value(request: Request, exc: ValueError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(IndexError)
    async def invalid_index(request: Request, exc: IndexError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.get("/")
    async def root():
        """Root redirect to programs."""
        return RedirectResponse(url="/programs", status_code=302)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__, "backend": backend.name}

    return app


def create_app_from_env() -> FastAPI:
    """Factory used by ``uvicorn --factory`` with logging configured from the environment."""
    settings = get_settings()
    setup_logger(level=settings.log_level, log_file=settings.log_file)
    return create_app(settings)

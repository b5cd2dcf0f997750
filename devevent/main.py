import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from devevent.core.config import settings
from devevent.core.errors import ConnectionError
from devevent.core.logging_config import setup_logging
from devevent.database.db import connection_manager
from devevent.routes import bookings, events, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables (in production, use migrations such as Alembic)
    connection_manager.init_db()
    logger.info("Database initialized successfully")
    yield


async def connection_error_handler(request: Request, exc: ConnectionError):
    logger.error(f"Database unavailable during {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Database unavailable"})


def create_app() -> FastAPI:
    setup_logging(settings.log_level)

    app = FastAPI(title="DevEvent API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ConnectionError, connection_error_handler)

    Path(settings.static_dir).mkdir(parents=True, exist_ok=True)
    app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")

    app.include_router(health.router)
    app.include_router(events.router)
    app.include_router(bookings.router)
    return app


app = create_app()

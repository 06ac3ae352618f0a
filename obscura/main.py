"""Obscura API — FastAPI application entry point and composition root.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ObscuraError → structured JSON responses
    - CORS applies to /api/ paths only, origins from settings
    - Migrations run over the session manager's engine before serving; a failure
      aborts startup
    - Every request is logged, including those that end in an unhandled 500

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_app() factory so tests can build an app with their own settings
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from obscura import __version__
from obscura.api.cors import ApiCORSMiddleware
from obscura.api.error_handlers import UTF8JSONResponse, register_error_handlers
from obscura.api.routes import health, stories
from obscura.config import Settings, get_settings
from obscura.core.errors import MigrationError
from obscura.infrastructure import database
from obscura.infrastructure.migrations import run_migrations
from obscura.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


def build_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        manager = database.init_db(
            settings.sqlalchemy_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        if settings.migrate_on_startup:
            try:
                await run_migrations(
                    baseline_on_migrate=settings.migration_baseline_on_migrate,
                    engine=manager.engine,
                )
            except MigrationError:
                await manager.dispose()
                raise
        logger.info("Obscura API started")
        yield
        logger.info("Obscura API shutting down")
        await manager.dispose()

    return lifespan


def _log_request(
    request: Request, status_code: int, started: float, level: int,
) -> None:
    logger.log(
        level,
        f"{request.method} {request.url.path} {status_code}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        },
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="Obscura API",
        version=__version__,
        lifespan=build_lifespan(settings),
        default_response_class=UTF8JSONResponse,
    )

    app.add_middleware(
        ApiCORSMiddleware,
        allow_origins=settings.cors_origins,
        max_age=settings.cors_max_age,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # Answered as 500 by ServerErrorMiddleware, outside this one
            _log_request(request, 500, started, logging.ERROR)
            raise
        _log_request(request, response.status_code, started, logging.INFO)
        return response

    # Routes — explicit registration
    app.include_router(health.router)
    app.include_router(stories.router)

    register_error_handlers(app)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    cfg = get_settings()
    uvicorn.run(
        "obscura.main:app",
        host=cfg.api_host,
        port=cfg.api_port,
        workers=cfg.api_workers,
        log_level=cfg.log_level.lower(),
    )

"""FastAPI application: the main entrypoint for chatrelay."""

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from loguru import logger

from backend.app.config import Settings, settings

# ---------------------------------------------------------------------------
# Loguru setup, the single source of truth for all logging.
# ---------------------------------------------------------------------------


class _InterceptHandler(logging.Handler):
    """Bridge stdlib logging → loguru so uvicorn and service logs flow through."""

    def emit(self, record: logging.LogRecord) -> None:
        # Map stdlib level to loguru level name
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno  # type: ignore[assignment]

        # Find the caller frame that originated the log call
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _setup_logging(log_settings: Settings = settings) -> None:
    """Configure loguru as the single logging backend.

    Loguru sinks are process-global: the most recent call wins for every app
    in the process.
    """
    # Remove default stderr handler
    logger.remove()

    # Console handler, colorized and concise
    log_level = log_settings.log_level.upper()
    logger.add(
        sys.stderr,
        level=log_level,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level:<7}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    # File handler, only when a log file is configured
    if log_settings.log_file is not None:
        log_settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_settings.log_file),
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {name}:{function}:{line} | {message}",
            rotation="10 MB",
            retention=3,
            encoding="utf-8",
        )

    # Intercept all stdlib logging → loguru
    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    # Quieten noisy third-party loggers
    for noisy in ("httpcore", "httpx", "websockets"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


_setup_logging()

# ---------------------------------------------------------------------------
# Now import everything else (after logging is configured)
# ---------------------------------------------------------------------------

from fastapi import FastAPI, Request  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402

from backend.app.api.channels import router as channels_router  # noqa: E402
from backend.app.api.ws import router as ws_router  # noqa: E402
from backend.app.dependencies import ConnectionsDep, RegistryDep  # noqa: E402
from backend.app.services.broadcaster import BroadcastCoordinator  # noqa: E402
from backend.app.services.channel_registry import (  # noqa: E402
    ChannelNamePolicy,
    ChannelRegistry,
)
from backend.app.services.ws_manager import ConnectionManager  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("chatrelay ready with {} channel(s)", len(app.state.registry))
    yield
    # Shutdown
    await app.state.connections.close_all()


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Build the app with a fresh registry (seeded) and connection set.

    Settings other than the module singleton also reconfigure logging.
    """
    if app_settings is not settings:
        _setup_logging(app_settings)

    app = FastAPI(
        title="chatrelay",
        description="Minimal real-time chat backend",
        version="0.1.0",
        lifespan=lifespan,
    )

    registry = ChannelRegistry(
        policy=ChannelNamePolicy.from_settings(app_settings),
        seed=app_settings.seed_channels,
    )
    connections = ConnectionManager()
    app.state.settings = app_settings
    app.state.registry = registry
    app.state.connections = connections
    app.state.coordinator = BroadcastCoordinator(registry, connections)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Global exception handler ---

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch unhandled exceptions and return a JSON 500 carrying the error message."""
        logger.exception("Unhandled exception on {} {}", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": str(exc) or "Internal server error"},
        )

    # Include routers
    app.include_router(channels_router)
    app.include_router(ws_router)

    # --- Health check ---

    @app.get("/health")
    async def health(registry: RegistryDep, connections: ConnectionsDep) -> dict[str, str | int]:
        return {
            "status": "ok",
            "channels": len(registry),
            "ws_clients": connections.active_count,
        }

    return app


app = create_app()

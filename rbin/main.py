"""
rbin - main FastAPI application.
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request

from rbin.config import Settings
from rbin.ids import IdGenerator, IdValidator
from rbin.routes import health, pastes
from rbin.service import PasteService
from rbin.storage import PasteStore

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)
request_logger = logging.getLogger("rbin.requests")


def configure_logging(settings: Settings) -> None:
    """Set the application log level and the request log threshold."""
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    request_logger.setLevel(settings.request_log_level)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the rbin application around an explicit settings value.

    Args:
        settings: Immutable configuration; read from the environment if omitted

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = Settings.from_env()

    validator = IdValidator(settings.id_length)
    store = PasteStore(settings.paste_dir, validator)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the paste directory on startup."""
        logger.info("rbin starting...")
        try:
            store.ensure_root()
        except OSError as e:
            logger.error(f"Failed to create paste directory {store.root}: {e}")
            raise
        logger.info(f"Using paste directory: {store.root}")
        yield
        logger.info("rbin shutting down...")

    # Docs routes are disabled so every single-segment path is a paste id.
    app = FastAPI(
        title="rbin",
        description="A simple command-line pastebin",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.pastes = PasteService(
        store=store,
        generator=IdGenerator(settings.id_length),
        validator=validator,
        write_attempts=settings.write_attempts,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        request_logger.debug(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms:.1f} ms)"
        )
        return response

    app.include_router(health.router)
    app.include_router(pastes.router)
    return app


def main() -> None:
    """Console entry point: serve rbin with uvicorn."""
    settings = Settings.from_env()
    configure_logging(settings)
    logger.info(f"Request log level set to: {settings.request_log_level}")
    logger.info(f"rbin configured. Attempting to listen on {settings.host}:{settings.port}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

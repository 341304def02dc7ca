"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Logging constants defined here because logging.basicConfig() must run
# before any module imports that might create loggers.
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(
    format=LOG_FORMAT,
    datefmt=DATE_FORMAT,
    level=logging.INFO,
)

# Unify uvicorn loggers with app format
for uvicorn_logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
    uvicorn_logger = logging.getLogger(uvicorn_logger_name)
    uvicorn_logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    uvicorn_logger.addHandler(handler)

from unslop import __version__  # noqa: E402
from unslop.api.routers import (  # noqa: E402
    directory,
    downloads,
    files,
    generate,
    product,
    settings,
    state,
)
from unslop.config import load_settings  # noqa: E402
from unslop.services import Services  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan handler for startup and shutdown events.

    On startup the services are built from the settings, the completion
    state is loaded and the saved directory grant is restored. On shutdown
    the local databases are closed.
    """
    config = load_settings()
    services = Services.create(config)
    services.start()
    app.state.services = services
    logger.info(f"Data directory: {config.data_dir}")
    logger.info("Unslop started")

    try:
        yield
    finally:
        app.state.services = None
        services.close()


app = FastAPI(
    title="Unslop",
    description="Local-first product planning with AI-assisted documents",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
app.include_router(directory.router)
app.include_router(files.router)
app.include_router(downloads.router)
app.include_router(state.router)
app.include_router(product.router)
app.include_router(settings.router)
app.include_router(generate.router)

"""Music library service main application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import Response

from .api.albums import router as albums_router
from .api.artists import router as artists_router
from .api.genres import router as genres_router
from .api.info import router as info_router
from .core.correlation import CorrelationIDMiddleware
from .core.db import engine, init_db
from .core.error_handler import register_exception_handlers
from .core.logging import configure_logging, get_logger
from .core.metrics import METRICS_CONTENT_TYPE, get_metrics
from .core.settings import app_settings

# Configure logging
configure_logging(log_level=app_settings.log_level, log_format=app_settings.log_format)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("music_library_starting", version=app_settings.app_version)
    await init_db()
    logger.info("music_library_started", version=app_settings.app_version)

    yield

    # Shutdown
    logger.info("music_library_shutting_down")
    await engine.dispose()
    logger.info("music_library_shutdown")


# Create FastAPI app
app = FastAPI(
    title=app_settings.app_name,
    version=app_settings.app_version,
    description="CRUD API for a music library of artists, albums and genres",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Correlation ID middleware
app.add_middleware(CorrelationIDMiddleware)

# Register all exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(info_router, prefix=app_settings.api_prefix)
app.include_router(artists_router, prefix=app_settings.api_prefix)
app.include_router(albums_router, prefix=app_settings.api_prefix)
app.include_router(genres_router, prefix=app_settings.api_prefix)


# Prometheus metrics endpoint
@app.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=get_metrics(), media_type=METRICS_CONTENT_TYPE)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=app_settings.host, port=app_settings.port)

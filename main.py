"""
Thumbsmith - Main FastAPI Application
"""

import logging
import os
import signal
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Add parent directory to path
sys.path.append(str(Path(__file__).parent))

from api.exceptions import register_exception_handlers  # noqa: E402

# Import routers  # noqa: E402
from api.routers import image, system  # noqa: E402

# Import configuration  # noqa: E402
from config import build_engine, get_settings  # noqa: E402
from core.constants import SystemConstants  # noqa: E402
from core.image import ImageCodec  # noqa: E402

# Get configuration
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.system.log_level),
    format=SystemConstants.LOG_FORMAT,
)
logger = logging.getLogger(__name__)

# Suppress watchfiles debug messages
logging.getLogger("watchfiles").setLevel(logging.WARNING)
# Pillow logs every plugin it probes at DEBUG
logging.getLogger("PIL").setLevel(logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    # Startup
    logger.info("Starting Thumbsmith server...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.system.debug}")

    codec = ImageCodec(build_engine(settings))

    # Store shared objects in app state for access by routers
    app.state.codec = codec
    app.state.settings = settings
    app.state.config = settings.to_dict()

    logger.info(f"Codec initialized with {codec.version()}")

    yield

    # Shutdown
    logger.info("Server shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Thumbsmith",
    description="Image inspection, resizing and thumbnail generation",
    version="1.0.0",
    lifespan=lifespan,
)

if settings.api.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(image.router, prefix="/api/image", tags=["Image"])
app.include_router(system.router, prefix="/api/system", tags=["System"])


# Root endpoint
@app.get("/")
async def root():
    return {
        "name": "Thumbsmith",
        "status": "running",
        "version": "1.0.0",
        "endpoints": {
            "image": "/api/image",
            "system": "/api/system",
            "docs": "/docs",
        },
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "services": {
            "codec": getattr(app.state, "codec", None) is not None,
        },
    }


# Error handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": f"Internal server error: {str(exc)}"})


def handle_signal(signum, frame):
    """Handle shutdown signals gracefully"""
    logger.info(f"Received signal {signum}, initiating graceful shutdown...")
    raise KeyboardInterrupt


if __name__ == "__main__":
    # Write PID file for process management
    run_dir = os.getenv("RUN_DIR", os.path.join(Path(__file__).parent, "var", "run"))
    pid_file = os.path.join(run_dir, "thumbsmith.pid")

    # Ensure run directory exists
    os.makedirs(run_dir, exist_ok=True)

    # Write PID
    with open(pid_file, "w") as f:
        f.write(str(os.getpid()))
    logger.info(f"PID {os.getpid()} written to {pid_file}")

    # Register signal handlers
    signal.signal(signal.SIGTERM, handle_signal)

    server_config = uvicorn.Config(
        "main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.system.debug,
        log_level=settings.system.log_level.lower(),
        loop="asyncio",
    )

    server = uvicorn.Server(server_config)

    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    finally:
        # Clean up PID file
        try:
            if os.path.exists(pid_file):
                os.remove(pid_file)
                logger.info(f"Removed PID file: {pid_file}")
        except OSError as e:
            logger.warning(f"Failed to remove PID file: {e}")
        logger.info("Server exiting...")

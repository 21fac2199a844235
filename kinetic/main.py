"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kinetic import __version__
from kinetic.api import api_router
from kinetic.config import get_settings
from kinetic.engine import Exercise
from kinetic.services.session_registry import SessionRegistry, get_session_registry

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_DESCRIPTION = """
Live rehabilitation exercise feedback from pose landmarks.

Open a session for an exercise, post one landmark frame at a time and read
back the camera orientation, movement phase and form fault for that frame.
Squats are counted in repetitions and planks in held seconds; any other
exercise is tracked without credit. Finishing a session returns its
duration, reps, average knee angle and form accuracy.
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting {settings.app_name}")
    yield
    registry = get_session_registry()
    if len(registry):
        logger.warning(f"Discarding {len(registry)} unfinished sessions")
    registry.clear()
    logger.info(f"Shutting down {settings.app_name}")


app = FastAPI(
    title=settings.app_name,
    description=API_DESCRIPTION,
    version=__version__,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health")
async def health_check(registry: SessionRegistry = Depends(get_session_registry)):
    """Health check with the number of open sessions."""
    return {
        "status": "healthy",
        "version": __version__,
        "active_sessions": len(registry),
    }


@app.get("/")
async def root():
    """Service index."""
    return {
        "app": settings.app_name,
        "sessions": f"{settings.api_prefix}/sessions",
        "exercises": Exercise.all(),
    }

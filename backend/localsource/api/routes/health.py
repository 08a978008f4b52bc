"""Health check."""

from fastapi import APIRouter

from localsource import __version__
from localsource.config import settings
from localsource.schemas.system import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Lightweight liveness check."""
    return HealthResponse(version=__version__, root_dir=settings.root_dir)


@router.get("/ping")
async def ping():
    """Ultra-lightweight ping."""
    return {"status": "ok"}

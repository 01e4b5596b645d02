from fastapi import APIRouter

from models.stats_models import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness only; the database is not consulted."""
    return HealthResponse()

"""Health check API endpoints."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.accounting import ViewCountFlusher
from ..core.schemas.common import HealthCheckResponse
from ..core.services import HealthService
from ..database import get_db_session
from .dependencies import get_view_flusher

router = APIRouter(prefix="/health", tags=["health"])


def get_health_service(
    session: AsyncSession = Depends(get_db_session),
    flusher: Optional[ViewCountFlusher] = Depends(get_view_flusher),
) -> HealthService:
    return HealthService(session, flusher)


@router.get("/", response_model=HealthCheckResponse)
async def health_check(health_service: HealthService = Depends(get_health_service)):
    """Get overall system health status."""
    return await health_service.get_health_status()


@router.get("/database", response_model=Dict[str, Any])
async def database_health(health_service: HealthService = Depends(get_health_service)):
    """Check database connectivity."""
    return await health_service.check_database_health()


@router.get("/metrics", response_model=Dict[str, Any])
async def system_metrics(health_service: HealthService = Depends(get_health_service)):
    """Get note totals and view accounting stats."""
    return await health_service.get_system_metrics()

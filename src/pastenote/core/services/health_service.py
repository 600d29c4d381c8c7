"""Health service implementation."""

import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ..accounting import ViewCountFlusher
from ..models.note import Note
from ..schemas.common import HealthCheckResponse
from .interfaces import IHealthService

_started_at = time.monotonic()


class HealthService(IHealthService):
    """Health check service implementation."""

    def __init__(self, session: AsyncSession, flusher: Optional[ViewCountFlusher] = None):
        self.session = session
        self.flusher = flusher
        self.settings = get_settings()

    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        db_health = await self.check_database_health()
        accounting = self.check_view_accounting()

        overall_status = "healthy" if db_health["connected"] else "unhealthy"
        if overall_status == "healthy" and accounting["status"] == "unhealthy":
            overall_status = "degraded"

        return HealthCheckResponse(
            status=overall_status,
            version=self.settings.app_version,
            checks={"database": db_health, "view_accounting": accounting},
        )

    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        try:
            start = time.perf_counter()
            result = await self.session.execute(text("SELECT 1"))
            result.scalar()
            response_time = (time.perf_counter() - start) * 1000

            return {
                "connected": True,
                "status": "healthy",
                "response_time_ms": round(response_time, 2),
            }
        except Exception as e:
            return {
                "connected": False,
                "status": "unhealthy",
                "error": str(e),
                "response_time_ms": 0.0,
            }

    def check_view_accounting(self) -> Dict[str, Any]:
        """Report on the background view count flusher."""
        if self.flusher is None:
            return {"status": "disabled"}
        data = self.flusher.snapshot()
        # a failing last flush means views are being dropped right now
        failing = data["consecutive_failures"] > 0
        data["status"] = "unhealthy" if failing or not data["running"] else "healthy"
        return data

    async def get_system_metrics(self) -> Dict[str, Any]:
        """Get system metrics."""
        metrics: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime_seconds": round(time.monotonic() - _started_at, 1),
        }
        try:
            result = await self.session.execute(
                select(func.count(Note.id), func.coalesce(func.sum(Note.views), 0)).where(
                    Note.text != ""
                )
            )
            notes, views = result.one()
            metrics["notes"] = notes
            metrics["stored_views"] = views
        except Exception as e:
            metrics["error"] = str(e)

        if self.flusher is not None:
            metrics["view_accounting"] = self.flusher.snapshot()
        return metrics

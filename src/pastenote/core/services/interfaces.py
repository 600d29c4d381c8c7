"""
Service interfaces for pastenote.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..schemas.common import HealthCheckResponse
from ..schemas.notes import NoteStats, NoteView


class LoadStatus(str, Enum):
    """Outcome of loading a note; the HTTP layer maps it to a status code."""

    OK = "ok"
    NOT_FOUND = "not_found"


class INoteService(ABC):
    """Note service used by the presentation layer."""

    @abstractmethod
    async def load(self, note_id: str) -> Tuple[NoteView, LoadStatus]:
        """Load a note and record one view."""
        pass

    @abstractmethod
    async def save(
        self, note_id: str, text: str, password: str, custom_id: Optional[str] = None
    ) -> NoteView:
        """Create, update or delete a note."""
        pass

    @abstractmethod
    def stats(self, note: NoteView) -> NoteStats:
        """Usage statistics for a loaded note."""
        pass


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        pass

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        pass

    @abstractmethod
    async def get_system_metrics(self) -> Dict[str, Any]:
        """Get system metrics."""
        pass

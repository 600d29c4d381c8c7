"""
Service interfaces and implementations.
"""

from .interfaces import (
    IHealthService,
    INoteService,
    LoadStatus,
)

from .captcha_service import CaptchaService
from .health_service import HealthService
from .note_service import NoteService
from .report_service import ReportService

__all__ = [
    # Interfaces
    "INoteService",
    "IHealthService",
    "LoadStatus",

    # Implementations
    "NoteService",
    "HealthService",
    "CaptchaService",
    "ReportService",
]

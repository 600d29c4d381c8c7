"""
Pydantic schemas for validating and documenting API requests and responses.
"""

from .common import ErrorResponse, HealthCheckResponse
from .notes import (
    NoteEditResponse,
    NoteSaveRequest,
    NoteStats,
    NoteView,
    PageResponse,
    ReportRequest,
    SaveResponse,
)

__all__ = [
    # Note schemas
    "NoteView",
    "NoteSaveRequest",
    "SaveResponse",
    "NoteEditResponse",
    "NoteStats",
    "ReportRequest",
    "PageResponse",
    # Common schemas
    "ErrorResponse",
    "HealthCheckResponse",
]

"""
Database models for pastenote.

Models included:
    - Note: note text, edit password and persisted view count
"""

from .base import BaseModel
from .note import Note

__all__ = [
    "BaseModel",
    "Note",
]

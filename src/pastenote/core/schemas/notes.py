"""
Note schemas.

These define what the HTTP layer exchanges with clients. ``NoteView`` is also
what the note service hands back from ``load``/``save``; its ``ads`` and
``content`` fields are filled per request and never stored.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NoteView(BaseModel):
    """A note as seen by the presentation layer."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default="", description="Note ID")
    text: str = Field(default="", description="Raw markdown text")
    views: int = Field(default=0, ge=0, description="Stored views plus views not flushed yet")
    created_at: Optional[datetime] = Field(default=None, description="Publication time")
    updated_at: Optional[datetime] = Field(default=None, description="Last edit time")

    # render-only
    content: Optional[str] = Field(default=None, description="Rendered HTML body")
    spam: bool = Field(default=False, description="Busy note that is mostly links")
    ads: Optional[str] = Field(default=None, description="HTML shown for suspected spam notes")

    @property
    def edited(self) -> bool:
        return (
            self.created_at is not None
            and self.updated_at is not None
            and self.updated_at > self.created_at
        )


class NoteSaveRequest(BaseModel):
    """Create, update or delete a note.

    An empty ``id`` creates a note (under ``custom_id`` when given); a
    non-empty ``id`` updates it, or deletes it when ``text`` is empty.
    Sending ``custom_id`` together with ``id`` is rejected with 400.
    """

    id: str = Field(default="", max_length=64, description="ID of the note to change")
    text: str = Field(default="", description="Note text, empty to delete")
    password: str = Field(default="", max_length=255, description="Edit password")
    custom_id: Optional[str] = Field(default=None, max_length=64, description="Requested ID for a new note")
    tos: bool = Field(default=False, description="Terms of service accepted")
    token: str = Field(default="", description="reCAPTCHA response token")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "",
                "text": "# Shopping list\n\n- milk\n- bread",
                "password": "hunter2",
                "tos": True,
                "token": "03AGdBq24...",
            }
        }
    )


class SaveResponse(BaseModel):
    """Outcome of a save; ``payload`` is the note ID or an error message."""

    success: bool
    payload: str


class NoteEditResponse(BaseModel):
    id: str
    text: str


class NoteStats(BaseModel):
    """Usage statistics of a single note."""

    id: str
    views: int
    published: Optional[datetime] = None
    edited: Optional[datetime] = None


class ReportRequest(BaseModel):
    report: str = Field(default="", max_length=5000, description="Why the note is abusive")


class PageResponse(BaseModel):
    """Static markdown page rendered to HTML."""

    name: str
    content: str

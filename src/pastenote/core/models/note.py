# Note model - one row per note ID
from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class Note(BaseModel):
    """Anonymous text note.

    An empty ``text`` marks a deleted note (tombstone). The row is kept so
    the ID is not handed out again, but every read treats it as missing.
    """

    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # stored verbatim, empty means anyone may edit
    password: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("views >= 0", name="ck_notes_views_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id!r}, views={self.views}, deleted={self.is_deleted})>"

    @property
    def is_deleted(self) -> bool:
        return self.text == ""

    @property
    def is_protected(self) -> bool:
        return self.password != ""

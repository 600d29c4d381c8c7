"""Input rules shared by the repository and the HTTP layer."""

import re
import secrets
import string
from typing import Optional

from ..config import get_settings
from .exceptions import NoteBadRequestError

NOTE_ID_LENGTH = 8
NOTE_ID_ALPHABET = string.ascii_lowercase + string.digits
NOTE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{3,64}$")
# path segments the routing layer already uses
RESERVED_NOTE_IDS = frozenset({"new", "api", "health", "tos"})


def text_length_ok(text: str, min_length: Optional[int] = None, max_length: Optional[int] = None) -> bool:
    """True for empty text or a length inside [min_length, max_length]."""
    settings = get_settings()
    min_length = settings.min_text_length if min_length is None else min_length
    max_length = settings.max_text_length if max_length is None else max_length
    length = len(text)
    return length == 0 or min_length <= length <= max_length


def validate_text(text: str, min_length: Optional[int] = None, max_length: Optional[int] = None) -> str:
    if not text_length_ok(text, min_length, max_length):
        raise NoteBadRequestError(
            "note length not accepted", {"length": len(text)}
        )
    return text


def validate_note_id(note_id: str) -> str:
    """Check a caller-supplied note ID."""
    if not NOTE_ID_PATTERN.match(note_id) or note_id.lower() in RESERVED_NOTE_IDS:
        raise NoteBadRequestError("note id not accepted", {"note_id": note_id})
    return note_id


def generate_note_id(length: int = NOTE_ID_LENGTH) -> str:
    return "".join(secrets.choice(NOTE_ID_ALPHABET) for _ in range(length))

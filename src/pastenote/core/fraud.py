"""Link-density spam check applied when a note is displayed."""

import math
import re
from typing import Optional, Protocol

from ..config import get_settings

# markdown links and bare URLs
LINK_PATTERN = re.compile(
    r"\[[^\]]*\]\([^)]*\)|(?:https?|ftp)://[^\s)\]]+",
    re.IGNORECASE,
)


class HasTextAndViews(Protocol):
    text: str
    views: int


def link_percentage(text: str) -> int:
    """Share of ``text`` (in percent, rounded up) taken by links."""
    if not text:
        return 0
    stripped = LINK_PATTERN.sub("", text)
    return math.ceil(100 * (len(text) - len(stripped)) / len(text))


def is_fraudulent(
    note: HasTextAndViews,
    view_threshold: Optional[int] = None,
    percent_threshold: Optional[int] = None,
) -> bool:
    """Flag busy notes that are mostly links.

    Only notes with more than ``view_threshold`` views are checked. The result
    is advisory: callers swap in other content but never block the note.
    """
    settings = get_settings()
    if view_threshold is None:
        view_threshold = settings.fraud_view_threshold
    if percent_threshold is None:
        percent_threshold = settings.fraud_link_percent_threshold

    if note.views <= view_threshold or not note.text:
        return False
    return link_percentage(note.text) > percent_threshold

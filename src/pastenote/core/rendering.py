"""Markdown to sanitized HTML."""

from pathlib import Path
from typing import Optional

import bleach
from bleach.callbacks import nofollow
import markdown as md

from .logging import get_logger

logger = get_logger("rendering")

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "toc", "sane_lists"]

ALLOWED_TAGS = [
    "a", "p", "br", "hr",
    "strong", "em", "del", "code", "pre", "blockquote",
    "ul", "ol", "li",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "table", "thead", "tbody", "tr", "th", "td",
    "img",
]

ALLOWED_ATTRS = {
    "a": ["href", "title", "rel"],
    "img": ["src", "alt", "title"],
    "th": ["align"], "td": ["align"],
    # anchors from the toc extension
    "h1": ["id"], "h2": ["id"], "h3": ["id"],
    "h4": ["id"], "h5": ["id"], "h6": ["id"],
}

ALLOWED_PROTOCOLS = ["http", "https", "mailto"]


def render_markdown(text: str) -> str:
    """Render note markdown; raw HTML and script URLs are stripped."""
    rendered = md.markdown(text, extensions=MARKDOWN_EXTENSIONS)
    cleaned = bleach.clean(
        rendered,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRS,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )
    # notes are user content; don't pass page rank to their links
    return bleach.linkify(cleaned, callbacks=[nofollow])


def load_markdown_file(path: Optional[str]) -> Optional[str]:
    """Read and render a markdown file, ``None`` when unset or unreadable."""
    if not path:
        return None
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"couldn't read file {path}: {e}")
        return None
    return render_markdown(text)

"""Text helpers for the terminal view: relative times and plain-text summaries."""

import html
import re
import time
from datetime import datetime

_HIDDEN = re.compile(r"<(script|style)\b.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_BREAKS = re.compile(r"<(?:br|/?p|/?div|/?li|/?h[1-6])\b[^>]*>", re.IGNORECASE)
_TAGS = re.compile(r"<[^>]+>")
_SPACE = re.compile(r"\s+")


def time_ago(updated: datetime | None) -> str:
    """Convert an aware timestamp to a human-readable 'time ago' format."""
    if updated is None:
        return ""
    diff = time.time() - updated.timestamp()

    if diff < 60:
        return "just now"
    elif diff < 3600:
        mins = int(diff / 60)
        return f"{mins}m ago"
    elif diff < 86400:
        hours = int(diff / 3600)
        return f"{hours}h ago"
    else:
        days = int(diff / 86400)
        return f"{days}d ago"


def sanitize_html(text: str | None) -> str:
    """Reduce a feed summary to one line of plain text.

    Tags are removed before entities are decoded, so escaped markup such as
    ``&lt;b&gt;`` survives as literal text. Block-level tags become spaces.
    """
    if not text:
        return ""
    text = _HIDDEN.sub("", text)
    text = _BREAKS.sub(" ", text)
    text = html.unescape(_TAGS.sub("", text))
    return _SPACE.sub(" ", text).strip()


def truncate(text: str, max_len: int = 200) -> str:
    """Shorten text to at most max_len characters, ending in an ellipsis.

    Keeps whole words where it can and cuts mid-word only when the first word
    alone is too long.
    """
    if len(text) <= max_len:
        return text
    head = text[: max_len - 1]
    if not text[max_len - 1].isspace():
        cut = head.rfind(" ")
        if cut > 0:
            head = head[:cut]
    return head.rstrip(" ,;:") + "…"

"""Turning fetched bytes into Feed objects.

feedparser does the heavy lifting for both formats; each deserializer only
accepts the format it is named after, so they can be chained with
FallbackDeserializer.
"""

import calendar
import io
import logging
import time
from datetime import datetime, timezone
from typing import Protocol, Sequence

import feedparser

from feedmerge.errors import MalformedFeedError
from feedmerge.models import UNKNOWN_AUTHOR, Entry, Feed
from feedmerge.utils import sanitize_html

logger = logging.getLogger(__name__)


class Deserializer(Protocol):
    def parse(self, data: bytes) -> Feed:
        """Return the Feed encoded in ``data`` or raise MalformedFeedError."""
        ...


def to_datetime(value: time.struct_time) -> datetime:
    """Convert a feedparser (UTC) struct_time to an aware datetime."""
    return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)


def _self_link(meta) -> str | None:
    for link in meta.get("links", []):
        if link.get("rel") == "self" and link.get("href"):
            return link["href"]
    return meta.get("link") or None


def _author(meta) -> str:
    detail = meta.get("author_detail") or {}
    return detail.get("name") or meta.get("author") or UNKNOWN_AUTHOR


def _to_entry(item, kind: str, date_fields: Sequence[str]) -> Entry:
    link = item.get("link", "")
    entry_id = item.get("id") or link
    if not entry_id:
        raise MalformedFeedError(f"{kind} entry {item.get('title', '')!r} has neither id nor link")

    stamp = next((item[field] for field in date_fields if item.get(field)), None)
    if stamp is None:
        raise MalformedFeedError(f"{kind} entry {entry_id!r} has no usable date")

    return Entry(
        title=item.get("title", ""),
        link=link,
        id=entry_id,
        updated=to_datetime(stamp),
        summary=sanitize_html(item.get("summary") or item.get("description")),
    )


class _FeedparserDeserializer:
    kind = ""
    version_prefix = ""
    date_fields: tuple[str, ...] = ()

    def parse(self, data: bytes) -> Feed:
        parsed = feedparser.parse(io.BytesIO(data))
        version = parsed.get("version", "")
        if not version.startswith(self.version_prefix):
            reason = parsed.get("bozo_exception") or f"detected format {version or 'unknown'!r}"
            raise MalformedFeedError(f"Not a valid {self.kind} document: {reason}")

        meta = parsed.feed
        title = meta.get("title", "")
        link = _self_link(meta)
        if not link:
            raise MalformedFeedError(f"{self.kind} feed {title!r} has no link")

        entries = [_to_entry(item, self.kind, self.date_fields) for item in parsed.entries]
        return Feed(
            title=title,
            link=link,
            id=meta.get("id") or title,
            author_name=_author(meta),
            entries=tuple(entries),
        )


class RssDeserializer(_FeedparserDeserializer):
    kind = "RSS"
    version_prefix = "rss"
    date_fields = ("published_parsed", "updated_parsed")


class AtomDeserializer(_FeedparserDeserializer):
    kind = "Atom"
    version_prefix = "atom"
    # <updated> is mandatory in Atom; <published> is optional.
    date_fields = ("updated_parsed", "published_parsed")


class FallbackDeserializer:
    """Try each deserializer in order; the first success wins."""

    def __init__(self, deserializers: Sequence[Deserializer]):
        self.deserializers = list(deserializers)

    def parse(self, data: bytes) -> Feed:
        if not self.deserializers:
            raise MalformedFeedError("No deserializers configured")

        last_error: MalformedFeedError | None = None
        for deserializer in self.deserializers:
            try:
                return deserializer.parse(data)
            except MalformedFeedError as exc:
                logger.debug("%s rejected document: %s", type(deserializer).__name__, exc)
                last_error = exc

        last_error.add_note(f"All {len(self.deserializers)} deserializers failed")
        raise last_error


def default_deserializer() -> FallbackDeserializer:
    return FallbackDeserializer([RssDeserializer(), AtomDeserializer()])

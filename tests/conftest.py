"""Shared fixtures for feedmerge tests."""

import asyncio
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import pytest

from feedmerge.errors import NetworkError
from feedmerge.models import Entry, Feed

BASE_TIME = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)

RSS_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <title>{title}</title>
    <link>{site}</link>
    <atom:link href="{self_link}" rel="self" type="application/rss+xml"/>
    <description>Test channel</description>
    {items}
  </channel>
</rss>"""

RSS_ITEM = """<item>
  <title>{title}</title>
  <link>{link}</link>
  <guid>{guid}</guid>
  <description>{description}</description>
  <pubDate>{pubdate}</pubDate>
</item>"""

ATOM_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>{title}</title>
  <id>{feed_id}</id>
  <updated>2024-06-15T12:00:00Z</updated>
  <link rel="self" type="application/atom+xml" href="{self_link}"/>
  <author><name>{author}</name></author>
  {entries}
</feed>"""

ATOM_ENTRY = """<entry>
  <title>{title}</title>
  <id>{entry_id}</id>
  <link rel="alternate" href="{link}"/>
  <updated>{updated}</updated>
  <summary>{summary}</summary>
</entry>"""


def make_rss(title, items, self_link="https://example.com/feed.xml"):
    """Build RSS 2.0 bytes from (title, link, description, datetime) tuples."""
    rendered = [
        RSS_ITEM.format(
            title=item_title,
            link=link,
            guid=link,
            description=desc,
            pubdate=format_datetime(when),
        )
        for item_title, link, desc, when in items
    ]
    return RSS_TEMPLATE.format(
        title=title,
        site="https://example.com/",
        self_link=self_link,
        items="\n".join(rendered),
    ).encode()


def make_atom(title, entries, self_link="https://example.com/atom.xml", author="Jane"):
    """Build Atom 1.0 bytes from (title, id, link, summary, datetime) tuples."""
    rendered = [
        ATOM_ENTRY.format(
            title=entry_title,
            entry_id=entry_id,
            link=link,
            summary=summary,
            updated=when.isoformat(),
        )
        for entry_title, entry_id, link, summary, when in entries
    ]
    return ATOM_TEMPLATE.format(
        title=title,
        feed_id=f"urn:feed:{title}",
        self_link=self_link,
        author=author,
        entries="\n".join(rendered),
    ).encode()


class FakeFetcher:
    """In-memory Fetcher: url -> bytes, or an exception to raise."""

    def __init__(self, responses, delays=None):
        self.responses = dict(responses)
        self.delays = dict(delays or {})
        self.calls: list[str] = []

    async def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        await asyncio.sleep(self.delays.get(url, 0))
        result = self.responses.get(url)
        if result is None:
            raise NetworkError(url, "no such host")
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture()
def fake_fetcher():
    """Factory fixture: FakeFetcher(responses, delays=None)."""
    return FakeFetcher


@pytest.fixture()
def make_entry():
    """Factory fixture: an Entry offset ``hours`` before BASE_TIME."""

    def _make(title: str, hours: float = 0, **kwargs) -> Entry:
        slug = title.lower().replace(" ", "-")
        return Entry(
            title=title,
            link=kwargs.pop("link", f"https://example.com/{slug}"),
            id=kwargs.pop("id", f"urn:entry:{slug}"),
            updated=kwargs.pop("updated", BASE_TIME - timedelta(hours=hours)),
            summary=kwargs.pop("summary", f"About {title}."),
        )

    return _make


@pytest.fixture()
def make_feed():
    """Factory fixture: a Feed with the given title and entries."""

    def _make(title: str, entries=()) -> Feed:
        slug = title.lower().replace(" ", "-")
        return Feed(
            title=title,
            link=f"https://{slug}.example.com/feed.xml",
            id=f"urn:feed:{slug}",
            author_name=f"{title} Author",
            entries=tuple(entries),
        )

    return _make


@pytest.fixture()
def base_time():
    return BASE_TIME


@pytest.fixture()
def rss_doc():
    """The make_rss builder."""
    return make_rss


@pytest.fixture()
def atom_doc():
    """The make_atom builder."""
    return make_atom

"""Feed and entry value objects, and the merge that combines them."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

UNKNOWN_AUTHOR = "Unknown"
TITLE_SEPARATOR = " + "


@dataclass(frozen=True)
class Entry:
    """One item (post, article, video) of a feed."""

    title: str
    link: str
    id: str
    updated: datetime
    summary: str = ""

    def __post_init__(self) -> None:
        if self.updated.tzinfo is None:
            raise ValueError(f"Entry {self.id!r} has a naive 'updated' timestamp")


@dataclass(frozen=True)
class Feed:
    """Feed metadata plus its entries, in order."""

    title: str
    link: str
    id: str
    author_name: str = UNKNOWN_AUTHOR
    entries: tuple[Entry, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any iterable but always store a tuple.
        object.__setattr__(self, "entries", tuple(self.entries))


def merge_feeds(
    feeds: Iterable[Feed],
    *,
    id: str,
    link: str,
    author_name: str = UNKNOWN_AUTHOR,
) -> Feed:
    """Combine feeds into one, newest entries first.

    Entries are concatenated in input order and then stably sorted by
    ``updated`` descending, so entries with equal timestamps keep their
    feed order and then their original position. The title joins the input
    titles with ``" + "``; identity fields come from the caller.
    """
    feeds = list(feeds)
    title = TITLE_SEPARATOR.join(feed.title for feed in feeds)
    entries = [entry for feed in feeds for entry in feed.entries]
    entries.sort(key=lambda e: e.updated, reverse=True)
    return Feed(
        title=title,
        link=link,
        id=id,
        author_name=author_name,
        entries=tuple(entries),
    )

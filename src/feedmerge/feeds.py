"""Category registry — maps category names to ordered source feed URLs."""

from dataclasses import dataclass
from typing import Iterable, Mapping

import httpx

from feedmerge.errors import InvalidConfigError

CATEGORIES: dict[str, list[str]] = {
    "world": [
        "https://feeds.bbci.co.uk/news/world/rss.xml",
        "https://feeds.npr.org/1004/rss.xml",
        "https://rss.nytimes.com/services/xml/rss/nyt/World.xml",
    ],
    "technology": [
        "https://feeds.arstechnica.com/arstechnica/index",
        "https://www.theverge.com/rss/index.xml",
        "https://hnrss.org/frontpage",
    ],
    "science": [
        "https://www.nasa.gov/feed/",
        "https://feeds.arstechnica.com/arstechnica/science",
        "https://www.quantamagazine.org/feed/",
    ],
    "python": [
        "https://blog.python.org/feeds/posts/default",
        "https://pyfound.blogspot.com/feeds/posts/default",
        "https://realpython.com/atom.xml",
    ],
    "comedy": [
        "https://xkcd.com/atom.xml",
        "https://www.smbc-comics.com/comic/rss",
    ],
}

# Short aliases for CLI convenience
ALIASES: dict[str, str] = {
    "tech": "technology",
    "sci": "science",
    "py": "python",
    "lol": "comedy",
}

CATEGORY_COLORS: dict[str, str] = {
    "world": "bright_red",
    "technology": "bright_cyan",
    "science": "bright_magenta",
    "python": "bright_yellow",
    "comedy": "bright_green",
}


def validate_url(url: str) -> str:
    """Return ``url`` if it is an absolute http(s) URL, else raise ValueError."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ValueError(str(exc)) from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ValueError("expected an absolute http(s) URL")
    return url


@dataclass(frozen=True)
class Category:
    """A named, ordered set of source feed URLs."""

    name: str
    urls: tuple[str, ...]

    @classmethod
    def from_urls(cls, name: str, urls: Iterable[str]) -> "Category":
        checked = []
        for url in urls:
            try:
                checked.append(validate_url(url))
            except ValueError as exc:
                raise InvalidConfigError(
                    f"Invalid URL {url!r} in category {name!r}: {exc}"
                ) from exc
        return cls(name=name, urls=tuple(checked))


def build_categories(config: Mapping[str, Iterable[str]]) -> dict[str, Category]:
    """Validate a name -> URLs mapping, failing on the first bad URL."""
    return {name: Category.from_urls(name, urls) for name, urls in config.items()}


def resolve_category(name: str, known: Iterable[str] | None = None) -> str | None:
    """Resolve a category name or alias to a canonical category name."""
    known = set(CATEGORIES if known is None else known)
    name = name.lower().strip()
    if name in known:
        return name
    target = ALIASES.get(name)
    return target if target in known else None

"""Per-category fan-out fetch, parse and merge."""

import asyncio
import logging
from typing import Mapping

from feedmerge.errors import NotFoundError
from feedmerge.feeds import Category
from feedmerge.fetcher import Fetcher
from feedmerge.models import UNKNOWN_AUTHOR, Feed, merge_feeds
from feedmerge.parsing import Deserializer, default_deserializer

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080"


class CategoryAggregator:
    """Build one merged feed per configured category.

    Every source of a category is fetched and parsed concurrently. Sources
    that fail are logged and left out; only an unknown category name is an
    error. The category map is never mutated after construction.
    """

    def __init__(
        self,
        categories: Mapping[str, Category],
        fetcher: Fetcher,
        deserializer: Deserializer | None = None,
        base_url: str = DEFAULT_BASE_URL,
    ):
        self.categories = dict(categories)
        self.fetcher = fetcher
        self.deserializer = deserializer or default_deserializer()
        self.base_url = base_url.rstrip("/")

    def category_link(self, name: str) -> str:
        return f"{self.base_url}/feeds/{name}/atom.xml"

    async def _fetch_source(self, url: str) -> Feed:
        data = await self.fetcher.fetch(url)
        return await asyncio.to_thread(self.deserializer.parse, data)

    async def feed_by_category(self, name: str) -> Feed:
        category = self.categories.get(name)
        if category is None:
            raise NotFoundError(name)

        # gather keeps results in source order, whatever order they finish in.
        results = await asyncio.gather(
            *(self._fetch_source(url) for url in category.urls),
            return_exceptions=True,
        )

        feeds: list[Feed] = []
        for url, result in zip(category.urls, results):
            if isinstance(result, Feed):
                feeds.append(result)
            elif isinstance(result, Exception):
                logger.warning(
                    "Dropping source %s from category %r: %s", url, name, result
                )
            else:
                raise result

        merged = merge_feeds(
            feeds,
            id=name,
            link=self.category_link(name),
            author_name=UNKNOWN_AUTHOR,
        )
        logger.info(
            "Category %r: %d/%d sources, %d entries",
            name,
            len(feeds),
            len(category.urls),
            len(merged.entries),
        )
        return merged

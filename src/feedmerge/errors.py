"""Exception hierarchy shared by the fetch, parse and aggregation layers."""


class FeedError(Exception):
    """Base class for every error raised by feedmerge."""


class NotFoundError(FeedError):
    """A category name that is not configured was requested."""

    def __init__(self, name: str):
        super().__init__(f"Unknown category: {name}")
        self.name = name


class NetworkError(FeedError):
    """Fetching a source failed at the transport or HTTP level."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url


class MalformedFeedError(FeedError):
    """Fetched bytes could not be turned into a feed."""


class InvalidConfigError(FeedError):
    """Category configuration holds something that is not a usable URL."""

"""Optional user configuration from ~/.config/feedmerge/config.toml."""

import copy
import logging
import tomllib
from pathlib import Path

from feedmerge.aggregator import DEFAULT_BASE_URL
from feedmerge.cache import DEFAULT_TTL
from feedmerge.errors import InvalidConfigError
from feedmerge.feeds import CATEGORIES
from feedmerge.fetcher import DEFAULT_TIMEOUT
from feedmerge.log import DEFAULT_LEVEL, LOG_LEVELS

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".config" / "feedmerge" / "config.toml"

DEFAULTS = {
    "cache_ttl": DEFAULT_TTL,
    "fetch_timeout": DEFAULT_TIMEOUT,
    "base_url": DEFAULT_BASE_URL,
    "limit": 10,
    "show_desc": True,
    "watch_interval": 300,
    "log_level": DEFAULT_LEVEL,
    "categories": CATEGORIES,
}


def load(path: Path | None = None) -> dict:
    """Load user config, falling back to defaults for missing keys.

    A ``[categories]`` table replaces the built-in registry wholesale.
    """
    config = copy.deepcopy(DEFAULTS)
    path = path or CONFIG_PATH
    if path.exists():
        try:
            user_config = tomllib.loads(path.read_text())
        except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", path, exc)
        else:
            config.update(user_config)
    return config


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate(config: dict) -> None:
    """Raise InvalidConfigError naming the first setting with a wrong type or range."""
    ttl = config["cache_ttl"]
    if not _is_number(ttl) or ttl < 0:
        raise InvalidConfigError(f"cache_ttl must be a number of seconds, zero or more, got {ttl!r}")
    for key in ("fetch_timeout", "watch_interval"):
        if not _is_number(config[key]) or config[key] <= 0:
            raise InvalidConfigError(f"{key} must be a positive number of seconds, got {config[key]!r}")

    limit = config["limit"]
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
        raise InvalidConfigError(f"limit must be a positive integer, got {limit!r}")

    if not isinstance(config["show_desc"], bool):
        raise InvalidConfigError(f"show_desc must be true or false, got {config['show_desc']!r}")
    if not isinstance(config["base_url"], str):
        raise InvalidConfigError(f"base_url must be a string, got {config['base_url']!r}")
    level = config["log_level"]
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise InvalidConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {level!r}")

    categories = config["categories"]
    if not isinstance(categories, dict):
        raise InvalidConfigError("categories must be a table of name = [urls]")
    for name, urls in categories.items():
        if not isinstance(urls, list) or not all(isinstance(url, str) for url in urls):
            raise InvalidConfigError(f"Category {name!r} must be a list of URL strings")

"""Rich terminal display — one color-coded panel per merged category feed."""

from typing import Sequence
from urllib.parse import urlparse

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from feedmerge.feeds import ALIASES, CATEGORY_COLORS
from feedmerge.models import Entry, Feed
from feedmerge.utils import time_ago, truncate

console = Console()


def _host(link: str) -> str:
    host = urlparse(link).netloc
    return host.removeprefix("www.")


def display_category(
    category: str,
    entries: Sequence[Entry],
    show_desc: bool = True,
    number_offset: int = 0,
) -> int:
    """Display a single category as a Rich panel. Returns count of entries shown."""
    if not entries:
        return 0

    color = CATEGORY_COLORS.get(category, "white")

    table = Table(
        show_header=False,
        box=None,
        padding=(0, 1),
        expand=True,
    )
    table.add_column("#", style="dim", width=4, justify="right")
    table.add_column("Entry", ratio=1)
    table.add_column("Site", style="dim", width=22, justify="right")
    table.add_column("Time", style="dim", width=8, justify="right")

    for i, entry in enumerate(entries):
        title = Text(entry.title or entry.link, style=f"bold {color}")
        if show_desc and entry.summary:
            title.append(f"\n{truncate(entry.summary, 120)}", style="dim")
        table.add_row(str(number_offset + i + 1), title, _host(entry.link), time_ago(entry.updated))

    panel = Panel(
        table,
        title=f"[bold {color}]{category.upper()}[/bold {color}]",
        border_style=color,
        padding=(0, 1),
    )
    console.print(panel)
    return len(entries)


def display_all(
    feeds: dict[str, Feed],
    show_desc: bool = True,
    limit: int | None = None,
) -> list[Entry]:
    """Display every merged feed. Returns the flat list of shown entries for --open."""
    shown: list[Entry] = []
    for category, feed in feeds.items():
        entries = list(feed.entries[:limit])
        display_category(category, entries, show_desc, number_offset=len(shown))
        shown.extend(entries)
    return shown


def display_categories_list(categories: dict[str, Sequence[str]]) -> None:
    """Show available categories with their colors and source counts."""
    console.print("\n[bold]Available categories:[/bold]\n")
    for cat, urls in categories.items():
        color = CATEGORY_COLORS.get(cat, "white")
        console.print(f"  [{color}]●[/{color}] {cat} [dim]({len(urls)} sources)[/dim]")
    console.print()
    aliases = ", ".join(alias for alias, target in ALIASES.items() if target in categories)
    if aliases:
        console.print(f"[dim]Aliases: {aliases}[/dim]\n")

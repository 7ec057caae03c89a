"""CLI entry point — Click command, flags, watch mode, XML output, open-in-browser."""

import asyncio
import webbrowser
from pathlib import Path

import click

from feedmerge import config as cfg
from feedmerge.aggregator import CategoryAggregator
from feedmerge.cache import ExpiringCache
from feedmerge.display import console, display_all, display_categories_list
from feedmerge.errors import InvalidConfigError
from feedmerge.feeds import Category, build_categories, resolve_category
from feedmerge.fetcher import CachingFetcher, HttpFetcher
from feedmerge.log import LOG_LEVELS, configure_logging
from feedmerge.models import Entry, Feed
from feedmerge.serialization import to_atom_xml


async def _pause(seconds: float) -> None:
    await asyncio.sleep(seconds)


async def collect(aggregator: CategoryAggregator, names: list[str]) -> dict[str, Feed]:
    """Merge several categories concurrently; they share the aggregator's cache."""
    feeds = await asyncio.gather(*(aggregator.feed_by_category(name) for name in names))
    return dict(zip(names, feeds))


def _open_entry(entries: list[Entry], open_num: int) -> None:
    if 1 <= open_num <= len(entries):
        url = entries[open_num - 1].link
        if url:
            console.print(f"\n[dim]Opening entry #{open_num} in browser…[/dim]")
            webbrowser.open(url)
        else:
            console.print(f"[red]Entry #{open_num} has no URL.[/red]")
    else:
        console.print(f"[red]Invalid entry number: {open_num} (1-{len(entries)})[/red]")


async def _run(
    categories: dict[str, Category],
    targets: list[str],
    settings: dict,
    *,
    as_xml: bool,
    show_desc: bool,
    limit: int,
    watch: bool,
    interval: int,
    open_num: int | None,
) -> None:
    cache: ExpiringCache[str, bytes] = ExpiringCache(ttl=settings["cache_ttl"])
    timeout = settings["fetch_timeout"]

    async with HttpFetcher(timeout=timeout) as http:
        aggregator = CategoryAggregator(
            categories,
            CachingFetcher(http, cache, timeout=timeout),
            base_url=settings["base_url"],
        )
        while True:
            feeds = await collect(aggregator, targets)

            if as_xml:
                click.echo(to_atom_xml(feeds[targets[0]]))
                shown = list(feeds[targets[0]].entries)
            else:
                if watch:
                    console.clear()
                console.print("[bold]📰 feedmerge[/bold] [dim]— merged category feeds[/dim]\n")
                shown = display_all(feeds, show_desc, limit)
                if not shown:
                    console.print("[dim]No entries available right now.[/dim]")

            if open_num is not None:
                _open_entry(shown, open_num)
                return
            if not watch:
                return

            console.print(f"\n[dim]Refreshing in {interval}s… (Ctrl+C to quit)[/dim]")
            await _pause(interval)


@click.command()
@click.argument("category", required=False, default=None)
@click.option("--xml", "as_xml", is_flag=True, help="Print the merged Atom XML for CATEGORY.")
@click.option("--limit", "-l", default=None, type=int, help="Entries shown per category.")
@click.option("--no-desc", is_flag=True, help="Headlines only, hide summaries.")
@click.option("--watch", "-w", is_flag=True, help="Auto-refresh periodically.")
@click.option("--interval", "-i", default=None, type=int, help="Watch refresh interval in seconds.")
@click.option("--list-categories", is_flag=True, help="Show available categories.")
@click.option("--open", "open_num", default=None, type=int, help="Open Nth entry in browser.")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: ~/.config/feedmerge/config.toml).",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Log verbosity on stderr.",
)
def main(
    category: str | None,
    as_xml: bool,
    limit: int | None,
    no_desc: bool,
    watch: bool,
    interval: int | None,
    list_categories: bool,
    open_num: int | None,
    config_path: Path | None,
    log_level: str | None,
) -> None:
    """Merge RSS/Atom sources into one feed per category."""
    settings = cfg.load(config_path)
    try:
        cfg.validate(settings)
        categories = build_categories(settings["categories"])
    except InvalidConfigError as exc:
        console.print(f"[red]{exc}[/red]")
        raise SystemExit(1)

    configure_logging(log_level or settings["log_level"])

    if list_categories:
        display_categories_list({name: cat.urls for name, cat in categories.items()})
        return

    if category:
        resolved = resolve_category(category, categories)
        if resolved is None:
            console.print(f"[red]Unknown category: {category}[/red]")
            console.print("[dim]Use --list-categories to see available options.[/dim]")
            raise SystemExit(1)
        targets = [resolved]
    elif as_xml:
        raise click.UsageError("--xml needs a CATEGORY")
    else:
        targets = list(categories)

    try:
        asyncio.run(
            _run(
                categories,
                targets,
                settings,
                as_xml=as_xml,
                show_desc=(not no_desc) and settings["show_desc"],
                limit=limit or settings["limit"],
                watch=watch,
                interval=interval or settings["watch_interval"],
                open_num=open_num,
            )
        )
    except KeyboardInterrupt:
        console.print("\n[dim]Goodbye![/dim]")

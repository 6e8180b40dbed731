"""CLI command for sampling the void feed."""
import asyncio
import json
import random
from functools import wraps
from pathlib import Path
from typing import List, Optional

import click
import structlog

from void_feed.config import BackendConfig, FeedConfig
from void_feed.core.errors import ConfigurationError
from void_feed.core.session import FeedSession
from void_feed.gateway import RestClient, RestContentStore, RestIdentityResolver, load_fixture
from void_feed.metrics import start_metrics_server
from void_feed.models import EnrichedItem
from void_feed.sampling import SamplingEngine

logger = structlog.get_logger(__name__)


def async_command(f):
    """Decorator to run async Click commands."""

    @click.pass_context
    @wraps(f)
    def wrapper(ctx, *args, **kwargs):
        return asyncio.run(f(ctx, *args, **kwargs))

    return wrapper


def format_item(entry: EnrichedItem, page: int, output_format: str) -> str:
    """Render one feed entry for the terminal."""
    item = entry.item
    if output_format == "json":
        return json.dumps(
            {
                "page": page,
                "id": item.id,
                "title": item.title,
                "author": entry.author_label,
                "avatar": entry.author.avatar_ref if entry.author else None,
                "excerpt": entry.excerpt(),
                "tags": item.tags,
                "duration": item.duration_seconds,
                "media_ref": item.media_ref,
                "likes": item.like_count,
                "views": item.view_count,
                "created_at": item.created_at.isoformat(),
            }
        )
    tags = f" [{', '.join(item.tags)}]" if item.tags else ""
    return (
        f"{page:>3}  {item.title or '(untitled)'} by {entry.author_label}"
        f" ({item.duration_seconds:.0f}s){tags}\n     {entry.excerpt()}"
    )


@click.command("sample")
@click.option("--base-url", envvar="VOID_FEED_BASE_URL", help="REST API root of the backend")
@click.option("--api-key", envvar="VOID_FEED_API_KEY", help="Backend API key")
@click.option(
    "--fixture",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON fixture to sample from instead of the backend",
)
@click.option(
    "--page-size", envvar="VOID_FEED_PAGE_SIZE", default=20, type=click.IntRange(min=1)
)
@click.option("--pages", default=1, type=click.IntRange(min=1), help="Number of pages to load")
@click.option("--oversample-factor", default=2.0, type=float, help="Candidates fetched per page slot")
@click.option("--visibility", default="void", help="Visibility mode of discoverable items")
@click.option("--seed", type=int, help="Seed for reproducible shuffles")
@click.option(
    "--format", "output_format", type=click.Choice(["text", "json"]), default="text"
)
@click.option("--metrics-port", type=int, help="Expose Prometheus metrics on this port")
@async_command
async def sample(
    ctx,
    base_url: Optional[str],
    api_key: Optional[str],
    fixture: Optional[Path],
    page_size: int,
    pages: int,
    oversample_factor: float,
    visibility: str,
    seed: Optional[int],
    output_format: str,
    metrics_port: Optional[int],
):
    """Load pages from the void feed and print them."""
    try:
        feed_config = FeedConfig(
            page_size=page_size, oversample_factor=oversample_factor, visibility_mode=visibility
        )
    except ConfigurationError as e:
        raise click.BadParameter(e.message)

    client = None
    if fixture is not None:
        store, resolver = load_fixture(fixture)
    elif base_url and api_key:
        client = RestClient(BackendConfig(base_url=base_url, api_key=api_key))
        store, resolver = RestContentStore(client), RestIdentityResolver(client)
    else:
        raise click.UsageError("Provide --fixture or both --base-url and --api-key")

    if metrics_port:
        start_metrics_server(metrics_port)
        logger.info("Metrics server started", port=metrics_port)

    engine = SamplingEngine(store, resolver, feed_config, rng=random.Random(seed))
    session = FeedSession(engine)
    failed = False
    try:
        shown = 0
        for page in range(1, pages + 1):
            ok = await (session.initialize() if page == 1 else session.load_more())
            if not ok:
                click.echo(f"Error: {session.last_error}", err=True)
                failed = True
                break
            new_items: List[EnrichedItem] = session.items[shown:]
            shown = len(session.items)
            if not new_items:
                click.echo("The feed is empty", err=True)
                break
            for entry in new_items:
                click.echo(format_item(entry, page, output_format))
    finally:
        await session.close()
        if client is not None:
            await client.close()

    if failed:
        ctx.exit(1)

"""
Command-line interface for disaster-feed.

Usage:
    disaster-feed serve                       # Run the API server
    disaster-feed sources                     # List official update sources
    disaster-feed official-updates 42         # Print an official updates envelope
    disaster-feed social-reports 42           # Print a social reports envelope
"""

import asyncio
import json
from typing import Any

import click

from disaster_feed.config.settings import get_settings
from disaster_feed.observability.logging import setup_logging
from disaster_feed.observability.metrics import get_metrics


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def _memory_cache():
    from disaster_feed.cache.gateway import InMemoryCache

    return InMemoryCache(ttl_seconds=get_settings().cache_ttl_seconds)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Disaster Feed - official updates and social media crisis reports."""
    if debug:
        import os
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()


@main.command()
@click.option("--host", default=None, help="API server host")
@click.option("--port", default=None, type=int, help="API server port")
@click.option("--reload", is_flag=True, help="Enable auto-reload (dev only)")
@click.option("--metrics-port", default=None, type=int, help="Metrics server port")
def serve(host: str | None, port: int | None, reload: bool, metrics_port: int | None) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    metrics_port = metrics_port or settings.metrics_port

    get_metrics().start_server(port=metrics_port)

    click.echo(f"Starting API server on {host}:{port}")
    click.echo(f"Metrics available on http://localhost:{metrics_port}/metrics")
    click.echo(f"API docs available on http://localhost:{port}/docs")

    uvicorn.run(
        "disaster_feed.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


@main.command()
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive sources")
def sources(include_inactive: bool) -> None:
    """List official update sources."""
    from disaster_feed.official.registry import list_sources

    click.echo("\nOfficial update sources:")
    click.echo("-" * 60)
    for source in list_sources(active_only=not include_inactive):
        categories = ", ".join(sorted(source.categories))
        click.echo(f"  {source.id:<10} {source.name}")
        click.echo(f"  {'':<10} {source.url}")
        click.echo(f"  {'':<10} [{categories}]")
    click.echo("-" * 60)


@main.command("official-updates")
@click.argument("disaster_id")
@click.option("--sources", "source_ids", default="all", help="Comma-separated source ids, or 'all'")
@click.option("--category", default=None, help="Filter by category")
@click.option("--severity", type=click.Choice(["high", "medium", "low"]), default=None)
@click.option("--keywords", default=None, help="Comma-separated keywords")
@click.option("--query", "-q", default=None, help="Search query (uses search instead of the disaster feed)")
@click.option("--limit", default=None, type=click.IntRange(1, 200), help="Maximum updates")
def official_updates(
    disaster_id: str,
    source_ids: str,
    category: str | None,
    severity: str | None,
    keywords: str | None,
    query: str | None,
    limit: int | None,
) -> None:
    """Print official updates for DISASTER_ID as JSON.

    Example:
        disaster-feed official-updates 42 --category shelter
        disaster-feed official-updates 42 -q "water,volunteer"
    """
    from disaster_feed.api.dependencies import build_official_service

    service = build_official_service(get_settings(), _memory_cache())

    async def run() -> dict:
        if query is not None:
            return await service.search_updates(query, sources=source_ids, limit=limit or 30)
        return await service.get_disaster_updates(
            disaster_id,
            sources=source_ids,
            category=category,
            severity=severity,
            keywords=keywords,
            limit=limit or 50,
        )

    try:
        _echo_json(asyncio.run(run()))
    except ValueError as e:
        raise click.UsageError(str(e)) from e


@main.command("social-reports")
@click.argument("disaster_id")
@click.option("--keywords", default=None, help="Comma-separated keywords")
@click.option("--disaster-type", default=None, help="e.g. flood, fire, earthquake")
@click.option("--limit", default=20, type=click.IntRange(1, 200), help="Maximum posts")
def social_reports(
    disaster_id: str,
    keywords: str | None,
    disaster_type: str | None,
    limit: int,
) -> None:
    """Print prioritised social reports for DISASTER_ID as JSON."""
    from disaster_feed.api.dependencies import build_social_service

    service = build_social_service(get_settings(), _memory_cache())
    envelope = asyncio.run(
        service.get_disaster_reports(
            disaster_id,
            keywords=keywords,
            disaster_type=disaster_type,
            limit=limit,
        )
    )
    _echo_json(envelope)


if __name__ == "__main__":
    main()

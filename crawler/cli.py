"""
Simple CLI to run discovery, scraping, page inspection and full curation manually.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Tuple

import click

from crawler.infra.http import HttpFetcher
from crawler.ingesters.discovery import FeedDiscovery, normalize_site_url
from crawler.ingesters.images import fetch_page_metadata
from crawler.ingesters.scraper import scrape_site


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.command()
@click.argument("url")
def discover(url: str):
    """Print the feed URL discovered for a website."""

    async def run():
        async with HttpFetcher() as fetcher:
            return await FeedDiscovery(fetcher).discover(url)

    feed_url = asyncio.run(run())
    click.echo(feed_url or "no feed")


@cli.command()
@click.argument("url")
def scrape(url: str):
    """Scrape article-like entries from a page, one JSON object per line."""

    async def run():
        async with HttpFetcher() as fetcher:
            return await scrape_site(fetcher, normalize_site_url(url))

    for entry in asyncio.run(run()):
        click.echo(json.dumps(entry.model_dump(), ensure_ascii=False))


@cli.command()
@click.argument("url")
def inspect(url: str):
    """Print title, summary, publish date and preview image of an article page."""

    async def run():
        async with HttpFetcher() as fetcher:
            return await fetch_page_metadata(fetcher, url)

    click.echo(json.dumps(asyncio.run(run()), ensure_ascii=False))


@cli.command()
@click.argument("sources", nargs=-1, required=True)
@click.option("--audience", default="young-professionals", show_default=True)
@click.option("--topic", "topics", multiple=True, help="Custom topic (repeatable, used with --audience custom).")
@click.option("--max-days", type=int, default=None)
@click.option("--max-per-source", type=int, default=None)
@click.option("--max-total", type=int, default=None)
@click.option("--no-images", is_flag=True, help="Skip preview image enrichment.")
@click.option("--backup/--no-backup", default=False, help="Fall back to backup sources when nothing is found.")
@click.option("--prompt", is_flag=True, help="Print the prompt context instead of JSON.")
def curate(
    sources: Tuple[str, ...],
    audience: str,
    topics: Tuple[str, ...],
    max_days,
    max_per_source,
    max_total,
    no_images: bool,
    backup: bool,
    prompt: bool,
):
    """Curate ranked articles from SOURCES for an audience."""
    from curation import (
        SETTINGS,
        CurationOptions,
        articles_to_prompt_context,
        curate_articles_sync,
        suggest_topics_from_articles,
    )
    from curation.status import summarize

    defaults = SETTINGS.default_options()
    options = CurationOptions(
        max_days=max_days if max_days is not None else defaults.max_days,
        max_articles_per_source=max_per_source if max_per_source is not None else defaults.max_articles_per_source,
        max_total_articles=max_total if max_total is not None else defaults.max_total_articles,
        enrich_images=defaults.enrich_images and not no_images,
    )
    result = curate_articles_sync(list(sources), audience, list(topics), options, use_backup_sources=backup)
    click.echo(summarize(result), err=True)
    if prompt:
        click.echo(articles_to_prompt_context(result.articles))
        return
    payload = result.to_dict()
    payload["suggestedTopics"] = suggest_topics_from_articles(result.articles)
    click.echo(json.dumps(payload, ensure_ascii=False, indent=2))


if __name__ == "__main__":  # pragma: no cover
    cli()

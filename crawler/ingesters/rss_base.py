"""
Shared helpers for RSS/Atom ingestion.
"""
from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import urlsplit

import feedparser

from crawler.extractors.clean import absolutize, clip, html_to_text
from crawler.infra.http import HttpFetcher
from crawler.schemas.models import FeedEntry

logger = logging.getLogger(__name__)


class FeedParseError(ValueError):
    """Raised when a document cannot be read as RSS/Atom."""


async def fetch_feed(fetcher: HttpFetcher, feed_url: str, timeout: Optional[float] = None) -> List[FeedEntry]:
    response = await fetcher.get(feed_url, timeout=timeout)
    entries = parse_feed_entries(response.content, feed_url)
    logger.info("Parsed %d entries from %s", len(entries), feed_url)
    return entries


def parse_feed_entries(feed_content: bytes, feed_url: str) -> List[FeedEntry]:
    feed = feedparser.parse(feed_content)
    entries = getattr(feed, "entries", [])
    if not entries and (getattr(feed, "bozo", False) or not feed.get("version")):
        raise FeedParseError(f"Unreadable feed at {feed_url}: {feed.get('bozo_exception')}")
    source = feed.get("feed", {}).get("title") or urlsplit(feed_url).hostname or feed_url
    return [normalize_entry(entry, source.strip(), feed_url) for entry in entries]


def normalize_entry(entry, source: str, feed_url: str = "") -> FeedEntry:
    """Feed links and media may be relative to the feed document."""
    return FeedEntry(
        source=source,
        title=entry.get("title") or "Untitled",
        url=absolutize(entry.get("link"), feed_url) or "",
        summary=clip(html_to_text(_raw_summary(entry))),
        image_url=absolutize(_image_url(entry), feed_url),
        published_at=entry.get("published") or entry.get("updated"),
    )


def _raw_summary(entry) -> str:
    for content in entry.get("content") or []:
        value = content.get("value")
        if value:
            return value
    return entry.get("summary") or entry.get("description") or ""


def _image_url(entry) -> Optional[str]:
    for enclosure in entry.get("enclosures") or []:
        href = enclosure.get("href") or enclosure.get("url")
        if href:
            return href
    for key in ("media_content", "media_thumbnail"):
        for media in entry.get(key) or []:
            url = media.get("url")
            if url:
                return url
    return None

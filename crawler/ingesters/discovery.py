"""
Feed discovery: turn a website root into a usable RSS/Atom feed URL.

Strategies run in order and the first hit wins:
known-publisher registry, common feed paths probed with HEAD, then
<link rel="alternate"> tags in the page itself.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Awaitable, Callable, List, Mapping, Optional
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup

from crawler.infra.http import FetchError, HttpFetcher

logger = logging.getLogger(__name__)

KNOWN_FEEDS: Mapping[str, str] = MappingProxyType(
    {
        "investopedia.com": "https://www.investopedia.com/feedbuilder/feed/getfeed?feedName=rss_headline",
        "bloomberg.com": "https://www.bloomberg.com/feed/podcast/etf-iq.xml",
        "cnbc.com": "https://www.cnbc.com/id/10000664/device/rss/rss.html",
        "marketwatch.com": "https://feeds.marketwatch.com/marketwatch/topstories",
        "fool.com": "https://www.fool.com/feeds/index.aspx",
        "kiplinger.com": "https://www.kiplinger.com/rss.xml",
        "nerdwallet.com": "https://www.nerdwallet.com/blog/feed/",
        "forbes.com": "https://www.forbes.com/money/feed/",
    }
)

FEED_PATHS = (
    "/feed",
    "/rss",
    "/feed.xml",
    "/rss.xml",
    "/atom.xml",
    "/feed/",
    "/rss/",
    "/blog/feed",
    "/blog/rss",
    "/news/feed",
)

FEED_CONTENT_MARKERS = ("xml", "rss", "atom")

FEED_LINK_SELECTORS = (
    'link[type="application/rss+xml"]',
    'link[type="application/atom+xml"]',
)


def normalize_site_url(url: str) -> str:
    """Prefix https:// when the scheme is missing. Raises ValueError for unusable input."""
    if not isinstance(url, str) or not url.strip():
        raise ValueError("Source URL must be a non-empty string")
    url = url.strip()
    if not url.lower().startswith(("http://", "https://")):
        url = "https://" + url.lstrip("/")
    if not urlsplit(url).hostname:
        raise ValueError(f"Malformed source URL: {url}")
    return url


def registry_key(url: str) -> str:
    host = (urlsplit(url).hostname or "").lower()
    return host[4:] if host.startswith("www.") else host


class FeedDiscovery:
    def __init__(
        self,
        fetcher: HttpFetcher,
        known_feeds: Optional[Mapping[str, str]] = None,
        probe_timeout: float = 5,
        page_timeout: float = 10,
    ) -> None:
        self.fetcher = fetcher
        self.known_feeds = known_feeds if known_feeds is not None else KNOWN_FEEDS
        self.probe_timeout = probe_timeout
        self.page_timeout = page_timeout
        self.strategies: List[Callable[[str], Awaitable[Optional[str]]]] = [
            self.from_registry,
            self.from_common_paths,
            self.from_page_links,
        ]

    async def discover(self, base_url: str) -> Optional[str]:
        base_url = normalize_site_url(base_url)
        for strategy in self.strategies:
            feed_url = await strategy(base_url)
            if feed_url:
                logger.debug("Discovered feed %s for %s via %s", feed_url, base_url, strategy.__name__)
                return feed_url
        logger.debug("No feed discovered for %s", base_url)
        return None

    async def from_registry(self, base_url: str) -> Optional[str]:
        return self.known_feeds.get(registry_key(base_url))

    async def from_common_paths(self, base_url: str) -> Optional[str]:
        for path in FEED_PATHS:
            candidate = urljoin(base_url, path)
            response = await self.fetcher.head(candidate, timeout=self.probe_timeout)
            if response is None:
                continue
            content_type = response.headers.get("content-type", "").lower()
            if any(marker in content_type for marker in FEED_CONTENT_MARKERS):
                return candidate
        return None

    async def from_page_links(self, base_url: str) -> Optional[str]:
        try:
            html = await self.fetcher.get_text(base_url, timeout=self.page_timeout)
        except FetchError as exc:
            logger.debug("Page scan skipped for %s: %s", base_url, exc)
            return None
        soup = BeautifulSoup(html, "lxml")
        for selector in FEED_LINK_SELECTORS:
            tag = soup.select_one(selector)
            if tag and tag.get("href"):
                return urljoin(base_url, tag["href"].strip())
        return None

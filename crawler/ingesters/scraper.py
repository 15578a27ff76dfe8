"""
HTML scraping fallback for sites without a discoverable feed.

Each strategy takes the parsed page and returns entries, or None when it does
not apply to the page at all. The first strategy that applies wins.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Tag

from crawler.extractors.clean import absolutize, clip, collapse_whitespace
from crawler.infra.http import HttpFetcher
from crawler.pipelines.dedupe import dedupe_by_key
from crawler.schemas.models import FeedEntry

logger = logging.getLogger(__name__)

ARTICLE_SELECTORS = (
    "article",
    ".article",
    ".post",
    ".entry",
    '[class*="article"]',
    '[class*="post"]',
    ".story",
    ".news-item",
    ".blog-post",
)
MAX_CONTAINERS = 20

TITLE_SELECTOR = "h1, h2, h3, h4, .title, .headline"
SUMMARY_SELECTOR = "p, .excerpt, .summary, .description"
DATE_SELECTOR = "time, .date, .published"

MIN_LINK_TEXT = 30
MAX_LINK_TEXT = 200
ARTICLE_HREF = re.compile(r"/article|/news|/blog|/post|/\d{4}/")

Strategy = Callable[[BeautifulSoup, str, str], Optional[List[FeedEntry]]]


async def scrape_site(fetcher: HttpFetcher, url: str, timeout: Optional[float] = None) -> List[FeedEntry]:
    html = await fetcher.get_text(url, timeout=timeout)
    entries = extract_entries(html, url)
    logger.info("Scraped %d entries from %s", len(entries), url)
    return entries


def extract_entries(html: str, page_url: str) -> List[FeedEntry]:
    soup = BeautifulSoup(html, "lxml")
    source = urlsplit(page_url).hostname or page_url
    entries: List[FeedEntry] = []
    for strategy in SCRAPE_STRATEGIES:
        found = strategy(soup, page_url, source)
        if found is not None:
            entries = found
            break
    return dedupe_by_key(entries, key_fn=lambda entry: entry.url)


def container_strategy(soup: BeautifulSoup, page_url: str, source: str) -> Optional[List[FeedEntry]]:
    containers: List[Tag] = []
    for selector in ARTICLE_SELECTORS:
        containers = soup.select(selector)
        if containers:
            break
    if not containers:
        return None

    entries: List[FeedEntry] = []
    for container in containers[:MAX_CONTAINERS]:
        entry = _entry_from_container(container, page_url, source)
        if entry is not None:
            entries.append(entry)
    return entries


def link_strategy(soup: BeautifulSoup, page_url: str, source: str) -> Optional[List[FeedEntry]]:
    entries: List[FeedEntry] = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        text = collapse_whitespace(anchor.get_text(" "))
        if not looks_like_article_link(href, text):
            continue
        entries.append(FeedEntry(source=source, title=text, url=urljoin(page_url, href)))
    return entries


def looks_like_article_link(href: str, text: str) -> bool:
    if not href or "#" in href:
        return False
    if not MIN_LINK_TEXT < len(text) < MAX_LINK_TEXT:
        return False
    return bool(ARTICLE_HREF.search(href))


SCRAPE_STRATEGIES: List[Strategy] = [container_strategy, link_strategy]


def _entry_from_container(container: Tag, page_url: str, source: str) -> Optional[FeedEntry]:
    anchor = container.find("a", href=True)
    heading = container.select_one(TITLE_SELECTOR) or anchor
    title = collapse_whitespace(heading.get_text(" ")) if heading else ""
    if not title:
        return None

    link = urljoin(page_url, anchor["href"].strip()) if anchor else ""

    summary_tag = container.select_one(SUMMARY_SELECTOR)
    summary = clip(collapse_whitespace(summary_tag.get_text(" "))) if summary_tag else ""

    published_at = None
    date_tag = container.select_one(DATE_SELECTOR)
    if date_tag:
        published_at = date_tag.get("datetime") or collapse_whitespace(date_tag.get_text(" "))

    image = container.find("img")
    image_url = absolutize(image.get("src"), page_url) if image else None

    return FeedEntry(
        source=source,
        title=title,
        url=link,
        summary=summary,
        image_url=image_url,
        published_at=published_at,
    )

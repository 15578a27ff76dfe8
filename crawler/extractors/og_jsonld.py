"""
Utilities for extracting preview images and article metadata from OpenGraph/Twitter meta tags + JSON-LD blocks.
"""
from __future__ import annotations

import json
from typing import Dict, Iterable, Iterator, List, Optional

from bs4 import BeautifulSoup

from crawler.extractors.clean import absolutize

PREVIEW_IMAGE_SELECTORS = (
    'meta[property="og:image"]',
    'meta[name="og:image"]',
    'meta[property="twitter:image"]',
    'meta[name="twitter:image"]',
    'meta[property="twitter:image:src"]',
    'meta[name="twitter:image:src"]',
)

ARTICLE_TYPES = {"Article", "NewsArticle", "BlogPosting", "ReportageNewsArticle"}


def extract_preview_image(html: str, page_url: str) -> Optional[str]:
    soup = BeautifulSoup(html, "lxml")
    image = _meta_content(soup, *PREVIEW_IMAGE_SELECTORS) or _jsonld_image(soup)
    return absolutize(image, page_url)


def _jsonld_image(soup: BeautifulSoup) -> Optional[str]:
    for candidate in _jsonld_articles(soup):
        image = _image_url(candidate.get("image"))
        if image:
            return image
    return None


def _jsonld_articles(soup: BeautifulSoup) -> Iterator[dict]:
    for tag in soup.select('script[type="application/ld+json"]'):
        try:
            payload = json.loads(tag.string or "{}")
        except json.JSONDecodeError:
            continue
        for candidate in _candidates(payload):
            types = candidate.get("@type")
            if isinstance(types, str):
                types = [types]
            if isinstance(types, list) and ARTICLE_TYPES.intersection(types):
                yield candidate


def _candidates(payload) -> List[dict]:
    if isinstance(payload, list):
        return [item for item in payload if isinstance(item, dict)]
    if isinstance(payload, dict):
        graph = payload.get("@graph")
        if isinstance(graph, list):
            return [item for item in graph if isinstance(item, dict)]
        return [payload]
    return []


def _image_url(value) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        url = value.get("url")
        return url if isinstance(url, str) else None
    if isinstance(value, Iterable):
        for item in value:
            found = _image_url(item)
            if found:
                return found
    return None


def parse_metadata(html: str) -> Dict[str, Optional[str]]:
    """
    Title, summary and publish date for an article page.

    Open Graph / article meta tags are read first; the first JSON-LD article
    block fills whatever is still missing. Dates are returned as found.
    """
    soup = BeautifulSoup(html, "lxml")
    data: Dict[str, Optional[str]] = {
        "title": _meta_content(soup, 'meta[property="og:title"]', 'meta[name="twitter:title"]'),
        "summary": _meta_content(soup, 'meta[property="og:description"]', 'meta[name="description"]'),
        "published_at": _meta_content(
            soup, 'meta[property="article:published_time"]', 'meta[name="pubdate"]'
        ),
    }

    article = next(_jsonld_articles(soup), None)
    if article is not None:
        for key, field in (("title", "headline"), ("summary", "description"), ("published_at", "datePublished")):
            value = article.get(field)
            if not data[key] and isinstance(value, str) and value.strip():
                data[key] = value.strip()

    if not data["title"] and soup.title and soup.title.string:
        data["title"] = soup.title.string.strip() or None
    return data


def _meta_content(soup: BeautifulSoup, *selectors: str) -> Optional[str]:
    for selector in selectors:
        tag = soup.select_one(selector)
        if tag and tag.has_attr("content") and tag["content"].strip():
            return tag["content"].strip()
    return None

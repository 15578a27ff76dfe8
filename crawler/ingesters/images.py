"""
Preview image and metadata lookup for article pages.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

from crawler.extractors.og_jsonld import extract_preview_image, parse_metadata
from crawler.infra.http import HttpFetcher

logger = logging.getLogger(__name__)


async def fetch_preview_image(fetcher: HttpFetcher, page_url: str, timeout: Optional[float] = None) -> Optional[str]:
    """Return the page's og/twitter image, or None on any failure."""
    try:
        html = await fetcher.get_text(page_url, timeout=timeout)
        return extract_preview_image(html, page_url)
    except Exception as exc:
        logger.debug("Preview image lookup failed for %s: %s", page_url, exc)
        return None


async def fetch_page_metadata(fetcher: HttpFetcher, page_url: str, timeout: Optional[float] = None) -> Dict[str, Optional[str]]:
    """Title, summary, publish date and preview image of one article page. Fetch errors propagate."""
    html = await fetcher.get_text(page_url, timeout=timeout)
    metadata = parse_metadata(html)
    metadata["url"] = page_url
    metadata["image_url"] = extract_preview_image(html, page_url)
    return metadata

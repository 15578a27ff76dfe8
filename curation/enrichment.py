"""
Fill in missing article images from page preview metadata.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from crawler.infra.http import HttpFetcher
from crawler.ingesters.images import fetch_preview_image

from curation.models import Article

logger = logging.getLogger(__name__)

MAX_ENRICHED = 15


async def enrich_with_images(
    fetcher: HttpFetcher,
    articles: Sequence[Article],
    max_to_enrich: int = 10,
    timeout: Optional[float] = None,
) -> List[Article]:
    """
    Look up preview images for the leading ``max_to_enrich`` articles that have
    none. Lookups run concurrently; a failed lookup leaves image_url as None.
    """
    enriched = list(articles)
    candidates = [index for index, article in enumerate(enriched[:max_to_enrich]) if not article.image_url]
    if not candidates:
        return enriched

    images = await asyncio.gather(
        *(fetch_preview_image(fetcher, enriched[index].url, timeout=timeout) for index in candidates)
    )
    found = 0
    for index, image_url in zip(candidates, images):
        if image_url:
            enriched[index] = replace(enriched[index], image_url=image_url)
            found += 1
    logger.info("Enriched %d of %d articles with preview images", found, len(candidates))
    return enriched

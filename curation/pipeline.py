"""
High-level orchestration for article curation.

Every source is fetched concurrently (feed discovery -> feed, or scrape),
filtered by recency, scored and capped on its own. The merged pool is then
deduplicated and narrowed by the diversity-aware selector.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import httpx

from crawler.infra.http import FetchError, HttpFetcher
from crawler.ingesters.discovery import FeedDiscovery, normalize_site_url, registry_key
from crawler.ingesters.rss_base import fetch_feed
from crawler.ingesters.scraper import scrape_site
from crawler.schemas.models import FeedEntry

from curation.audiences import get_topics_for_audience, load_audience_topics
from curation.config_loader import load_curation_config, merge_known_feeds
from curation.enrichment import MAX_ENRICHED, enrich_with_images
from curation.models import (
    Article,
    Audience,
    CurationOptions,
    CurationResult,
    FetchMethod,
    SourceError,
    SourceHealth,
)
from curation.scoring import RelevanceScorer
from curation.selection import DiversitySelector, dedupe_articles, is_within_days, top_per_source
from curation.settings import CurationSettings, load_settings

logger = logging.getLogger(__name__)

BACKUP_SOURCES = (
    "https://www.investopedia.com",
    "https://www.kiplinger.com",
    "https://www.cnbc.com/personal-finance/",
    "https://www.nerdwallet.com",
)



def _site_key(source: str) -> str:
    try:
        return registry_key(normalize_site_url(source))
    except ValueError:
        return source.strip().lower()


@dataclass
class _SourceOutcome:
    source: str
    articles: List[Article] = field(default_factory=list)
    health: Optional[SourceHealth] = None
    error: Optional[str] = None


class CurationPipeline:
    def __init__(
        self,
        settings: Optional[CurationSettings] = None,
        scorer: Optional[RelevanceScorer] = None,
        selector: Optional[DiversitySelector] = None,
        known_feeds: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.config = load_curation_config(self.settings.config_path)
        self.scorer = scorer or RelevanceScorer()
        self.selector = selector or DiversitySelector()
        self.known_feeds = known_feeds if known_feeds is not None else merge_known_feeds(self.config)
        self.audience_topics = load_audience_topics(self.config.get("audiences"))
        self.transport = transport

    def _build_fetcher(self) -> HttpFetcher:
        return HttpFetcher(
            user_agent=self.settings.user_agent,
            timeout=self.settings.page_timeout,
            transport=self.transport,
        )

    async def curate(
        self,
        sources: Sequence[str],
        audience: Audience | str,
        custom_topics: Optional[Iterable[str]] = None,
        options: Optional[CurationOptions] = None,
        *,
        use_backup_sources: bool = False,
    ) -> CurationResult:
        options = options or self.settings.default_options()
        topics = get_topics_for_audience(audience, custom_topics, catalog=self.audience_topics)

        async with self._build_fetcher() as fetcher:
            now = datetime.now(timezone.utc)
            outcomes = await self._gather(fetcher, list(sources), topics, options, now)
            if use_backup_sources and not any(outcome.articles for outcome in outcomes):
                requested = {_site_key(source) for source in sources}
                backups = [source for source in BACKUP_SOURCES if _site_key(source) not in requested]
                if backups:
                    logger.warning("No articles from configured sources; trying %d backup sources", len(backups))
                    outcomes.extend(await self._gather(fetcher, backups, topics, options, now))

            errors: List[SourceError] = []
            pool: List[Article] = []
            for outcome in outcomes:
                if outcome.error is not None:
                    errors.append(SourceError(source=outcome.source, error=outcome.error))
                else:
                    pool.extend(outcome.articles)

            deduped = dedupe_articles(pool)
            selected = self.selector.select(deduped, options.max_total_articles)

            if options.enrich_images and selected:
                selected = await enrich_with_images(
                    fetcher,
                    selected,
                    max_to_enrich=min(MAX_ENRICHED, options.max_total_articles),
                    timeout=self.settings.image_timeout,
                )

        logger.info(
            "Curated %d articles from %d sources (%d pooled, %d unique, %d failed)",
            len(selected),
            len(outcomes),
            len(pool),
            len(deduped),
            len(errors),
        )
        return CurationResult(
            articles=selected,
            errors=errors,
            fetched_at=datetime.now(timezone.utc),
            health=[outcome.health for outcome in outcomes if outcome.health is not None],
        )

    async def _gather(
        self,
        fetcher: HttpFetcher,
        sources: List[str],
        topics: List[str],
        options: CurationOptions,
        now: datetime,
    ) -> List[_SourceOutcome]:
        outcomes = await asyncio.gather(
            *(self._collect(fetcher, source, topics, options, now) for source in sources)
        )
        return list(outcomes)

    async def _collect(
        self,
        fetcher: HttpFetcher,
        source: str,
        topics: List[str],
        options: CurationOptions,
        now: datetime,
    ) -> _SourceOutcome:
        start = time.time()
        try:
            entries, method, feed_url = await self.fetch_source(fetcher, source)
        except (FetchError, ValueError) as exc:
            message = str(exc) or exc.__class__.__name__
            logger.warning("Source %s failed: %s", source, message)
            return self._failed(source, message, start)
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            logger.exception("Unexpected error while collecting %s", source)
            return self._failed(source, message, start)

        recent = [
            Article.from_entry(entry)
            for entry in entries
            if is_within_days(entry.published_at, options.max_days, now)
        ]
        scored = [self.scorer.apply(article, topics) for article in recent]
        kept = top_per_source(scored, options.max_articles_per_source)
        logger.info(
            "Source %s: %d fetched, %d recent, %d kept (%s)",
            source,
            len(entries),
            len(recent),
            len(kept),
            method.value,
        )
        return _SourceOutcome(
            source=source,
            articles=kept,
            health=SourceHealth(
                name=source,
                healthy=True,
                method=method,
                feed_url=feed_url,
                items_last_fetch=len(entries),
                latency_ms=(time.time() - start) * 1000,
            ),
        )

    @staticmethod
    def _failed(source: str, message: str, start: float) -> _SourceOutcome:
        return _SourceOutcome(
            source=source,
            error=message,
            health=SourceHealth(
                name=source,
                healthy=False,
                latency_ms=(time.time() - start) * 1000,
                last_error=message,
            ),
        )

    async def fetch_source(self, fetcher: HttpFetcher, source: str) -> Tuple[List[FeedEntry], FetchMethod, Optional[str]]:
        """Feed first; any discovery miss or feed failure falls back to scraping."""
        site_url = normalize_site_url(source)
        discovery = FeedDiscovery(
            fetcher,
            known_feeds=self.known_feeds,
            probe_timeout=self.settings.probe_timeout,
            page_timeout=self.settings.feed_timeout,
        )
        feed_url = await discovery.discover(site_url)
        if feed_url:
            try:
                entries = await fetch_feed(fetcher, feed_url, timeout=self.settings.feed_timeout)
                return entries, FetchMethod.FEED, feed_url
            except Exception as exc:
                logger.warning("Feed %s failed for %s, falling back to scraping: %s", feed_url, site_url, exc)
        entries = await scrape_site(fetcher, site_url, timeout=self.settings.page_timeout)
        return entries, FetchMethod.SCRAPE, None

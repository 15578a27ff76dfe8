"""
Recency filtering, per-source capping and diversity-aware selection.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from dateutil import tz
from dateutil.parser import parse as parse_date

from crawler.pipelines.dedupe import dedupe_by_key

from curation.models import Article

logger = logging.getLogger(__name__)

# Tunable: each extra pick from one source keeps 60% of its score.
SOURCE_DECAY = 0.6
FIRST_USE_BONUS = 5.0

# Abbreviations dateutil cannot resolve on its own.
US_TZINFOS = {
    "EST": tz.gettz("America/New_York"),
    "EDT": tz.gettz("America/New_York"),
    "CST": tz.gettz("America/Chicago"),
    "CDT": tz.gettz("America/Chicago"),
    "MST": tz.gettz("America/Denver"),
    "MDT": tz.gettz("America/Denver"),
    "PST": tz.gettz("America/Los_Angeles"),
    "PDT": tz.gettz("America/Los_Angeles"),
}


def parse_published(value: Optional[str]) -> Optional[datetime]:
    """Parse a feed or page date (RFC 822, ISO 8601, "January 5, 2020", ...). None when unusable."""
    if not value or not value.strip():
        return None
    try:
        parsed = parse_date(value.strip(), tzinfos=US_TZINFOS)
    except (ValueError, OverflowError):
        return None
    if not parsed.tzinfo:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_within_days(published_at: Optional[str], days: int, now: Optional[datetime] = None) -> bool:
    published = parse_published(published_at)
    if published is None:
        return True
    now = now or datetime.now(timezone.utc)
    return published >= now - timedelta(days=days)


def top_per_source(articles: Iterable[Article], limit: int) -> List[Article]:
    ranked = sorted(articles, key=lambda article: article.relevance_score, reverse=True)
    return ranked[:limit]


def dedupe_articles(articles: Iterable[Article]) -> List[Article]:
    with_url = [article for article in articles if article.url]
    return dedupe_by_key(with_url, key_fn=lambda article: article.url)


class DiversitySelector:
    """
    Greedy pick of the highest adjusted score, where
    adjusted = score * decay ** picks_from_source (+ bonus for an unused source).
    Ties go to the earliest article in the pool.
    """

    def __init__(self, decay: float = SOURCE_DECAY, first_use_bonus: float = FIRST_USE_BONUS) -> None:
        self.decay = decay
        self.first_use_bonus = first_use_bonus

    def adjusted_score(self, article: Article, usage: Dict[str, int]) -> float:
        used = usage.get(_source_key(article), 0)
        bonus = self.first_use_bonus if used == 0 else 0.0
        return article.relevance_score * (self.decay ** used) + bonus

    def select(self, pool: Sequence[Article], limit: int) -> List[Article]:
        remaining = list(pool)
        usage: Dict[str, int] = {}
        selected: List[Article] = []
        while remaining and len(selected) < limit:
            best_index = 0
            best_score = float("-inf")
            for index, article in enumerate(remaining):
                adjusted = self.adjusted_score(article, usage)
                if adjusted > best_score:
                    best_score = adjusted
                    best_index = index
            picked = remaining.pop(best_index)
            selected.append(picked)
            key = _source_key(picked)
            usage[key] = usage.get(key, 0) + 1
        logger.debug("Selected %d of %d articles across %d sources", len(selected), len(pool), len(usage))
        return selected


def _source_key(article: Article) -> str:
    return article.source.lower()

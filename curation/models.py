"""
Core data structures shared by the curation pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from crawler.schemas.models import FeedEntry


class Audience(str, Enum):
    YOUNG_PROFESSIONALS = "young-professionals"
    YOUNG_FAMILIES = "young-families"
    PRE_RETIREES = "pre-retirees"
    RETIREES = "retirees"
    CUSTOM = "custom"


class FetchMethod(str, Enum):
    FEED = "feed"
    SCRAPE = "scrape"
    NONE = "none"


@dataclass
class Article:
    """
    Normalized article as handed to post generation.
    """

    title: str
    url: str
    source: str
    summary: str = ""
    image_url: Optional[str] = None
    published_at: Optional[str] = None
    matched_topics: List[str] = field(default_factory=list)
    relevance_score: int = 0

    @classmethod
    def from_entry(cls, entry: FeedEntry) -> "Article":
        return cls(
            title=entry.title,
            url=entry.url,
            source=entry.source,
            summary=entry.summary,
            image_url=entry.image_url,
            published_at=entry.published_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "summary": self.summary,
            "imageUrl": self.image_url,
            "publishedAt": self.published_at,
            "source": self.source,
            "matchedTopics": list(self.matched_topics),
            "relevanceScore": self.relevance_score,
        }


class CurationOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_days: int = Field(default=7, gt=0)
    max_articles_per_source: int = Field(default=10, gt=0)
    max_total_articles: int = Field(default=30, gt=0)
    enrich_images: bool = True


@dataclass
class SourceError:
    source: str
    error: str

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "error": self.error}


@dataclass
class SourceHealth:
    name: str
    healthy: bool
    method: FetchMethod = FetchMethod.NONE
    feed_url: Optional[str] = None
    items_last_fetch: int = 0
    latency_ms: Optional[float] = None
    last_error: Optional[str] = None


@dataclass
class CurationResult:
    articles: List[Article]
    errors: List[SourceError]
    fetched_at: datetime
    health: List[SourceHealth] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "articles": [article.to_dict() for article in self.articles],
            "errors": [error.to_dict() for error in self.errors],
            "fetchedAt": self.fetched_at.isoformat(),
        }

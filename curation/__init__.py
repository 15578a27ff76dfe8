"""
Public API for article curation.
"""
from __future__ import annotations

import asyncio
from typing import Iterable, Optional, Sequence

from curation.models import Article, Audience, CurationOptions, CurationResult, SourceError
from curation.pipeline import BACKUP_SOURCES, CurationPipeline
from curation.prompt import articles_to_prompt_context, suggest_topics_from_articles
from curation.settings import CurationSettings, load_settings

__all__ = [
    "Article",
    "Audience",
    "BACKUP_SOURCES",
    "CurationOptions",
    "CurationPipeline",
    "CurationResult",
    "SourceError",
    "articles_to_prompt_context",
    "curate_articles",
    "curate_articles_sync",
    "suggest_topics_from_articles",
]

SETTINGS: CurationSettings = load_settings()
_pipeline: Optional[CurationPipeline] = None


def _get_pipeline() -> CurationPipeline:
    global _pipeline
    if _pipeline is None:
        _pipeline = CurationPipeline(settings=SETTINGS)
    return _pipeline


async def curate_articles(
    source_websites: Sequence[str],
    audience: Audience | str,
    custom_topics: Optional[Iterable[str]] = None,
    options: Optional[CurationOptions] = None,
    *,
    use_backup_sources: bool = False,
) -> CurationResult:
    """
    Curate ranked articles for an audience from the given websites.
    Source failures are reported in ``result.errors``; they never raise.
    """
    return await _get_pipeline().curate(
        source_websites,
        audience,
        custom_topics,
        options,
        use_backup_sources=use_backup_sources,
    )


def curate_articles_sync(
    source_websites: Sequence[str],
    audience: Audience | str,
    custom_topics: Optional[Iterable[str]] = None,
    options: Optional[CurationOptions] = None,
    *,
    use_backup_sources: bool = False,
) -> CurationResult:
    return asyncio.run(
        curate_articles(
            source_websites,
            audience,
            custom_topics,
            options,
            use_backup_sources=use_backup_sources,
        )
    )

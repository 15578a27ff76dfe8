"""
Audience segments and the topic vocabulary used to judge relevance for each.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from curation.models import Audience

logger = logging.getLogger(__name__)

AUDIENCE_LABELS: Mapping[Audience, str] = MappingProxyType(
    {
        Audience.YOUNG_PROFESSIONALS: "Young Professionals (25-35)",
        Audience.YOUNG_FAMILIES: "Young Families (30-45)",
        Audience.PRE_RETIREES: "Pre-Retirees (50-65)",
        Audience.RETIREES: "Retirees (65+)",
        Audience.CUSTOM: "Custom Audience",
    }
)

DEFAULT_TOPICS: Mapping[Audience, Tuple[str, ...]] = MappingProxyType(
    {
        Audience.YOUNG_PROFESSIONALS: (
            "student loan repayment",
            "emergency fund",
            "401k retirement savings",
            "budgeting",
            "credit score",
            "first home buying",
            "investing basics",
            "roth ira",
            "career income growth",
            "disability insurance",
        ),
        Audience.YOUNG_FAMILIES: (
            "life insurance",
            "college savings 529",
            "childcare costs",
            "estate planning will",
            "mortgage rates",
            "family budget",
            "emergency fund",
            "health insurance",
            "tax credits for families",
            "term life insurance",
        ),
        Audience.PRE_RETIREES: (
            "retirement planning",
            "catch-up contributions",
            "social security timing",
            "annuities",
            "long-term care insurance",
            "portfolio diversification",
            "tax optimization",
            "pension options",
            "healthcare before medicare",
            "market volatility",
        ),
        Audience.RETIREES: (
            "required minimum distributions",
            "medicare enrollment",
            "social security benefits",
            "retirement income",
            "estate planning",
            "long-term care",
            "annuities",
            "inflation protection",
            "legacy planning",
            "fraud and scams",
        ),
    }
)


def parse_audience(value: Audience | str) -> Audience:
    if isinstance(value, Audience):
        return value
    try:
        return Audience(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown audience '{value}'") from None


def load_audience_topics(overrides: Optional[Dict[str, Any]] = None) -> Mapping[Audience, Tuple[str, ...]]:
    """
    Built-in vocabularies, optionally replaced per audience from the YAML config.
    """
    topics: Dict[Audience, Tuple[str, ...]] = dict(DEFAULT_TOPICS)
    for key, values in (overrides or {}).items():
        try:
            audience = parse_audience(key)
        except ValueError:
            logger.warning("Unknown audience '%s' in config; skipping.", key)
            continue
        if audience is Audience.CUSTOM:
            logger.warning("Topics for the custom audience come from the caller; ignoring config entry.")
            continue
        cleaned = _clean_topics(values if isinstance(values, list) else [])
        if cleaned:
            topics[audience] = tuple(cleaned)
    return MappingProxyType(topics)


def get_topics_for_audience(
    audience: Audience | str,
    custom_topics: Optional[Iterable[str]] = None,
    catalog: Optional[Mapping[Audience, Tuple[str, ...]]] = None,
) -> List[str]:
    resolved = parse_audience(audience)
    if resolved is Audience.CUSTOM:
        return _clean_topics(custom_topics or [])
    return list((catalog or DEFAULT_TOPICS).get(resolved, ()))


def _clean_topics(values: Iterable[Any]) -> List[str]:
    cleaned: List[str] = []
    for value in values:
        if isinstance(value, str) and value.strip() and value.strip() not in cleaned:
            cleaned.append(value.strip())
    return cleaned

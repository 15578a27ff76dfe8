"""
Status/health helpers for a curation run.

The output is designed for API/UI consumption, so callers can show
"found N articles; M sources had issues" without digging into the result.
"""
from __future__ import annotations

from typing import Any, Dict

from curation.models import CurationResult, SourceHealth


def _health_to_dict(status: SourceHealth) -> Dict[str, Any]:
    return {
        "name": status.name,
        "healthy": status.healthy,
        "method": status.method.value,
        "feed_url": status.feed_url,
        "items_last_fetch": status.items_last_fetch,
        "latency_ms": round(status.latency_ms, 1) if status.latency_ms is not None else None,
        "last_error": status.last_error,
    }


def summarize(result: CurationResult) -> str:
    found = len(result.articles)
    failed = len(result.errors)
    if not failed:
        return f"Found {found} articles."
    noun = "source" if failed == 1 else "sources"
    return f"Found {found} articles; {failed} {noun} had issues."


def build_status(result: CurationResult) -> Dict[str, Any]:
    health = [_health_to_dict(entry) for entry in result.health]
    return {
        "generated_at": result.fetched_at.isoformat(),
        "summary": summarize(result),
        "sources": {
            "total": len(health),
            "healthy": sum(1 for entry in health if entry["healthy"]),
            "failed": len(result.errors),
            "via_feed": sum(1 for entry in health if entry["method"] == "feed"),
            "via_scrape": sum(1 for entry in health if entry["method"] == "scrape"),
        },
        "health": health,
    }

"""
Centralised settings for the curation pipeline (env-first, code-light).
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from crawler.infra.http import DEFAULT_USER_AGENT

from curation.models import CurationOptions

logger = logging.getLogger(__name__)


@dataclass
class CurationSettings:
    max_days: int
    max_articles_per_source: int
    max_total_articles: int
    enrich_images: bool
    user_agent: str
    probe_timeout: float
    feed_timeout: float
    page_timeout: float
    image_timeout: float
    config_path: Path

    def default_options(self) -> CurationOptions:
        return CurationOptions(
            max_days=self.max_days,
            max_articles_per_source=self.max_articles_per_source,
            max_total_articles=self.max_total_articles,
            enrich_images=self.enrich_images,
        )


def _int_from_env(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = int(raw)
        if value > 0:
            return value
    except ValueError:
        pass
    logger.warning("Invalid int value for %s=%s; using default %s", key, raw, default)
    return default


def _float_from_env(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = float(raw)
        if value > 0:
            return value
    except ValueError:
        pass
    logger.warning("Invalid number for %s=%s; using default %s", key, raw, default)
    return default


def _bool_from_env(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or str(raw).strip() == "":
        return default
    token = raw.strip().lower()
    if token in {"1", "true", "yes", "on"}:
        return True
    if token in {"0", "false", "no", "off"}:
        return False
    logger.warning("Invalid boolean for %s=%s; using default %s", key, raw, default)
    return default


def load_settings() -> CurationSettings:
    return CurationSettings(
        max_days=_int_from_env("CURATION_MAX_DAYS", 7),
        max_articles_per_source=_int_from_env("CURATION_MAX_PER_SOURCE", 10),
        max_total_articles=_int_from_env("CURATION_MAX_TOTAL", 30),
        enrich_images=_bool_from_env("CURATION_ENRICH_IMAGES", True),
        user_agent=os.getenv("CURATION_USER_AGENT") or DEFAULT_USER_AGENT,
        probe_timeout=_float_from_env("CURATION_PROBE_TIMEOUT", 5),
        feed_timeout=_float_from_env("CURATION_FEED_TIMEOUT", 10),
        page_timeout=_float_from_env("CURATION_PAGE_TIMEOUT", 15),
        image_timeout=_float_from_env("CURATION_IMAGE_TIMEOUT", 8),
        config_path=Path(os.getenv("CURATION_CONFIG_PATH") or Path("config") / "curation.yaml"),
    )

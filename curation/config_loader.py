"""
Load the optional curation YAML (known feeds, audience topics) with env overrides.
"""
from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping

import yaml

from crawler.ingesters.discovery import KNOWN_FEEDS

logger = logging.getLogger(__name__)


def load_curation_config(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        logger.warning("Curation config not found at %s; using built-in defaults.", config_path)
        return {}
    data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        logger.warning("Curation config at %s is not a mapping; ignoring it.", config_path)
        return {}
    return _expand_env(data)


def merge_known_feeds(config: Dict[str, Any]) -> Mapping[str, str]:
    feeds = dict(KNOWN_FEEDS)
    extra = config.get("known_feeds") or {}
    if not isinstance(extra, dict):
        logger.warning("known_feeds must be a mapping of hostname to feed URL; ignoring it.")
        extra = {}
    for host, url in extra.items():
        if isinstance(host, str) and isinstance(url, str) and url.strip():
            host = host.strip().lower()
            feeds[host[4:] if host.startswith("www.") else host] = url.strip()
    return MappingProxyType(feeds)


_ENV_REF = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}")


def _expand_env(value: Any) -> Any:
    """Substitute ``${NAME}`` / ``${NAME:-fallback}`` anywhere inside config strings."""
    if isinstance(value, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group("name"), m.group("default") or ""), value)
    if isinstance(value, dict):
        return {key: _expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    return value

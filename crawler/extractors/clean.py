"""
Text and URL clean-up helpers shared by the feed parser and the scraper.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

SUMMARY_LIMIT = 300
ELLIPSIS = "..."


def collapse_whitespace(text: str) -> str:
    return " ".join((text or "").split())


def html_to_text(raw_html: str) -> str:
    """Strip tags with a real parser and collapse whitespace."""
    if not raw_html:
        return ""
    soup = BeautifulSoup(raw_html, "lxml")
    return collapse_whitespace(soup.get_text(" "))


def clip(text: str, n: int = SUMMARY_LIMIT) -> str:
    text = text or ""
    if len(text) <= n:
        return text
    return text[: n - len(ELLIPSIS)] + ELLIPSIS


def absolutize(href: Optional[str], base_url: str) -> Optional[str]:
    if not href:
        return None
    href = href.strip()
    if not href:
        return None
    if href.startswith("//"):
        return "https:" + href
    return urljoin(base_url, href)

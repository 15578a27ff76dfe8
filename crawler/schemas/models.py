"""
Pydantic models for crawler outputs.
Feed items and scraped blocks are normalized into FeedEntry right after parsing,
so downstream code never touches the loosely-typed upstream shapes.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, field_validator


class FeedEntry(BaseModel):
    source: str
    title: str
    url: str = ""
    summary: str = ""
    image_url: Optional[str] = None
    published_at: Optional[str] = None

    @field_validator("title", "url", "summary", mode="before")
    @classmethod
    def _trim(cls, value: Optional[str]) -> str:
        return (value or "").strip()

    @field_validator("image_url", "published_at", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

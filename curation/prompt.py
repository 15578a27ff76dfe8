"""
Helpers that turn curated articles into inputs for post generation.
"""
from __future__ import annotations

from collections import Counter
from typing import List, Sequence

from curation.models import Article

CONTEXT_HEADER = (
    "--- CURATED ARTICLES FOR REFERENCE ---\n"
    "Use these recent articles as inspiration and context. Reference them naturally when relevant."
)
CONTEXT_FOOTER = "--- END CURATED ARTICLES ---"


def articles_to_prompt_context(articles: Sequence[Article]) -> str:
    if not articles:
        return ""
    blocks = []
    for number, article in enumerate(articles, start=1):
        lines = [
            f"[Article {number}]",
            f"Title: {article.title}",
            f"Source: {article.source}",
            f"URL: {article.url}",
        ]
        if article.summary:
            lines.append(f"Summary: {article.summary}")
        if article.matched_topics:
            lines.append(f"Topics: {', '.join(article.matched_topics)}")
        blocks.append("\n".join(lines))
    return f"{CONTEXT_HEADER}\n\n" + "\n\n".join(blocks) + f"\n\n{CONTEXT_FOOTER}"


def suggest_topics_from_articles(articles: Sequence[Article], limit: int = 5) -> List[str]:
    """Most frequent matched topics; ties keep first-seen order."""
    counts: Counter = Counter()
    for article in articles:
        counts.update(article.matched_topics)
    return [topic for topic, _ in counts.most_common(limit)]

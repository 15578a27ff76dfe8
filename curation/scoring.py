"""
Keyword relevance scoring of articles against an audience's topic list.
"""
from __future__ import annotations

import math
from dataclasses import replace
from typing import List, Sequence, Tuple

from curation.models import Article

# Tunable weights.
TOPIC_MATCH_POINTS = 10
TITLE_MATCH_BONUS = 5


def topic_keywords(topic: str) -> List[str]:
    return topic.lower().split()


class RelevanceScorer:
    def __init__(self, topic_points: int = TOPIC_MATCH_POINTS, title_bonus: int = TITLE_MATCH_BONUS) -> None:
        self.topic_points = topic_points
        self.title_bonus = title_bonus

    def score(self, title: str, summary: str, topics: Sequence[str]) -> Tuple[List[str], int]:
        """
        A topic matches when at least half (rounded up) of its keywords occur
        anywhere in title + summary. Matched topics whose keywords also occur
        in the title earn the title bonus.
        """
        title_lower = (title or "").lower()
        combined = f"{title_lower} {(summary or '').lower()}"
        matched: List[str] = []
        score = 0
        for topic in topics:
            keywords = topic_keywords(topic)
            if not keywords:
                continue
            hits = sum(1 for kw in keywords if kw in combined)
            if hits < math.ceil(len(keywords) / 2):
                continue
            matched.append(topic)
            score += self.topic_points
            if any(kw in title_lower for kw in keywords):
                score += self.title_bonus
        return matched, score

    def apply(self, article: Article, topics: Sequence[str]) -> Article:
        matched, score = self.score(article.title, article.summary, topics)
        return replace(article, matched_topics=matched, relevance_score=score)


_default_scorer = RelevanceScorer()


def score_article(article: Article, topics: Sequence[str]) -> Tuple[List[str], int]:
    return _default_scorer.score(article.title, article.summary, topics)

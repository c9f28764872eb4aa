"""Relevance scoring heuristics for the editor.

Each dimension scorer is a pure function `(Article, ScoringContext) -> float`
on a 0-5 scale, so strategies can be swapped or tested in isolation.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from curator.models.article import Article, RelevanceScores
from curator.models.settings import RelevanceWeights
from curator.tools.text_utils import distinct_hits

MAX_SCORE = 5.0
VOCABULARY_SATURATION = 4
PRIORITY_BONUS = 0.5
PRIORITY_BONUS_CAP = 1.5
EXCLUSION_PENALTY = 1.0

TECHNICAL_TERMS = (
    "algorithm",
    "architecture",
    "benchmark",
    "chip",
    "cooling",
    "efficiency",
    "latency",
    "performance",
    "processor",
    "prototype",
    "quantum",
    "semiconductor",
    "throughput",
    "technology",
)
BUSINESS_TERMS = (
    "acquisition",
    "contract",
    "cost",
    "customer",
    "deal",
    "investment",
    "market",
    "partnership",
    "price",
    "profit",
    "revenue",
    "funding",
    "expansion",
    "valuation",
)
SUSTAINABILITY_TERMS = (
    "carbon",
    "circular",
    "climate",
    "emission",
    "environment",
    "green",
    "net zero",
    "recycl",
    "renewable",
    "solar",
    "sustainab",
    "waste heat",
    "wind",
)


@dataclass(frozen=True, slots=True)
class ScoringContext:
    priority_keywords: tuple[str, ...] = ()
    exclusion_keywords: tuple[str, ...] = ()


Scorer = Callable[[Article, ScoringContext], float]


def _article_text(article: Article) -> str:
    return " ".join(
        [
            article.title,
            article.content,
            *article.key_innovations,
            *article.actionable_insights,
        ]
    )


def vocabulary_score(article: Article, context: ScoringContext, vocabulary: tuple[str, ...]) -> float:
    text = _article_text(article)
    coverage = min(1.0, len(distinct_hits(text, vocabulary)) / VOCABULARY_SATURATION)
    bonus = min(
        PRIORITY_BONUS_CAP,
        PRIORITY_BONUS * len(distinct_hits(text, context.priority_keywords)),
    )
    penalty = EXCLUSION_PENALTY * len(distinct_hits(text, context.exclusion_keywords))
    raw = MAX_SCORE * coverage + bonus - penalty
    return round(min(MAX_SCORE, max(0.0, raw)), 2)


def technical_score(article: Article, context: ScoringContext) -> float:
    return vocabulary_score(article, context, TECHNICAL_TERMS)


def business_score(article: Article, context: ScoringContext) -> float:
    return vocabulary_score(article, context, BUSINESS_TERMS)


def sustainability_score(article: Article, context: ScoringContext) -> float:
    return vocabulary_score(article, context, SUSTAINABILITY_TERMS)


@dataclass(frozen=True, slots=True)
class DimensionScorers:
    technical: Scorer = field(default=technical_score)
    business: Scorer = field(default=business_score)
    sustainability: Scorer = field(default=sustainability_score)


def overall_score(scores: RelevanceScores, weights: RelevanceWeights) -> float:
    return (
        scores.technical * weights.technical
        + scores.business * weights.business
        + scores.sustainability * weights.sustainability
    )


def score_article(
    article: Article,
    scorers: DimensionScorers,
    context: ScoringContext,
    weights: RelevanceWeights,
) -> Article:
    """Return a copy of the article carrying freshly computed scores."""
    dimensions = RelevanceScores(
        technical=scorers.technical(article, context),
        business=scorers.business(article, context),
        sustainability=scorers.sustainability(article, context),
    )
    scored = dimensions.model_copy(update={"overall": overall_score(dimensions, weights)})
    return article.with_scores(scored)

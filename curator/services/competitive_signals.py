"""Lexicon heuristics for competitor mentions.

Only the sentences that name the competitor are considered, so an article
praising one vendor and criticising another yields different sentiment for
each.
"""
from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Optional

from curator.models.article import Article
from curator.models.competitor import (
    MarketPosition,
    MarketStance,
    ProductComparison,
    Sentiment,
)
from curator.tools.text_utils import (
    count_term,
    dedupe_casefold,
    sentences_mentioning,
    term_pattern,
)

CONTEXT_MAX_CHARS = 280

POSITIVE_TERMS = (
    "award",
    "breakthrough",
    "expands",
    "gain",
    "growth",
    "innovative",
    "launch",
    "leading",
    "outperform",
    "record",
    "strong",
    "success",
    "surge",
    "wins",
)
NEGATIVE_TERMS = (
    "bankrupt",
    "decline",
    "delay",
    "drop",
    "falls",
    "layoff",
    "lawsuit",
    "loss",
    "lost",
    "outage",
    "recall",
    "setback",
    "struggl",
    "weak",
)
COMPARISON_MARKERS = (
    "compared to",
    "compared with",
    "versus",
    " vs ",
    " vs. ",
    "outperform",
    "ahead of",
    "behind",
    "better than",
    "worse than",
    "faster than",
    "slower than",
    "cheaper than",
    "trails",
)
STANCE_MARKERS: dict[MarketStance, tuple[str, ...]] = {
    MarketStance.LEADER: ("market leader", "largest", "dominant", "leads the market", "number one", "top player"),
    MarketStance.CHALLENGER: ("challenger", "gaining share", "rival", "catching up", "fast-growing"),
    MarketStance.NICHE: ("niche", "specialist", "boutique", "startup"),
}
_SHARE_PATTERN = re.compile(r"\d+(?:\.\d+)?\s?%|market share", re.IGNORECASE)
_FAVORS_COMPETITOR = ("outperform", "ahead of", "better than", "faster than", "cheaper than")
_FAVORS_OTHERS = ("behind", "worse than", "slower than", "trails")


def _count(text: str, terms: tuple[str, ...]) -> int:
    return sum(count_term(text, term) for term in terms)


def analyze_sentiment(content: str, competitor: str) -> Sentiment:
    sentences = sentences_mentioning(content, competitor)
    if not sentences:
        return Sentiment.NEUTRAL
    scope = " ".join(sentences)
    balance = _count(scope, POSITIVE_TERMS) - _count(scope, NEGATIVE_TERMS)
    if balance > 0:
        return Sentiment.POSITIVE
    if balance < 0:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def extract_context(content: str, competitor: str) -> str:
    sentences = sentences_mentioning(content, competitor)
    if not sentences:
        return ""
    context = " ".join(sentences)
    if len(context) > CONTEXT_MAX_CHARS:
        context = context[: CONTEXT_MAX_CHARS - 3].rstrip() + "..."
    return context


def find_product_comparison(article: Article, competitor: str) -> Optional[ProductComparison]:
    for sentence in sentences_mentioning(article.content, competitor):
        padded = f" {sentence.lower()} "
        if not any(marker in padded for marker in COMPARISON_MARKERS):
            continue
        # Capitalised text after "<competitor>'s" is taken as the product name.
        product_match = re.search(
            "(?i:" + re.escape(competitor) + r")(?:'s|’s)\s+([A-Z0-9][\w-]*(?:\s+[A-Z0-9][\w-]*)?)",
            sentence,
        )
        favors = "unclear"
        if any(m in padded for m in _FAVORS_COMPETITOR):
            favors = "competitor"
        elif any(m in padded for m in _FAVORS_OTHERS):
            favors = "others"
        return ProductComparison(
            competitor_product=product_match.group(1) if product_match else None,
            statement=sentence,
            favors=favors,
        )
    return None


def analyze_market_position(article: Article, competitor: str) -> MarketPosition:
    sentences = sentences_mentioning(article.content, competitor)
    votes: Counter[MarketStance] = Counter()
    signals: list[str] = []
    for sentence in sentences:
        for stance, markers in STANCE_MARKERS.items():
            hits = [m for m in markers if term_pattern(m).search(sentence)]
            if hits:
                votes[stance] += len(hits)
                signals.extend(hits)
        signals.extend(m.group(0).strip() for m in _SHARE_PATTERN.finditer(sentence))
    stance = _winning_stance(votes)
    return MarketPosition(stance=stance, signals=dedupe_casefold(signals))


def consolidate_market_position(positions: list[MarketPosition]) -> MarketPosition:
    votes: Counter[MarketStance] = Counter(
        p.stance for p in positions if p.stance != MarketStance.UNKNOWN
    )
    signals = dedupe_casefold([s for p in positions for s in p.signals])
    return MarketPosition(stance=_winning_stance(votes), signals=signals)


def _winning_stance(votes: Counter[MarketStance]) -> MarketStance:
    if not votes:
        return MarketStance.UNKNOWN
    order = list(MarketStance)
    # Highest vote count wins; declaration order breaks ties.
    return max(votes, key=lambda stance: (votes[stance], -order.index(stance)))


@dataclass(frozen=True, slots=True)
class SignalAnalyzers:
    sentiment: Callable[[str, str], Sentiment] = field(default=analyze_sentiment)
    context: Callable[[str, str], str] = field(default=extract_context)
    product_comparison: Callable[[Article, str], Optional[ProductComparison]] = field(
        default=find_product_comparison
    )
    market_position: Callable[[Article, str], MarketPosition] = field(
        default=analyze_market_position
    )

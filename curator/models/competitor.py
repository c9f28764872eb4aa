from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"

    @property
    def value_score(self) -> int:
        return {"positive": 1, "neutral": 0, "negative": -1}[self.value]


class MarketStance(str, Enum):
    LEADER = "leader"
    CHALLENGER = "challenger"
    NICHE = "niche"
    UNKNOWN = "unknown"


class ProductComparison(BaseModel):
    competitor_product: Optional[str] = None
    statement: str
    favors: str = "unclear"  # competitor | others | unclear


class MarketPosition(BaseModel):
    stance: MarketStance = MarketStance.UNKNOWN
    signals: list[str] = Field(default_factory=list)


class CompetitorMention(BaseModel):
    id: str
    competitor_name: str
    article_id: str
    sentiment: Sentiment = Sentiment.NEUTRAL
    context: str = ""
    product_comparison: Optional[ProductComparison] = None
    market_position: MarketPosition = Field(default_factory=MarketPosition)
    timestamp: datetime

    model_config = {"frozen": True}


class Timeframe(BaseModel):
    start: datetime
    end: datetime

    @property
    def midpoint(self) -> datetime:
        return self.start + (self.end - self.start) / 2


class CompetitorStats(BaseModel):
    name: str
    total_mentions: int
    average_sentiment: float = Field(ge=-1.0, le=1.0)
    product_comparisons: list[ProductComparison] = Field(default_factory=list)
    market_position: MarketPosition = Field(default_factory=MarketPosition)
    recent_mentions: list[CompetitorMention] = Field(default_factory=list)


class CompetitorTrends(BaseModel):
    emerging: list[str] = Field(default_factory=list)
    declining: list[str] = Field(default_factory=list)


class CompetitorAnalysisReport(BaseModel):
    timeframe: Timeframe
    competitors: list[CompetitorStats] = Field(default_factory=list)
    below_threshold: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    trends: CompetitorTrends = Field(default_factory=CompetitorTrends)
    timestamp: datetime

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class BusinessField(str, Enum):
    HPC = "HPC"
    BITCOIN = "Bitcoin"
    ENERGY_STORAGE = "Energy Storage"

    @property
    def rank(self) -> int:
        """Position in declaration order, used as the canonical sort key."""
        return list(BusinessField).index(self)


class RelevanceScores(BaseModel):
    technical: float = 0.0
    business: float = 0.0
    sustainability: float = 0.0
    overall: float = 0.0

    model_config = {"frozen": True}


class Article(BaseModel):
    """A news article collected by a research assistant.

    Articles are immutable once created; the editor emits scored copies.
    """

    id: str
    title: str
    content: str
    source: str
    source_url: str
    publication_date: str  # ISO 8601
    image_url: Optional[str] = None
    relevance_scores: RelevanceScores = Field(default_factory=RelevanceScores)
    business_field: BusinessField
    key_innovations: list[str] = Field(default_factory=list)
    actionable_insights: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    def published_at(self) -> Optional[datetime]:
        """Parse `publication_date`, returning None when it is not ISO 8601."""
        raw = self.publication_date.strip()
        if not raw:
            return None
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    def with_scores(self, scores: RelevanceScores) -> "Article":
        return self.model_copy(update={"relevance_scores": scores})

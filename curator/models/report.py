from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from curator.models.article import BusinessField


class FieldSummary(BaseModel):
    business_field: BusinessField
    article_count: int
    average_score: float
    summary: str
    top_insights: list[str] = Field(default_factory=list)


class CompiledReport(BaseModel):
    """Editorial digest built from the accepted articles."""

    narrative: str
    sections: list[FieldSummary] = Field(default_factory=list)
    total_articles: int = 0
    generated_at: datetime

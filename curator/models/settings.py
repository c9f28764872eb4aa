from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from curator.models.article import BusinessField


class CompanyBranch(BaseModel):
    id: str
    name: str
    description: str = ""
    location: str = ""
    business_field: BusinessField


class SourceToggles(BaseModel):
    websites: bool = True
    twitter: bool = True
    credit_sources: bool = True


class RelevanceWeights(BaseModel):
    """Dimension weights; expected to sum to about 1 but not enforced."""

    technical: float = Field(default=0.4, ge=0.0, le=1.0)
    business: float = Field(default=0.4, ge=0.0, le=1.0)
    sustainability: float = Field(default=0.2, ge=0.0, le=1.0)


class CompetitorAnalysisSettings(BaseModel):
    enabled: bool = False
    competitors: list[str] = Field(default_factory=list)
    update_frequency: int = 24  # hours
    min_mentions_threshold: int = Field(default=1, ge=0)
    auto_generate_reports: bool = False


class VectorProvider(str, Enum):
    PINECONE = "pinecone"
    WEAVIATE = "weaviate"
    QDRANT = "qdrant"


class SearchParameters(BaseModel):
    top_k: int = Field(default=5, ge=1, le=100)
    min_score: float = Field(default=0.7, ge=0.0, le=1.0)
    include_metadata: bool = True


class VectorDatabaseSettings(BaseModel):
    enabled: bool = False
    provider: VectorProvider = VectorProvider.PINECONE
    dimension: int = Field(default=1536, ge=1)
    search_parameters: SearchParameters = Field(default_factory=SearchParameters)


class Settings(BaseModel):
    """Curation settings owned by the dashboard's settings subsystem.

    The pipeline only reads these; an orchestrator keeps its own deep copy
    for the duration of a run.
    """

    base_prompt: str = ""
    perplexity_prompt: str = ""
    editor_prompt: str = ""
    perplexity_max_tokens: int = 1024
    perplexity_temperature: float = 0.2
    perplexity_auto_retry: bool = True
    perplexity_stream: bool = False
    company_branches: list[CompanyBranch] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    timeframe: int = Field(default=7, ge=1)  # days
    sources: SourceToggles = Field(default_factory=SourceToggles)
    trusted_sources: list[str] = Field(default_factory=list)
    relevance_weights: RelevanceWeights = Field(default_factory=RelevanceWeights)
    minimum_score: float = Field(default=3.0, ge=0.0)
    priority_keywords: list[str] = Field(default_factory=list)
    exclusion_keywords: list[str] = Field(default_factory=list)
    competitor_analysis: CompetitorAnalysisSettings = Field(
        default_factory=CompetitorAnalysisSettings
    )
    vector_database: VectorDatabaseSettings = Field(default_factory=VectorDatabaseSettings)

    def business_fields(self) -> list[BusinessField]:
        """Distinct business fields of the configured branches, first-seen order."""
        seen: list[BusinessField] = []
        for branch in self.company_branches:
            if branch.business_field not in seen:
                seen.append(branch.business_field)
        return seen


def load_settings(path: str | Path) -> Settings:
    """Read a settings JSON export into a validated `Settings`."""
    raw = Path(path).read_text(encoding="utf-8")
    return Settings.model_validate(json.loads(raw))

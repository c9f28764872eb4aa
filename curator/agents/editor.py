from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from curator.models.article import Article
from curator.models.research import AgentResult
from curator.models.settings import RelevanceWeights
from curator.services import logger as log_service
from curator.services.report_builder import build_report
from curator.services.scoring import DimensionScorers, ScoringContext, score_article


@dataclass(slots=True)
class EditorConfig:
    editor_prompt: str = ""
    relevance_weights: RelevanceWeights = field(default_factory=RelevanceWeights)
    minimum_score: float = 0.0
    priority_keywords: list[str] = field(default_factory=list)
    exclusion_keywords: list[str] = field(default_factory=list)
    top_insights: int = 5


class EditorAgent:
    """Scores, filters and compiles the collected articles."""

    name = "editor"

    def __init__(self, config: EditorConfig, scorers: DimensionScorers | None = None):
        self.config = config
        self.scorers = scorers or DimensionScorers()
        self.context = ScoringContext(
            priority_keywords=tuple(config.priority_keywords),
            exclusion_keywords=tuple(config.exclusion_keywords),
        )

    async def compile_report(self, articles: list[Article]) -> AgentResult:
        try:
            scored = self.score_articles(articles)
            accepted = self.filter_by_relevance(scored)
            report = build_report(accepted, top_insights=self.config.top_insights)
            log_service.log_agent_step(
                self.name,
                "compile_report",
                "completed",
                {"received": len(articles), "accepted": len(accepted)},
            )
            return AgentResult.ok({"articles": accepted, "report": report})
        except Exception as e:
            logger.exception(f"Report compilation failed: {e}")
            log_service.log_agent_step(self.name, "compile_report", "failed", {"error": str(e)})
            return AgentResult.fail(str(e) or "Unknown error in EditorAgent")

    def score_articles(self, articles: list[Article]) -> list[Article]:
        return [
            score_article(article, self.scorers, self.context, self.config.relevance_weights)
            for article in articles
        ]

    def filter_by_relevance(self, articles: list[Article]) -> list[Article]:
        return [
            a for a in articles if a.relevance_scores.overall >= self.config.minimum_score
        ]

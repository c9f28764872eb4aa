from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from loguru import logger

from curator.models.article import Article
from curator.models.competitor import (
    CompetitorAnalysisReport,
    CompetitorMention,
    CompetitorStats,
    CompetitorTrends,
    MarketStance,
    Timeframe,
)
from curator.models.research import AgentResult
from curator.services import logger as log_service
from curator.services.competitive_signals import SignalAnalyzers, consolidate_market_position


@dataclass(slots=True)
class CompetitorAnalysisConfig:
    competitors: list[str]
    min_mentions_threshold: int
    timeframe: Timeframe
    recent_mentions_limit: int = 5

    @classmethod
    def trailing_days(
        cls,
        competitors: list[str],
        min_mentions_threshold: int,
        days: int,
        recent_mentions_limit: int = 5,
        now: datetime | None = None,
    ) -> "CompetitorAnalysisConfig":
        end = now or datetime.now(timezone.utc)
        return cls(
            competitors=list(competitors),
            min_mentions_threshold=min_mentions_threshold,
            timeframe=Timeframe(start=end - timedelta(days=days), end=end),
            recent_mentions_limit=recent_mentions_limit,
        )


def average_sentiment(mentions: list[CompetitorMention]) -> float:
    """Mean of positive=+1, neutral=0, negative=-1; 0 when there are no mentions."""
    if not mentions:
        return 0.0
    return sum(m.sentiment.value_score for m in mentions) / len(mentions)


class CompetitorAnalysisAgent:
    """Mines accepted articles for mentions of tracked competitors."""

    name = "competitor_analysis"

    def __init__(self, config: CompetitorAnalysisConfig, analyzers: SignalAnalyzers | None = None):
        self.config = config
        self.analyzers = analyzers or SignalAnalyzers()

    async def analyze_articles(self, articles: list[Article]) -> AgentResult:
        try:
            mentions = self.extract_competitor_mentions(articles)
            report = self.generate_analysis_report(mentions)
            log_service.log_agent_step(
                self.name,
                "analyze_articles",
                "completed",
                {
                    "articles": len(articles),
                    "mentions": len(mentions),
                    "reported": len(report.competitors),
                },
            )
            return AgentResult.ok({"mentions": mentions, "report": report})
        except Exception as e:
            logger.exception(f"Competitor analysis failed: {e}")
            log_service.log_agent_step(self.name, "analyze_articles", "failed", {"error": str(e)})
            return AgentResult.fail(str(e) or "Unknown error in CompetitorAnalysisAgent")

    def extract_competitor_mentions(self, articles: list[Article]) -> list[CompetitorMention]:
        mentions: list[CompetitorMention] = []
        for article in articles:
            mentions.extend(self.find_competitor_mentions(article))
        return mentions

    def find_competitor_mentions(self, article: Article) -> list[CompetitorMention]:
        content = article.content.lower()
        detected_at = datetime.now(timezone.utc)
        mentions: list[CompetitorMention] = []
        for competitor in self.config.competitors:
            if not competitor.strip() or competitor.lower() not in content:
                continue
            digest = hashlib.sha1(f"{article.id}|{competitor}".encode("utf-8")).hexdigest()[:12]
            mentions.append(
                CompetitorMention(
                    id=f"mention-{digest}",
                    competitor_name=competitor,
                    article_id=article.id,
                    sentiment=self.analyzers.sentiment(article.content, competitor),
                    context=self.analyzers.context(article.content, competitor),
                    product_comparison=self.analyzers.product_comparison(article, competitor),
                    market_position=self.analyzers.market_position(article, competitor),
                    timestamp=article.published_at() or detected_at,
                )
            )
        return mentions

    def generate_analysis_report(self, mentions: list[CompetitorMention]) -> CompetitorAnalysisReport:
        grouped = self.aggregate_competitor_stats(mentions)
        threshold = self.config.min_mentions_threshold
        trends = self.analyze_trends(grouped)

        competitors: list[CompetitorStats] = []
        below_threshold: list[str] = []
        for name, competitor_mentions in grouped.items():
            if len(competitor_mentions) < threshold:
                below_threshold.append(name)
                continue
            competitors.append(self._build_stats(name, competitor_mentions))

        return CompetitorAnalysisReport(
            timeframe=self.config.timeframe,
            competitors=competitors,
            below_threshold=below_threshold,
            recommendations=self.generate_recommendations(competitors, trends),
            trends=trends,
            timestamp=datetime.now(timezone.utc),
        )

    def aggregate_competitor_stats(
        self, mentions: list[CompetitorMention]
    ) -> dict[str, list[CompetitorMention]]:
        grouped: dict[str, list[CompetitorMention]] = {}
        for mention in mentions:
            grouped.setdefault(mention.competitor_name, []).append(mention)
        return grouped

    def _build_stats(self, name: str, mentions: list[CompetitorMention]) -> CompetitorStats:
        chronological = sorted(mentions, key=lambda m: (m.timestamp, m.id))
        limit = max(self.config.recent_mentions_limit, 0)
        return CompetitorStats(
            name=name,
            total_mentions=len(mentions),
            average_sentiment=average_sentiment(mentions),
            product_comparisons=[
                m.product_comparison for m in mentions if m.product_comparison is not None
            ],
            market_position=consolidate_market_position([m.market_position for m in mentions]),
            recent_mentions=chronological[-limit:] if limit else [],
        )

    def analyze_trends(self, grouped: dict[str, list[CompetitorMention]]) -> CompetitorTrends:
        """Compare mention counts before and after the timeframe midpoint."""
        midpoint = self.config.timeframe.midpoint
        trends = CompetitorTrends()
        for name, mentions in grouped.items():
            later = sum(1 for m in mentions if m.timestamp >= midpoint)
            earlier = len(mentions) - later
            if later > earlier:
                trends.emerging.append(name)
            elif later < earlier:
                trends.declining.append(name)
        return trends

    def generate_recommendations(
        self,
        competitors: list[CompetitorStats],
        trends: CompetitorTrends,
    ) -> list[str]:
        recommendations: list[str] = []
        for stats in competitors:
            name = stats.name
            if stats.average_sentiment >= 0.5:
                recommendations.append(
                    f"{name}: coverage is predominantly positive ({stats.average_sentiment:+.2f}); "
                    "review our positioning against their recent announcements."
                )
            elif stats.average_sentiment <= -0.5:
                recommendations.append(
                    f"{name}: coverage is predominantly negative ({stats.average_sentiment:+.2f}); "
                    "highlight our strengths where they are struggling."
                )
            favoring = [pc for pc in stats.product_comparisons if pc.favors == "competitor"]
            if favoring:
                recommendations.append(
                    f"{name}: {len(favoring)} product comparison(s) favour the competitor; "
                    "brief the product teams."
                )
            if stats.market_position.stance == MarketStance.LEADER:
                recommendations.append(
                    f"{name} is described as a market leader; benchmark pricing and features."
                )
            if name in trends.emerging:
                recommendations.append(
                    f"{name} is gaining visibility over the reporting window; increase monitoring."
                )
        return recommendations

from __future__ import annotations

from datetime import datetime, timezone

from curator.models.article import Article, BusinessField
from curator.models.report import CompiledReport, FieldSummary
from curator.tools.text_utils import dedupe_casefold


def _rank(article: Article) -> tuple[float, str]:
    return (-article.relevance_scores.overall, article.id)


def group_by_field(articles: list[Article]) -> dict[BusinessField, list[Article]]:
    grouped: dict[BusinessField, list[Article]] = {}
    for business_field in BusinessField:
        members = [a for a in articles if a.business_field == business_field]
        if members:
            grouped[business_field] = sorted(members, key=_rank)
    return grouped


def summarize_field(
    business_field: BusinessField,
    articles: list[Article],
    top_insights: int,
) -> FieldSummary:
    average = sum(a.relevance_scores.overall for a in articles) / len(articles)
    lead = articles[0]
    innovations = dedupe_casefold([i for a in articles for i in a.key_innovations])
    summary = (
        f"{len(articles)} article(s) accepted for {business_field.value} "
        f"(average relevance {average:.2f}). Leading story: \"{lead.title}\" "
        f"from {lead.source}."
    )
    if innovations:
        summary += f" Key innovations: {'; '.join(innovations[:3])}."
    insights = dedupe_casefold([i for a in articles for i in a.actionable_insights])
    return FieldSummary(
        business_field=business_field,
        article_count=len(articles),
        average_score=round(average, 2),
        summary=summary,
        top_insights=insights[: max(top_insights, 0)],
    )


def render_narrative(sections: list[FieldSummary], top_insights: list[str]) -> str:
    if not sections:
        return "# Curated News Report\n\nNo articles met the minimum relevance score."

    lines = ["# Curated News Report", ""]
    for section in sections:
        lines.append(f"## {section.business_field.value}")
        lines.append("")
        lines.append(section.summary)
        lines.append("")
    if top_insights:
        lines.append("## Top Insights")
        lines.append("")
        lines.extend(f"{n}. {insight}" for n, insight in enumerate(top_insights, start=1))
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def build_report(articles: list[Article], top_insights: int = 5) -> CompiledReport:
    """Group accepted articles by business field and compile the digest."""
    grouped = group_by_field(articles)
    sections = [
        summarize_field(business_field, members, top_insights)
        for business_field, members in grouped.items()
    ]
    ranked = sorted(articles, key=_rank)
    insights = dedupe_casefold([i for a in ranked for i in a.actionable_insights])
    return CompiledReport(
        narrative=render_narrative(sections, insights[: max(top_insights, 0)]),
        sections=sections,
        total_articles=len(articles),
        generated_at=datetime.now(timezone.utc),
    )

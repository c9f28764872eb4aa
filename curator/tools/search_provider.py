from __future__ import annotations

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Protocol

from curator.models.article import Article, BusinessField
from curator.models.research import ResearchTask

# Seed vocabulary per business field; drives scope filtering and the stub refiner.
FIELD_SEED_TERMS: dict[BusinessField, tuple[str, ...]] = {
    BusinessField.HPC: ("computing", "supercomputer", "processor", "quantum", "performance"),
    BusinessField.BITCOIN: ("mining", "cryptocurrency", "blockchain", "hash", "power"),
    BusinessField.ENERGY_STORAGE: ("battery", "renewable", "grid", "storage", "efficiency"),
}


class ContentProvider(Protocol):
    """Search/content source queried once per research attempt.

    Implementations raise on failure; the research assistant retries.
    """

    async def search(self, task: ResearchTask) -> list[Article]: ...


class SemanticRefiner(Protocol):
    """Keyword expansion backed by a vector store. Failures are non-fatal."""

    async def refine(self, business_field: BusinessField, base_keywords: list[str]) -> list[str]: ...


class StubContentProvider:
    """Deterministic stand-in for the Perplexity search integration.

    Produces `articles_per_task` synthetic articles per task whose content is
    built from the task keywords, so downstream scoring has something real to
    work with.
    """

    name = "stub"

    def __init__(self, articles_per_task: int = 2, now: datetime | None = None):
        self.articles_per_task = max(int(articles_per_task), 0)
        self._now = now

    async def search(self, task: ResearchTask) -> list[Article]:
        now = self._now or datetime.now(timezone.utc)
        keywords = task.keywords or list(FIELD_SEED_TERMS[task.business_field])
        field_name = task.business_field.value
        articles: list[Article] = []
        for index in range(self.articles_per_task):
            digest = hashlib.sha1(f"{task.id}|{index}".encode("utf-8")).hexdigest()[:12]
            focus = keywords[index % len(keywords)]
            content = (
                f"{field_name} update on {focus}. "
                f"Industry coverage of {', '.join(keywords)} continues to grow. "
                f"Operators report new {focus} developments this week."
            )
            articles.append(
                Article(
                    id=f"article-{digest}",
                    title=f"{field_name}: {focus.title()} roundup #{index + 1}",
                    content=content,
                    source="Stub Wire",
                    source_url=f"https://news.example.com/{digest}",
                    publication_date=(now - timedelta(hours=index)).isoformat(),
                    business_field=task.business_field,
                    key_innovations=[f"Advances in {focus}"],
                    actionable_insights=[f"Track {focus} developments in {field_name}"],
                )
            )
        return articles


class SeedVocabularyRefiner:
    """Stand-in for the vector database: expands keywords with the field seeds."""

    name = "seed_vocabulary"

    async def refine(self, business_field: BusinessField, base_keywords: list[str]) -> list[str]:
        existing = {k.lower() for k in base_keywords}
        expansion = [t for t in FIELD_SEED_TERMS[business_field] if t not in existing]
        return [*base_keywords, *expansion]

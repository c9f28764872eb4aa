from __future__ import annotations

import os

# Keep test runs from writing rotating log files into the working tree.
os.environ.setdefault("LOG_TO_FILE", "false")

from datetime import datetime, timezone

import pytest
from loguru import logger

from curator.models.article import Article, BusinessField


@pytest.fixture
def log_records():
    """Collect loguru records emitted during the test."""
    records: list[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def make_article():
    counter = {"n": 0}

    def factory(
        content: str = "Industry update.",
        *,
        business_field: BusinessField = BusinessField.HPC,
        title: str | None = None,
        article_id: str | None = None,
        publication_date: str | None = None,
        insights: list[str] | None = None,
        innovations: list[str] | None = None,
    ) -> Article:
        counter["n"] += 1
        n = counter["n"]
        return Article(
            id=article_id or f"article-{n}",
            title=title or f"Article {n}",
            content=content,
            source="Test Wire",
            source_url=f"https://news.example.com/{n}",
            publication_date=publication_date or datetime(2026, 10, 1, tzinfo=timezone.utc).isoformat(),
            business_field=business_field,
            key_innovations=innovations or [],
            actionable_insights=insights or [],
        )

    return factory

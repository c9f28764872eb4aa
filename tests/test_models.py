from __future__ import annotations

import json
from datetime import timezone

import pytest

from curator.errors import InvalidTransition
from curator.models.article import BusinessField
from curator.models.research import AgentResult, ResearchTask, TaskStatus
from curator.models.settings import CompanyBranch, Settings, load_settings


def _branch(branch_id: str, business_field: BusinessField) -> CompanyBranch:
    return CompanyBranch(id=branch_id, name=f"Branch {branch_id}", business_field=business_field)


class TestResearchTaskLifecycle:
    def test_happy_path_returns_new_objects(self, make_article):
        task = ResearchTask(id="t1", business_field=BusinessField.HPC, keywords=["quantum"])
        running = task.start()
        done = running.complete([make_article()])

        assert task.status == TaskStatus.PENDING
        assert running.status == TaskStatus.IN_PROGRESS
        assert done.status == TaskStatus.COMPLETED
        assert len(done.results) == 1
        assert task.results is None

    def test_failure_records_error(self):
        failed = ResearchTask(id="t1", business_field=BusinessField.BITCOIN).start().fail("boom")
        assert failed.status == TaskStatus.FAILED
        assert failed.error == "boom"

    def test_illegal_transitions_raise(self):
        task = ResearchTask(id="t1", business_field=BusinessField.HPC)
        with pytest.raises(InvalidTransition):
            task.complete([])
        done = task.start().complete([])
        with pytest.raises(InvalidTransition):
            done.start()


def test_agent_result_constructors():
    ok = AgentResult.ok([1, 2], warnings=["degraded"])
    failed = AgentResult.fail("nope")

    assert ok.success is True and ok.data == [1, 2] and ok.warnings == ["degraded"]
    assert failed.success is False and failed.error == "nope" and failed.data is None


def test_business_fields_are_distinct_in_first_seen_order():
    settings = Settings(
        company_branches=[
            _branch("1", BusinessField.BITCOIN),
            _branch("2", BusinessField.HPC),
            _branch("3", BusinessField.BITCOIN),
        ]
    )
    assert settings.business_fields() == [BusinessField.BITCOIN, BusinessField.HPC]


def test_relevance_weights_are_bounded():
    with pytest.raises(ValueError):
        Settings.model_validate({"relevance_weights": {"technical": 1.5}})


def test_article_published_at_handles_zulu_and_garbage(make_article):
    zulu = make_article(publication_date="2026-10-01T08:00:00Z")
    naive = make_article(publication_date="2026-10-01T08:00:00")
    garbage = make_article(publication_date="last tuesday")

    assert zulu.published_at().tzinfo is not None
    assert naive.published_at().tzinfo == timezone.utc
    assert garbage.published_at() is None


def test_load_settings_reads_json(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "company_branches": [
                    {"id": "b1", "name": "North", "business_field": "Energy Storage"}
                ],
                "keywords": ["battery"],
                "competitor_analysis": {"enabled": True, "competitors": ["Acme"]},
            }
        ),
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings.business_fields() == [BusinessField.ENERGY_STORAGE]
    assert settings.competitor_analysis.enabled is True
    assert settings.competitor_analysis.competitors == ["Acme"]

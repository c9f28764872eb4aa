from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from curator.agents.research_assistant import (
    ResearchAssistantAgent,
    ResearchAssistantConfig,
    ResearchAssistantPool,
)
from curator.models.article import BusinessField
from curator.models.research import ResearchTask, TaskStatus


def _config(**overrides) -> ResearchAssistantConfig:
    values = {"backoff_seconds": 0.0, "timeout_seconds": 1.0}
    values.update(overrides)
    return ResearchAssistantConfig(**values)


def _task(task_id: str = "task-1", business_field: BusinessField = BusinessField.HPC) -> ResearchTask:
    return ResearchTask(id=task_id, business_field=business_field, keywords=["quantum"])


@pytest.mark.asyncio
async def test_retries_until_provider_succeeds(make_article):
    article = make_article()
    provider = AsyncMock()
    provider.search.side_effect = [RuntimeError("502"), RuntimeError("503"), [article]]
    agent = ResearchAssistantAgent(_config(), provider)

    result = await agent.perform_research(_task().start())

    assert result.success is True
    assert result.data == [article]
    assert provider.search.await_count == 3


@pytest.mark.asyncio
async def test_retry_bound_is_one_plus_retry_max(log_records):
    provider = AsyncMock()
    provider.search.side_effect = RuntimeError("provider down")
    agent = ResearchAssistantAgent(_config(retry_max=3), provider)

    result = await agent.perform_research(_task().start())

    assert result.success is False
    assert provider.search.await_count == 4
    assert "after 4 attempt(s)" in result.error
    assert "provider down" in result.error
    assert any(r["level"].name == "WARNING" for r in log_records)


@pytest.mark.asyncio
async def test_auto_retry_disabled_makes_single_attempt():
    provider = AsyncMock()
    provider.search.side_effect = RuntimeError("nope")
    agent = ResearchAssistantAgent(_config(auto_retry=False), provider)

    result = await agent.perform_research(_task().start())

    assert result.success is False
    assert provider.search.await_count == 1


@pytest.mark.asyncio
async def test_timeout_counts_as_retryable_failure(make_article):
    article = make_article()
    calls = {"n": 0}

    class SlowThenFastProvider:
        async def search(self, task):
            calls["n"] += 1
            if calls["n"] == 1:
                await asyncio.sleep(1)
            return [article]

    agent = ResearchAssistantAgent(_config(timeout_seconds=0.05, retry_max=1), SlowThenFastProvider())

    result = await agent.perform_research(_task().start())

    assert result.success is True
    assert calls["n"] == 2


@pytest.mark.asyncio
async def test_timeout_error_message_when_exhausted():
    class HangingProvider:
        async def search(self, task):
            await asyncio.sleep(1)
            return []

    agent = ResearchAssistantAgent(_config(timeout_seconds=0.02, auto_retry=False), HangingProvider())

    result = await agent.perform_research(_task().start())

    assert result.success is False
    assert "timed out" in result.error


@pytest.mark.asyncio
async def test_concurrent_tasks_on_one_agent_keep_separate_retry_counts(make_article):
    failures = {"flaky": 2}

    class FlakyProvider:
        async def search(self, task):
            await asyncio.sleep(0)
            if task.id == "flaky" and failures["flaky"] > 0:
                failures["flaky"] -= 1
                raise RuntimeError("transient")
            return [make_article(business_field=task.business_field)]

    agent = ResearchAssistantAgent(_config(retry_max=2), FlakyProvider())

    flaky, steady = await asyncio.gather(
        agent.perform_research(_task("flaky").start()),
        agent.perform_research(_task("steady").start()),
    )

    assert flaky.success is True
    assert steady.success is True


@pytest.mark.asyncio
async def test_pool_runs_oversubscribed_batch_serially_per_worker(make_article):
    state = {"active": 0, "peak": 0}

    class CountingProvider:
        async def search(self, task):
            state["active"] += 1
            state["peak"] = max(state["peak"], state["active"])
            await asyncio.sleep(0.01)
            state["active"] -= 1
            return [make_article(business_field=task.business_field)]

    pool = ResearchAssistantPool.create(2, _config(), CountingProvider())
    batch = [_task(f"task-{i}") for i in range(4)]

    results = await pool.run_batch(batch)

    assert pool.size == 2
    assert state["peak"] == 2
    assert [task.id for task, _ in results] == ["task-0", "task-1", "task-2", "task-3"]
    assert all(task.status == TaskStatus.COMPLETED for task, _ in results)


@pytest.mark.asyncio
async def test_pool_reports_status_transitions(make_article):
    class SelectiveProvider:
        async def search(self, task):
            if task.business_field == BusinessField.BITCOIN:
                raise RuntimeError("rate limited")
            return [make_article(business_field=task.business_field)]

    pool = ResearchAssistantPool.create(2, _config(auto_retry=False), SelectiveProvider())
    seen: list[tuple[str, TaskStatus]] = []

    results = await pool.run_batch(
        [_task("hpc", BusinessField.HPC), _task("btc", BusinessField.BITCOIN)],
        on_status=lambda task: seen.append((task.id, task.status)),
    )

    hpc_statuses = [status for task_id, status in seen if task_id == "hpc"]
    btc_statuses = [status for task_id, status in seen if task_id == "btc"]
    assert hpc_statuses == [TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED]
    assert btc_statuses == [TaskStatus.IN_PROGRESS, TaskStatus.FAILED]

    (hpc_task, hpc_result), (btc_task, btc_result) = results
    assert hpc_result.success and len(hpc_task.results) == 1
    assert not btc_result.success
    assert "rate limited" in btc_task.error


def test_pool_requires_workers():
    with pytest.raises(ValueError):
        ResearchAssistantPool([])


def test_pool_can_run_batches_under_separate_event_loops(make_article):
    class SlowProvider:
        async def search(self, task):
            await asyncio.sleep(0.01)
            return [make_article(business_field=task.business_field)]

    pool = ResearchAssistantPool.create(1, _config(), SlowProvider())
    batch = [_task("task-0"), _task("task-1")]

    for _ in range(2):
        results = asyncio.run(pool.run_batch(batch))
        assert [task.status for task, _ in results] == [TaskStatus.COMPLETED, TaskStatus.COMPLETED]

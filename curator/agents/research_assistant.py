from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable

from loguru import logger

from curator.errors import ProviderError
from curator.models.research import AgentResult, ResearchTask
from curator.services import logger as log_service
from curator.tools.search_provider import ContentProvider

StatusCallback = Callable[[ResearchTask], None]


@dataclass(slots=True)
class ResearchAssistantConfig:
    auto_retry: bool = True
    retry_max: int = 3
    timeout_seconds: float = 60.0
    backoff_seconds: float = 0.25

    @property
    def max_attempts(self) -> int:
        if not self.auto_retry:
            return 1
        return max(int(self.retry_max), 0) + 1


class ResearchAssistantAgent:
    """Runs a single research task against the content provider."""

    name = "research_assistant"

    def __init__(self, config: ResearchAssistantConfig, provider: ContentProvider):
        self.config = config
        self.provider = provider

    async def perform_research(self, task: ResearchTask) -> AgentResult:
        last_error: Exception | None = None
        max_attempts = self.config.max_attempts

        # attempt is local to this call; concurrent tasks on one agent never share it
        for attempt in range(1, max_attempts + 1):
            started = time.monotonic()
            try:
                articles = await asyncio.wait_for(
                    self.provider.search(task),
                    timeout=self.config.timeout_seconds,
                )
                log_service.log_provider_call(
                    task.id,
                    attempt,
                    duration_ms=int((time.monotonic() - started) * 1000),
                    articles=len(articles),
                )
                return AgentResult.ok(list(articles))
            except asyncio.TimeoutError:
                last_error = ProviderError(
                    f"Provider timed out after {self.config.timeout_seconds:g}s"
                )
            except Exception as e:
                last_error = e

            log_service.log_provider_call(
                task.id,
                attempt,
                duration_ms=int((time.monotonic() - started) * 1000),
                status="failed",
                error=str(last_error),
            )
            if attempt < max_attempts:
                await asyncio.sleep(min(self.config.backoff_seconds * attempt, 1.0))

        message = f"Research failed for {task.id} after {max_attempts} attempt(s): {last_error}"
        logger.warning(message)
        return AgentResult.fail(message)


class ResearchAssistantPool:
    """Fixed set of assistants; task i of a batch goes to worker i % size.

    Each worker processes its share serially, so a batch larger than the
    pool queues up behind the busy workers instead of overlapping on them.
    Worker locks are created per batch, inside the running event loop.
    """

    def __init__(self, workers: list[ResearchAssistantAgent]):
        if not workers:
            raise ValueError("Research assistant pool needs at least one worker")
        self._workers = tuple(workers)

    @classmethod
    def create(
        cls,
        size: int,
        config: ResearchAssistantConfig,
        provider: ContentProvider,
    ) -> "ResearchAssistantPool":
        return cls([ResearchAssistantAgent(config, provider) for _ in range(max(int(size), 1))])

    @property
    def size(self) -> int:
        return len(self._workers)

    async def _run_on_worker(
        self,
        index: int,
        task: ResearchTask,
        locks: tuple[asyncio.Lock, ...],
        on_status: StatusCallback | None,
    ) -> tuple[ResearchTask, AgentResult]:
        slot = index % len(self._workers)
        async with locks[slot]:
            running = task.start()
            if on_status:
                on_status(running)
            try:
                result = await self._workers[slot].perform_research(running)
            except Exception as e:
                logger.exception(f"Research assistant crashed on {task.id}: {e}")
                result = AgentResult.fail(str(e) or "Unknown error in ResearchAssistantAgent")

        if result.success:
            finished = running.complete(result.data or [])
        else:
            finished = running.fail(result.error or "unknown error")
        if on_status:
            on_status(finished)
        return finished, result

    async def run_batch(
        self,
        batch: list[ResearchTask],
        on_status: StatusCallback | None = None,
    ) -> list[tuple[ResearchTask, AgentResult]]:
        """Run all tasks of a batch concurrently; results come back in batch order."""
        locks = tuple(asyncio.Lock() for _ in self._workers)
        return list(
            await asyncio.gather(
                *(
                    self._run_on_worker(i, task, locks, on_status)
                    for i, task in enumerate(batch)
                )
            )
        )

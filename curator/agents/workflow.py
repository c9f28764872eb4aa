from __future__ import annotations

import time
from typing import Any, AsyncGenerator

from loguru import logger

from curator.agents.competitor_analysis import CompetitorAnalysisAgent, CompetitorAnalysisConfig
from curator.agents.editor import EditorAgent, EditorConfig
from curator.agents.project_planner import ProjectPlannerAgent, ProjectPlannerConfig
from curator.agents.research_assistant import ResearchAssistantConfig, ResearchAssistantPool
from curator.agents.research_leader import ResearchLeaderAgent, ResearchLeaderConfig
from curator.config import RuntimeSettings, settings as runtime_settings
from curator.models.article import Article
from curator.models.events import WorkflowEvent
from curator.models.research import AgentResult, ResearchTask
from curator.models.settings import Settings
from curator.services import logger as log_service
from curator.services import streaming
from curator.services.competitive_signals import SignalAnalyzers
from curator.services.scoring import DimensionScorers
from curator.tools.search_provider import (
    ContentProvider,
    SeedVocabularyRefiner,
    SemanticRefiner,
    StubContentProvider,
)


class AgentWorkflow:
    """Runs the curation pipeline for one settings snapshot.

    Flow:
      1. Research leader scopes one task per business field
      2. Project planner orders tasks into bounded batches
      3. Batches run one after another; tasks inside a batch run concurrently
      4. Editor scores, filters and compiles the report
      5. Optional competitor analysis over the accepted articles

    Scope, plan and edit failures abort the run, as does a crash of the
    assistant pool itself. Individual research tasks and competitor analysis
    may fail without affecting the result.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        provider: ContentProvider | None = None,
        refiner: SemanticRefiner | None = None,
        runtime: RuntimeSettings | None = None,
        scorers: DimensionScorers | None = None,
        analyzers: SignalAnalyzers | None = None,
    ):
        self.settings = settings.model_copy(deep=True)
        self.runtime = runtime or runtime_settings
        snapshot = self.settings

        self.research_leader = ResearchLeaderAgent(
            ResearchLeaderConfig(
                base_prompt=snapshot.base_prompt,
                business_fields=snapshot.business_fields(),
                keywords=list(snapshot.keywords),
                timeframe=snapshot.timeframe,
                vector_search_enabled=snapshot.vector_database.enabled,
                refine_top_k=snapshot.vector_database.search_parameters.top_k,
            ),
            refiner=refiner or SeedVocabularyRefiner(),
        )
        self.project_planner = ProjectPlannerAgent(
            ProjectPlannerConfig(
                max_parallel_tasks=max(int(self.runtime.max_parallel_tasks), 1),
                task_priority=self.runtime.task_priority,
            )
        )
        self.research_assistants = ResearchAssistantPool.create(
            self.runtime.research_pool_size,
            ResearchAssistantConfig(
                auto_retry=snapshot.perplexity_auto_retry,
                retry_max=self.runtime.research_retry_max,
                timeout_seconds=self.runtime.research_task_timeout_seconds,
                backoff_seconds=self.runtime.research_retry_backoff_seconds,
            ),
            provider or StubContentProvider(),
        )
        self.editor = EditorAgent(
            EditorConfig(
                editor_prompt=snapshot.editor_prompt,
                relevance_weights=snapshot.relevance_weights,
                minimum_score=snapshot.minimum_score,
                priority_keywords=list(snapshot.priority_keywords),
                exclusion_keywords=list(snapshot.exclusion_keywords),
                top_insights=self.runtime.report_top_insights,
            ),
            scorers=scorers,
        )
        self.competitor_analysis: CompetitorAnalysisAgent | None = None
        if snapshot.competitor_analysis.enabled:
            self.competitor_analysis = CompetitorAnalysisAgent(
                CompetitorAnalysisConfig.trailing_days(
                    competitors=snapshot.competitor_analysis.competitors,
                    min_mentions_threshold=snapshot.competitor_analysis.min_mentions_threshold,
                    days=snapshot.timeframe,
                    recent_mentions_limit=self.runtime.recent_mentions_limit,
                ),
                analyzers=analyzers,
            )

        self.tasks: list[ResearchTask] = []
        self.result: AgentResult | None = None

    async def execute_workflow(self) -> AgentResult:
        """Run the pipeline to completion and return the final envelope."""
        async for _event in self.stream():
            pass
        if self.result is None:
            return AgentResult.fail("workflow: stream ended without a result")
        return self.result

    async def stream(self) -> AsyncGenerator[WorkflowEvent, None]:
        """Run the pipeline, yielding progress events. The outcome lands in `self.result`."""
        started = time.monotonic()
        self.result = None
        self.tasks = []
        yield streaming.workflow_started([f.value for f in self.settings.business_fields()])

        # Stage 1: scope
        yield streaming.stage_started("scope")
        scope = await self.research_leader.establish_scope()
        for message in scope.warnings:
            yield streaming.warning(message, stage="scope")
        if not scope.success:
            yield self._abort("scope", scope.error)
            return
        tasks: list[ResearchTask] = scope.data
        yield streaming.stage_completed("scope", tasks=len(tasks))

        # Stage 2: plan
        yield streaming.stage_started("plan", tasks=len(tasks))
        plan = await self.project_planner.plan_research(tasks)
        if not plan.success:
            yield self._abort("plan", plan.error)
            return
        batches: list[list[ResearchTask]] = plan.data
        yield streaming.stage_completed("plan", batches=len(batches))

        # Stage 3: research, batch by batch
        yield streaming.stage_started("research", batches=len(batches))
        all_articles: list[Article] = []
        for batch_index, batch in enumerate(batches):
            status_events: list[WorkflowEvent] = []
            try:
                outcomes = await self.research_assistants.run_batch(
                    batch,
                    on_status=lambda t, b=batch_index: status_events.append(
                        streaming.task_status(t, batch=b)
                    ),
                )
            except Exception as e:
                logger.exception(f"Research batch {batch_index} crashed: {e}")
                yield self._abort("research", str(e) or type(e).__name__)
                return
            for event in status_events:
                yield event

            batch_articles = 0
            failed = 0
            for finished, result in outcomes:
                self.tasks.append(finished)
                if result.success and result.data:
                    all_articles.extend(result.data)
                    batch_articles += len(result.data)
                elif not result.success:
                    failed += 1
            yield streaming.batch_completed(batch_index, len(batch), batch_articles, failed)
        yield streaming.stage_completed("research", articles=len(all_articles))

        # Stage 4: edit
        yield streaming.stage_started("edit", articles=len(all_articles))
        edited = await self.editor.compile_report(all_articles)
        if not edited.success:
            yield self._abort("edit", edited.error)
            return
        data: dict[str, Any] = dict(edited.data)
        yield streaming.stage_completed("edit", accepted=len(data["articles"]))

        # Stage 5: competitor analysis (non-fatal)
        if self.competitor_analysis is not None:
            yield streaming.stage_started("competitor_analysis")
            try:
                analysis = await self.competitor_analysis.analyze_articles(data["articles"])
            except Exception as e:
                analysis = AgentResult.fail(str(e) or type(e).__name__)
            if analysis.success:
                data["competitor_analysis"] = analysis.data["report"]
                yield streaming.stage_completed(
                    "competitor_analysis", mentions=len(analysis.data["mentions"])
                )
            else:
                message = f"Competitor analysis skipped: {analysis.error}"
                logger.warning(message)
                yield streaming.warning(message, stage="competitor_analysis")
                yield streaming.stage_completed("competitor_analysis", success=False)

        runtime_ms = int((time.monotonic() - started) * 1000)
        self.result = AgentResult.ok(data, warnings=scope.warnings)
        log_service.log_event(
            "workflow_complete",
            "Curation workflow finished",
            articles=len(data["articles"]),
            runtime_ms=runtime_ms,
        )
        yield streaming.workflow_complete(
            articles=len(data["articles"]),
            runtime_ms=runtime_ms,
            competitor_analysis="competitor_analysis" in data,
        )

    def _abort(self, stage: str, error: str | None) -> WorkflowEvent:
        message = f"{stage}: {error or 'unknown error'}"
        logger.error(f"Workflow aborted at {stage} stage: {error}")
        self.result = AgentResult.fail(message)
        return streaming.error(message, stage=stage)

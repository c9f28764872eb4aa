from __future__ import annotations

from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field

from curator.models.research import AgentResult, ResearchTask
from curator.services import logger as log_service

TaskPriority = Literal["balanced", "depth", "breadth"]


class ProjectPlannerConfig(BaseModel):
    max_parallel_tasks: int = Field(default=3, ge=1)
    task_priority: TaskPriority = "balanced"


def _tiebreak(task: ResearchTask) -> tuple[int, str]:
    return (task.business_field.rank, task.id)


def priority_key(task: ResearchTask, mode: TaskPriority) -> tuple:
    """Sort key giving a total order over tasks for the given priority mode.

    balanced: business fields in declaration order, richer keyword lists first
    depth:    richer keyword lists first, regardless of field
    breadth:  leaner keyword lists first so every field starts early
    """
    keyword_count = len(task.keywords)
    if mode == "depth":
        return (-keyword_count, *_tiebreak(task))
    if mode == "breadth":
        return (keyword_count, *_tiebreak(task))
    return (task.business_field.rank, -keyword_count, task.id)


class ProjectPlannerAgent:
    """Orders research tasks and cuts them into bounded parallel batches."""

    name = "project_planner"

    def __init__(self, config: ProjectPlannerConfig):
        self.config = config

    async def plan_research(self, tasks: list[ResearchTask]) -> AgentResult:
        try:
            prioritized = self.prioritize_tasks(tasks)
            batches = self.create_task_batches(prioritized)
            log_service.log_agent_step(
                self.name,
                "plan_research",
                "completed",
                {
                    "tasks": len(tasks),
                    "batches": len(batches),
                    "priority": self.config.task_priority,
                },
            )
            return AgentResult.ok(batches)
        except Exception as e:
            logger.exception(f"Research planning failed: {e}")
            log_service.log_agent_step(self.name, "plan_research", "failed", {"error": str(e)})
            return AgentResult.fail(str(e) or "Unknown error in ProjectPlannerAgent")

    def prioritize_tasks(self, tasks: list[ResearchTask]) -> list[ResearchTask]:
        mode = self.config.task_priority
        return sorted(tasks, key=lambda task: priority_key(task, mode))

    def create_task_batches(self, tasks: list[ResearchTask]) -> list[list[ResearchTask]]:
        size = self.config.max_parallel_tasks
        return [tasks[i : i + size] for i in range(0, len(tasks), size)]

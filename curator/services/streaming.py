from __future__ import annotations

from typing import Any

from curator.models.events import EventType, WorkflowEvent
from curator.models.research import ResearchTask


def workflow_started(business_fields: list[str]) -> WorkflowEvent:
    return WorkflowEvent(
        event=EventType.WORKFLOW_STARTED,
        data={"business_fields": business_fields},
    )


def stage_started(stage: str, **kwargs: Any) -> WorkflowEvent:
    return WorkflowEvent(event=EventType.STAGE_STARTED, data={"stage": stage, **kwargs})


def stage_completed(stage: str, success: bool = True, **kwargs: Any) -> WorkflowEvent:
    return WorkflowEvent(
        event=EventType.STAGE_COMPLETED,
        data={"stage": stage, "success": success, **kwargs},
    )


def task_status(task: ResearchTask, batch: int | None = None) -> WorkflowEvent:
    """Emit the current status of a research task."""
    data: dict[str, Any] = {
        "task_id": task.id,
        "business_field": task.business_field.value,
        "status": task.status.value,
    }
    if batch is not None:
        data["batch"] = batch
    if task.results is not None:
        data["articles"] = len(task.results)
    if task.error:
        data["error"] = task.error
    return WorkflowEvent(event=EventType.TASK_STATUS, data=data)


def batch_completed(batch: int, tasks: int, articles: int, failed: int) -> WorkflowEvent:
    return WorkflowEvent(
        event=EventType.BATCH_COMPLETED,
        data={"batch": batch, "tasks": tasks, "articles": articles, "failed": failed},
    )


def warning(message: str, stage: str | None = None) -> WorkflowEvent:
    data: dict[str, Any] = {"message": message}
    if stage:
        data["stage"] = stage
    return WorkflowEvent(event=EventType.WARNING, data=data)


def workflow_complete(articles: int, runtime_ms: int, competitor_analysis: bool) -> WorkflowEvent:
    return WorkflowEvent(
        event=EventType.WORKFLOW_COMPLETE,
        data={
            "articles": articles,
            "runtime_ms": runtime_ms,
            "competitor_analysis": competitor_analysis,
        },
    )


def error(message: str, stage: str | None = None) -> WorkflowEvent:
    data: dict[str, Any] = {"message": message}
    if stage:
        data["stage"] = stage
    return WorkflowEvent(event=EventType.ERROR, data=data)

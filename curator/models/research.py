from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from curator.errors import InvalidTransition
from curator.models.article import Article, BusinessField


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


_ALLOWED_TRANSITIONS: dict[TaskStatus, set[TaskStatus]] = {
    TaskStatus.PENDING: {TaskStatus.IN_PROGRESS},
    TaskStatus.IN_PROGRESS: {TaskStatus.COMPLETED, TaskStatus.FAILED},
    TaskStatus.COMPLETED: set(),
    TaskStatus.FAILED: set(),
}


class ResearchTask(BaseModel):
    """Research scoped to a single business field.

    Status changes return a new task; the original is never mutated, so a
    task can be shared between the planner and the assistant pool safely.
    """

    id: str
    business_field: BusinessField
    keywords: list[str] = Field(default_factory=list)
    status: TaskStatus = TaskStatus.PENDING
    results: Optional[list[Article]] = None
    error: Optional[str] = None

    model_config = {"frozen": True}

    def _transition(self, target: TaskStatus, **update: Any) -> "ResearchTask":
        if target not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransition(self.id, self.status.value, target.value)
        return self.model_copy(update={"status": target, **update})

    def start(self) -> "ResearchTask":
        return self._transition(TaskStatus.IN_PROGRESS)

    def complete(self, results: list[Article]) -> "ResearchTask":
        return self._transition(TaskStatus.COMPLETED, results=list(results))

    def fail(self, error: str) -> "ResearchTask":
        return self._transition(TaskStatus.FAILED, error=error)


@dataclass(slots=True)
class AgentResult:
    """Uniform envelope returned by every agent operation."""

    success: bool
    data: Any = None
    error: str | None = None
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def ok(cls, data: Any = None, warnings: list[str] | None = None) -> "AgentResult":
        return cls(success=True, data=data, warnings=list(warnings or []))

    @classmethod
    def fail(cls, error: str, warnings: list[str] | None = None) -> "AgentResult":
        return cls(success=False, error=error, warnings=list(warnings or []))

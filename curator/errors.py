from __future__ import annotations


class CuratorError(Exception):
    """Base class for pipeline errors."""


class ScopeError(CuratorError):
    """The research scope could not be established from the settings."""


class ProviderError(CuratorError):
    """The content provider failed to return articles for a task."""


class InvalidTransition(CuratorError):
    """A research task was moved through an illegal status change."""

    def __init__(self, task_id: str, current: str, target: str):
        super().__init__(f"Task {task_id} cannot move from {current} to {target}")
        self.task_id = task_id
        self.current = current
        self.target = target

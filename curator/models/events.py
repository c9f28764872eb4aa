from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventType(str, Enum):
    WORKFLOW_STARTED = "workflow_started"
    STAGE_STARTED = "stage_started"
    STAGE_COMPLETED = "stage_completed"
    TASK_STATUS = "task_status"
    BATCH_COMPLETED = "batch_completed"
    WARNING = "warning"
    WORKFLOW_COMPLETE = "workflow_complete"
    ERROR = "error"


@dataclass
class WorkflowEvent:
    event: EventType
    data: dict[str, Any] = field(default_factory=dict)

    def format(self) -> str:
        return f"event: {self.event.value}\ndata: {json.dumps(self.data, default=str)}\n\n"

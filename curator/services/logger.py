"""Centralized logging service using loguru."""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from curator.config import settings

# Remove default handler
logger.remove()

# Add console handler with color
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    level=settings.app_log_level.upper(),
    colorize=True,
)

if settings.log_to_file:
    LOG_DIR = Path(settings.log_dir)
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    logger.add(
        LOG_DIR / "curator_{time:YYYY-MM-DD}.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        level="DEBUG",
        rotation="00:00",  # New file at midnight
        retention="7 days",
        compression="zip",
    )


def log_agent_step(
    agent: str,
    step: str,
    status: str,
    data: Optional[dict] = None,
) -> None:
    """Log a pipeline stage transition for one agent."""
    step_data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "agent": agent,
        "step": step,
        "status": status,
        "data": data,
    }
    if status == "failed":
        logger.error(f"AGENT_STEP_FAILED: {step_data}")
    else:
        logger.info(f"AGENT_STEP: {step_data}")


def log_provider_call(
    task_id: str,
    attempt: int,
    duration_ms: int = 0,
    status: str = "success",
    articles: int = 0,
    error: Optional[str] = None,
) -> None:
    """Log one content provider attempt."""
    call_data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "task_id": task_id,
        "attempt": attempt,
        "duration_ms": duration_ms,
        "status": status,
        "articles": articles,
        "error": error,
    }
    if error:
        logger.warning(f"PROVIDER_CALL_FAILED: {call_data}")
    else:
        logger.debug(f"PROVIDER_CALL: {call_data}")


def log_event(
    event_type: str,
    message: str,
    level: str = "INFO",
    **kwargs: Any,
) -> None:
    """Log a generic event."""
    event_data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event_type": event_type,
        "message": message,
        **kwargs,
    }
    logger.log(level.upper(), f"EVENT: {event_data}")

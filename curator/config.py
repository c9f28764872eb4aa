from pydantic_settings import BaseSettings


class RuntimeSettings(BaseSettings):
    # Research assistant pool
    research_pool_size: int = 3
    research_retry_max: int = 3
    research_retry_backoff_seconds: float = 0.25
    research_task_timeout_seconds: float = 60.0

    # Planning
    max_parallel_tasks: int = 3
    task_priority: str = "balanced"  # balanced | depth | breadth

    # Editorial / competitor reporting
    report_top_insights: int = 5
    recent_mentions_limit: int = 5

    # App
    app_log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = RuntimeSettings()

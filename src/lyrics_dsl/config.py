"""Application configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Defaults with env var overrides (``LYRICS_DSL_MAX_WORKERS=4`` etc.)."""

    # Linting
    max_workers: int = 1  # > 1 evaluates rules on a thread pool

    # Grading
    originality_baseline: int = 75  # no originality signal yet

    # Logging
    log_level: str = "WARNING"

    model_config = {"env_prefix": "LYRICS_DSL_"}


settings = Settings()

"""Configuration using pydantic-settings."""

from pydantic_settings import BaseSettings


class ExecutorSettings(BaseSettings):
    """Request executor configuration."""

    default_timeout: float = 60.0
    content_type: str = "application/x-www-form-urlencoded"
    version: str = "2.0"
    follow_redirects: bool = True
    user_agent: str | None = None

    model_config = {"env_prefix": "ONESHOT_"}


settings = ExecutorSettings()

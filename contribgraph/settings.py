from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Renderer settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    """

    default_output_path: str = "graph.png"
    git_binary: str = "git"
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

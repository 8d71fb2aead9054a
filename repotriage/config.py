from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "RepoTriage"
    debug: bool = False

    # GitHub
    github_token: str = ""  # Optional, anonymous access otherwise
    github_api_url: str = "https://api.github.com"
    github_user_agent: str = "repotriage"
    github_accept: str = "application/vnd.github+json"
    request_timeout: int = 15  # Seconds
    repos_per_page: int = 100

    # Triage policy
    archive_size_ceiling: int = 3_500_000  # Bytes, exclusive
    archive_ratio_threshold: float = 0.5  # Inclusive
    parallel_escalation: bool = True

    # Account-age gate, off unless explicitly enabled
    account_age_gate_enabled: bool = False
    max_account_age_days: int = 30

    model_config = ConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()

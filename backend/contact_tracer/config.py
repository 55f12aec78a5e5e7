"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - high_risk_threshold is a ratio in [0, 1]

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: works out-of-the-box
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from contact_tracer.core.domain_types import DEFAULT_HIGH_RISK_THRESHOLD


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Risk classification
    high_risk_threshold: float = DEFAULT_HIGH_RISK_THRESHOLD

    @field_validator("high_risk_threshold")
    @classmethod
    def check_ratio(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("high_risk_threshold must be between 0 and 1")
        return v

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()

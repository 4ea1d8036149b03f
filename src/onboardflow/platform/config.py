"""
Onboardflow Configuration Management

Uses Pydantic Settings for type-safe configuration from environment variables.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # =========================================================================
    # APPLICATION
    # =========================================================================
    APP_NAME: str = "Onboardflow"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "info"
    VERSION: str = "0.1.0"  # reported on every log event

    # =========================================================================
    # TEMPORAL (Workflow Engine)
    # =========================================================================
    TEMPORAL_HOST: str = "localhost:7233"
    TEMPORAL_NAMESPACE: str = "default"
    TEMPORAL_TASK_QUEUE: str = "onboarding-workflow"

    # =========================================================================
    # ACTIVITIES (timeouts / retry policy)
    # =========================================================================
    ACTIVITY_START_TO_CLOSE_SECONDS: int = 60
    ACTIVITY_MAX_ATTEMPTS: int = 5
    ACTIVITY_INITIAL_RETRY_SECONDS: int = 1

    # =========================================================================
    # ONBOARDING DEFAULTS (used by the starter)
    # =========================================================================
    FORM_FILL_DEADLINE_SECONDS: int = 50
    REMINDER_INTERVAL_SECONDS: int = 10
    REMINDER_LIMIT: int = 4

    # =========================================================================
    # SMTP (Email)
    # =========================================================================
    SMTP_ENABLED: bool = False
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM_EMAIL: str = "hr@example.com"
    SMTP_TLS: bool = True

    # =========================================================================
    # FOLLOW-UP TASKS
    # =========================================================================
    HR_TASK_ASSIGNEE: str = "hr-team"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for easy import
settings = get_settings()

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LEAVEDESK_",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Leave Desk"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    storage_url: str = "sqlite:///./leavedesk.db"
    employees_key: str = "lms_employees"
    leave_requests_key: str = "lms_leave_requests"
    seed_demo_data: bool = True

    # Leave policy constants (days).
    default_leave_balance: int = 25
    sick_leave_allowance: int = 10
    personal_leave_allowance: int = 5
    max_leave_days: int = 365
    low_balance_threshold: int = 5
    dashboard_list_limit: int = 5


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

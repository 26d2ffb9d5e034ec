"""Application configuration from environment."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "Phish Shift Trainer"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./phish_shift.db"
    seed_on_startup: bool = True

    # Shift policy
    shift_size: int = 10
    verification_budget: int = 3
    high_confidence_threshold: int = 85  # confidence (0-100) at which a wrong answer counts as overconfident

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()

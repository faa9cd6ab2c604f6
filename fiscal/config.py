"""Application configuration from environment."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment (and .env)."""

    model_config = SettingsConfigDict(
        env_prefix="FISCAL_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    db_path: str = "./data/fiscal.db"
    secret_key: str = "fiscal-secret-change-me"
    session_max_age: int = 60 * 60 * 24 * 7  # 7 days
    default_currency: str = "IDR"
    log_level: str = "INFO"
    balance_retry_attempts: int = 3
    seed_system_categories: bool = True

    @property
    def db_url(self) -> str:
        path = Path(self.db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite:///{path.resolve()}"


settings = Settings()

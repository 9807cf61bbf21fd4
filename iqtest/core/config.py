from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./iqtest.db"

    QUESTION_BANK_PATH: str = str(BASE_DIR / "data" / "questions.json")
    DEFAULT_QUESTION_COUNT: int = 35
    RESULTS_LIST_LIMIT: int = 50

    # Client-side countdown, reported to the frontend only
    TEST_DURATION_SECONDS: int = 30 * 60

    REPORTS_DIR: str = "reports"

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load project-root .env early so pydantic-settings and direct os.getenv access agree,
# even when the process CWD is not the repo root.
_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_IN_TEST = (os.getenv("ENVIRONMENT") or "").lower() == "test" or bool(os.getenv("PYTEST_CURRENT_TEST"))
if _ENV_PATH.exists() and not _IN_TEST:
    load_dotenv(dotenv_path=_ENV_PATH, override=True)


def _parse_origins(raw: Any) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, (list, tuple, set)):
        items = list(raw)
    elif isinstance(raw, str):
        s = raw.strip()
        if not s:
            return []
        # JSON array string or comma-separated string.
        if s.startswith("["):
            try:
                parsed = json.loads(s)
                items = parsed if isinstance(parsed, list) else [parsed]
            except ValueError:
                items = s.split(",")
        else:
            items = s.split(",")
    else:
        items = [raw]
    return [str(item).strip() for item in items if item is not None and str(item).strip()]


class Settings(BaseSettings):
    app_name: str = Field(default="Salary Prediction Dashboard API")
    service_name: str = Field(default="salary-prediction-api")
    api_prefix: str = Field(default="/api")
    version: str = Field(default="0.1.0")
    environment: str = Field(default="development")
    debug: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    # Database configuration. DB_URL wins; otherwise sqlite in development and
    # MySQL (DB_* parts) elsewhere.
    db_url: str | None = Field(default=None, validation_alias="DB_URL")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=3306, validation_alias="DB_PORT")
    db_name: str = Field(default="salary_dashboard", validation_alias="DB_NAME")
    db_user: str = Field(default="root", validation_alias="DB_USER")
    db_password: str = Field(default="password", validation_alias="DB_PASSWORD")
    db_charset: str = Field(default="utf8mb4", validation_alias="DB_CHARSET")

    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173", "http://127.0.0.1:5173"],
        validation_alias="CORS_ORIGINS",
    )

    # Response caches
    prediction_cache_ttl_seconds: float = Field(default=300.0, gt=0)
    prediction_cache_max_entries: int = Field(default=1000, ge=1)
    prediction_cache_trim_to: int = Field(default=500, ge=1)
    analytics_cache_ttl_seconds: float = Field(default=300.0, gt=0)
    stats_cache_ttl_seconds: float = Field(default=120.0, gt=0)

    predict_timeout_seconds: float = Field(default=3.0, gt=0)
    upload_max_bytes: int = Field(default=10 * 1024 * 1024, ge=1)

    # Ensemble training
    datasets_dir: Path = Field(default=Path("data"))
    model_dir: Path | None = Field(default=None)
    model_training_on_startup: bool = Field(default=True)
    model_warmup_delay_seconds: float = Field(default=10.0, ge=0)
    advanced_training_delay_seconds: float = Field(default=10.0, ge=0)

    # 0 disables the periodic performance report.
    performance_report_interval_seconds: float = Field(default=300.0, ge=0)

    seed_sample_data: bool = Field(default=True)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _validate_cors_origins(cls, v: Any) -> list[str]:
        return _parse_origins(v)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        protected_namespaces=(),
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def build_sqlalchemy_db_url(settings: Settings) -> str:
    if settings.db_url:
        return settings.db_url

    if settings.environment.lower() in ("development", "test"):
        return "sqlite:///./salary.db"

    # NOTE: passwords with special chars are safer passed through DB_URL.
    return (
        f"mysql+pymysql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
        f"?charset={settings.db_charset}"
    )

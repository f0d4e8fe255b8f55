"""Application configuration."""

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    serving_origin: str
    student_bucket: str = "student-photos"
    teacher_bucket: str = "teacher-photos"
    max_upload_bytes: int = 5 * 1024 * 1024
    qr_box_size: int = 10
    orphan_min_age_minutes: int = 60
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("serving_origin")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        """Store the origin without a trailing slash so paths join cleanly."""
        cleaned = value.strip().rstrip("/")
        if not cleaned.startswith(("http://", "https://")):
            raise ValueError("serving_origin must include the http(s) scheme")
        return cleaned

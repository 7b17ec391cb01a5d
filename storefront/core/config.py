from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_FILE = BASE_DIR / ".env"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    PROJECT_NAME: str = "Storefront Catalog"
    API_PREFIX: str = "/api"

    DATABASE_URL: str

    UPLOAD_DIR: Path = BASE_DIR / "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_PRODUCT_IMAGES: int = Field(default=10, ge=1)
    PUBLIC_DIR: Path = BASE_DIR / "public"

    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE_PATH: Optional[str] = None
    ENVIRONMENT: str = Field(default="development")

    CORS_ORIGINS: str = "*"

    @property
    def cors_origins(self) -> list[str]:
        value = self.CORS_ORIGINS.strip().strip("\"'")
        if value == "*":
            return ["*"]
        return [origin.strip() for origin in value.split(",") if origin.strip()]

    @field_validator("UPLOAD_DIR", "PUBLIC_DIR", mode="after")
    @classmethod
    def resolve_relative_dirs(cls, v: Path) -> Path:
        if not v.is_absolute():
            return BASE_DIR / v
        return v

    @field_validator("UPLOAD_URL_PREFIX", "API_PREFIX", mode="after")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        return "/" + v.strip("/")


load_dotenv(ENV_FILE)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()

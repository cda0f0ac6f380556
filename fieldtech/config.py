"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import yaml
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

_DEFAULT_DB_URL = "sqlite+aiosqlite:///data/fieldtech.db"
_DEFAULT_JWT_SECRET = "your-super-secret-jwt-key-change-in-production"


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


_yaml = _load_yaml()


class AuthConfig(BaseSettings):
    jwt_secret: str = _DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_expiry_hours: int = 24

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


class MediaConfig(BaseSettings):
    upload_dir: str = "data/uploads"
    url_prefix: str = "/uploads"
    max_file_size: int = 10 * 1024 * 1024
    allowed_types: list[str] = Field(default_factory=lambda: [
        "image/jpeg", "image/png", "image/gif",
        "video/mp4", "video/quicktime",
    ])


class ReviewConfig(BaseSettings):
    google_review_url: str = (
        "https://search.google.com/local/writereview?placeid=ChIJ4zh65TDHwoARD9qv25utrnk"
    )
    message: str = "Please scan this QR code or click the link to leave us a review on Google!"


class Settings(BaseSettings):
    app_name: str = "FieldTech Tickets"
    environment: str = "production"  # development | production
    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s %(message)s"
    database_url: str = _DEFAULT_DB_URL
    auth: AuthConfig = Field(default_factory=AuthConfig)
    media: MediaConfig = Field(default_factory=MediaConfig)
    review: ReviewConfig = Field(default_factory=ReviewConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def uses_default_secret(self) -> bool:
        return self.auth.jwt_secret == _DEFAULT_JWT_SECRET


def get_settings() -> Settings:
    """Build Settings by merging YAML defaults with env overrides.

    Keys present in config.yaml win; everything else (including the JWT
    secret, which should never be committed) comes from the environment.
    """
    y = _yaml
    auth = AuthConfig(**y.get("auth", {}))
    media = MediaConfig(**y.get("media", {}))
    review = ReviewConfig(**y.get("review", {}))
    overrides = {
        key: y[key]
        for key in ("app_name", "environment", "log_level", "log_format")
        if key in y
    }
    db_url = y.get("database", {}).get("url")
    if db_url:
        overrides["database_url"] = db_url
    return Settings(auth=auth, media=media, review=review, **overrides)

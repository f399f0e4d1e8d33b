from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# 数据库配置
SQLITE_DEV_DB = "sqlite:///./dev.db"
SQLITE_TEST_DB = "sqlite:///./test.db"
SQLITE_PROD_DB = "sqlite:///./prod.db"

DEFAULT_SECRET_KEY = "your-secret-key"  # don't use this in production


class Settings(BaseSettings):
    """Application settings loaded from the environment and .env"""

    app_env: str = "development"

    # Database
    database_url: Optional[str] = None

    # Auth
    secret_key: str = DEFAULT_SECRET_KEY
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    auth_cookie_name: str = "jwt"

    # Logging
    log_level: str = "INFO"

    # CORS
    cors_origins: List[str] = ["*"]

    # Posts
    default_thumbnail_url: str = "https://static.example.com/default-thumbnail.png"

    # Image storage (S3)
    aws_access_key: str = ""
    aws_secret_key: str = ""
    aws_region: str = "ap-northeast-1"
    aws_s3_bucket_name: str = ""
    presigned_url_expire_seconds: int = 60

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("app_env")
    def validate_app_env(cls, v: str) -> str:
        v = v.lower()
        if v not in ("development", "test", "production"):
            raise ValueError(f"APP_ENV must be development, test or production, got {v!r}")
        return v

    @field_validator("secret_key")
    def validate_secret_key(cls, v: str, info) -> str:
        if info.data.get("app_env") == "production" and (not v or v == DEFAULT_SECRET_KEY):
            raise ValueError("SECRET_KEY must be set in production")
        return v

    @property
    def is_local(self) -> bool:
        return self.app_env == "development"

    @property
    def cookie_secure(self) -> bool:
        return not self.is_local

    @property
    def sqlalchemy_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        if self.app_env == "test":
            return SQLITE_TEST_DB
        if self.app_env == "production":
            return SQLITE_PROD_DB
        return SQLITE_DEV_DB


@lru_cache()
def get_settings() -> Settings:
    """获取配置"""
    return Settings()

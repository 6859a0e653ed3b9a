# backoffice/core/config.py
"""
Application configuration using Pydantic Settings
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import json
from pydantic import field_validator


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """

    # Application
    APP_NAME: str = "Back Office"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str
    AUTO_CREATE_TABLES: bool = True

    # CORS
    CORS_ORIGINS: str = '["http://localhost:5173"]'

    # Document store
    DOCUMENT_STORE_BACKEND: str = "local"  # local | s3
    UPLOAD_DIR: str = "uploads"
    PUBLIC_DOCUMENT_BASE_URL: str = "/files"
    MAX_UPLOAD_SIZE: int = 52428800  # 50MB in bytes
    ALLOWED_EXTENSIONS: List[str] = [".pdf"]

    # AWS Configuration
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "ap-south-1"
    S3_BUCKET_NAME: str = "case-documents"

    # Email delivery
    EMAIL_PROVIDER: str = "dev"  # dev | mailgun
    EMAIL_FROM: str = "Truzly India - Team <noreply@example.com>"
    EMAIL_TIMEOUT_SECONDS: float = 20.0
    MAILGUN_API_KEY: str = ""
    MAILGUN_DOMAIN: str = ""
    MAILGUN_API_BASE_URL: str = "https://api.mailgun.net"

    # Business rules
    ALLOW_OVERPAYMENT: bool = True
    CSV_IMPORT_MODE: str = "quoted"  # quoted | naive

    @field_validator("DOCUMENT_STORE_BACKEND", "EMAIL_PROVIDER", "CSV_IMPORT_MODE", mode="before")
    @classmethod
    def normalize_choice(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from string to list"""
        try:
            if isinstance(self.CORS_ORIGINS, str):
                return json.loads(self.CORS_ORIGINS)
            return self.CORS_ORIGINS
        except json.JSONDecodeError:
            return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Create settings instance
settings = Settings()

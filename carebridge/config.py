# carebridge/config.py - Environment-driven configuration
import os
from dotenv import load_dotenv

load_dotenv()
from typing import Optional, Union
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """Application settings with validation and environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="allow",
        case_sensitive=False,
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="CareBridge Appointment API", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    # Database
    database_url: str = Field(default="sqlite:///./carebridge.db", alias="DATABASE_URL")

    # CORS
    cors_origins: Union[str, list[str]] = Field(default=["*"], alias="CORS_ORIGINS")

    # Domain defaults
    default_doctor_id: Optional[int] = Field(default=None, alias="DEFAULT_DOCTOR_ID")
    vital_history_limit: int = Field(default=10, ge=1, alias="VITAL_HISTORY_LIMIT")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(default=False, alias="JSON_LOGS")

    @field_validator("cors_origins", mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            if not v.strip():
                return ["*"]
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v):
        if not v:
            raise ValueError("DATABASE_URL is required")
        if not v.startswith(("postgresql://", "postgresql+psycopg2://", "sqlite://")):
            raise ValueError("DATABASE_URL must be a valid PostgreSQL or SQLite URL")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper()

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite://")

    @property
    def use_json_logs(self) -> bool:
        return self.json_logs or self.is_production


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return get_config_by_env(os.getenv("ENVIRONMENT", "development"))


# Environment-specific configurations
class DevelopmentConfig(Settings):
    debug: bool = True
    environment: str = "development"


class ProductionConfig(Settings):
    debug: bool = False
    environment: str = "production"
    json_logs: bool = True


class TestingConfig(Settings):
    debug: bool = True
    environment: str = "testing"
    database_url: str = "sqlite://"


def get_config_by_env(env: str) -> Settings:
    """Get configuration by environment name"""
    configs = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig
    }

    config_class = configs.get(env.lower(), Settings)
    return config_class()

# meditrack/config.py - configuration management
from dotenv import load_dotenv

load_dotenv()
import os
from typing import Optional
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """Application settings with validation and environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="MediTrack Healthcare Management System", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    # Records
    enforce_unique_ids: bool = Field(default=True, alias="ENFORCE_UNIQUE_IDS")
    default_appointment_duration_minutes: int = Field(default=30, alias="DEFAULT_APPOINTMENT_DURATION_MINUTES")
    default_bill_amount: float = Field(default=500.0, alias="DEFAULT_BILL_AMOUNT")

    # Reports
    report_output_dir: str = Field(default="reports", alias="REPORT_OUTPUT_DIR")
    institution_id: Optional[str] = Field(default="MEDITRACK-CLINIC", alias="INSTITUTION_ID")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = (v or "").upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @field_validator("default_appointment_duration_minutes")
    @classmethod
    def validate_duration(cls, v):
        if v <= 0:
            raise ValueError("DEFAULT_APPOINTMENT_DURATION_MINUTES must be positive")
        return v

    @field_validator("default_bill_amount")
    @classmethod
    def validate_bill_amount(cls, v):
        if v <= 0:
            raise ValueError("DEFAULT_BILL_AMOUNT must be positive")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance for the current ENVIRONMENT"""
    return get_config_by_env(os.getenv("ENVIRONMENT", "development"))


# Environment-specific configurations
class DevelopmentConfig(Settings):
    """Development environment configuration"""
    debug: bool = True
    environment: str = "development"
    log_level: str = "DEBUG"


class ProductionConfig(Settings):
    """Production environment configuration"""
    debug: bool = False
    environment: str = "production"
    log_json: bool = True


class TestingConfig(Settings):
    """Testing environment configuration"""
    debug: bool = True
    environment: str = "testing"
    log_level: str = "WARNING"


def get_config_by_env(env: str) -> Settings:
    """Get configuration by environment name"""
    configs = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig
    }

    config_class = configs.get(env.lower(), Settings)
    return config_class()

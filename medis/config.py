"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
"""

import os
from functools import lru_cache
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

from medis.domain.models import FitnessPolicy

# Load environment variables from .env file
load_dotenv()


class StorageConfig(BaseModel):
    """Where the record list is persisted."""

    path: str = Field(default="./records.json", description="JSON file holding all records")


class ClassifierConfig(BaseModel):
    """Which fitness rules new submissions are classified under."""

    policy: FitnessPolicy = Field(
        default=FitnessPolicy.TIERED, description="Fitness policy for new records"
    )


class ReportConfig(BaseModel):
    """PDF report settings."""

    output_dir: str = Field(default="./reports", description="Directory for exported reports")
    title_prefix: str = Field(
        default="Employee Health Report", min_length=1, description="Report name used in titles"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Component configs
    storage: StorageConfig = Field(default_factory=StorageConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    def _policy(val: str) -> FitnessPolicy:
        v = val.strip().lower()
        return FitnessPolicy.SIMPLE if v == FitnessPolicy.SIMPLE.value else FitnessPolicy.TIERED

    # Detect environment
    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    storage_config = StorageConfig(path=os.getenv("MEDIS_DATA_FILE", "./records.json"))

    classifier_config = ClassifierConfig(policy=_policy(os.getenv("FITNESS_POLICY", "tiered")))

    report_config = ReportConfig(
        output_dir=os.getenv("REPORT_OUTPUT_DIR", "./reports"),
        title_prefix=os.getenv("REPORT_TITLE_PREFIX", "Employee Health Report"),
    )

    # Logging config
    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    # Application config
    return AppConfig(
        environment=environment,
        debug=debug,
        storage=storage_config,
        classifier=classifier_config,
        report=report_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()

"""Configuration Management."""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Processor settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="A2UI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Surfaces
    default_surface_id: str = Field(
        default="@default", min_length=1, description="Surface used when a message names none"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Transport limits
    max_message_bytes: int = Field(
        default=512 * 1024, gt=0, description="Max size of one transport payload"
    )
    max_json_depth: int = Field(default=32, gt=0, description="Max JSON nesting depth")
    repair_json: bool = Field(
        default=False, description="Repair damaged LLM output instead of rejecting it"
    )

    # Protocol warnings
    warn_unknown_components: bool = Field(
        default=True, description="Warn on component types outside the catalog"
    )

    # Metrics
    enable_metrics: bool = Field(default=True, description="Record Prometheus metrics")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""
lifetree/core/config.py
Configuration management using Pydantic Settings
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Lifecycle tree configuration
    Environment variables (LIFETREE_*) can override these defaults
    """
    model_config = SettingsConfigDict(
        env_prefix="LIFETREE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ========================================================================
    # Application Settings
    # ========================================================================
    APP_NAME: str = "lifetree"
    DEBUG: bool = False  # Log every lifecycle transition

    # ========================================================================
    # Logging Settings
    # ========================================================================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "console"

    # ========================================================================
    # Supervision Settings
    # ========================================================================
    READY_TIMEOUT: Optional[float] = Field(default=None, description="seconds")

    # ========================================================================
    # Validators
    # ========================================================================

    @field_validator("READY_TIMEOUT")
    def validate_ready_timeout(cls, v):
        """Timeout must be positive when set"""
        if v is not None and v <= 0:
            raise ValueError("READY_TIMEOUT must be positive")
        return v

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def uses_json_logs(self) -> bool:
        return self.LOG_FORMAT == "json"


# ============================================================================
# Singleton Pattern - Global Settings Instance
# ============================================================================

_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or create settings instance (Singleton)
    Components fall back to this when no settings are injected
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached instance (testing only)."""
    global _settings
    _settings = None


# ============================================================================
# Export
# ============================================================================

__all__ = ["Settings", "get_settings", "reset_settings"]

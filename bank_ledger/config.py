"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerConfig(BaseSettings):
    """Bank ledger configuration"""

    model_config = SettingsConfigDict(
        env_prefix="BANK_LEDGER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Account numbering
    account_number_prefix: str = "20172019"
    account_number_width: int = 8

    # Business rules
    reject_non_positive_transfers: bool = False  # Original ledger accepts them

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    # Feature flags
    enable_audit_logging: bool = True

    @field_validator("account_number_prefix")
    @classmethod
    def validate_prefix(cls, value: str) -> str:
        if not value:
            raise ValueError("Account number prefix cannot be empty")
        if "-" in value:
            raise ValueError("Account number prefix cannot contain '-'")
        return value

    @field_validator("account_number_width")
    @classmethod
    def validate_width(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Account number width must be positive")
        return value


# Global configuration instance
config = LedgerConfig()


def get_config() -> LedgerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> LedgerConfig:
    """Reload configuration from environment"""
    global config
    config = LedgerConfig()
    return config

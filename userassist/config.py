"""UserAssist decoder configuration management."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="USERASSIST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "UserAssist Decoder"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Registry layout
    userassist_base_key: str = "Software\\Microsoft\\Windows\\CurrentVersion\\Explorer\\UserAssist"
    hive_file_name: str = "NTUSER.DAT"
    max_value_size: int = 1024  # Larger values are reported as unreadable

    # Reporting / export
    report_top_n: int = 5
    export_encoding: str = "utf-8-sig"  # BOM keeps spreadsheet tools on UTF-8
    timestamp_format: str = "%Y-%m-%d %H:%M:%S"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return str(v).upper()

    @field_validator("userassist_base_key", mode="before")
    @classmethod
    def strip_key_separators(cls, v: str) -> str:
        return str(v).replace("/", "\\").strip("\\")

    @field_validator("report_top_n", "max_value_size")
    @classmethod
    def positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

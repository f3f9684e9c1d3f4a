"""Configuration management for Inbox Sweeper.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the INBOX_SWEEPER_ prefix (e.g., INBOX_SWEEPER_TRASH_ENABLED).
    """

    model_config = SettingsConfigDict(
        env_prefix="INBOX_SWEEPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Gmail Configuration
    gmail_credentials_path: Path = Field(
        default=Path("credentials.json"),
        description="Path to Gmail API credentials file",
    )
    gmail_token_path: Path = Field(
        default=Path("token.json"),
        description="Path to Gmail API token file",
    )
    gmail_scope: str = Field(
        default="https://www.googleapis.com/auth/gmail.modify",
        description=(
            "OAuth scope used for Gmail access. Moving threads to the bin needs "
            "gmail.modify; record-only runs work with gmail.readonly."
        ),
    )

    # Log storage
    storage_dir: Path = Field(
        default=Path("."),
        description="Directory under which the log folder hierarchy is created",
    )
    root_folder_name: str = Field(
        default="Gmail Auto Cleanup Logs",
        description="Name of the top-level log folder",
    )
    debug_folder_name: str = Field(
        default="Debug",
        description="Sub-folder holding per-run logs and the overview",
    )
    timezone: str | None = Field(
        default=None,
        description="IANA time zone for timestamps; unset means the host zone",
    )

    # Sweep behaviour
    page_size: int = Field(
        default=100,
        ge=1,
        le=500,
        description="Number of threads requested per search page",
    )
    trash_enabled: bool = Field(
        default=False,
        description="Actually move threads decided for deletion to the bin",
    )
    old_unread_months: int = Field(
        default=6,
        ge=1,
        description="Age in months after which unread threads are disposable",
    )
    promo_unread_days: int = Field(
        default=30,
        ge=1,
        description="Age in days after which unread promotions are disposable",
    )
    keyword_groups: list[list[str]] = Field(
        default_factory=list,
        description="Subject keyword groups (JSON list of lists of words)",
    )
    keywords_file: Path | None = Field(
        default=None,
        description="Optional JSON file with additional subject keyword groups",
    )
    system_label_prefixes: list[str] = Field(
        default_factory=lambda: ["CATEGORY_"],
        description="Label name prefixes treated as system labels",
    )
    system_label_names: list[str] = Field(
        default_factory=lambda: ["INBOX", "IMPORTANT", "UNREAD", "SENT", "DRAFT", "TRASH", "SPAM"],
        description="Label names treated as system labels",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    max_retries: int = Field(
        default=3,
        description="Maximum number of retries for failed Gmail API calls",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()

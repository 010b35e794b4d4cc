"""
Configuration Management for pocketledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
External collaborators (Gemini, Google Sheets) are OPTIONAL. The ledger
works fully offline; missing credentials only disable the mirror/advisor.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Core ledger behaviour: parsing, storage location, calendar rules."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    entry_separator: str = Field(
        default=".",
        min_length=1,
        max_length=1,
        description="Separator between note and amount in quick entry ('.' or '-')"
    )
    storage_path: str = Field(
        default="pocketledger.json",
        description="Path to the local key-value store file"
    )
    week_start: int = Field(
        default=6,
        ge=0,
        le=6,
        description="First day of the week (date.weekday() numbering, 6 = Sunday)"
    )
    advice_window: int = Field(
        default=50,
        ge=1,
        le=500,
        description="How many recent transactions are sent to the advisor"
    )
    notify_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="How long shutdown waits for pending notifications"
    )

    @field_validator("entry_separator")
    @classmethod
    def reject_digit_separator(cls, v: str) -> str:
        """A digit or 'k' would collide with the amount token itself."""
        if v.isdigit() or v.lower() == "k" or v.isspace():
            raise ValueError(f"Invalid entry separator: {v!r}")
        return v

    @property
    def storage_file(self) -> Path:
        return Path(self.storage_path).expanduser()


class GeminiSettings(BaseSettings):
    """Gemini LLM configuration (advisor only)."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: Optional[str] = Field(
        default=None,
        description="Gemini API key; advisor degrades to a static message without it"
    )
    model_name: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=1024,
        ge=100,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Model temperature (advice is allowed some personality)"
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets mirror configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: Optional[str] = Field(
        default=None,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: Optional[str] = Field(
        default=None,
        description="ID of the spreadsheet transactions are mirrored to"
    )
    worksheet_name: str = Field(
        default="Transactions",
        description="Name of the worksheet inside the spreadsheet"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: Optional[str]) -> Optional[str]:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if v and not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Spreadsheet sync will fail until it exists."
            )
        return v

    @property
    def is_configured(self) -> bool:
        return bool(self.credentials_path and self.spreadsheet_id)


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid} plus "<name>_error" entries.
    Optional collaborators also report "<name>_configured".
    """
    results: dict[str, object] = {}

    settings = get_settings()

    for name in ("ledger", "gemini", "google_sheets"):
        try:
            section = getattr(settings, name)
            results[name] = True
            if hasattr(section, "is_configured"):
                results[f"{name}_configured"] = section.is_configured
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results

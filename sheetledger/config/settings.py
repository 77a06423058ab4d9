"""
Configuration Management for SheetLedger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The spreadsheet itself is NOT configured: every request names its own
spreadsheet and brings its own OAuth2 access token. What lives here is
only how we talk to Google Sheets and how the web app behaves.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Dimensions used when a missing tab is provisioned
    new_tab_rows: int = Field(
        default=1000,
        ge=1,
        description="Row count for newly created tabs"
    )
    new_tab_columns: int = Field(
        default=20,
        ge=1,
        description="Column count for newly created tabs"
    )
    value_input_option: str = Field(
        default="USER_ENTERED",
        description="How Sheets interprets written values (RAW or USER_ENTERED)"
    )

    @field_validator('value_input_option')
    @classmethod
    def validate_value_input_option(cls, v: str) -> str:
        """Only the two input options the Sheets API understands."""
        v = v.upper()
        if v not in {"RAW", "USER_ENTERED"}:
            raise ValueError(f"Unsupported value input option: {v}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    secret_key: str = Field(
        default="dev-secret-key-change-me",
        description="Key used to sign the Flask session cookie"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )

    # Session gate
    user_header: str = Field(
        default="X-Ledger-User",
        description="Header naming the principal when a bearer token is sent"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def is_production(self) -> bool:
        return self.app_environment.lower() == "production"


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
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.google_sheets
        results["google_sheets"] = True
    except Exception as e:
        results["google_sheets"] = False
        results["google_sheets_error"] = str(e)

    try:
        app_settings = settings.app
        results["app"] = True
        if app_settings.is_production and app_settings.secret_key == "dev-secret-key-change-me":
            results["app"] = False
            results["app_error"] = "SECRET_KEY must be set in production"
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results

"""Configuration management for the voice calendar tools."""

from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar.events",
    "https://www.googleapis.com/auth/calendar.readonly",
]


class GoogleOAuthConfig(BaseSettings):
    """Google OAuth client configuration."""

    client_id: Optional[str] = Field(None, validation_alias="GOOGLE_CLIENT_ID")
    client_secret: Optional[str] = Field(None, validation_alias="GOOGLE_CLIENT_SECRET")
    redirect_uri: str = Field(
        default="http://localhost:8080/auth/callback",
        validation_alias="GOOGLE_REDIRECT_URI",
    )
    auth_uri: str = Field(default="https://accounts.google.com/o/oauth2/auth")
    token_uri: str = Field(default="https://oauth2.googleapis.com/token")
    # Scopes are hardcoded - no need to configure
    scopes: list[str] = Field(default_factory=lambda: list(CALENDAR_SCOPES))

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_parse_none_str="",  # Treat empty string as None
    )

    def client_config(self) -> dict[str, Any]:
        """Client config in the shape google-auth-oauthlib expects."""
        return {
            "web": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
                "redirect_uris": [self.redirect_uri],
            }
        }


class AppConfig(BaseSettings):
    """Application configuration."""

    google: GoogleOAuthConfig = Field(default_factory=GoogleOAuthConfig)

    # Token store
    token_store_path: Path = Field(
        default=Path(".voice_calendar"), validation_alias="TOKEN_STORE_PATH"
    )
    token_store_encrypted: bool = Field(
        default=True, validation_alias="TOKEN_STORE_ENCRYPTED"
    )

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: Optional[Path] = Field(default=None, validation_alias="LOG_FILE")

    # Calendar defaults
    default_calendar_id: str = Field(
        default="primary", validation_alias="DEFAULT_CALENDAR_ID"
    )
    default_timezone: str = Field(default="UTC", validation_alias="DEFAULT_TIMEZONE")
    default_max_results: int = Field(default=10, validation_alias="DEFAULT_MAX_RESULTS")
    event_duration_minutes: int = Field(
        default=60, validation_alias="EVENT_DURATION_MINUTES"
    )
    history_limit: int = Field(default=50, validation_alias="HISTORY_LIMIT")

    preferences_path: Path = Field(
        default=Path("preferences.yaml"), validation_alias="PREFERENCES_PATH"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


class UserPreferences:
    """Per-user calendar preferences loaded from YAML."""

    KEYS = ("calendar_id", "timezone", "max_results", "event_duration_minutes")

    def __init__(self, app_config: AppConfig, config_path: Optional[Path] = None):
        self.calendar_id: str = app_config.default_calendar_id
        self.timezone: str = app_config.default_timezone
        self.max_results: int = app_config.default_max_results
        self.event_duration_minutes: int = app_config.event_duration_minutes

        path = config_path or app_config.preferences_path
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            self.update(data.get("preferences", data))

    def update(self, data: dict[str, Any]) -> None:
        """Apply known keys from a mapping, ignoring everything else."""
        for key in self.KEYS:
            if data.get(key) is not None:
                setattr(self, key, data[key])

    def as_dict(self) -> dict[str, Any]:
        return {key: getattr(self, key) for key in self.KEYS}


# Global config instance
config = AppConfig()

"""Persistent credential storage using msal-extensions persistence back ends."""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from msal_extensions import (
    FilePersistence,
    FilePersistenceWithDataProtection,
    KeychainPersistence,
    LibsecretPersistence,
)
from msal_extensions.persistence import BasePersistence, PersistenceNotFound

from ..utils.exceptions import TokenStoreError

logger = logging.getLogger(__name__)


class StorageKeys:
    """Fixed keys of the stored credential mapping."""

    ACCESS_TOKEN = "google_calendar_access_token"
    REFRESH_TOKEN = "google_calendar_refresh_token"
    TOKEN_EXPIRY = "google_calendar_token_expiry"
    USER_PREFERENCES = "google_calendar_preferences"
    OAUTH_STATE = "google_calendar_oauth_state"

    CREDENTIALS = (ACCESS_TOKEN, REFRESH_TOKEN, TOKEN_EXPIRY)


class TokenStore:
    """Key/value store for OAuth credentials, persisted as one JSON document."""

    def __init__(
        self,
        location: Path,
        name: str = "voice_calendar_tokens",
        encrypted: bool = True,
        persistence: Optional[BasePersistence] = None,
    ):
        """
        Initialize token store.

        Args:
            location: Directory for storage
            name: Name of the storage file
            encrypted: Whether to use the platform's encrypted storage
            persistence: Explicit persistence back end (overrides the above)
        """
        self.location = location
        self.name = name
        self.encrypted = encrypted
        self._persistence = persistence

    @property
    def persistence(self) -> BasePersistence:
        """
        Get or create the persistence back end.

        Raises:
            TokenStoreError: If storage initialization fails
        """
        if self._persistence is not None:
            return self._persistence

        try:
            self.location.mkdir(parents=True, exist_ok=True)

            if self.encrypted:
                location = str(self.location / f"{self.name}.bin")
                if sys.platform == "win32":
                    persistence = FilePersistenceWithDataProtection(location)
                elif sys.platform == "darwin":
                    persistence = KeychainPersistence(location, "voice_calendar", self.name)
                else:  # Linux
                    try:
                        persistence = LibsecretPersistence(
                            location,
                            schema_name="voice_calendar",
                            attributes={"app": self.name},
                        )
                    except Exception as e:
                        logger.warning(f"Libsecret unavailable, storing tokens unencrypted: {e}")
                        persistence = FilePersistence(location)
            else:
                persistence = FilePersistence(str(self.location / f"{self.name}.json"))

            self._persistence = persistence
            logger.info(f"Token store initialized at {self.location}")
            return self._persistence

        except Exception as e:
            raise TokenStoreError(f"Failed to initialize token store: {e}") from e

    def _load(self) -> dict[str, Any]:
        try:
            content = self.persistence.load()
        except PersistenceNotFound:
            return {}
        if not content:
            return {}
        try:
            data = json.loads(content)
        except ValueError as e:
            raise TokenStoreError(f"Token store is corrupt: {e}") from e
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, Any]) -> None:
        try:
            self.persistence.save(json.dumps(data))
        except OSError as e:
            raise TokenStoreError(f"Failed to write token store: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def update(self, values: dict[str, Any]) -> None:
        data = self._load()
        data.update(values)
        self._save(data)

    def remove(self, *keys: str) -> None:
        data = self._load()
        for key in keys:
            data.pop(key, None)
        self._save(data)

    def clear_credentials(self) -> None:
        """Remove tokens and expiry, keeping preferences."""
        self.remove(*StorageKeys.CREDENTIALS)
        logger.info("Stored credentials cleared")

    def get_preferences(self) -> dict[str, Any]:
        return self.get(StorageKeys.USER_PREFERENCES) or {}

    def set_preferences(self, preferences: dict[str, Any]) -> None:
        self.set(StorageKeys.USER_PREFERENCES, preferences)

"""Google OAuth 2.0 session for the Calendar API."""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Optional

import pytz
import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from ..config import GoogleOAuthConfig
from ..utils.date_utils import ensure_utc, format_to_iso, parse_iso, utc_now
from ..utils.exceptions import (
    AuthenticationError,
    AuthRequired,
    ConfigurationError,
    InvalidDateFormat,
)
from ..utils.google_api import AUTH_REQUIRED, api_request
from .base import AuthProvider
from .token_store import StorageKeys, TokenStore

logger = logging.getLogger(__name__)

REVOKE_URL = "https://oauth2.googleapis.com/revoke"
USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

# Tokens expiring within this margin are refreshed before use
REFRESH_MARGIN = timedelta(minutes=5)

EPOCH = datetime(1970, 1, 1, tzinfo=pytz.utc)


class GoogleAuthSession(AuthProvider):
    """Holds the user's Google tokens and hands out valid access tokens.

    Refresh only happens lazily, from ``get_valid_token``.
    """

    def __init__(self, config: GoogleOAuthConfig, store: TokenStore):
        """
        Initialize the auth session.

        Args:
            config: Google OAuth client configuration
            store: Persistent credential store
        """
        self.config = config
        self.store = store

    def _flow(self) -> Flow:
        if not self.config.client_id:
            raise ConfigurationError("Google Client ID not configured (GOOGLE_CLIENT_ID)")
        # No PKCE verifier: the URL and the code exchange may happen in
        # different processes.
        return Flow.from_client_config(
            self.config.client_config(),
            scopes=self.config.scopes,
            redirect_uri=self.config.redirect_uri,
            autogenerate_code_verifier=False,
        )

    def get_authorization_url(self, state: Optional[str] = None) -> str:
        """
        Build the Google consent URL and remember its CSRF state.

        Args:
            state: Explicit state value (random if omitted)

        Returns:
            Authorization URL to open in a browser
        """
        state = state or secrets.token_urlsafe(16)
        url, state = self._flow().authorization_url(
            access_type="offline",
            include_granted_scopes="true",
            prompt="consent",
            state=state,
        )
        self.store.set(StorageKeys.OAUTH_STATE, state)
        return url

    def exchange_code(self, code: str) -> dict[str, Any]:
        """
        Exchange an authorization code for tokens and store them.

        Raises:
            AuthenticationError: If the exchange fails
        """
        flow = self._flow()
        try:
            flow.fetch_token(code=code)
        except Exception as e:
            raise AuthenticationError(f"Failed to exchange authorization code: {e}") from e

        creds = flow.credentials
        self._store_tokens(creds.token, creds.refresh_token, creds.expiry)
        logger.info("Authentication successful!")
        return {
            "access_token": creds.token,
            "refresh_token": creds.refresh_token,
            "expiry": self.store.get(StorageKeys.TOKEN_EXPIRY),
        }

    def handle_callback(self, code: str, state: Optional[str]) -> dict[str, Any]:
        """
        Complete the OAuth redirect: check state, then exchange the code.

        Raises:
            AuthenticationError: On state mismatch or failed exchange
        """
        if state != self.store.get(StorageKeys.OAUTH_STATE):
            raise AuthenticationError("Invalid state parameter")
        tokens = self.exchange_code(code)
        self.store.remove(StorageKeys.OAUTH_STATE)
        return tokens

    def _store_tokens(
        self,
        access_token: str,
        refresh_token: Optional[str],
        expiry: Optional[datetime],
    ) -> None:
        values: dict[str, Any] = {StorageKeys.ACCESS_TOKEN: access_token}
        if refresh_token:
            values[StorageKeys.REFRESH_TOKEN] = refresh_token
        if expiry:
            # google-auth reports expiry as naive UTC
            values[StorageKeys.TOKEN_EXPIRY] = format_to_iso(ensure_utc(expiry))
        self.store.update(values)

    def _expiry(self) -> Optional[datetime]:
        expiry = self.store.get(StorageKeys.TOKEN_EXPIRY)
        if not expiry:
            return None
        try:
            return parse_iso(expiry)
        except InvalidDateFormat:
            logger.warning(f"Ignoring unreadable token expiry: {expiry!r}")
            return EPOCH

    def get_valid_token(self, now: Optional[datetime] = None) -> str:
        """
        Return the cached access token, refreshing it first when it expires
        within five minutes.

        Raises:
            AuthRequired: If no token is stored or the refresh fails
        """
        token = self.store.get(StorageKeys.ACCESS_TOKEN)
        if not token:
            raise AuthRequired(AUTH_REQUIRED)

        expiry = self._expiry()
        if expiry is not None and expiry - ensure_utc(now or utc_now()) < REFRESH_MARGIN:
            logger.info("Token expiring soon, refreshing...")
            return self.refresh_access_token()
        return token

    def refresh_access_token(self) -> str:
        """
        Refresh the access token with the stored refresh token.

        On failure every stored credential is cleared so that the user has
        to sign in again.

        Raises:
            AuthRequired: If there is no refresh token or Google rejects it
        """
        refresh_token = self.store.get(StorageKeys.REFRESH_TOKEN)
        try:
            if not refresh_token:
                raise AuthenticationError("No refresh token available")
            creds = Credentials(
                token=None,
                refresh_token=refresh_token,
                token_uri=self.config.token_uri,
                client_id=self.config.client_id,
                client_secret=self.config.client_secret,
                scopes=self.config.scopes,
            )
            creds.refresh(Request())
        except (GoogleAuthError, AuthenticationError) as e:
            self.clear_credentials()
            raise AuthRequired(f"Failed to refresh access token: {e}") from e

        self._store_tokens(creds.token, creds.refresh_token or refresh_token, creds.expiry)
        logger.info("Access token refreshed")
        return creds.token

    def is_authenticated(self, now: Optional[datetime] = None) -> bool:
        """
        True when an access token is stored and either still valid or
        refreshable.
        """
        if not self.store.get(StorageKeys.ACCESS_TOKEN):
            return False
        if self.store.get(StorageKeys.REFRESH_TOKEN):
            return True
        expiry = self._expiry()
        return expiry is None or expiry > ensure_utc(now or utc_now())

    def clear_credentials(self) -> None:
        self.store.clear_credentials()

    def sign_out(self) -> None:
        """Revoke the current token with Google and clear stored credentials."""
        token = self.store.get(StorageKeys.ACCESS_TOKEN)
        if token:
            try:
                resp = requests.post(
                    REVOKE_URL,
                    params={"token": token},
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
                if not resp.ok:
                    logger.warning("Failed to revoke token with Google")
            except requests.RequestException as e:
                logger.warning(f"Error revoking token: {e}")
        self.clear_credentials()
        logger.info("User signed out successfully")

    def get_user_profile(self) -> dict[str, Any]:
        """Fetch the signed-in user's name, email and picture."""
        return api_request(self, "GET", USERINFO_URL) or {}

"""Shared request helper for Google REST endpoints.

HTTP failures are mapped onto the error taxonomy in ``exceptions``:
401 -> AuthRequired, 403 -> PermissionDenied, 404 -> NotFound, anything
else -> GenericApiError. Connection failures become NetworkError. Other
exceptions pass through unchanged. There is no retry.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional
from urllib.parse import quote

import requests

from .exceptions import (
    AuthRequired,
    CalendarToolError,
    GenericApiError,
    NetworkError,
    NotFound,
    PermissionDenied,
)

if TYPE_CHECKING:
    from ..auth.base import AuthProvider

logger = logging.getLogger(__name__)

GOOGLE_CALENDAR_BASE = "https://www.googleapis.com/calendar/v3"

AUTH_REQUIRED = "Authentication required. Please sign in with Google."
PERMISSION_DENIED = "Permission denied. Please check calendar permissions."
EVENT_NOT_FOUND = "Event not found."
API_ERROR = "Google Calendar API error occurred."
NETWORK_ERROR = "Network error. Please check your connection."
INVALID_EVENT_ID = "Invalid event ID provided."


def calendar_path(calendar_id: str, *parts: str) -> str:
    """Build a ``calendars/{id}/...`` path with every segment URL-quoted."""
    segments = [quote(calendar_id, safe="")] + [quote(p, safe="") for p in parts]
    return "calendars/" + "/".join(segments)


def _service_message(response: requests.Response) -> Optional[str]:
    """Extract Google's own error message from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict):
        return error.get("message")
    if isinstance(error, str):
        return body.get("error_description") or error
    return None


def translate_api_error(error: Exception) -> Exception:
    """
    Map a transport exception onto the calendar error taxonomy.

    Returns the original exception when no mapping applies.
    """
    if isinstance(error, CalendarToolError):
        return error

    if isinstance(error, requests.HTTPError) and error.response is not None:
        status = error.response.status_code
        if status == 401:
            return AuthRequired(AUTH_REQUIRED)
        if status == 403:
            return PermissionDenied(PERMISSION_DENIED, status_code=status)
        if status == 404:
            return NotFound(EVENT_NOT_FOUND, status_code=status)
        message = _service_message(error.response)
        if message:
            return GenericApiError(message, status_code=status)
        return GenericApiError(f"{API_ERROR} ({status})", status_code=status)

    if isinstance(error, requests.ConnectionError):
        return NetworkError(NETWORK_ERROR)

    return error


def api_request(
    auth_provider: "AuthProvider",
    method: str,
    path: str,
    params: Optional[dict[str, Any]] = None,
    json: Optional[dict[str, Any]] = None,
) -> Optional[dict[str, Any]]:
    """
    Perform an authenticated request against a Google endpoint.

    Args:
        auth_provider: Source of a valid bearer token
        method: HTTP method
        path: Path relative to the Calendar API base, or an absolute URL
        params: Query parameters
        json: JSON body

    Returns:
        Decoded JSON body, or None for empty responses (e.g. delete)
    """
    url = path if path.startswith("https://") else f"{GOOGLE_CALENDAR_BASE}/{path}"
    headers = {
        "Authorization": f"Bearer {auth_provider.get_valid_token()}",
        "Content-Type": "application/json",
    }

    try:
        resp = requests.request(method, url, headers=headers, params=params, json=json)
        resp.raise_for_status()
    except requests.RequestException as e:
        translated = translate_api_error(e)
        logger.error(f"{method} {url} failed: {translated}")
        if translated is e:
            raise
        raise translated from e

    if resp.status_code == 204 or not resp.content:
        return None
    return resp.json()

"""
Unit tests for the Google request helper and HTTP error translation.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from voice_calendar.auth.base import AuthProvider
from voice_calendar.utils.exceptions import (
    AuthRequired,
    GenericApiError,
    NetworkError,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from voice_calendar.utils.google_api import (
    GOOGLE_CALENDAR_BASE,
    api_request,
    calendar_path,
    translate_api_error,
)


def _response(status, body=None):
    resp = requests.Response()
    resp.status_code = status
    resp.url = f"{GOOGLE_CALENDAR_BASE}/calendars/primary/events"
    resp._content = json.dumps(body).encode() if body is not None else b""
    return resp


@pytest.fixture
def auth():
    provider = MagicMock(spec=AuthProvider)
    provider.get_valid_token.return_value = "token-123"
    return provider


class TestApiRequest:
    @patch("voice_calendar.utils.google_api.requests.request")
    def test_bearer_token_and_json_body(self, mock_request, auth):
        mock_request.return_value = _response(200, {"items": []})

        result = api_request(auth, "GET", "calendars/primary/events", params={"q": "x"})

        assert result == {"items": []}
        args, kwargs = mock_request.call_args
        assert args == ("GET", f"{GOOGLE_CALENDAR_BASE}/calendars/primary/events")
        assert kwargs["headers"]["Authorization"] == "Bearer token-123"
        assert kwargs["params"] == {"q": "x"}

    @patch("voice_calendar.utils.google_api.requests.request")
    def test_absolute_url_used_as_is(self, mock_request, auth):
        mock_request.return_value = _response(200, {"email": "a@x.com"})
        api_request(auth, "GET", "https://www.googleapis.com/oauth2/v2/userinfo")
        assert mock_request.call_args.args[1] == "https://www.googleapis.com/oauth2/v2/userinfo"

    @patch("voice_calendar.utils.google_api.requests.request")
    def test_empty_body_returns_none(self, mock_request, auth):
        mock_request.return_value = _response(204)
        assert api_request(auth, "DELETE", "calendars/primary/events/e1") is None

    @pytest.mark.parametrize(
        "status, error_class",
        [(401, AuthRequired), (403, PermissionDenied), (404, NotFound), (500, GenericApiError)],
    )
    @patch("voice_calendar.utils.google_api.requests.request")
    def test_status_mapping(self, mock_request, status, error_class, auth):
        mock_request.return_value = _response(status)
        with pytest.raises(error_class):
            api_request(auth, "GET", "calendars/primary/events")

    @patch("voice_calendar.utils.google_api.requests.request")
    def test_bad_request_carries_service_message(self, mock_request, auth):
        mock_request.return_value = _response(
            400, {"error": {"code": 400, "message": "Bad Request: timeMin is invalid"}}
        )
        with pytest.raises(GenericApiError, match="Bad Request: timeMin is invalid") as exc_info:
            api_request(auth, "GET", "calendars/primary/events")
        assert exc_info.value.status_code == 400

    @patch("voice_calendar.utils.google_api.requests.request")
    def test_connection_failure(self, mock_request, auth):
        mock_request.side_effect = requests.ConnectionError("connection refused")
        with pytest.raises(NetworkError, match="Network error"):
            api_request(auth, "GET", "calendars/primary/events")

    @patch("voice_calendar.utils.google_api.requests.request")
    def test_other_transport_errors_pass_through(self, mock_request, auth):
        mock_request.side_effect = requests.Timeout("read timed out")
        with pytest.raises(requests.Timeout):
            api_request(auth, "GET", "calendars/primary/events")

    @patch("voice_calendar.utils.google_api.requests.request")
    def test_no_token_means_no_request(self, mock_request, auth):
        auth.get_valid_token.side_effect = AuthRequired("Authentication required.")
        with pytest.raises(AuthRequired):
            api_request(auth, "GET", "calendars/primary/events")
        mock_request.assert_not_called()


class TestTranslateApiError:
    def test_generic_message_without_body(self):
        error = requests.HTTPError(response=_response(502))
        translated = translate_api_error(error)
        assert isinstance(translated, GenericApiError)
        assert str(translated) == "Google Calendar API error occurred. (502)"

    def test_string_error_body(self):
        error = requests.HTTPError(
            response=_response(400, {"error": "invalid_grant", "error_description": "Bad code"})
        )
        assert str(translate_api_error(error)) == "Bad code"

    def test_own_errors_pass_through(self):
        error = ValidationError("nope")
        assert translate_api_error(error) is error

    def test_unrelated_errors_pass_through(self):
        error = KeyError("x")
        assert translate_api_error(error) is error


def test_calendar_path_quotes_ids():
    assert (
        calendar_path("team@group.calendar.google.com", "events", "abc/1")
        == "calendars/team%40group.calendar.google.com/events/abc%2F1"
    )

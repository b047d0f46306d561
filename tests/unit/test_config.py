"""
Unit tests for configuration, user preferences and tool definitions.
"""

import yaml

from voice_calendar.config import AppConfig, GoogleOAuthConfig, UserPreferences
from voice_calendar.tools.schemas import TOOL_DEFINITIONS, agent_tool_definitions


def test_google_config_from_environment(monkeypatch):
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "cid.apps.googleusercontent.com")
    monkeypatch.setenv("GOOGLE_CLIENT_SECRET", "s3cret")

    google = GoogleOAuthConfig()

    web = google.client_config()["web"]
    assert web["client_id"] == "cid.apps.googleusercontent.com"
    assert web["redirect_uris"] == ["http://localhost:8080/auth/callback"]
    assert "https://www.googleapis.com/auth/calendar.events" in google.scopes


def test_preferences_default_to_app_config(tmp_path):
    app = AppConfig.model_construct(
        default_calendar_id="primary",
        default_timezone="UTC",
        default_max_results=10,
        event_duration_minutes=60,
        preferences_path=tmp_path / "missing.yaml",
    )
    prefs = UserPreferences(app)
    assert prefs.as_dict() == {
        "calendar_id": "primary",
        "timezone": "UTC",
        "max_results": 10,
        "event_duration_minutes": 60,
    }


def test_preferences_yaml_overrides(tmp_path):
    path = tmp_path / "preferences.yaml"
    path.write_text(
        yaml.safe_dump({"preferences": {"timezone": "Europe/Zurich", "max_results": 20, "theme": "dark"}})
    )
    app = AppConfig.model_construct(
        default_calendar_id="primary",
        default_timezone="UTC",
        default_max_results=10,
        event_duration_minutes=60,
        preferences_path=path,
    )

    prefs = UserPreferences(app)
    prefs.update({"calendar_id": "team@group", "max_results": None})

    assert prefs.timezone == "Europe/Zurich"
    assert prefs.max_results == 20
    assert prefs.calendar_id == "team@group"
    assert not hasattr(prefs, "theme")


def test_tool_definitions():
    assert len(TOOL_DEFINITIONS) == 3
    plain = agent_tool_definitions(prefixed=False)
    assert [d["name"] for d in plain] == ["create_event", "list_events", "manage_event"]
    manage = plain[2]["parameters"]
    assert set(manage["required"]) == {"event_id", "action"}

"""
Unit tests for the command line entry point.

Google is never contacted: the token store points at tmp_path and the
calendar classes are patched where needed.
"""

import io
import json
from unittest.mock import patch

import pytest
import yaml

from voice_calendar import __main__ as cli
from voice_calendar.auth.token_store import StorageKeys, TokenStore


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setattr(cli.config, "token_store_path", tmp_path / "store")
    monkeypatch.setattr(cli.config, "token_store_encrypted", False)
    monkeypatch.setattr(cli.config, "preferences_path", tmp_path / "preferences.yaml")
    monkeypatch.setattr(cli.config, "log_file", None)
    return tmp_path


def _store(tmp_path):
    return TokenStore(tmp_path / "store", encrypted=False)


def test_tool_definitions_yaml(capsys):
    assert cli.main(["--tool-definitions"]) == 0
    definitions = yaml.safe_load(capsys.readouterr().out)
    assert [d["name"] for d in definitions] == [
        "google_calendar_create_event",
        "google_calendar_list_events",
        "google_calendar_manage_event",
    ]


def test_set_preference(isolated_config):
    assert cli.main(["--set-preference", "max_results=25"]) == 0
    assert _store(isolated_config).get_preferences() == {"max_results": 25}


@pytest.mark.parametrize("value", ["colour=blue", "max_results=0", "max_results=many"])
def test_set_preference_rejects_bad_values(value):
    assert cli.main(["--set-preference", value]) == 1


def test_calendar_actions_require_sign_in():
    assert cli.main(["--list"]) == 1


def test_status_signed_out(capsys):
    assert cli.main(["--status"]) == 0
    assert "Authenticated: no" in capsys.readouterr().out


def test_serve_answers_each_line(isolated_config, capsys, monkeypatch):
    _store(isolated_config).update(
        {StorageKeys.ACCESS_TOKEN: "access-1", StorageKeys.REFRESH_TOKEN: "refresh-1"}
    )
    lines = "\n".join(
        [
            json.dumps({"tool_name": "book_flight", "parameters": {}}),
            "not json",
            json.dumps({"tool_name": "list_events", "parameters": {"max_results": 0}}),
        ]
    )
    monkeypatch.setattr("sys.stdin", io.StringIO(lines))

    with patch.object(cli.GoogleCalendarReader, "list_events") as mock_list:
        assert cli.main(["--serve"]) == 0

    responses = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert [r["success"] for r in responses] == [False, False, False]
    assert responses[0]["message"] == "Validation failed: Unknown tool: book_flight"
    assert responses[1]["message"].startswith("Invalid tool call")
    mock_list.assert_not_called()

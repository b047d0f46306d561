"""CLI entry point for the voice calendar tools."""

import argparse
import json
import sys
from typing import Optional

import yaml

from .auth.google_auth import GoogleAuthSession
from .auth.token_store import TokenStore
from .config import UserPreferences, config
from .events.analysis import create_quick_event
from .models.event import DisplayEvent
from .models.tool import ToolCall, ToolResponse
from .readers.google_reader import GoogleCalendarReader
from .tools.channel import ToolCallChannel
from .tools.dispatcher import ToolCallDispatcher
from .tools.history import ToolCallHistory
from .tools.schemas import agent_tool_definitions
from .ui.render import (
    render_events,
    render_notifications,
    render_response,
    render_stats,
)
from .ui.state import CalendarViewState
from .utils.date_utils import format_for_display
from .utils.exceptions import CalendarToolError
from .utils.google_api import AUTH_REQUIRED
from .utils.logging import setup_logging
from .writers.google_writer import GoogleCalendarWriter

INT_PREFERENCES = ("max_results", "event_duration_minutes")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Voice Calendar - Google Calendar tools for voice agents"
    )
    parser.add_argument(
        "--tool-definitions",
        action="store_true",
        help="Print the agent tool definitions as YAML",
    )
    parser.add_argument(
        "--auth-url",
        action="store_true",
        help="Print the Google sign-in URL",
    )
    parser.add_argument(
        "--auth-code",
        type=str,
        help="Complete sign-in with the code from the redirect",
    )
    parser.add_argument(
        "--state",
        type=str,
        help="State value from the redirect (checked against --auth-url)",
    )
    parser.add_argument(
        "--sign-out",
        action="store_true",
        help="Revoke the Google token and clear stored credentials",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show authentication status and preferences",
    )
    parser.add_argument(
        "--set-preference",
        type=str,
        metavar="KEY=VALUE",
        help=f"Store a preference ({', '.join(UserPreferences.KEYS)})",
    )
    parser.add_argument(
        "--list-calendars",
        action="store_true",
        help="List available calendars",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List events",
    )
    parser.add_argument(
        "--free-busy",
        action="store_true",
        help="Show busy blocks",
    )
    parser.add_argument(
        "--start-date",
        type=str,
        default=None,
        help="Range start (ISO 8601, default: today)",
    )
    parser.add_argument(
        "--end-date",
        type=str,
        default=None,
        help="Range end (ISO 8601, default: a week after start)",
    )
    parser.add_argument(
        "--max-results",
        type=int,
        default=None,
        help="Maximum number of events (overrides preferences)",
    )
    parser.add_argument(
        "--quick",
        type=str,
        metavar="TEXT",
        help='Create an event from a phrase, e.g. "Lunch tomorrow at 1pm"',
    )
    parser.add_argument(
        "--tool",
        type=str,
        metavar="NAME",
        help="Run one tool call (create_event, list_events, manage_event)",
    )
    parser.add_argument(
        "--params",
        type=str,
        default="{}",
        help="JSON parameters for --tool",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Read tool calls as JSON lines on stdin, write responses to stdout",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    return parser


def _parse_preference(text: str) -> tuple[str, object]:
    key, sep, value = text.partition("=")
    key = key.strip()
    if not sep or key not in UserPreferences.KEYS:
        raise ValueError(
            f"Expected KEY=VALUE with KEY one of {', '.join(UserPreferences.KEYS)}"
        )
    value = value.strip()
    if key in INT_PREFERENCES:
        number = int(value)
        if number <= 0:
            raise ValueError(f"{key} must be a positive integer")
        return key, number
    return key, value


def _serve(channel: ToolCallChannel, logger) -> int:
    """Answer JSON-lines tool calls until stdin closes."""
    logger.info("Serving tool calls on stdin")
    for line in sys.stdin:
        line = line.strip()
        if not line:
            continue
        try:
            tool_call = ToolCall.model_validate(json.loads(line))
        except ValueError as e:
            response = ToolResponse.error(f"Invalid tool call: {e}")
        else:
            response = channel.send(tool_call)
        print(response.model_dump_json(), flush=True)

    logger.info(f"Session finished: {render_stats(channel.history.stats())}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    log_level = "DEBUG" if args.verbose else config.log_level
    logger = setup_logging(level=log_level, log_file=config.log_file)

    try:
        if args.tool_definitions:
            print(yaml.safe_dump(agent_tool_definitions(), sort_keys=False))
            return 0

        store = TokenStore(
            location=config.token_store_path,
            encrypted=config.token_store_encrypted,
        )
        auth = GoogleAuthSession(config.google, store)

        prefs = UserPreferences(config)
        prefs.update(store.get_preferences())

        if args.set_preference:
            try:
                key, value = _parse_preference(args.set_preference)
            except ValueError as e:
                logger.error(f"Invalid preference: {e}")
                return 1
            stored = store.get_preferences()
            stored[key] = value
            store.set_preferences(stored)
            logger.info(f"Preference saved: {key}={value}")
            return 0

        if args.auth_url:
            print(auth.get_authorization_url())
            return 0

        if args.auth_code:
            if args.state is not None:
                auth.handle_callback(args.auth_code, args.state)
            else:
                auth.exchange_code(args.auth_code)
            return 0

        if args.sign_out:
            auth.sign_out()
            return 0

        if args.status:
            authenticated = auth.is_authenticated()
            print(f"Authenticated: {'yes' if authenticated else 'no'}")
            if authenticated:
                try:
                    profile = auth.get_user_profile()
                except CalendarToolError as e:
                    # Profile access needs scopes beyond the calendar ones
                    logger.debug(f"Profile unavailable: {e}")
                    profile = {}
                if profile.get("email"):
                    print(f"Account: {profile.get('name', '')} <{profile['email']}>")
            for key, value in prefs.as_dict().items():
                print(f"  {key}: {value}")
            return 0

        calendar_actions = (
            args.list_calendars,
            args.list,
            args.free_busy,
            args.quick,
            args.tool,
            args.serve,
        )
        if not any(calendar_actions):
            parser.print_help()
            return 0

        if not auth.is_authenticated():
            logger.error(f"{AUTH_REQUIRED} Run with --auth-url first.")
            return 1

        max_results = args.max_results or prefs.max_results
        reader = GoogleCalendarReader(auth, prefs.calendar_id, max_results)
        writer = GoogleCalendarWriter(auth, prefs.calendar_id)

        if args.list_calendars:
            calendars = reader.list_calendars()
            print(f"Found {len(calendars)} calendar(s):")
            for cal in calendars:
                marker = " (primary)" if cal.is_primary else ""
                print(f"  - {cal.name}{marker} (ID: {cal.id})")
                if cal.time_zone:
                    print(f"    Time zone: {cal.time_zone}")
            return 0

        if args.free_busy:
            busy = reader.get_free_busy(args.start_date, args.end_date)
            for cal_id, blocks in busy.items():
                print(f"{cal_id}: {len(blocks)} busy block(s)")
                for block in blocks:
                    print(
                        f"  - {format_for_display(block['start'], tz=prefs.timezone)} to "
                        f"{format_for_display(block['end'], tz=prefs.timezone)}"
                    )
            return 0

        view = CalendarViewState(
            reader, writer, prefs.calendar_id, prefs.timezone, max_results
        )

        if args.list:
            if not view.load_events(args.start_date, args.end_date, max_results):
                print(render_notifications(view.pop_notifications()))
                return 1
            print(render_events(view.events, prefs.timezone))
            return 0

        if args.quick:
            params = create_quick_event(
                args.quick, tz=prefs.timezone, duration_minutes=prefs.event_duration_minutes
            )
            if params is None:
                logger.error(f"Could not find a time in: {args.quick!r}")
                return 1
            # Events in the new slot, so overlaps can be reported
            view.load_events(params["start_datetime"], params["end_datetime"])
            created = view.create_event(params)
            print(render_notifications(view.pop_notifications()))
            return 0 if created else 1

        history = ToolCallHistory(limit=config.history_limit)
        channel = ToolCallChannel(history)
        dispatcher = ToolCallDispatcher(
            reader, writer, prefs.calendar_id, prefs.timezone, max_results
        )
        channel.register(dispatcher.dispatch)

        if args.tool:
            try:
                params = json.loads(args.params)
            except ValueError as e:
                logger.error(f"Invalid --params JSON: {e}")
                return 1
            if not isinstance(params, dict):
                logger.error("--params must be a JSON object")
                return 1
            response = channel.send(ToolCall(tool_name=args.tool, parameters=params))
            print(render_response(response))
            if response.success and response.data and "events" in response.data:
                events = [DisplayEvent.model_validate(e) for e in response.data["events"]]
                print(render_events(events, prefs.timezone))
            return 0 if response.success else 1

        return _serve(channel, logger)

    except CalendarToolError as e:
        logger.error(f"Calendar error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

# last_game/cli.py
"""
Command-line entry point: the composition root of the application.

Commands:
    last     Render the last game of the configured default user.
    lookup   Render the last game of any user (or a random titled player).
    preview  Show how the configured date/time formats render right now.
    config   Show or change the saved preferences.
"""

import asyncio
import json
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

import structlog
import typer

from last_game.config.settings import (
    DEFAULT_DATE_FORMAT, DEFAULT_TIME_FORMAT, AppSettings, UserPreferences, settings
)
from last_game.containers import get_container
from last_game.core.time_formatter import format_with_pattern
from last_game.core.titled_players import pick_random_username
from last_game.exceptions import ChessComApiError, PreferencesError
from last_game.orchestration.last_game_service import LastGameService
from last_game.services.chesscom_client import ChessComClient
from last_game.services.preferences_store import PreferencesStore
from last_game.types import FormatPatterns, LookupResult, LookupStatus, TimeClass
from last_game.utils.logging_config import setup_logging

logger = structlog.get_logger(__name__)

app = typer.Typer(help="Insert a summary of a player's last Chess.com game.", no_args_is_help=True)
config_app = typer.Typer(help="Show or change saved preferences.")
app.add_typer(config_app, name="config")

EXIT_NOT_FOUND = 1
EXIT_FETCH_FAILED = 1
EXIT_FAILURE = 2

FORMAT_DEFAULTS = {"dateFormat": DEFAULT_DATE_FORMAT, "timeFormat": DEFAULT_TIME_FORMAT}


class GameType(str, Enum):
    ANY = "any"; DAILY = "daily"; BLITZ = "blitz"; RAPID = "rapid"; BULLET = "bullet"

    def to_time_class(self) -> Optional[TimeClass]:
        return None if self is GameType.ANY else TimeClass(self.value)


@dataclass
class CliState:
    app_settings: AppSettings
    store: PreferencesStore


def _state(ctx: typer.Context) -> CliState:
    return ctx.obj


def _fail(message: str, code: int = EXIT_FAILURE) -> typer.Exit:
    typer.echo(message, err=True)
    return typer.Exit(code=code)


def _patterns(app_settings: AppSettings, prefs: UserPreferences) -> FormatPatterns:
    return FormatPatterns(
        date_format=prefs.date_format, time_format=prefs.time_format, tz=app_settings.timezone()
    )


async def _fetch_and_render(
    state: CliState,
    username: str,
    template: str,
    time_class: Optional[TimeClass],
    prefs: UserPreferences,
) -> LookupResult:
    container = get_container(state.app_settings, state.store)
    async with container.resolve(ChessComClient):
        service = container.resolve(LastGameService)
        return await service.fetch_and_render(
            username, template, lookup_username=username, time_class=time_class,
            patterns=_patterns(state.app_settings, prefs),
        )


def _report(result: LookupResult, time_class: Optional[TimeClass]) -> None:
    """Prints the rendered text on stdout and a status notice on stderr."""
    label = f" {time_class.value}" if time_class else ""
    if result.status is LookupStatus.NOT_FOUND:
        raise _fail(f"No recent{label} games found or user not found.", EXIT_NOT_FOUND)
    typer.echo(result.text)
    typer.echo(f"Inserted last{label} game.", err=True)


def _run_lookup(state: CliState, username: str, template: str,
                time_class: Optional[TimeClass], prefs: UserPreferences) -> None:
    try:
        result = asyncio.run(_fetch_and_render(state, username, template, time_class, prefs))
    except ChessComApiError:
        logger.error("Failed to fetch or render the last game.", username=username, exc_info=True)
        raise _fail("Failed to fetch from Chess.com. See logs for details.", EXIT_FETCH_FAILED)
    _report(result, time_class)


def _load_preferences(state: CliState) -> UserPreferences:
    try:
        return asyncio.run(state.store.load())
    except PreferencesError as e:
        raise _fail(str(e))


def _save_preferences(state: CliState, prefs: UserPreferences) -> None:
    try:
        asyncio.run(state.store.save(prefs))
    except PreferencesError as e:
        raise _fail(str(e))


@app.callback()
def main(
    ctx: typer.Context,
    preferences: Optional[Path] = typer.Option(None, "--preferences", help="Path of the preferences JSON file."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also append JSON logs to this file."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Render console logs as JSON."),
) -> None:
    setup_logging(
        log_level=log_level or settings.default_log_level, log_file=log_file, force_json_console=json_logs
    )
    store = PreferencesStore(preferences or Path(settings.preferences_path))
    ctx.obj = CliState(app_settings=settings, store=store)


@app.command("last")
def last_game(
    ctx: typer.Context,
    game_type: GameType = typer.Option(GameType.ANY, "--type", "-t", help="Restrict to one time class."),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Override the default user."),
) -> None:
    """Render the last game of the default user with the default template."""
    state = _state(ctx)
    prefs = _load_preferences(state)

    user = (username or prefs.username).strip()
    if not user:
        user = typer.prompt("Enter your Chess.com username", default="", show_default=False).strip()
        if not user:
            raise typer.Exit(code=EXIT_NOT_FOUND)
        prefs = prefs.model_copy(update={"username": user})
        _save_preferences(state, prefs)

    _run_lookup(state, user, prefs.template_default, game_type.to_time_class(), prefs)


@app.command("lookup")
def lookup_user(
    ctx: typer.Context,
    username: Optional[str] = typer.Argument(None, help="Chess.com username; defaults to the last one looked up."),
    game_type: GameType = typer.Option(GameType.ANY, "--type", "-t", help="Restrict to one time class."),
    random_titled: bool = typer.Option(False, "--random-titled", help="Pick a random titled player from the leaderboards."),
) -> None:
    """Render the last game of another user with the lookup template."""
    state = _state(ctx)
    prefs = _load_preferences(state)

    if random_titled:
        username = _pick_random_titled(state)

    user = (username or prefs.last_lookup_username or "").strip()
    if not user:
        raise _fail("Please enter a Chess.com username.", EXIT_NOT_FOUND)

    prefs = prefs.model_copy(update={"last_lookup_username": user})
    _save_preferences(state, prefs)
    _run_lookup(state, user, prefs.template_other_user, game_type.to_time_class(), prefs)


def _pick_random_titled(state: CliState) -> str:
    async def _fetch() -> dict:
        container = get_container(state.app_settings, state.store)
        async with container.resolve(ChessComClient) as client:
            return await client.get_leaderboards()

    try:
        leaderboards = asyncio.run(_fetch())
    except ChessComApiError:
        logger.error("Random titled user lookup failed.", exc_info=True)
        raise _fail("Failed to fetch leaderboards.", EXIT_FETCH_FAILED)

    picked = pick_random_username(leaderboards)
    if not picked:
        raise _fail("Could not pick a random titled player.", EXIT_NOT_FOUND)
    typer.echo(f"Picked {picked}.", err=True)
    return picked


@app.command("preview")
def preview(ctx: typer.Context) -> None:
    """Show the current moment rendered with the saved date and time formats."""
    state = _state(ctx)
    prefs = _load_preferences(state)
    now = datetime.now(state.app_settings.timezone())
    date_part = format_with_pattern(now, prefs.date_format)
    time_part = format_with_pattern(now, prefs.time_format)
    typer.echo(f"Preview: {date_part} {time_part}")


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Print the saved preferences as JSON."""
    prefs = _load_preferences(_state(ctx))
    typer.echo(json.dumps(prefs.to_storage(), indent=2))


@config_app.command("set")
def config_set(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Preference name, e.g. dateFormat or templateDefault."),
    value: str = typer.Argument(..., help="New value. A blank format resets to its default."),
) -> None:
    """Change one saved preference."""
    state = _state(ctx)
    prefs = _load_preferences(state)

    aliases = {
        name: (field.alias or name) for name, field in UserPreferences.model_fields.items()
    }
    storage_key = aliases.get(key) or (key if key in aliases.values() else None)
    if storage_key is None:
        raise _fail(f"Unknown preference '{key}'. Known: {', '.join(sorted(aliases.values()))}.")

    if storage_key in FORMAT_DEFAULTS and not value.strip():
        value = FORMAT_DEFAULTS[storage_key]

    updated = UserPreferences.model_validate({**prefs.to_storage(), storage_key: value})
    _save_preferences(state, updated)
    typer.echo(f"{storage_key} = {updated.to_storage()[storage_key]!r}")


if __name__ == "__main__":
    app()

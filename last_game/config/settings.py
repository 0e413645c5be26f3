# last_game/config/settings.py
"""
Configuration settings for the Last Game application, powered by Pydantic.

Two kinds of configuration live here:

- `AppSettings`: process-level settings (API endpoints, transport timeout,
  logging) loaded from environment variables with the `LAST_GAME_` prefix.
- `UserPreferences`: the user's own choices (default username, templates,
  date/time formats). They are persisted as JSON by
  `services.preferences_store` using the camelCase keys of earlier versions.
"""
import re
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USERNAME = "gothamchess"
DEFAULT_TEMPLATE = (
    "- {{end_date}} - [{{focus_result}} a {{game_type}} game]({{url}}) against "
    "[{{foe}}]({{foe_url}})<sup>{{foe_rating}}</sup>  rating is now {{rating_change}}/{{focus_rating}}"
)
DEFAULT_TEMPLATE_OTHER_USER = (
    "- {{end_date}} - [{{white}}]({{white_url}})({{white_result}}) vs "
    "[{{black}}]({{black_url}})({{black_result}}) in {{moves}} moves"
)
DEFAULT_DATE_FORMAT = "yyyy-MM-dd"
DEFAULT_TIME_FORMAT = "hh:mm"

_WHITESPACE = re.compile(r"\s+")
_HOUR_TOKEN = re.compile(r"[Hh]")


def _route_single_format(value: str) -> dict:
    """A lone legacy format goes to the time slot if it looks time-like (has H/h)."""
    if _HOUR_TOKEN.search(value):
        return {"dateFormat": DEFAULT_DATE_FORMAT, "timeFormat": value}
    return {"dateFormat": value, "timeFormat": DEFAULT_TIME_FORMAT}


class UserPreferences(BaseModel):
    """
    The user's persisted preferences.

    Field names are snake_case in Python and camelCase on disk; both spellings
    are accepted when loading.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    username: str = Field(DEFAULT_USERNAME, description="Default Chess.com user for the `last` command.")
    template_default: str = Field(DEFAULT_TEMPLATE, alias="templateDefault", description="Template used for the default user.")
    template_other_user: str = Field(DEFAULT_TEMPLATE_OTHER_USER, alias="templateOtherUser", description="Template used when looking up another user.")
    date_format: str = Field(DEFAULT_DATE_FORMAT, alias="dateFormat", description="Date pattern (tokens: yyyy, MM, dd).")
    time_format: str = Field(DEFAULT_TIME_FORMAT, alias="timeFormat", description="Time pattern (tokens: HH, hh, mm, ss, a).")
    last_lookup_username: str = Field("", alias="lastLookupUsername", description="Remembered default for the `lookup` command.")

    @model_validator(mode="before")
    @classmethod
    def migrate_legacy_fields(cls, data: Any) -> Any:
        """
        Upgrades stored data written by earlier versions.

        - A single legacy `template` becomes `templateDefault` unless one is set.
        - When `timeFormat` is missing, an old combined `dateFormat` such as
          "yyyy-MM-dd HH:mm" is split on whitespace into date and time parts.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)

        legacy_template = data.pop("template", None)
        if legacy_template and not (data.get("templateDefault") or data.get("template_default")):
            data["templateDefault"] = legacy_template

        stored_date = data.get("dateFormat") or data.get("date_format")
        stored_time = data.get("timeFormat") or data.get("time_format")
        if stored_time or not isinstance(stored_date, str) or not stored_date.strip():
            return data

        data.pop("date_format", None)
        parts = [part for part in _WHITESPACE.split(stored_date) if part]
        if len(parts) >= 2:
            data["dateFormat"] = parts[0]
            data["timeFormat"] = " ".join(parts[1:])
        else:
            data.update(_route_single_format(stored_date.strip()))
        return data

    @field_validator("username", "last_lookup_username", mode="before")
    @classmethod
    def strip_usernames(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("date_format", mode="before")
    @classmethod
    def default_blank_date_format(cls, value: Any) -> Any:
        return value or DEFAULT_DATE_FORMAT

    @field_validator("time_format", mode="before")
    @classmethod
    def default_blank_time_format(cls, value: Any) -> Any:
        return value or DEFAULT_TIME_FORMAT

    def to_storage(self) -> dict:
        """Serializes only the known preferences, using their on-disk names."""
        return self.model_dump(by_alias=True)


# --- Main Application Settings Class ---

class AppSettings(BaseSettings):
    """
    Process-level configuration.

    Loaded from environment variables with the prefix 'LAST_GAME_', e.g.
    `LAST_GAME_REQUEST_TIMEOUT_S=10` or `LAST_GAME_DISPLAY_TIMEZONE=Europe/Oslo`.
    """
    model_config = SettingsConfigDict(env_prefix="LAST_GAME_", env_nested_delimiter="__")

    api_base_url: str = Field("https://api.chess.com/pub", description="Root of the Chess.com Published-Data API.")
    profile_base_url: str = Field("https://www.chess.com/member", description="Prefix for player profile links.")
    user_agent: str = Field("last-chess-game/1.0", description="User-Agent header; Chess.com rejects anonymous clients.")
    request_timeout_s: float = Field(30.0, description="Transport timeout for each HTTP request, in seconds.")
    preferences_path: str = Field("data/preferences.json", description="Where user preferences are persisted.")
    display_timezone: Optional[str] = Field(None, description="IANA zone for rendered dates; the local zone when unset.")
    default_log_level: str = "WARNING"

    @field_validator("display_timezone")
    @classmethod
    def validate_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value:
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError):
                raise ValueError(f"Configuration error: unknown timezone '{value}'.")
        return value or None

    def timezone(self) -> Optional[ZoneInfo]:
        return ZoneInfo(self.display_timezone) if self.display_timezone else None


# A singleton instance of the settings, accessible throughout the application.
settings = AppSettings()

# tests/core/test_time_formatter.py
from datetime import datetime, timezone

from last_game.core.time_formatter import (
    format_date_only, format_duration, format_time_only, format_timestamp, format_with_pattern
)
from last_game.types import TimeClass

# 2024-03-09 00:05:07 UTC
MIDNIGHT_TS = int(datetime(2024, 3, 9, 0, 5, 7, tzinfo=timezone.utc).timestamp())
# 2024-11-23 15:42:09 UTC
AFTERNOON_TS = int(datetime(2024, 11, 23, 15, 42, 9, tzinfo=timezone.utc).timestamp())


def test_format_with_pattern_all_tokens():
    moment = datetime(2024, 11, 23, 15, 42, 9)
    assert format_with_pattern(moment, "yyyy/MM/dd HH:mm:ss hh a") == "2024/11/23 15:42:09 03 PM"

def test_format_with_pattern_midnight_is_twelve_am():
    moment = datetime(2024, 3, 9, 0, 5)
    assert format_with_pattern(moment, "hh:mm a") == "12:05 AM"
    assert format_with_pattern(datetime(2024, 3, 9, 12, 0), "hh a") == "12 PM"

def test_format_with_pattern_default_and_passthrough():
    moment = datetime(2024, 3, 9, 7, 5)
    assert format_with_pattern(moment, "") == "2024-03-09 07:05"
    assert format_with_pattern(moment, None) == "2024-03-09 07:05"
    assert format_with_pattern(moment, "[yyyy] Q1 @ HH") == "[2024] Q1 @ 07"

def test_format_with_pattern_is_stable():
    moment = datetime(2024, 3, 9, 7, 5)
    assert format_with_pattern(moment, "dd.MM.yyyy") == format_with_pattern(moment, "dd.MM.yyyy")

def test_longest_token_wins():
    # "yyyyy" is one year token followed by a literal "y".
    assert format_with_pattern(datetime(2024, 1, 2), "yyyyy") == "2024y"

def test_date_and_time_only_defaults():
    assert format_date_only(MIDNIGHT_TS, tz=timezone.utc) == "2024-03-09"
    assert format_time_only(MIDNIGHT_TS, tz=timezone.utc) == "12:05"
    assert format_time_only(AFTERNOON_TS, "HH:mm:ss", tz=timezone.utc) == "15:42:09"

def test_missing_timestamp_renders_empty():
    assert format_date_only(None) == ""
    assert format_time_only(0) == ""
    assert format_timestamp(None) == ""

def test_invalid_timestamp_renders_empty():
    assert format_date_only(10 ** 20, tz=timezone.utc) == ""

def test_format_timestamp_joins_parts():
    assert format_timestamp(AFTERNOON_TS, "dd/MM", "HH:mm", tz=timezone.utc) == "23/11 15:42"

def test_format_duration_clock_style():
    assert format_duration(1000, 1000 + 5 * 60 + 59) == "00:05"
    assert format_duration(1000, 1000 + 3600 * 2 + 60 * 7, TimeClass.RAPID) == "02:07"

def test_format_duration_not_capped_at_a_day():
    assert format_duration(1000, 1000 + 26 * 3600, TimeClass.BLITZ) == "26:00"

def test_format_duration_daily_in_days():
    day = 24 * 3600
    assert format_duration(1000, 1000 + day, TimeClass.DAILY) == "1 day"
    assert format_duration(1000, 1000 + 3 * day + 3600, TimeClass.DAILY) == "3 days"
    assert format_duration(1000, 1000 + day // 2, TimeClass.DAILY) == "1 day"
    assert format_duration(1000, 1000 + 3600, TimeClass.DAILY) == "0 days"

def test_format_duration_missing_or_inverted():
    assert format_duration(None, 2000) == ""
    assert format_duration(1000, None) == ""
    assert format_duration(2000, 1000) == ""

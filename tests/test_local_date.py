from datetime import datetime, timezone

import pytest

from app.local_date import (
    format_date,
    format_date_with_offset,
    format_time_with_offset,
    is_valid_local_date,
    parse_date_parts,
    parse_month,
    parse_offset_minutes,
    previous_date,
)


@pytest.mark.parametrize("value", ["2024-02-29", "2023-12-31", "2000-01-01", "1999-06-30"])
def test_parse_date_parts_round_trips(value: str) -> None:
    parts = parse_date_parts(value)
    assert parts is not None
    assert format_date(parts.utc_midnight) == value


@pytest.mark.parametrize(
    "value",
    ["2023-02-30", "2023-13-01", "23-01-01", "2023-04-31", "2023-00-10", "2023-1-01", "2023-01-01\n", "", "abcd-ef-gh"],
)
def test_parse_date_parts_rejects_invalid(value: str) -> None:
    assert parse_date_parts(value) is None
    assert not is_valid_local_date(value)


def test_parse_date_parts_rejects_non_ascii_digits() -> None:
    assert parse_date_parts("２０２４-01-01") is None


def test_format_date_uses_utc_fields() -> None:
    aware = datetime(2024, 5, 3, 23, 30, tzinfo=timezone.utc)
    assert format_date(aware) == "2024-05-03"
    assert format_date(datetime(2024, 5, 3, 23, 30)) == "2024-05-03"


def test_format_date_with_offset_west_of_utc() -> None:
    instant = datetime(2024, 5, 3, 2, 0)
    # UTC-5 is 300 minutes behind, so 02:00 UTC is still the previous evening.
    assert format_date_with_offset(instant, 300) == "2024-05-02"
    assert format_date_with_offset(instant) == "2024-05-03"


def test_format_date_with_offset_east_of_utc() -> None:
    instant = datetime(2024, 5, 3, 20, 0)
    assert format_date_with_offset(instant, -600) == "2024-05-04"


def test_format_time_with_offset() -> None:
    instant = datetime(2024, 5, 3, 9, 5)
    assert format_time_with_offset(instant) == "09:05"
    assert format_time_with_offset(instant, -90) == "10:35"


def test_previous_date_rolls_over_boundaries() -> None:
    assert previous_date("2024-03-01") == "2024-02-29"
    assert previous_date("2023-03-01") == "2023-02-28"
    assert previous_date("2024-01-01") == "2023-12-31"
    assert previous_date("2024-05-10") == "2024-05-09"


def test_previous_date_invalid_input() -> None:
    assert previous_date("2024-02-30") is None
    assert previous_date("0001-01-01") is None


def test_parse_month_leap_and_common_years() -> None:
    leap = parse_month("2024-02")
    assert leap is not None
    assert (leap.start_date, leap.end_date) == ("2024-02-01", "2024-02-29")

    common = parse_month("2023-02")
    assert common is not None
    assert common.end_date == "2023-02-28"

    december = parse_month("2023-12")
    assert december is not None
    assert (december.year, december.month, december.end_date) == (2023, 12, "2023-12-31")


@pytest.mark.parametrize("value", ["2024-13", "2024-00", "2024-2", "24-02", "2024-02-01", ""])
def test_parse_month_rejects_invalid(value: str) -> None:
    assert parse_month(value) is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("0", 0), ("300", 300), ("-540", -540), ("+60", 60), ("9999", 9999)],
)
def test_parse_offset_minutes_accepts_integers(raw: str, expected: int) -> None:
    assert parse_offset_minutes(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "1.5", "abc", "60m", " 60"])
def test_parse_offset_minutes_rejects_non_integers(raw) -> None:
    assert parse_offset_minutes(raw) is None

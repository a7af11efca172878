from __future__ import annotations

from datetime import datetime, timezone

import pytest

from docksize.time_utils import MIN_TIMESTAMP, parse_timestamp
from docksize.utils import convert_size_to_mb, get_percentage_increase, round_off_decimal


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2022-04-12T10:11:12Z", datetime(2022, 4, 12, 10, 11, 12, tzinfo=timezone.utc)),
        ("2022-04-12T10:11:12.123456Z", datetime(2022, 4, 12, 10, 11, 12, 123456, tzinfo=timezone.utc)),
        ("2022-04-12T10:11:12.5Z", datetime(2022, 4, 12, 10, 11, 12, 500000, tzinfo=timezone.utc)),
        ("2022-04-12T10:11:12.1234567Z", datetime(2022, 4, 12, 10, 11, 12, 123456, tzinfo=timezone.utc)),
        ("2022-04-12T10:11:12", datetime(2022, 4, 12, 10, 11, 12, tzinfo=timezone.utc)),
    ],
)
def test_parse_timestamp(value: str, expected: datetime) -> None:
    assert parse_timestamp(value) == expected


@pytest.mark.parametrize("value", [None, "", "yesterday"])
def test_unparseable_timestamp_sorts_first(value) -> None:
    assert parse_timestamp(value) == MIN_TIMESTAMP
    assert parse_timestamp(value) < parse_timestamp("1970-01-01T00:00:00Z")


def test_percentage_and_rounding() -> None:
    change = get_percentage_increase(1234, 1000)

    assert round_off_decimal(change) == 23.4
    assert round_off_decimal(10 / 3) == 3.33


def test_percentage_of_zero_previous_raises() -> None:
    with pytest.raises(ZeroDivisionError):
        get_percentage_increase(10, 0)


def test_convert_size_to_mb() -> None:
    assert convert_size_to_mb(1024 * 1024 * 3) == 3.0

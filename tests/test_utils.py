from datetime import datetime, timedelta, timezone

import pytest

from superman.utils import format_timestamp, now, parse_timestamp


def test_format_timestamp():
    assert format_timestamp(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05"


def test_round_trip_from_string():
    text = format_timestamp(datetime(2023, 12, 31, 23, 59, 58))
    assert format_timestamp(parse_timestamp(text)) == text


def test_parse_gives_utc():
    parsed = parse_timestamp(format_timestamp(datetime(2022, 6, 7, 8, 9, 10)))
    assert parsed.tzinfo == timezone.utc
    assert (parsed.year, parsed.month, parsed.day) == (2022, 6, 7)
    assert (parsed.hour, parsed.minute, parsed.second) == (8, 9, 10)


@pytest.mark.parametrize("bad", ["", "2024-01-02", "not a time", "2024-13-01T00:00:00"])
def test_parse_rejects_malformed(bad):
    with pytest.raises(ValueError):
        parse_timestamp(bad)


def test_now_is_current():
    before = datetime.now()
    value = now()
    after = datetime.now()
    assert before <= value <= after
    assert after - before < timedelta(seconds=5)
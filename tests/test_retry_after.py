"""Tests for Retry-After header interpretation."""

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import pytest

from graceful_page.browser.retry_after import parse_retry_after

NOW = datetime(2015, 10, 21, 7, 28, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestDelaySeconds:
    """Numeric Retry-After values."""

    @pytest.mark.parametrize("value,expected", [("1", 1000), ("120", 120000), ("3600", 3600000)])
    def test_positive_seconds_become_milliseconds(self, value: str, expected: int) -> None:
        assert parse_retry_after(value) == expected

    def test_fractional_seconds(self) -> None:
        assert parse_retry_after("1.5") == 1500

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert parse_retry_after(" 30 ") == 30000

    def test_zero_is_treated_as_no_hint(self) -> None:
        # "0" cannot be told apart from a missing header.
        assert parse_retry_after("0") is None

    def test_negative_seconds_keep_sign(self) -> None:
        assert parse_retry_after("-5") == -5000

    def test_nan_is_no_hint(self) -> None:
        assert parse_retry_after("nan") is None


@pytest.mark.unit
class TestMissingOrInvalid:
    """Values that carry no usable hint."""

    def test_none(self) -> None:
        assert parse_retry_after(None) is None

    def test_empty_string(self) -> None:
        assert parse_retry_after("") is None

    @pytest.mark.parametrize("value", ["soon", "later please", "Wed, 99 Foo 2015"])
    def test_garbage(self, value: str) -> None:
        assert parse_retry_after(value) is None


@pytest.mark.unit
class TestHttpDate:
    """HTTP-date Retry-After values."""

    def test_future_date(self) -> None:
        assert parse_retry_after("Wed, 21 Oct 2015 07:30:00 GMT", now=NOW) == 120000

    def test_past_date_is_negative(self) -> None:
        assert parse_retry_after("Wed, 21 Oct 2015 07:27:00 GMT", now=NOW) == -60000

    def test_date_equal_to_now_is_no_hint(self) -> None:
        assert parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT", now=NOW) is None

    def test_naive_now_is_taken_as_utc(self) -> None:
        naive_now = NOW.replace(tzinfo=None)
        assert parse_retry_after("Wed, 21 Oct 2015 07:28:10 GMT", now=naive_now) == 10000

    def test_iso_format_fallback(self) -> None:
        assert parse_retry_after("2015-10-21T07:28:05+00:00", now=NOW) == 5000

    def test_future_date_against_wall_clock(self) -> None:
        target = datetime.now(timezone.utc) + timedelta(seconds=60)
        header = format_datetime(target, usegmt=True)

        delay = parse_retry_after(header)

        assert delay is not None
        # HTTP-dates have one second resolution
        assert 58000 <= delay <= 60000

    def test_past_date_against_wall_clock(self) -> None:
        target = datetime.now(timezone.utc) - timedelta(seconds=60)
        header = format_datetime(target, usegmt=True)

        delay = parse_retry_after(header)

        assert delay is not None
        assert delay < 0

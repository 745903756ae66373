"""Tests for datetime_utils module."""

from datetime import UTC, datetime, timedelta, timezone


class TestNowUtc:
    """Tests for now_utc function."""

    def test_returns_datetime(self):
        """Returns a datetime object."""
        from app.utils.datetime_utils import now_utc

        result = now_utc()
        assert isinstance(result, datetime)

    def test_is_timezone_aware(self):
        """Returned datetime is timezone-aware."""
        from app.utils.datetime_utils import now_utc

        result = now_utc()
        assert result.tzinfo is not None
        assert result.tzinfo == UTC


class TestEnsureUtc:
    """Tests for ensure_utc function."""

    def test_naive_is_interpreted_as_utc(self):
        from app.utils.datetime_utils import ensure_utc

        result = ensure_utc(datetime(2026, 10, 19, 12, 0))
        assert result == datetime(2026, 10, 19, 12, 0, tzinfo=UTC)

    def test_aware_is_converted(self):
        from app.utils.datetime_utils import ensure_utc

        addis = timezone(timedelta(hours=3))
        result = ensure_utc(datetime(2026, 10, 19, 15, 0, tzinfo=addis))
        assert result == datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
        assert result.tzinfo == UTC


class TestParseTimestamp:
    """Tests for parse_timestamp function."""

    def test_none(self):
        from app.utils.datetime_utils import parse_timestamp

        assert parse_timestamp(None) is None

    def test_trailing_z(self):
        from app.utils.datetime_utils import parse_timestamp

        assert parse_timestamp("2026-10-19T12:30:00Z") == datetime(2026, 10, 19, 12, 30, tzinfo=UTC)

    def test_offset_string(self):
        from app.utils.datetime_utils import parse_timestamp

        assert parse_timestamp("2026-10-19T15:30:00+03:00") == datetime(
            2026, 10, 19, 12, 30, tzinfo=UTC
        )

    def test_datetime_passthrough(self):
        from app.utils.datetime_utils import parse_timestamp

        value = datetime(2026, 10, 19, 12, 30, tzinfo=UTC)
        assert parse_timestamp(value) == value

    def test_plain_date_is_midnight_utc(self):
        from datetime import date

        from app.utils.datetime_utils import parse_timestamp

        assert parse_timestamp(date(2026, 10, 19)) == datetime(2026, 10, 19, tzinfo=UTC)

    def test_blank_and_garbage(self):
        from app.utils.datetime_utils import parse_timestamp

        assert parse_timestamp("  ") is None
        assert parse_timestamp("kickoff") is None


class TestElapsedWholeSeconds:
    """Tests for elapsed_whole_seconds function."""

    def test_floors_fractional_seconds(self):
        from app.utils.datetime_utils import elapsed_whole_seconds

        start = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
        assert elapsed_whole_seconds(start, start + timedelta(seconds=125, milliseconds=900)) == 125

    def test_negative_when_end_precedes_start(self):
        from app.utils.datetime_utils import elapsed_whole_seconds

        start = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
        assert elapsed_whole_seconds(start, start - timedelta(milliseconds=500)) == -1


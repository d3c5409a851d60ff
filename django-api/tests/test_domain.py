"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from datetime import date, datetime, timedelta, timezone
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from events.domain import EventCode, EventId, ExpiryDays, HostId
from events.domain.errors import InvalidFilenameError, QuotaExceededError
from events.domain.expiry import compute_expiry
from events.domain.filenames import check_display_name, check_filename
from events.domain.quota import may_create


class TestEventId:
    """Tests for EventId value object."""

    def test_from_string_valid_uuid(self):
        """EventId can be created from valid UUID string."""
        raw = uuid4()
        assert EventId.from_string(str(raw)).value == raw

    def test_from_string_invalid_uuid(self):
        """EventId raises ValueError for invalid UUID string."""
        with pytest.raises(ValueError):
            EventId.from_string("not-a-uuid")

    def test_str_is_plain_uuid(self):
        raw = uuid4()
        assert str(HostId(raw)) == str(raw)


class TestEventCode:
    """Tests for EventCode value object."""

    def test_generated_codes_are_valid(self):
        code = EventCode.generate()
        assert len(code.value) == 8
        assert code.value == code.value.upper()

    def test_normalize_uppercases_and_strips(self):
        assert EventCode.normalize("  ab12cd34 ").value == "AB12CD34"

    @pytest.mark.parametrize("value", ["", "abc", "AB-12", "A" * 17, "AB 12"])
    def test_rejects_malformed_codes(self, value):
        with pytest.raises(ValueError):
            EventCode(value)


class TestExpiryDays:
    """Tests for ExpiryDays value object."""

    def test_accepts_positive_value(self):
        assert ExpiryDays(14).value == 14

    @pytest.mark.parametrize("value", [0, -1, True, 1.5])
    def test_rejects_non_positive_or_non_integer(self, value):
        with pytest.raises(ValueError):
            ExpiryDays(value)


class TestComputeExpiry:
    """Tests for expiry arithmetic."""

    def test_date_anchor_adds_calendar_days(self):
        """A date anchor expires at local midnight N days later."""
        expires = compute_expiry(date(2024, 1, 1), 14)
        assert expires == datetime(2024, 1, 15, tzinfo=timezone.utc)

    def test_no_anchor_uses_clock(self):
        now = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        expires = compute_expiry(None, 14, clock=lambda: now)
        assert expires == now + timedelta(days=14)

    def test_naive_datetime_is_read_in_configured_zone(self):
        berlin = ZoneInfo("Europe/Berlin")
        expires = compute_expiry(datetime(2024, 1, 1, 18, 0), 1, tz=berlin)
        assert expires == datetime(2024, 1, 2, 18, 0, tzinfo=berlin)

    def test_wall_clock_is_kept_across_daylight_saving(self):
        """Crossing the spring-forward night keeps the local time of day."""
        berlin = ZoneInfo("Europe/Berlin")
        anchor = datetime(2024, 3, 30, 12, 0, tzinfo=berlin)

        expires = compute_expiry(anchor, 1, tz=berlin)

        assert expires.hour == 12
        assert expires.astimezone(timezone.utc) == datetime(2024, 3, 31, 10, 0, tzinfo=timezone.utc)

    def test_date_anchor_in_zone_after_change(self):
        berlin = ZoneInfo("Europe/Berlin")
        expires = compute_expiry(date(2024, 3, 20), 14, tz=berlin)
        assert expires.utcoffset() == timedelta(hours=2)
        assert (expires.year, expires.month, expires.day, expires.hour) == (2024, 4, 3, 0)

    @pytest.mark.parametrize("days", [0, -3])
    def test_rejects_non_positive_duration(self, days):
        with pytest.raises(ValueError):
            compute_expiry(date(2024, 1, 1), days)


class TestQuota:
    """Tests for the event quota decision."""

    def test_no_limit_always_allows(self):
        assert may_create(None, 10_000).allowed

    def test_allows_below_limit(self):
        decision = may_create(3, 2)
        assert decision.allowed
        assert decision.limit == 3

    def test_denies_at_limit(self):
        decision = may_create(3, 3)
        assert not decision.allowed
        assert decision.limit == 3
        assert "3" in decision.reason

    def test_zero_limit_denies_first_event(self):
        assert not may_create(0, 0).allowed

    def test_quota_error_carries_limit(self):
        error = QuotaExceededError(5)
        assert error.limit == 5
        assert error.message == "Event limit of 5 reached"


class TestFilenames:
    """Tests for filename guards."""

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b.jpg", "a\\b.jpg", "x\x00.jpg"])
    def test_check_filename_rejects_non_bare_names(self, name):
        with pytest.raises(InvalidFilenameError):
            check_filename(name)

    def test_check_filename_accepts_generated_name(self):
        check_filename("3f2a9c.jpg")

    @pytest.mark.parametrize(
        "name",
        ["../etc/passwd", "..\\boot.ini", "photos/../../x.jpg", "/etc/passwd", "C:\\x.jpg", ".."],
    )
    def test_check_display_name_rejects_traversal(self, name):
        with pytest.raises(InvalidFilenameError):
            check_display_name(name)

    @pytest.mark.parametrize("name", ["IMG_0001.JPG", "party..final.jpg", "My photo (1).png"])
    def test_check_display_name_accepts_ordinary_names(self, name):
        check_display_name(name)

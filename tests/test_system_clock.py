"""Tests for taskquest.adapters.system_clock — wall clock and UUID ids."""

from datetime import date, timedelta

from taskquest.adapters.system_clock import SystemClock, UuidGenerator


class TestSystemClock:
    def test_now_is_timezone_aware(self):
        now = SystemClock("UTC").now()
        assert now.tzinfo is not None
        assert now.utcoffset() == timedelta(0)

    def test_today_is_a_plain_date(self):
        today = SystemClock("Asia/Jerusalem").today()
        assert type(today) is date

    def test_defaults_to_configured_timezone(self):
        assert SystemClock().now().utcoffset() == timedelta(0)


class TestUuidGenerator:
    def test_ids_are_unique_hex(self):
        gen = UuidGenerator()
        ids = {gen.next() for _ in range(100)}
        assert len(ids) == 100
        assert all(len(i) == 32 for i in ids)

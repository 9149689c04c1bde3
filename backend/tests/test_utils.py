"""Tests for timestamp and search-term helpers."""

from datetime import datetime, timedelta, timezone

from termbook.utils import normalize_search_term, to_unix_timestamp


class TestToUnixTimestamp:

    def test_aware_datetime(self):
        assert to_unix_timestamp(datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)) == 1705320000

    def test_naive_is_utc(self):
        assert to_unix_timestamp(datetime(2024, 1, 15, 12, 0)) == 1705320000

    def test_other_offset(self):
        plus_two = timezone(timedelta(hours=2))
        assert to_unix_timestamp(datetime(2024, 1, 15, 14, 0, tzinfo=plus_two)) == 1705320000

    def test_none(self):
        assert to_unix_timestamp(None) is None


class TestNormalizeSearchTerm:

    def test_trims(self):
        assert normalize_search_term("  yeet ") == "yeet"

    def test_decodes_percent_escapes(self):
        assert normalize_search_term("hot%20take") == "hot take"

    def test_blank_is_none(self):
        assert normalize_search_term("   ") is None
        assert normalize_search_term("%20") is None
        assert normalize_search_term(None) is None

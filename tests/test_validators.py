"""Tests for the shared validation helpers."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from momentev.shared.validators import (
    parse_date,
    parse_datetime,
    require_text,
    round_money,
    status_filter,
    validate_email,
    validate_international_phone,
)


class TestEmail:
    def test_normalizes(self):
        assert validate_email("  Ada@Example.COM ") == "ada@example.com"

    @pytest.mark.parametrize("email", ["", None, "ada", "ada@example", "a b@example.com"])
    def test_rejects(self, email):
        with pytest.raises(ValueError, match="valid email"):
            validate_email(email)


class TestPhone:
    def test_normalizes_to_e164(self):
        assert validate_international_phone("+234 803 123 4567") == "+2348031234567"

    @pytest.mark.parametrize("phone", ["08031234567", "+1234", "+1234567890123456", None])
    def test_rejects(self, phone):
        with pytest.raises(ValueError, match="international phone"):
            validate_international_phone(phone)


class TestText:
    def test_bounds(self):
        assert require_text("  Momentev ", "Required", min_length=2, max_length=10) == "Momentev"
        with pytest.raises(ValueError, match="Too long"):
            require_text("x" * 11, "Required", max_length=10, max_message="Too long")
        with pytest.raises(ValueError, match="Required"):
            require_text("  ", "Required")


class TestDates:
    def test_parse_date_accepts_iso_and_objects(self):
        assert parse_date("2026-06-01T23:00:00Z", "bad") == date(2026, 6, 1)
        assert parse_date(datetime(2026, 6, 1, 8), "bad") == date(2026, 6, 1)
        with pytest.raises(ValueError, match="bad"):
            parse_date("next week", "bad")

    def test_parse_datetime_is_lenient(self):
        assert parse_datetime("2026-06-01T10:00:00Z").hour == 10
        assert parse_datetime("garbage") is None
        assert parse_datetime(None) is None


def test_status_filter():
    assert status_filter("all") is None
    assert status_filter(None) is None
    assert status_filter("pending") == "pending"


def test_round_money():
    assert round_money(19.999) == 20.0
    assert round_money("12.5") == 12.5

"""
Tests for duration parsing.
"""
from datetime import timedelta

import pytest

from jwt_signer.durations import parse_duration


class TestParseDuration:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("15m", timedelta(minutes=15)),
            ("1h30m", timedelta(hours=1, minutes=30)),
            ("1.5h", timedelta(minutes=90)),
            ("90s", timedelta(seconds=90)),
            ("300ms", timedelta(milliseconds=300)),
            ("10us", timedelta(microseconds=10)),
            ("10µs", timedelta(microseconds=10)),
            ("1500ns", timedelta(microseconds=1)),
            (".5s", timedelta(milliseconds=500)),
            ("+2h", timedelta(hours=2)),
            ("-1m", timedelta(minutes=-1)),
            ("0", timedelta(0)),
            ("0s", timedelta(0)),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_duration(text) == expected

    @pytest.mark.parametrize(
        "text",
        ["", "-", "15", "15x", "abc", "1h ", " 1h", "1.h2", "m", ".s", "1d", "3000000h", "9999999999999999999h", "-3000000h"],
    )
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_duration(text)

    def test_largest_duration(self):
        assert parse_duration("2562047h47m16.854775807s") == timedelta(
            hours=2562047, minutes=47, seconds=16, microseconds=854775
        )

    def test_just_over_largest_duration(self):
        with pytest.raises(ValueError, match="out of range"):
            parse_duration("2562047h47m16.854775808s")

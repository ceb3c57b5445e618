"""
Unit tests for utils/formatting.py

Tests format_ada, format_ada_compact, format_percent, format_count and
truncate_middle.  No network or file I/O required.
"""
import math
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.formatting import (
    PLACEHOLDER,
    format_ada,
    format_ada_compact,
    format_count,
    format_percent,
    truncate_middle,
)


# ── format_ada ────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("value, expected", [
    (1_234_567_890, "1.23B ₳"),
    (1_000_000_000, "1.00B ₳"),
    (4_500_000, "4.50M ₳"),
    (45_200, "45.2K ₳"),
    (10_000, "10.0K ₳"),
    (9_999, "9,999 ₳"),
    (999, "999 ₳"),
    (0, "0 ₳"),
])
def test_format_ada_thresholds(value, expected):
    assert format_ada(value) == expected


def test_format_ada_rounds_half_up_below_ten_thousand():
    assert format_ada(1234.5) == "1,235 ₳"
    assert format_ada(0.4) == "0 ₳"


def test_format_ada_missing_values():
    assert format_ada(None) == PLACEHOLDER
    assert format_ada(math.nan) == PLACEHOLDER
    assert format_ada(math.inf) == PLACEHOLDER


def test_format_ada_negative_values_skip_suffixes():
    assert format_ada(-5_000_000).endswith(" ₳")
    assert "M" not in format_ada(-5_000_000)


# ── format_ada_compact ────────────────────────────────────────────────────────

class TestFormatAdaCompact:
    def test_one_decimal_suffixes(self):
        assert format_ada_compact(2_500_000) == "2.5M ₳"
        assert format_ada_compact(3_210_000_000) == "3.2B ₳"
        assert format_ada_compact(12_345) == "12.3K ₳"

    def test_small_amount(self):
        assert format_ada_compact(420) == "420 ₳"

    def test_zero_is_placeholder(self):
        assert format_ada_compact(0) == PLACEHOLDER

    def test_none_and_nan(self):
        assert format_ada_compact(None) == PLACEHOLDER
        assert format_ada_compact(math.nan) == PLACEHOLDER


# ── percent / count ──────────────────────────────────────────────────────────

def test_format_percent():
    assert format_percent(42.5) == "42.5%"
    assert format_percent(42.567, precision=2) == "42.57%"
    assert format_percent(None) == PLACEHOLDER
    assert format_percent(math.inf) == PLACEHOLDER


def test_format_count():
    assert format_count(1234567) == "1,234,567"
    assert format_count(0) == "0"
    assert format_count(None) == PLACEHOLDER


# ── truncate_middle ───────────────────────────────────────────────────────────

class TestTruncateMiddle:
    def test_long_address(self):
        addr = "addr1qxy2kgdygjrsqtzq2n0yrf2493p83kkfjhx0wlh"
        assert truncate_middle(addr) == "addr1qxy…hx0wlh"

    def test_short_text_unchanged(self):
        assert truncate_middle("addr1short") == "addr1short"

    def test_custom_head_tail(self):
        assert truncate_middle("abcdefghijklmnop", head=3, tail=2) == "abc…op"

    def test_empty(self):
        assert truncate_middle(None) == PLACEHOLDER
        assert truncate_middle("") == PLACEHOLDER

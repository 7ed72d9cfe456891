"""Tests for normalizer functions."""

import pytest

from lezec_diary.core.normalizer import (
    clean_text,
    decode_page,
    is_diary_date,
    parse_attempts,
    parse_grade,
    parse_title,
)


class TestParseGrade:
    """Tests for parse_grade function."""

    def test_suggested_and_origin(self):
        """Test "A [B]" gives origin B and suggestion A."""
        assert parse_grade("6a [6a+]") == ("6a+", "6a")

    def test_trims_parts(self):
        """Test both parts are stripped."""
        assert parse_grade("VIIb  [ VIIc ]") == ("VIIc", "VIIb")

    def test_no_space_before_bracket(self):
        """Test bracket directly after the suggestion."""
        assert parse_grade("7a[7a+]") == ("7a+", "7a")

    @pytest.mark.parametrize("raw", ["6a+", "VIIb", "", "[6a]", "6a [6b] x"])
    def test_no_match_is_verbatim(self, raw):
        """Test strings without a trailing bracket are kept as origin grade."""
        assert parse_grade(raw) == (raw, None)


class TestParseTitle:
    """Tests for parse_title function."""

    def test_partners_and_note(self):
        """Test splitting on the separator."""
        assert parse_title("Alice - nice climb") == ("Alice", "nice climb")

    def test_without_separator(self):
        """Test title without separator is all partners."""
        assert parse_title("  Alice, Bob ") == ("Alice, Bob", None)

    def test_empty_string(self):
        """Test empty title gives nothing."""
        assert parse_title("") == (None, None)

    def test_none_input(self):
        """Test None title gives nothing."""
        assert parse_title(None) == (None, None)

    def test_empty_partners_kept(self):
        """Test leading separator gives empty partners, not None."""
        assert parse_title(" - solo") == ("", "solo")

    def test_extra_segments_dropped(self):
        """Test text after a second separator is dropped."""
        assert parse_title("Alice - wet - retreated") == ("Alice", "wet")

    def test_hyphen_without_spaces(self):
        """Test a plain hyphen is not a separator."""
        assert parse_title("Jan Novák-Svoboda") == ("Jan Novák-Svoboda", None)


class TestIsDiaryDate:
    """Tests for is_diary_date function."""

    def test_valid_date(self):
        assert is_diary_date("01.01.2024") is True

    @pytest.mark.parametrize("text", ["1.1.2024", "01.01.24", "2024-01-01", "Celkem", "", "01.01.2024 "])
    def test_invalid_dates(self, text):
        assert is_diary_date(text) is False


class TestParseAttempts:
    """Tests for parse_attempts function."""

    def test_number(self):
        assert parse_attempts(" 3 ") == 3

    @pytest.mark.parametrize("text", ["", "?", "2x", "1.5"])
    def test_non_numeric(self, text):
        assert parse_attempts(text) is None


class TestDecodePage:
    """Tests for decode_page function."""

    def test_windows_1250(self):
        """Test Czech characters survive decoding."""
        assert decode_page("Žluťoučký kůň".encode("cp1250")) == "Žluťoučký kůň"

    def test_not_utf8(self):
        """Test UTF-8 bytes are not decoded as UTF-8."""
        assert decode_page("Ž".encode("utf-8")) != "Ž"

    def test_undefined_bytes_replaced(self):
        """Test bytes undefined in windows-1250 become U+FFFD."""
        assert decode_page(b"a\x81b\x98c") == "a\ufffdb\ufffdc"


class TestCleanText:
    """Tests for clean_text function."""

    def test_strips(self):
        assert clean_text("  a b \n") == "a b"

    def test_none(self):
        assert clean_text(None) == ""

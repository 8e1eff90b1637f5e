import pytest

from todo_app.text import character_limit, is_blank, truncate


class TestIsBlank:
    @pytest.mark.parametrize("text", [None, "", " ", "\n\t "])
    def test_blank(self, text):
        assert is_blank(text) is True

    def test_not_blank(self):
        assert is_blank(" x ") is False


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate("Buy milk", 30) == "Buy milk"

    def test_adds_suffix_within_limit(self):
        result = truncate("Write the quarterly report", 10)
        assert result == "Write t..."
        assert len(result) == 10

    def test_limit_smaller_than_suffix(self):
        assert truncate("Write the report", 2) == ".."

    def test_non_positive_limit(self):
        assert truncate("anything", 0) == ""
        assert truncate("anything", -5) == ""

    def test_custom_suffix(self):
        assert truncate("abcdefgh", 5, suffix="~") == "abcd~"


class TestCharacterLimit:
    def test_well_under_limit(self):
        info = character_limit("hello")
        assert info.character_count == 5
        assert info.remaining_chars == 495
        assert info.is_over_limit is False
        assert info.is_near_limit is False
        assert info.warning_message is None

    def test_near_limit(self):
        info = character_limit("a" * 450)
        assert info.is_near_limit is True
        assert info.warning_message == "50 characters remaining"

    def test_exactly_at_limit(self):
        info = character_limit("a" * 500)
        assert info.is_over_limit is False
        assert info.warning_message == "0 characters remaining"

    def test_over_limit(self):
        info = character_limit("a" * 503)
        assert info.is_over_limit is True
        assert info.is_near_limit is False
        assert info.warning_message == "3 characters over limit"

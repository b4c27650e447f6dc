"""Tests for formatting helpers."""

from __future__ import annotations

import pytest

from nottif.utils.formatting import split_message, truncate_display


class TestSplitMessage:
    def test_exact_multiple(self) -> None:
        assert split_message("abcdef", 3) == ["abc", "def"]

    def test_remainder(self) -> None:
        assert split_message("abcdefg", 3) == ["abc", "def", "g"]

    def test_empty(self) -> None:
        assert split_message("", 3) == [""]

    def test_counts_characters_not_bytes(self) -> None:
        assert split_message("éééé", 2) == ["éé", "éé"]

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            split_message("abc", 0)


class TestTruncateDisplay:
    def test_long(self) -> None:
        assert truncate_display("abcdef", 3) == "abc..."

    def test_short(self) -> None:
        assert truncate_display("abc", 3) == "abc"

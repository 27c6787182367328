"""Tests for cell-width measurement and clamping."""

from __future__ import annotations

import pytest

from polybar_now_playing.text_width import char_width, clamp, width

SAMPLES = [
    "",
    "hello",
    "日本語",
    "a日b本c",
    "Björk - Jóga",
    "école",
    "音楽 - 坂本龍一 |",
]


def test_char_width_narrow_wide_and_combining() -> None:
    assert char_width("a") == 1
    assert char_width("日") == 2
    assert char_width("\u0301") == 0


def test_width_counts_columns_not_codepoints() -> None:
    assert width("abc") == 3
    assert width("日本") == 4
    assert width("é") == 1
    assert width("") == 0


@pytest.mark.parametrize("left", SAMPLES)
@pytest.mark.parametrize("right", ["", "x", "語 z"])
def test_width_is_additive(left: str, right: str) -> None:
    assert width(left + right) == width(left) + width(right)


@pytest.mark.parametrize("text", SAMPLES)
@pytest.mark.parametrize("target", [0, 1, 2, 3, 5, 8, 20])
def test_clamp_hits_exact_width_and_is_idempotent(text: str, target: int) -> None:
    clamped = clamp(text, target)
    assert width(clamped) == target
    assert clamp(clamped, target) == clamped


def test_clamp_truncates_narrow_text() -> None:
    assert clamp("abcdef", 4) == "abcd"


def test_clamp_pads_short_text() -> None:
    assert clamp("ab", 5) == "ab   "


def test_clamp_exact_fit_is_unchanged() -> None:
    assert clamp("日本", 4) == "日本"


def test_clamp_replaces_last_character_when_wide_char_straddles() -> None:
    # "界" would need columns 4-5 of a 4-column slot.
    assert clamp("abc界", 4) == "ab  "
    assert clamp("日本語", 5) == "日   "


def test_clamp_wide_first_character_into_single_column() -> None:
    assert clamp("日本", 1) == " "


def test_clamp_negative_target_is_empty() -> None:
    assert clamp("abc", -3) == ""

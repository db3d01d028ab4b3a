"""
Tests for the reading pause calculator.
"""

import pytest

from speech_bubbles.engine.reading import reading_pause


def test_zero_words_gets_minimum_pause():
    assert reading_pause(0) == 1500


def test_pause_scales_with_words():
    # 10 words at 200 wpm = 3 seconds
    assert reading_pause(10) == pytest.approx(3000)


def test_pause_is_capped():
    assert reading_pause(100) == 8000
    assert reading_pause(10_000) == 8000


def test_pause_is_bounded_and_monotonic():
    previous = 0
    for words in range(0, 200):
        pause = reading_pause(words)
        assert 1500 <= pause <= 8000
        assert pause >= previous
        previous = pause


def test_custom_reading_speed_and_bounds():
    assert reading_pause(10, wpm=100) == pytest.approx(6000)
    assert reading_pause(1, wpm=600, min_ms=10, max_ms=50) == pytest.approx(50)


def test_non_positive_speed_is_rejected():
    with pytest.raises(ValueError):
        reading_pause(5, wpm=0)

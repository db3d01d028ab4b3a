"""
Tests for text segmentation and word wrapping.
"""

import pytest

from speech_bubbles.engine.segmenter import (
    count_words,
    find_break_point,
    segment_text,
    wrap_text_to_lines,
)

LONG_REPLY = (
    "Good morning! I hope you slept well, because today we have a lot to cover. "
    "First we will look at the garden, where the tomatoes finally turned red. "
    "Then we can walk down to the river and watch the herons fish for breakfast. "
    "If it rains, we stay inside and read the old atlas instead.\n\n"
    "Does that sound like a plan? I think it does. Let me know what you prefer, "
    "and I will pack some sandwiches for the road."
)


def normalize(text):
    return " ".join(text.split())


def test_wrap_is_greedy():
    assert wrap_text_to_lines("one two three four", 9) == ["one two", "three", "four"]


def test_wrap_respects_explicit_newlines():
    assert wrap_text_to_lines("a\n\nb", 10) == ["a", "", "b"]


def test_wrap_keeps_overlong_word_on_its_own_line():
    assert wrap_text_to_lines("hi supercalifragilistic yo", 8) == ["hi", "supercalifragilistic", "yo"]


def test_count_words():
    assert count_words("  hello   there\nfriend ") == 3
    assert count_words("") == 0


@pytest.mark.parametrize("text", ["", "   ", "\n\t\n"])
def test_empty_text_yields_no_segments(text):
    assert segment_text(text, 20, 2) == []


def test_short_text_is_one_segment():
    segments = segment_text("  Hi there!  ", 20, 2)

    assert len(segments) == 1
    assert segments[0].text == "Hi there!"
    assert segments[0].word_count == 2
    assert segments[0].start_index == 0
    assert segments[0].end_index == len("Hi there!")


def test_fitting_text_has_no_break_point():
    assert find_break_point("short", 20, 1) == -1


def test_prefers_sentence_boundary():
    text = "The cat sat on the mat. It was a sunny day and the dog barked loudly at everyone."
    segments = segment_text(text, 30, 1)

    assert segments[0].text == "The cat sat on the mat."


def test_sentence_boundary_too_far_from_target_is_ignored():
    text = "Hi. this sentence keeps going without any stop at all for a while"
    segments = segment_text(text, 30, 1)

    assert segments[0].text == "Hi. this sentence keeps going"


def test_indices_track_remaining_text():
    segments = segment_text("alpha beta gamma delta", 11, 1)

    assert [s.text for s in segments] == ["alpha beta", "gamma delta"]
    assert segments[1].start_index == len("alpha beta") + 1
    assert segments[1].end_index == segments[1].start_index + len("gamma delta")


@pytest.mark.parametrize("max_chars,max_lines", [(12, 1), (20, 2), (41, 7)])
def test_indices_point_into_trimmed_text(max_chars, max_lines):
    text = "  " + LONG_REPLY.replace(". ", ".   ") + "\n"
    trimmed = text.strip()

    for segment in segment_text(text, max_chars, max_lines):
        assert trimmed[segment.start_index:segment.end_index] == segment.text


@pytest.mark.parametrize("max_chars,max_lines", [(12, 1), (20, 2), (33, 3), (41, 7), (26, 4)])
def test_segments_cover_all_text(max_chars, max_lines):
    segments = segment_text(LONG_REPLY, max_chars, max_lines)

    assert len(segments) > 1
    assert normalize(" ".join(s.text for s in segments)) == normalize(LONG_REPLY)


@pytest.mark.parametrize("max_chars,max_lines", [(12, 1), (20, 2), (33, 3), (41, 7), (26, 4)])
def test_segments_fit_their_bubble(max_chars, max_lines):
    for segment in segment_text(LONG_REPLY, max_chars, max_lines):
        assert len(wrap_text_to_lines(segment.text, max_chars)) <= max_lines
        assert segment.word_count == count_words(segment.text)


@pytest.mark.parametrize("max_chars,max_lines", [(0, 2), (10, 0), (-1, -1)])
def test_invalid_capacity_is_rejected(max_chars, max_lines):
    with pytest.raises(ValueError):
        segment_text("hello", max_chars, max_lines)

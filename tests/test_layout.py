"""Tests for list windowing and the text layout helpers."""

import pytest

from simpledns.tui.layout import (
    clip_lines,
    clip_text,
    hard_wrap,
    overflow_marker,
    truncate_text,
    window_range,
    wrap_label_value,
)


class TestWindowRange:

    def test_short_list_is_shown_whole(self):
        assert window_range(4, 2, 10) == (0, 4)
        assert window_range(10, 9, 10) == (0, 10)

    def test_empty_list(self):
        assert window_range(0, 0, 5) == (0, 0)

    def test_window_is_centred_on_selection(self):
        assert window_range(100, 50, 10) == (45, 55)

    def test_window_clamps_at_edges(self):
        assert window_range(100, 0, 10) == (0, 10)
        assert window_range(100, 2, 10) == (0, 10)
        assert window_range(100, 99, 10) == (90, 100)
        assert window_range(100, 97, 10) == (90, 100)

    @pytest.mark.parametrize("total", [1, 2, 7, 11, 30])
    @pytest.mark.parametrize("capacity", [1, 3, 5, 10])
    def test_window_always_contains_selection(self, total, capacity):
        for selected in range(total):
            start, end = window_range(total, selected, capacity)
            assert 0 <= start <= selected < end <= total
            assert end - start == min(total, capacity)


class TestTextHelpers:

    def test_truncate(self):
        assert truncate_text("short", 10) == "short"
        assert truncate_text("a-much-longer-label", 10) == "a-much-..."
        assert truncate_text("abcdef", 3) == "abc"

    def test_clip_lines_reports_hidden_count(self):
        lines = [str(i) for i in range(10)]
        kept, hidden = clip_lines(lines, 4)
        assert kept == ["0", "1", "2"]
        assert hidden == 7
        assert overflow_marker(hidden) == "[dim]... (7 more lines)[/dim]"

    def test_clip_lines_leaves_short_input(self):
        assert clip_lines(["a", "b"], 4) == (["a", "b"], 0)
        assert clip_text("", 3) == ("", 0)

    def test_clip_text_never_marks_body_lines(self):
        text = "[dim]... (looks like a marker)\n" + "\n".join("x" * 5)
        body, hidden = clip_text(text, 3)
        assert body == "[dim]... (looks like a marker)\nx"
        assert hidden == 4

    def test_hard_wrap(self):
        assert hard_wrap("abcdefg", 3) == ["abc", "def", "g"]
        assert hard_wrap("", 3) == [""]

    def test_wrap_label_value_indents_continuations(self):
        lines = wrap_label_value("Content: ", "x" * 25, 10)
        assert lines[0] == "Content: " + "x" * 10
        assert lines[1] == " " * 9 + "x" * 10
        assert lines[2] == " " * 9 + "x" * 5

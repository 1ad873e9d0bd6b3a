"""Tests for ghost text placement."""

import pytest

from core.suggestion_geometry import compute_suggestion_geometry, wrapped_row_count


def place(suffix, column=0, row=0, scroll_base=0, display_offset=0, columns=80, rows=24,
          cell_width=8, cell_height=16):
    return compute_suggestion_geometry(suffix, column, row, scroll_base, display_offset,
                                       columns, rows, cell_width, cell_height)


class TestWrappedRowCount:
    @pytest.mark.parametrize("length, column, columns, expected", [
        (5, 0, 80, 1),
        (2, 8, 10, 1),
        (3, 8, 10, 2),
        (12, 8, 10, 2),
        (13, 8, 10, 3),
        (4, 10, 10, 2),
    ])
    def test_counts(self, length, column, columns, expected):
        assert wrapped_row_count(length, column, columns) == expected


class TestComputeSuggestionGeometry:
    def test_single_row_starts_at_cursor_cell(self):
        geometry = place("eckout main", column=8, row=3)
        assert geometry.origin_x == 64
        assert geometry.origin_y == 48
        assert geometry.width == 88
        assert geometry.height == 16
        assert geometry.wrapped_row_count == 1
        assert geometry.segments("eckout main") == [(8, 0, "eckout main")]

    def test_wrapped_suffix_spans_full_rows(self):
        geometry = place("abcde", column=8, row=1, columns=10)
        assert geometry.wrapped_row_count == 2
        assert geometry.origin_x == 0
        assert geometry.width == 80
        assert geometry.height == 32
        assert geometry.segments("abcde") == [(8, 0, "ab"), (0, 1, "cde")]
        assert geometry.cell_origin(8, 0) == (64, 0)
        assert geometry.cell_origin(0, 1) == (0, 16)

    def test_suffix_exactly_filling_row_does_not_wrap(self):
        geometry = place("ab", column=8, columns=10)
        assert geometry.wrapped_row_count == 1

    def test_scrolled_viewport_shifts_visible_row(self):
        geometry = place("x", column=2, row=5, scroll_base=100, display_offset=98)
        assert geometry.visible_row == 7
        assert geometry.origin_y == 7 * 16

    def test_cursor_scrolled_out_of_view_is_none(self):
        assert place("x", row=5, scroll_base=100, display_offset=120) is None
        assert place("x", row=23, scroll_base=100, display_offset=90, rows=24) is None

    def test_nothing_to_place_is_none(self):
        assert place("") is None
        assert place("x", columns=0) is None
        assert place("x", cell_width=0) is None
        assert place("x", cell_height=0) is None

"""Tests for logical line reconstruction."""

from core.line_walker import find_line_start, reconstruct_logical_line
from core.screen_buffer import GridBuffer, ScreenRow


class TestReconstructLogicalLine:
    def test_single_row_returns_written_content(self):
        grid = GridBuffer.from_lines(["$ ls -la"])
        assert reconstruct_logical_line(grid, 0) == "$ ls -la"

    def test_stops_at_sentinel(self):
        grid = GridBuffer([ScreenRow(cells=list("ls\x00junk"))])
        assert reconstruct_logical_line(grid, 0) == "ls"

    def test_unwritten_cells_are_not_padded(self):
        grid = GridBuffer([ScreenRow(cells=["e", "c", "h", "o", None, None])])
        assert reconstruct_logical_line(grid, 0) == "echo"

    def test_joins_wrapped_chain(self):
        grid = GridBuffer.from_lines(["$ echo aaa", "bbbbbbbbbb", "ccc"], wrapped=[1, 2])
        assert reconstruct_logical_line(grid, 2) == "$ echo aaabbbbbbbbbbccc"

    def test_chain_stops_at_first_unwrapped_row(self):
        grid = GridBuffer.from_lines(["$ pwd", "/tmp", "$ git com", "mit -m x"], wrapped=[3])
        assert find_line_start(grid, 3) == 2
        assert reconstruct_logical_line(grid, 3) == "$ git commit -m x"

    def test_middle_of_chain_uses_rows_up_to_target(self):
        grid = GridBuffer.from_lines(["abc", "def", "ghi"], wrapped=[1, 2])
        assert reconstruct_logical_line(grid, 1) == "abcdef"

    def test_cursor_column_truncates_target_row_only(self):
        grid = GridBuffer.from_lines(["$ git st", "atus --short"], wrapped=[1])
        assert reconstruct_logical_line(grid, 1, cursor_column=4) == "$ git status"

    def test_row_zero_flagged_wrapped_does_not_walk_past_start(self):
        grid = GridBuffer.from_lines(["tail", "more"], wrapped=[0, 1])
        assert find_line_start(grid, 1) == 0
        assert reconstruct_logical_line(grid, 1) == "tailmore"

    def test_negative_row_is_none(self):
        grid = GridBuffer.from_lines(["$ ls"])
        assert reconstruct_logical_line(grid, -1) is None

    def test_unavailable_row_is_none(self):
        grid = GridBuffer.from_lines(["$ ls"])
        assert reconstruct_logical_line(grid, 5) is None

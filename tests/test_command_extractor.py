"""Tests for command extraction from the screen."""

from core.command_extractor import CommandExtractor
from core.command_shelf import CommandShelf
from core.screen_buffer import CursorPosition, GridBuffer
from core.suggestion_geometry import compute_suggestion_geometry


def make_screen(lines, /, cursor, wrapped=(), **kwargs):
    return GridBuffer.from_lines(lines, wrapped=wrapped, cursor=CursorPosition(*cursor), **kwargs)


class TestExtractCurrentCommand:
    def test_cursor_bounded_reads_up_to_cursor(self):
        screen = make_screen(["$ ls", "a b", "$ pwd", "$ git ch"], cursor=(3, 8))
        extractor = CommandExtractor(screen)
        assert extractor.extract_current_command(restrict_to_cursor=True) == "git ch"

    def test_cursor_bounded_ignores_text_right_of_cursor(self):
        screen = make_screen(["$ git checkout"], cursor=(0, 8))
        extractor = CommandExtractor(screen)
        assert extractor.extract_current_command(restrict_to_cursor=True) == "git ch"

    def test_cursor_bounded_keeps_trailing_space(self):
        screen = make_screen(["$ git "], cursor=(0, 6))
        extractor = CommandExtractor(screen)
        assert extractor.extract_current_command(restrict_to_cursor=True) == "git "

    def test_cursor_bounded_has_no_fallback(self):
        screen = make_screen(["$ make", "$ "], cursor=(1, 2))
        extractor = CommandExtractor(screen)
        assert extractor.extract_current_command(restrict_to_cursor=True) is None

    def test_full_line_reads_whole_wrapped_line(self):
        screen = make_screen(["$ echo aaaa", "bbbb  "], cursor=(1, 0), wrapped=[1], columns=11)
        extractor = CommandExtractor(screen)
        assert extractor.extract_current_command() == "echo aaaabbbb"

    def test_full_line_falls_back_to_previous_row(self):
        screen = make_screen(["$ make test", ""], cursor=(1, 0))
        extractor = CommandExtractor(screen)
        assert extractor.extract_current_command() == "make test"

    def test_nothing_typed_is_none(self):
        screen = make_screen(["$ "], cursor=(0, 2))
        extractor = CommandExtractor(screen)
        assert extractor.extract_current_command() is None
        assert extractor.extract_current_command(restrict_to_cursor=True) is None

    def test_uses_absolute_row_after_scrolling(self):
        lines = ["old output"] * 10 + ["$ docker ps"]
        screen = make_screen(lines, cursor=(2, 11), scroll_base=8, lines=3)
        extractor = CommandExtractor(screen)
        assert extractor.extract_current_command(restrict_to_cursor=True) == "docker ps"

    def test_extract_at_row(self):
        screen = make_screen(["$ ls", "$ pwd"], cursor=(1, 5))
        extractor = CommandExtractor(screen)
        assert extractor.extract_at(0) == "ls"


class TestEndToEnd:
    def test_typed_prefix_to_placed_suffix(self):
        screen = make_screen(["$ ls", "$ pwd", "$ cd /tmp", "$ git ch"], cursor=(3, 8))
        shelf = CommandShelf()
        shelf.add("git checkout main")
        shelf.add("ls")

        command = CommandExtractor(screen).extract_current_command(restrict_to_cursor=True)
        assert command == "git ch"

        suggestion = shelf.suggest(command)
        assert suggestion == "git checkout main"

        suffix = suggestion[len(command):]
        assert suffix == "eckout main"

        geometry = compute_suggestion_geometry(
            suffix, cursor_column=screen.cursor.column, cursor_row=screen.cursor.row,
            scroll_base=screen.scroll_base, display_offset=screen.display_offset,
            columns=screen.columns, rows=screen.lines, cell_width=8, cell_height=16)
        assert geometry.visible_row == 3
        assert geometry.first_column == 8
        assert geometry.wrapped_row_count == 1
        assert (geometry.origin_x, geometry.origin_y) == (64, 48)
        assert geometry.width == len("eckout main") * 8

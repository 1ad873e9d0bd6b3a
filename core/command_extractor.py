"""Extract the command the user is typing from the terminal screen"""

from typing import Optional

from core.screen_buffer import ScreenBuffer
from core.line_walker import reconstruct_logical_line
from core.prompt_stripper import strip_prompt
from core.debug_logger import debug_log


class CommandExtractor:
    """Combines the line walker and the prompt stripper

    Two modes:
    - cursor-bounded (restrict_to_cursor=True): the cursor row is cut at the
      cursor column and trailing whitespace is kept. Used for live
      suggestions on every repaint.
    - full-line (restrict_to_cursor=False): the whole logical line, fully
      trimmed. Used when Enter is pressed. If the cursor row holds nothing
      the row above is tried, since the shell may already have moved the
      cursor to a fresh line.
    """

    def __init__(self, screen: ScreenBuffer):
        self.screen = screen

    def extract_at(self, row: int, cursor_column: Optional[int] = None,
                   keep_trailing: bool = False) -> Optional[str]:
        line = reconstruct_logical_line(self.screen, row, cursor_column)
        return strip_prompt(line, keep_trailing=keep_trailing)

    def extract_current_command(self, restrict_to_cursor: bool = False) -> Optional[str]:
        cursor = self.screen.cursor
        row = self.screen.cursor_absolute_row()

        if restrict_to_cursor:
            command = self.extract_at(row, cursor.column, keep_trailing=True)
        else:
            command = self.extract_at(row)
            if command is None:
                command = self.extract_at(row - 1)

        if command is None:
            debug_log('prompt', 'No command on screen', row=row, column=cursor.column,
                      restrict_to_cursor=restrict_to_cursor)
        return command

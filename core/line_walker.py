"""Reconstruct logical lines from wrapped screen rows"""

from typing import Optional

from core.screen_buffer import ScreenBuffer
from core.debug_logger import debug_log


def find_line_start(rows: ScreenBuffer, target_row: int) -> int:
    """Walk upward from `target_row` to the first row of its logical line"""
    start_row = target_row
    while start_row > 0:
        row = rows.row(start_row)
        if row is None or not row.is_wrapped_continuation:
            break
        start_row -= 1
    return start_row


def reconstruct_logical_line(rows: ScreenBuffer, target_row: int,
                             cursor_column: Optional[int] = None) -> Optional[str]:
    """Join the wrapped rows ending at `target_row` into one logical line

    Rows are concatenated without separators since a wrap only splits a
    line by column width. When `cursor_column` is given the target row is
    cut at that column, which keeps text the shell has drawn to the right
    of the cursor out of the result.

    Returns None when `target_row` is negative or no longer retained.
    """
    if target_row < 0 or rows.row(target_row) is None:
        return None

    start_row = find_line_start(rows, target_row)

    parts = []
    for index in range(start_row, target_row + 1):
        row = rows.row(index)
        if row is None:
            continue
        limit = cursor_column if index == target_row else None
        parts.append(row.text(limit))

    line = ''.join(parts)
    if start_row != target_row:
        debug_log('buffer', 'Joined wrapped rows', start_row=start_row, target_row=target_row, length=len(line))
    return line

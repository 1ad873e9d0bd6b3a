"""Suggestion placement: where ghost text goes on screen"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from core.debug_logger import debug_log


@dataclass(frozen=True)
class SuggestionGeometry:
    """Pixel rectangle for a ghost text suffix plus the cell layout inside it

    The first glyph sits on the cursor cell; if the suffix runs past the
    right edge it continues at column 0 of the following rows.
    """
    origin_x: float
    origin_y: float
    width: float
    height: float
    wrapped_row_count: int
    visible_row: int
    first_column: int
    columns: int
    cell_width: float
    cell_height: float

    def segments(self, suffix: str) -> List[Tuple[int, int, str]]:
        """Split `suffix` into (column, row_offset, text) per painted row"""
        available = max(0, self.columns - self.first_column)
        segments = [(self.first_column, 0, suffix[:available])]
        remaining = suffix[available:]
        row_offset = 1
        while remaining:
            segments.append((0, row_offset, remaining[:self.columns]))
            remaining = remaining[self.columns:]
            row_offset += 1
        return segments

    def cell_origin(self, column: int, row_offset: int) -> Tuple[float, float]:
        """Top-left pixel of a cell relative to the geometry's origin"""
        return (column * self.cell_width - self.origin_x,
                (self.visible_row + row_offset) * self.cell_height - self.origin_y)


def wrapped_row_count(suffix_length: int, cursor_column: int, columns: int) -> int:
    available = max(0, columns - cursor_column)
    overflow = max(0, suffix_length - available)
    return 1 + math.ceil(overflow / columns)


def compute_suggestion_geometry(suffix: str, cursor_column: int, cursor_row: int,
                                scroll_base: int, display_offset: int,
                                columns: int, rows: int,
                                cell_width: float, cell_height: float) -> Optional[SuggestionGeometry]:
    """
    Compute the overlay rectangle for a ghost text suffix

    Args:
        suffix: Part of the suggestion beyond what has been typed
        cursor_column: Cursor column
        cursor_row: Cursor row relative to the active screen
        scroll_base: Absolute index of the active screen's first row
        display_offset: Absolute index of the first displayed row
        columns, rows: Terminal size in cells
        cell_width, cell_height: Pixel size of one cell

    Returns:
        SuggestionGeometry, or None when there is nothing to draw or the
        cursor row is scrolled out of view
    """
    if not suffix or columns <= 0 or rows <= 0 or cell_width <= 0 or cell_height <= 0:
        return None

    visible_row = cursor_row + (scroll_base - display_offset)
    if visible_row < 0 or visible_row >= rows:
        debug_log('geometry', 'Cursor row off screen, suppressing suggestion',
                  visible_row=visible_row, rows=rows)
        return None

    row_count = wrapped_row_count(len(suffix), cursor_column, columns)

    if row_count == 1:
        origin_x = cursor_column * cell_width
        width = len(suffix) * cell_width
    else:
        origin_x = 0.0
        width = columns * cell_width

    geometry = SuggestionGeometry(
        origin_x=origin_x,
        origin_y=visible_row * cell_height,
        width=width,
        height=row_count * cell_height,
        wrapped_row_count=row_count,
        visible_row=visible_row,
        first_column=cursor_column,
        columns=columns,
        cell_width=cell_width,
        cell_height=cell_height,
    )
    debug_log('geometry', 'Suggestion placed', row=visible_row, col=cursor_column, rows=row_count)
    return geometry

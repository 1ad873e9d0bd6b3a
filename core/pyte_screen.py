"""pyte-backed screen buffer with wrap tracking and stable absolute rows"""

import pyte
from pyte.screens import Margins

from core.screen_buffer import CursorPosition, ScreenBuffer, ScreenRow
from core.debug_logger import debug_log


class WrapTrackingScreen(pyte.HistoryScreen):
    """HistoryScreen that remembers which rows are soft-wrap continuations

    pyte wraps text by calling carriage_return() + linefeed() from inside
    draw() when DECAWM is set, so any linefeed that happens while draw() is
    running is an automatic wrap. Explicit newlines arrive as separate
    linefeed events and never set the flag.

    Rows are numbered absolutely: scroll_base counts every line that has
    been pushed into history, so row `scroll_base + y` is screen line `y`
    and rows below scroll_base live in history.top.
    """

    def __init__(self, columns, lines, history=10000):
        self._in_draw = False
        super().__init__(columns, lines, history=history, ratio=0.5)

    def reset(self):
        super().reset()
        self.wrapped_rows = set()
        self.scroll_base = 0

    def draw(self, data):
        self._in_draw = True
        try:
            super().draw(data)
        finally:
            self._in_draw = False

    def index(self):
        top, bottom = self.margins or Margins(0, self.lines - 1)
        # Same condition HistoryScreen uses to push a line into history
        if self.cursor.y == bottom:
            self.scroll_base += 1
        super().index()

    def linefeed(self):
        wrapping = self._in_draw
        super().linefeed()
        if wrapping:
            self.wrapped_rows.add(self.scroll_base + self.cursor.y)
            if len(self.wrapped_rows) > self.history.size + self.lines:
                self._forget_evicted_rows()

    def _forget_evicted_rows(self):
        oldest = self.scroll_base - len(self.history.top)
        self.wrapped_rows = {row for row in self.wrapped_rows if row >= oldest}

    def erase_in_line(self, how=0, *args, **kwargs):
        super().erase_in_line(how, *args, **kwargs)
        if how == 2 or (how == 0 and self.cursor.x == 0):
            self.wrapped_rows.discard(self.scroll_base + self.cursor.y)

    def erase_in_display(self, how=0, *args, **kwargs):
        super().erase_in_display(how, *args, **kwargs)
        if how == 0:
            first = self.cursor.y if self.cursor.x == 0 else self.cursor.y + 1
            last = self.lines
        elif how == 1:
            first, last = 0, self.cursor.y
        else:
            first, last = 0, self.lines
        for y in range(first, last):
            self.wrapped_rows.discard(self.scroll_base + y)

    def resize(self, lines=None, columns=None):
        super().resize(lines, columns)
        # Reflow is not tracked; stale flags would glue unrelated rows together
        self.wrapped_rows.clear()


class PyteScreenBuffer(ScreenBuffer):
    """ScreenBuffer accessor over a WrapTrackingScreen

    The display offset is owned here rather than by pyte's paging, which
    would rewrite the screen buffer. While `follow_output` is set the
    viewport sticks to the active screen.
    """

    def __init__(self, columns=80, lines=24, history=10000):
        self.screen = WrapTrackingScreen(columns, lines, history=history)
        self.stream = pyte.ByteStream(self.screen)
        self._display_offset = 0
        self.follow_output = True

    def feed(self, data: bytes):
        self.stream.feed(data)

    @property
    def columns(self) -> int:
        return self.screen.columns

    @property
    def lines(self) -> int:
        return self.screen.lines

    @property
    def cursor(self) -> CursorPosition:
        return CursorPosition(self.screen.cursor.y, self.screen.cursor.x)

    @property
    def scroll_base(self) -> int:
        return self.screen.scroll_base

    @property
    def oldest_row(self) -> int:
        return self.screen.scroll_base - len(self.screen.history.top)

    @property
    def display_offset(self) -> int:
        if self.follow_output:
            return self.screen.scroll_base
        return max(self.oldest_row, min(self._display_offset, self.screen.scroll_base))

    def scroll_lines(self, delta: int):
        """Move the viewport by `delta` rows (negative scrolls back)"""
        offset = max(self.oldest_row, min(self.display_offset + delta, self.screen.scroll_base))
        self._display_offset = offset
        self.follow_output = offset == self.screen.scroll_base
        debug_log('buffer', 'Viewport scrolled', display_offset=offset, scroll_base=self.scroll_base)

    def scroll_to_bottom(self):
        self.follow_output = True

    def resize(self, lines: int, columns: int):
        self.screen.resize(lines, columns)

    def line(self, index: int):
        """Raw pyte line (column -> Char) at absolute `index`, or None"""
        if index < 0:
            return None
        scroll_base = self.screen.scroll_base
        if index >= scroll_base:
            y = index - scroll_base
            if y >= self.screen.lines:
                return None
            return self.screen.buffer[y]
        back = scroll_base - index
        history = self.screen.history.top
        if back > len(history):
            return None
        return history[-back]

    def row(self, index: int):
        line = self.line(index)
        if line is None:
            return None

        width = max(line.keys()) + 1 if line else 0
        cells = [line[x].data for x in range(width)]
        return ScreenRow(cells=cells, is_wrapped_continuation=index in self.screen.wrapped_rows)

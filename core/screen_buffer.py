"""
Screen Buffer - Read-only view of terminal screen state
========================================================

The command extractor and suggestion placement never touch the terminal
emulator directly. They read through the ScreenBuffer interface, which
exposes exactly what they need:

- rows addressed by an absolute index that is stable across scrolling
- a wrap-continuation flag per row
- the cursor, relative to the top of the active screen
- scroll_base (absolute index of the active screen's first row) and
  display_offset (absolute index of the first row currently displayed)

GridBuffer is a plain in-memory implementation used by tests and by
anything that wants to replay a screen snapshot. The pyte-backed
implementation lives in core.pyte_screen.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

# End-of-written-content marker inside a row
SENTINEL = '\x00'


@dataclass
class ScreenRow:
    """One screen row: its cells and whether it continues the row above"""

    cells: List[str] = field(default_factory=list)
    is_wrapped_continuation: bool = False

    @classmethod
    def from_text(cls, text: str, wrapped: bool = False) -> 'ScreenRow':
        return cls(cells=list(text), is_wrapped_continuation=wrapped)

    def text(self, limit: Optional[int] = None) -> str:
        """Return the row's written content, up to `limit` columns if given

        Extraction stops at the first sentinel cell instead of padding to
        the row's width.
        """
        chars = []
        for column, char in enumerate(self.cells):
            if limit is not None and column >= limit:
                break
            if char is None or char == SENTINEL:
                break
            chars.append(char)
        return ''.join(chars)


@dataclass
class CursorPosition:
    row: int
    column: int


class ScreenBuffer(ABC):
    """Abstract accessor over a terminal emulator's screen state"""

    @property
    @abstractmethod
    def columns(self) -> int:
        """Width of the terminal in cells"""

    @property
    @abstractmethod
    def lines(self) -> int:
        """Height of the visible terminal in rows"""

    @property
    @abstractmethod
    def cursor(self) -> CursorPosition:
        """Cursor position, row relative to the active screen"""

    @property
    @abstractmethod
    def scroll_base(self) -> int:
        """Absolute index of the first row of the active screen"""

    @property
    @abstractmethod
    def display_offset(self) -> int:
        """Absolute index of the first row currently displayed"""

    @abstractmethod
    def row(self, index: int) -> Optional[ScreenRow]:
        """Return the row at absolute `index`, or None if it is not retained"""

    def to_absolute(self, relative_row: int) -> int:
        return relative_row + self.scroll_base

    def cursor_absolute_row(self) -> int:
        return self.to_absolute(self.cursor.row)

    def visible_row(self, relative_row: int) -> int:
        """Map a row relative to the active screen onto the displayed viewport"""
        return relative_row + (self.scroll_base - self.display_offset)


class GridBuffer(ScreenBuffer):
    """In-memory screen buffer backed by a list of ScreenRow"""

    def __init__(self, rows: Iterable[ScreenRow], columns: int = 80, lines: int = 24,
                 cursor: CursorPosition = None, scroll_base: int = 0,
                 display_offset: Optional[int] = None):
        self._rows = list(rows)
        self._columns = columns
        self._lines = lines
        self._cursor = cursor or CursorPosition(0, 0)
        self._scroll_base = scroll_base
        self._display_offset = scroll_base if display_offset is None else display_offset

    @classmethod
    def from_lines(cls, lines: Iterable[str], /, wrapped: Iterable[int] = (), **kwargs) -> 'GridBuffer':
        """Build a grid from plain strings; `wrapped` lists continuation rows"""
        wrapped = set(wrapped)
        rows = [ScreenRow.from_text(text, index in wrapped) for index, text in enumerate(lines)]
        return cls(rows, **kwargs)

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def lines(self) -> int:
        return self._lines

    @property
    def cursor(self) -> CursorPosition:
        return self._cursor

    @cursor.setter
    def cursor(self, position: CursorPosition):
        self._cursor = position

    @property
    def scroll_base(self) -> int:
        return self._scroll_base

    @property
    def display_offset(self) -> int:
        return self._display_offset

    @display_offset.setter
    def display_offset(self, value: int):
        self._display_offset = value

    def row(self, index: int) -> Optional[ScreenRow]:
        if index < 0 or index >= len(self._rows):
            return None
        return self._rows[index]

    def set_row(self, index: int, text: str, wrapped: bool = False):
        while len(self._rows) <= index:
            self._rows.append(ScreenRow())
        self._rows[index] = ScreenRow.from_text(text, wrapped)

"""Inline ghost text overlay for command suggestions"""

from PyQt5.QtWidgets import QWidget
from PyQt5.QtCore import Qt, QRectF
from PyQt5.QtGui import QColor, QFont, QPainter

from core.debug_logger import debug_log


class GhostTextWidget(QWidget):
    """Dimmed suffix painted over the terminal canvas at the cursor

    A plain child of the canvas: it never takes focus or mouse input, so
    typing keeps going to the terminal while it is shown.
    """

    def __init__(self, parent=None, color='#8a8a8a'):
        super().__init__(parent)
        self.setFocusPolicy(Qt.NoFocus)  # Don't steal focus - let the canvas handle keys
        self.setAttribute(Qt.WA_TransparentForMouseEvents, True)
        self.setAttribute(Qt.WA_ShowWithoutActivating, True)
        self.setAttribute(Qt.WA_TranslucentBackground, True)
        self.setAttribute(Qt.WA_InputMethodEnabled, False)

        self.font = QFont('Menlo', 13)
        self.font.setStyleHint(QFont.Monospace)
        self.font.setFixedPitch(True)
        self.char_ascent = 0
        self.color = QColor(color)
        self.offset_x = 0
        self.offset_y = 0

        self.suggestion = None
        self.hide()

    def set_font(self, font, ascent):
        self.font = QFont(font)
        self.char_ascent = ascent
        self.update()

    def set_color(self, color):
        self.color = QColor(color)
        self.update()

    def set_canvas_offset(self, x, y):
        """Pixel offset of cell (0, 0) inside the canvas (padding)"""
        self.offset_x = x
        self.offset_y = y

    def show_suggestion(self, suggestion):
        """Place and show a GhostSuggestion, or hide when given None"""
        self.suggestion = suggestion
        if suggestion is None:
            self.hide()
            return

        geometry = suggestion.geometry
        self.setGeometry(int(self.offset_x + geometry.origin_x),
                         int(self.offset_y + geometry.origin_y),
                         int(round(geometry.width)) + 1,
                         int(round(geometry.height)))
        debug_log('ui', 'Ghost text shown', suffix=suggestion.suffix,
                  rows=geometry.wrapped_row_count)
        self.show()
        self.raise_()
        self.update()

    def paintEvent(self, event):
        if self.suggestion is None:
            return

        geometry = self.suggestion.geometry
        painter = QPainter(self)
        painter.setFont(self.font)
        painter.setPen(self.color)

        for column, row_offset, text in geometry.segments(self.suggestion.suffix):
            x, y = geometry.cell_origin(column, row_offset)
            # One glyph per cell so wide fonts cannot drift off the grid
            for index, char in enumerate(text):
                cell = QRectF(x + index * geometry.cell_width, y,
                              geometry.cell_width, geometry.cell_height)
                if self.char_ascent:
                    painter.drawText(int(cell.x()), int(cell.y() + self.char_ascent), char)
                else:
                    painter.drawText(cell, Qt.AlignLeft | Qt.AlignVCenter, char)
        painter.end()

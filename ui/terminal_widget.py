"""PTY-backed terminal widget rendering a pyte screen with ghost text"""

from PyQt5.QtWidgets import QWidget, QVBoxLayout, QApplication
from PyQt5.QtCore import Qt, QThread, pyqtSignal, QTimer, QSize, QEvent
from PyQt5.QtGui import QFont, QColor, QPainter, QKeyEvent, QFontMetrics
import os
import pty
import select
import termios
import struct
import fcntl
import signal

from core.pyte_screen import PyteScreenBuffer
from core.terminal_session import ShellSession
from core.debug_logger import debug_log, debug_error
from ui.ghost_text_widget import GhostTextWidget

# Pixels between the widget edge and cell (0, 0)
PADDING = 10

# Keys that map to a fixed byte sequence
KEY_SEQUENCES = {
    Qt.Key_Return: b'\r',
    Qt.Key_Enter: b'\r',
    Qt.Key_Backspace: b'\x7f',
    Qt.Key_Tab: b'\t',
    Qt.Key_Escape: b'\x1b',
    Qt.Key_Delete: b'\x1b[3~',
    Qt.Key_Up: b'\x1b[A',
    Qt.Key_Down: b'\x1b[B',
    Qt.Key_Right: b'\x1b[C',
    Qt.Key_Left: b'\x1b[D',
    Qt.Key_Home: b'\x1b[H',
    Qt.Key_End: b'\x1b[F',
    Qt.Key_PageUp: b'\x1b[5~',
    Qt.Key_PageDown: b'\x1b[6~',
}


def key_to_bytes(key, text, modifiers):
    """Translate a key press into the bytes a terminal would send"""
    if modifiers & Qt.ControlModifier and Qt.Key_A <= key <= Qt.Key_Z:
        # Ctrl+letter -> control character (Ctrl+C = 0x03, ...)
        return bytes([key - Qt.Key_A + 1])
    if key in KEY_SEQUENCES:
        return KEY_SEQUENCES[key]
    if text:
        return text.encode('utf-8')
    return b''


class PTYReader(QThread):
    """Thread to read from PTY master"""

    output_received = pyqtSignal(bytes)

    def __init__(self, master_fd):
        super().__init__()
        self.master_fd = master_fd
        self.running = True

    def run(self):
        """Read from PTY and emit output"""
        while self.running:
            try:
                ready, _, _ = select.select([self.master_fd], [], [], 0.1)
                if ready:
                    data = os.read(self.master_fd, 4096)
                    if data:
                        try:
                            self.output_received.emit(data)
                        except RuntimeError:
                            # Widget deleted, stop thread
                            break
                    else:
                        break
            except OSError:
                break

    def stop(self):
        """Stop the reader thread"""
        self.running = False


class TerminalCanvas(QWidget):
    """Canvas widget for rendering the displayed rows of the screen buffer"""

    def __init__(self, buffer, prefs_manager, parent=None):
        super().__init__(parent)
        self.buffer = buffer
        self.parent_terminal = parent

        self.font_size = prefs_manager.get('terminal', 'font_size', 13)
        font_family = prefs_manager.get('terminal', 'font_family', 'Menlo')
        self.font = QFont(font_family, self.font_size)
        self.font.setStyleHint(QFont.Monospace)
        self.font.setFixedPitch(True)
        self.char_width = 10
        self.char_height = 18
        self.char_ascent = 14

        self.bg_color = QColor(prefs_manager.get('appearance', 'background_color', '#2a2a2e'))
        self.fg_color = QColor(prefs_manager.get('appearance', 'foreground_color', '#ffffff'))
        self.cursor_color = QColor(prefs_manager.get('appearance', 'cursor_color', '#00ff00'))
        self.cursor_color.setAlpha(128)

        self.color_map = {
            'black': QColor('#000000'),
            'red': QColor('#cd3131'),
            'green': QColor('#0dbc79'),
            'brown': QColor('#e5e510'),
            'yellow': QColor('#e5e510'),
            'blue': QColor('#2472c8'),
            'magenta': QColor('#bc3fbc'),
            'cyan': QColor('#11a8cd'),
            'white': QColor('#e5e5e5'),
        }

        self.setFocusPolicy(Qt.StrongFocus)
        self.setAttribute(Qt.WA_InputMethodEnabled, True)
        self.update_char_size()

    def update_char_size(self):
        """Update character width and height based on font"""
        metrics = QFontMetrics(self.font)
        self.char_width = metrics.horizontalAdvance('M')
        self.char_height = metrics.height()
        self.char_ascent = metrics.ascent()

    def set_font_size(self, size):
        self.font_size = size
        self.font.setPointSize(size)
        self.update_char_size()
        self.update()

    def get_color(self, color_name):
        """Get QColor from a pyte color name or hex string"""
        if color_name in self.color_map:
            return self.color_map[color_name]
        if color_name and color_name != 'default':
            color = QColor('#' + color_name)
            if color.isValid():
                return color
        return None

    def event(self, event):
        # Tab must reach the terminal instead of moving widget focus
        if event.type() == QEvent.KeyPress and event.key() in (Qt.Key_Tab, Qt.Key_Backtab):
            self.keyPressEvent(event)
            return True
        return super().event(event)

    def keyPressEvent(self, event: QKeyEvent):
        """Delegate key presses to the parent terminal"""
        if self.parent_terminal is not None:
            self.parent_terminal.handle_key_press(event)
            event.accept()
        else:
            super().keyPressEvent(event)

    def wheelEvent(self, event):
        """Scroll the viewport through the scrollback"""
        delta = event.angleDelta().y()
        if delta == 0 or self.parent_terminal is None:
            event.ignore()
            return
        lines_to_scroll = max(1, abs(delta) // 120) * 3
        self.parent_terminal.scroll_viewport(-lines_to_scroll if delta > 0 else lines_to_scroll)
        event.accept()

    def paintEvent(self, event):
        """Paint the displayed rows and the cursor"""
        painter = QPainter(self)
        painter.setFont(self.font)
        painter.fillRect(self.rect(), self.bg_color)

        buffer = self.buffer
        top = buffer.display_offset
        bold_font = QFont(self.font)
        bold_font.setBold(True)

        for y in range(buffer.lines):
            line = buffer.line(top + y)
            if not line:
                continue
            py = PADDING + y * self.char_height
            for x in range(buffer.columns):
                char = line.get(x)
                if char is None or not char.data or char.data == ' ':
                    continue
                px = PADDING + x * self.char_width
                fg = self.get_color(char.bg if char.reverse else char.fg) or (self.bg_color if char.reverse else self.fg_color)
                bg = self.get_color(char.fg if char.reverse else char.bg)
                if char.reverse and bg is None:
                    bg = self.fg_color
                if bg is not None:
                    painter.fillRect(px, py, self.char_width, self.char_height, bg)
                painter.setPen(fg)
                painter.setFont(bold_font if char.bold else self.font)
                painter.drawText(px, py + self.char_ascent, char.data)

        # Cursor is hidden while scrolled back
        cursor_row = buffer.visible_row(buffer.cursor.row)
        if 0 <= cursor_row < buffer.lines:
            cx = PADDING + buffer.cursor.column * self.char_width
            cy = PADDING + cursor_row * self.char_height
            painter.fillRect(cx, cy, self.char_width, self.char_height, self.cursor_color)
        painter.end()


class TerminalWidget(QWidget):
    """Terminal widget: PTY transport, pyte screen, canvas and ghost text"""

    command_captured = pyqtSignal(str)

    def __init__(self, shelf, prefs_manager, shell=None, parent=None):
        super().__init__(parent)
        self.prefs_manager = prefs_manager
        self.shell = shell or prefs_manager.get('terminal', 'shell', os.environ.get('SHELL', '/bin/bash'))
        self.cols = prefs_manager.get('terminal', 'columns', 100)
        self.rows = prefs_manager.get('terminal', 'rows', 30)
        self.current_directory = prefs_manager.get('terminal', 'default_directory', os.path.expanduser('~'))

        self.master_fd = None
        self.pid = None
        self.reader_thread = None

        self.buffer = PyteScreenBuffer(
            columns=self.cols,
            lines=self.rows,
            history=prefs_manager.get('terminal', 'scrollback_lines', 10000),
        )
        self.session = ShellSession(self.buffer, shelf, prefs_manager, parent=self)
        self.session.write_requested.connect(self.write_to_pty)
        self.session.command_captured.connect(self.command_captured)

        # Debounce PTY resizes while the window is being dragged
        self._resize_timer = QTimer(self)
        self._resize_timer.setSingleShot(True)
        self._resize_timer.timeout.connect(self.update_pty_size_from_widget)

        self.init_ui()

    def init_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.canvas = TerminalCanvas(self.buffer, self.prefs_manager, parent=self)
        layout.addWidget(self.canvas)

        self.ghost_widget = GhostTextWidget(
            self.canvas,
            color=self.prefs_manager.get('suggestions', 'ghost_color', '#8a8a8a'),
        )
        self.ghost_widget.set_canvas_offset(PADDING, PADDING)
        self.session.suggestion_changed.connect(self.ghost_widget.show_suggestion)
        self._apply_font_metrics()

    def _apply_font_metrics(self):
        self.ghost_widget.set_font(self.canvas.font, self.canvas.char_ascent)
        self.session.set_cell_metrics(self.canvas.char_width, self.canvas.char_height)

    def sizeHint(self):
        return QSize(self.cols * self.canvas.char_width + 2 * PADDING,
                     self.rows * self.canvas.char_height + 2 * PADDING)

    # ------------------------------------------------------------------
    # Process
    # ------------------------------------------------------------------

    def start_shell(self):
        """Start a shell in a PTY"""
        try:
            self.master_fd, slave_fd = pty.openpty()
            self._set_pty_size()

            self.pid = os.fork()
            if self.pid == 0:
                # Child process
                os.close(self.master_fd)
                os.setsid()
                fcntl.ioctl(slave_fd, termios.TIOCSCTTY, 0)
                os.dup2(slave_fd, 0)
                os.dup2(slave_fd, 1)
                os.dup2(slave_fd, 2)
                if slave_fd > 2:
                    os.close(slave_fd)
                if os.path.isdir(self.current_directory):
                    os.chdir(self.current_directory)

                env = os.environ.copy()
                env['TERM'] = 'xterm-256color'
                env['COLORTERM'] = 'truecolor'
                os.execve(self.shell, [self.shell, '-i'], env)
            else:
                # Parent process
                os.close(slave_fd)
                flags = fcntl.fcntl(self.master_fd, fcntl.F_GETFL)
                fcntl.fcntl(self.master_fd, fcntl.F_SETFL, flags | os.O_NONBLOCK)

                self.reader_thread = PTYReader(self.master_fd)
                self.reader_thread.output_received.connect(self.handle_output)
                self.reader_thread.start()
                debug_log('terminal', 'Shell started', shell=self.shell, pid=self.pid)
        except OSError as e:
            debug_error('terminal', 'Failed to start shell', exception=e, shell=self.shell)
            self.handle_output(f"Error starting shell: {e}\r\n".encode('utf-8'))

    def _set_pty_size(self):
        if self.master_fd is None:
            return
        s = struct.pack('HHHH', self.rows, self.cols, 0, 0)
        try:
            fcntl.ioctl(self.master_fd, termios.TIOCSWINSZ, s)
        except OSError as e:
            debug_error('terminal', 'Failed to set PTY size', exception=e)

    def write_to_pty(self, data: bytes):
        """Write data to the PTY"""
        if self.master_fd is None:
            return
        try:
            os.write(self.master_fd, data)
        except OSError as e:
            debug_error('terminal', 'Error writing to PTY', exception=e)

    def handle_output(self, data: bytes):
        """Feed process output into the screen and schedule a suggestion refresh"""
        self.buffer.feed(data)
        self.canvas.update()
        self.session.notify_output()

    def execute_command(self, command):
        """Run a command from the shelf"""
        self.buffer.scroll_to_bottom()
        self.session.run_command(command)

    def paste_command(self, command):
        """Insert a command from the shelf without running it"""
        self.buffer.scroll_to_bottom()
        self.session.paste_command(command)

    # ------------------------------------------------------------------
    # Input and layout
    # ------------------------------------------------------------------

    def handle_key_press(self, event: QKeyEvent):
        """Handle key presses and send to PTY"""
        key = event.key()
        modifiers = event.modifiers()

        # Ctrl+Shift+V: paste
        if modifiers & Qt.ControlModifier and modifiers & Qt.ShiftModifier and key == Qt.Key_V:
            self.paste_command(QApplication.clipboard().text())
            return

        data = key_to_bytes(key, event.text(), modifiers)
        if not data:
            return
        debug_log('keys', 'Key pressed', key=key, data=data)

        if not self.buffer.follow_output:
            self.buffer.scroll_to_bottom()
            self.canvas.update()
        self.session.send_input(data)

    def scroll_viewport(self, delta):
        self.buffer.scroll_lines(delta)
        self.canvas.update()
        self.session.on_layout_changed()

    def change_font_size(self, size):
        self.canvas.set_font_size(size)
        self._apply_font_metrics()
        self._resize_timer.start(100)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._resize_timer.start(100)

    def update_pty_size_from_widget(self):
        """Recompute the grid from the widget size and resize screen and PTY"""
        cols = max(20, (self.canvas.width() - 2 * PADDING) // max(1, self.canvas.char_width))
        rows = max(5, (self.canvas.height() - 2 * PADDING) // max(1, self.canvas.char_height))
        if (rows, cols) != (self.rows, self.cols):
            debug_log('terminal', 'PTY size changed', rows=rows, cols=cols)
            self.rows, self.cols = rows, cols
            self.buffer.resize(rows, cols)
            self._set_pty_size()
            self.canvas.update()
        self.session.on_layout_changed()

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    def closeEvent(self, event):
        """Clean up when widget is closed"""
        self.cleanup()
        event.accept()

    def cleanup(self):
        """Clean up PTY and processes"""
        if self.reader_thread:
            self.reader_thread.stop()
            self.reader_thread.wait()
            self.reader_thread = None

        if self.master_fd is not None:
            try:
                os.close(self.master_fd)
            except OSError:
                pass
            self.master_fd = None

        if self.pid:
            try:
                os.kill(self.pid, signal.SIGTERM)
                os.waitpid(self.pid, 0)
            except (ProcessLookupError, ChildProcessError):
                pass
            self.pid = None

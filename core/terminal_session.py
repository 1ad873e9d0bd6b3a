"""Session control loop: input hook, command capture and ghost text refresh"""

from dataclasses import dataclass
from typing import Optional

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from core.command_extractor import CommandExtractor
from core.command_shelf import CommandShelf
from core.screen_buffer import ScreenBuffer
from core.suggestion_geometry import SuggestionGeometry, compute_suggestion_geometry
from core.debug_logger import debug_log, debug_timer_start, debug_timer_end

ENTER = 13
TAB = 9
DEFAULT_DEBOUNCE_MS = 50


@dataclass
class GhostSuggestion:
    """What the overlay should paint: the untyped part of a suggestion"""
    command: str
    suffix: str
    geometry: SuggestionGeometry
    suggestion: str = ''


class ShellSession(QObject):
    """Sits between the keyboard, the process and the overlay

    Every byte bound for the process passes through send_input(). Output
    from the process only schedules a refresh; the refresh itself reads the
    screen, asks the shelf for the best continuation and places it. All of
    this runs on the Qt main thread.
    """

    write_requested = pyqtSignal(bytes)      # bytes for the process
    suggestion_changed = pyqtSignal(object)  # GhostSuggestion or None
    command_captured = pyqtSignal(str)

    def __init__(self, screen: ScreenBuffer, shelf: CommandShelf, prefs_manager=None, parent=None):
        super().__init__(parent)
        self.screen = screen
        self.shelf = shelf
        self.extractor = CommandExtractor(screen)
        self.prefs_manager = prefs_manager

        self.cell_width = 0.0
        self.cell_height = 0.0
        self.current_suggestion: Optional[GhostSuggestion] = None

        debounce_ms = DEFAULT_DEBOUNCE_MS
        self.ghost_text_enabled = True
        if prefs_manager is not None:
            debounce_ms = prefs_manager.get('suggestions', 'debounce_ms', DEFAULT_DEBOUNCE_MS)
            self.ghost_text_enabled = prefs_manager.get('suggestions', 'ghost_text_enabled', True)

        # One pending refresh at most; rescheduling replaces it
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setSingleShot(True)
        self.refresh_timer.setInterval(debounce_ms)
        self.refresh_timer.timeout.connect(self.refresh_suggestion)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def send_input(self, data: bytes):
        """Hook for all data sent to the process"""
        if not data:
            return

        if data[0] == TAB and self.current_suggestion is not None:
            suffix = self._live_suffix()
            self._set_suggestion(None)
            if suffix:
                debug_log('keys', 'Suggestion accepted', suffix=suffix)
                self.write_requested.emit(suffix.encode('utf-8'))
                self.schedule_refresh()
                return

        if ENTER in data:
            # Read the line before the process echoes the newline
            self.capture_command()

        self.write_requested.emit(data)
        self.schedule_refresh()

    def _live_suffix(self) -> str:
        """Remainder of the shown suggestion after the text typed right now"""
        suggestion = self.current_suggestion.suggestion
        command = self.extractor.extract_current_command(restrict_to_cursor=True)
        if command is None or not suggestion.lower().startswith(command.lower()):
            return ''
        return suggestion[len(command):]

    def capture_command(self) -> Optional[str]:
        command = self.extractor.extract_current_command(restrict_to_cursor=False)
        if command is None:
            return None
        self.shelf.add(command)
        debug_log('commands', 'Command captured', command=command)
        self.command_captured.emit(command)
        return command

    def run_command(self, text: str):
        """Send a command followed by a newline, as if typed and submitted"""
        if text and text.strip():
            self.shelf.add(text)
            self.write_requested.emit((text + '\n').encode('utf-8'))
            self.schedule_refresh()

    def paste_command(self, text: str):
        """Send a command without submitting it"""
        if text:
            self.write_requested.emit(text.encode('utf-8'))
            self.schedule_refresh()

    # ------------------------------------------------------------------
    # Refresh triggers
    # ------------------------------------------------------------------

    def notify_output(self):
        """Call after the screen has been fed new process output"""
        self.schedule_refresh()

    def schedule_refresh(self):
        self.refresh_timer.stop()
        self.refresh_timer.start()

    def set_cell_metrics(self, cell_width: float, cell_height: float):
        self.cell_width = cell_width
        self.cell_height = cell_height
        self.refresh_suggestion()

    def on_layout_changed(self):
        """Resize, font change or viewport scroll: re-place immediately"""
        self.refresh_timer.stop()
        self.refresh_suggestion()

    def set_ghost_text_enabled(self, enabled: bool):
        self.ghost_text_enabled = enabled
        self.refresh_suggestion()

    # ------------------------------------------------------------------
    # Suggestion
    # ------------------------------------------------------------------

    def refresh_suggestion(self) -> Optional[GhostSuggestion]:
        start = debug_timer_start('performance', 'refresh_suggestion')
        suggestion = self._compute_suggestion() if self.ghost_text_enabled else None
        self._set_suggestion(suggestion)
        debug_timer_end('performance', 'refresh_suggestion', start)
        return suggestion

    def _compute_suggestion(self) -> Optional[GhostSuggestion]:
        command = self.extractor.extract_current_command(restrict_to_cursor=True)
        if command is None:
            return None

        suggestion = self.shelf.suggest(command)
        if suggestion is None or not suggestion.lower().startswith(command.lower()):
            return None
        suffix = suggestion[len(command):]
        if not suffix:
            return None

        cursor = self.screen.cursor
        geometry = compute_suggestion_geometry(
            suffix,
            cursor_column=cursor.column,
            cursor_row=cursor.row,
            scroll_base=self.screen.scroll_base,
            display_offset=self.screen.display_offset,
            columns=self.screen.columns,
            rows=self.screen.lines,
            cell_width=self.cell_width,
            cell_height=self.cell_height,
        )
        if geometry is None:
            return None

        debug_log('suggestions', 'Suggestion ready', command=command, suggestion=suggestion)
        return GhostSuggestion(command, suffix, geometry, suggestion)

    def _set_suggestion(self, suggestion: Optional[GhostSuggestion]):
        if suggestion == self.current_suggestion:
            return
        self.current_suggestion = suggestion
        self.suggestion_changed.emit(suggestion)

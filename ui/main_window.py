"""Main application window"""

from PyQt5.QtWidgets import QMainWindow, QAction, QLabel
from PyQt5.QtCore import QSettings
from PyQt5.QtGui import QKeySequence

from ui.terminal_widget import TerminalWidget
from ui.command_shelf_dialog import CommandShelfDialog
from core.preferences_manager import PreferencesManager
from core.command_shelf import CommandShelf
from core.shelf_persistence import ShelfPersistence
from core.debug_logger import debug_log


class MainWindow(QMainWindow):
    """Main application window: one terminal plus the command shelf"""

    def __init__(self, prefs_manager=None):
        super().__init__()
        self.settings = QSettings()
        self.prefs_manager = prefs_manager or PreferencesManager()

        self.persistence = ShelfPersistence(
            data_dir=self.prefs_manager.get('history', 'data_dir'),
            save_delay_ms=self.prefs_manager.get('history', 'save_delay_ms', 1000),
        )
        self.shelf = CommandShelf(
            persistence=self.persistence,
            capacity=self.prefs_manager.get('history', 'capacity', 5000),
        )

        self.init_ui()
        # Note: async initialization will be done separately via initialize_async()

    async def initialize_async(self):
        """Load the shelf from disk, then start the shell"""
        snapshot = await self.persistence.load_async()
        self.shelf.load_snapshot(snapshot)
        self.update_status()
        self.terminal.start_shell()

    def init_ui(self):
        self.setWindowTitle("Terminal Shelf")

        self.terminal = TerminalWidget(self.shelf, self.prefs_manager, parent=self)
        self.terminal.command_captured.connect(self.on_command_captured)
        self.setCentralWidget(self.terminal)

        self.status_label = QLabel()
        self.statusBar().addPermanentWidget(self.status_label)

        self.setup_menu_bar()

        geometry = self.settings.value("geometry")
        if geometry is not None:
            self.restoreGeometry(geometry)
        else:
            self.resize(self.terminal.sizeHint())

        self.terminal.canvas.setFocus()

    def setup_menu_bar(self):
        menu_bar = self.menuBar()

        shelf_menu = menu_bar.addMenu("Shelf")
        open_action = QAction("Search Commands...", self)
        open_action.setShortcut(QKeySequence("Ctrl+Shift+R"))
        open_action.triggered.connect(self.show_command_shelf)
        shelf_menu.addAction(open_action)

        self.ghost_action = QAction("Inline Suggestions", self)
        self.ghost_action.setCheckable(True)
        self.ghost_action.setChecked(self.prefs_manager.get('suggestions', 'ghost_text_enabled', True))
        self.ghost_action.toggled.connect(self.toggle_ghost_text)
        shelf_menu.addAction(self.ghost_action)

        view_menu = menu_bar.addMenu("View")
        zoom_in = QAction("Zoom In", self)
        zoom_in.setShortcut(QKeySequence("Ctrl+Shift+="))
        zoom_in.triggered.connect(lambda: self.terminal.change_font_size(self.terminal.canvas.font_size + 1))
        view_menu.addAction(zoom_in)
        zoom_out = QAction("Zoom Out", self)
        zoom_out.setShortcut(QKeySequence("Ctrl+Shift+-"))
        zoom_out.triggered.connect(lambda: self.terminal.change_font_size(max(6, self.terminal.canvas.font_size - 1)))
        view_menu.addAction(zoom_out)

    def show_command_shelf(self):
        dialog = CommandShelfDialog(self.shelf, self)
        dialog.insert_requested.connect(self.terminal.paste_command)
        dialog.execute_requested.connect(self.terminal.execute_command)
        dialog.exec_()
        self.update_status()
        self.terminal.canvas.setFocus()

    def toggle_ghost_text(self, enabled):
        self.prefs_manager.set('suggestions', 'ghost_text_enabled', enabled)
        self.prefs_manager.save_preferences_sync()
        self.terminal.session.set_ghost_text_enabled(enabled)

    def on_command_captured(self, command):
        debug_log('ui', 'Command captured', command=command)
        self.update_status()

    def update_status(self):
        stats = self.shelf.get_stats()
        self.status_label.setText(f"{stats['total_commands']} commands on shelf")

    def closeEvent(self, event):
        """Save settings and flush the shelf before closing"""
        self.settings.setValue("geometry", self.saveGeometry())
        self.persistence.flush_save()
        self.terminal.cleanup()
        event.accept()

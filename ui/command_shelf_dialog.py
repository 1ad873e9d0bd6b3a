"""Command shelf dialog: fuzzy search over history and groups"""

from PyQt5.QtWidgets import (QDialog, QVBoxLayout, QHBoxLayout, QLineEdit,
                             QListWidget, QListWidgetItem, QLabel, QPushButton,
                             QShortcut, QAbstractItemView, QInputDialog, QApplication)
from PyQt5.QtCore import Qt, pyqtSignal, QTimer
from PyQt5.QtGui import QFont, QKeySequence
from datetime import datetime

from core.debug_logger import debug_log

# Item data roles
ROLE_RECORD_ID = Qt.UserRole
ROLE_TEXT = Qt.UserRole + 1
ROLE_GROUP_ID = Qt.UserRole + 2


def format_timestamp(created_at, now=None):
    """Format a datetime as relative time"""
    now = now or datetime.now()
    diff = now - created_at

    if diff.days > 365:
        return f"{diff.days // 365}y ago"
    elif diff.days > 30:
        return f"{diff.days // 30}mo ago"
    elif diff.days > 0:
        return f"{diff.days}d ago"
    elif diff.seconds > 3600:
        return f"{diff.seconds // 3600}h ago"
    elif diff.seconds > 60:
        return f"{diff.seconds // 60}m ago"
    return "now"


def format_record(record, now=None):
    """Format a command record as list text"""
    pin = "📌 " if record.pinned else ""
    return f"{pin}{record.text}\n    {format_timestamp(record.created_at, now)}"


class CommandShelfDialog(QDialog):
    """Dialog for searching the shelf and sending a command to the terminal"""

    insert_requested = pyqtSignal(str)   # Paste without running
    execute_requested = pyqtSignal(str)  # Run now

    def __init__(self, shelf, parent=None):
        super().__init__(parent)
        self.shelf = shelf
        self._populating = False

        # Search debounce timer
        self.search_timer = QTimer(self)
        self.search_timer.setSingleShot(True)
        self.search_timer.timeout.connect(self.perform_search)

        self.init_ui()
        self.perform_search()

    def init_ui(self):
        """Initialize the dialog UI"""
        self.setWindowTitle("Command Shelf")
        self.setMinimumSize(700, 500)

        self.setStyleSheet("""
            QDialog {
                background-color: #2d2d2d;
                color: #e5e5e5;
            }
            QLineEdit {
                background-color: #1e1e1e;
                color: #e5e5e5;
                border: 2px solid #3d3d3d;
                border-radius: 5px;
                padding: 8px;
                font-size: 14pt;
            }
            QLineEdit:focus {
                border: 2px solid #0066cc;
            }
            QListWidget {
                background-color: #1e1e1e;
                color: #e5e5e5;
                border: 1px solid #3d3d3d;
                border-radius: 3px;
                outline: none;
            }
            QListWidget::item:selected {
                background-color: #0066cc;
            }
            QLabel {
                color: #e5e5e5;
            }
            QPushButton {
                background-color: #0066cc;
                color: white;
                border: none;
                padding: 8px 16px;
                border-radius: 4px;
            }
            QPushButton:hover {
                background-color: #0052a3;
            }
        """)

        layout = QVBoxLayout(self)
        layout.setSpacing(10)

        header_layout = QHBoxLayout()
        header_label = QLabel("Command Shelf")
        header_label.setStyleSheet("font-size: 14pt; font-weight: bold;")
        header_layout.addWidget(header_label)
        header_layout.addStretch()
        self.stats_label = QLabel()
        self.stats_label.setStyleSheet("color: #888888; font-size: 10pt;")
        header_layout.addWidget(self.stats_label)
        layout.addLayout(header_layout)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Type to search commands (fuzzy matching)...")
        self.search_input.textChanged.connect(self.on_search_changed)
        layout.addWidget(self.search_input)

        lists_layout = QHBoxLayout()
        self.results_list = QListWidget()
        self.results_list.setVerticalScrollMode(QAbstractItemView.ScrollPerPixel)
        self.results_list.itemDoubleClicked.connect(self.execute_selection)
        lists_layout.addWidget(self.results_list, 3)

        self.groups_list = QListWidget()
        self.groups_list.itemDoubleClicked.connect(self.execute_selection)
        lists_layout.addWidget(self.groups_list, 2)
        layout.addLayout(lists_layout)

        # Buttons act on whichever list was used last
        self.active_list = self.results_list
        for widget in (self.results_list, self.groups_list):
            widget.currentItemChanged.connect(
                lambda current, previous, widget=widget: self._on_current_item_changed(widget, current))
            widget.itemClicked.connect(
                lambda item, widget=widget: self._on_current_item_changed(widget, item))

        button_layout = QHBoxLayout()
        for label, handler in (("Pin / Unpin", self.toggle_pin_selection),
                               ("Edit", self.edit_selection),
                               ("Delete", self.delete_selection),
                               ("New Group", self.create_group),
                               ("Add to Group", self.add_selection_to_group),
                               ("Copy", self.copy_selection)):
            button = QPushButton(label)
            button.setFocusPolicy(Qt.NoFocus)
            button.clicked.connect(handler)
            button_layout.addWidget(button)
        button_layout.addStretch()

        insert_btn = QPushButton("Insert Command")
        insert_btn.setFocusPolicy(Qt.NoFocus)
        insert_btn.clicked.connect(self.insert_selection)
        insert_btn.setDefault(True)
        button_layout.addWidget(insert_btn)

        execute_btn = QPushButton("Execute Now")
        execute_btn.setFocusPolicy(Qt.NoFocus)
        execute_btn.clicked.connect(self.execute_selection)
        execute_btn.setStyleSheet("QPushButton { background-color: #28a745; }")
        button_layout.addWidget(execute_btn)
        layout.addLayout(button_layout)

        self.setup_shortcuts()
        self.search_input.setFocus()

    def setup_shortcuts(self):
        """Setup keyboard shortcuts"""
        QShortcut(QKeySequence(Qt.Key_Return), self).activated.connect(self.insert_selection)
        QShortcut(QKeySequence("Ctrl+Return"), self).activated.connect(self.execute_selection)
        QShortcut(QKeySequence("Ctrl+Shift+C"), self).activated.connect(self.copy_selection)
        QShortcut(QKeySequence(Qt.Key_Escape), self).activated.connect(self.reject)

    def on_search_changed(self, text):
        """Handle search text change with debouncing"""
        self.search_timer.stop()
        self.search_timer.start(150)

    def perform_search(self):
        query = self.search_input.text()
        now = datetime.now()
        self._populating = True

        self.results_list.clear()
        for record in self.shelf.list(query):
            item = QListWidgetItem(format_record(record, now))
            item.setData(ROLE_RECORD_ID, record.id)
            item.setData(ROLE_TEXT, record.text)
            item.setFont(QFont("Courier New", 10))
            self.results_list.addItem(item)
        if self.results_list.count() > 0:
            self.results_list.setCurrentRow(0)

        self.groups_list.clear()
        for group in self.shelf.list_groups(query):
            header = QListWidgetItem(group.name)
            header.setFlags(Qt.ItemIsEnabled)
            header.setData(ROLE_GROUP_ID, group.id)
            font = QFont()
            font.setBold(True)
            header.setFont(font)
            self.groups_list.addItem(header)
            for member in group.members:
                item = QListWidgetItem("    " + member.text)
                item.setData(ROLE_RECORD_ID, member.id)
                item.setData(ROLE_TEXT, member.text)
                item.setData(ROLE_GROUP_ID, group.id)
                self.groups_list.addItem(item)

        self._populating = False
        if self.active_list.currentItem() is None:
            self.active_list = self.results_list

        stats = self.shelf.get_stats()
        self.stats_label.setText(
            f"{stats['total_commands']} commands • {stats['pinned_commands']} pinned • {stats['groups']} groups")
        debug_log('ui', 'Shelf search', query=query, results=self.results_list.count())

    def _on_current_item_changed(self, widget, current):
        if current is not None and not self._populating:
            self.active_list = widget

    def _selected_item(self):
        return self.active_list.currentItem()

    def _selected_history_item(self):
        item = self._selected_item()
        if item is None or not item.data(ROLE_RECORD_ID) or item.data(ROLE_GROUP_ID):
            return None
        return item

    def _selected_text(self):
        item = self._selected_item()
        return item.data(ROLE_TEXT) if item is not None else None

    def insert_selection(self):
        text = self._selected_text()
        if text:
            self.insert_requested.emit(text)
            self.accept()

    def execute_selection(self, *args):
        text = self._selected_text()
        if text:
            QApplication.clipboard().setText(text)
            self.execute_requested.emit(text)
            self.accept()

    def copy_selection(self):
        """Copy the selected command to the clipboard"""
        text = self._selected_text()
        if text:
            QApplication.clipboard().setText(text)
            debug_log('ui', 'Command copied', command=text)

    def toggle_pin_selection(self):
        item = self._selected_history_item()
        if item is not None:
            self.shelf.toggle_pin(item.data(ROLE_RECORD_ID))
            self.perform_search()

    def delete_selection(self):
        item = self._selected_item()
        if item is None or not item.data(ROLE_RECORD_ID):
            return
        group_id = item.data(ROLE_GROUP_ID)
        if group_id:
            self.shelf.remove_from_group(item.data(ROLE_RECORD_ID), group_id)
        else:
            self.shelf.delete(item.data(ROLE_RECORD_ID))
        self.perform_search()

    def edit_selection(self):
        item = self._selected_item()
        if item is None or not item.data(ROLE_RECORD_ID):
            return
        text, ok = QInputDialog.getText(self, "Edit Command", "Command:", text=item.data(ROLE_TEXT))
        if ok:
            self.shelf.edit(item.data(ROLE_RECORD_ID), text, group_id=item.data(ROLE_GROUP_ID))
            self.perform_search()

    def create_group(self):
        name, ok = QInputDialog.getText(self, "New Group", "Group name:")
        if ok and self.shelf.create_group(name):
            self.perform_search()

    def add_selection_to_group(self):
        item = self._selected_history_item()
        groups = self.shelf.list_groups()
        if item is None or not groups:
            return
        names = [group.name for group in groups]
        name, ok = QInputDialog.getItem(self, "Add to Group", "Group:", names, 0, False)
        if ok:
            group = groups[names.index(name)]
            self.shelf.add_to_group(item.data(ROLE_RECORD_ID), group.id)
            self.perform_search()

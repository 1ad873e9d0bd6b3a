"""Tests for the command shelf dialog actions."""

import pytest
from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import QApplication, QPushButton

from core.command_shelf import CommandShelf
from ui.command_shelf_dialog import ROLE_TEXT, CommandShelfDialog


def history_texts(shelf):
    return [record.text for record in shelf.list()]


def member_texts(shelf):
    return [member.text for member in shelf.list_groups()[0].members]


def click(dialog, label):
    for button in dialog.findChildren(QPushButton):
        if button.text() == label:
            button.click()
            return
    raise AssertionError(f"no button {label!r}")


@pytest.fixture
def shelf():
    shelf = CommandShelf()
    shelf.add("make build")
    shelf.add("ls -la")
    group = shelf.create_group("deploy")
    shelf.add_to_group(shelf.list()[1].id, group.id)
    return shelf


@pytest.fixture
def dialog(qapp, shelf):
    dialog = CommandShelfDialog(shelf)
    yield dialog
    dialog.deleteLater()


class TestSelection:
    def test_history_list_is_active_by_default(self, dialog):
        assert dialog._selected_item().data(ROLE_TEXT) == "ls -la"

    def test_delete_removes_selected_group_member(self, dialog, shelf):
        dialog.groups_list.setCurrentRow(1)
        click(dialog, "Delete")

        assert history_texts(shelf) == ["ls -la", "make build"]
        assert member_texts(shelf) == []

    def test_delete_removes_selected_history_record(self, dialog, shelf):
        dialog.groups_list.setCurrentRow(1)
        dialog.results_list.setCurrentRow(1)
        click(dialog, "Delete")

        assert history_texts(shelf) == ["ls -la"]
        assert member_texts(shelf) == ["make build"]

    def test_pin_ignores_group_members(self, dialog, shelf):
        dialog.groups_list.setCurrentRow(1)
        click(dialog, "Pin / Unpin")
        assert not any(record.pinned for record in shelf.list())

    def test_action_buttons_do_not_take_focus(self, dialog):
        for button in dialog.findChildren(QPushButton):
            assert button.focusPolicy() == Qt.NoFocus


class TestClipboard:
    def test_copy_puts_selected_command_on_clipboard(self, dialog):
        dialog.groups_list.setCurrentRow(1)
        click(dialog, "Copy")
        assert QApplication.clipboard().text() == "make build"

    def test_execute_copies_and_requests_run(self, dialog):
        requested = []
        dialog.execute_requested.connect(requested.append)
        dialog.results_list.setCurrentRow(0)
        click(dialog, "Execute Now")

        assert requested == ["ls -la"]
        assert QApplication.clipboard().text() == "ls -la"

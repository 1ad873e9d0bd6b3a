#!/usr/bin/env python3
"""
Terminal Shelf Application
A terminal with a persistent command shelf and inline command suggestions
"""

import sys
import asyncio
from PyQt5.QtWidgets import QApplication
from PyQt5.QtCore import Qt
import qasync

from ui.main_window import MainWindow

# Initialize debug logging system
from core.debug_logger import (
    set_debug_enabled,
    set_category_enabled,
    enable_all_categories,
    debug_log
)


def init_debug_logging():
    """Initialize debug logging based on configuration"""
    try:
        import debug_config
    except ImportError:
        return

    if debug_config.ENABLE_DEBUG:
        set_debug_enabled(True)

        if debug_config.ENABLE_ALL:
            enable_all_categories()
        else:
            # Enable specific categories only
            for category in debug_config.ENABLED_CATEGORIES:
                set_category_enabled(category, True)


def main():
    """Main entry point for the application"""
    # Initialize debug logging first
    init_debug_logging()

    # Enable High DPI scaling
    QApplication.setAttribute(Qt.AA_EnableHighDpiScaling, True)
    QApplication.setAttribute(Qt.AA_UseHighDpiPixmaps, True)

    debug_log('ui', 'Creating QApplication...')
    app = QApplication(sys.argv)
    app.setApplicationName("Terminal Shelf")
    app.setOrganizationName("TerminalShelf")
    app.setStyle('Fusion')

    # Set up async event loop with qasync
    loop = qasync.QEventLoop(app)
    asyncio.set_event_loop(loop)

    async def create_window():
        debug_log('ui', 'Creating main window...')
        window = MainWindow()

        # Load the shelf before the shell prints its first prompt
        await window.initialize_async()

        window.show()
        debug_log('ui', 'Main window displayed, entering event loop')
        return window

    with loop:
        window = loop.run_until_complete(create_window())
        loop.run_forever()


if __name__ == "__main__":
    main()

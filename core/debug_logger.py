"""Centralized debug logging for the terminal shelf

Logging is category based so the hot paths (buffer parsing, suggestion
refresh) can stay silent while persistence or geometry is being debugged.

Usage:
    from core.debug_logger import debug_log, set_debug_enabled, set_category_enabled

    # Enable all debug logging
    set_debug_enabled(True)

    # Enable specific categories only
    set_category_enabled('prompt', True)
    set_category_enabled('geometry', True)

    # Use in code
    debug_log('commands', 'Command captured', command='ls -la')
    debug_log('geometry', 'Suggestion placed', row=3, col=8)
"""

import sys
import time
import traceback
from datetime import datetime

# Global debug settings
_DEBUG_ENABLED = False  # Master switch
_CATEGORY_SETTINGS = {}  # Per-category settings

# Available debug categories
DEBUG_CATEGORIES = {
    'buffer': 'Screen buffer reads and line reconstruction',
    'prompt': 'Prompt stripping and command extraction',
    'commands': 'Command capture and shelf mutations',
    'suggestions': 'Ghost text suggestions and ranking',
    'geometry': 'Suggestion placement and overlay layout',
    'persistence': 'Loading and saving the shelf',
    'keys': 'Keyboard input sent to the process',
    'terminal': 'PTY and shell process',
    'ui': 'UI events and interactions',
    'performance': 'Performance metrics',
    'error': 'Errors and exceptions',
}

# Color codes for terminal output
COLORS = {
    'reset': '\033[0m',
    'bold': '\033[1m',
    'dim': '\033[2m',
    'red': '\033[91m',
    'green': '\033[92m',
    'yellow': '\033[93m',
    'blue': '\033[94m',
    'magenta': '\033[95m',
    'cyan': '\033[96m',
    'white': '\033[97m',
}

# Category colors
CATEGORY_COLORS = {
    'buffer': 'magenta',
    'prompt': 'green',
    'commands': 'green',
    'suggestions': 'blue',
    'geometry': 'cyan',
    'persistence': 'yellow',
    'keys': 'yellow',
    'terminal': 'green',
    'ui': 'cyan',
    'performance': 'red',
    'error': 'red',
}


def set_debug_enabled(enabled: bool):
    """Enable or disable all debug logging globally

    Args:
        enabled: True to enable, False to disable
    """
    global _DEBUG_ENABLED
    _DEBUG_ENABLED = enabled


def set_category_enabled(category: str, enabled: bool):
    """Enable or disable debug logging for a specific category

    Args:
        category: Category name (e.g., 'prompt', 'geometry')
        enabled: True to enable, False to disable
    """
    _CATEGORY_SETTINGS[category] = enabled


def is_debug_enabled(category: str = None) -> bool:
    """Check if debug logging is enabled

    Args:
        category: Optional category to check. If None, checks global setting.

    Returns:
        True if debug logging is enabled for this category
    """
    if not _DEBUG_ENABLED:
        return False

    if category is None:
        return True

    # Categories default to enabled once the master switch is on
    return _CATEGORY_SETTINGS.get(category, True)


def _format_line(category: str, message: str, kwargs: dict, color: str) -> str:
    timestamp = datetime.now().strftime('%H:%M:%S.%f')[:-3]
    category_tag = f"[{category.upper():12s}]"
    if kwargs:
        kwargs_str = ' | ' + ', '.join(f"{k}={repr(v)}" for k, v in kwargs.items())
    else:
        kwargs_str = ''
    reset = COLORS['reset']
    return f"{COLORS['dim']}{timestamp}{reset} {color}{category_tag}{reset} {message}{kwargs_str}"


def debug_log(category: str, message: str, **kwargs):
    """Log a debug message with optional key-value pairs

    Args:
        category: Debug category (e.g., 'prompt', 'suggestions')
        message: Debug message
        **kwargs: Optional key-value pairs to include in the log

    Example:
        debug_log('suggestions', 'Suggestion found', query='gi', match='git status')
    """
    if not is_debug_enabled(category):
        return

    color = COLORS.get(CATEGORY_COLORS.get(category, 'white'), '')
    print(_format_line(category, message, kwargs, color), file=sys.stderr)


def debug_timer_start(category: str, operation: str) -> float:
    """Start a performance timer

    Returns:
        Start time (for passing to debug_timer_end), 0 when disabled

    Example:
        start = debug_timer_start('performance', 'refresh_suggestion')
        # ... do work ...
        debug_timer_end('performance', 'refresh_suggestion', start)
    """
    if not is_debug_enabled(category):
        return 0

    return time.perf_counter()


def debug_timer_end(category: str, operation: str, start_time: float):
    """End a performance timer and log duration"""
    if not is_debug_enabled(category):
        return

    if start_time > 0:
        duration_ms = (time.perf_counter() - start_time) * 1000
        debug_log(category, f"{operation} completed", duration_ms=f"{duration_ms:.2f}ms")


def debug_error(category: str, message: str, exception: Exception = None, **kwargs):
    """Log an error with optional exception

    Errors are always written, even if debug is disabled for this category.

    Example:
        try:
            ...
        except OSError as e:
            debug_error('persistence', 'Failed to save shelf', exception=e, path=path)
    """
    if exception is not None:
        kwargs['exception'] = f"{type(exception).__name__}: {exception}"

    print(_format_line(category, message, kwargs, COLORS['red'] + COLORS['bold']), file=sys.stderr)

    if exception is not None and is_debug_enabled(category):
        traceback.print_exception(type(exception), exception, exception.__traceback__)


def enable_all_categories():
    """Enable all debug categories"""
    set_debug_enabled(True)
    for category in DEBUG_CATEGORIES:
        set_category_enabled(category, True)


def disable_all_categories():
    """Disable all debug categories"""
    set_debug_enabled(False)
    _CATEGORY_SETTINGS.clear()

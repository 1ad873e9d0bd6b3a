"""Preferences management for application settings"""

import copy
import json
import os
import asyncio
import aiofiles

from core.debug_logger import debug_error


class PreferencesManager:
    """Manages application preferences and settings"""

    # Default preferences
    DEFAULT_PREFERENCES = {
        'terminal': {
            'shell': os.environ.get('SHELL', '/bin/bash'),
            'default_directory': os.path.expanduser('~'),
            'font_size': 13,
            'font_family': 'Menlo',
            'columns': 100,
            'rows': 30,
            'scrollback_lines': 10000,
        },
        'suggestions': {
            'ghost_text_enabled': True,
            'debounce_ms': 50,  # Coalesces paste and fast typing before re-parsing
            'ghost_color': '#8a8a8a',
        },
        'history': {
            'capacity': 5000,
            'save_delay_ms': 1000,
            'data_dir': os.path.expanduser('~/.terminal_shelf'),
        },
        'appearance': {
            'background_color': '#2a2a2e',
            'foreground_color': '#ffffff',
            'cursor_color': '#00ff00',
        },
    }

    def __init__(self, preferences_file=None):
        self.preferences_file = preferences_file or os.path.expanduser("~/.terminal_shelf/preferences.json")
        self._preferences = None
        self._load_lock = asyncio.Lock()
        self._save_lock = asyncio.Lock()
        # Load synchronously on init for immediate availability
        self.load_preferences_sync()

    def _merge_loaded(self, content):
        loaded_prefs = json.loads(content)
        if not isinstance(loaded_prefs, dict):
            raise ValueError("preferences file must hold an object")
        # Merge with defaults to ensure all keys exist
        return self._deep_merge(copy.deepcopy(self.DEFAULT_PREFERENCES), loaded_prefs)

    async def load_preferences(self):
        """Load preferences from file or use defaults asynchronously"""
        async with self._load_lock:
            try:
                if os.path.exists(self.preferences_file):
                    async with aiofiles.open(self.preferences_file, 'r') as f:
                        self._preferences = self._merge_loaded(await f.read())
                else:
                    self._preferences = copy.deepcopy(self.DEFAULT_PREFERENCES)
            except (OSError, ValueError) as e:
                debug_error('persistence', 'Failed to load preferences, using defaults', exception=e)
                self._preferences = copy.deepcopy(self.DEFAULT_PREFERENCES)

    def load_preferences_sync(self):
        """Synchronous wrapper for startup"""
        try:
            if os.path.exists(self.preferences_file):
                with open(self.preferences_file, 'r') as f:
                    self._preferences = self._merge_loaded(f.read())
            else:
                self._preferences = copy.deepcopy(self.DEFAULT_PREFERENCES)
        except (OSError, ValueError) as e:
            debug_error('persistence', 'Failed to load preferences, using defaults', exception=e)
            self._preferences = copy.deepcopy(self.DEFAULT_PREFERENCES)

    async def save_preferences(self):
        """Save preferences to file asynchronously"""
        async with self._save_lock:
            try:
                await asyncio.to_thread(os.makedirs, os.path.dirname(self.preferences_file), exist_ok=True)
                async with aiofiles.open(self.preferences_file, 'w') as f:
                    await f.write(json.dumps(self._preferences, indent=2))
                return True
            except OSError as e:
                debug_error('persistence', 'Failed to save preferences', exception=e)
                return False

    def save_preferences_sync(self):
        try:
            os.makedirs(os.path.dirname(self.preferences_file), exist_ok=True)
            with open(self.preferences_file, 'w') as f:
                json.dump(self._preferences, f, indent=2)
            return True
        except OSError as e:
            debug_error('persistence', 'Failed to save preferences', exception=e)
            return False

    def get(self, category, key, default=None):
        """Get a specific preference value"""
        value = self._preferences.get(category, {})
        if not isinstance(value, dict):
            return default
        return value.get(key, default)

    def set(self, category, key, value):
        """Set a specific preference value"""
        if category not in self._preferences:
            self._preferences[category] = {}
        self._preferences[category][key] = value

    def _deep_merge(self, base, update):
        """Deep merge two dictionaries"""
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                base[key] = self._deep_merge(base[key], value)
            else:
                base[key] = value
        return base

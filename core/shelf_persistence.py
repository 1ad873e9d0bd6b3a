"""Shelf persistence with debounced saves and async I/O"""

import json
import os
import asyncio
import aiofiles
from typing import List, Optional
from PyQt5.QtCore import QTimer

from core.command_shelf import CommandGroup, CommandRecord, ShelfSnapshot
from core.debug_logger import debug_log, debug_error

DEFAULT_DATA_DIR = os.path.expanduser("~/.terminal_shelf")


class ShelfPersistence:
    """Loads and saves the command shelf as two JSON files

    history.json holds the records, groups.json the command groups.
    Missing or corrupt files load as an empty collection; failed writes are
    logged and skipped so interactive use is never blocked.
    """

    def __init__(self, data_dir: str = None, save_delay_ms: int = 1000):
        self.data_dir = data_dir or DEFAULT_DATA_DIR
        self.history_file = os.path.join(self.data_dir, "history.json")
        self.groups_file = os.path.join(self.data_dir, "groups.json")
        self.save_delay_ms = save_delay_ms
        self._save_lock = asyncio.Lock()
        self._pending_snapshot: Optional[ShelfSnapshot] = None

        # Debounced save timer to batch disk writes
        self.save_timer = QTimer()
        self.save_timer.setSingleShot(True)
        self.save_timer.timeout.connect(self._do_save_sync)

    @property
    def save_pending(self) -> bool:
        return self._pending_snapshot is not None

    def schedule_save(self, snapshot: ShelfSnapshot):
        """Schedule a save (debounced so bursts of commands share one write)"""
        self._pending_snapshot = snapshot
        # Restart timer - saves save_delay_ms after the last change
        self.save_timer.stop()
        self.save_timer.start(self.save_delay_ms)

    def _do_save_sync(self):
        if self._pending_snapshot is not None:
            snapshot, self._pending_snapshot = self._pending_snapshot, None
            self.save(snapshot)

    def flush_save(self):
        """Force immediate save (call before app exit)"""
        self.save_timer.stop()
        self._do_save_sync()

    async def flush_save_async(self):
        self.save_timer.stop()
        if self._pending_snapshot is not None:
            snapshot, self._pending_snapshot = self._pending_snapshot, None
            await self.save_async(snapshot)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    @staticmethod
    def _encode(snapshot: ShelfSnapshot):
        records = json.dumps([record.to_dict() for record in snapshot.records], indent=2)
        groups = json.dumps([group.to_dict() for group in snapshot.groups], indent=2)
        return records, groups

    @staticmethod
    def _decode_list(content: str, factory, path: str) -> List:
        try:
            data = json.loads(content)
        except ValueError as e:
            debug_error('persistence', 'Corrupt shelf file, starting empty', exception=e, path=path)
            return []
        if not isinstance(data, list):
            debug_error('persistence', 'Unexpected shelf file layout, starting empty', path=path)
            return []

        items = []
        for entry in data:
            try:
                items.append(factory(entry))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                debug_error('persistence', 'Skipping malformed entry', exception=e, path=path)
        return items

    # ------------------------------------------------------------------
    # Sync I/O
    # ------------------------------------------------------------------

    def save(self, snapshot: ShelfSnapshot) -> bool:
        records, groups = self._encode(snapshot)
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            with open(self.history_file, 'w') as f:
                f.write(records)
            with open(self.groups_file, 'w') as f:
                f.write(groups)
        except OSError as e:
            debug_error('persistence', 'Failed to save shelf', exception=e, path=self.data_dir)
            return False
        debug_log('persistence', 'Shelf saved', records=len(snapshot.records), groups=len(snapshot.groups))
        return True

    def _read_sync(self, path: str) -> Optional[str]:
        try:
            if os.path.exists(path):
                with open(path, 'r') as f:
                    return f.read()
        except (OSError, UnicodeDecodeError) as e:
            debug_error('persistence', 'Failed to read shelf file', exception=e, path=path)
        return None

    def load(self) -> ShelfSnapshot:
        snapshot = ShelfSnapshot()
        content = self._read_sync(self.history_file)
        if content is not None:
            snapshot.records = self._decode_list(content, CommandRecord.from_dict, self.history_file)
        content = self._read_sync(self.groups_file)
        if content is not None:
            snapshot.groups = self._decode_list(content, CommandGroup.from_dict, self.groups_file)
        return snapshot

    # ------------------------------------------------------------------
    # Async I/O
    # ------------------------------------------------------------------

    async def save_async(self, snapshot: ShelfSnapshot) -> bool:
        records, groups = self._encode(snapshot)
        async with self._save_lock:
            try:
                await asyncio.to_thread(os.makedirs, self.data_dir, exist_ok=True)
                async with aiofiles.open(self.history_file, 'w') as f:
                    await f.write(records)
                async with aiofiles.open(self.groups_file, 'w') as f:
                    await f.write(groups)
            except OSError as e:
                debug_error('persistence', 'Failed to save shelf', exception=e, path=self.data_dir)
                return False
        return True

    async def _read_async(self, path: str) -> Optional[str]:
        try:
            if os.path.exists(path):
                async with aiofiles.open(path, 'r') as f:
                    return await f.read()
        except (OSError, UnicodeDecodeError) as e:
            debug_error('persistence', 'Failed to read shelf file', exception=e, path=path)
        return None

    async def load_async(self) -> ShelfSnapshot:
        records_content, groups_content = await asyncio.gather(
            self._read_async(self.history_file),
            self._read_async(self.groups_file),
        )
        snapshot = ShelfSnapshot()
        if records_content is not None:
            snapshot.records = self._decode_list(records_content, CommandRecord.from_dict, self.history_file)
        if groups_content is not None:
            snapshot.groups = self._decode_list(groups_content, CommandGroup.from_dict, self.groups_file)
        return snapshot

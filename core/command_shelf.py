"""Command shelf: ordered, deduplicated command history with groups"""

import threading
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional

from core.fuzzy import fuzzy_score, rank, suggest
from core.debug_logger import debug_log

DEFAULT_CAPACITY = 5000

# Typographic characters that sneak in when commands are pasted from docs
_TYPOGRAPHIC_REPLACEMENTS = {
    '“': '"',
    '”': '"',
    '‘': "'",
    '’': "'",
    '—': '--',
}


def normalize_command_text(text: str) -> str:
    for char, replacement in _TYPOGRAPHIC_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text.strip()


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class CommandRecord:
    text: str
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=datetime.now)
    pinned: bool = False

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'text': self.text,
            'created_at': self.created_at.isoformat(),
            'pinned': self.pinned,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'CommandRecord':
        return cls(
            text=str(data['text']),
            id=str(data.get('id') or _new_id()),
            created_at=datetime.fromisoformat(data['created_at']) if data.get('created_at') else datetime.now(),
            pinned=bool(data.get('pinned', False)),
        )


@dataclass
class CommandGroup:
    name: str
    id: str = field(default_factory=_new_id)
    members: List[CommandRecord] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'members': [member.to_dict() for member in self.members],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'CommandGroup':
        return cls(
            name=str(data['name']),
            id=str(data.get('id') or _new_id()),
            members=[CommandRecord.from_dict(member) for member in data.get('members', [])],
        )

    def copy(self) -> 'CommandGroup':
        return CommandGroup(self.name, self.id, [replace(member) for member in self.members])


@dataclass
class ShelfSnapshot:
    """Whole-collection state handed to and from persistence"""
    records: List[CommandRecord] = field(default_factory=list)
    groups: List[CommandGroup] = field(default_factory=list)


class CommandShelf:
    """Owns the command history and the named command groups

    Records are kept most-recent-first and their trimmed text is unique.
    Every mutation runs under one lock and then hands a snapshot to the
    persistence collaborator; reads return copies so callers can iterate
    while a mutation is pending.
    """

    def __init__(self, persistence=None, capacity: int = DEFAULT_CAPACITY):
        self.persistence = persistence
        self.capacity = capacity
        self._records: List[CommandRecord] = []
        self._groups: List[CommandGroup] = []
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def add(self, text: str) -> Optional[CommandRecord]:
        """Add a submitted command, moving an existing duplicate to the front

        Returns a copy of the stored record, or None when the text is blank or
        the record was evicted at once because every other record is pinned.
        """
        text = (text or '').strip()
        if not text:
            return None

        with self._lock:
            index = self._index_of_text(text)
            if index is not None:
                record = self._records.pop(index)
                record.created_at = datetime.now()
            else:
                record = CommandRecord(text)
            self._records.insert(0, record)
            self._enforce_capacity()
            kept = any(existing is record for existing in self._records)
            result = replace(record) if kept else None

        debug_log('commands', 'Command added', command=text, moved=index is not None)
        self._changed()
        return result

    def edit(self, record_id: str, new_text: str, group_id: str = None,
             propagate: bool = False) -> bool:
        """Change a command's text

        With `group_id` the member of that group is edited, otherwise the
        history record. With `propagate` every other record and group
        member showing the old text is updated too.
        """
        new_text = normalize_command_text(new_text or '')
        if not new_text:
            return False

        with self._lock:
            if group_id is not None:
                group = self._find_group(group_id)
                target = self._find_in(group.members, record_id) if group else None
            else:
                target = self._find_in(self._records, record_id)
            if target is None:
                return False

            old_text = target.text
            if group_id is None:
                self._rename_record(target, new_text)
            else:
                target.text = new_text

            if propagate and old_text != new_text:
                for record in list(self._records):
                    if record.text == old_text:
                        self._rename_record(record, new_text)
                for group in self._groups:
                    for member in group.members:
                        if member.text == old_text:
                            member.text = new_text

        debug_log('commands', 'Command edited', old=old_text, new=new_text, group_id=group_id)
        self._changed()
        return True

    def delete(self, record_id: str) -> bool:
        with self._lock:
            record = self._find_in(self._records, record_id)
            if record is None:
                return False
            self._records.remove(record)

        debug_log('commands', 'Command deleted', command=record.text)
        self._changed()
        return True

    def toggle_pin(self, record_id: str) -> Optional[bool]:
        """Flip the pinned flag; returns the new state or None if not found"""
        with self._lock:
            record = self._find_in(self._records, record_id)
            if record is None:
                return None
            record.pinned = not record.pinned
            if not record.pinned:
                # Unpinning may free an eviction slot that was blocked before
                self._enforce_capacity()
            pinned = record.pinned

        debug_log('commands', 'Pin toggled', command=record.text, pinned=pinned)
        self._changed()
        return pinned

    def get(self, record_id: str) -> Optional[CommandRecord]:
        with self._lock:
            record = self._find_in(self._records, record_id)
            return replace(record) if record else None

    def list(self, query: str = '') -> List[CommandRecord]:
        """All records most-recent-first, or ranked matches for `query`"""
        with self._lock:
            records = [replace(record) for record in self._records]
        if not query:
            return records
        return [result.record for result in rank(records, query)]

    def suggest(self, query: str) -> Optional[str]:
        """Most recent command that starts with `query`"""
        with self._lock:
            texts = [record.text for record in self._records]
        return suggest(query, texts)

    def __len__(self):
        with self._lock:
            return len(self._records)

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    def create_group(self, name: str) -> Optional[CommandGroup]:
        name = (name or '').strip()
        if not name:
            return None
        with self._lock:
            group = CommandGroup(name)
            self._groups.insert(0, group)
            result = group.copy()
        debug_log('commands', 'Group created', name=name)
        self._changed()
        return result

    def rename_group(self, group_id: str, name: str) -> bool:
        name = (name or '').strip()
        if not name:
            return False
        with self._lock:
            group = self._find_group(group_id)
            if group is None:
                return False
            group.name = name
        self._changed()
        return True

    def delete_group(self, group_id: str) -> bool:
        with self._lock:
            group = self._find_group(group_id)
            if group is None:
                return False
            self._groups.remove(group)
        debug_log('commands', 'Group deleted', name=group.name)
        self._changed()
        return True

    def add_to_group(self, record_id: str, group_id: str) -> Optional[CommandRecord]:
        """Copy a history record into a group; the copy gets its own id"""
        with self._lock:
            group = self._find_group(group_id)
            record = self._find_in(self._records, record_id)
            if group is None or record is None:
                return None
            if any(member.text == record.text for member in group.members):
                return None
            member = replace(record, id=_new_id())
            group.members.insert(0, member)
            result = replace(member)
        self._changed()
        return result

    def remove_from_group(self, record_id: str, group_id: str) -> bool:
        with self._lock:
            group = self._find_group(group_id)
            member = self._find_in(group.members, record_id) if group else None
            if member is None:
                return False
            group.members.remove(member)
        self._changed()
        return True

    def list_groups(self, query: str = '') -> List[CommandGroup]:
        """Groups for display; with a query, only groups that match

        A group matches on its name or on any member. When only members
        match, the group is narrowed down to those members.
        """
        with self._lock:
            groups = [group.copy() for group in self._groups]
        if not query:
            return groups

        filtered = []
        for group in groups:
            if fuzzy_score(group.name, query) is not None:
                filtered.append(group)
                continue
            members = [result.record for result in rank(group.members, query)]
            if members:
                group.members = members
                filtered.append(group)
        return filtered

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def snapshot(self) -> ShelfSnapshot:
        with self._lock:
            return ShelfSnapshot(
                records=[replace(record) for record in self._records],
                groups=[group.copy() for group in self._groups],
            )

    def load_snapshot(self, snapshot: ShelfSnapshot):
        """Replace the shelf's contents without scheduling a save"""
        with self._lock:
            self._records = []
            seen = set()
            for record in snapshot.records:
                text = record.text.strip()
                if not text or text in seen:
                    continue
                seen.add(text)
                self._records.append(replace(record, text=text))
            self._groups = [group.copy() for group in snapshot.groups]
            self._enforce_capacity()
        debug_log('persistence', 'Shelf loaded', records=len(self._records), groups=len(self._groups))

    def get_stats(self) -> Dict:
        with self._lock:
            return {
                'total_commands': len(self._records),
                'pinned_commands': sum(1 for record in self._records if record.pinned),
                'groups': len(self._groups),
            }

    # ------------------------------------------------------------------
    # Internals, caller holds the lock
    # ------------------------------------------------------------------

    def _changed(self):
        if self.persistence is not None:
            self.persistence.schedule_save(self.snapshot())

    def _enforce_capacity(self):
        index = len(self._records) - 1
        while len(self._records) > self.capacity and index >= 0:
            if not self._records[index].pinned:
                evicted = self._records.pop(index)
                debug_log('commands', 'Command evicted', command=evicted.text)
            index -= 1

    def _rename_record(self, record: CommandRecord, new_text: str):
        duplicate_index = self._index_of_text(new_text)
        if duplicate_index is not None and self._records[duplicate_index] is not record:
            duplicate = self._records.pop(duplicate_index)
            record.pinned = record.pinned or duplicate.pinned
        record.text = new_text

    def _index_of_text(self, text: str) -> Optional[int]:
        for index, record in enumerate(self._records):
            if record.text == text:
                return index
        return None

    def _find_group(self, group_id: str) -> Optional[CommandGroup]:
        for group in self._groups:
            if group.id == group_id:
                return group
        return None

    @staticmethod
    def _find_in(records: List[CommandRecord], record_id: str) -> Optional[CommandRecord]:
        for record in records:
            if record.id == record_id:
                return record
        return None

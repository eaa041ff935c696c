# runegather/core/journal.py
import datetime
import itertools
import time
from typing import Any, Dict, List, Optional

from runegather.config import (
    FORMAT_ERROR, FORMAT_HIGHLIGHT, FORMAT_RESET, FORMAT_SUCCESS,
    JOURNAL_ENTRY_TYPES, JOURNAL_MAX_ENTRIES
)
from runegather.core import events
from runegather.core.event_system import EventSystem


class JournalEntry:
    def __init__(self, entry_id: str, text: str, timestamp: float, entry_type: str = "system"):
        self.entry_id = entry_id
        self.text = text
        self.timestamp = timestamp
        self.entry_type = entry_type

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.entry_id,
            "text": self.text,
            "timestamp": self.timestamp,
            "type": self.entry_type,
        }


class Journal:
    """
    Human-readable log of what happened during the session, newest first.

    The journal listens to the event system and writes an entry for every
    auto-gather start/stop, every successful gather, every discovery failure
    and every notice (rejected operations).
    """

    def __init__(self, event_system: Optional[EventSystem] = None,
                 max_entries: int = JOURNAL_MAX_ENTRIES):
        self.entries: List[JournalEntry] = []
        self.max_entries = max_entries
        self._ids = itertools.count(1)
        self.written_count = 0  # Entries ever added, including ones trimmed since
        self.event_system = event_system
        if event_system:
            self.attach(event_system)

    def attach(self, event_system: EventSystem) -> None:
        self.event_system = event_system
        event_system.subscribe(events.AUTO_GATHER_STARTED, self._on_auto_started)
        event_system.subscribe(events.AUTO_GATHER_STOPPED, self._on_auto_stopped)
        event_system.subscribe(events.GATHER_COMPLETED, self._on_gather_completed)
        event_system.subscribe(events.GATHER_FAILED, self._on_gather_failed)
        event_system.subscribe(events.NOTICE, self._on_notice)

    def add_entry(self, text: str, entry_type: str = "system") -> JournalEntry:
        if entry_type not in JOURNAL_ENTRY_TYPES:
            entry_type = "system"
        entry = JournalEntry(f"entry_{next(self._ids)}", text, time.time(), entry_type)
        self.written_count += 1

        self.entries.insert(0, entry)
        if len(self.entries) > self.max_entries:
            del self.entries[self.max_entries:]
        return entry

    def clear(self) -> None:
        self.entries = []

    def remove_entry(self, entry_id: str) -> bool:
        before = len(self.entries)
        self.entries = [e for e in self.entries if e.entry_id != entry_id]
        return len(self.entries) != before

    def get_last_entries(self, count: int = 10) -> List[JournalEntry]:
        return self.entries[:count]

    def get_entries_by_type(self, entry_type: str) -> List[JournalEntry]:
        return [e for e in self.entries if e.entry_type == entry_type]

    @staticmethod
    def format_entry_time(timestamp: float) -> str:
        return datetime.datetime.fromtimestamp(timestamp).strftime("%H:%M")

    def format_entry(self, entry: JournalEntry) -> str:
        return f"[{self.format_entry_time(entry.timestamp)}] {entry.text}"

    # --- Event handlers ---

    def _on_auto_started(self, event_type: str, data: Dict[str, Any]):
        names = ", ".join(r.name for r in data.get("order", []))
        self.add_entry(f"Auto-gathering started: {names}.", "system")

    def _on_auto_stopped(self, event_type: str, data: Dict[str, Any]):
        total = data.get("total_gathered", 0)
        self.add_entry(f"Auto-gathering stopped. Resources gathered: {total}.", "system")

    def _on_gather_completed(self, event_type: str, data: Dict[str, Any]):
        resource = data["resource"]
        self.add_entry(f"{FORMAT_SUCCESS}You successfully gathered {resource.name}.{FORMAT_RESET}", "item")

    def _on_gather_failed(self, event_type: str, data: Dict[str, Any]):
        resource = data["resource"]
        result = data.get("result")
        reason = f" ({result.message})" if result is not None and result.message else ""
        self.add_entry(f"{FORMAT_ERROR}Failed to gather {resource.name}.{FORMAT_RESET}{reason} Try again.", "error")

    def _on_notice(self, event_type: str, data: Dict[str, Any]):
        entry_type = "error" if data.get("level") == "error" else "system"
        self.add_entry(f"{FORMAT_HIGHLIGHT}{data['message']}{FORMAT_RESET}", entry_type)

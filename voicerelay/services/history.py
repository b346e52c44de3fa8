"""In-memory transcript history for the recorder session."""

from datetime import datetime

from voicerelay.core.models import TranscriptEntry


class TranscriptHistory:
    """Ordered list of completed transcriptions, oldest first.

    Entry ids are derived from the creation time in milliseconds and are
    bumped when needed so they stay unique and strictly increasing.
    Nothing is persisted.
    """

    def __init__(self) -> None:
        self._entries: list[TranscriptEntry] = []
        self._last_id = 0

    @property
    def entries(self) -> list[TranscriptEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, text: str) -> TranscriptEntry:
        """Append a new entry for ``text`` and return it."""
        now = datetime.now()
        entry_id = max(int(now.timestamp() * 1000), self._last_id + 1)
        self._last_id = entry_id
        entry = TranscriptEntry(id=entry_id, text=text, timestamp=now.strftime("%X"))
        self._entries.append(entry)
        return entry

    def delete(self, entry_id: int) -> bool:
        """Remove the entry with ``entry_id``. Returns False if there was none."""
        remaining = [e for e in self._entries if e.id != entry_id]
        removed = len(remaining) != len(self._entries)
        self._entries = remaining
        return removed

    def clear(self) -> None:
        self._entries.clear()

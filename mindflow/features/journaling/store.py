"""In-memory session store for analysed journal entries."""

from typing import Iterator, List, Tuple

from mindflow.features.journaling.models import JournalEntry


class EntryStore:
    """
    Ordered collection of journal entries, newest first.

    Entries are only ever prepended; nothing is deduplicated, bounded or
    persisted. The store lives as long as the process does.
    """

    def __init__(self) -> None:
        self._entries: List[JournalEntry] = []

    def prepend(self, entry: JournalEntry) -> None:
        self._entries.insert(0, entry)

    def all(self) -> Tuple[JournalEntry, ...]:
        """Snapshot of the entries, newest first."""
        return tuple(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[JournalEntry]:
        return iter(self.all())

from typing import Iterator, List, Optional, Tuple

from .primitives import VlrIndexEntry


class VlrCatalog:
    """
    Lookup table over the records of a file, built without reading payloads.

    The enclosing reader adds one VlrIndexEntry per header it walks past;
    later it can seek straight to a record by its (user_id, record_id).
    Entries keep the order they were added in.
    """

    def __init__(self):
        self._entries: List[VlrIndexEntry] = []

    def add(self, entry: VlrIndexEntry) -> None:
        if not isinstance(entry, VlrIndexEntry):
            raise TypeError(f"Expected VlrIndexEntry, got {type(entry)}")
        self._entries.append(entry)

    def find(self, user_id: str, record_id: int) -> Optional[VlrIndexEntry]:
        """Return the first entry for the pair, or None."""
        for entry in self._entries:
            if entry.user_id == user_id and entry.record_id == record_id:
                return entry
        return None

    def find_all(self, user_id: str, record_id: Optional[int] = None) -> List[VlrIndexEntry]:
        """Return every entry for a user id, optionally narrowed to one record id."""
        return [entry for entry in self._entries
                if entry.user_id == user_id and
                (record_id is None or entry.record_id == record_id)]

    def get_entries(self) -> List[VlrIndexEntry]:
        """Return copy of entries list."""
        return self._entries.copy()

    def __contains__(self, key: Tuple[str, int]) -> bool:
        user_id, record_id = key
        return self.find(user_id, record_id) is not None

    def __iter__(self) -> Iterator[VlrIndexEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __str__(self) -> str:
        return f"VlrCatalog(entries={len(self._entries)})"

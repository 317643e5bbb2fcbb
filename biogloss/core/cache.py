"""
BioGloss Definition Cache
Session-scoped, append-only memo of remote dictionary lookups
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class _Absent:
    """Marker for "looked up, no definition found" """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ABSENT"

    def __bool__(self):
        return False


ABSENT = _Absent()


@dataclass(frozen=True)
class CacheEntry:
    """A resolved lookup; definition is None for an absent word"""
    word: str
    definition: Optional[str]

    @property
    def found(self) -> bool:
        return self.definition is not None


class DefinitionCache:
    """
    Mapping from lower-cased word to a definition or the ABSENT marker.

    Entries are never evicted or overwritten; only an explicit clear()
    (session reset) empties the cache. The cache also tracks in-flight
    lookups so that concurrent resolutions of the same word share one
    request.
    """

    def __init__(self):
        self._entries: Dict[str, object] = {}
        self._pending: Dict[str, asyncio.Future] = {}
        self.hits = 0
        self.misses = 0

    def lookup(self, word: str) -> Optional[CacheEntry]:
        """Return the cached entry, or None when the word was never resolved"""
        key = word.lower()
        if key not in self._entries:
            self.misses += 1
            return None

        self.hits += 1
        value = self._entries[key]
        return CacheEntry(key, None if value is ABSENT else value)

    def store(self, word: str, definition: Optional[str]) -> CacheEntry:
        """
        Record a lookup result. A None or empty definition is stored as ABSENT.

        The first stored value for a word is kept; later stores are ignored.
        """
        key = word.lower()
        if key in self._entries:
            logger.debug(f"Cache already holds '{key}', keeping existing entry")
        else:
            self._entries[key] = definition if definition else ABSENT

        value = self._entries[key]
        return CacheEntry(key, None if value is ABSENT else value)

    def definition_for(self, word: str) -> Optional[str]:
        """Definition for a word at display time, None if absent or unknown"""
        value = self._entries.get(word.lower())
        return None if value is None or value is ABSENT else value

    def pending(self, word: str) -> Optional[asyncio.Future]:
        """The in-flight lookup for a word, if any"""
        return self._pending.get(word.lower())

    def track(self, word: str, future: asyncio.Future) -> asyncio.Future:
        """Register an in-flight lookup; it is forgotten once it finishes"""
        key = word.lower()
        self._pending[key] = future

        def _forget(done):
            if self._pending.get(key) is done:
                del self._pending[key]

        future.add_done_callback(_forget)
        return future

    def clear(self):
        """Drop every entry (explicit session reset only)"""
        logger.info(f"Clearing definition cache ({len(self._entries)} entries)")
        self._entries.clear()
        self._pending.clear()
        self.hits = 0
        self.misses = 0

    def stats(self) -> Dict[str, int]:
        absent = sum(1 for value in self._entries.values() if value is ABSENT)
        return {
            'entries': len(self._entries),
            'defined': len(self._entries) - absent,
            'absent': absent,
            'pending': len(self._pending),
            'hits': self.hits,
            'misses': self.misses,
        }

    def __contains__(self, word: str) -> bool:
        return word.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

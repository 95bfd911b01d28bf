"""
Pattern cache: exact-match memory of confirmed gestures.

Maps a collapsed key sequence to the word the user confirmed for it.
The in-memory map is authoritative; persistence to a key-value store is
best effort and never blocks or fails a lookup.
"""

import asyncio
import json
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from .config import PatternCacheConfig, DEFAULT_PATTERN_CACHE_CONFIG
from .utils import log


class KeyValueStore(Protocol):
    """Asynchronous byte store used to survive process restarts."""

    async def get(self, key: str) -> Optional[bytes]:
        ...

    async def set(self, key: str, value: bytes) -> None:
        ...


class MemoryStore:
    """Process-local store, mostly for tests and demos."""

    def __init__(self):
        self.data: Dict[str, bytes] = {}
        self.writes = 0

    async def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self.data[key] = value
        self.writes += 1


class FileStore:
    """One file per key under a directory; blocking I/O runs in a worker thread."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f'{key}.json'

    def _read(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def _write(self, key: str, value: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp = self._path(key).with_suffix('.tmp')
        tmp.write_bytes(value)
        tmp.replace(self._path(key))

    async def get(self, key: str) -> Optional[bytes]:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, value: bytes) -> None:
        await asyncio.to_thread(self._write, key, value)


class PatternCache:
    """
    Sequence -> word cache with last-write-wins learning.

    Lookups return None until load() has completed. Writes are queued and
    flushed by a single background task, so learn() never waits on the
    store; a failed write is logged and the in-memory entry is kept.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        config: PatternCacheConfig = DEFAULT_PATTERN_CACHE_CONFIG
    ):
        self.store = store
        self.config = config
        self._patterns: Dict[str, str] = {}
        self._loaded = False
        self._dirty = False
        self._writer: Optional[asyncio.Task] = None

    @property
    def loaded(self) -> bool:
        return self._loaded

    def __len__(self) -> int:
        return len(self._patterns)

    async def load(self) -> int:
        """
        Load persisted patterns. Entries learned before loading win over stored ones.

        Returns:
            Number of patterns held after loading
        """
        if self._loaded:
            return len(self._patterns)

        stored: Dict[str, str] = {}
        if self.store is not None:
            try:
                raw = await self.store.get(self.config.storage_key)
                if raw:
                    decoded = json.loads(raw.decode('utf-8'))
                    if not isinstance(decoded, dict):
                        raise ValueError(f'expected an object, got {type(decoded).__name__}')
                    stored = {str(k): str(v) for k, v in decoded.items()}
            except Exception as e:
                log(f'[PatternCache] Load failed: {e}')

        stored.update(self._patterns)
        self._patterns = stored
        self._loaded = True
        log(f'[PatternCache] Loaded {len(self._patterns)} patterns.')

        if self._dirty:
            self._schedule_flush()
        return len(self._patterns)

    def lookup(self, sequence: str) -> Optional[str]:
        """Exact-match lookup; never blocks and misses until loaded."""
        if not self._loaded:
            return None
        return self._patterns.get(sequence)

    def learn(self, sequence: str, word: str) -> bool:
        """
        Map sequence to word, overwriting a different earlier word.

        Returns:
            True if the mapping changed (and a write was queued)
        """
        if not sequence or not word:
            return False
        if self._patterns.get(sequence) == word:
            return False

        log(f'[PatternCache] Learned: {sequence} -> {word}')
        self._patterns[sequence] = word
        self._dirty = True
        if self._loaded:
            self._schedule_flush()
        return True

    def patterns(self) -> Dict[str, str]:
        """Copy of every learned mapping."""
        return dict(self._patterns)

    def _schedule_flush(self) -> None:
        if self.store is None:
            self._dirty = False
            return
        if self._writer is not None and not self._writer.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop yet: the next flush() writes the pending state
            return
        self._writer = loop.create_task(self._write_pending())

    async def _write_pending(self) -> None:
        while self._dirty:
            self._dirty = False
            payload = json.dumps(self._patterns, sort_keys=True).encode('utf-8')
            try:
                await self.store.set(self.config.storage_key, payload)
            except Exception as e:
                log(f'[PatternCache] Save failed: {e}')

    async def flush(self) -> None:
        """Wait until queued writes have been attempted."""
        if self._writer is not None:
            await self._writer
        if self._dirty and self._loaded and self.store is not None:
            await self._write_pending()

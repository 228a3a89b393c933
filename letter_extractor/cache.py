"""Process-lifetime cache of reduced extraction results"""
import hashlib
import logging
import threading
from typing import Dict, Generic, Optional, TypeVar

from .config import CACHE_KEY_MODE
from .models import PdfUpload

logger = logging.getLogger(__name__)

V = TypeVar("V")

CACHE_KEY_MODES = ("content", "name_size")


def cache_key(upload: PdfUpload, mode: str = CACHE_KEY_MODE) -> str:
    """
    Identity of an upload for caching

    "content" hashes the bytes. "name_size" only looks at the file name and
    size, which is cheaper but misses content changes that keep both.
    """
    if mode == "name_size":
        return f"{upload.filename}-{upload.size}"
    if mode == "content":
        return hashlib.sha256(upload.content).hexdigest()
    raise ValueError(f"Unknown cache key mode: {mode!r} (expected one of {CACHE_KEY_MODES})")


class ExtractionCache(Generic[V]):
    """Thread-safe key/value store with insert-if-absent semantics and no eviction"""

    def __init__(self, key_mode: str = CACHE_KEY_MODE):
        if key_mode not in CACHE_KEY_MODES:
            raise ValueError(f"Unknown cache key mode: {key_mode!r} (expected one of {CACHE_KEY_MODES})")
        self.key_mode = key_mode
        self._entries: Dict[str, V] = {}
        self._lock = threading.Lock()

    def key_for(self, upload: PdfUpload) -> str:
        return cache_key(upload, self.key_mode)

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            return self._entries.get(key)

    def put_if_absent(self, key: str, value: V) -> V:
        """Store value unless the key is present; return the stored value"""
        with self._lock:
            return self._entries.setdefault(key, value)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

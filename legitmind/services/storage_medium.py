"""
Storage Medium - string-keyed get/set/remove backing the document store
"""

import os
import tempfile
from typing import Dict, Optional, Protocol
from urllib.parse import quote


class StorageMedium(Protocol):
    """Minimal key-value contract: synchronous, no transactions, no multi-key atomicity"""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class FileMedium:
    """One file per key under ``storage_dir``; writes go through a temp file and ``os.replace``"""

    suffix = ".json"

    def __init__(self, storage_dir: str = "storage"):
        self.storage_dir = storage_dir
        os.makedirs(storage_dir, exist_ok=True)

    def _get_file_path(self, key: str) -> str:
        return os.path.join(self.storage_dir, quote(key, safe="") + self.suffix)

    def get(self, key: str) -> Optional[str]:
        file_path = self._get_file_path(key)
        if not os.path.exists(file_path):
            return None
        with open(file_path, "r", encoding="utf-8") as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=self.storage_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, self._get_file_path(key))
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def remove(self, key: str) -> None:
        file_path = self._get_file_path(key)
        if os.path.exists(file_path):
            os.remove(file_path)


class MemoryMedium:
    """Process-local medium, used for tests and ephemeral runs"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)

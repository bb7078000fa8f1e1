import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from .config import settings
from .exceptions import StorageFault

logger = logging.getLogger("document_store")


class JsonDocumentStore:
    """
    Whole-collection load/save over JSON array documents on disk.

    Each collection is one file holding a flat array of records. There are no
    partial updates: a mutation loads the array, changes it and writes it back.
    Callers run that sequence inside `locked(collection)` so two requests can
    never interleave between the load and the save of the same collection.
    """

    def __init__(self, data_dir: Path, files: Optional[Dict[str, str]] = None):
        self.data_dir = Path(data_dir)
        self.files = dict(files or {})
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, collection: str) -> Path:
        filename = self.files.get(collection, f"{collection}.json")
        return self.data_dir / filename

    def _lock_for(self, collection: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(collection)
            if lock is None:
                lock = threading.RLock()
                self._locks[collection] = lock
            return lock

    @contextmanager
    def locked(self, collection: str) -> Iterator[None]:
        """Hold the single-writer lock of a collection."""
        lock = self._lock_for(collection)
        with lock:
            yield

    def load(self, collection: str) -> List[dict]:
        """
        Returns the records of a collection in storage order.
        A missing, unreadable or non-array document reads as empty.
        """
        path = self.path_for(collection)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.error(f"Failed to read {path}: file does not exist")
            return []
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read {path}: {e}")
            return []

        if not isinstance(data, list):
            logger.error(f"Failed to read {path}: document is not an array")
            return []
        return data

    def save(self, collection: str, records: List[dict]) -> bool:
        """
        Rewrites the whole collection. Returns False when the write failed,
        in which case the previous document is left as it was.
        """
        path = self.path_for(collection)
        try:
            self._write_atomic(path, records)
        except StorageFault as e:
            logger.error(f"Failed to save {path}: {e.message}")
            return False
        return True

    def _write_atomic(self, path: Path, records: List[dict]) -> None:
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(records, indent=2, ensure_ascii=False)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as e:
            raise StorageFault(str(e)) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.remove(tmp_name)


store = JsonDocumentStore(settings.DATA_DIR, settings.collection_files())


def get_store() -> JsonDocumentStore:
    return store

"""Shared plumbing for the JSON data files.

Each file holds a JSON array of records. Writes land in a uniquely named
sibling temp file that then replaces the original, so an interrupted
write leaves the previous contents in place. Every read-modify-write
holds an exclusive ``flock`` on a sidecar ``.<name>.lock`` file, which
serializes writers across threads and across separate CLI processes.
"""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

from storefront.domain.exceptions import StoreError


class _FileLock:
    """Re-entrant exclusive lock on one data file.

    flock is per open file description, so only the outermost holder in
    this process opens the sidecar; nested holders ride on the thread lock.
    """

    def __init__(self, lock_path: Path) -> None:
        self.lock_path = lock_path
        self._thread_lock = threading.RLock()
        self._depth = 0
        self._handle: IO[str] | None = None

    @contextmanager
    def held(self) -> Iterator[None]:
        with self._thread_lock:
            if self._depth == 0:
                self._acquire()
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
                if self._depth == 0:
                    self._release()

    def _acquire(self) -> None:
        try:
            handle = open(self.lock_path, "a")
        except OSError as exc:
            raise StoreError(f"Could not lock {self.lock_path.name}: {exc}") from exc
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
        self._handle = handle

    def _release(self) -> None:
        handle, self._handle = self._handle, None
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
        handle.close()


_registry_lock = threading.Lock()
_locks: dict[Path, _FileLock] = {}


def _lock_for(path: Path) -> _FileLock:
    key = path.resolve()
    with _registry_lock:
        if key not in _locks:
            _locks[key] = _FileLock(key.with_name(f".{key.name}.lock"))
        return _locks[key]


class JsonFile:

    def __init__(self, path: Path) -> None:
        self.path = path
        path.parent.mkdir(parents=True, exist_ok=True)
        self.lock = _lock_for(path)
        with self.lock.held():
            if not path.exists():
                self.write([])

    def read(self) -> list[dict]:
        with self.lock.held():
            try:
                records = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                raise StoreError(f"Could not read {self.path.name}: {exc}") from exc
        if not isinstance(records, list):
            raise StoreError(f"{self.path.name} does not hold a list of records")
        return records

    def write(self, records: list[dict]) -> None:
        with self.lock.held():
            try:
                fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            except OSError as exc:
                raise StoreError(f"Could not write {self.path.name}: {exc}") from exc
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(records, f, indent=2)
                    f.write("\n")
                os.replace(tmp, self.path)
            except OSError as exc:
                Path(tmp).unlink(missing_ok=True)
                raise StoreError(f"Could not write {self.path.name}: {exc}") from exc
            except Exception:
                Path(tmp).unlink(missing_ok=True)
                raise

    @contextmanager
    def updating(self) -> Iterator[list[dict]]:
        """Read-modify-write under the file lock.

        The records are written back only if the block exits cleanly.
        """
        with self.lock.held():
            records = self.read()
            yield records
            self.write(records)


def index_of(records: list[dict], record_id: object) -> int | None:
    for i, record in enumerate(records):
        if record["id"] == record_id:
            return i
    return None


def upsert(records: list[dict], record: dict) -> None:
    i = index_of(records, record["id"])
    if i is None:
        records.append(record)
    else:
        records[i] = record

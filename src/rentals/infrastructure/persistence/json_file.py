"""File plumbing shared by the JSON repositories.

``file_lock`` returns the lock serialising read-modify-write cycles on
one data file across threads and processes: an ``fcntl.flock`` on a
``<name>.lock`` sidecar excludes other processes, and a re-entrant
thread lock excludes other threads of this process.  There is one
``FileLock`` per resolved path, so nested acquisitions from different
repository instances reuse the same descriptor instead of blocking on
their own ``flock``.

``write_atomically`` writes to a uniquely named temp file in the target
directory and renames it over the target, so readers never see a
half-written document.
"""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

_file_locks: dict[Path, FileLock] = {}
_file_locks_guard = threading.Lock()


def file_lock(data_path: Path) -> FileLock:
    key = data_path.resolve()
    with _file_locks_guard:
        lock = _file_locks.get(key)
        if lock is None:
            lock = _file_locks[key] = FileLock(key)
        return lock


class FileLock:
    """Re-entrant exclusive lock on a data file, valid across processes.

    Obtain instances through ``file_lock()``.
    """

    def __init__(self, data_path: Path) -> None:
        self._lock_path = data_path.with_name(data_path.name + ".lock")
        self._thread_lock = threading.RLock()
        self._depth = 0
        self._fd: int | None = None

    def __enter__(self) -> FileLock:
        self._thread_lock.acquire()
        try:
            if self._depth == 0:
                fd = os.open(self._lock_path, os.O_RDWR | os.O_CREAT, 0o644)
                try:
                    fcntl.flock(fd, fcntl.LOCK_EX)
                except OSError:
                    os.close(fd)
                    raise
                self._fd = fd
            self._depth += 1
        except OSError:
            self._thread_lock.release()
            raise
        return self

    def __exit__(self, *exc_info: object) -> None:
        try:
            self._depth -= 1
            if self._depth == 0 and self._fd is not None:
                fd, self._fd = self._fd, None
                try:
                    fcntl.flock(fd, fcntl.LOCK_UN)
                finally:
                    os.close(fd)
        finally:
            self._thread_lock.release()


def write_atomically(path: Path, payload: Any) -> None:
    """Replace *path* with *payload* as indented JSON.  Raises OSError."""
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=path.name + ".", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(json.dumps(payload, indent=2) + "\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

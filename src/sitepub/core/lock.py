"""Advisory single-writer lock over the working copy

Invocations are separate processes, so the lock lives in the filesystem:
an exclusive, non-blocking OS lock on a lock file. The lock is released when
the holder exits, including on a crash, so a stale file never blocks a run.
"""

import logging
import os
import platform
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sitepub.core.errors import LockError


logger = logging.getLogger(__name__)


def _acquire(handle) -> None:
    if platform.system() == "Windows":
        import msvcrt
        handle.seek(0)
        try:
            msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, 1)
        except OSError as e:
            raise LockError(f"Another publish is running (lock held: {handle.name})") from e
    else:
        import fcntl
        try:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError as e:
            raise LockError(f"Another publish is running (lock held: {handle.name})") from e
        except OSError as e:
            raise LockError(f"Could not lock {handle.name}: {e}") from e


def _release(handle) -> None:
    if platform.system() == "Windows":
        import msvcrt
        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        import fcntl
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


@contextmanager
def publish_lock(path: Path) -> Iterator[Path]:
    """Hold an exclusive lock on path for the duration of the block. Raises LockError if held."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a+", encoding="utf-8") as handle:
        _acquire(handle)
        logger.debug("Acquired lock %s", path)
        try:
            handle.seek(0)
            handle.truncate()
            handle.write(f"{os.getpid()}\n")
            handle.flush()
            yield path
        finally:
            _release(handle)
            logger.debug("Released lock %s", path)

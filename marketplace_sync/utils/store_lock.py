"""
Per-store single-flight lock.

A file-based lock with expiry, so that two notification runs (two
scheduler ticks, or a scheduler and a manual run-once) never process the
same store at the same time.
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Optional

from marketplace_sync.core.config import get_settings

logger = logging.getLogger(__name__)


class StoreSyncLock:
    """
    Exclusive lock on the order notifications of a store.

    The lock file holds its acquisition timestamp. A lock older than
    timeout_seconds is considered stale and taken over.
    """

    def __init__(self, store_id: int, timeout_seconds: Optional[int] = None, lock_dir: Optional[str] = None):
        """
        Initialize the store lock.

        Args:
            store_id: Local store ID
            timeout_seconds: Lock expiry, defaults to STORE_LOCK_TIMEOUT_SECONDS
            lock_dir: Directory of the lock files, defaults to STORE_LOCK_DIR
        """
        settings = get_settings()
        self.store_id = store_id
        self.timeout_seconds = timeout_seconds or settings.STORE_LOCK_TIMEOUT_SECONDS
        self.lock_file = os.path.join(lock_dir or settings.STORE_LOCK_DIR, f"marketplace_sync_store_{store_id}.lock")
        self.acquired = False
        self.start_time: Optional[float] = None

    def _remove_stale_lock(self) -> bool:
        """Remove an expired or unreadable lock file. Returns False if a valid lock is held."""
        try:
            with open(self.lock_file, "r") as f:
                lock_time = float(f.read().strip())
        except FileNotFoundError:
            return True
        except (ValueError, OSError):
            lock_time = 0.0

        if time.time() - lock_time < self.timeout_seconds:
            return False

        logger.warning(f"Store {self.store_id} lock expired, removing stale lock")
        try:
            os.remove(self.lock_file)
        except FileNotFoundError:
            pass
        return True

    async def acquire(self) -> bool:
        """
        Acquire the lock.

        Returns:
            bool: True if acquired, False if another run holds it
        """
        if not self._remove_stale_lock():
            logger.debug(f"Store {self.store_id} lock already held")
            return False

        self.start_time = time.time()

        try:
            with open(self.lock_file, "x") as f:
                f.write(str(self.start_time))
        except FileExistsError:
            logger.debug(f"Store {self.store_id} lock taken by a concurrent run")
            return False

        self.acquired = True
        logger.debug(f"Acquired store {self.store_id} lock")
        return True

    async def release(self) -> None:
        """Release the lock if held."""
        if not self.acquired:
            return

        try:
            os.remove(self.lock_file)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to release store {self.store_id} lock: {e}")

        self.acquired = False
        duration = time.time() - (self.start_time or 0)
        logger.debug(f"Released store {self.store_id} lock (held for {duration:.2f}s)")


@asynccontextmanager
async def store_lock(store_id: int, timeout_seconds: Optional[int] = None, lock_dir: Optional[str] = None):
    """
    Context manager for the per-store lock.

    Usage:
        async with store_lock(store.id) as acquired:
            if acquired:
                # No other run is processing this store
                ...
    """
    lock = StoreSyncLock(store_id, timeout_seconds, lock_dir)

    try:
        yield await lock.acquire()
    finally:
        await lock.release()

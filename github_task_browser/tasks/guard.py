"""Single-flight guard preventing overlapping fetch cycles for one search."""

import threading
from contextlib import contextmanager, suppress
from typing import Iterator


class SyncGuard:
    """Exclusive, non-blocking flag scoped to one search.

    Backed by a lock acquired without blocking, so it behaves the same for
    coroutines on one event loop and for workers on different threads.
    """

    def __init__(self) -> None:
        """Initialize the guard in the released state."""
        self._lock = threading.Lock()

    @property
    def is_held(self) -> bool:
        return self._lock.locked()

    def try_acquire(self) -> bool:
        """Atomically transition the flag from released to held.

        Returns:
            True if this call acquired the guard, False if a cycle already holds it.
        """
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        """Release the guard. Releasing a guard that is not held is a no-op."""
        with suppress(RuntimeError):
            self._lock.release()

    @contextmanager
    def held(self) -> Iterator[bool]:
        """Try to acquire the guard for the duration of the block.

        Yields whether the guard was acquired; it is released on every exit
        path only when this block acquired it.
        """
        acquired = self.try_acquire()
        try:
            yield acquired
        finally:
            if acquired:
                self.release()

# --- Standard library imports ---
import os
from pathlib import Path


class FileLock:
    """
    Exclusive advisory lock on a sidecar lock file.

    Serializes writers across processes (e.g. overlapping cron runs).
    Blocks until the lock is available.

    Usage:
        with FileLock(path.with_suffix(".lock")):
            ...
    """

    def __init__(self, path):
        self.path = Path(path)
        self._fd = None

    def acquire(self) -> None:
        # POSIX only; availability is checked at startup by sanity
        import fcntl

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o600)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX)
        except OSError:
            os.close(fd)
            raise
        self._fd = fd

    def release(self) -> None:
        if self._fd is None:
            return

        import fcntl

        try:
            fcntl.flock(self._fd, fcntl.LOCK_UN)
        finally:
            os.close(self._fd)
            self._fd = None

    @property
    def locked(self) -> bool:
        return self._fd is not None

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False

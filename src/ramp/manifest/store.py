"""Manifest persistence and run locking.

The manifest is read once at the start of a run and written once at the
end. Loading fails open: a missing or damaged manifest only costs the
change-skip optimization for one run. Saving is fatal on error.

Concurrent runs against the same output directory are serialized with
``ManifestLock``, a lock file created next to the manifest.

Usage:
    from ramp.manifest.store import ManifestLock, load_manifest, save_manifest

    with ManifestLock(output_dir):
        manifest = load_manifest(output_dir)
        ...
        save_manifest(output_dir, new_manifest)
"""

import json
import logging
import os
import socket
import tempfile
import time
from pathlib import Path

from ramp.manifest.models import MigrationManifest

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = ".ramp-manifest.json"
LOCK_SUFFIX = ".lock"


class ManifestWriteError(Exception):
    """Raised when the manifest cannot be written."""

    pass


class LockError(Exception):
    """Raised when the manifest lock cannot be acquired."""

    pass


class LockTimeout(LockError):
    """Raised when another run holds the manifest lock past the timeout."""

    pass


# ============================================================================
# Load / Save
# ============================================================================


def manifest_path(directory: str | Path, filename: str = MANIFEST_FILENAME) -> Path:
    """Return the manifest location inside *directory*."""
    return Path(directory) / filename


def load_manifest(
    directory: str | Path, filename: str = MANIFEST_FILENAME
) -> MigrationManifest:
    """Load the manifest from *directory*.

    Never raises: a missing, unreadable, non-JSON or structurally invalid
    file yields an empty ``MigrationManifest``.

    Args:
        directory: Output root holding the manifest.
        filename: Manifest file name.

    Returns:
        Loaded manifest, or the default empty manifest.
    """
    path = manifest_path(directory, filename)
    try:
        if not path.exists():
            logger.debug(f"No manifest at {path}, starting fresh")
            return MigrationManifest()
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        # ValidationError and JSONDecodeError are both ValueErrors
        return MigrationManifest.model_validate(data)
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unusable manifest {path}: {e}")
        return MigrationManifest()


def save_manifest(
    directory: str | Path,
    manifest: MigrationManifest,
    filename: str = MANIFEST_FILENAME,
) -> Path:
    """Write *manifest* as the canonical snapshot in *directory*.

    The JSON is written to a temporary file in the same directory and moved
    into place, replacing any previous manifest.

    Args:
        directory: Output root holding the manifest.
        manifest: Snapshot to persist.
        filename: Manifest file name.

    Returns:
        Path of the written manifest.

    Raises:
        ManifestWriteError: If the directory or file cannot be written.
    """
    path = manifest_path(directory, filename)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f"{filename}.", suffix=".tmp", dir=path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(manifest.to_json_dict(), f, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise ManifestWriteError(f"Cannot write manifest {path}: {e}") from e

    logger.debug(f"Saved manifest with {len(manifest.generated_views)} views to {path}")
    return path


# ============================================================================
# Run Lock
# ============================================================================


class ManifestLock:
    """Advisory lock serializing runs against one manifest.

    The lock file is created atomically with ``O_CREAT | O_EXCL`` and holds
    JSON metadata about the owning process. A lock is stale when its owner
    process on this host is gone, or when the file is still empty or
    unparseable ``EMPTY_LOCK_GRACE`` seconds after its last write (the owner
    crashed between creating and filling it).

    Stale removal re-reads the lock just before unlinking and leaves it alone
    if it changed, so a lock another waiter has already taken over survives.
    The window between that re-read and the unlink itself remains; two
    waiters racing on the same stale lock within it can both proceed.

    Example:
        >>> with ManifestLock(Path("app"), timeout=10):
        ...     pass
    """

    POLL_INTERVAL = 0.2
    EMPTY_LOCK_GRACE = 5.0

    def __init__(
        self,
        directory: str | Path,
        timeout: float | None = 30.0,
        filename: str = MANIFEST_FILENAME,
    ) -> None:
        self.lock_file = manifest_path(directory, filename + LOCK_SUFFIX)
        self.timeout = timeout
        self._acquired = False

    @property
    def acquired(self) -> bool:
        return self._acquired

    def _read_owner(self) -> dict | None:
        try:
            with open(self.lock_file, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError):
            return None

    @staticmethod
    def _is_process_alive(pid: int) -> bool:
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            # Exists, owned by someone else
            return True
        return True

    def _lock_state(self) -> tuple[int, int, dict | None] | None:
        """Inode, mtime and owner of the current lock file, or None if absent."""
        try:
            st = self.lock_file.stat()
        except OSError:
            return None
        return st.st_ino, st.st_mtime_ns, self._read_owner()

    def _is_stale(self, state: tuple[int, int, dict | None]) -> bool:
        _, mtime_ns, owner = state
        if not isinstance(owner, dict):
            # Empty or garbled: owner died between create and write
            return time.time() - mtime_ns / 1e9 >= self.EMPTY_LOCK_GRACE
        pid = owner.get("pid")
        if owner.get("hostname") != socket.gethostname() or not isinstance(pid, int):
            return False
        return not self._is_process_alive(pid)

    def _try_create(self) -> bool:
        try:
            fd = os.open(self.lock_file, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            return False
        except OSError as e:
            raise LockError(f"Cannot create lock file {self.lock_file}: {e}") from e

        metadata = {
            "pid": os.getpid(),
            "hostname": socket.gethostname(),
            "timestamp": time.time(),
        }
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(metadata, f)
        return True

    def acquire(self) -> None:
        """Acquire the lock, waiting up to ``timeout`` seconds.

        Raises:
            LockTimeout: If the lock is still held when the timeout expires.
            LockError: If the lock file cannot be created.
        """
        if self._acquired:
            return

        self.lock_file.parent.mkdir(parents=True, exist_ok=True)
        start = time.monotonic()

        while not self._try_create():
            state = self._lock_state()
            if state is None:
                # Released since the create attempt
                continue
            if self._is_stale(state):
                # Another waiter may already have replaced the judged lock
                if self._lock_state() == state:
                    logger.info(f"Removing stale lock {self.lock_file}")
                    self.lock_file.unlink(missing_ok=True)
                continue

            if self.timeout is not None and time.monotonic() - start >= self.timeout:
                raise LockTimeout(
                    f"Another run holds {self.lock_file} "
                    f"(waited {self.timeout}s)"
                )
            time.sleep(self.POLL_INTERVAL)

        self._acquired = True
        logger.debug(f"Acquired lock {self.lock_file}")

    def release(self) -> None:
        """Release the lock if held."""
        if not self._acquired:
            return
        self.lock_file.unlink(missing_ok=True)
        self._acquired = False
        logger.debug(f"Released lock {self.lock_file}")

    def __enter__(self) -> "ManifestLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

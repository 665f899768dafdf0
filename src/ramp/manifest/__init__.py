"""Generation manifest: models, persistence and run locking.

Usage:
    from ramp.manifest import load_manifest, save_manifest, ManifestLock
    from ramp.manifest import MigrationManifest, GeneratedView, ViewType
"""

from ramp.manifest.models import (
    MANIFEST_VERSION,
    GeneratedView,
    MigrationManifest,
    ViewType,
)
from ramp.manifest.store import (
    MANIFEST_FILENAME,
    LockError,
    LockTimeout,
    ManifestLock,
    ManifestWriteError,
    load_manifest,
    manifest_path,
    save_manifest,
)

__all__ = [
    "MANIFEST_VERSION",
    "MANIFEST_FILENAME",
    "GeneratedView",
    "MigrationManifest",
    "ViewType",
    "load_manifest",
    "save_manifest",
    "manifest_path",
    "ManifestLock",
    "ManifestWriteError",
    "LockError",
    "LockTimeout",
]

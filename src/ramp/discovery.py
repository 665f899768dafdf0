"""Project auto-discovery.

Walks up from a starting directory to locate the Prisma schema and the
Remix application directory. Both lookups return ``None`` when nothing is
found; callers decide whether that is fatal.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SCHEMA_RELATIVE_PATH = Path("prisma") / "schema.prisma"
REMIX_DEPENDENCY = "@remix-run/react"
APP_DIRNAME = "app"


class DiscoveryError(Exception):
    """Raised when no schema file or application root can be located."""

    pass


def _walk_up(start_dir: Path):
    current = Path(start_dir).resolve()
    yield current
    yield from current.parents


def find_schema_file(start_dir: str | Path) -> Path | None:
    """Find ``prisma/schema.prisma`` in *start_dir* or any parent.

    Returns:
        Path to the schema file, or ``None``.
    """
    for directory in _walk_up(Path(start_dir)):
        candidate = directory / SCHEMA_RELATIVE_PATH
        if candidate.is_file():
            logger.debug(f"Found schema at {candidate}")
            return candidate
    return None


def _is_remix_package(package_json: Path) -> bool:
    try:
        with open(package_json, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return False
    dependencies = data.get("dependencies") if isinstance(data, dict) else None
    return isinstance(dependencies, dict) and REMIX_DEPENDENCY in dependencies


def find_app_root(start_dir: str | Path) -> Path | None:
    """Find the Remix ``app`` directory of the enclosing project.

    A project is recognized by a ``package.json`` that lists
    ``@remix-run/react`` among its dependencies.

    Returns:
        ``<project>/app``, or ``None``.
    """
    for directory in _walk_up(Path(start_dir)):
        package_json = directory / "package.json"
        if package_json.is_file() and _is_remix_package(package_json):
            logger.debug(f"Found Remix project at {directory}")
            return directory / APP_DIRNAME
    return None

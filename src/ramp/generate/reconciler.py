"""Change detection between renderings and the previous manifest.

For every (model, view kind) pair the rendering is fingerprinted and
compared with the fingerprint stored in the previous manifest. Only pairs
whose fingerprint is new or different are written. A fresh manifest
covering exactly the current models is built alongside.

``reconcile`` performs no I/O beyond calling the render collaborator, so
every pair is rendered before any file is touched: a failing template
leaves the output tree unchanged.

Usage:
    from ramp.generate.reconciler import generate_views

    result = generate_views(models, output_dir, render, previous_manifest)
    save_manifest(output_dir, result.manifest)
"""

import hashlib
import logging
from collections.abc import Callable, Sequence
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from ramp.manifest.models import GeneratedView, MigrationManifest, ViewType
from ramp.schema.models import Model

logger = logging.getLogger(__name__)

ROUTES_DIR = "routes"
DEFAULT_EXTENSION = "tsx"

RenderFn = Callable[[ViewType, Model], str]


class ViewWriteError(Exception):
    """Raised when a generated view cannot be written to disk."""

    pass


class ViewStatus(str, Enum):
    CHANGED = "changed"
    UNCHANGED = "unchanged"


class RenderedView(BaseModel):
    """One rendered artifact and its write decision."""

    model: str
    view_type: ViewType
    path: str  # relative to the output root
    content: str
    hash: str
    status: ViewStatus


class ReconcileResult(BaseModel):
    """Outcome of a reconciliation run.

    Example:
        >>> result = ReconcileResult(manifest=MigrationManifest())
        >>> result.changed_count
        0
    """

    views: list[RenderedView] = Field(default_factory=list)
    manifest: MigrationManifest
    written: list[str] = Field(default_factory=list)

    @property
    def changed(self) -> list[RenderedView]:
        return [v for v in self.views if v.status is ViewStatus.CHANGED]

    @property
    def unchanged(self) -> list[RenderedView]:
        return [v for v in self.views if v.status is ViewStatus.UNCHANGED]

    @property
    def changed_count(self) -> int:
        return len(self.changed)

    @property
    def unchanged_count(self) -> int:
        return len(self.unchanged)


def fingerprint(content: str) -> str:
    """SHA-256 hex digest of *content* encoded as UTF-8."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def view_path(
    model_name: str, view_type: ViewType, extension: str = DEFAULT_EXTENSION
) -> Path:
    """Relative artifact path: ``routes/<model>/<kind>.<extension>``, lowercased."""
    return Path(ROUTES_DIR) / model_name.lower() / f"{view_type.value.lower()}.{extension}"


def reconcile(
    models: Sequence[Model],
    previous: MigrationManifest,
    render: RenderFn,
    extension: str = DEFAULT_EXTENSION,
) -> ReconcileResult:
    """Render every view and decide which ones need writing.

    Args:
        models: Parsed models, in schema order.
        previous: Manifest loaded at the start of the run.
        render: Collaborator producing content for a (view kind, model).
        extension: Artifact file extension, without the dot.

    Returns:
        ``ReconcileResult`` with one ``RenderedView`` per (model, view kind)
        and the replacement manifest.

    Raises:
        Whatever *render* raises (``TemplateReadError`` for the default
        renderer). Nothing has been written at that point.
    """
    new_manifest = MigrationManifest(version=previous.version)
    views: list[RenderedView] = []

    for model in models:
        for view_type in ViewType:
            content = render(view_type, model)
            new_hash = fingerprint(content)

            existing = previous.find(model.name, view_type)
            if existing is None or existing.hash != new_hash:
                status = ViewStatus.CHANGED
                logger.info(f"View {model.name}{view_type.value} updated")
            else:
                status = ViewStatus.UNCHANGED
                logger.info(f"View {model.name}{view_type.value} unchanged")

            views.append(
                RenderedView(
                    model=model.name,
                    view_type=view_type,
                    path=view_path(model.name, view_type, extension).as_posix(),
                    content=content,
                    hash=new_hash,
                    status=status,
                )
            )
            new_manifest.generated_views.append(
                GeneratedView(model=model.name, view_type=view_type.value, hash=new_hash)
            )

    return ReconcileResult(views=views, manifest=new_manifest)


def write_views(result: ReconcileResult, output_dir: Path) -> list[Path]:
    """Write the changed views of *result* under *output_dir*.

    Args:
        result: Output of ``reconcile``.
        output_dir: Output root.

    Returns:
        Absolute paths written, in generation order.

    Raises:
        ViewWriteError: If a directory or file cannot be created. Views
            written before the failure stay on disk.
    """
    written: list[Path] = []
    for view in result.changed:
        file_path = output_dir / view.path
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(view.content, encoding="utf-8")
        except OSError as e:
            raise ViewWriteError(f"Cannot write {file_path}: {e}") from e
        written.append(file_path)
        result.written.append(view.path)

    logger.debug(f"Wrote {len(written)} views under {output_dir}")
    return written


def generate_views(
    models: Sequence[Model],
    output_dir: Path,
    render: RenderFn,
    previous: MigrationManifest,
    extension: str = DEFAULT_EXTENSION,
    dry_run: bool = False,
) -> ReconcileResult:
    """Reconcile and write changed views.

    Args:
        models: Parsed models, in schema order.
        output_dir: Output root.
        render: Render collaborator.
        previous: Manifest loaded at the start of the run.
        extension: Artifact file extension.
        dry_run: Decide but do not write.

    Returns:
        ``ReconcileResult``; ``written`` lists the relative paths written.
    """
    result = reconcile(models, previous, render, extension)
    if not dry_run:
        write_views(result, Path(output_dir))
    return result

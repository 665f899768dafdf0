"""End-to-end generation run.

Lifecycle: lock, load manifest (once), parse schema, reconcile, write
changed views, save manifest (once), unlock.
"""

import logging
from pathlib import Path

from ramp.generate.reconciler import DEFAULT_EXTENSION, ReconcileResult, generate_views
from ramp.generate.templates import TemplateRenderer
from ramp.manifest.store import (
    MANIFEST_FILENAME,
    ManifestLock,
    load_manifest,
    save_manifest,
)
from ramp.schema.parser import parse_schema

logger = logging.getLogger(__name__)


def run_generation(
    schema_path: str | Path,
    output_dir: str | Path,
    templates_dir: str | Path | None = None,
    extension: str = DEFAULT_EXTENSION,
    manifest_file: str = MANIFEST_FILENAME,
    lock_timeout: float | None = 30.0,
    dry_run: bool = False,
) -> ReconcileResult:
    """Generate views for every model in *schema_path*.

    Args:
        schema_path: Schema file to parse.
        output_dir: Output root (artifacts and manifest live here).
        templates_dir: Template directory; packaged templates when ``None``.
        extension: Artifact file extension.
        manifest_file: Manifest file name inside *output_dir*.
        lock_timeout: Seconds to wait for a concurrent run to finish.
        dry_run: Report decisions without writing views or the manifest.

    Returns:
        ``ReconcileResult`` of the run.

    Raises:
        SchemaReadError: Schema file unreadable.
        SchemaSyntaxError: Malformed field line.
        TemplateReadError: Missing, invalid or failing template.
        ViewWriteError: A view could not be written; the manifest is not saved.
        ManifestWriteError: Manifest could not be saved.
        LockTimeout: Another run holds the manifest lock.
    """
    output_dir = Path(output_dir)
    render = TemplateRenderer(templates_dir)

    with ManifestLock(output_dir, timeout=lock_timeout, filename=manifest_file):
        previous = load_manifest(output_dir, manifest_file)
        models = parse_schema(schema_path)

        result = generate_views(
            models,
            output_dir,
            render,
            previous,
            extension=extension,
            dry_run=dry_run,
        )

        if dry_run:
            logger.info("Dry run: manifest not saved")
        else:
            save_manifest(output_dir, result.manifest, manifest_file)

    return result

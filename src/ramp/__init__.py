"""ramp: incremental admin view generator for Remix apps.

Parses a Prisma schema, renders List/Create/Update/Delete/Search views for
every model, and rewrites only the views whose rendering changed since the
last run, tracked in a content-hash manifest.

Usage:
    from ramp import parse_schema, run_generation
    from ramp import load_manifest, save_manifest, MigrationManifest
    from ramp import reconcile, TemplateRenderer
"""

__version__ = "0.1.0"

# Schema
from ramp.schema.models import Field, Model, Relation, RelationType
from ramp.schema.parser import (
    SchemaReadError,
    SchemaSyntaxError,
    parse_schema,
    parse_schema_text,
)
from ramp.schema.relations import classify_relation

# Manifest
from ramp.manifest.models import GeneratedView, MigrationManifest, ViewType
from ramp.manifest.store import (
    ManifestLock,
    ManifestWriteError,
    load_manifest,
    save_manifest,
)

# Generation
from ramp.generate.reconciler import (
    ReconcileResult,
    ViewWriteError,
    generate_views,
    reconcile,
)
from ramp.generate.runner import run_generation
from ramp.generate.templates import TemplateReadError, TemplateRenderer

# Config / discovery
from ramp.config.loader import load_config
from ramp.discovery import DiscoveryError, find_app_root, find_schema_file

__all__ = [
    # Schema
    "parse_schema",
    "parse_schema_text",
    "classify_relation",
    "Model",
    "Field",
    "Relation",
    "RelationType",
    "SchemaReadError",
    "SchemaSyntaxError",
    # Manifest
    "MigrationManifest",
    "GeneratedView",
    "ViewType",
    "load_manifest",
    "save_manifest",
    "ManifestLock",
    "ManifestWriteError",
    # Generation
    "run_generation",
    "reconcile",
    "generate_views",
    "ReconcileResult",
    "TemplateRenderer",
    "TemplateReadError",
    "ViewWriteError",
    # Config / discovery
    "load_config",
    "find_schema_file",
    "find_app_root",
    "DiscoveryError",
]

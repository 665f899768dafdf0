"""View generation: template rendering, reconciliation and the run pipeline.

Usage:
    from ramp.generate import run_generation
    from ramp.generate import reconcile, generate_views, TemplateRenderer
"""

from ramp.generate.reconciler import (
    ReconcileResult,
    RenderedView,
    ViewStatus,
    ViewWriteError,
    fingerprint,
    generate_views,
    reconcile,
    view_path,
    write_views,
)
from ramp.generate.runner import run_generation
from ramp.generate.templates import TemplateReadError, TemplateRenderer

__all__ = [
    "run_generation",
    "reconcile",
    "generate_views",
    "write_views",
    "fingerprint",
    "view_path",
    "ReconcileResult",
    "RenderedView",
    "ViewStatus",
    "ViewWriteError",
    "TemplateRenderer",
    "TemplateReadError",
]

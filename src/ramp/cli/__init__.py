"""CLI for generating admin views from a Prisma schema.

Usage:
    ramp generate
    ramp generate --schema prisma/schema.prisma --output app --templates my-templates
    ramp generate --dry-run
    ramp models
    ramp status --output app

Commands:
    generate  - Generate or update admin views from the schema
    models    - List models and fields parsed from the schema
    status    - Show views tracked in the manifest
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ramp.config.loader import load_config
from ramp.config.models import GeneratorConfig
from ramp.discovery import DiscoveryError, find_app_root, find_schema_file
from ramp.generate.reconciler import ViewStatus, ViewWriteError
from ramp.generate.runner import run_generation
from ramp.generate.templates import TemplateReadError
from ramp.manifest.store import (
    LockError,
    ManifestWriteError,
    load_manifest,
    manifest_path,
)
from ramp.schema.parser import SchemaReadError, SchemaSyntaxError, parse_schema

console = Console()


# ============================================================================
# Path resolution (flag > ramp.toml > auto-discovery)
# ============================================================================


def _load_config(args: argparse.Namespace) -> GeneratorConfig:
    config_path = getattr(args, "config", None)
    return load_config(Path(config_path) if config_path else None)


def _resolve_schema(args: argparse.Namespace, config: GeneratorConfig) -> Path:
    """Resolve the schema path.

    Raises:
        DiscoveryError: If no schema is given and none is found.
    """
    explicit = getattr(args, "schema", None) or config.generator.schema_path
    if explicit:
        return Path(explicit)

    found = find_schema_file(Path.cwd())
    if found is None:
        raise DiscoveryError(
            "Could not find prisma/schema.prisma. "
            "Run inside a Prisma project or pass --schema."
        )
    return found


def _resolve_output(args: argparse.Namespace, config: GeneratorConfig) -> Path:
    """Resolve the output root.

    Raises:
        DiscoveryError: If no output is given and no Remix app is found.
    """
    explicit = getattr(args, "output", None) or config.generator.output
    if explicit:
        return Path(explicit)

    found = find_app_root(Path.cwd())
    if found is None:
        raise DiscoveryError(
            "Could not find the Remix app directory. "
            "Run inside a Remix project or pass --output."
        )
    return found


# ============================================================================
# Command implementations
# ============================================================================


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate or update views for every model in the schema.

    Args:
        args: Parsed CLI arguments.

    Returns:
        0 on success, 1 on any fatal failure.
    """
    try:
        config = _load_config(args)
        schema_path = _resolve_schema(args, config)
        output_dir = _resolve_output(args, config)
    except (DiscoveryError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    templates_dir = args.templates or config.generator.templates
    extension = args.extension or config.generator.extension

    console.print(f"Schema: [cyan]{schema_path}[/cyan]", style="dim")
    console.print(f"Output: [cyan]{output_dir}[/cyan]", style="dim")

    try:
        result = run_generation(
            schema_path,
            output_dir,
            templates_dir=templates_dir,
            extension=extension,
            manifest_file=config.manifest.file,
            lock_timeout=config.manifest.lock_timeout,
            dry_run=args.dry_run,
        )
    except (
        SchemaReadError,
        SchemaSyntaxError,
        TemplateReadError,
        ViewWriteError,
        ManifestWriteError,
        LockError,
    ) as e:
        console.print(f"[bold red]x[/bold red] {escape(str(e))}")
        return 1

    for view in result.views:
        if view.status is ViewStatus.CHANGED:
            verb = "would update" if args.dry_run else "updated"
            console.print(
                f"  [green]{verb}[/green]  {view.model}{view.view_type.value} "
                f"[dim]{view.path}[/dim]"
            )
        else:
            console.print(f"  [dim]unchanged  {view.model}{view.view_type.value}[/dim]")

    console.print()
    if args.dry_run:
        console.print(
            f"[yellow]Dry run:[/yellow] {result.changed_count} to write, "
            f"{result.unchanged_count} unchanged"
        )
    else:
        console.print(
            f"[bold green]v[/bold green] Generation complete: "
            f"{result.changed_count} written, {result.unchanged_count} unchanged"
        )
    return 0


def cmd_models(args: argparse.Namespace) -> int:
    """List models parsed from the schema.

    Reads only the schema -- no files are written.

    Returns:
        0 on success, 1 if the schema cannot be found or parsed.
    """
    try:
        config = _load_config(args)
        schema_path = _resolve_schema(args, config)
        models = parse_schema(schema_path)
    except (DiscoveryError, SchemaReadError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    if not models:
        console.print(f"[yellow]No models found in {schema_path}[/yellow]")
        return 0

    for model in models:
        table = Table(title=model.name, show_header=True, header_style="bold")
        table.add_column("Field")
        table.add_column("Type")
        table.add_column("Required")
        table.add_column("Unique")
        table.add_column("Default")
        table.add_column("Relation")

        for field in model.fields:
            type_label = f"{field.type}[]" if field.is_list else field.type
            relation = ""
            if field.relation is not None:
                relation = (
                    f"{field.relation.type.value} -> {field.relation.related_model}"
                )
            table.add_row(
                field.name,
                type_label,
                "yes" if field.is_required else "",
                "yes" if field.is_unique else "",
                field.default or "",
                relation,
            )
        console.print(table)

    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Show views tracked in the manifest.

    Returns:
        0 always unless the output root cannot be resolved.
    """
    try:
        config = _load_config(args)
        output_dir = _resolve_output(args, config)
    except (DiscoveryError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    path = manifest_path(output_dir, config.manifest.file)
    if not path.exists():
        console.print(f"[yellow]No manifest at {path}.[/yellow]")
        console.print("[dim]Run[/dim] [cyan]ramp generate[/cyan] [dim]first.[/dim]")
        return 0

    manifest = load_manifest(output_dir, config.manifest.file)

    table = Table(
        title=f"Manifest v{manifest.version}", show_header=True, header_style="bold"
    )
    table.add_column("Model")
    table.add_column("View")
    table.add_column("Hash", style="dim")

    for view in manifest.generated_views:
        table.add_row(view.model, view.view_type, view.hash[:12])

    console.print(table)
    console.print(f"\n{len(manifest.generated_views)} views tracked in {path}")
    return 0


# ============================================================================
# Main entry point
# ============================================================================


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def main() -> int:
    """Main CLI entry point.

    Parses command line arguments and dispatches to appropriate handler.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="ramp",
        description="Generate admin views for a Remix app from its Prisma schema",
    )

    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to ramp.toml (default: ./ramp.toml if present)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # generate command
    p_generate = subparsers.add_parser(
        "generate",
        help="Generate or update admin views from the schema",
    )
    p_generate.add_argument(
        "--schema",
        "-s",
        default=None,
        help="Prisma schema file path (default: auto-discovered)",
    )
    p_generate.add_argument(
        "--output",
        "-o",
        default=None,
        help="Output directory for generated views (default: Remix app directory)",
    )
    p_generate.add_argument(
        "--templates",
        "-t",
        default=None,
        help="Jinja2 templates directory (default: bundled templates)",
    )
    p_generate.add_argument(
        "--extension",
        default=None,
        help="File extension of generated views (default: tsx)",
    )
    p_generate.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be written without making changes",
    )
    p_generate.set_defaults(func=cmd_generate)

    # models command
    p_models = subparsers.add_parser(
        "models",
        help="List models and fields parsed from the schema",
    )
    p_models.add_argument(
        "--schema",
        "-s",
        default=None,
        help="Prisma schema file path (default: auto-discovered)",
    )
    p_models.set_defaults(func=cmd_models)

    # status command
    p_status = subparsers.add_parser(
        "status",
        help="Show views tracked in the manifest",
    )
    p_status.add_argument(
        "--output",
        "-o",
        default=None,
        help="Output directory holding the manifest (default: Remix app directory)",
    )
    p_status.set_defaults(func=cmd_status)

    args = parser.parse_args()
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

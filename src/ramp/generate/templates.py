"""Jinja2 template rendering for generated views.

Each view kind has one template, ``<Kind>.j2`` (``List.j2``, ``Create.j2``,
...), looked up in a templates directory. Templates receive a single
context value, ``model``, plus the string filters registered below.

Usage:
    from ramp.generate.templates import TemplateRenderer

    render = TemplateRenderer()  # packaged default templates
    content = render(ViewType.LIST, model)
"""

import re
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
    TemplateSyntaxError,
)

from ramp.manifest.models import ViewType
from ramp.schema.models import Field, Model

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_SUFFIX = ".j2"

# Prisma scalar -> HTML input type
_INPUT_TYPES = {
    "Int": "number",
    "BigInt": "number",
    "Float": "number",
    "Decimal": "number",
    "Boolean": "checkbox",
    "DateTime": "datetime-local",
}


class TemplateReadError(Exception):
    """Raised when a view template is missing, invalid or fails to render."""

    pass


# ============================================================================
# Template filters
# ============================================================================


def camel_case(value: str) -> str:
    """Convert PascalCase or snake_case to camelCase."""
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", value)
    parts = value.replace("-", "_").split("_")
    return parts[0].lower() + "".join(p.capitalize() for p in parts[1:])


def snake_case(value: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", value)
    s2 = re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1)
    return s2.lower()


def kebab_case(value: str) -> str:
    """Convert PascalCase or camelCase to kebab-case."""
    return snake_case(value).replace("_", "-")


def plural(value: str) -> str:
    """Naive English plural."""
    if value.endswith(("s", "x", "z", "ch", "sh")):
        return value + "es"
    if value.endswith("y") and len(value) > 1 and value[-2] not in "aeiou":
        return value[:-1] + "ies"
    return value + "s"


def input_type(field: Field) -> str:
    """HTML input type for a scalar field."""
    return _INPUT_TYPES.get(field.type, "text")


def create_environment(templates_dir: Path) -> Environment:
    """Create the Jinja2 environment with view filters registered."""
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["camel_case"] = camel_case
    env.filters["snake_case"] = snake_case
    env.filters["kebab_case"] = kebab_case
    env.filters["plural"] = plural
    env.filters["input_type"] = input_type
    return env


# ============================================================================
# Renderer
# ============================================================================


class TemplateRenderer:
    """Render view templates from a directory.

    Instances are callables matching the reconciler's render collaborator:
    ``render(view_type, model) -> str``.
    """

    def __init__(self, templates_dir: str | Path | None = None) -> None:
        self.templates_dir = (
            Path(templates_dir) if templates_dir is not None else DEFAULT_TEMPLATES_DIR
        )
        self.env = create_environment(self.templates_dir)

    @staticmethod
    def template_name(view_type: ViewType) -> str:
        return f"{view_type.value}{TEMPLATE_SUFFIX}"

    def __call__(self, view_type: ViewType, model: Model) -> str:
        """Render the template for *view_type* with *model* as context.

        Raises:
            TemplateReadError: If the template file is missing, invalid, or
                fails while rendering (e.g. an undefined attribute).
        """
        name = self.template_name(view_type)
        try:
            template = self.env.get_template(name)
        except TemplateNotFound as e:
            raise TemplateReadError(
                f"Template {name} not found in {self.templates_dir}"
            ) from e
        except TemplateSyntaxError as e:
            raise TemplateReadError(
                f"Template {name} is invalid (line {e.lineno}): {e.message}"
            ) from e
        try:
            return template.render(model=model)
        except TemplateError as e:
            raise TemplateReadError(
                f"Template {name} failed for model {model.name}: {e}"
            ) from e

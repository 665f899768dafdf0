"""Line-oriented Prisma schema parser.

Turns schema source text into an ordered list of ``Model`` entities in a
single forward pass. Only ``model`` blocks are understood; datasource,
generator and enum blocks are skipped because no model is active while
their lines are read.

Usage:
    from ramp.schema.parser import parse_schema

    models = parse_schema("prisma/schema.prisma")
    for model in models:
        print(model.name, [f.name for f in model.fields])
"""

import logging
import re
from pathlib import Path

from ramp.schema.models import Field, Model, Relation
from ramp.schema.relations import classify_relation

logger = logging.getLogger(__name__)

MODEL_KEYWORD = "model"
OPTIONAL_MARKER = "?"
LIST_MARKER = "[]"
UNIQUE_ATTRIBUTE = "@unique"
DEFAULT_ATTRIBUTE = "@default"
RELATION_ATTRIBUTE = "@relation"

# First type marker only; "Post[]?" keeps its trailing "?"
_TYPE_MARKER_RE = re.compile(r"\?|\[\]")


class SchemaReadError(Exception):
    """Raised when the schema file cannot be read or decoded."""

    pass


class SchemaSyntaxError(ValueError):
    """Raised when a field declaration line cannot be split into name and type."""

    def __init__(self, line: str, line_number: int | None = None) -> None:
        self.line = line
        self.line_number = line_number
        where = f"line {line_number}" if line_number is not None else "field line"
        super().__init__(f"Malformed field declaration at {where}: {line!r}")


# ============================================================================
# Field parsing
# ============================================================================


def normalize_type(raw_type: str) -> str:
    """Strip the first optional or list marker from a raw type token.

    Only one marker is removed, so a token carrying both keeps the second.

    Examples:
        >>> normalize_type("String?")
        'String'
        >>> normalize_type("Post[]")
        'Post'
        >>> normalize_type("Post[]?")
        'Post?'
    """
    return _TYPE_MARKER_RE.sub("", raw_type, count=1)


def _extract_parenthesized(text: str) -> str | None:
    """Return the balanced ``(...)`` argument at the start of *text*."""
    if not text.startswith("("):
        return None

    depth = 0
    for index, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return text[1:index]
    return None


def attribute_argument(modifiers: list[str], attribute: str) -> str | None:
    """Extract the argument text of a field attribute.

    Modifier tokens were produced by whitespace splitting, so arguments
    containing spaces are spread over several tokens. They are re-joined
    from the attribute's token onwards before the balanced argument is
    taken.

    Args:
        modifiers: Tokens following the field's type.
        attribute: Attribute name including ``@``, e.g. ``"@default"``.

    Returns:
        The text between the attribute's parentheses, or ``None`` when the
        attribute is absent or has no argument list.

    Example:
        >>> attribute_argument(["@default(now())"], "@default")
        'now()'
    """
    for index, token in enumerate(modifiers):
        if token.startswith(attribute):
            remainder = " ".join(modifiers[index:])[len(attribute):]
            return _extract_parenthesized(remainder)
    return None


def _parse_relation(raw_type: str, is_list: bool, arguments: str) -> Relation:
    parts = [part.strip() for part in arguments.split(",")]
    name = parts[0].strip('"')
    mapping = parts[1] if len(parts) > 1 else None

    related_model = raw_type.replace(LIST_MARKER, "").replace(OPTIONAL_MARKER, "")
    return Relation(
        name=name,
        type=classify_relation(is_list, mapping),
        related_model=related_model,
    )


def parse_field(line: str, line_number: int | None = None) -> Field:
    """Parse one field declaration line.

    Args:
        line: Stripped declaration, e.g. ``"published Boolean? @default(false)"``.
        line_number: 1-based position in the source, used in error messages.

    Returns:
        ``Field`` with markers, attributes and relation resolved.

    Raises:
        SchemaSyntaxError: If the line has fewer than two tokens.
    """
    tokens = line.split()
    if len(tokens) < 2:
        raise SchemaSyntaxError(line, line_number)

    name, raw_type, *modifiers = tokens
    is_list = LIST_MARKER in raw_type

    field = Field(
        name=name,
        type=normalize_type(raw_type),
        is_required=OPTIONAL_MARKER not in raw_type,
        is_list=is_list,
        is_unique=UNIQUE_ATTRIBUTE in modifiers,
        default=attribute_argument(modifiers, DEFAULT_ATTRIBUTE),
    )

    relation_arguments = attribute_argument(modifiers, RELATION_ATTRIBUTE)
    if relation_arguments is not None:
        field.relation = _parse_relation(raw_type, is_list, relation_arguments)

    return field


# ============================================================================
# Schema parsing
# ============================================================================


def _is_model_header(line: str) -> bool:
    tokens = line.split(maxsplit=1)
    return bool(tokens) and tokens[0] == MODEL_KEYWORD


def _is_ignored_line(line: str) -> bool:
    # Comments and block attributes (@@id, @@index, ...) are not fields
    return line.startswith("//") or line.startswith("@@")


def parse_schema_text(text: str) -> list[Model]:
    """Parse schema source text into models, in declaration order.

    Args:
        text: Full schema source.

    Returns:
        List of ``Model``. A model left open at end of input is still
        included.

    Raises:
        SchemaSyntaxError: If a field line inside a model is malformed.

    Example:
        >>> models = parse_schema_text("model Post {\\n  id Int @id\\n}\\n")
        >>> models[0].name, models[0].fields[0].name
        ('Post', 'id')
    """
    models: list[Model] = []
    current: Model | None = None

    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()

        if _is_model_header(line):
            if current is not None:
                models.append(current)
            tokens = line.split()
            if len(tokens) < 2:
                raise SchemaSyntaxError(line, line_number)
            current = Model(name=tokens[1])
        elif current is None or not line:
            continue
        elif "{" in line:
            continue
        elif line == "}":
            models.append(current)
            current = None
        elif _is_ignored_line(line):
            continue
        else:
            current.fields.append(parse_field(line, line_number))

    if current is not None:
        logger.debug(f"Model '{current.name}' not closed before end of schema")
        models.append(current)

    return models


def parse_schema(schema_path: str | Path) -> list[Model]:
    """Read and parse a schema file.

    Args:
        schema_path: Path to the ``schema.prisma`` file.

    Returns:
        List of ``Model`` in declaration order.

    Raises:
        SchemaReadError: If the file cannot be read or is not valid UTF-8.
        SchemaSyntaxError: If a field line inside a model is malformed.
    """
    path = Path(schema_path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SchemaReadError(f"Cannot read schema file {path}: {e}") from e

    models = parse_schema_text(text)
    logger.info(f"Parsed {len(models)} models from {path}")
    return models

"""Schema parsing and relation classification.

Provides the line-oriented schema parser (``parse_schema``,
``parse_schema_text``), the relation cardinality classifier
(``classify_relation``) and the parsed entity models.

Usage:
    from ramp.schema import parse_schema, classify_relation
    from ramp.schema import Model, Field, Relation, RelationType
"""

from ramp.schema.models import Field, Model, Relation, RelationType
from ramp.schema.parser import (
    SchemaReadError,
    SchemaSyntaxError,
    parse_field,
    parse_schema,
    parse_schema_text,
)
from ramp.schema.relations import classify_relation

__all__ = [
    "parse_schema",
    "parse_schema_text",
    "parse_field",
    "SchemaReadError",
    "SchemaSyntaxError",
    "classify_relation",
    "Model",
    "Field",
    "Relation",
    "RelationType",
]

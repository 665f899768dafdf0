"""Pydantic models for parsed schema entities.

This module contains schema-domain models:
- Relation cardinality: RelationType
- Parsed entities: Relation, Field, Model

These are transient: they are rebuilt from the schema text on every run
and never persisted. Persisted state lives in ramp.manifest.models.
"""

from enum import Enum

from pydantic import BaseModel


# ============================================================================
# Relation Models
# ============================================================================


class RelationType(str, Enum):
    """Cardinality of a relation field."""

    ONE_TO_ONE = "oneToOne"
    ONE_TO_MANY = "oneToMany"
    MANY_TO_ONE = "manyToOne"
    MANY_TO_MANY = "manyToMany"


class Relation(BaseModel):
    """Reference from a field to another model.

    Example:
        >>> rel = Relation(name="UserPosts", type=RelationType.ONE_TO_ONE, related_model="User")
        >>> rel.type.value
        'oneToOne'
    """

    name: str
    type: RelationType
    related_model: str


# ============================================================================
# Schema Entity Models
# ============================================================================


class Field(BaseModel):
    """One attribute of a model.

    Example:
        >>> field = Field(name="title", type="String")
        >>> field.is_required
        True
    """

    name: str
    type: str  # base type, marker stripped
    is_required: bool = True
    is_list: bool = False
    is_unique: bool = False
    default: str | None = None
    relation: Relation | None = None


class Model(BaseModel):
    """One schema entity with its fields in declaration order."""

    name: str
    fields: list[Field] = []

    def get_field(self, name: str) -> Field | None:
        """Return the last declared field called *name*, if any."""
        for field in reversed(self.fields):
            if field.name == name:
                return field
        return None

    @property
    def relation_fields(self) -> list[Field]:
        """Fields carrying a relation, in declaration order."""
        return [f for f in self.fields if f.relation is not None]

    @property
    def scalar_fields(self) -> list[Field]:
        """Fields without a relation, in declaration order."""
        return [f for f in self.fields if f.relation is None]

"""Tests for relation cardinality classification.

Verifies that classify_relation() maps (is_list, mapping) to the four
cardinalities and stays a pure function with no parser dependencies.
"""

import ast
from pathlib import Path

import pytest

from ramp.schema.models import RelationType
from ramp.schema.relations import classify_relation

RELATIONS_PATH = Path(__file__).parent.parent / "src" / "ramp" / "schema" / "relations.py"


class TestClassificationTable:
    """Every row of the classification table."""

    @pytest.mark.parametrize(
        ("is_list", "mapping", "expected"),
        [
            (True, "references: [id]", RelationType.ONE_TO_MANY),
            (True, "fields: [authorId]", RelationType.MANY_TO_MANY),
            (True, None, RelationType.MANY_TO_MANY),
            (False, "references: [id]", RelationType.MANY_TO_ONE),
            (False, "fields: [authorId]", RelationType.ONE_TO_ONE),
            (False, None, RelationType.ONE_TO_ONE),
        ],
    )
    def test_table(self, is_list: bool, mapping: str | None, expected: RelationType) -> None:
        assert classify_relation(is_list, mapping) is expected

    def test_mapping_defaults_to_absent(self) -> None:
        assert classify_relation(False) is RelationType.ONE_TO_ONE
        assert classify_relation(True) is RelationType.MANY_TO_MANY

    def test_references_substring_anywhere(self) -> None:
        """The keyword is matched as a substring, not a token."""
        assert classify_relation(False, "x, references:[id]") is RelationType.MANY_TO_ONE

    def test_empty_mapping_is_no_references(self) -> None:
        assert classify_relation(True, "") is RelationType.MANY_TO_MANY

    def test_values_are_camel_case_labels(self) -> None:
        assert {t.value for t in RelationType} == {
            "oneToOne",
            "oneToMany",
            "manyToOne",
            "manyToMany",
        }


class TestPurity:
    """relations.py has no I/O or parser imports."""

    def test_only_models_import(self) -> None:
        tree = ast.parse(RELATIONS_PATH.read_text())
        modules = set()
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                modules.update(alias.name for alias in node.names)
            elif isinstance(node, ast.ImportFrom) and node.module:
                modules.add(node.module)
        assert modules == {"ramp.schema.models"}

"""Relation cardinality classification.

Pure logic -- no I/O, no parsing, no external dependencies.

The side of a relation holding the foreign key carries the ``references``
clause, so its presence together with the field's list flag decides the
cardinality. This is a heuristic: hand-written schemas can be misclassified.

Usage:
    from ramp.schema.relations import classify_relation

    classify_relation(is_list=True, mapping="references: [id]")
    # RelationType.ONE_TO_MANY
"""

from ramp.schema.models import RelationType

REFERENCES_KEYWORD = "references"


def classify_relation(is_list: bool, mapping: str | None = None) -> RelationType:
    """Classify a relation field by shape and fields-mapping expression.

    Args:
        is_list: Whether the field's raw type carried the ``[]`` marker.
        mapping: Fields-mapping expression from the ``@relation`` arguments,
            or ``None`` when the attribute had a single argument.

    Returns:
        ``RelationType`` according to the table:

        - list + references -> ``ONE_TO_MANY``
        - list, no references -> ``MANY_TO_MANY``
        - single + references -> ``MANY_TO_ONE``
        - single, no references -> ``ONE_TO_ONE``

    Examples:
        >>> classify_relation(False, "references: [id]")
        <RelationType.MANY_TO_ONE: 'manyToOne'>

        >>> classify_relation(True)
        <RelationType.MANY_TO_MANY: 'manyToMany'>
    """
    has_references = mapping is not None and REFERENCES_KEYWORD in mapping

    if is_list:
        return RelationType.ONE_TO_MANY if has_references else RelationType.MANY_TO_MANY
    return RelationType.MANY_TO_ONE if has_references else RelationType.ONE_TO_ONE

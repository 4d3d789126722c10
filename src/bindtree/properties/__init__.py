"""
Bound value properties.

This package provides ``BoundValue``, which holds a literal or an expression
and resolves it against runtime data, and the tree walker that resolves
expression strings nested inside structured values.
"""

from bindtree.properties.value_expression import (
    BoundValue,
    DirectValue,
    ExpressionBacked,
    classify_text,
    escape_backticks,
)
from bindtree.properties.walker import walk

__all__ = [
    "BoundValue",
    "DirectValue",
    "ExpressionBacked",
    "classify_text",
    "escape_backticks",
    "walk",
]

"""
Tree walker resolving expression strings embedded in structured values.

The walker rewrites a tree in place, so callers hand it a deep clone of the
template. Each string leaf is treated as a bound value of its own: ``"=1+2"``
becomes the number ``3``, ``"Hello ${name}"`` is interpolated, and a leaf that
fails to evaluate keeps its original text. Structures produced by a leaf are
walked in turn. Nothing raised below the root ever reaches the caller.
"""

import logging
from typing import TYPE_CHECKING, Any

from bindtree.core.tree import (
    NodeType,
    children,
    node_type,
    replace_child,
)
from bindtree.core.types import TreeValue
from bindtree.expressions.evaluator import default_evaluator

if TYPE_CHECKING:
    from bindtree.expressions.evaluator import Evaluator

logger = logging.getLogger(__name__)

# Leaf results nested deeper than this keep their text (self-referencing data)
MAX_LEAF_DEPTH = 32


def walk(
    node: TreeValue,
    context: Any,
    evaluator: "Evaluator | None" = None,
    depth: int = 0,
) -> TreeValue:
    """
    Resolve every expression string nested inside a tree.

    A string at the root is returned unchanged: it is already the output of a
    direct resolution and must not be evaluated a second time.

    Params:
        node: Tree to rewrite; containers are modified in place
        context: Data context handed to the evaluator
        evaluator: Evaluator for leaf expressions, default evaluator if None
        depth: Number of leaf resolutions that produced this tree

    Returns:
        The rewritten tree (the same container objects for object/array roots)
    """
    if node_type(node) == NodeType.STRING:
        return node
    if evaluator is None:
        evaluator = default_evaluator
    return _inner_walk(node, context, evaluator, depth)


def _inner_walk(
    node: TreeValue, context: Any, evaluator: "Evaluator", depth: int
) -> TreeValue:
    kind = node_type(node)
    if kind in (NodeType.OBJECT, NodeType.ARRAY):
        # children() snapshots, so replacing while looping is safe
        for key, child in children(node):
            replace_child(node, key, _inner_walk(child, context, evaluator, depth))
        return node
    if kind == NodeType.STRING:
        return _resolve_leaf(node, context, evaluator, depth)
    return node


def _resolve_leaf(
    leaf: str, context: Any, evaluator: "Evaluator", depth: int
) -> TreeValue:
    from bindtree.properties.value_expression import (
        ExpressionBacked,
        classify_text,
        resolve_template,
    )

    if depth >= MAX_LEAF_DEPTH:
        logger.debug("Keeping literal %r, nested deeper than %d", leaf, MAX_LEAF_DEPTH)
        return leaf

    # Not marked as text: a structured result is walked like a literal tree
    template = ExpressionBacked(classify_text(leaf), from_text=False)
    value, error = resolve_template(template, context, evaluator, depth + 1)
    if error is not None:
        logger.debug("Keeping literal %r, evaluation failed: %s", leaf, error)
        return leaf
    return value

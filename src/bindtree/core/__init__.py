"""
Core bindtree components.

This package provides the tree abstraction the resolver and walker operate on,
together with shared type definitions.
"""

from bindtree.core.tree import (
    NodeType,
    children,
    deep_clone,
    from_native,
    is_container,
    node_type,
    replace_child,
)
from bindtree.core.types import ResolveResult, TreeValue

__all__ = [
    "NodeType",
    "ResolveResult",
    "TreeValue",
    "children",
    "deep_clone",
    "from_native",
    "is_container",
    "node_type",
    "replace_child",
]

"""
Tree abstraction over JSON-like Python values.

Trees are plain Python values: ``dict`` (object), ``list`` (array), ``str``,
numbers, ``bool`` and ``None``. This module supplies the primitives the
resolver and walker need on top of them:

    - ``from_native``: convert an arbitrary value (pydantic models, attrs and
      dataclass instances, tuples, mappings) into tree form.
    - ``deep_clone``: structural copy, never sharing containers with the input.
    - ``node_type``: variant inspection.
    - ``children`` / ``replace_child``: ordered child snapshot and in-place
      replacement for objects and arrays.
"""

import copy
import dataclasses
from collections.abc import Mapping
from enum import Enum
from typing import Any

import attrs
from pydantic import BaseModel

from bindtree.core.types import TreeValue


class NodeType(Enum):
    """Variants of a tree node."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    OTHER = "other"  # Opaque scalar leaf such as a datetime or Decimal


def node_type(node: Any) -> NodeType:
    """
    Classify a tree node.

    ``bool`` is checked before numbers since it subclasses ``int``.

    Params:
        node: Value in tree form

    Returns:
        The NodeType variant of the node
    """
    if node is None:
        return NodeType.NULL
    if isinstance(node, bool):
        return NodeType.BOOLEAN
    if isinstance(node, (int, float)):
        return NodeType.NUMBER
    if isinstance(node, str):
        return NodeType.STRING
    if isinstance(node, list):
        return NodeType.ARRAY
    if isinstance(node, dict):
        return NodeType.OBJECT
    return NodeType.OTHER


def is_container(node: Any) -> bool:
    """Check whether a node has children the walker descends into."""
    return node_type(node) in (NodeType.ARRAY, NodeType.OBJECT)


def from_native(value: Any) -> TreeValue:
    """
    Convert an arbitrary Python value into tree form.

    Containers are rebuilt, scalars are returned as they are. Structured
    objects are flattened into objects:
      - pydantic models through ``model_dump()``
      - attrs instances through ``attrs.asdict``
      - dataclass instances through ``dataclasses.asdict``
      - other mappings into ``dict`` with string keys
    Tuples and sets become arrays. Anything else is kept as an opaque leaf.

    Params:
        value: Native value to convert

    Returns:
        The value in tree form
    """
    if isinstance(value, (str, bool, int, float)) or value is None:
        return value
    if isinstance(value, BaseModel):
        return from_native(value.model_dump())
    if attrs.has(type(value)):
        return from_native(attrs.asdict(value, recurse=False))
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return from_native(
            {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
        )
    if isinstance(value, Mapping):
        return {str(key): from_native(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [from_native(item) for item in value]
    return value


def deep_clone(node: TreeValue) -> TreeValue:
    """
    Return a structural copy of a tree.

    Every container in the result is a new object, so rewriting the copy
    never reaches the original.

    Params:
        node: Tree to copy

    Returns:
        A deep copy of the tree
    """
    return copy.deepcopy(node)


def children(node: TreeValue) -> list[tuple[str | int, TreeValue]]:
    """
    Snapshot the ordered children of a container node.

    The returned list is owned by the caller, so the container can be
    rewritten while iterating it.

    Params:
        node: Object or array node

    Returns:
        ``(key, child)`` pairs for objects, ``(index, child)`` pairs for arrays,
        an empty list for leaves
    """
    kind = node_type(node)
    if kind == NodeType.OBJECT:
        return list(node.items())
    if kind == NodeType.ARRAY:
        return list(enumerate(node))
    return []


def replace_child(node: TreeValue, key: str | int, child: TreeValue) -> None:
    """
    Replace one child of a container node in place.

    Params:
        node: Object or array node to modify
        key: Property name or array index
        child: New child value

    Raises:
        TypeError: If node is not an object or array
    """
    if not is_container(node):
        raise TypeError(f"Cannot replace child of {node_type(node).value} node")
    node[key] = child

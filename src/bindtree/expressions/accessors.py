"""
Property and index lookup on evaluation contexts.

Contexts are opaque to the resolver; the expression language reads them the
same way whatever their shape: mappings by key, sequences by position, and any
other object (pydantic models, attrs or dataclass instances) by public
attribute.
"""

from collections.abc import Mapping, Sequence
from typing import Any


def get_property(instance: Any, name: str) -> Any:
    """
    Read a named property.

    Missing properties and lookups on ``None`` yield ``None``. Attributes
    starting with an underscore are never exposed.

    Params:
        instance: Object to read from
        name: Property name

    Returns:
        The property value, or None when absent
    """
    if instance is None:
        return None
    if isinstance(instance, Mapping):
        return instance.get(name)
    if isinstance(instance, (str, bytes, Sequence)) or name.startswith("_"):
        return None
    return getattr(instance, name, None)


def get_index(instance: Any, index: Any, strict: bool = True) -> Any:
    """
    Read an element by position or key.

    Params:
        instance: Sequence or mapping to read from
        index: Integer position for sequences, key for mappings and objects
        strict: Raise on out-of-range positions instead of yielding None

    Returns:
        The element, or None when absent

    Raises:
        IndexError: When strict and the position is out of range
        TypeError: When the index type does not fit the instance
    """
    if instance is None:
        return None
    if isinstance(index, str):
        return get_property(instance, index)
    if isinstance(index, bool) or not isinstance(index, int):
        raise TypeError(f"Index must be an integer or a string, got {index!r}")
    if isinstance(instance, Mapping):
        return instance.get(index)
    if not isinstance(instance, Sequence):
        raise TypeError(f"Cannot index into {type(instance).__name__}")
    if -len(instance) <= index < len(instance):
        return instance[index]
    if strict:
        raise IndexError(f"Index {index} is out of range for length {len(instance)}")
    return None

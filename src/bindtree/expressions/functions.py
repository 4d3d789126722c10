"""
Builtin functions and value conversions of the expression language.

Functions are plain callables registered by name in ``FUNCTIONS``. They
receive already evaluated arguments and signal failure by raising
``TypeError`` or ``ValueError``; the expression boundary turns those into an
evaluation error.
"""

import json
import math
from collections.abc import Callable, Mapping
from typing import Any

from bindtree.core.tree import from_native

FUNCTIONS: dict[str, Callable[..., Any]] = {}


def register(name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Register a builtin function under an expression-level name."""

    def decorator(function: Callable[..., Any]) -> Callable[..., Any]:
        FUNCTIONS[name] = function
        return function

    return decorator


def is_number(value: Any) -> bool:
    """Check for int or float, excluding bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_true(value: Any) -> bool:
    """Logical truth: only ``None`` and ``False`` are false."""
    return value is not None and value is not False


def to_text(value: Any) -> str:
    """
    Render a value the way string interpolation shows it.

    Params:
        value: Any evaluated value

    Returns:
        ``""`` for None, lowercase ``true``/``false`` for booleans, compact JSON
        for arrays and objects, ``str()`` otherwise
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return str(value)
    tree = from_native(value)
    if isinstance(tree, (dict, list)):
        return json.dumps(tree, separators=(",", ":"), default=str)
    return str(tree)


def _require_number(name: str, value: Any) -> int | float:
    if not is_number(value):
        raise TypeError(f"{name} expects a number, got {to_text(value)!r}")
    return value


def _require_text(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} expects a string, got {to_text(value)!r}")
    return value


def _require_collection(name: str, value: Any) -> list | str | Mapping:
    if isinstance(value, (str, list, tuple, Mapping)):
        return value
    raise TypeError(f"{name} expects a string, array or object, got {to_text(value)!r}")


# String functions


@register("length")
def length(value: Any) -> int:
    return len(_require_collection("length", value))


@register("concat")
def concat(*values: Any) -> str | list:
    if values and all(isinstance(value, list) for value in values):
        return [item for value in values for item in value]
    return "".join(to_text(value) for value in values)


@register("toUpper")
def to_upper(value: Any) -> str:
    return to_text(value).upper()


@register("toLower")
def to_lower(value: Any) -> str:
    return to_text(value).lower()


@register("trim")
def trim(value: Any) -> str:
    return to_text(value).strip()


@register("replace")
def replace(value: Any, old: Any, new: Any) -> str:
    return _require_text("replace", value).replace(
        _require_text("replace", old), to_text(new)
    )


@register("substring")
def substring(value: Any, start: Any, count: Any = None) -> str:
    text = _require_text("substring", value)
    start = _require_number("substring", start)
    if start < 0 or start > len(text):
        raise ValueError(f"substring start {start} is out of range")
    if count is None:
        return text[start:]
    count = _require_number("substring", count)
    if count < 0 or start + count > len(text):
        raise ValueError(f"substring length {count} is out of range")
    return text[start : start + count]


@register("startsWith")
def starts_with(value: Any, prefix: Any) -> bool:
    return to_text(value).startswith(to_text(prefix))


@register("endsWith")
def ends_with(value: Any, suffix: Any) -> bool:
    return to_text(value).endswith(to_text(suffix))


@register("split")
def split(value: Any, separator: Any = "") -> list[str]:
    text = _require_text("split", value)
    separator = to_text(separator)
    return list(text) if separator == "" else text.split(separator)


# Collection functions


@register("count")
def count(value: Any) -> int:
    return len(_require_collection("count", value))


@register("join")
def join(values: Any, separator: Any = ",") -> str:
    if not isinstance(values, list):
        raise TypeError(f"join expects an array, got {to_text(values)!r}")
    return to_text(separator).join(to_text(value) for value in values)


@register("contains")
def contains(collection: Any, item: Any) -> bool:
    if collection is None:
        return False
    if isinstance(collection, str):
        return to_text(item) in collection
    if isinstance(collection, Mapping):
        return to_text(item) in collection
    return item in _require_collection("contains", collection)


@register("indexOf")
def index_of(collection: Any, item: Any) -> int:
    if isinstance(collection, str):
        return collection.find(to_text(item))
    if isinstance(collection, list):
        return collection.index(item) if item in collection else -1
    raise TypeError(f"indexOf expects a string or array, got {to_text(collection)!r}")


@register("first")
def first(collection: Any) -> Any:
    if isinstance(collection, (str, list)) and collection:
        return collection[0]
    return None


@register("last")
def last(collection: Any) -> Any:
    if isinstance(collection, (str, list)) and collection:
        return collection[-1]
    return None


@register("createArray")
def create_array(*values: Any) -> list:
    return list(values)


# Logic and conversion


@register("exists")
def exists(value: Any) -> bool:
    return value is not None


@register("coalesce")
def coalesce(*values: Any) -> Any:
    return next((value for value in values if value is not None), None)


@register("not")
def not_(value: Any) -> bool:
    return not is_true(value)


@register("string")
def string(value: Any) -> str:
    return to_text(value)


@register("int")
def int_(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("int expects a number or numeric string, got a boolean")
    if isinstance(value, str):
        return int(float(value)) if "." in value else int(value)
    return int(_require_number("int", value))


@register("float")
def float_(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("float expects a number or numeric string, got a boolean")
    return float(value if isinstance(value, str) else _require_number("float", value))


@register("bool")
def bool_(value: Any) -> bool:
    if isinstance(value, str):
        return value.lower() not in ("", "false", "0")
    if is_number(value):
        return value != 0
    return is_true(value)


@register("json")
def json_(value: Any) -> Any:
    return json.loads(_require_text("json", value))


# Math


@register("max")
def max_(*values: Any) -> int | float:
    numbers = _flatten_numbers("max", values)
    return max(numbers)


@register("min")
def min_(*values: Any) -> int | float:
    numbers = _flatten_numbers("min", values)
    return min(numbers)


@register("sum")
def sum_(values: Any) -> int | float:
    if not isinstance(values, list):
        raise TypeError(f"sum expects an array, got {to_text(values)!r}")
    return sum(_require_number("sum", value) for value in values)


@register("abs")
def abs_(value: Any) -> int | float:
    return abs(_require_number("abs", value))


@register("round")
def round_(value: Any, digits: Any = 0) -> int | float:
    value = _require_number("round", value)
    digits = _require_number("round", digits)
    # Half away from zero
    factor = 10**digits
    rounded = math.floor(abs(value) * factor + 0.5) / factor
    rounded = math.copysign(rounded, value)
    return int(rounded) if digits == 0 else rounded


def _flatten_numbers(name: str, values: tuple) -> list[int | float]:
    if len(values) == 1 and isinstance(values[0], list):
        values = tuple(values[0])
    if not values:
        raise ValueError(f"{name} expects at least one number")
    return [_require_number(name, value) for value in values]

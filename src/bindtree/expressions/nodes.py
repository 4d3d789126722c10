"""
Compiled expression nodes.

The parser turns source text into a tree of these nodes once; each node then
evaluates against any number of data contexts. Nodes are immutable and hold
no per-evaluation state.
"""

import math
import operator
from collections.abc import Callable
from typing import Any

from attrs import frozen

from bindtree.expressions.accessors import get_index, get_property
from bindtree.expressions.functions import is_number, is_true, to_text
from bindtree.options import EvaluationOptions

# Upper bound on the size of integer powers, in bits
MAX_POWER_BITS = 65536


class Node:
    """Base class of compiled expression nodes."""

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        raise NotImplementedError

    def path(self) -> str | None:
        """Accessor path of this node, None when it is not a plain accessor."""
        return None


def _substitute(node: Node, value: Any, options: EvaluationOptions) -> Any:
    if value is None and options.null_substitution is not None:
        path = node.path()
        if path is not None:
            return options.null_substitution(path)
    return value


@frozen
class Constant(Node):
    value: Any

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        return self.value


@frozen
class Variable(Node):
    name: str

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        return _substitute(self, get_property(state, self.name), options)

    def path(self) -> str | None:
        return self.name


@frozen
class Member(Node):
    target: Node
    name: str

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        instance = self.target.evaluate(state, options)
        return _substitute(self, get_property(instance, self.name), options)

    def path(self) -> str | None:
        parent = self.target.path()
        return f"{parent}.{self.name}" if parent is not None else None


@frozen
class Index(Node):
    target: Node
    index: Node

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        instance = self.target.evaluate(state, options)
        key = self.index.evaluate(state, options)
        return get_index(instance, key, strict=options.strict_index)


@frozen
class Call(Node):
    name: str
    function: Callable[..., Any]
    arguments: tuple[Node, ...]

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        values = [argument.evaluate(state, options) for argument in self.arguments]
        return self.function(*values)


@frozen
class Conditional(Node):
    """``if(condition, then, else)``; only the chosen branch is evaluated."""

    condition: Node
    when_true: Node
    when_false: Node

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        if is_true(self.condition.evaluate(state, options)):
            return self.when_true.evaluate(state, options)
        return self.when_false.evaluate(state, options)


@frozen
class Lambda(Node):
    """Host callable evaluated with the data context as its only argument."""

    function: Callable[[Any], Any]

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        return self.function(state)


@frozen
class ArrayLiteral(Node):
    items: tuple[Node, ...]

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        return [item.evaluate(state, options) for item in self.items]


@frozen
class ObjectLiteral(Node):
    pairs: tuple[tuple[str, Node], ...]

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        return {key: value.evaluate(state, options) for key, value in self.pairs}


@frozen
class Template(Node):
    """Interpolation template: literal text parts and embedded expressions."""

    parts: tuple[str | Node, ...]

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        return "".join(
            part if isinstance(part, str) else to_text(part.evaluate(state, options))
            for part in self.parts
        )


@frozen
class Not(Node):
    operand: Node

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        return not is_true(self.operand.evaluate(state, options))


@frozen
class Negate(Node):
    operand: Node
    sign: int = -1

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        value = self.operand.evaluate(state, options)
        if not is_number(value):
            raise TypeError(f"Unary operator expects a number, got {to_text(value)!r}")
        return self.sign * value


@frozen
class And(Node):
    left: Node
    right: Node

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        return is_true(self.left.evaluate(state, options)) and is_true(
            self.right.evaluate(state, options)
        )


@frozen
class Or(Node):
    left: Node
    right: Node

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        return is_true(self.left.evaluate(state, options)) or is_true(
            self.right.evaluate(state, options)
        )


@frozen
class Binary(Node):
    operator: str
    left: Node
    right: Node

    def evaluate(self, state: Any, options: EvaluationOptions) -> Any:
        left = self.left.evaluate(state, options)
        right = self.right.evaluate(state, options)
        return BINARY_OPERATORS[self.operator](left, right)


def _add(left: Any, right: Any) -> Any:
    if is_number(left) and is_number(right):
        return left + right
    if isinstance(left, str) or isinstance(right, str):
        return to_text(left) + to_text(right)
    if isinstance(left, list) and isinstance(right, list):
        return left + right
    raise TypeError(f"Cannot add {to_text(left)!r} and {to_text(right)!r}")


def _arithmetic(symbol: str, function: Callable[[Any, Any], Any]):
    def apply(left: Any, right: Any) -> Any:
        if not (is_number(left) and is_number(right)):
            raise TypeError(
                f"Operator '{symbol}' expects numbers, got {to_text(left)!r} and {to_text(right)!r}"
            )
        return function(left, right)

    return apply


def _divide(left: int | float, right: int | float) -> int | float:
    if right == 0:
        raise ZeroDivisionError("Cannot divide by 0")
    if isinstance(left, int) and isinstance(right, int):
        quotient = abs(left) // abs(right)
        return quotient if (left < 0) == (right < 0) else -quotient
    return left / right


def _modulo(left: int | float, right: int | float) -> int | float:
    if right == 0:
        raise ZeroDivisionError("Cannot divide by 0")
    if isinstance(left, int) and isinstance(right, int):
        return left - right * _divide(left, right)
    return math.fmod(left, right)


def _power(left: int | float, right: int | float) -> int | float:
    if isinstance(left, int) and isinstance(right, int):
        if left == 0 and right < 0:
            raise ZeroDivisionError("Cannot divide by 0")
        if abs(left) > 1 and abs(left).bit_length() * right > MAX_POWER_BITS:
            raise OverflowError(f"Result of {left} ^ {right} is too large")
        return left**right
    return math.pow(left, right)


def _equals(left: Any, right: Any) -> bool:
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def _ordering(symbol: str, function: Callable[[Any, Any], bool]):
    def apply(left: Any, right: Any) -> bool:
        comparable = (is_number(left) and is_number(right)) or (
            isinstance(left, str) and isinstance(right, str)
        )
        if not comparable:
            raise TypeError(
                f"Operator '{symbol}' cannot compare {to_text(left)!r} and {to_text(right)!r}"
            )
        return function(left, right)

    return apply


BINARY_OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "+": _add,
    "-": _arithmetic("-", operator.sub),
    "*": _arithmetic("*", operator.mul),
    "/": _arithmetic("/", _divide),
    "%": _arithmetic("%", _modulo),
    "^": _arithmetic("^", _power),
    "==": _equals,
    "!=": lambda left, right: not _equals(left, right),
    "<": _ordering("<", operator.lt),
    "<=": _ordering("<=", operator.le),
    ">": _ordering(">", operator.gt),
    ">=": _ordering(">=", operator.ge),
}

"""
Compiled expressions.

An ``Expression`` pairs source text with its compiled node tree and evaluates
against data contexts. ``evaluate`` raises on failure; ``try_evaluate``
reports failure as the error component of a ``(value, error)`` pair, which is
the form the resolver consumes.
"""

import json
from collections.abc import Callable
from typing import Any

from bindtree.core.tree import from_native
from bindtree.core.types import ResolveResult
from bindtree.exceptions import ExpressionEvaluationError
from bindtree.expressions.nodes import Constant, Lambda, Node
from bindtree.expressions.parser import parse_expression
from bindtree.options import DEFAULT_OPTIONS, EvaluationOptions

# Failures user data can trigger inside operators and builtin functions
_EVALUATION_FAILURES = (TypeError, ValueError, ArithmeticError, LookupError)


class Expression:
    """A compiled expression and the text it was compiled from."""

    def __init__(self, text: str, root: Node):
        self.text = text
        self.root = root

    @classmethod
    def parse(cls, text: str) -> "Expression":
        """
        Compile expression text.

        Params:
            text: Expression source without the leading ``=`` marker

        Returns:
            The compiled expression

        Raises:
            ExpressionParseError: If the text is not a valid expression
        """
        return cls(text, parse_expression(text))

    @classmethod
    def constant(cls, value: Any) -> "Expression":
        """Wrap a value as an expression that always evaluates to it."""
        return cls(json.dumps(from_native(value), default=str), Constant(value))

    @classmethod
    def lambda_(cls, function: Callable[[Any], Any]) -> "Expression":
        """
        Wrap a host callable as an expression.

        The callable receives the data context and returns the value. Its text
        is a display name only and cannot be parsed back.

        Params:
            function: Callable taking the data context

        Returns:
            The expression
        """
        if not callable(function):
            raise TypeError(f"lambda_ expects a callable, got {type(function).__name__}")
        name = getattr(function, "__name__", type(function).__name__)
        return cls(f"<{name}>", Lambda(function))

    @property
    def is_lambda(self) -> bool:
        """True when the expression wraps a host callable instead of parsed text."""
        return isinstance(self.root, Lambda)

    def evaluate(
        self, state: Any, options: EvaluationOptions = DEFAULT_OPTIONS
    ) -> Any:
        """
        Evaluate against a data context.

        Params:
            state: Data context; read but never modified
            options: Evaluation options

        Returns:
            The evaluated value

        Raises:
            ExpressionEvaluationError: If evaluation fails
        """
        try:
            return self.root.evaluate(state, options)
        except _EVALUATION_FAILURES as e:
            raise ExpressionEvaluationError(self.text, str(e)) from e

    def try_evaluate(
        self, state: Any, options: EvaluationOptions = DEFAULT_OPTIONS
    ) -> ResolveResult:
        """Evaluate against a data context, returning ``(value, error)``."""
        try:
            return self.evaluate(state, options), None
        except ExpressionEvaluationError as e:
            return None, str(e)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Expression({self.text!r})"

"""
Exception classes for bindtree expression handling.

This module defines the exception types raised while compiling and evaluating
expression text. Resolution entry points convert these into the error
component of a ``(value, error)`` result, so callers normally only meet them
through ``BoundValue.get_value`` or when using the parser directly.
"""


class BindTreeError(Exception):
    """Base exception for all bindtree errors."""

    pass


class ExpressionParseError(BindTreeError):
    """Raised when expression text cannot be compiled."""

    def __init__(self, expression: str, reason: str):
        """
        Initialize the exception.

        Params:
            expression: The expression text that failed to compile
            reason: Why the text could not be compiled
        """
        self.expression = expression
        self.reason = reason
        super().__init__(f"Cannot parse expression '{expression}': {reason}")


class UnknownFunctionError(ExpressionParseError):
    """Raised when an expression calls a function that is not registered."""

    def __init__(self, expression: str, name: str):
        """
        Initialize the exception.

        Params:
            expression: The expression text containing the call
            name: The unknown function name
        """
        self.name = name
        super().__init__(expression, f"unknown function '{name}'")


class ExpressionEvaluationError(BindTreeError):
    """Raised when a compiled expression fails against a data context."""

    def __init__(self, expression: str, reason: str):
        """
        Initialize the exception.

        Params:
            expression: The expression text that failed to evaluate
            reason: Why the evaluation failed
        """
        self.expression = expression
        self.reason = reason
        super().__init__(f"Cannot evaluate expression '{expression}': {reason}")


class ResolutionError(BindTreeError):
    """Raised by strict resolution when a bound value reports an error."""

    def __init__(self, expression_text: str | None, error: str):
        """
        Initialize the exception.

        Params:
            expression_text: The expression text of the failing bound value
            error: Error reported by the evaluator
        """
        self.expression_text = expression_text
        self.error = error
        super().__init__(f"Failed to resolve '{expression_text}': {error}")

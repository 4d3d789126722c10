"""
bindtree exception classes.

This package provides all exception types used throughout bindtree for
consistent error handling and reporting.
"""

from bindtree.exceptions.core import (
    BindTreeError,
    ExpressionEvaluationError,
    ExpressionParseError,
    ResolutionError,
    UnknownFunctionError,
)

__all__ = [
    "BindTreeError",
    "ExpressionEvaluationError",
    "ExpressionParseError",
    "ResolutionError",
    "UnknownFunctionError",
]

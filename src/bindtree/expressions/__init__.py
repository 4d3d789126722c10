"""
Expression language used by bound values.

This package provides the parser, compiled node tree, builtin functions and
the default evaluator that bound values consult when resolving expression
text against a data context.
"""

from bindtree.expressions.evaluator import (
    EXPRESSION_MARKER,
    Evaluator,
    ExpressionEvaluator,
    default_evaluator,
)
from bindtree.expressions.expression import Expression
from bindtree.expressions.functions import FUNCTIONS, register, to_text
from bindtree.expressions.parser import parse_expression

__all__ = [
    "EXPRESSION_MARKER",
    "Evaluator",
    "Expression",
    "ExpressionEvaluator",
    "FUNCTIONS",
    "default_evaluator",
    "parse_expression",
    "register",
    "to_text",
]

"""
Evaluator contract consumed by bound values, and its default implementation.

Bound values only depend on the ``Evaluator`` protocol: something that takes
expression text (with its leading ``=``) and a data context and answers
``(value, error)``. ``ExpressionEvaluator`` implements it with the expression
language of this package; hosts may pass any other implementation.
"""

import logging
from typing import Any, Protocol

from bindtree.core.types import ResolveResult
from bindtree.exceptions import ExpressionParseError
from bindtree.expressions.expression import Expression
from bindtree.options import DEFAULT_OPTIONS, EvaluationOptions

logger = logging.getLogger(__name__)

EXPRESSION_MARKER = "="


class Evaluator(Protocol):
    """Compile and evaluate expression text against a data context."""

    def evaluate(self, text: str, context: Any) -> ResolveResult:
        """Return ``(value, error)``; value is meaningless when error is set."""
        ...


class ExpressionEvaluator:
    """Default evaluator backed by the bindtree expression language."""

    def __init__(self, options: EvaluationOptions = DEFAULT_OPTIONS):
        self.options = options

    def compile(self, text: str) -> Expression:
        """
        Compile expression text, stripping one leading expression marker.

        Params:
            text: Expression text, with or without the leading ``=``

        Returns:
            The compiled expression

        Raises:
            ExpressionParseError: If the text is not a valid expression
        """
        if text.startswith(EXPRESSION_MARKER):
            text = text[len(EXPRESSION_MARKER) :]
        return Expression.parse(text)

    def evaluate(self, text: str, context: Any) -> ResolveResult:
        try:
            expression = self.compile(text)
        except ExpressionParseError as e:
            logger.debug("Expression %r did not compile: %s", text, e.reason)
            return None, str(e)
        return expression.try_evaluate(context, self.options)


default_evaluator = ExpressionEvaluator()

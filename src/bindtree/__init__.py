"""
bindtree - Bind configuration templates to runtime data

bindtree resolves values that may be literals or expressions, including
expression strings nested anywhere inside structured literals.
"""

from importlib.metadata import version

from bindtree.expressions import Expression, ExpressionEvaluator
from bindtree.options import EvaluationOptions
from bindtree.properties import BoundValue, walk

__version__ = version("bindtree")

__all__ = [
    "__version__",
    "BoundValue",
    "EvaluationOptions",
    "Expression",
    "ExpressionEvaluator",
    "walk",
]

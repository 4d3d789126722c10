"""Evaluation options shared by the expression evaluator and bound values."""

from collections.abc import Callable
from typing import Any

from attrs import frozen


@frozen
class EvaluationOptions:
    """Knobs that change how expressions read the data context.

    Attributes:
      - null_substitution: Called with the accessor path (e.g. ``user.name``)
        whenever a property lookup yields ``None``; the returned value is used
        instead. ``None`` disables substitution.
      - strict_index: When True, indexing past the end of an array is an
        evaluation error. When False the lookup yields ``None``.
    """

    null_substitution: Callable[[str], Any] | None = None
    strict_index: bool = True


DEFAULT_OPTIONS = EvaluationOptions()

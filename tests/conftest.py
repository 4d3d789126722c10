"""
Shared test fixtures and utilities for the bindtree test suite.
"""

import pytest

from bindtree.expressions import ExpressionEvaluator


class RecordingEvaluator:
    """Evaluator stub that records calls and delegates to the real evaluator.

    Usage:
        def test_something(recording_evaluator):
            BoundValue("=x", evaluator=recording_evaluator).try_get_value({})
            assert recording_evaluator.calls == [("=x", {})]
    """

    def __init__(self):
        self.calls = []
        self._inner = ExpressionEvaluator()

    def evaluate(self, text, context):
        self.calls.append((text, context))
        return self._inner.evaluate(text, context)


@pytest.fixture
def user_context():
    """Data context with a nested user object and a list."""
    return {
        "name": "Joe",
        "user": {"name": "Joe", "age": 45, "tags": ["admin", "ops"]},
        "items": [10, 20, 30],
    }


@pytest.fixture
def recording_evaluator():
    return RecordingEvaluator()

"""
Tests for builtin expression functions and value rendering.
"""

import pytest

from bindtree.exceptions import ExpressionEvaluationError
from bindtree.expressions import FUNCTIONS, Expression, register, to_text


def call(source, state=None):
    return Expression.parse(source).evaluate(state or {})


class TestStringFunctions:
    """Test string builtins."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("length('Joe')", 3),
            ("concat('a', 'b', 1)", "ab1"),
            ("toUpper('abc')", "ABC"),
            ("toLower('ABC')", "abc"),
            ("trim('  x ')", "x"),
            ("replace('a-b-c', '-', '+')", "a+b+c"),
            ("substring('hello', 1, 3)", "ell"),
            ("substring('hello', 2)", "llo"),
            ("startsWith('hello', 'he')", True),
            ("endsWith('hello', 'lo')", True),
            ("split('a,b,c', ',')", ["a", "b", "c"]),
            ("split('ab')", ["a", "b"]),
        ],
    )
    def test_string_builtins(self, source, expected):
        assert call(source) == expected

    def test_substring_out_of_range(self):
        """Out-of-range substrings are evaluation errors."""
        with pytest.raises(ExpressionEvaluationError, match="out of range"):
            call("substring('abc', 1, 5)")

    def test_length_of_null_is_error(self):
        """length() needs a string, array or object."""
        with pytest.raises(ExpressionEvaluationError, match="length expects"):
            call("length(missing)")


class TestCollectionFunctions:
    """Test collection builtins."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("count(createArray(1, 2, 3))", 3),
            ("concat(createArray(1), createArray(2))", [1, 2]),
            ("join(createArray(1, 'a', true), '-')", "1-a-true"),
            ("contains('hello', 'ell')", True),
            ("contains(createArray(1, 2), 3)", False),
            ("contains({a: 1}, 'a')", True),
            ("indexOf('abc', 'c')", 2),
            ("indexOf(createArray('x', 'y'), 'z')", -1),
            ("first(createArray(4, 5))", 4),
            ("last('xyz')", "z"),
            ("first(createArray())", None),
        ],
    )
    def test_collection_builtins(self, source, expected):
        assert call(source) == expected


class TestLogicAndConversion:
    """Test logic and conversion builtins."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("exists(missing)", False),
            ("exists(0)", True),
            ("coalesce(null, missing, 2, 3)", 2),
            ("not(false)", True),
            ("string(true)", "true"),
            ("string(12)", "12"),
            ("int('42')", 42),
            ("int('4.7')", 4),
            ("float('1.5')", 1.5),
            ("bool('false')", False),
            ("bool(1)", True),
            ("json('{\"a\": [1, 2]}')", {"a": [1, 2]}),
        ],
    )
    def test_logic_and_conversion(self, source, expected):
        assert call(source) == expected

    def test_invalid_number_text(self):
        """Unparseable numbers are evaluation errors."""
        with pytest.raises(ExpressionEvaluationError):
            call("int('abc')")


class TestMathFunctions:
    """Test math builtins."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("max(1, 5, 3)", 5),
            ("min(createArray(4, 2))", 2),
            ("sum(createArray(1, 2, 3))", 6),
            ("abs(-3)", 3),
            ("round(2.5)", 3),
            ("round(-2.5)", -3),
            ("round(1.234, 2)", 1.23),
        ],
    )
    def test_math_builtins(self, source, expected):
        assert call(source) == expected

    def test_max_without_arguments(self):
        """max() needs at least one number."""
        with pytest.raises(ExpressionEvaluationError, match="at least one"):
            call("max()")


class TestRegistry:
    """Test registering additional functions."""

    def test_register_custom_function(self):
        """Registered functions are callable from expressions."""

        @register("double")
        def double(value):
            return value * 2

        try:
            assert call("double(x)", {"x": 21}) == 42
        finally:
            FUNCTIONS.pop("double")


class TestToText:
    """Test rendering of values for interpolation."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, ""),
            (True, "true"),
            (False, "false"),
            (3, "3"),
            (1.5, "1.5"),
            ("s", "s"),
            ({"a": [1, None]}, '{"a":[1,null]}'),
        ],
    )
    def test_to_text(self, value, expected):
        assert to_text(value) == expected

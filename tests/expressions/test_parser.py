"""
Tests for expression parsing.

Focus Areas:
1. Compiled node shapes for literals, accessors and operators
2. Interpolation template splitting and escapes
3. Parse errors for malformed text and unknown functions
"""

import pytest

from bindtree.exceptions import ExpressionParseError, UnknownFunctionError
from bindtree.expressions import Expression, parse_expression
from bindtree.expressions.nodes import (
    Binary,
    Call,
    Conditional,
    Constant,
    Member,
    Template,
    Variable,
)
from bindtree.expressions.parser import parse_template, unescape_string


class TestLiterals:
    """Test literal compilation."""

    @pytest.mark.parametrize(
        "source,value",
        [
            ("42", 42),
            ("2.5", 2.5),
            ("1e3", 1000.0),
            ("true", True),
            ("false", False),
            ("null", None),
            ("'single'", "single"),
            ('"double"', "double"),
        ],
    )
    def test_scalar_literals(self, source, value):
        """Scalar literals compile to constants."""
        assert parse_expression(source) == Constant(value)

    def test_integer_literal_is_int(self):
        """Literals without a fraction stay integers."""
        assert isinstance(parse_expression("7").value, int)

    def test_string_escapes(self):
        """Quoted strings decode backslash escapes."""
        assert parse_expression(r"'it\'s\n'") == Constant("it's\n")
        assert unescape_string(r"\u00e9\\") == "é\\"

    def test_keyword_prefix_is_a_name(self):
        """Names starting with a keyword are plain variables."""
        assert parse_expression("trueValue") == Variable("trueValue")
        assert parse_expression("nullable") == Variable("nullable")


class TestAccessorsAndOperators:
    """Test accessor and operator compilation."""

    def test_member_path(self):
        """Dotted paths compile to nested member nodes."""
        node = parse_expression("user.address.city")
        assert node == Member(Member(Variable("user"), "address"), "city")
        assert node.path() == "user.address.city"

    def test_precedence(self):
        """Multiplication binds tighter than addition."""
        node = parse_expression("1 + 2 * 3")
        assert node == Binary(
            "+", Constant(1), Binary("*", Constant(2), Constant(3))
        )

    def test_power_is_right_associative(self):
        """Exponentiation groups to the right."""
        node = parse_expression("2 ^ 3 ^ 2")
        assert node == Binary("^", Constant(2), Binary("^", Constant(3), Constant(2)))

    def test_function_call(self):
        """Registered functions compile to call nodes."""
        node = parse_expression("length(user.name)")
        assert isinstance(node, Call)
        assert node.name == "length"
        assert node.arguments == (Member(Variable("user"), "name"),)

    def test_if_compiles_to_conditional(self):
        """if() is a lazy conditional, not a function call."""
        node = parse_expression("if(ok, 1, 2)")
        assert node == Conditional(Variable("ok"), Constant(1), Constant(2))


class TestTemplates:
    """Test interpolation template splitting."""

    def test_plain_template(self):
        """A template without placeholders is one text part."""
        assert parse_template("Hello world", "src") == Template(("Hello world",))

    def test_placeholders_split_text(self):
        """Placeholders become expression parts between text runs."""
        template = parse_template("Hello ${user.name}!", "src")
        assert template == Template(
            ("Hello ", Member(Variable("user"), "name"), "!")
        )

    def test_escaped_backtick(self):
        """An escaped backtick is literal text."""
        assert parse_expression(r"`a\`b`") == Template((r"a`b",))

    def test_other_backslashes_are_literal(self):
        """Only backticks are escapable inside templates."""
        assert parse_expression(r"`C:\temp\new`") == Template((r"C:\temp\new",))

    def test_braces_inside_placeholder_strings(self):
        """Closing braces inside quoted strings do not end a placeholder."""
        template = parse_template("${concat('}', x)}", "src")
        assert len(template.parts) == 1
        assert isinstance(template.parts[0], Call)

    def test_dollar_without_brace_is_text(self):
        """A lone dollar sign is literal text."""
        assert parse_template("$5 {x}", "src") == Template(("$5 {x}",))


class TestParseErrors:
    """Test rejection of malformed expressions."""

    @pytest.mark.parametrize("source", ["1 +", "(1", "a..b", "'open", "1 2"])
    def test_malformed_expression(self, source):
        """Malformed text raises ExpressionParseError."""
        with pytest.raises(ExpressionParseError) as exc_info:
            parse_expression(source)
        assert exc_info.value.expression == source

    def test_empty_expression(self):
        """Empty text is not an expression."""
        with pytest.raises(ExpressionParseError, match="empty"):
            Expression.parse("  ")

    def test_unknown_function(self):
        """Unknown functions fail while compiling."""
        with pytest.raises(UnknownFunctionError) as exc_info:
            parse_expression("shout(name)")
        assert exc_info.value.name == "shout"

    def test_unknown_function_inside_template(self):
        """Placeholders are compiled eagerly."""
        with pytest.raises(UnknownFunctionError):
            parse_expression("`Hi ${shout(name)}`")

    def test_if_arity(self):
        """if() needs exactly three arguments."""
        with pytest.raises(ExpressionParseError, match="if expects 3 arguments"):
            parse_expression("if(true, 1)")

    def test_unterminated_placeholder(self):
        """A placeholder without closing brace is rejected."""
        with pytest.raises(ExpressionParseError, match="unterminated"):
            parse_expression("`Hello ${name`")

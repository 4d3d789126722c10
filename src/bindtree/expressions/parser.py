"""
Parser for the bound value expression language.

Source text (without the leading ``=`` marker) is parsed with a Lark LALR
parser and transformed into compiled nodes from ``bindtree.expressions.nodes``.
Interpolation templates are split here: literal runs stay text, every
``${...}`` segment is parsed as a nested expression.
"""

import re
from functools import lru_cache

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import LarkError, VisitError

from bindtree.exceptions import ExpressionParseError, UnknownFunctionError
from bindtree.expressions.functions import FUNCTIONS
from bindtree.expressions.nodes import (
    And,
    ArrayLiteral,
    Binary,
    Call,
    Conditional,
    Constant,
    Index,
    Member,
    Negate,
    Node,
    Not,
    ObjectLiteral,
    Or,
    Template,
    Variable,
)

_ESCAPE_PATTERN = re.compile(r"\\(u[0-9a-fA-F]{4}|.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f"}


@lru_cache(maxsize=1)
def get_parser() -> Lark:
    """Build the LALR parser once per process."""
    return Lark.open("grammar.lark", rel_to=__file__, start="start", parser="lalr")


def unescape_string(body: str) -> str:
    """Decode backslash escapes of a quoted string literal body."""

    def decode(match: re.Match) -> str:
        escape = match.group(1)
        if len(escape) == 5:
            return chr(int(escape[1:], 16))
        return _ESCAPES.get(escape, escape)

    return _ESCAPE_PATTERN.sub(decode, body)


def _closing_brace(body: str, start: int) -> int:
    depth = 0
    quote = None
    position = start
    while position < len(body):
        char = body[position]
        if quote:
            if char == "\\":
                position += 2
                continue
            if char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            if depth == 0:
                return position
            depth -= 1
        position += 1
    return -1


def parse_template(body: str, source: str) -> Template:
    """
    Split an interpolation template body into text and expression parts.

    Only a backtick is escapable (``\\```); any other backslash is literal text.

    Params:
        body: Template content between the enclosing backticks
        source: Full expression text, for error reporting

    Returns:
        Template node

    Raises:
        ExpressionParseError: If a ``${`` segment is unterminated or invalid
    """
    parts: list[str | Node] = []
    text: list[str] = []
    position = 0
    while position < len(body):
        if body.startswith("\\`", position):
            text.append("`")
            position += 2
        elif body.startswith("${", position):
            end = _closing_brace(body, position + 2)
            if end < 0:
                raise ExpressionParseError(source, "unterminated '${' in template")
            if text:
                parts.append("".join(text))
                text = []
            parts.append(parse_expression(body[position + 2 : end]))
            position = end + 1
        else:
            text.append(body[position])
            position += 1
    if text:
        parts.append("".join(text))
    return Template(tuple(parts))


def _binary(symbol: str):
    def build(self, left: Node, right: Node) -> Node:
        return Binary(symbol, left, right)

    return build


@v_args(inline=True)
class ExpressionBuilder(Transformer):
    """Transform a Lark parse tree into compiled expression nodes."""

    def __init__(self, source: str):
        super().__init__()
        self._source = source

    # --- Literals ---

    def number(self, token: Token) -> Node:
        text = str(token)
        if any(char in text for char in ".eE"):
            return Constant(float(text))
        return Constant(int(text))

    def string(self, token: Token) -> Node:
        return Constant(unescape_string(str(token)[1:-1]))

    def template(self, token: Token) -> Node:
        return parse_template(str(token)[1:-1], self._source)

    def true(self) -> Node:
        return Constant(True)

    def false(self) -> Node:
        return Constant(False)

    def null(self) -> Node:
        return Constant(None)

    def array(self, arguments: list[Node] | None) -> Node:
        return ArrayLiteral(tuple(arguments or ()))

    def object(self, pairs: list[tuple[str, Node]] | None) -> Node:
        return ObjectLiteral(tuple(pairs or ()))

    def pairs(self, *pairs: tuple[str, Node]) -> list[tuple[str, Node]]:
        return list(pairs)

    def pair(self, key: Token, value: Node) -> tuple[str, Node]:
        if key.type == "STRING":
            return unescape_string(str(key)[1:-1]), value
        return str(key), value

    # --- Accessors and calls ---

    def var(self, name: Token) -> Node:
        return Variable(str(name))

    def member(self, target: Node, name: Token) -> Node:
        return Member(target, str(name))

    def index(self, target: Node, index: Node) -> Node:
        return Index(target, index)

    def arguments(self, *items: Node) -> list[Node]:
        return list(items)

    def call(self, name: Token, arguments: list[Node] | None) -> Node:
        name = str(name)
        arguments = tuple(arguments or ())
        if name == "if":
            if len(arguments) != 3:
                raise ExpressionParseError(self._source, "if expects 3 arguments")
            return Conditional(*arguments)
        function = FUNCTIONS.get(name)
        if function is None:
            raise UnknownFunctionError(self._source, name)
        return Call(name, function, arguments)

    # --- Operators ---

    def not_(self, operand: Node) -> Node:
        return Not(operand)

    def neg(self, operand: Node) -> Node:
        return Negate(operand)

    def pos(self, operand: Node) -> Node:
        return Negate(operand, sign=1)

    def and_(self, left: Node, right: Node) -> Node:
        return And(left, right)

    def or_(self, left: Node, right: Node) -> Node:
        return Or(left, right)

    add = _binary("+")
    sub = _binary("-")
    mul = _binary("*")
    div = _binary("/")
    mod = _binary("%")
    pow = _binary("^")
    eq = _binary("==")
    ne = _binary("!=")
    lt = _binary("<")
    le = _binary("<=")
    gt = _binary(">")
    ge = _binary(">=")


def parse_expression(source: str) -> Node:
    """
    Compile expression text into a node tree.

    Params:
        source: Expression text without the leading ``=`` marker

    Returns:
        Root node of the compiled expression

    Raises:
        ExpressionParseError: If the text is not a valid expression
    """
    if not source.strip():
        raise ExpressionParseError(source, "expression is empty")
    try:
        tree = get_parser().parse(source)
        return ExpressionBuilder(source).transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, ExpressionParseError):
            raise e.orig_exc from None
        raise
    except LarkError as e:
        reason = str(e).strip().splitlines() or [type(e).__name__]
        raise ExpressionParseError(source, reason[0]) from e

"""
Bound values: properties holding either a literal or an expression.

A bound value is assigned once (or reassigned any number of times) from
document input and resolved against runtime data whenever needed. Assignment
classifies the input:

    - ``None``                 -> unset
    - ``"=expr"``              -> expression
    - ``"\\=text"``             -> literal text starting with ``=``
    - any other string         -> interpolation template, e.g. ``"Hello ${name}"``
    - ``Expression`` instance  -> expression (parsed text or host callable)
    - anything else            -> literal value (numbers, booleans, trees, models)

Examples, resolved against ``{"user": {"name": "Joe", "age": 45}}``:
    True                   -> True
    "Hello ${user.name}"   -> "Hello Joe"
    "=length(user.name)"   -> 3
    "=user.age"            -> 45
    "\\=user.age"           -> "=user.age"

Literal values that are not text are walked after resolution, so string
leaves nested inside them are resolved too (see ``bindtree.properties.walker``).
"""

from collections.abc import Callable
from typing import Any, ClassVar

from attrs import frozen
from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic_core import core_schema

from bindtree.core.tree import deep_clone, from_native
from bindtree.core.types import ResolveResult
from bindtree.exceptions import ResolutionError
from bindtree.expressions.evaluator import (
    EXPRESSION_MARKER,
    Evaluator,
    default_evaluator,
)
from bindtree.expressions.expression import Expression
from bindtree.properties.walker import walk

ESCAPED_MARKER = "\\" + EXPRESSION_MARKER


def escape_backticks(text: str) -> str:
    """Prefix every backtick with a backslash."""
    return text.replace("`", "\\`")


def classify_text(text: str) -> str:
    """
    Turn textual input into expression text.

    Params:
        text: Raw text as written by a document author

    Returns:
        The text itself when it starts with ``=``; otherwise an interpolation
        literal (the text between backticks after ``=``), with one leading
        backslash removed from an escaped marker
    """
    if text.startswith(EXPRESSION_MARKER):
        return text
    if text.startswith(ESCAPED_MARKER):
        text = text[1:]
    return f"{EXPRESSION_MARKER}`{escape_backticks(text)}`"


@frozen
class DirectValue:
    """Template holding a literal value."""

    value: Any
    from_text: ClassVar[bool] = False

    def resolve(self, context: Any, evaluator: Evaluator) -> ResolveResult:
        return self.value, None


@frozen
class ExpressionBacked:
    """Template holding expression text.

    ``from_text`` marks templates classified from a string assignment; their
    result is final and never walked. ``expression`` holds a host callable
    expression, which is evaluated directly since its text does not parse.
    """

    text: str
    from_text: bool
    expression: Expression | None = None

    def resolve(self, context: Any, evaluator: Evaluator) -> ResolveResult:
        if self.expression is not None:
            return self.expression.try_evaluate(context)
        return evaluator.evaluate(self.text, context)


def resolve_template(
    template: DirectValue | ExpressionBacked,
    context: Any,
    evaluator: Evaluator,
    depth: int = 0,
) -> ResolveResult:
    """
    Resolve a template and walk its result unless it came from text.

    Params:
        template: Literal or expression template
        context: Data context; read but never modified
        evaluator: Evaluator for expression text
        depth: Number of leaf resolutions enclosing this one

    Returns:
        ``(value, error)``; error is None on success
    """
    value, error = template.resolve(context, evaluator)
    if template.from_text:
        return value, error

    if error is None and value is not None:
        value = walk(deep_clone(from_native(value)), context, evaluator, depth)
    return value, error


class BoundValue:
    """
    A property that is either a literal value or an expression.

    Resolution never modifies the bound value or the literal it holds, so one
    instance can be resolved repeatedly, against different contexts, from
    several threads, provided no thread reassigns it meanwhile.
    """

    def __init__(self, value: Any = None, evaluator: Evaluator | None = None):
        """
        Initialize and classify the initial value.

        Params:
            value: Initial value, classified as by ``set_value``
            evaluator: Evaluator for expression text, default evaluator if None
        """
        self._evaluator = evaluator if evaluator is not None else default_evaluator
        self._template: DirectValue | ExpressionBacked | None = None
        self.set_value(value)

    # --- Named constructors ---

    @classmethod
    def from_text(cls, text: str, evaluator: Evaluator | None = None) -> "BoundValue":
        """Expression for ``=`` text, interpolation template for any other text."""
        if not isinstance(text, str):
            raise TypeError(f"from_text expects a string, got {type(text).__name__}")
        return cls(text, evaluator=evaluator)

    @classmethod
    def from_number(
        cls, number: int | float, evaluator: Evaluator | None = None
    ) -> "BoundValue":
        """Literal number."""
        if isinstance(number, bool) or not isinstance(number, (int, float)):
            raise TypeError(f"from_number expects a number, got {type(number).__name__}")
        return cls(number, evaluator=evaluator)

    @classmethod
    def from_boolean(cls, flag: bool, evaluator: Evaluator | None = None) -> "BoundValue":
        """Literal boolean."""
        if not isinstance(flag, bool):
            raise TypeError(f"from_boolean expects a bool, got {type(flag).__name__}")
        return cls(flag, evaluator=evaluator)

    @classmethod
    def from_tree(cls, tree: Any, evaluator: Evaluator | None = None) -> "BoundValue":
        """Literal structured value; its string leaves are resolved on every resolution."""
        if isinstance(tree, str):
            raise TypeError("from_tree expects a structured value, got a string")
        return cls(tree, evaluator=evaluator)

    @classmethod
    def from_expression(
        cls, expression: Expression, evaluator: Evaluator | None = None
    ) -> "BoundValue":
        """Compiled expression; its result is walked like a literal tree."""
        if not isinstance(expression, Expression):
            raise TypeError(
                f"from_expression expects an Expression, got {type(expression).__name__}"
            )
        return cls(expression, evaluator=evaluator)

    @classmethod
    def from_lambda(
        cls, function: Callable[[Any], Any], evaluator: Evaluator | None = None
    ) -> "BoundValue":
        """Host callable receiving the data context; its result is walked like a literal tree."""
        return cls(Expression.lambda_(function), evaluator=evaluator)

    @classmethod
    def unset(cls, evaluator: Evaluator | None = None) -> "BoundValue":
        """Bound value with nothing assigned; resolves to ``(None, None)``."""
        return cls(None, evaluator=evaluator)

    # --- State ---

    @property
    def value(self) -> Any:
        """Literal value, None when the template is an expression or unset."""
        if isinstance(self._template, DirectValue):
            return self._template.value
        return None

    @property
    def expression_text(self) -> str | None:
        """Expression text, None when the template is a literal or unset."""
        if isinstance(self._template, ExpressionBacked):
            return self._template.text
        return None

    @property
    def is_set(self) -> bool:
        return self._template is not None

    def set_value(self, value: Any) -> None:
        """
        Classify and store a new value, discarding the previous one.

        Params:
            value: None, text, an Expression, or any literal value
        """
        self._template = None

        if value is None:
            return
        if isinstance(value, str):
            self._template = ExpressionBacked(classify_text(value), from_text=True)
            return
        if isinstance(value, Expression):
            self._template = ExpressionBacked(
                EXPRESSION_MARKER + value.text,
                from_text=False,
                expression=value if value.is_lambda else None,
            )
            return
        self._template = DirectValue(value)

    # --- Resolution ---

    def try_get_value(self, context: Any) -> ResolveResult:
        """
        Resolve against a data context.

        Expression text is evaluated; a literal is taken as is. Unless the
        template came from text, a successful non-null result is converted to
        tree form, deep-cloned, and walked so that nested expression strings
        are resolved as well. Errors inside the walk never surface here.

        Params:
            context: Data context for expressions; read but never modified

        Returns:
            ``(value, error)``; error is None on success
        """
        if self._template is None:
            return None, None
        return resolve_template(self._template, context, self._evaluator)

    def get_value(self, context: Any) -> Any:
        """
        Resolve against a data context, raising on failure.

        Raises:
            ResolutionError: If resolution reports an error
        """
        value, error = self.try_get_value(context)
        if error is not None:
            raise ResolutionError(self.expression_text, error)
        return value

    def to_expression(self) -> Expression:
        """
        Compile the template into an expression.

        Literals and unset values become constant expressions.

        Raises:
            ExpressionParseError: If the expression text does not compile
        """
        template = self._template
        if isinstance(template, ExpressionBacked) and template.expression is not None:
            return template.expression
        text = self.expression_text
        if text is None:
            return Expression.constant(self.value)
        return Expression.parse(text[len(EXPRESSION_MARKER) :])

    def to_document(self) -> Any:
        """Serialized form: the expression text, or the literal value."""
        text = self.expression_text
        return text if text is not None else self.value

    # --- pydantic integration ---

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda bound: bound.to_document()
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> dict[str, Any]:
        return {
            "description": "Literal value, '=' expression, or interpolation template"
        }

    @classmethod
    def _validate(cls, value: Any) -> "BoundValue":
        if isinstance(value, BoundValue):
            return value
        return cls(value)

    # --- Dunder ---

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundValue):
            return NotImplemented
        return self._template == other._template

    __hash__ = None

    def __str__(self) -> str:
        text = self.expression_text
        if text is not None:
            return text
        return "" if self.value is None else str(self.value)

    def __repr__(self) -> str:
        if self._template is None:
            return "BoundValue()"
        return f"BoundValue({self.to_document()!r})"

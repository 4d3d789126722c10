"""
Tests for BoundValue as a pydantic field type.

Documents bind their fields through pydantic validation; each field value is
classified exactly as direct assignment would classify it.
"""

from pydantic import BaseModel

from bindtree import BoundValue


class DialogStep(BaseModel):
    prompt: BoundValue
    max_turns: BoundValue
    options: BoundValue | None = None


class TestValidation:
    """Test classification during model validation."""

    def test_fields_are_classified(self):
        """Raw document input becomes bound values."""
        step = DialogStep(prompt="Hi ${name}", max_turns="=limit + 1")
        assert isinstance(step.prompt, BoundValue)
        assert step.prompt.expression_text == "=`Hi ${name}`"
        assert step.max_turns.expression_text == "=limit + 1"
        assert step.options is None

    def test_literal_fields(self):
        """Non-textual input is kept as a literal."""
        step = DialogStep(prompt="x", max_turns=3, options={"retry": "=tries"})
        assert step.max_turns.value == 3
        assert step.options.value == {"retry": "=tries"}

    def test_bound_value_instances_pass_through(self):
        """Existing bound values are used as they are."""
        bound = BoundValue("=x")
        step = DialogStep(prompt=bound, max_turns=1)
        assert step.prompt is bound

    def test_resolution_from_model(self):
        """Validated fields resolve against runtime data."""
        step = DialogStep.model_validate(
            {"prompt": "Hi ${name}", "max_turns": "=limit + 1", "options": {"retry": "=tries"}}
        )
        context = {"name": "Ann", "limit": 4, "tries": 2}
        assert step.prompt.get_value(context) == "Hi Ann"
        assert step.max_turns.get_value(context) == 5
        assert step.options.get_value(context) == {"retry": 2}


class TestSerialization:
    """Test serialization of bound value fields."""

    def test_dump_uses_document_form(self):
        """Fields serialize to expression text or the literal."""
        step = DialogStep(prompt="Hi ${name}", max_turns=3)
        assert step.model_dump() == {
            "prompt": "=`Hi ${name}`",
            "max_turns": 3,
            "options": None,
        }

    def test_round_trip(self):
        """A dumped model validates back to equal bound values."""
        step = DialogStep(prompt="Hi ${name}", max_turns="=limit", options=[1, "=2"])
        restored = DialogStep.model_validate_json(step.model_dump_json())
        assert restored.max_turns == step.max_turns
        assert restored.options == step.options
        assert restored.prompt.get_value({"name": "Joe"}) == "Hi Joe"

    def test_json_schema(self):
        """Bound value fields describe themselves in JSON schema."""
        schema = DialogStep.model_json_schema()
        assert "description" in schema["properties"]["prompt"]

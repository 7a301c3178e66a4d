"""Unit tests for dgp/prompts/templates.py and dgp/utils/schema_utils.py"""
import pytest
from pydantic import BaseModel, Field

from dgp.exceptions import AgentOutputError, PromptTemplateError
from dgp.prompts.templates import (
    AMBIENT_TRACK_TEMPLATE,
    DIFFICULTY_GUIDANCE,
    GRADING_TEMPLATE,
    SENTENCE_BATCH_TEMPLATE,
    SFX_SOUNDS,
    SFX_TEMPLATE,
    PromptTemplate,
)
from dgp.utils.schema_utils import (
    extract_json_from_text,
    get_strict_schema,
    make_schema_strict,
    parse_json_safely,
    validate_agent_output,
)


# ---------------------------------------------------------------------------
# PromptTemplate
# ---------------------------------------------------------------------------

class TestPromptTemplate:
    """Tests for PromptTemplate rendering and validation."""

    def test_extract_variables(self):
        pt = PromptTemplate("{greeting} {name}, welcome to {place}")
        assert pt.required_vars == {"greeting", "name", "place"}

    def test_escaped_braces_are_not_variables(self):
        pt = PromptTemplate('Respond with {{"key": "{value}"}}')
        assert pt.required_vars == {"value"}
        assert pt.render(value="x") == 'Respond with {"key": "x"}'

    def test_render_with_defaults(self):
        pt = PromptTemplate("Hello {name}", name="greet", defaults={"name": "World"})
        assert pt.render() == "Hello World"
        assert pt.render(name="Sam") == "Hello Sam"

    def test_missing_variables_raise(self):
        pt = PromptTemplate("{b} and {a}", name="pair")
        with pytest.raises(PromptTemplateError) as exc_info:
            pt.render()
        assert exc_info.value.template_name == "pair"
        assert exc_info.value.missing_vars == ["a", "b"]


class TestPracticeTemplates:
    """The shipped templates render with their documented variables."""

    def test_sentence_batch(self):
        prompt = SENTENCE_BATCH_TEMPLATE.render(
            count=5, difficulty="Easy", difficulty_guidance=DIFFICULTY_GUIDANCE["Easy"],
        )
        assert "Generate 5 different sentences" in prompt
        assert '"sentences"' in prompt

    def test_difficulty_guidance_covers_all_levels(self):
        assert set(DIFFICULTY_GUIDANCE) == {"Easy", "Medium", "Hard"}

    def test_grading(self):
        prompt = GRADING_TEMPLATE.render(
            sentence="the dog ran", indexed_words="0: the, 1: dog, 2: ran",
            stage="Tuesday", work_json="{}",
        )
        assert "Stage: Tuesday" in prompt
        assert '"is_correct"' in prompt

    def test_grading_requires_work(self):
        with pytest.raises(PromptTemplateError):
            GRADING_TEMPLATE.render(sentence="s", indexed_words="", stage="Monday")

    def test_audio_templates(self):
        assert "Wednesday" in AMBIENT_TRACK_TEMPLATE.render(stage="Wednesday")
        for kind in ("select", "success", "error"):
            assert SFX_SOUNDS[kind] in SFX_TEMPLATE.render(sound=SFX_SOUNDS[kind])


# ---------------------------------------------------------------------------
# Schema utilities
# ---------------------------------------------------------------------------

class _Inner(BaseModel):
    label: str


class _Outer(BaseModel):
    ok: bool = Field(description="flag")
    inner: _Inner
    note: str = "default"


class TestStrictSchema:

    def test_all_properties_required(self):
        schema = get_strict_schema(_Outer)
        assert schema["additionalProperties"] is False
        assert set(schema["required"]) == {"ok", "inner", "note"}

    def test_defs_are_strict_too(self):
        schema = get_strict_schema(_Outer)
        inner = schema["$defs"]["_Inner"]
        assert inner["additionalProperties"] is False
        assert inner["required"] == ["label"]

    def test_ref_siblings_dropped(self):
        schema = make_schema_strict({"$ref": "#/$defs/X", "description": "dropped"})
        assert schema == {"$ref": "#/$defs/X"}


class TestParsing:

    def test_parse_plain_json(self):
        assert parse_json_safely('{"a": 1}') == {"a": 1}

    def test_parse_fenced_json(self):
        assert parse_json_safely('```json\n{"a": 2}\n```') == {"a": 2}

    def test_parse_rejects_non_object(self):
        with pytest.raises(AgentOutputError):
            parse_json_safely("[1, 2]", agent_name="grader")

    def test_parse_rejects_garbage(self):
        with pytest.raises(AgentOutputError) as exc_info:
            parse_json_safely("no json here", agent_name="grader")
        assert exc_info.value.agent_name == "grader"

    def test_extract_embedded_object(self):
        assert extract_json_from_text('prefix {"k": "v"} suffix') == '{"k": "v"}'

    def test_extract_nothing(self):
        with pytest.raises(ValueError):
            extract_json_from_text("nothing")

    def test_validate_agent_output(self):
        result = validate_agent_output({"ok": True, "inner": {"label": "x"}}, _Outer, "tester")
        assert result.inner.label == "x"
        with pytest.raises(AgentOutputError):
            validate_agent_output({"ok": True}, _Outer, "tester")

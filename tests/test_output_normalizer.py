import pytest

from bink_agent.errors import MalformedOutput
from bink_agent.output import OutputParser, normalize_response, parse_json_output

RAW = {
    "output": "12.5 BNB",
    "truncated": False,
    "system_message": "You are...",
    "formatting_instructions": "",
    "input": "balance?",
    "chat_history": [],
    "agent_scratchpad": [],
}


def test_bookkeeping_fields_are_removed():
    assert normalize_response(RAW) == {"output": "12.5 BNB", "truncated": False}


def test_normalizing_twice_changes_nothing():
    once = normalize_response(RAW)

    assert normalize_response(once) == once


@pytest.mark.parametrize("output, expected", [
    ('{"output": {"a": 1}}', {"a": 1}),
    ('{"a": 1}', {"a": 1}),
    ('```json\n{"output": [1, 2]}\n```', [1, 2]),
    ({"output": "already parsed"}, "already parsed"),
    ('{"output": null, "a": 1}', {"output": None, "a": 1}),
    ('{"outcome": "ok"}', {"outcome": "ok"}),
])
def test_parser_unwraps_the_output_envelope(output, expected):
    result = normalize_response({"output": output, "input": "x"}, OutputParser())

    assert result == {"output": expected}


def test_unparseable_output_is_malformed():
    with pytest.raises(MalformedOutput) as excinfo:
        normalize_response({"output": "not json"}, OutputParser())

    assert excinfo.value.raw_output == "not json"


def test_schema_is_enforced_on_the_payload():
    parser = OutputParser(json_schema={
        "type": "object",
        "properties": {"balance": {"type": "number"}},
        "required": ["balance"],
    })

    assert parser.parse('{"output": {"balance": 12.5}}') == {"balance": 12.5}
    with pytest.raises(MalformedOutput, match="does not match schema"):
        parser.parse('{"output": {"balance": "lots"}}')


def test_format_instructions_mention_the_envelope():
    instructions = OutputParser().get_format_instructions()

    assert '{"output": ...}' in instructions
    assert "schema" not in instructions


def test_parse_json_output_reports_bad_json():
    with pytest.raises(MalformedOutput):
        parse_json_output("{broken")

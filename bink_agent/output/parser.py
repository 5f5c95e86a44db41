import json
import re
from typing import Any, Dict, Optional

import jsonschema
from pydantic import BaseModel, Field

from bink_agent.errors import MalformedOutput

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)

FORMAT_INSTRUCTIONS = """You must format your final answer as a JSON object with a single "output" key, like {{"output": ...}}.
{schema_section}Reply with the JSON object only, with no surrounding text."""


def parse_json_output(text: str) -> Any:
    """Parse a JSON reply, tolerating a surrounding markdown code fence."""
    candidate = text.strip()
    match = _CODE_FENCE.match(candidate)
    if match:
        candidate = match.group(1)
    try:
        return json.loads(candidate)
    except (TypeError, ValueError) as e:
        raise MalformedOutput(f"Model output is not valid JSON: {e}", raw_output=text) from e


def unwrap_envelope(parsed: Any) -> Any:
    """``{"output": X}`` -> ``X``; a missing or null ``output`` returns the whole value."""
    if isinstance(parsed, dict) and parsed.get("output") is not None:
        return parsed["output"]
    return parsed


class OutputParser(BaseModel):
    """Structured-output contract for the final answer.

    ``json_schema`` describes the payload inside the ``{"output": ...}``
    envelope. Without a schema any JSON payload is accepted.
    """

    json_schema: Optional[Dict[str, Any]] = Field(default=None)

    def get_format_instructions(self) -> str:
        schema_section = ""
        if self.json_schema:
            schema_section = (
                "The value of \"output\" must satisfy this JSON schema:\n"
                f"```json\n{json.dumps(self.json_schema, indent=2)}\n```\n"
            )
        return FORMAT_INSTRUCTIONS.format(schema_section=schema_section)

    def validate_payload(self, payload: Any) -> Any:
        if self.json_schema:
            try:
                jsonschema.validate(instance=payload, schema=self.json_schema)
            except jsonschema.ValidationError as e:
                raise MalformedOutput(f"Output does not match schema: {e.message}", raw_output=payload) from e
        return payload

    def parse(self, output: Any) -> Any:
        parsed = parse_json_output(output) if isinstance(output, str) else output
        return self.validate_payload(unwrap_envelope(parsed))

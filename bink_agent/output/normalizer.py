from typing import Any, Dict, Mapping, Optional

from bink_agent.output.parser import OutputParser

# Prompt bookkeeping that never leaves the node.
BOOKKEEPING_FIELDS = (
    "system_message",
    "formatting_instructions",
    "input",
    "chat_history",
    "agent_scratchpad",
)


def strip_bookkeeping(response: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in response.items() if key not in BOOKKEEPING_FIELDS}


def normalize_response(raw: Mapping[str, Any], output_parser: Optional[OutputParser] = None) -> Dict[str, Any]:
    """Strip bookkeeping fields and, with a parser, unwrap the structured output.

    Raises:
        MalformedOutput: If a parser is active and ``output`` is not valid JSON
            or does not satisfy the parser's schema.
    """
    result = strip_bookkeeping(raw)
    if output_parser is not None and "output" in result:
        result["output"] = output_parser.parse(result["output"])
    return result

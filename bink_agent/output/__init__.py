from .normalizer import BOOKKEEPING_FIELDS, normalize_response, strip_bookkeeping
from .parser import OutputParser, parse_json_output, unwrap_envelope

__all__ = [
    "BOOKKEEPING_FIELDS",
    "normalize_response",
    "strip_bookkeeping",
    "OutputParser",
    "parse_json_output",
    "unwrap_envelope",
]

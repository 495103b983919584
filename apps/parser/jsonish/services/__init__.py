from jsonish.services.coercion import coerce
from jsonish.services.errors import CoercionError, JsonishError, NoJsonFound, ParseError
from jsonish.services.llm_json import (
    extract_json,
    parse_bool,
    parse_float,
    parse_int,
    parse_model,
    parse_streaming,
    parse_string,
    parse_to_value,
)
from jsonish.services.parse_trace import ParseTraceCollector, ParseTraceEntry, bind_parse_trace_collector

__all__ = [
    "CoercionError",
    "JsonishError",
    "NoJsonFound",
    "ParseError",
    "ParseTraceCollector",
    "ParseTraceEntry",
    "bind_parse_trace_collector",
    "coerce",
    "extract_json",
    "parse_bool",
    "parse_float",
    "parse_int",
    "parse_model",
    "parse_streaming",
    "parse_string",
    "parse_to_value",
]

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from jsonish.config import settings
from jsonish.services.candidates import fenced_blocks, find_candidates
from jsonish.services.coercion import INTEGER_LITERAL, coerce, parse_number_literal
from jsonish.services.errors import NoJsonFound, ParseError
from jsonish.services.normalizer import normalize
from jsonish.services.parse_trace import record_parse_trace
from jsonish.services.partial_repair import repair_partial
from jsonish.services.type_schema import TypeSchema
from jsonish.services.validator import is_valid_json
from jsonish.services.values import Value, from_json_string

logger = logging.getLogger(__name__)


def fix_and_validate(text: str) -> Optional[str]:
    fixed = normalize(text)
    if is_valid_json(fixed):
        return fixed
    return None


def _parse_direct(text: str) -> Optional[str]:
    if not text.startswith(("{", "[")):
        return None
    fixed = fix_and_validate(text)
    if fixed is not None:
        return fixed
    # Fixes can break valid input, e.g. a `{key:` pattern inside a string.
    if is_valid_json(text):
        return text
    return None


def _parse_fenced(text: str) -> Optional[str]:
    for content in fenced_blocks(text):
        fixed = fix_and_validate(content)
        if fixed is not None:
            return fixed
    return None


def extract_json(raw_text: str, is_done: bool = True) -> str:
    trimmed = raw_text.strip()
    length = len(trimmed)

    direct = _parse_direct(trimmed)
    if direct is not None:
        logger.debug("json resolved directly (%d chars)", length)
        record_parse_trace(resolved_by="direct", input_length=length, is_done=is_done)
        return direct

    fenced = _parse_fenced(trimmed)
    if fenced is not None:
        logger.debug("json resolved from fenced code block")
        record_parse_trace(resolved_by="fenced", input_length=length, is_done=is_done)
        return fenced

    candidates = find_candidates(trimmed)
    for tried, candidate in enumerate(candidates, start=1):
        fixed = fix_and_validate(candidate.text)
        if fixed is not None:
            logger.debug("json resolved from candidate at offset %d (%d tried)", candidate.start, tried)
            record_parse_trace(
                resolved_by="candidate",
                input_length=length,
                is_done=is_done,
                candidates_tried=tried,
                candidate_start=candidate.start,
            )
            return fixed

    if not is_done:
        partial = repair_partial(trimmed)
        if partial is not None:
            logger.debug("json resolved by closing a partial fragment")
            record_parse_trace(
                resolved_by="partial",
                input_length=length,
                is_done=is_done,
                candidates_tried=len(candidates),
            )
            return partial
        record_parse_trace(
            resolved_by="stream_fallback",
            input_length=length,
            is_done=is_done,
            candidates_tried=len(candidates),
        )
        return settings.stream_fallback

    record_parse_trace(
        resolved_by="failed",
        input_length=length,
        is_done=is_done,
        candidates_tried=len(candidates),
    )
    logger.info("no valid json among %d candidates", len(candidates))
    raise NoJsonFound(trimmed[: settings.error_preview_chars])


def parse_streaming(raw_text: str, is_done: bool) -> str:
    return extract_json(raw_text, is_done=is_done)


def parse_to_value(raw_text: str, schema: TypeSchema | None = None, *, is_done: bool = True) -> Value:
    value = from_json_string(extract_json(raw_text, is_done=is_done))
    if schema is not None:
        value = coerce(value, schema)
    return value


def parse_string(output: str) -> str:
    return output.strip()


def parse_bool(output: str) -> bool:
    word = output.strip().lower()
    if word in {"true", "yes", "1"}:
        return True
    if word in {"false", "no", "0"}:
        return False
    raise ParseError(f"Cannot parse '{output}' as boolean")


def parse_int(output: str) -> int:
    trimmed = output.strip()
    if not INTEGER_LITERAL.fullmatch(trimmed):
        raise ParseError(f"Cannot parse '{output}' as integer")
    return int(trimmed)


def parse_float(output: str) -> float:
    number = parse_number_literal(output.strip())
    if number is None:
        raise ParseError(f"Cannot parse '{output}' as float")
    return number


def _snake_to_camel(key: str) -> str:
    core = key.lstrip("_")
    head, *rest = core.split("_")
    return key[: len(key) - len(core)] + head + "".join(part[:1].upper() + part[1:] for part in rest)


def _camelize_keys(payload: Any) -> Any:
    if isinstance(payload, dict):
        return {_snake_to_camel(key): _camelize_keys(item) for key, item in payload.items()}
    if isinstance(payload, list):
        return [_camelize_keys(item) for item in payload]
    return payload


def _validate(model: Any, payload: Any) -> Any:
    if isinstance(model, type) and issubclass(model, BaseModel):
        return model.model_validate(payload)
    return TypeAdapter(model).validate_python(payload)


def parse_model(raw_text: str, model: Any, schema: TypeSchema | None = None, *, is_done: bool = True) -> Any:
    payload = parse_to_value(raw_text, schema, is_done=is_done).to_python()
    try:
        return _validate(model, payload)
    except ValidationError as error:
        first_error = error

    # Models declare camelCase fields; LLMs often answer in snake_case.
    camelized = _camelize_keys(payload)
    if camelized != payload:
        try:
            return _validate(model, camelized)
        except ValidationError:
            pass
    name = getattr(model, "__name__", repr(model))
    raise ParseError(f"Failed to decode {name}: {first_error}") from first_error

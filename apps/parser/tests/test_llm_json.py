from __future__ import annotations

import json
from typing import Literal, Optional

import pytest
from pydantic import BaseModel

from jsonish.config import settings
from jsonish.services.errors import NoJsonFound, ParseError
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
from jsonish.services.parse_trace import ParseTraceCollector, bind_parse_trace_collector
from jsonish.services.type_schema import FloatType, IntType, ListType, MapType, OptionalType, StringType
from jsonish.services.values import ArrayValue, IntValue, MapValue, NullValue, StringValue


@pytest.mark.parametrize(
    "text",
    [
        '{"name": "test", "value": 42}',
        '["a", "b", "c"]',
        '{"user": {"name": "Alice", "age": 30}, "active": true}',
        '{"text": "Hello \\"world\\" with \\\\ backslash"}',
        '{"emoji": "👋 Hello 世界"}',
        "{}",
        "[]",
    ],
)
def test_valid_json_passes_through_unchanged(text: str) -> None:
    assert extract_json(text) == text


@pytest.mark.parametrize(
    "text",
    [
        '{"a": 1, "b": [1, 2, {"c": null}]}',
        "{name: 'Alice', age: 30,}",
        'prefix ```json\n{"a": 1,}\n``` suffix',
        'note: {x:1} details {y:2}',
    ],
)
def test_extract_json_is_idempotent(text: str) -> None:
    once = extract_json(text)
    assert extract_json(once) == once


def test_valid_json_with_key_like_string_content_is_kept() -> None:
    text = '{"a": "{b: 1}"}'
    assert extract_json(text) == text


def test_lenient_object_is_repaired() -> None:
    result = extract_json("{name: 'Alice', age: 30,}")

    assert result == '{"name": "Alice", "age": 30}'
    assert json.loads(result) == {"name": "Alice", "age": 30}


def test_json_fenced_block_is_extracted() -> None:
    assert extract_json('```json\n{"a":1}\n```') == '{"a":1}'


def test_fenced_block_with_surrounding_prose() -> None:
    text = """I've analyzed the sentiment of your text. Here's my analysis:

```json
{
  "sentiment": "positive",
  "confidence": 0.92,
  "keywords": ["love", "great", "amazing"],
}
```

The overall sentiment is positive with high confidence."""
    payload = json.loads(extract_json(text))

    assert payload["sentiment"] == "positive"
    assert payload["confidence"] == 0.92
    assert len(payload["keywords"]) == 3


def test_untagged_fenced_block_is_extracted() -> None:
    assert extract_json('```\n{"value": 123}\n```') == '{"value": 123}'


def test_comments_are_removed() -> None:
    text = """{
  "name": "test", // this is the name
  /* the count */
  "value": 42
}"""
    result = extract_json(text)

    assert "//" not in result
    assert "/*" not in result
    assert json.loads(result) == {"name": "test", "value": 42}


def test_mixed_quotes_and_keys() -> None:
    assert extract_json("""{"name": 'test', 'count': 5}""") == '{"name": "test", "count": 5}'


def test_json_embedded_in_prose() -> None:
    text = 'Based on my analysis:\n{"sentiment": "positive", "confidence": 0.95}\nLet me know if you need more.'
    assert extract_json(text) == '{"sentiment": "positive", "confidence": 0.95}'


def test_array_embedded_in_prose() -> None:
    assert extract_json('Here are the results:\n["apple", "banana"]') == '["apple", "banana"]'


def test_earliest_valid_candidate_wins() -> None:
    assert extract_json("note: {x:1} details {y:2}") == '{"x":1}'


def test_invalid_candidate_is_skipped() -> None:
    assert extract_json('bad {not: json here} good {"ok": true}') == '{"ok": true}'


def test_raw_newlines_inside_strings_are_escaped() -> None:
    result = extract_json('{"text": "line1\nline2"}')

    assert "\\n" in result
    assert json.loads(result) == {"text": "line1\nline2"}


def test_incomplete_stream_closes_brackets_in_nesting_order() -> None:
    assert extract_json('{"a": [1,2', is_done=False) == '{"a": [1,2]}'


def test_incomplete_stream_closes_open_string() -> None:
    assert extract_json('{"name": "test', is_done=False) == '{"name": "test"}'


def test_incomplete_stream_drops_dangling_comma() -> None:
    assert extract_json("Result: [1, 2, [3, 4],", is_done=False) == "[1, 2, [3, 4]]"


def test_incomplete_stream_without_json_returns_fallback() -> None:
    assert extract_json("Thinking about it", is_done=False) == "{}"
    assert parse_streaming('{"a', is_done=False) == "{}"


def test_complete_stream_without_json_raises() -> None:
    with pytest.raises(NoJsonFound):
        extract_json("Hello, world!")
    with pytest.raises(NoJsonFound):
        extract_json("")


def test_truncated_output_is_not_repaired_when_stream_is_done() -> None:
    with pytest.raises(NoJsonFound):
        extract_json('{"a": [1,2')


def test_error_preview_respects_settings() -> None:
    original = settings.error_preview_chars
    try:
        object.__setattr__(settings, "error_preview_chars", 5)
        with pytest.raises(NoJsonFound) as info:
            extract_json("Hello, world!")
    finally:
        object.__setattr__(settings, "error_preview_chars", original)

    assert info.value.preview == "Hello"
    assert str(info.value).endswith(": Hello")


def test_parse_trace_records_resolution_path() -> None:
    collector = ParseTraceCollector()
    with bind_parse_trace_collector(collector):
        extract_json('```json\n{"a": 1}\n```')
        extract_json("note: {x:1} details {y:2}")
        extract_json("nothing", is_done=False)
    extract_json("{}")

    assert [entry.resolved_by for entry in collector.entries] == ["fenced", "candidate", "stream_fallback"]
    assert collector.entries[1].candidate_start == 6
    assert collector.entries[1].candidates_tried == 1


def test_parse_to_value_decodes_and_coerces() -> None:
    value = parse_to_value('Answer: ["1", 2.0, 3]', ListType(inner=IntType()))
    assert value == ArrayValue((IntValue(1), IntValue(2), IntValue(3)))


def test_parse_to_value_without_schema_keeps_raw_shape() -> None:
    value = parse_to_value("{name: 'Ada', team: null}")
    assert value == MapValue({"name": StringValue("Ada"), "team": NullValue()})


def test_parse_to_value_with_map_schema() -> None:
    value = parse_to_value('{"a": 1, "b": null}', MapType(value=OptionalType(inner=StringType())))
    assert value == MapValue({"a": StringValue("1"), "b": NullValue()})


def test_scalar_helpers() -> None:
    assert parse_string("  hi \n") == "hi"
    assert parse_bool(" YES ") is True
    assert parse_bool("0") is False
    assert parse_int(" -12 ") == -12
    assert parse_float("3.5") == 3.5

    with pytest.raises(ParseError):
        parse_bool("maybe")
    with pytest.raises(ParseError):
        parse_int("4.5")
    with pytest.raises(ParseError):
        parse_float("abc")


@pytest.mark.parametrize("text", ["nan", "inf", "1e999", "1_000"])
def test_parse_float_rejects_non_finite_and_loose_literals(text: str) -> None:
    with pytest.raises(ParseError):
        parse_float(text)


def test_out_of_range_number_is_not_extracted() -> None:
    with pytest.raises(NoJsonFound):
        extract_json('{"big": 1e999}')


def test_package_exports_pipeline_entry_points() -> None:
    from jsonish.services import coerce, extract_json as exported_extract_json, parse_model as exported_parse_model

    value = parse_to_value(exported_extract_json("{ok: 'yes'}"))
    assert coerce(value, MapType(value=StringType())) == MapValue({"ok": StringValue("yes")})
    assert exported_parse_model("{ok: 'yes'}", dict[str, str]) == {"ok": "yes"}


class Reviewer(BaseModel):
    fullName: str
    yearsActive: int
    team: Optional[str] = None


class ReviewBoard(BaseModel):
    reviewerList: list[Reviewer]


class Verdict(BaseModel):
    status: Literal["ok", "error"]


def test_parse_model_validates_matching_keys() -> None:
    reviewer = parse_model('{"fullName": "Ada", "yearsActive": 3, "team": null}', Reviewer)
    assert reviewer == Reviewer(fullName="Ada", yearsActive=3)


def test_parse_model_retries_with_camel_case_keys() -> None:
    board = parse_model(
        'Here you go:\n{"reviewer_list": [{"full_name": "Ada", "years_active": "36", "team": "core"}]}',
        ReviewBoard,
    )

    assert board.reviewerList == [Reviewer(fullName="Ada", yearsActive=36, team="core")]


def test_parse_model_accepts_plain_type_targets() -> None:
    assert parse_model("Scores: [1, 2.5]", list[float]) == [1.0, 2.5]
    assert parse_model('{"x": "1.5"}', dict[str, float], MapType(value=FloatType())) == {"x": 1.5}


@pytest.mark.parametrize(
    ("text", "model"),
    [('{"status": "maybe"}', Verdict), ("{}", Verdict), ('{"full_name": "Ada"}', Reviewer)],
)
def test_parse_model_wraps_validation_failures(text: str, model: type[BaseModel]) -> None:
    with pytest.raises(ParseError) as info:
        parse_model(text, model)

    assert str(info.value).startswith(f"Failed to decode {model.__name__}")
    assert info.value.__cause__ is not None


def test_parse_model_surfaces_missing_json() -> None:
    with pytest.raises(NoJsonFound):
        parse_model("no json at all", Verdict)

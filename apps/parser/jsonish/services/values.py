from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, ClassVar, Union

from jsonish.services.errors import ParseError


@dataclass(frozen=True)
class NullValue:
    type_name: ClassVar[str] = "null"

    def to_python(self) -> None:
        return None


@dataclass(frozen=True)
class BoolValue:
    value: bool
    type_name: ClassVar[str] = "bool"

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True)
class IntValue:
    value: int
    type_name: ClassVar[str] = "int"

    def to_python(self) -> int:
        return self.value


@dataclass(frozen=True)
class FloatValue:
    value: float
    type_name: ClassVar[str] = "float"

    def to_python(self) -> float:
        return self.value


@dataclass(frozen=True)
class StringValue:
    value: str
    type_name: ClassVar[str] = "string"

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class ArrayValue:
    items: tuple[Value, ...]
    type_name: ClassVar[str] = "array"

    def __getitem__(self, index: int) -> Value:
        return self.items[index]

    def __len__(self) -> int:
        return len(self.items)

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True)
class MapValue:
    entries: Mapping[str, Value]
    type_name: ClassVar[str] = "map"
    __hash__ = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __getitem__(self, key: str) -> Value:
        return self.entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def get(self, key: str) -> Value | None:
        return self.entries.get(key)

    def to_python(self) -> dict[str, Any]:
        return {key: item.to_python() for key, item in self.entries.items()}


Value = Union[NullValue, BoolValue, IntValue, FloatValue, StringValue, ArrayValue, MapValue]

NULL = NullValue()


def from_python(obj: Any) -> Value:
    if obj is None:
        return NULL
    # bool is a subclass of int, so it has to be checked first.
    if isinstance(obj, bool):
        return BoolValue(obj)
    if isinstance(obj, int):
        return IntValue(obj)
    if isinstance(obj, float):
        return FloatValue(obj)
    if isinstance(obj, str):
        return StringValue(obj)
    if isinstance(obj, (list, tuple)):
        return ArrayValue(tuple(from_python(item) for item in obj))
    if isinstance(obj, dict):
        return MapValue({str(key): from_python(item) for key, item in obj.items()})
    return StringValue(str(obj))


def _reject_constant(name: str) -> Any:
    raise ParseError(f"Non-finite number {name} is not valid JSON")


def _finite_float(text: str) -> float:
    number = float(text)
    if not math.isfinite(number):
        raise ParseError(f"Number {text} is out of range")
    return number


def from_json_string(text: str) -> Value:
    try:
        payload = json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)
    except json.JSONDecodeError as error:
        raise ParseError(f"Invalid JSON: {error.msg} at position {error.pos}") from error
    return from_python(payload)


def to_json_string(value: Value, *, pretty: bool = False) -> str:
    try:
        if pretty:
            return json.dumps(value.to_python(), indent=2, ensure_ascii=False, allow_nan=False)
        return json.dumps(value.to_python(), ensure_ascii=False, allow_nan=False)
    except ValueError as error:
        raise ParseError(f"Cannot serialize value: {error}") from error

from __future__ import annotations

import math
import re

from jsonish.services.errors import CoercionError
from jsonish.services.type_schema import (
    BoolType,
    FloatType,
    IntType,
    ListType,
    LiteralBoolType,
    LiteralIntType,
    LiteralStringType,
    MapType,
    NullType,
    OptionalType,
    ReferenceType,
    StringType,
    TypeSchema,
    UnionType,
)
from jsonish.services.values import (
    NULL,
    ArrayValue,
    BoolValue,
    FloatValue,
    IntValue,
    MapValue,
    NullValue,
    StringValue,
    Value,
)

INTEGER_LITERAL = re.compile(r"[+-]?[0-9]+")
FLOAT_LITERAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_TRUE_WORDS = frozenset({"true", "1", "yes"})
_FALSE_WORDS = frozenset({"false", "0", "no"})


def parse_number_literal(text: str) -> float | None:
    # Plain decimal notation only: no padding, underscores, inf or nan.
    if not FLOAT_LITERAL.fullmatch(text):
        return None
    number = float(text)
    if not math.isfinite(number):
        return None
    return number


def coerce(value: Value, schema: TypeSchema) -> Value:
    # Literal kinds follow the rules of their base kind; the literal itself is not compared.
    if isinstance(schema, (StringType, LiteralStringType)):
        return coerce_to_string(value)
    if isinstance(schema, (IntType, LiteralIntType)):
        return coerce_to_int(value)
    if isinstance(schema, FloatType):
        return coerce_to_float(value)
    if isinstance(schema, (BoolType, LiteralBoolType)):
        return coerce_to_bool(value)
    if isinstance(schema, NullType):
        if isinstance(value, NullValue):
            return NULL
        raise CoercionError("null", value.type_name)
    if isinstance(schema, OptionalType):
        if isinstance(value, NullValue):
            return NULL
        return coerce(value, schema.inner)
    if isinstance(schema, ListType):
        return coerce_to_list(value, schema.inner)
    if isinstance(schema, MapType):
        return coerce_to_map(value, schema.value)
    if isinstance(schema, UnionType):
        return coerce_to_union(value, schema.types)
    if isinstance(schema, ReferenceType):
        return value
    raise TypeError(f"Unsupported type schema: {schema!r}")


def coerce_to_string(value: Value) -> StringValue:
    if isinstance(value, StringValue):
        return value
    if isinstance(value, BoolValue):
        return StringValue("true" if value.value else "false")
    if isinstance(value, (IntValue, FloatValue)):
        return StringValue(str(value.value))
    raise CoercionError("string", value.type_name)


def coerce_to_int(value: Value) -> IntValue:
    if isinstance(value, IntValue):
        return value
    if isinstance(value, FloatValue):
        if value.value.is_integer():
            return IntValue(int(value.value))
        raise CoercionError("int", "float with decimal")
    if isinstance(value, StringValue):
        text = value.value
        if INTEGER_LITERAL.fullmatch(text):
            return IntValue(int(text))
        number = parse_number_literal(text)
        if number is not None and number.is_integer():
            return IntValue(int(number))
        raise CoercionError("int", f"string '{text}'")
    if isinstance(value, BoolValue):
        return IntValue(1 if value.value else 0)
    raise CoercionError("int", value.type_name)


def coerce_to_float(value: Value) -> FloatValue:
    if isinstance(value, FloatValue):
        return value
    if isinstance(value, IntValue):
        return FloatValue(float(value.value))
    if isinstance(value, StringValue):
        number = parse_number_literal(value.value)
        if number is None:
            raise CoercionError("float", f"string '{value.value}'")
        return FloatValue(number)
    raise CoercionError("float", value.type_name)


def coerce_to_bool(value: Value) -> BoolValue:
    if isinstance(value, BoolValue):
        return value
    if isinstance(value, IntValue):
        return BoolValue(value.value != 0)
    if isinstance(value, StringValue):
        word = value.value.lower()
        if word in _TRUE_WORDS:
            return BoolValue(True)
        if word in _FALSE_WORDS:
            return BoolValue(False)
        raise CoercionError("bool", f"string '{value.value}'")
    raise CoercionError("bool", value.type_name)


def coerce_to_list(value: Value, element: TypeSchema) -> ArrayValue:
    if not isinstance(value, ArrayValue):
        raise CoercionError("array", value.type_name)
    return ArrayValue(tuple(coerce(item, element) for item in value.items))


def coerce_to_map(value: Value, value_schema: TypeSchema) -> MapValue:
    # Object keys are always strings, so only the values are coerced.
    if not isinstance(value, MapValue):
        raise CoercionError("map", value.type_name)
    return MapValue({key: coerce(item, value_schema) for key, item in value.entries.items()})


def coerce_to_union(value: Value, members: list[TypeSchema]) -> Value:
    for member in members:
        try:
            return coerce(value, member)
        except CoercionError:
            continue
    raise CoercionError("union type", value.type_name)

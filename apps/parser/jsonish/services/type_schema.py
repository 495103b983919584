from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _SchemaNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    def as_list(self) -> ListType:
        return ListType(inner=self)

    def as_optional(self) -> OptionalType:
        return OptionalType(inner=self)

    def to_json_schema(self) -> dict[str, Any]:
        raise NotImplementedError

    def python_type_name(self) -> str:
        raise NotImplementedError


class StringType(_SchemaNode):
    type: Literal["string"] = "string"

    def to_json_schema(self) -> dict[str, Any]:
        return {"type": "string"}

    def python_type_name(self) -> str:
        return "str"


class IntType(_SchemaNode):
    type: Literal["int"] = "int"

    def to_json_schema(self) -> dict[str, Any]:
        return {"type": "integer"}

    def python_type_name(self) -> str:
        return "int"


class FloatType(_SchemaNode):
    type: Literal["float"] = "float"

    def to_json_schema(self) -> dict[str, Any]:
        return {"type": "number"}

    def python_type_name(self) -> str:
        return "float"


class BoolType(_SchemaNode):
    type: Literal["bool"] = "bool"

    def to_json_schema(self) -> dict[str, Any]:
        return {"type": "boolean"}

    def python_type_name(self) -> str:
        return "bool"


class NullType(_SchemaNode):
    type: Literal["null"] = "null"

    def to_json_schema(self) -> dict[str, Any]:
        return {"type": "null"}

    def python_type_name(self) -> str:
        return "None"


class LiteralStringType(_SchemaNode):
    type: Literal["literal_string"] = "literal_string"
    value: str

    def to_json_schema(self) -> dict[str, Any]:
        return {"type": "string", "enum": [self.value]}

    def python_type_name(self) -> str:
        return f"Literal[{self.value!r}]"


class LiteralIntType(_SchemaNode):
    type: Literal["literal_int"] = "literal_int"
    value: int

    # JSON Schema has no integer literal; the base kind is the closest match.
    def to_json_schema(self) -> dict[str, Any]:
        return {"type": "integer"}

    def python_type_name(self) -> str:
        return f"Literal[{self.value!r}]"


class LiteralBoolType(_SchemaNode):
    type: Literal["literal_bool"] = "literal_bool"
    value: bool

    def to_json_schema(self) -> dict[str, Any]:
        return {"type": "boolean"}

    def python_type_name(self) -> str:
        return f"Literal[{self.value!r}]"


class ListType(_SchemaNode):
    type: Literal["list"] = "list"
    inner: TypeSchema

    def to_json_schema(self) -> dict[str, Any]:
        return {"type": "array", "items": self.inner.to_json_schema()}

    def python_type_name(self) -> str:
        return f"list[{self.inner.python_type_name()}]"


class MapType(_SchemaNode):
    type: Literal["map"] = "map"
    key: TypeSchema = Field(default_factory=StringType)
    value: TypeSchema

    def to_json_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {},
            "additionalProperties": self.value.to_json_schema(),
        }

    def python_type_name(self) -> str:
        return f"dict[str, {self.value.python_type_name()}]"


class OptionalType(_SchemaNode):
    type: Literal["optional"] = "optional"
    inner: TypeSchema

    def to_json_schema(self) -> dict[str, Any]:
        return {"anyOf": [self.inner.to_json_schema(), {"type": "null"}]}

    def python_type_name(self) -> str:
        return f"Optional[{self.inner.python_type_name()}]"


class UnionType(_SchemaNode):
    """Members are tried in declared order during coercion."""

    type: Literal["union"] = "union"
    types: list[TypeSchema]

    def to_json_schema(self) -> dict[str, Any]:
        return {"anyOf": [member.to_json_schema() for member in self.types]}

    def python_type_name(self) -> str:
        if len(self.types) == 2:
            first, second = self.types
            if isinstance(second, NullType):
                return f"Optional[{first.python_type_name()}]"
            if isinstance(first, NullType):
                return f"Optional[{second.python_type_name()}]"
        return "Any"


class ReferenceType(_SchemaNode):
    type: Literal["ref"] = "ref"
    name: str

    def to_json_schema(self) -> dict[str, Any]:
        return {"$ref": f"#/$defs/{self.name}"}

    def python_type_name(self) -> str:
        return self.name


TypeSchema = Annotated[
    Union[
        StringType,
        IntType,
        FloatType,
        BoolType,
        NullType,
        LiteralStringType,
        LiteralIntType,
        LiteralBoolType,
        ListType,
        MapType,
        OptionalType,
        UnionType,
        ReferenceType,
    ],
    Field(discriminator="type"),
]

for _model in (ListType, MapType, OptionalType, UnionType):
    _model.model_rebuild()

_type_schema_adapter: TypeAdapter[TypeSchema] = TypeAdapter(TypeSchema)


def parse_type_schema(data: dict[str, Any]) -> TypeSchema:
    return _type_schema_adapter.validate_python(data)


def json_schema_document(root: TypeSchema, definitions: dict[str, TypeSchema] | None = None) -> dict[str, Any]:
    document = root.to_json_schema()
    if definitions:
        document["$defs"] = {name: schema.to_json_schema() for name, schema in definitions.items()}
    return document

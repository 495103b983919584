from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from jsonish.services.type_schema import TypeSchema


class ExtractRequest(BaseModel):
    text: str
    isDone: bool = True


class ExtractResponse(BaseModel):
    normalized: str


class CoerceRequest(BaseModel):
    value: Any = None
    typeSchema: TypeSchema


class CoerceResponse(BaseModel):
    value: Any = None


class ParseRequest(BaseModel):
    text: str
    isDone: bool = True
    typeSchema: Optional[TypeSchema] = None


class ParseResponse(BaseModel):
    normalized: str
    value: Any = None


class ExtractStreamRequest(BaseModel):
    chunks: list[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str


class PartialEvent(BaseModel):
    model_config = ConfigDict(extra="forbid")
    type: Literal["partial"]
    normalized: str


class FinalEvent(BaseModel):
    model_config = ConfigDict(extra="forbid")
    type: Literal["final"]
    normalized: str


class DoneEvent(BaseModel):
    model_config = ConfigDict(extra="forbid")
    type: Literal["done"]


class ErrorEvent(BaseModel):
    model_config = ConfigDict(extra="forbid")
    type: Literal["error"]
    message: str


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

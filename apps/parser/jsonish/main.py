from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import StreamingResponse

from jsonish.config import settings
from jsonish.models import (
    CoerceRequest,
    CoerceResponse,
    DoneEvent,
    ErrorEvent,
    ErrorResponse,
    ExtractRequest,
    ExtractResponse,
    ExtractStreamRequest,
    FinalEvent,
    ParseRequest,
    ParseResponse,
    PartialEvent,
    now_iso,
)
from jsonish.services.coercion import coerce
from jsonish.services.errors import JsonishError
from jsonish.services.llm_json import extract_json
from jsonish.services.values import from_json_string, from_python

app = FastAPI(title="jsonish", version="0.1.0")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "timestamp": now_iso()}


@app.post("/v1/extract", response_model=ExtractResponse, responses={400: {"model": ErrorResponse}})
async def extract(request: ExtractRequest) -> ExtractResponse:
    try:
        return ExtractResponse(normalized=extract_json(request.text, is_done=request.isDone))
    except JsonishError as error:
        raise HTTPException(status_code=400, detail=str(error)) from error


@app.post("/v1/coerce", response_model=CoerceResponse, responses={400: {"model": ErrorResponse}})
async def coerce_value(request: CoerceRequest) -> CoerceResponse:
    try:
        coerced = coerce(from_python(request.value), request.typeSchema)
    except JsonishError as error:
        raise HTTPException(status_code=400, detail=str(error)) from error
    return CoerceResponse(value=coerced.to_python())


@app.post("/v1/parse", response_model=ParseResponse, responses={400: {"model": ErrorResponse}})
async def parse(request: ParseRequest) -> ParseResponse:
    try:
        normalized = extract_json(request.text, is_done=request.isDone)
        value = from_json_string(normalized)
        if request.typeSchema is not None:
            value = coerce(value, request.typeSchema)
    except JsonishError as error:
        raise HTTPException(status_code=400, detail=str(error)) from error
    return ParseResponse(normalized=normalized, value=value.to_python())


@app.post("/v1/extract/stream")
async def extract_stream(request: ExtractStreamRequest):
    async def event_stream():
        received = ""
        for chunk in request.chunks:
            received += chunk
            event = PartialEvent(type="partial", normalized=extract_json(received, is_done=False))
            yield f"{event.model_dump_json()}\n"
        try:
            yield f"{FinalEvent(type='final', normalized=extract_json(received)).model_dump_json()}\n"
        except JsonishError as error:
            yield f"{ErrorEvent(type='error', message=str(error)).model_dump_json()}\n"
        yield f"{DoneEvent(type='done').model_dump_json()}\n"

    return StreamingResponse(event_stream(), media_type="application/x-ndjson; charset=utf-8")


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    uvicorn.run("jsonish.main:app", host="0.0.0.0", port=settings.port, reload=False)

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Iterator, Literal

ResolvedBy = Literal["direct", "fenced", "candidate", "partial", "stream_fallback", "failed"]


@dataclass
class ParseTraceEntry:
    resolved_by: ResolvedBy
    input_length: int
    is_done: bool
    candidates_tried: int = 0
    candidate_start: int | None = None


@dataclass
class ParseTraceCollector:
    entries: list[ParseTraceEntry] = field(default_factory=list)

    def record(self, entry: ParseTraceEntry) -> None:
        self.entries.append(entry)


_current_collector: ContextVar[ParseTraceCollector | None] = ContextVar("parse_trace_collector", default=None)


@contextmanager
def bind_parse_trace_collector(collector: ParseTraceCollector) -> Iterator[None]:
    token = _current_collector.set(collector)
    try:
        yield
    finally:
        _current_collector.reset(token)


def record_parse_trace(
    *,
    resolved_by: ResolvedBy,
    input_length: int,
    is_done: bool,
    candidates_tried: int = 0,
    candidate_start: int | None = None,
) -> None:
    collector = _current_collector.get()
    if collector is None:
        return

    collector.record(
        ParseTraceEntry(
            resolved_by=resolved_by,
            input_length=input_length,
            is_done=is_done,
            candidates_tried=candidates_tried,
            candidate_start=candidate_start,
        )
    )

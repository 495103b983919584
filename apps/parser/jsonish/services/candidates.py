from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional

from jsonish.services.normalizer import ScanState, advance

# Language-tagged fences are tried before untagged ones.
_FENCE_PATTERNS = (
    re.compile(r"```json\s*\n?([\s\S]*?)\n?\s*```"),
    re.compile(r"```JSON\s*\n?([\s\S]*?)\n?\s*```"),
    re.compile(r"```\s*\n?([\s\S]*?)\n?\s*```"),
)

_BRACKET_PAIRS = (("{", "}"), ("[", "]"))


@dataclass(frozen=True)
class Candidate:
    text: str
    start: int


def fenced_blocks(text: str) -> Iterator[str]:
    for pattern in _FENCE_PATTERNS:
        match = pattern.search(text)
        if match is not None:
            yield match.group(1).strip()


def balanced_span(text: str, search_from: int, opener: str, closer: str) -> Optional[tuple[int, int]]:
    start = text.find(opener, search_from)
    if start < 0:
        return None

    depth = 0
    state = ScanState.NORMAL
    for index in range(start, len(text)):
        char = text[index]
        if state is ScanState.NORMAL:
            if char == opener:
                depth += 1
            elif char == closer:
                depth -= 1
                if depth == 0:
                    return start, index + 1
        state = advance(state, char)

    return None


def find_candidates(text: str) -> list[Candidate]:
    candidates: list[Candidate] = []
    for opener, closer in _BRACKET_PAIRS:
        search_from = 0
        while True:
            span = balanced_span(text, search_from, opener, closer)
            if span is None:
                break
            start, end = span
            candidates.append(Candidate(text=text[start:end], start=start))
            search_from = start + 1

    # Stable sort: an object and an array never share a start offset.
    candidates.sort(key=lambda candidate: candidate.start)
    return candidates

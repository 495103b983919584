from __future__ import annotations

import re
from enum import Enum
from typing import Callable


class ScanState(Enum):
    NORMAL = "normal"
    IN_STRING = "in_string"
    ESCAPED = "escaped"
    IN_LINE_COMMENT = "in_line_comment"
    IN_BLOCK_COMMENT = "in_block_comment"


_WHITESPACE = " \n\r\t"
_BARE_KEY = re.compile(r"([{,])\s*([A-Za-z_$][A-Za-z0-9_$]*)\s*:")


def advance(state: ScanState, char: str) -> ScanState:
    """Transition for double-quoted string tracking; backslashes escape only inside strings."""
    if state is ScanState.ESCAPED:
        return ScanState.IN_STRING
    if state is ScanState.IN_STRING:
        if char == "\\":
            return ScanState.ESCAPED
        if char == '"':
            return ScanState.NORMAL
        return ScanState.IN_STRING
    if char == '"':
        return ScanState.IN_STRING
    return ScanState.NORMAL


def remove_comments(text: str) -> str:
    out: list[str] = []
    state = ScanState.NORMAL
    index = 0
    length = len(text)

    while index < length:
        char = text[index]

        if state is ScanState.IN_LINE_COMMENT:
            if char == "\n":
                state = ScanState.NORMAL
                out.append(char)
            index += 1
            continue

        if state is ScanState.IN_BLOCK_COMMENT:
            if char == "*" and text.startswith("/", index + 1):
                state = ScanState.NORMAL
                index += 2
            else:
                index += 1
            continue

        if state is ScanState.NORMAL and char == "/":
            if text.startswith("/", index + 1):
                state = ScanState.IN_LINE_COMMENT
                index += 2
                continue
            if text.startswith("*", index + 1):
                state = ScanState.IN_BLOCK_COMMENT
                index += 2
                continue

        out.append(char)
        state = advance(state, char)
        index += 1

    return "".join(out)


def normalize_quotes(text: str) -> str:
    # A string runs until its own quote kind closes it; inner quotes of the other kind pass through.
    out: list[str] = []
    state = ScanState.NORMAL
    quote = ""

    for char in text:
        if state is ScanState.ESCAPED:
            out.append(char)
            state = ScanState.IN_STRING
        elif state is ScanState.IN_STRING:
            if char == "\\":
                out.append(char)
                state = ScanState.ESCAPED
            elif char == quote:
                out.append('"')
                state = ScanState.NORMAL
            else:
                out.append(char)
        elif char in "\"'":
            out.append('"')
            quote = char
            state = ScanState.IN_STRING
        else:
            out.append(char)

    return "".join(out)


def _string_mask(text: str) -> list[bool]:
    mask: list[bool] = []
    state = ScanState.NORMAL
    for char in text:
        mask.append(state is not ScanState.NORMAL)
        state = advance(state, char)
    return mask


def quote_bare_keys(text: str) -> str:
    inside = _string_mask(text)
    pieces: list[str] = []
    cursor = 0

    for match in _BARE_KEY.finditer(text):
        if inside[match.start(1)]:
            continue
        key_start, key_end = match.span(2)
        pieces.append(text[cursor:key_start])
        pieces.append(f'"{match.group(2)}"')
        cursor = key_end

    pieces.append(text[cursor:])
    return "".join(pieces)


def remove_trailing_commas(text: str) -> str:
    out: list[str] = []
    state = ScanState.NORMAL
    length = len(text)

    for index, char in enumerate(text):
        if state is ScanState.NORMAL and char == ",":
            lookahead = index + 1
            while lookahead < length and text[lookahead] in _WHITESPACE:
                lookahead += 1
            if lookahead < length and text[lookahead] in "}]":
                continue
        out.append(char)
        state = advance(state, char)

    return "".join(out)


def escape_control_characters(text: str) -> str:
    out: list[str] = []
    state = ScanState.NORMAL

    for char in text:
        if state is ScanState.IN_STRING:
            if char == "\n":
                out.append("\\n")
                continue
            if char == "\t":
                out.append("\\t")
                continue
            if char == "\r":
                continue
        out.append(char)
        state = advance(state, char)

    return "".join(out)


def flatten_triple_quotes(text: str) -> str:
    # Blind replace: a run of quotes produced by earlier passes is collapsed too.
    while '"""' in text:
        text = text.replace('"""', '"')
    return text


STRUCTURAL_PASSES: tuple[Callable[[str], str], ...] = (
    remove_comments,
    normalize_quotes,
    quote_bare_keys,
    remove_trailing_commas,
    escape_control_characters,
)

NORMALIZATION_PASSES: tuple[Callable[[str], str], ...] = STRUCTURAL_PASSES + (flatten_triple_quotes,)


def apply_passes(text: str, passes: tuple[Callable[[str], str], ...]) -> str:
    for fix in passes:
        text = fix(text)
    return text


def normalize(text: str) -> str:
    return apply_passes(text, NORMALIZATION_PASSES)

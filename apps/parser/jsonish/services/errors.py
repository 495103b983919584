from __future__ import annotations


class JsonishError(ValueError):
    """Base class for every failure raised by the parsing core."""


class ParseError(JsonishError):
    pass


class NoJsonFound(ParseError):
    def __init__(self, preview: str) -> None:
        super().__init__(f"Could not extract valid JSON from output: {preview}")
        self.preview = preview


class CoercionError(JsonishError):
    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"Type coercion error: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual

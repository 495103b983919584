from __future__ import annotations

import logging
from typing import Optional

from jsonish.services.normalizer import STRUCTURAL_PASSES, ScanState, advance, apply_passes
from jsonish.services.validator import is_valid_json

logger = logging.getLogger(__name__)

_CLOSERS = {"{": "}", "[": "]"}


def repair_partial(text: str) -> Optional[str]:
    starts = [index for index in (text.find("{"), text.find("[")) if index >= 0]
    if not starts:
        return None

    partial = apply_passes(text[min(starts):], STRUCTURAL_PASSES)

    open_stack: list[str] = []
    state = ScanState.NORMAL
    for char in partial:
        if state is ScanState.NORMAL:
            if char in _CLOSERS:
                open_stack.append(char)
            elif open_stack and char == _CLOSERS[open_stack[-1]]:
                open_stack.pop()
        state = advance(state, char)

    if state is ScanState.ESCAPED:
        partial = partial[:-1] + '"'
    elif state is ScanState.IN_STRING:
        partial += '"'
    else:
        partial = partial.rstrip()
        if partial.endswith(","):
            partial = partial[:-1]

    repaired = partial + "".join(_CLOSERS[opener] for opener in reversed(open_stack))
    if is_valid_json(repaired):
        return repaired

    logger.debug("partial repair produced invalid JSON: %.80s", repaired)
    return None

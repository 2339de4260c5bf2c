"""Pure strategies for pulling a JSON object out of free-form model text.

Each strategy takes the raw text and yields every JSON object it can
decode, most plausible first.  Nothing is yielded when the strategy finds
nothing usable.  ``STRATEGIES`` lists them in the order they are tried;
the caller decides whether a yielded object has the shape it expects and
keeps drawing candidates until one does.
"""

import json
import re
from collections.abc import Callable, Iterator
from typing import Any

from loguru import logger

Strategy = Callable[[str], Iterator[dict[str, Any]]]

_JSON_FENCE_RE = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)
_ANY_FENCE_RE = re.compile(r"```[\w-]*\s*([\s\S]*?)\s*```")


def _decode_object(candidate: str) -> dict[str, Any]:
    data = json.loads(candidate.strip())
    if not isinstance(data, dict):
        msg = f"expected a JSON object, got {type(data).__name__}"
        raise ValueError(msg)
    return data


def _decoded(candidates: Iterator[str], strategy: str) -> Iterator[dict[str, Any]]:
    for candidate in candidates:
        try:
            yield _decode_object(candidate)
        except ValueError as exc:
            logger.debug("Strategy {} skipped a candidate: {}", strategy, exc)


def from_json_fence(text: str) -> Iterator[dict[str, Any]]:
    """Contents of fenced blocks labeled ``json``."""
    yield from _decoded((m.group(1) for m in _JSON_FENCE_RE.finditer(text)), "json_fence")


def from_any_fence(text: str) -> Iterator[dict[str, Any]]:
    """Contents of fenced blocks that decode, whatever their label."""
    yield from _decoded((m.group(1) for m in _ANY_FENCE_RE.finditer(text)), "any_fence")


def from_brace_span(text: str) -> Iterator[dict[str, Any]]:
    """Brace-delimited spans ending at the last closing brace, widest first."""
    end = text.rfind("}")
    if end == -1:
        return
    starts = (i for i, char in enumerate(text[:end]) if char == "{")
    yield from _decoded((text[start : end + 1] for start in starts), "brace_span")


def from_whole_text(text: str) -> Iterator[dict[str, Any]]:
    """The entire text, parsed as-is."""
    yield from _decoded(iter([text]), "whole_text")


STRATEGIES: list[tuple[str, Strategy]] = [
    ("json_fence", from_json_fence),
    ("any_fence", from_any_fence),
    ("brace_span", from_brace_span),
    ("whole_text", from_whole_text),
]

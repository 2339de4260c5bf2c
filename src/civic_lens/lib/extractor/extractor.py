"""Locate the final answer in a completed job and parse it into a schema."""

from collections.abc import Iterator, Sequence
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from civic_lens.lib.errors import MalformedPayload
from civic_lens.lib.extractor.strategies import STRATEGIES, Strategy
from civic_lens.lib.responses.base import JobResult
from civic_lens.schemas.common import Source, utc_now_iso

ModelT = TypeVar("ModelT", bound=BaseModel)

_PREVIEW_CHARS = 500


def find_output_text(output: list[dict[str, Any]]) -> str:
    """Return the text of the last ``output_text`` part of the last message.

    Raises:
        MalformedPayload: If the output holds no message text.
    """
    if not output:
        msg = "No output array found in response"
        raise MalformedPayload(msg)

    messages = [item for item in output if item.get("type") == "message" and item.get("content")]
    if not messages:
        msg = "No message object found in response output"
        raise MalformedPayload(msg)

    for part in reversed(messages[-1]["content"]):
        if part.get("type") == "output_text" and part.get("text"):
            return str(part["text"])

    msg = "No text content found in message"
    raise MalformedPayload(msg)


def collect_sources(output: list[dict[str, Any]]) -> list[Source]:
    """Gather web citations from search calls and message annotations.

    Sources are de-duplicated by URL in first-seen order.
    """
    seen: dict[str, Source] = {}

    def _add(url: Any, title: Any = None) -> None:
        if not isinstance(url, str) or not url:
            return
        if url not in seen:
            seen[url] = Source(url=url, title=title if isinstance(title, str) else None)
        elif seen[url].title is None and isinstance(title, str):
            seen[url].title = title

    for item in output:
        if item.get("type") == "web_search_call":
            action = item.get("action") or {}
            for src in action.get("sources") or []:
                if isinstance(src, dict):
                    _add(src.get("url"), src.get("title"))
        elif item.get("type") == "message":
            for part in item.get("content") or []:
                for annotation in part.get("annotations") or []:
                    if annotation.get("type") == "url_citation":
                        _add(annotation.get("url"), annotation.get("title"))

    return list(seen.values())


def iter_payloads(
    text: str,
    strategies: Sequence[tuple[str, Strategy]] = STRATEGIES,
) -> Iterator[tuple[dict[str, Any], str]]:
    """Yield every decoded JSON object, in strategy order, with the strategy name."""
    for name, strategy in strategies:
        found = False
        for data in strategy(text):
            found = True
            yield data, name
        if not found:
            logger.debug("Extraction strategy {} found no JSON object", name)


def parse_payload(
    text: str,
    strategies: Sequence[tuple[str, Strategy]] = STRATEGIES,
) -> tuple[dict[str, Any], str]:
    """Return the first JSON object the strategy chain yields.

    Args:
        text: Raw model answer.
        strategies: Ordered (name, strategy) pairs.

    Returns:
        The decoded object and the name of the strategy that produced it.

    Raises:
        MalformedPayload: If every strategy fails.
    """
    for data, name in iter_payloads(text, strategies):
        logger.debug("Extracted JSON with strategy {}", name)
        return data, name
    raise _no_json(text)


def _no_json(text: str) -> MalformedPayload:
    return MalformedPayload(f"No valid JSON found in response. Raw content: {text[:_PREVIEW_CHARS]}...")


def extract(
    job_result: JobResult,
    model: type[ModelT],
    strategies: Sequence[tuple[str, Strategy]] = STRATEGIES,
    expected_fields: Sequence[str] | None = None,
) -> ModelT:
    """Parse a completed job into ``model`` and attach retrieval metadata.

    Candidates are drawn from the strategy chain until one validates
    against ``model`` and carries at least one expected field.  A candidate
    that validates without any expected field is used only when nothing
    better turns up.  Missing top-level fields fall back to the model's
    defaults (logged at warning level).  Any ``metadata`` object the model
    emitted is kept, with retrieval fields layered on top.

    Args:
        job_result: Completed job from the poller.
        model: Target schema (must declare a ``metadata`` field).
        strategies: Ordered extraction strategies.
        expected_fields: Top-level fields whose absence is worth a
            warning (defaults to every field except ``metadata``).

    Returns:
        The validated model instance.

    Raises:
        MalformedPayload: If no answer text is present, no strategy
            decodes it, or no decoded object fits ``model``.
    """
    output = job_result.output
    text = find_output_text(output)
    logger.debug("Raw job {} content: {}", job_result.response_id, text)

    expected = expected_fields if expected_fields is not None else [f for f in model.model_fields if f != "metadata"]
    sources = collect_sources(output)
    fallback: tuple[ModelT, dict[str, Any]] | None = None
    last_error: ValidationError | None = None

    for data, strategy_name in iter_payloads(text, strategies):
        emitted = data.get("metadata")
        metadata = {
            **(emitted if isinstance(emitted, dict) else {}),
            "fetchedAt": utc_now_iso(),
            "method": job_result.method,
            "responseId": job_result.response_id,
            "sources": sources,
            "extractionStrategy": strategy_name,
        }
        try:
            result = model.model_validate({**data, "metadata": metadata})
        except ValidationError as exc:
            logger.debug("Strategy {} object does not match {}: {}", strategy_name, model.__name__, exc)
            last_error = exc
            continue

        if not any(field_name in data for field_name in expected):
            logger.debug("Strategy {} object has none of {}, trying further", strategy_name, list(expected))
            fallback = fallback or (result, data)
            continue
        _warn_missing(job_result.response_id, data, expected)
        return result

    if fallback is not None:
        result, data = fallback
        _warn_missing(job_result.response_id, data, expected)
        return result
    if last_error is not None:
        msg = f"Payload from job {job_result.response_id} does not match {model.__name__}: {last_error}"
        raise MalformedPayload(msg) from last_error
    raise _no_json(text)


def _warn_missing(response_id: str, data: dict[str, Any], expected: Sequence[str]) -> None:
    for field_name in expected:
        if field_name not in data:
            logger.warning("Payload from job {} missing {}, using default", response_id, field_name)

"""OpenAI Responses API client for web-search jobs."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx
from loguru import logger

from civic_lens.lib.errors import ConfigurationError, TransportError

if TYPE_CHECKING:
    from civic_lens.core.config import Settings
    from civic_lens.lib.prompts.builder import JobSpec

_DEFAULT_BASE_URL = "https://api.openai.com/v1"


class ResponsesClient:
    """Submits and fetches Responses API jobs over HTTP.

    A missing API key is reported once at construction; every later call
    then fails fast with ``ConfigurationError`` without touching the network.

    Args:
        api_key: Bearer token for the backend.
        base_url: API root, e.g. ``https://api.openai.com/v1``.
        model: Model name placed in every request body.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (used for testing).
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = _DEFAULT_BASE_URL,
        model: str = "gpt-4.1",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.model = model
        self._config_error: ConfigurationError | None = None
        if not api_key:
            self._config_error = ConfigurationError("OPENAI_API_KEY is not configured")
            logger.error("AI backend API key missing; election and analysis requests are disabled")

        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {api_key or ''}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> ResponsesClient:
        """Build a client from application settings."""
        return cls(
            settings.openai_api_key,
            base_url=settings.openai_base_url,
            model=settings.openai_model,
            timeout=settings.openai_timeout,
        )

    @property
    def is_configured(self) -> bool:
        return self._config_error is None

    async def create_response(self, job_spec: JobSpec) -> dict[str, Any]:
        """Submit a job.

        Args:
            job_spec: Task description and tool configuration.

        Returns:
            The backend response object, including its ``id``.
        """
        body = job_spec.to_request_body(self.model)
        logger.debug("Submitting {} job ({} prompt chars)", job_spec.kind, len(job_spec.prompt))
        data = await self._request("POST", "/responses", json_body=body)
        if not data.get("id"):
            msg = "Backend accepted the job but returned no response id"
            raise TransportError(msg)
        return data

    async def get_response(self, response_id: str) -> dict[str, Any]:
        """Fetch the current state of a job by id."""
        return await self._request("GET", f"/responses/{response_id}")

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> ResponsesClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request and decode the JSON body."""
        if self._config_error is not None:
            raise self._config_error

        try:
            response = await self._client.request(method, path, json=json_body)
        except httpx.TimeoutException as exc:
            msg = f"Timeout calling AI backend {method} {path}"
            logger.error(msg)
            raise TransportError(msg) from exc
        except httpx.HTTPError as exc:
            msg = f"HTTP error calling AI backend {method} {path}: {exc}"
            logger.error(msg)
            raise TransportError(msg) from exc

        if response.is_error:
            detail = _error_message(response)
            msg = f"AI backend error: {response.status_code} - {detail}"
            logger.error(msg)
            raise TransportError(msg, status_code=response.status_code)

        try:
            result: dict[str, Any] = response.json()
        except json.JSONDecodeError as exc:
            msg = f"Invalid JSON from AI backend for {path}"
            logger.error(msg)
            raise TransportError(msg, status_code=response.status_code) from exc
        return result


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except json.JSONDecodeError:
        return "Unknown error"
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return "Unknown error"

"""Drive submitted jobs to a terminal state with progressive polling.

State machine: ``created -> polling -> {completed | failed}``.  Every
non-terminal status observation stays in ``polling`` and waits the
scheduled interval before the next attempt.  Transport errors, while
submitting or polling, consume an attempt and are retried; a
backend-reported failure ends the run at once.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from civic_lens.lib.errors import JobFailed, JobTimedOut, TransportError
from civic_lens.lib.responses.base import (
    FAILED_STATUSES,
    STATUS_COMPLETED,
    JobHandle,
    JobResult,
    JobState,
    ResponsesBackend,
    failure_reason,
)

if TYPE_CHECKING:
    from civic_lens.core.config import Settings
    from civic_lens.lib.prompts.builder import JobSpec

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class PollPolicy:
    """Attempt budget and non-decreasing interval schedule for polling.

    The first ``fast_attempts`` polls are followed by ``fast_interval``,
    the next ``medium_attempts`` by ``medium_interval``, and every later
    poll by ``slow_interval``.
    """

    max_attempts: int = 40
    fast_attempts: int = 5
    fast_interval: float = 1.0
    medium_attempts: int = 10
    medium_interval: float = 2.0
    slow_interval: float = 2.5
    retryable: tuple[type[Exception], ...] = (TransportError,)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {self.max_attempts}"
            raise ValueError(msg)
        if not (0 < self.fast_interval <= self.medium_interval <= self.slow_interval):
            msg = "poll intervals must be positive and must not decrease"
            raise ValueError(msg)

    @classmethod
    def from_settings(cls, settings: Settings) -> PollPolicy:
        return cls(
            max_attempts=settings.poll_max_attempts,
            fast_attempts=settings.poll_fast_attempts,
            fast_interval=settings.poll_fast_interval,
            medium_attempts=settings.poll_medium_attempts,
            medium_interval=settings.poll_medium_interval,
            slow_interval=settings.poll_slow_interval,
        )

    def interval_after(self, attempt: int) -> float:
        """Seconds to wait after the given 1-based attempt."""
        if attempt <= self.fast_attempts:
            return self.fast_interval
        if attempt <= self.fast_attempts + self.medium_attempts:
            return self.medium_interval
        return self.slow_interval

    def is_retryable(self, exc: BaseException) -> bool:
        return isinstance(exc, self.retryable)

    @property
    def max_total_wait(self) -> float:
        """Worst-case seconds spent waiting across a full run."""
        return sum(self.interval_after(n) for n in range(1, self.max_attempts))


class JobPoller:
    """Submits jobs to a backend and awaits their completion.

    Args:
        backend: The AI backend (usually a ``ResponsesClient``).
        policy: Attempt budget and interval schedule.
        sleep: Suspension primitive used between polls.
    """

    def __init__(
        self,
        backend: ResponsesBackend,
        policy: PollPolicy | None = None,
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._backend = backend
        self.policy = policy or PollPolicy()
        self._sleep = sleep

    async def submit(self, job_spec: JobSpec, policy: PollPolicy | None = None) -> JobHandle:
        """Submit a job and return a handle in the ``created`` state.

        Retryable errors are retried on the polling schedule, with their
        own attempt budget.

        Raises:
            JobTimedOut: If every submission attempt failed with a retryable error.
        """
        policy = policy or self.policy
        last_error: BaseException | None = None

        for attempt in range(1, policy.max_attempts + 1):
            try:
                data = await self._backend.create_response(job_spec)
            except Exception as exc:
                if not policy.is_retryable(exc):
                    raise
                last_error = exc
                logger.warning(
                    "Submitting {} job failed (attempt {}/{}), retrying: {}",
                    job_spec.kind,
                    attempt,
                    policy.max_attempts,
                    exc,
                )
            else:
                handle = JobHandle(response_id=str(data["id"]), spec=job_spec, last_status=data.get("status"))
                logger.info("Submitted {} job {}", job_spec.kind, handle.response_id)
                return handle

            if attempt < policy.max_attempts:
                await self._sleep(policy.interval_after(attempt))

        logger.error("Submitting {} job failed after {} attempts", job_spec.kind, policy.max_attempts)
        raise JobTimedOut(None, policy.max_attempts) from last_error

    async def await_completion(self, handle: JobHandle, policy: PollPolicy | None = None) -> JobResult:
        """Poll a job until it completes, fails, or exhausts the attempt budget.

        Args:
            handle: Handle returned by ``submit``.
            policy: Optional override of the poller's policy.

        Returns:
            The completed job result.

        Raises:
            JobFailed: If the backend reports a terminal failure.
            JobTimedOut: If no terminal status is seen within the budget.
        """
        policy = policy or self.policy
        handle.state = JobState.POLLING
        last_error: BaseException | None = None

        for attempt in range(1, policy.max_attempts + 1):
            handle.attempts = attempt
            try:
                data = await self._backend.get_response(handle.response_id)
            except Exception as exc:
                if not policy.is_retryable(exc):
                    handle.state = JobState.FAILED
                    raise
                last_error = exc
                logger.warning(
                    "Polling attempt {}/{} for {} failed, retrying: {}",
                    attempt,
                    policy.max_attempts,
                    handle.response_id,
                    exc,
                )
            else:
                status = data.get("status")
                handle.last_status = status
                if status == STATUS_COMPLETED:
                    handle.state = JobState.COMPLETED
                    logger.info("Job {} completed after {} poll(s)", handle.response_id, attempt)
                    return JobResult(
                        response_id=handle.response_id,
                        payload=data,
                        attempts=attempt,
                        method=handle.spec.method,
                    )
                if status in FAILED_STATUSES:
                    handle.state = JobState.FAILED
                    reason = failure_reason(data)
                    logger.error("Job {} reported {}: {}", handle.response_id, status, reason)
                    raise JobFailed(handle.response_id, reason)
                logger.debug("Attempt {}/{} - Status: {}", attempt, policy.max_attempts, status)

            if attempt < policy.max_attempts:
                await self._sleep(policy.interval_after(attempt))

        handle.state = JobState.FAILED
        logger.error("Job {} polling timed out after {} attempts", handle.response_id, policy.max_attempts)
        raise JobTimedOut(handle.response_id, policy.max_attempts) from last_error

    async def run(self, job_spec: JobSpec) -> JobResult:
        """Submit a job and wait for its completed result."""
        handle = await self.submit(job_spec)
        return await self.await_completion(handle)


"""Responses library — submit and poll long-running AI backend jobs.

Public API:
    - ResponsesClient: httpx client for the OpenAI Responses API
    - ResponsesBackend: Protocol implemented by the client (and test fakes)
    - JobPoller: Submit + progressive polling state machine
    - PollPolicy: Attempt budget, interval schedule, retryable errors
    - JobHandle / JobResult / JobState: Job bookkeeping types
"""

from civic_lens.lib.responses.base import JobHandle, JobResult, JobState, ResponsesBackend
from civic_lens.lib.responses.client import ResponsesClient
from civic_lens.lib.responses.poller import JobPoller, PollPolicy

__all__ = [
    "JobHandle",
    "JobPoller",
    "JobResult",
    "JobState",
    "PollPolicy",
    "ResponsesBackend",
    "ResponsesClient",
]

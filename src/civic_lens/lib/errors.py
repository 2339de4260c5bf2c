"""Error taxonomy shared by the retrieval pipeline and its callers."""


class CivicLensError(Exception):
    """Base class for all pipeline errors."""


class UnresolvableJurisdiction(CivicLensError):
    """Raised when no US state can be derived from an address.

    Args:
        address: The address that could not be resolved.
    """

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__("Could not determine state from address")


class ConfigurationError(CivicLensError):
    """Raised when the AI backend credential is missing or unusable."""


class TransportError(CivicLensError):
    """Raised when a request to the AI backend fails at the network or HTTP level.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code returned by the backend.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class JobFailed(CivicLensError):
    """Raised when the backend reports a terminal failure for a job."""

    def __init__(self, response_id: str, reason: str) -> None:
        self.response_id = response_id
        self.reason = reason
        super().__init__(f"Job {response_id} failed: {reason}")


class JobTimedOut(CivicLensError):
    """Raised when the attempt budget is exhausted without a terminal status.

    ``response_id`` is None when the job could not be submitted at all.
    """

    def __init__(self, response_id: str | None, attempts: int) -> None:
        self.response_id = response_id
        self.attempts = attempts
        if response_id is None:
            message = f"Job could not be submitted after {attempts} attempts, please try again"
        else:
            message = f"Job {response_id} did not finish after {attempts} polls, please try again"
        super().__init__(message)


class MalformedPayload(CivicLensError):
    """Raised when no extraction strategy recovers a usable JSON object."""


class AnalysisPreconditionError(CivicLensError):
    """Base class for input problems detected before any backend call."""


class NoCandidatesError(AnalysisPreconditionError):
    def __init__(self) -> None:
        super().__init__("No candidates found in election data")


class NoPriorityTopicsError(AnalysisPreconditionError):
    def __init__(self) -> None:
        super().__init__("No priority topics found in user survey data")


class InsufficientSurveyDataError(AnalysisPreconditionError):
    def __init__(self) -> None:
        super().__init__("Insufficient survey data. Please complete the onboarding survey first.")

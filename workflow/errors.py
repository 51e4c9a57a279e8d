"""Error taxonomy for the eCourts workflow driver."""

from typing import Any


class WorkflowError(RuntimeError):
    """Base class for every failure a workflow step can report."""

    pass


class PreconditionError(WorkflowError):
    """Raised when a step is attempted before its prerequisites are present.

    Never reaches the network.
    """

    def __init__(self, step: str, missing: list[str], message: str | None = None):
        self.step = step
        self.missing = list(missing)
        super().__init__(message or f"Cannot run {step}: missing {', '.join(self.missing)}.")


class SetupError(WorkflowError):
    """Raised when the initial session cannot be established."""

    pass


class TransportError(WorkflowError):
    """Raised on network failure, timeout or a non-2xx HTTP response."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
    ):
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class MalformedResponseError(TransportError):
    """Raised when a 2xx response is not JSON or lacks a required field."""

    pass


class DomainError(WorkflowError):
    """Business-logic failure reported inside a successful response body."""

    def __init__(self, errormsg: str, status: Any = 0, message: str | None = None):
        self.errormsg = errormsg
        self.status = status
        super().__init__(message or f"Search failed: {errormsg}")


class InvalidCaptchaError(DomainError):
    """The backend rejected the captcha text; a new captcha must be fetched."""

    def __init__(self, errormsg: str, status: Any = 0):
        super().__init__(
            errormsg,
            status,
            message=(
                "Search failed: Invalid Captcha. Fetch a new captcha and try searching again."
            ),
        )


class StepInProgressError(WorkflowError):
    """Raised when a step is started while another one is still running."""

    def __init__(self, running: str, requested: str):
        self.running = running
        self.requested = requested
        super().__init__(f"Cannot start {requested} while {running} is in flight.")

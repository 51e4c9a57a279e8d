"""Workflow models - session state, selections and step results."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from workflow.errors import InvalidCaptchaError, WorkflowError


class CredentialKind(str, Enum):
    """Shapes of the opaque session credential."""

    TOKEN = "token"
    COOKIES = "cookies"


@dataclass(frozen=True)
class Credential:
    """Opaque session credential returned by the remote API."""

    kind: CredentialKind
    value: Any  # token string or cookie mapping

    @classmethod
    def token(cls, value: str) -> "Credential":
        return cls(CredentialKind.TOKEN, value)

    @classmethod
    def cookies(cls, value: Any) -> "Credential":
        return cls(CredentialKind.COOKIES, value)

    def describe(self) -> str:
        """Short display form, e.g. ``token:abc123``."""
        if self.kind is CredentialKind.TOKEN:
            return f"token:{self.value}"
        if isinstance(self.value, dict):
            return f"cookies:{', '.join(sorted(self.value))}"
        return f"cookies:{self.value}"


@dataclass(frozen=True)
class Selections:
    """User-chosen codes narrowing the search scope. ``None`` means not selected."""

    state_code: str | None = None
    dist_code: str | None = None
    complex_code: str | None = None
    est_code: str | None = None


class District(BaseModel):
    """District entry as returned by ``/districts``."""

    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)

    dist_code: str
    dist_name: str = ""


class CourtComplex(BaseModel):
    """Court complex entry as returned by ``/complexes``."""

    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)

    complex_code: str
    complex_name: str = ""


@dataclass(frozen=True)
class Location:
    """Server-side location confirmed by ``/set-location``."""

    complex_code: str
    est_code: str | None
    result: Any = None


@dataclass(frozen=True)
class CaptchaChallenge:
    """A single-use captcha image. ``serial`` changes on every fetch."""

    image_url: str
    serial: int


@dataclass(frozen=True)
class SearchOutcome:
    """Successful party search payload."""

    status: Any
    records: dict[str, Any]
    raw: dict[str, Any]

    @classmethod
    def from_results(cls, results: dict[str, Any]) -> "SearchOutcome":
        records = {k: v for k, v in results.items() if k not in ("status", "errormsg")}
        return cls(status=results.get("status"), records=records, raw=dict(results))


@dataclass(frozen=True)
class SessionState:
    """Everything the workflow knows between two steps.

    Attributes:
        credential: Credential to send with the next request
        selections: Current state/district/complex/establishment codes
        districts: Districts for the selected state (None = not fetched)
        complexes: Complexes for the selected district (None = not fetched)
        location: Confirmed location (None = not set)
        captcha: Current captcha challenge (None = none or discarded)
        captcha_serial: Number of captcha fetches so far
        results: Last successful search outcome
        error: Last error message shown to the user
        notice: Last informational message
    """

    credential: Credential | None = None
    selections: Selections = field(default_factory=Selections)
    districts: tuple[District, ...] | None = None
    complexes: tuple[CourtComplex, ...] | None = None
    location: Location | None = None
    captcha: CaptchaChallenge | None = None
    captcha_serial: int = 0
    results: SearchOutcome | None = None
    error: str | None = None
    notice: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain python structures for JSON display."""
        return {
            "credential": (
                {"kind": self.credential.kind.value, "value": self.credential.value}
                if self.credential
                else None
            ),
            "selections": asdict(self.selections),
            "districts": (
                [d.model_dump() for d in self.districts] if self.districts is not None else None
            ),
            "complexes": (
                [c.model_dump() for c in self.complexes] if self.complexes is not None else None
            ),
            "location": asdict(self.location) if self.location else None,
            "captcha": asdict(self.captcha) if self.captcha else None,
            "captcha_serial": self.captcha_serial,
            "results": self.results.raw if self.results else None,
            "error": self.error,
            "notice": self.notice,
        }


@dataclass(frozen=True)
class StepResult:
    """Outcome of one workflow step: the new state plus payload or error."""

    state: SessionState
    payload: Any = None
    error: WorkflowError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def invalid_captcha(self) -> bool:
        return isinstance(self.error, InvalidCaptchaError)

"""Workflow driver for the eCourts case-lookup API."""

from .api_client import EcourtsAPIClient, Exchange
from .errors import (
    DomainError,
    InvalidCaptchaError,
    MalformedResponseError,
    PreconditionError,
    SetupError,
    StepInProgressError,
    TransportError,
    WorkflowError,
)
from .models import Credential, SessionState, StepResult
from .steps import (
    bootstrap,
    fetch_captcha,
    list_complexes,
    list_districts,
    search_party,
    set_location,
)

__all__ = [
    "EcourtsAPIClient",
    "Exchange",
    "Credential",
    "SessionState",
    "StepResult",
    "bootstrap",
    "list_districts",
    "list_complexes",
    "set_location",
    "fetch_captcha",
    "search_party",
    "WorkflowError",
    "PreconditionError",
    "SetupError",
    "TransportError",
    "MalformedResponseError",
    "DomainError",
    "InvalidCaptchaError",
    "StepInProgressError",
]

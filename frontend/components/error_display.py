"""Error display and handling components."""

from typing import Any

import streamlit as st

from frontend.utils.constants import ERROR_MESSAGES
from workflow.errors import (
    DomainError,
    InvalidCaptchaError,
    MalformedResponseError,
    PreconditionError,
    SetupError,
    StepInProgressError,
    TransportError,
    WorkflowError,
)


def display_error(
    error_type: str,
    custom_message: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Display standardized error message.

    Logic:
    1. Get appropriate error message from constants
    2. Display with consistent styling
    3. Include details if provided
    """
    base_message = ERROR_MESSAGES.get(error_type, "An unexpected error occurred")
    display_message = custom_message or base_message

    st.error(f"❌ {display_message}")

    if details:
        with st.expander("Error Details", expanded=False):
            for key, value in details.items():
                st.code(f"{key}: {value}")


def display_warning(message: str, action_suggestion: str | None = None) -> None:
    """Display standardized warning message."""
    st.warning(f"⚠️ {message}")

    if action_suggestion:
        st.info(f"💡 {action_suggestion}")


def error_type_for(error: WorkflowError) -> str:
    """Key into ``ERROR_MESSAGES`` for a workflow error."""
    if isinstance(error, InvalidCaptchaError):
        return "invalid_captcha"
    if isinstance(error, DomainError):
        return "domain"
    if isinstance(error, MalformedResponseError):
        return "malformed"
    if isinstance(error, TransportError):
        return "transport"
    if isinstance(error, SetupError):
        return "setup"
    if isinstance(error, StepInProgressError):
        return "busy"
    if isinstance(error, PreconditionError):
        return "precondition"
    return "unknown"


def error_details(error: WorkflowError) -> dict[str, Any] | None:
    """Extra fields worth showing for a workflow error."""
    details: dict[str, Any] = {}
    if isinstance(error, TransportError):
        if error.endpoint:
            details["endpoint"] = error.endpoint
        if error.status_code is not None:
            details["status_code"] = error.status_code
    elif isinstance(error, DomainError):
        details["status"] = error.status
        details["errormsg"] = error.errormsg
    elif isinstance(error, PreconditionError):
        details["missing"] = ", ".join(error.missing)
    return details or None


def display_step_error(error: WorkflowError) -> None:
    """Render a failed step.

    Logic:
    1. Local validation and single-flight problems are warnings
    2. Invalid captcha gets a re-fetch hint
    3. Everything else is an error with its details
    """
    error_type = error_type_for(error)

    if isinstance(error, (PreconditionError, StepInProgressError)):
        display_warning(str(error), ERROR_MESSAGES[error_type])
        return

    if isinstance(error, InvalidCaptchaError):
        display_error(error_type, str(error), error_details(error))
        st.info("💡 Fetch a new captcha (Step 3) and search again.")
        return

    display_error(error_type, str(error), error_details(error))

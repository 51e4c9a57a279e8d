"""Services package for centralized session logic (Streamlit-only)."""

from .state_service import SessionStateHolder, StateService, get_api_client

__all__ = [
    "SessionStateHolder",
    "StateService",
    "get_api_client",
]

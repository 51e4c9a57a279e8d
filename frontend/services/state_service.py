"""Centralized state management service."""

from collections.abc import Callable, Iterator, MutableMapping
from contextlib import contextmanager
from typing import Any

import streamlit as st
import structlog

from frontend.utils.constants import STATE_KEYS
from workflow.api_client import EcourtsAPIClient
from workflow.errors import StepInProgressError
from workflow.models import SessionState, StepResult
from workflow.state import merge, reset_downstream_of, select

logger = structlog.get_logger(__name__)


class StateService:
    """Manages Streamlit session state for the app."""

    @staticmethod
    def initialize_page_state(
        required_keys: dict[str, Any], store: MutableMapping[str, Any] | None = None
    ) -> None:
        """Initialize session state with required keys.

        Logic:
        1. Check each required key exists in session state
        2. Set default value if missing
        """
        store = st.session_state if store is None else store
        for key, default_value in required_keys.items():
            if key not in store:
                store[key] = default_value


class SessionStateHolder:
    """Holds the workflow's ``SessionState`` between Streamlit reruns.

    The state itself is immutable; the holder only ever swaps whole states.
    It also enforces that a single step runs at a time.
    """

    def __init__(self, store: MutableMapping[str, Any] | None = None):
        self._store = st.session_state if store is None else store
        StateService.initialize_page_state(
            {STATE_KEYS.WORKFLOW_STATE: SessionState(), STATE_KEYS.RUNNING_STEP: None},
            self._store,
        )

    def get(self) -> SessionState:
        return self._store[STATE_KEYS.WORKFLOW_STATE]

    def _set(self, state: SessionState) -> SessionState:
        self._store[STATE_KEYS.WORKFLOW_STATE] = state
        return state

    def update(self, **changes: Any) -> SessionState:
        """Merge top-level or selection fields into the current state."""
        return self._set(merge(self.get(), **changes))

    def select(self, field_name: str, value: Any) -> SessionState:
        """Change one selection; downstream state resets only on a real change."""
        return self._set(select(self.get(), field_name, value))

    def reset_downstream_of(self, field_name: str) -> SessionState:
        return self._set(reset_downstream_of(self.get(), field_name))

    def reset(self) -> SessionState:
        return self._set(SessionState(captcha_serial=self.get().captcha_serial))

    @property
    def running_step(self) -> str | None:
        return self._store.get(STATE_KEYS.RUNNING_STEP)

    @property
    def busy(self) -> bool:
        return self.running_step is not None

    @contextmanager
    def single_flight(self, step: str) -> Iterator[None]:
        """Mark ``step`` as in flight; refuse to start a second one."""
        running = self.running_step
        if running is not None:
            raise StepInProgressError(running, step)

        self._store[STATE_KEYS.RUNNING_STEP] = step
        try:
            yield
        finally:
            self._store[STATE_KEYS.RUNNING_STEP] = None

    def run(
        self,
        step: Callable[..., StepResult],
        client: EcourtsAPIClient,
        *args: Any,
        **kwargs: Any,
    ) -> StepResult:
        """Run ``step`` against the current state and keep the state it returns."""
        name = getattr(step, "__name__", "step")
        with self.single_flight(name):
            result = step(client, self.get(), *args, **kwargs)
        self._set(result.state)
        logger.debug("Session state updated", step=name, ok=result.ok)
        return result


def get_api_client(store: MutableMapping[str, Any] | None = None) -> EcourtsAPIClient:
    """One API client (and HTTP session) per browser session."""
    store = st.session_state if store is None else store
    if STATE_KEYS.API_CLIENT not in store:
        store[STATE_KEYS.API_CLIENT] = EcourtsAPIClient()
    return store[STATE_KEYS.API_CLIENT]

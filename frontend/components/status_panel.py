"""Session status panel shown above the workflow steps."""

import streamlit as st

from frontend.utils.constants import STEP_TITLES
from frontend.utils.helpers import format_credential
from workflow.models import SessionState


def render_status_panel(state: SessionState, running_step: str | None = None) -> None:
    """Render backend status, the latest notice/error and the next credential.

    Logic:
    1. Loading while a step is in flight, Idle otherwise
    2. Notice in blue, error in red
    3. Credential that the next request will carry
    """
    col1, col2 = st.columns([1, 2])

    with col1:
        if running_step:
            title = STEP_TITLES.get(running_step, running_step)
            st.markdown(f"**Backend Status:** :orange[Loading… ({title})]")
        else:
            st.markdown("**Backend Status:** :green[Idle]")

    with col2:
        st.markdown(f"**Current Credential for Next Step:** `{format_credential(state.credential)}`")

    if state.notice:
        st.info(state.notice)
    if state.error:
        st.error(f"Error: {state.error}")


def render_selection_summary(state: SessionState) -> None:
    """Compact metrics row with the current selections."""
    selections = state.selections
    col1, col2, col3, col4, col5 = st.columns(5)

    col1.metric("State", selections.state_code or "—")
    col2.metric("District", selections.dist_code or "—")
    col3.metric("Complex", selections.complex_code or "—")
    col4.metric("Establishment", selections.est_code or "—")
    col5.metric("Captcha", f"#{state.captcha.serial}" if state.captcha else "—")

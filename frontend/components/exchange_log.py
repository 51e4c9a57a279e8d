"""Raw request/response inspection components."""

from collections.abc import Iterable

import streamlit as st

from frontend.utils.helpers import format_elapsed
from workflow.api_client import Exchange


def latest_exchange(exchanges: Iterable[Exchange], endpoint: str) -> Exchange | None:
    """Most recent exchange recorded for ``endpoint``."""
    match = None
    for exchange in exchanges:
        if exchange.endpoint == endpoint:
            match = exchange
    return match


def exchange_label(exchange: Exchange) -> str:
    """One-line summary, e.g. ``✅ POST /districts · 200 · 120 ms``."""
    icon = "✅" if exchange.ok else "❌"
    status = exchange.status_code if exchange.status_code is not None else "no response"
    return (
        f"{icon} {exchange.method} {exchange.endpoint} · {status} · "
        f"{format_elapsed(exchange.elapsed_ms)} · {exchange.timestamp:%H:%M:%S}"
    )


def render_exchange(exchange: Exchange, expanded: bool = False) -> None:
    """Request body and raw response of one exchange."""
    with st.expander(exchange_label(exchange), expanded=expanded):
        if exchange.error:
            st.error(exchange.error)

        col1, col2 = st.columns(2)
        with col1:
            st.caption("Request body")
            st.json(exchange.request_body or {})
        with col2:
            st.caption("Response body")
            if isinstance(exchange.response_body, (dict, list)):
                st.json(exchange.response_body)
            else:
                st.code(str(exchange.response_body or ""), language="text")


def render_raw_response(exchanges: Iterable[Exchange], endpoint: str) -> None:
    """Collapsed raw view of the latest response from ``endpoint``, if any."""
    exchange = latest_exchange(exchanges, endpoint)
    if exchange is not None:
        render_exchange(exchange)


def render_exchange_log(exchanges: Iterable[Exchange]) -> None:
    """All recorded exchanges, newest first."""
    history = list(exchanges)
    if not history:
        st.info("No requests recorded yet.")
        return

    for index, exchange in enumerate(reversed(history)):
        render_exchange(exchange, expanded=index == 0)

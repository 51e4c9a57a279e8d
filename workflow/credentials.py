"""Credential normalization at the HTTP boundary.

The backend hands out its session credential under a few different field
names. Everything past this module only sees a single ``Credential``.
"""

from collections.abc import Mapping
from typing import Any

from workflow.models import Credential, CredentialKind

# Checked in order; the first non-empty one wins.
TOKEN_FIELDS = ("app_token", "next_app_token", "token")
COOKIE_FIELDS = ("cookies",)

# Field names used when sending the credential back.
OUTGOING_FIELDS = {
    CredentialKind.TOKEN: "app_token",
    CredentialKind.COOKIES: "cookies",
}


def extract_credential(
    payload: Mapping[str, Any] | None, fallback: Credential | None = None
) -> Credential | None:
    """Return the credential carried by ``payload``, or ``fallback`` if none."""
    if not payload:
        return fallback

    for name in TOKEN_FIELDS:
        value = payload.get(name)
        if isinstance(value, str) and value.strip():
            return Credential.token(value)

    for name in COOKIE_FIELDS:
        value = payload.get(name)
        if value:
            return Credential.cookies(value)

    return fallback


def credential_body(credential: Credential | None) -> dict[str, Any]:
    """Request body fragment carrying ``credential``."""
    if credential is None:
        return {}
    return {OUTGOING_FIELDS[credential.kind]: credential.value}


def is_refreshed(payload: Mapping[str, Any] | None) -> bool:
    """True if the response carried any credential field."""
    return extract_credential(payload) is not None

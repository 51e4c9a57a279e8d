"""
API client for the eCourts backend.

Handles all HTTP communication with the remote case-lookup API: threading the
session credential into every request body, normalizing the credential that
comes back, turning HTTP failures into ``TransportError`` and keeping a short
log of raw exchanges for inspection.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
import time
from typing import Any
from urllib.parse import urljoin

import requests
import structlog

from config import settings
from workflow.credentials import credential_body, extract_credential
from workflow.errors import MalformedResponseError, TransportError
from workflow.models import Credential

logger = structlog.get_logger(__name__)


@dataclass
class Exchange:
    """One recorded request/response pair."""

    method: str
    endpoint: str
    request_body: dict[str, Any] | None
    status_code: int | None = None
    response_body: Any = None
    elapsed_ms: float = 0.0
    error: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "endpoint": self.endpoint,
            "request_body": self.request_body,
            "status_code": self.status_code,
            "response_body": self.response_body,
            "elapsed_ms": round(self.elapsed_ms, 1),
            "error": self.error,
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
        }


@dataclass(frozen=True)
class ApiResponse:
    """Decoded 2xx response plus the credential to use for the next call."""

    data: dict[str, Any]
    credential: Credential | None
    refreshed: bool = False


class EcourtsAPIClient:
    """Simple HTTP client for the eCourts case-lookup backend."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        captcha_endpoint: str | None = None,
        history_size: int | None = None,
    ):
        """Initialize the API client.

        Args:
            base_url: Backend URL. If None, reads ``settings.api_base_url``.
            timeout: Per-request timeout in seconds.
            captcha_endpoint: ``/fetch-user-captcha`` or ``/fetchCaptcha``.
            history_size: How many exchanges to keep for inspection.
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self.captcha_endpoint = captcha_endpoint or settings.captcha_endpoint
        self.session = requests.Session()
        self.exchanges: deque[Exchange] = deque(
            maxlen=history_size or settings.exchange_log_size
        )

        logger.info("API client initialized", base_url=self.base_url, timeout=self.timeout)

    def _make_request(
        self, method: str, endpoint: str, body: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON object.

        Raises:
            TransportError: network failure, timeout or non-2xx status
            MalformedResponseError: 2xx response that is not a JSON object
        """
        url = f"{self.base_url}{endpoint}"
        exchange = Exchange(method=method, endpoint=endpoint, request_body=body)
        self.exchanges.append(exchange)

        kwargs: dict[str, Any] = {"timeout": self.timeout}
        if body is not None:
            kwargs["json"] = body

        started = time.perf_counter()
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.Timeout as e:
            exchange.elapsed_ms = (time.perf_counter() - started) * 1000
            exchange.error = f"Request to {endpoint} timed out after {self.timeout:g}s"
            logger.error("API request timed out", endpoint=endpoint, timeout=self.timeout)
            raise TransportError(exchange.error, endpoint=endpoint) from e
        except requests.exceptions.RequestException as e:
            exchange.elapsed_ms = (time.perf_counter() - started) * 1000
            exchange.error = f"Request to {endpoint} failed: {e}"
            logger.error("API request failed", endpoint=endpoint, error=str(e))
            raise TransportError(exchange.error, endpoint=endpoint) from e

        exchange.elapsed_ms = (time.perf_counter() - started) * 1000
        exchange.status_code = response.status_code

        try:
            data = response.json()
        except ValueError:
            data = None
            exchange.response_body = response.text
        else:
            exchange.response_body = data

        if not 200 <= response.status_code < 300:
            message = data.get("error") if isinstance(data, dict) else None
            exchange.error = str(message or f"Backend error: {response.status_code}")
            logger.error(
                "Backend responded with error status",
                endpoint=endpoint,
                status_code=response.status_code,
                error=exchange.error,
            )
            raise TransportError(
                exchange.error, status_code=response.status_code, endpoint=endpoint
            )

        if not isinstance(data, dict):
            exchange.error = f"Malformed response from {endpoint}: expected a JSON object"
            logger.error("Malformed API response", endpoint=endpoint)
            raise MalformedResponseError(
                exchange.error, status_code=response.status_code, endpoint=endpoint
            )

        logger.info(
            "API request completed",
            method=method,
            endpoint=endpoint,
            status_code=response.status_code,
            elapsed_ms=round(exchange.elapsed_ms, 1),
        )
        return data

    def post_step(
        self, endpoint: str, credential: Credential | None, fields: dict[str, Any]
    ) -> ApiResponse:
        """POST ``fields`` plus the current credential; thread the credential back."""
        body = {**fields, **credential_body(credential)}
        data = self._make_request("POST", endpoint, body)

        refreshed = extract_credential(data)
        if refreshed is None:
            logger.warning("Response did not carry a new credential", endpoint=endpoint)
        else:
            logger.debug("Credential refreshed", endpoint=endpoint, kind=refreshed.kind.value)

        return ApiResponse(
            data=data,
            credential=refreshed or credential,
            refreshed=refreshed is not None,
        )

    def initial_data(self) -> ApiResponse:
        """Open a new backend session."""
        data = self._make_request("GET", "/initial-data")
        credential = extract_credential(data)
        return ApiResponse(data=data, credential=credential, refreshed=credential is not None)

    def districts(self, credential: Credential | None, state_code: str) -> ApiResponse:
        return self.post_step("/districts", credential, {"state_code": state_code})

    def complexes(
        self, credential: Credential | None, state_code: str, dist_code: str
    ) -> ApiResponse:
        return self.post_step(
            "/complexes", credential, {"state_code": state_code, "dist_code": dist_code}
        )

    def set_location(
        self,
        credential: Credential | None,
        complex_code: str,
        state_code: str,
        dist_code: str,
        est_code: str | None = None,
    ) -> ApiResponse:
        return self.post_step(
            "/set-location",
            credential,
            {
                "complex_code": complex_code,
                "selected_state_code": state_code,
                "selected_dist_code": dist_code,
                "selected_est_code": est_code,
            },
        )

    def fetch_captcha(self, credential: Credential | None) -> ApiResponse:
        return self.post_step(self.captcha_endpoint, credential, {})

    def search_party(
        self,
        credential: Credential | None,
        *,
        party_name: str,
        reg_year: str,
        case_status: str,
        captcha_code: str,
        state_code: str,
        dist_code: str,
        complex_code: str,
        est_code: str | None = None,
    ) -> ApiResponse:
        return self.post_step(
            "/search-party",
            credential,
            {
                "petres_name": party_name,
                "rgyearP": reg_year,
                "case_status": case_status,
                "fcaptcha_code": captcha_code,
                "state_code": state_code,
                "dist_code": dist_code,
                "court_complex_code": complex_code,
                "est_code": est_code,
            },
        )

    def resolve_url(self, reference: str) -> str:
        """Resolve a possibly relative image reference against the backend."""
        if reference.startswith(("http://", "https://", "data:")):
            return reference
        return urljoin(f"{self.base_url}/", reference)

    def clear_exchanges(self) -> None:
        self.exchanges.clear()

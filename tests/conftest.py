"""Shared test configuration and fixtures for all tests."""

from collections.abc import Callable
import os
from typing import Any
from unittest.mock import Mock

import pytest

# Mock environment variables for testing
os.environ["ECOURTS_API_BASE_URL"] = "http://test-backend/api/ecourts"
os.environ["ECOURTS_REQUEST_TIMEOUT_SECONDS"] = "30"

from workflow.api_client import ApiResponse, EcourtsAPIClient  # noqa: E402
from workflow.models import (  # noqa: E402
    CaptchaChallenge,
    CourtComplex,
    Credential,
    District,
    Location,
    Selections,
    SessionState,
)

BASE_URL = "http://test-backend/api/ecourts"


def make_response(status_code: int = 200, payload: Any = None) -> Mock:
    """Mock ``requests.Response`` with a JSON body."""
    response = Mock()
    response.status_code = status_code
    if isinstance(payload, Exception):
        response.json.side_effect = payload
        response.text = "<html>not json</html>"
    else:
        response.json.return_value = payload
        response.text = str(payload)
    return response


@pytest.fixture
def response_factory() -> Callable[..., Mock]:
    return make_response


@pytest.fixture
def api_client() -> EcourtsAPIClient:
    return EcourtsAPIClient(BASE_URL)


@pytest.fixture
def mock_client() -> Mock:
    """Workflow client double; tests set return values per endpoint method."""
    client = Mock(spec=EcourtsAPIClient)
    client.captcha_endpoint = "/fetch-user-captcha"
    return client


@pytest.fixture
def api_response() -> Callable[..., ApiResponse]:
    def _build(data: dict[str, Any], credential: Credential | None, refreshed: bool = True):
        return ApiResponse(data=data, credential=credential, refreshed=refreshed)

    return _build


@pytest.fixture
def bootstrapped_state() -> SessionState:
    return SessionState(credential=Credential.token("tok-0"))


@pytest.fixture
def located_state() -> SessionState:
    """State right after a successful Set Location."""
    return SessionState(
        credential=Credential.token("tok-3"),
        selections=Selections(state_code="1", dist_code="5", complex_code="10"),
        districts=(District(dist_code="5", dist_name="Pune"),),
        complexes=(CourtComplex(complex_code="10", complex_name="Shivajinagar"),),
        location=Location(complex_code="10", est_code=None, result={"ok": True}),
    )


@pytest.fixture
def captcha_state(located_state: SessionState) -> SessionState:
    """State right after a successful captcha fetch."""
    return SessionState(
        credential=Credential.token("tok-4"),
        selections=located_state.selections,
        districts=located_state.districts,
        complexes=located_state.complexes,
        location=located_state.location,
        captcha=CaptchaChallenge(image_url="/captcha/abc.png", serial=1),
        captcha_serial=1,
    )

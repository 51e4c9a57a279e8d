"""Test the eCourts API client."""

from unittest.mock import patch

import pytest
import requests

from conftest import BASE_URL, make_response
from workflow.api_client import EcourtsAPIClient
from workflow.errors import MalformedResponseError, TransportError
from workflow.models import Credential, CredentialKind


class TestEcourtsAPIClient:
    """Test client construction."""

    def test_init_with_base_url(self):
        client = EcourtsAPIClient("http://custom-backend:9000/api/")
        assert client.base_url == "http://custom-backend:9000/api"

    def test_init_from_settings(self):
        client = EcourtsAPIClient()
        assert client.base_url == BASE_URL
        assert client.timeout == 30
        assert client.captcha_endpoint == "/fetch-user-captcha"

    def test_history_size(self):
        client = EcourtsAPIClient(BASE_URL, history_size=3)
        assert client.exchanges.maxlen == 3


class TestMakeRequest:
    """Test transport error mapping and the exchange log."""

    def setup_method(self):
        self.client = EcourtsAPIClient(BASE_URL, timeout=5)

    @patch("requests.Session.request")
    def test_get_without_body(self, mock_request):
        mock_request.return_value = make_response(200, {"app_token": "t1"})

        data = self.client._make_request("GET", "/initial-data")

        assert data == {"app_token": "t1"}
        mock_request.assert_called_once_with("GET", f"{BASE_URL}/initial-data", timeout=5)

    @patch("requests.Session.request")
    def test_post_sends_json_body(self, mock_request):
        mock_request.return_value = make_response(200, {})

        self.client._make_request("POST", "/districts", {"state_code": "1"})

        mock_request.assert_called_once_with(
            "POST", f"{BASE_URL}/districts", timeout=5, json={"state_code": "1"}
        )

    @patch("requests.Session.request")
    def test_timeout(self, mock_request):
        mock_request.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(TransportError) as exc_info:
            self.client._make_request("POST", "/districts", {})

        assert str(exc_info.value) == "Request to /districts timed out after 5s"
        assert exc_info.value.endpoint == "/districts"
        assert self.client.exchanges[-1].error == str(exc_info.value)

    @patch("requests.Session.request")
    def test_connection_error(self, mock_request):
        mock_request.side_effect = requests.exceptions.ConnectionError("Backend unavailable")

        with pytest.raises(TransportError) as exc_info:
            self.client._make_request("GET", "/initial-data")

        assert "Backend unavailable" in str(exc_info.value)
        assert not self.client.exchanges[-1].ok

    @patch("requests.Session.request")
    def test_error_status_uses_backend_message(self, mock_request):
        mock_request.return_value = make_response(500, {"error": "Upstream eCourts down"})

        with pytest.raises(TransportError) as exc_info:
            self.client._make_request("POST", "/complexes", {})

        assert str(exc_info.value) == "Upstream eCourts down"
        assert exc_info.value.status_code == 500

    @patch("requests.Session.request")
    def test_error_status_without_message(self, mock_request):
        mock_request.return_value = make_response(502, ValueError("no json"))

        with pytest.raises(TransportError) as exc_info:
            self.client._make_request("POST", "/complexes", {})

        assert str(exc_info.value) == "Backend error: 502"
        assert self.client.exchanges[-1].response_body == "<html>not json</html>"

    @patch("requests.Session.request")
    def test_non_object_body_is_malformed(self, mock_request):
        mock_request.return_value = make_response(200, ["not", "an", "object"])

        with pytest.raises(MalformedResponseError):
            self.client._make_request("POST", "/districts", {})

    @patch("requests.Session.request")
    def test_exchange_recorded(self, mock_request):
        mock_request.return_value = make_response(200, {"districts": []})

        self.client._make_request("POST", "/districts", {"state_code": "1"})

        exchange = self.client.exchanges[-1]
        assert exchange.ok
        assert exchange.method == "POST"
        assert exchange.status_code == 200
        assert exchange.request_body == {"state_code": "1"}
        assert exchange.response_body == {"districts": []}
        assert exchange.to_dict()["endpoint"] == "/districts"

    @patch("requests.Session.request")
    def test_exchange_log_is_bounded(self, mock_request):
        client = EcourtsAPIClient(BASE_URL, history_size=2)
        mock_request.return_value = make_response(200, {})

        for endpoint in ("/a", "/b", "/c"):
            client._make_request("GET", endpoint)

        assert [e.endpoint for e in client.exchanges] == ["/b", "/c"]
        client.clear_exchanges()
        assert not client.exchanges


class TestCredentialThreading:
    """Test that credentials go out with each request and come back normalized."""

    def setup_method(self):
        self.client = EcourtsAPIClient(BASE_URL)

    @patch("requests.Session.request")
    def test_initial_data(self, mock_request):
        mock_request.return_value = make_response(200, {"app_token": "t0", "states": []})

        response = self.client.initial_data()

        assert response.credential == Credential.token("t0")
        assert response.refreshed is True

    @patch("requests.Session.request")
    def test_token_sent_and_refreshed(self, mock_request):
        mock_request.return_value = make_response(200, {"next_app_token": "t2", "districts": []})

        response = self.client.districts(Credential.token("t1"), "1")

        _, kwargs = mock_request.call_args
        assert kwargs["json"] == {"state_code": "1", "app_token": "t1"}
        assert response.credential == Credential.token("t2")

    @patch("requests.Session.request")
    def test_cookies_sent(self, mock_request):
        mock_request.return_value = make_response(200, {"cookies": {"JSESSION": "c2"}})

        response = self.client.complexes(Credential.cookies({"JSESSION": "c1"}), "1", "5")

        _, kwargs = mock_request.call_args
        assert kwargs["json"]["cookies"] == {"JSESSION": "c1"}
        assert response.credential.kind is CredentialKind.COOKIES
        assert response.credential.value == {"JSESSION": "c2"}

    @patch("requests.Session.request")
    def test_missing_credential_falls_back(self, mock_request):
        mock_request.return_value = make_response(200, {"result": "ok"})

        response = self.client.set_location(Credential.token("t1"), "10", "1", "5")

        assert response.credential == Credential.token("t1")
        assert response.refreshed is False

    @patch("requests.Session.request")
    def test_set_location_body(self, mock_request):
        mock_request.return_value = make_response(200, {})

        self.client.set_location(Credential.token("t1"), "10", "1", "5", est_code="E7")

        _, kwargs = mock_request.call_args
        assert kwargs["json"] == {
            "complex_code": "10",
            "selected_state_code": "1",
            "selected_dist_code": "5",
            "selected_est_code": "E7",
            "app_token": "t1",
        }

    @patch("requests.Session.request")
    def test_captcha_endpoint_is_configurable(self, mock_request):
        client = EcourtsAPIClient(BASE_URL, captcha_endpoint="/fetchCaptcha")
        mock_request.return_value = make_response(200, {"imageUrl": "/c.png"})

        client.fetch_captcha(Credential.token("t1"))

        args, _ = mock_request.call_args
        assert args == ("POST", f"{BASE_URL}/fetchCaptcha")

    @patch("requests.Session.request")
    def test_search_party_body(self, mock_request):
        mock_request.return_value = make_response(200, {"results": {}})

        self.client.search_party(
            Credential.token("t4"),
            party_name="Doe",
            reg_year="2023",
            case_status="Pending",
            captcha_code="AB12",
            state_code="1",
            dist_code="5",
            complex_code="10",
        )

        _, kwargs = mock_request.call_args
        assert kwargs["json"] == {
            "petres_name": "Doe",
            "rgyearP": "2023",
            "case_status": "Pending",
            "fcaptcha_code": "AB12",
            "state_code": "1",
            "dist_code": "5",
            "court_complex_code": "10",
            "est_code": None,
            "app_token": "t4",
        }


class TestResolveUrl:
    def setup_method(self):
        self.client = EcourtsAPIClient("http://test-backend/api/ecourts")

    def test_absolute_url_unchanged(self):
        assert self.client.resolve_url("https://img/c.png") == "https://img/c.png"

    def test_data_url_unchanged(self):
        assert self.client.resolve_url("data:image/png;base64,AAA") == "data:image/png;base64,AAA"

    def test_relative_url(self):
        assert self.client.resolve_url("captcha/c.png") == (
            "http://test-backend/api/ecourts/captcha/c.png"
        )

    def test_root_relative_url(self):
        assert self.client.resolve_url("/captcha/c.png") == "http://test-backend/captcha/c.png"

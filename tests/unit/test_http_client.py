"""
HTTP Client Unit Tests
"""

import json
from typing import List

import pytest
import requests

from surf_retreats.client import (
    CircuitBreakerConfig,
    CircuitState,
    HttpClient,
    HttpRequestOptions,
)
from surf_retreats.config import SiteConfig
from surf_retreats.exceptions import NetworkError, SurfRetreatsError


def make_response(status: int, body=None, text: str = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.url = "https://api.example.com/test"
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = (text or "").encode("utf-8")
    return response


class FakeSend:
    """Replaces Session.send, replying from a queue"""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.requests: List[requests.PreparedRequest] = []

    def __call__(self, prepared, timeout=None):
        self.requests.append(prepared)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def config() -> SiteConfig:
    return SiteConfig(retry_attempts=2, retry_delay=1, timeout=5000)


@pytest.fixture
def client(config: SiteConfig, monkeypatch) -> HttpClient:
    monkeypatch.setattr(HttpClient, "_calculate_retry_delay", lambda self, attempt: 0)
    http = HttpClient(config, base_url="https://api.example.com/", default_headers={"Authorization": "Bearer sk"})
    yield http
    http.close()


def install(client: HttpClient, monkeypatch, *replies) -> FakeSend:
    fake = FakeSend(*replies)
    monkeypatch.setattr(client._session, "send", fake)
    return fake


class TestRequests:
    """Tests for request building"""

    def test_get_json(self, client: HttpClient, monkeypatch):
        fake = install(client, monkeypatch, make_response(200, {"id": "cus_1"}))

        response = client.get("/v1/customers", HttpRequestOptions(params={"limit": 1}))

        assert response.data == {"id": "cus_1"}
        assert response.status == 200
        assert response.request_id.startswith("surf-")
        sent = fake.requests[0]
        assert sent.url == "https://api.example.com/v1/customers?limit=1"
        assert sent.headers["Authorization"] == "Bearer sk"
        assert sent.headers["X-Request-ID"] == response.request_id

    def test_post_form(self, client: HttpClient, monkeypatch):
        fake = install(client, monkeypatch, make_response(200, {"id": "cs_1"}))

        client.post("/v1/checkout/sessions", form=[("metadata[booking_id]", "b-1"), ("mode", "payment")])

        sent = fake.requests[0]
        assert sent.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert sent.body == "metadata%5Bbooking_id%5D=b-1&mode=payment"

    def test_post_raw_content(self, client: HttpClient, monkeypatch):
        fake = install(client, monkeypatch, make_response(200, text="<ok/>"))

        response = client.post("", content=b"<envelope/>", options=HttpRequestOptions(headers={"Accept": "text/xml"}))

        assert response.data == "<ok/>"
        assert fake.requests[0].body == b"<envelope/>"
        assert fake.requests[0].headers["Accept"] == "text/xml"

    def test_request_interceptor(self, client: HttpClient, monkeypatch):
        fake = install(client, monkeypatch, make_response(200, {}))

        def tag(prepared):
            prepared.headers["X-Test"] = "1"
            return prepared

        client.add_request_interceptor(tag)
        client.get("/ping")

        assert fake.requests[0].headers["X-Test"] == "1"


class TestRetries:
    """Tests for retry behaviour"""

    def test_retries_server_errors(self, client: HttpClient, monkeypatch):
        fake = install(
            client, monkeypatch,
            make_response(503, {"message": "busy"}),
            make_response(200, {"ok": True}),
        )

        response = client.get("/v1/customers")

        assert response.data == {"ok": True}
        assert len(fake.requests) == 2

    def test_no_retry_on_client_error(self, client: HttpClient, monkeypatch):
        fake = install(
            client, monkeypatch,
            make_response(404, {"error": {"message": "No such customer", "code": "resource_missing"}}),
        )

        with pytest.raises(SurfRetreatsError) as exc_info:
            client.get("/v1/customers/cus_x")

        assert len(fake.requests) == 1
        assert str(exc_info.value) == "No such customer"
        assert exc_info.value.code == "resource_missing"
        assert exc_info.value.status_code == 404
        assert client.circuit_state == CircuitState.CLOSED

    def test_gives_up_after_attempts(self, client: HttpClient, monkeypatch):
        fake = install(
            client, monkeypatch,
            requests.exceptions.ConnectionError("refused"),
            requests.exceptions.ConnectionError("refused"),
            requests.exceptions.ConnectionError("refused"),
        )

        with pytest.raises(NetworkError) as exc_info:
            client.get("/ping")

        assert exc_info.value.code == "NET02"
        assert len(fake.requests) == 3

    def test_timeout(self, client: HttpClient, monkeypatch):
        install(client, monkeypatch, requests.exceptions.Timeout("slow"))

        with pytest.raises(NetworkError) as exc_info:
            client.get("/ping", HttpRequestOptions(skip_retry=True))

        assert exc_info.value.code == "NET01"


class TestCircuitBreaker:
    """Tests for the circuit breaker"""

    def test_opens_after_failures(self, config: SiteConfig, monkeypatch):
        client = HttpClient(
            config,
            base_url="https://api.example.com",
            circuit_breaker_config=CircuitBreakerConfig(failure_threshold=2, recovery_timeout=60000),
        )
        install(
            client, monkeypatch,
            requests.exceptions.ConnectionError("refused"),
            requests.exceptions.ConnectionError("refused"),
        )
        options = HttpRequestOptions(skip_retry=True)

        for _ in range(2):
            with pytest.raises(NetworkError):
                client.get("/ping", options)

        assert client.circuit_state == CircuitState.OPEN

        with pytest.raises(NetworkError) as exc_info:
            client.get("/ping", options)
        assert exc_info.value.code == "NET05"

        client.reset_circuit_breaker()
        assert client.circuit_state == CircuitState.CLOSED


class TestAudit:
    """Tests for audit entries"""

    def test_audit_redacts_secrets(self, monkeypatch):
        config = SiteConfig(enable_audit_log=True)
        client = HttpClient(config, base_url="https://api.example.com", default_headers={"Authorization": "Bearer sk"})
        install(client, monkeypatch, make_response(200, {"client_secret": "cs_secret", "id": "cs_1"}))
        entries = []
        client.set_audit_log_callback(entries.append)

        client.post("/v1/checkout/sessions", form=[("customer_email", "guest@example.com")])

        entry = entries[0]
        assert entry.success is True
        assert entry.headers["Authorization"] == "[REDACTED]"
        assert entry.response["body"]["client_secret"] == "[REDACTED]"
        assert entry.response["body"]["id"] == "cs_1"

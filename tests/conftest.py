"""
Pytest Configuration and Centralized Fixtures.

Provides reusable fixtures for testing:
- Flow connection config with fixed test credentials
- FlowClient wired to an httpx.MockTransport
- A fake Flow provider that verifies signatures the way Flow does
"""

import hashlib
import hmac
import json
import os
from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qsl

import httpx
import pytest

# Set required environment variables BEFORE importing flowbridge modules
os.environ.setdefault("FLOW_API_KEY", "test-api-key")
os.environ.setdefault("FLOW_SECRET_KEY", "test-secret-key")
os.environ.setdefault("FLOW_BASE_URL", "https://sandbox.flow.test/api")
os.environ.setdefault("TRACING_ENABLED", "false")

from flowbridge.models.flow import FlowConfig
from flowbridge.services.flow_client import FlowClient
from flowbridge.services.flow_registry import reset_flow_client

TEST_API_KEY = "test-api-key"
TEST_SECRET_KEY = "test-secret-key"
TEST_BASE_URL = "https://sandbox.flow.test/api"

Handler = Callable[[httpx.Request], httpx.Response]


def reference_signature(params: dict[str, str], secret_key: str = TEST_SECRET_KEY) -> str:
    """Independent HMAC-SHA256 over name+value pairs in sorted name order."""
    to_sign = "".join(f"{name}{params[name]}" for name in sorted(params))
    return hmac.new(secret_key.encode(), to_sign.encode(), hashlib.sha256).hexdigest()


def request_params(request: httpx.Request) -> list[tuple[str, str]]:
    """Wire parameters of a captured request, in transmission order."""
    if request.method == "GET":
        return list(request.url.params.multi_items())
    return parse_qsl(request.content.decode(), keep_blank_values=True)


def json_response(status_code: int, body: Any) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(body).encode())


# ============================================================================
# Config Fixtures
# ============================================================================


@pytest.fixture
def flow_config() -> FlowConfig:
    """Standard test connection triple."""
    return FlowConfig(base_url=TEST_BASE_URL, api_key=TEST_API_KEY, secret_key=TEST_SECRET_KEY)


@pytest.fixture
def reset_shared_client():
    """Never leak the process-wide client between tests."""
    reset_flow_client()
    yield
    reset_flow_client()


# ============================================================================
# Client Fixtures
# ============================================================================


@pytest.fixture
def captured_requests() -> list[httpx.Request]:
    """Requests seen by the mock transport, in order."""
    return []


@pytest.fixture
def make_client(flow_config: FlowConfig, captured_requests: list[httpx.Request]):
    """Factory for a FlowClient whose HTTP calls go to the given handler."""

    def _make(handler: Handler) -> FlowClient:
        def _record(request: httpx.Request) -> httpx.Response:
            captured_requests.append(request)
            return handler(request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        return FlowClient(flow_config, http_client=http_client)

    return _make


@pytest.fixture
def respond_with(make_client):
    """Client that answers every request with a fixed status and JSON body."""

    def _make(status_code: int, body: Any) -> FlowClient:
        return make_client(lambda request: json_response(status_code, body))

    return _make


@pytest.fixture
def echo_provider(make_client):
    """
    Client talking to a fake Flow that checks the signature and echoes the
    request parameters back as the success body.
    """

    def _handler(request: httpx.Request) -> httpx.Response:
        params = dict(request_params(request))
        signature = params.pop("s", "")
        if params.get("apiKey") != TEST_API_KEY:
            return json_response(401, {"code": 108, "message": "Invalid apiKey"})
        if not hmac.compare_digest(signature, reference_signature(params)):
            return json_response(401, {"code": 109, "message": "Invalid signature"})
        if "externalId" in params:
            params["customerId"] = f"cus_{params['externalId']}"
            params["status"] = "0"
        if "url_return" in params:
            params["url"] = "https://sandbox.flow.test/app/customer/register"
            params["token"] = f"tok_{params['customerId']}"
        return json_response(200, params)

    return make_client(_handler)

"""
Flow API client.

Signs every request with the account secret (see signer.py), sends it over
HTTP and normalizes the outcome into a FlowResult:

- non-2xx response        -> FlowFailure(body code/message, or HTTP status)
- 2xx with nonzero "code" -> FlowFailure(body code/message)
- network error/timeout   -> FlowFailure(500, underlying message)
- anything else           -> FlowSuccess(typed payload)

Each operation makes exactly one HTTP call. There are no retries.
"""

from collections.abc import Callable
from typing import Any, Literal, TypeVar

import httpx
from structlog import get_logger

from flowbridge.config import settings
from flowbridge.exceptions import FlowApiError
from flowbridge.models.flow import (
    CustomerChargeRequest,
    CustomerChargeResponse,
    CustomerCreateRequest,
    CustomerCreateResponse,
    CustomerRegisterRequest,
    CustomerRegisterResponse,
    CustomerRegisterStatusRequest,
    CustomerRegisterStatusResponse,
    FlowConfig,
)
from flowbridge.models.result import FlowFailure, FlowResult, FlowSuccess
from flowbridge.observability.metrics import track_provider_request
from flowbridge.observability.tracing import set_span_error, trace_operation
from flowbridge.services.signer import ParamValue, sign_params

logger = get_logger(__name__)

T = TypeVar("T")

HttpMethod = Literal["GET", "POST"]

API_KEY_PARAM = "apiKey"


def _as_code(value: Any) -> int | None:
    """Coerce a body "code" field to int, None if absent or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class FlowClient:
    """
    Signed client for Flow's customer API.

    Usage:
        client = FlowClient(FlowConfig(base_url=..., api_key=..., secret_key=...))
        result = await client.create_customer(
            CustomerCreateRequest(name="Jane Doe", email="jane@example.com", external_id="u123")
        )
    """

    CUSTOMER_CREATE = "/customer/create"
    CUSTOMER_REGISTER = "/customer/register"
    CUSTOMER_REGISTER_STATUS = "/customer/getRegisterStatus"
    CUSTOMER_CHARGE = "/customer/charge"

    def __init__(
        self,
        config: FlowConfig,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        signing_trace: bool | None = None,
    ) -> None:
        """
        Initialize Flow client.

        Args:
            config: Flow connection triple
            http_client: Shared client; when None a short-lived client is opened per request
            timeout: Request deadline in seconds (default: settings.flow_timeout_seconds)
            signing_trace: Log redacted signing diagnostics (default: settings.flow_signing_trace)
        """
        self.config = config
        self.timeout = timeout if timeout is not None else settings.flow_timeout_seconds
        self.signing_trace = (
            signing_trace if signing_trace is not None else settings.flow_signing_trace
        )
        self._http_client = http_client

        logger.info("flow_client_initialized", base_url=config.base_url)

    # ========================================================================
    # Dispatch
    # ========================================================================

    def build_request_params(self, params: dict[str, ParamValue]) -> dict[str, str]:
        """API key merged in, signed, and sorted for the wire."""
        params_with_key: dict[str, ParamValue] = {**params, API_KEY_PARAM: self.config.api_key}
        return sign_params(params_with_key, self.config.secret_key, trace=self.signing_trace)

    async def _send(
        self, client: httpx.AsyncClient, method: HttpMethod, url: str, params: dict[str, str]
    ) -> httpx.Response:
        if method == "GET":
            return await client.get(
                url,
                params=params,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        return await client.post(
            url,
            data=params,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/x-www-form-urlencoded",
            },
            timeout=self.timeout,
        )

    async def _make_request(
        self,
        endpoint: str,
        method: HttpMethod,
        params: dict[str, ParamValue],
    ) -> dict[str, Any]:
        """
        Make a signed request to the Flow API.

        Returns:
            The decoded JSON body of a successful call

        Raises:
            FlowApiError: On any transport, HTTP or application-level failure
        """
        url = f"{self.config.base_url}{endpoint}"

        try:
            wire_params = self.build_request_params(params)

            if self._http_client is not None:
                response = await self._send(self._http_client, method, url, wire_params)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._send(client, method, url, wire_params)

            logger.info(
                "flow_request_sent",
                endpoint=endpoint,
                method=method,
                status=response.status_code,
            )

            if not response.is_success:
                try:
                    error_data = response.json()
                except ValueError:
                    error_data = None
                if not isinstance(error_data, dict):
                    error_data = {"message": "Unknown error", "code": response.status_code}

                raise FlowApiError(
                    str(error_data.get("message") or f"HTTP error {response.status_code}"),
                    _as_code(error_data.get("code")) or response.status_code,
                )

            data = response.json()
            if not isinstance(data, dict):
                raise ValueError("Flow response is not a JSON object")

            code = _as_code(data.get("code"))
            if code:
                raise FlowApiError(str(data.get("message") or "API error"), code)

            return data

        except FlowApiError:
            raise
        except Exception as exc:
            logger.error(
                "flow_transport_error",
                endpoint=endpoint,
                method=method,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise FlowApiError(str(exc) or "Unknown error occurred", 500) from exc

    async def _call(
        self,
        endpoint: str,
        method: HttpMethod,
        params: dict[str, ParamValue],
        parse: Callable[[dict[str, Any]], T],
    ) -> FlowResult[T]:
        """Dispatch one request and fold the outcome into a FlowResult."""
        with (
            trace_operation(f"flow.{endpoint}", **{"http.method": method}) as span,
            track_provider_request(endpoint, method) as tracker,
        ):
            try:
                body = await self._make_request(endpoint, method, params)
                try:
                    value = parse(body)
                except (KeyError, TypeError, ValueError) as exc:
                    raise FlowApiError(f"Malformed Flow response: {exc}", 500) from exc
            except FlowApiError as exc:
                tracker.set_error_code(exc.code)
                span.set_attribute("flow.error_code", exc.code)
                set_span_error(span, exc)
                logger.warning(
                    "flow_request_failed",
                    endpoint=endpoint,
                    method=method,
                    code=exc.code,
                    message=exc.message,
                )
                return FlowFailure.from_error(exc)

            return FlowSuccess(value=value, raw=body)

    # ========================================================================
    # Operations
    # ========================================================================

    async def create_customer(
        self, request: CustomerCreateRequest
    ) -> FlowResult[CustomerCreateResponse]:
        """Create a customer in Flow."""
        params: dict[str, ParamValue] = {
            "name": request.name,
            "email": request.email,
            "externalId": request.external_id,
        }
        return await self._call(
            self.CUSTOMER_CREATE, "POST", params, CustomerCreateResponse.from_payload
        )

    async def register_customer(
        self, request: CustomerRegisterRequest
    ) -> FlowResult[CustomerRegisterResponse]:
        """Start card registration; the customer is sent to the returned URL."""
        params: dict[str, ParamValue] = {
            "customerId": request.customer_id,
            "url_return": request.url_return,
        }
        return await self._call(
            self.CUSTOMER_REGISTER, "POST", params, CustomerRegisterResponse.from_payload
        )

    async def get_register_status(
        self, request: CustomerRegisterStatusRequest
    ) -> FlowResult[CustomerRegisterStatusResponse]:
        """Poll the outcome of a card registration."""
        params: dict[str, ParamValue] = {"token": request.token}
        return await self._call(
            self.CUSTOMER_REGISTER_STATUS,
            "GET",
            params,
            CustomerRegisterStatusResponse.from_payload,
        )

    async def charge_customer(
        self, request: CustomerChargeRequest
    ) -> FlowResult[CustomerChargeResponse]:
        """
        Charge a customer's registered card.

        Optional fields are sent only when set: an empty placeholder would
        change the signed string.
        """
        params: dict[str, ParamValue] = {
            "customerId": request.customer_id,
            "amount": request.amount,
            "currency": request.currency,
            "subject": request.subject,
        }

        optional = {
            "commerceOrder": request.commerce_order,
            "email": request.email,
            "urlConfirmation": request.url_confirmation,
            "urlReturn": request.url_return,
        }
        params.update({name: value for name, value in optional.items() if value})

        return await self._call(
            self.CUSTOMER_CHARGE, "POST", params, CustomerChargeResponse.from_payload
        )

    async def close(self) -> None:
        """Close the injected HTTP client, if any."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

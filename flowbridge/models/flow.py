"""
Flow domain models - Immutable dataclasses for the Flow customer API.

NO DICTIONARIES - All data uses strongly typed models.

Request types hold snake_case fields; the client maps them to Flow's wire
names. Response types are parsed from Flow's camelCase JSON via from_payload().
"""

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


def _require_text(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None or value == "":
        raise ValueError(f"Flow response missing '{key}'")
    return str(value)


def _optional_text(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class FlowConfig:
    """Connection triple for the Flow API.

    The secret key signs requests and is never transmitted.
    """

    base_url: str
    api_key: str
    secret_key: str = field(repr=False)

    def __post_init__(self) -> None:
        """Validate connection fields and normalize the base URL."""
        # Endpoints start with "/", so the base URL must not end with one
        object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))
        if not self.base_url:
            raise ValueError("base_url cannot be empty")
        if not self.api_key:
            raise ValueError("api_key cannot be empty")
        if not self.secret_key:
            raise ValueError("secret_key cannot be empty")


class RegisterStatus(IntEnum):
    """Card registration status reported by /customer/getRegisterStatus."""

    PENDING = 1
    COMPLETED = 2
    REJECTED = 3
    EXPIRED = 4


# ============================================================================
# Requests
# ============================================================================


@dataclass(frozen=True)
class CustomerCreateRequest:
    """POST /customer/create."""

    name: str
    email: str
    external_id: str

    def __post_init__(self) -> None:
        """Validate customer fields."""
        if not self.name:
            raise ValueError("name cannot be empty")
        if not self.email:
            raise ValueError("email cannot be empty")
        if not self.external_id:
            raise ValueError("external_id cannot be empty")


@dataclass(frozen=True)
class CustomerRegisterRequest:
    """POST /customer/register."""

    customer_id: str
    url_return: str

    def __post_init__(self) -> None:
        """Validate registration fields."""
        if not self.customer_id:
            raise ValueError("customer_id cannot be empty")
        if not self.url_return:
            raise ValueError("url_return cannot be empty")


@dataclass(frozen=True)
class CustomerRegisterStatusRequest:
    """GET /customer/getRegisterStatus."""

    token: str

    def __post_init__(self) -> None:
        """Validate registration token."""
        if not self.token:
            raise ValueError("token cannot be empty")


@dataclass(frozen=True)
class CustomerChargeRequest:
    """POST /customer/charge.

    Optional fields left as None (or empty) are not sent at all.
    """

    customer_id: str
    amount: int | float
    currency: str
    subject: str

    # Optional fields
    commerce_order: str | None = None
    email: str | None = None
    url_confirmation: str | None = None
    url_return: str | None = None

    def __post_init__(self) -> None:
        """Validate charge constraints."""
        if not self.customer_id:
            raise ValueError("customer_id cannot be empty")
        if isinstance(self.amount, bool) or not isinstance(self.amount, (int, float)):
            raise ValueError(f"amount must be a number: {self.amount!r}")
        if not math.isfinite(self.amount):
            raise ValueError(f"Charge amount must be finite: {self.amount}")
        if self.amount <= 0:
            raise ValueError(f"Charge amount must be positive: {self.amount}")
        if not self.currency:
            raise ValueError("currency cannot be empty")
        if not self.subject:
            raise ValueError("subject cannot be empty")


# ============================================================================
# Responses
# ============================================================================


@dataclass(frozen=True)
class CustomerCreateResponse:
    """Customer record created in Flow."""

    customer_id: str
    name: str
    email: str
    status: str
    register_url: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CustomerCreateResponse":
        return cls(
            customer_id=_require_text(payload, "customerId"),
            name=_require_text(payload, "name"),
            email=_require_text(payload, "email"),
            status=_optional_text(payload, "status") or "",
            register_url=_optional_text(payload, "registerUrl"),
        )

    def to_document(self) -> dict[str, Any]:
        """Flow's wire shape, for persistence next to the user record."""
        document: dict[str, Any] = {
            "customerId": self.customer_id,
            "name": self.name,
            "email": self.email,
            "status": self.status,
        }
        if self.register_url is not None:
            document["registerUrl"] = self.register_url
        return document


@dataclass(frozen=True)
class CustomerRegisterResponse:
    """Where to send the customer to register a card."""

    url: str
    token: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CustomerRegisterResponse":
        return cls(url=_require_text(payload, "url"), token=_require_text(payload, "token"))

    @property
    def redirect_url(self) -> str:
        """Registration page URL with the token attached, as Flow expects it."""
        return f"{self.url}?token={self.token}"


@dataclass(frozen=True)
class CustomerRegisterStatusResponse:
    """Snapshot of a card registration."""

    status: RegisterStatus
    card_number: str | None = None
    customer_id: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CustomerRegisterStatusResponse":
        raw_status = payload.get("status")
        try:
            status = RegisterStatus(int(raw_status))  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Unknown registration status: {raw_status!r}") from exc

        return cls(
            status=status,
            card_number=_optional_text(payload, "cardNumber"),
            customer_id=_optional_text(payload, "customerId"),
        )

    def is_terminal(self) -> bool:
        """Check if polling can stop."""
        return self.status != RegisterStatus.PENDING


@dataclass(frozen=True)
class CustomerChargeResponse:
    """Charge order created in Flow."""

    flow_order: int
    url: str
    token: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CustomerChargeResponse":
        return cls(
            flow_order=int(_require_text(payload, "flowOrder")),
            url=_require_text(payload, "url"),
            token=_require_text(payload, "token"),
        )

"""
Flow call results - exactly one of a typed success or a typed failure.

Operations on FlowClient return a FlowResult instead of raising, so the
failure path is an explicit branch at the call site:

    result = await client.create_customer(request)
    if isinstance(result, FlowFailure):
        logger.warning("customer_create_rejected", code=result.code)
    else:
        save(result.value)

Callers that prefer exceptions use result.unwrap().
"""

from dataclasses import dataclass, field
from typing import Any, Generic, Literal, TypeVar

from flowbridge.exceptions import FlowApiError

T = TypeVar("T")


@dataclass(frozen=True)
class FlowSuccess(Generic[T]):
    """Successful Flow call: the typed payload plus the JSON body it came from."""

    value: T
    raw: dict[str, Any] = field(default_factory=dict)
    ok: Literal[True] = field(default=True, init=False)

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class FlowFailure:
    """Failed Flow call, normalized from transport, HTTP or application errors."""

    code: int
    message: str
    ok: Literal[False] = field(default=False, init=False)

    @classmethod
    def from_error(cls, error: FlowApiError) -> "FlowFailure":
        return cls(code=error.code, message=error.message)

    def to_error(self) -> FlowApiError:
        return FlowApiError(self.message, self.code)

    def unwrap(self) -> Any:
        """Raise the failure as FlowApiError."""
        raise self.to_error()


FlowResult = FlowSuccess[T] | FlowFailure

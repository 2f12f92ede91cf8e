"""
User onboarding - turns a newly created user document into a Flow customer.

Invoked by the "user created" event trigger with the user id and the raw
document. The identity provider and the document store are collaborators
behind protocols; this module only orchestrates them.
"""

import asyncio
from typing import Any, Protocol

from structlog import get_logger

from flowbridge.exceptions import FlowApiError
from flowbridge.models.flow import CustomerCreateRequest, CustomerCreateResponse
from flowbridge.models.user import UserRecord
from flowbridge.observability import init_observability
from flowbridge.observability.logging import log_context
from flowbridge.observability.metrics import metrics
from flowbridge.services.flow_client import FlowClient
from flowbridge.services.flow_registry import get_flow_client

logger = get_logger(__name__)

FLOW_CUSTOMERS_COLLECTION = "flow-customers"


class ProfileClaimsWriter(Protocol):
    """Identity provider side: stamps profile data onto the auth user."""

    async def set_profile_claims(self, user_id: str, name: str, last_name: str) -> None:
        """
        Set display name "<name> <last_name>" and claims {name, lastName}.

        Args:
            user_id: Auth user id (same as the user document id)
            name: First name
            last_name: Last name
        """
        ...


class CustomerStore(Protocol):
    """Document store side: keeps the Flow customer next to the user."""

    async def save_flow_customer(self, user_id: str, customer: CustomerCreateResponse) -> None:
        """
        Persist the customer under FLOW_CUSTOMERS_COLLECTION/<user_id>.

        Args:
            user_id: User document id
            customer: Flow's customer record
        """
        ...


async def on_user_created(
    user_id: str,
    document: dict[str, Any] | None,
    *,
    claims: ProfileClaimsWriter,
    store: CustomerStore,
    client: FlowClient | None = None,
) -> CustomerCreateResponse:
    """
    Onboard a new user as a Flow customer.

    Profile claims and customer creation run concurrently. A claims failure
    is logged and does not block the customer; the customer is persisted
    only after Flow accepts it.

    Returns:
        The created Flow customer

    Raises:
        UserRecordError: If the document lacks name, lastName or email
        ConfigurationError: If Flow credentials are missing
        FlowApiError: If Flow rejects the customer
    """
    init_observability()

    with log_context(user_id=user_id):
        user = UserRecord.from_document(user_id, document)
        flow_client = client or get_flow_client()

        logger.info("user_onboarding_started")

        claims_outcome, result = await asyncio.gather(
            claims.set_profile_claims(user_id, user.name, user.last_name),
            flow_client.create_customer(
                CustomerCreateRequest(
                    name=user.full_name,
                    email=user.email,
                    external_id=user_id,
                )
            ),
            return_exceptions=True,
        )

        if isinstance(claims_outcome, Exception):
            logger.error(
                "profile_claims_failed",
                error_type=type(claims_outcome).__name__,
                error=str(claims_outcome),
            )
        if isinstance(result, BaseException):
            metrics.record_onboarding(success=False)
            raise result

        try:
            customer = result.unwrap()
        except FlowApiError as exc:
            metrics.record_onboarding(success=False)
            logger.error("flow_customer_create_failed", code=exc.code, message=exc.message)
            raise

        await store.save_flow_customer(user_id, customer)
        metrics.record_onboarding(success=True)

        logger.info(
            "user_onboarding_completed",
            customer_id=customer.customer_id,
            status=customer.status,
        )
        return customer

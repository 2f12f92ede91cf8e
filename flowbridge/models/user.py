"""
User record - the document that triggers customer onboarding.
"""

from dataclasses import dataclass
from typing import Any

from flowbridge.exceptions import UserRecordError


@dataclass(frozen=True)
class UserRecord:
    """Immutable snapshot of a newly created user document."""

    name: str
    last_name: str
    email: str

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.last_name}"

    @classmethod
    def from_document(cls, user_id: str, document: dict[str, Any] | None) -> "UserRecord":
        """
        Build a user record from the raw document.

        Raises:
            UserRecordError: If name, lastName or email is missing
        """
        document = document or {}
        missing = [key for key in ("name", "lastName", "email") if not document.get(key)]
        if missing:
            raise UserRecordError(user_id, missing)

        return cls(
            name=str(document["name"]),
            last_name=str(document["lastName"]),
            email=str(document["email"]),
        )

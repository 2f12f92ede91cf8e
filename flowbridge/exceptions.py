"""
Exception Classes - Strongly typed exception hierarchy.

NO DICTIONARIES - All exceptions have typed attributes.
"""


class FlowBridgeError(Exception):
    """Base exception for all flowbridge errors."""

    pass


class FlowApiError(FlowBridgeError):
    """
    Raised when a Flow API call fails.

    Transport, HTTP and application-level failures all end up here with the
    same (message, code) shape.
    """

    def __init__(self, message: str, code: int) -> None:
        self.message = message
        self.code = code
        super().__init__(f"Flow API error {code}: {message}")


class UserRecordError(FlowBridgeError):
    """Raised when a new user document is missing required fields."""

    def __init__(self, user_id: str, missing: list[str]) -> None:
        self.user_id = user_id
        self.missing = missing
        super().__init__(f"User {user_id} is missing fields: {', '.join(missing)}")

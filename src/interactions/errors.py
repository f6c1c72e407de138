"""Exception hierarchy for the interactions gateway."""

from __future__ import annotations


class InteractionError(Exception):
    """Base class for gateway errors."""


class InvalidSignatureError(InteractionError):
    """Raised for every authentication failure.

    The message is identical for missing headers, malformed signatures,
    wrong keys and tampered bodies.
    """

    def __init__(self) -> None:
        super().__init__("Bad request signature.")


class MalformedInteractionError(InteractionError):
    """Raised when a verified body is not a JSON object."""


class ConfigurationError(InteractionError):
    """Raised at startup for invalid keys, tables or environment."""


class RegistrationError(InteractionError):
    """Raised when the Discord API rejects a command upload."""

    def __init__(self, status_code: int, text: str) -> None:
        super().__init__(f"Command registration failed ({status_code}): {text}")
        self.status_code = status_code
        self.text = text

"""Ed25519 request verification for Discord interaction webhooks.

Discord signs ``timestamp + raw_body`` with the application's private key and
sends the hex signature in ``x-signature-ed25519``. The body is only decoded
and parsed after the signature checks out, and the resulting
VerifiedInteraction is the sole input the dispatcher accepts.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey
from pydantic import ValidationError

from src.interactions.errors import (
    ConfigurationError,
    InvalidSignatureError,
    MalformedInteractionError,
)
from src.interactions.models import Interaction, parse_interaction

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-signature-ed25519"
TIMESTAMP_HEADER = "x-signature-timestamp"

_VERIFIED = object()


@dataclass(frozen=True)
class SignedEnvelope:
    """Raw request body plus the two signature headers, exactly as received."""

    body: bytes
    signature: str | None
    timestamp: str | None


class VerifiedInteraction:
    """An interaction whose envelope passed signature verification.

    Only RequestVerifier.verify can construct one. ``payload`` is the decoded
    body with keys in the order they arrived.
    """

    __slots__ = ("interaction", "payload")

    def __init__(
        self,
        interaction: Interaction,
        payload: dict[str, Any],
        *,
        _token: object = None,
    ) -> None:
        if _token is not _VERIFIED:
            raise TypeError("VerifiedInteraction is only produced by RequestVerifier.verify")
        self.interaction = interaction
        self.payload = payload

    def __repr__(self) -> str:
        return f"VerifiedInteraction(type={self.interaction.type})"


class RequestVerifier:
    """Authenticates inbound interaction requests against a public key."""

    def __init__(self, public_key: str) -> None:
        try:
            self._verify_key = VerifyKey(bytes.fromhex(public_key))
        except (ValueError, TypeError) as exc:
            raise ConfigurationError("Invalid Ed25519 public key") from exc

    def is_authentic(self, envelope: SignedEnvelope) -> bool:
        """Return True only if the signature covers ``timestamp + body``.

        Missing headers fail before any cryptographic work. Every other
        failure (bad hex, wrong length, wrong key, tampered body) is the
        same False.
        """
        if not envelope.signature or not envelope.timestamp:
            return False
        try:
            signature = bytes.fromhex(envelope.signature)
            self._verify_key.verify(envelope.timestamp.encode() + envelope.body, signature)
        except (BadSignatureError, ValueError):
            return False
        return True

    def verify(self, envelope: SignedEnvelope) -> VerifiedInteraction:
        if not self.is_authentic(envelope):
            logger.debug("Rejected interaction request with invalid signature")
            raise InvalidSignatureError()

        try:
            payload = json.loads(envelope.body)
        except ValueError as exc:
            raise MalformedInteractionError("Interaction body is not valid JSON") from exc
        if not isinstance(payload, dict):
            raise MalformedInteractionError("Interaction body is not a JSON object")

        try:
            interaction = parse_interaction(payload)
        except ValidationError as exc:
            raise MalformedInteractionError("Interaction has no integer type") from exc

        return VerifiedInteraction(interaction, payload, _token=_VERIFIED)

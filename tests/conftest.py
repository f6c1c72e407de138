"""Shared test fixtures for the interactions gateway."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest
from nacl.signing import SigningKey

from src.audit.logger import AuditLogger
from src.interactions.verifier import RequestVerifier, SignedEnvelope, VerifiedInteraction
from src.models import AuditEvent, AuditEventType, GatewayConfig, RiskLevel

APPLICATION_ID = "123456789012345678"
TIMESTAMP = "1700000000"


@pytest.fixture
def signing_key() -> SigningKey:
    return SigningKey.generate()


@pytest.fixture
def config(signing_key: SigningKey) -> GatewayConfig:
    return GatewayConfig(
        application_id=APPLICATION_ID,
        public_key=signing_key.verify_key.encode().hex(),
    )


@pytest.fixture
def mock_audit_logger() -> MagicMock:
    return MagicMock(spec=AuditLogger)


# --- Factory functions for test data ---


def sign(signing_key: SigningKey, body: bytes, timestamp: str = TIMESTAMP) -> str:
    """Hex Ed25519 signature over ``timestamp + body``."""
    return signing_key.sign(timestamp.encode() + body).signature.hex()


def make_signed_envelope(
    signing_key: SigningKey, payload: dict[str, Any], timestamp: str = TIMESTAMP,
) -> SignedEnvelope:
    body = json.dumps(payload).encode()
    return SignedEnvelope(
        body=body, signature=sign(signing_key, body, timestamp), timestamp=timestamp,
    )


def make_verified(signing_key: SigningKey, payload: dict[str, Any]) -> VerifiedInteraction:
    verifier = RequestVerifier(signing_key.verify_key.encode().hex())
    return verifier.verify(make_signed_envelope(signing_key, payload))


def make_command(name: str, **extra: Any) -> dict[str, Any]:
    return {
        "id": "interaction-1",
        "application_id": APPLICATION_ID,
        "type": 2,
        "token": "tok",
        "version": 1,
        "data": {"id": "cmd-1", "name": name, "type": 1, **extra},
    }


def make_component(custom_id: str, component_type: int = 2, **extra: Any) -> dict[str, Any]:
    return {
        "id": "interaction-2",
        "type": 3,
        "data": {"custom_id": custom_id, "component_type": component_type, **extra},
    }


def make_modal_submit(custom_id: str = "refine_modal", value: str = "a cat") -> dict[str, Any]:
    return {
        "id": "interaction-3",
        "type": 5,
        "data": {
            "custom_id": custom_id,
            "components": [
                {
                    "type": 1,
                    "components": [{"type": 4, "custom_id": "prompt", "value": value}],
                },
            ],
        },
    }


def make_audit_event(**kwargs: Any) -> AuditEvent:
    """Factory for AuditEvent with sensible defaults."""
    defaults: dict[str, Any] = {
        "event_type": AuditEventType.SIGNATURE_REJECTED,
        "action": "POST /",
        "result": "rejected",
        "risk_level": RiskLevel.HIGH,
    }
    defaults.update(kwargs)
    return AuditEvent(**defaults)

"""Shared Pydantic data models for the interactions gateway."""

from __future__ import annotations

import os
import re
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.interactions.errors import ConfigurationError

_HEX_KEY_RE = re.compile(r"^[0-9a-fA-F]{64}$")

# --- Enums ---


class AuditEventType(str, Enum):
    SIGNATURE_REJECTED = "signature_rejected"
    INTERACTION_DISPATCHED = "interaction_dispatched"
    UNKNOWN_INTERACTION = "unknown_interaction"
    UNKNOWN_COMMAND = "unknown_command"
    MALFORMED_INTERACTION = "malformed_interaction"
    COMMANDS_REGISTERED = "commands_registered"


class RiskLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


# --- Configuration ---


class GatewayConfig(BaseModel):
    """Read-only process configuration handed to the app at construction."""

    model_config = ConfigDict(frozen=True)

    application_id: str = Field(min_length=1)
    public_key: str

    @field_validator("public_key")
    @classmethod
    def _check_public_key(cls, value: str) -> str:
        if not _HEX_KEY_RE.match(value):
            raise ValueError("public_key must be 64 hex characters")
        return value.lower()

    @classmethod
    def from_env(cls) -> GatewayConfig:
        missing = [
            name for name in ("DISCORD_APPLICATION_ID", "DISCORD_PUBLIC_KEY")
            if not os.environ.get(name)
        ]
        if missing:
            raise ConfigurationError(f"Missing environment variables: {', '.join(missing)}")
        try:
            return cls(
                application_id=os.environ["DISCORD_APPLICATION_ID"],
                public_key=os.environ["DISCORD_PUBLIC_KEY"],
            )
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc


# --- Audit Models ---


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    source_ip: str | None = None
    interaction_id: str | None = None
    action: str
    result: str  # "success" | "failure" | "rejected"
    risk_level: RiskLevel
    details: dict[str, object] | None = None

"""Publishes the command table to the Discord REST API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import httpx

from src.interactions.errors import RegistrationError
from src.models import AuditEvent, AuditEventType, RiskLevel

if TYPE_CHECKING:
    from src.audit.logger import AuditLogger
    from src.interactions.commands import CommandDefinition

logger = logging.getLogger(__name__)

DISCORD_API_BASE = "https://discord.com/api/v10"


class CommandRegistrar:
    """Bulk-overwrites the application's global commands.

    One PUT per call, no retries.
    """

    def __init__(
        self,
        application_id: str,
        token: str,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._application_id = application_id
        self._token = token
        self._audit = audit_logger

    @property
    def url(self) -> str:
        return f"{DISCORD_API_BASE}/applications/{self._application_id}/commands"

    async def register(self, commands: Sequence[CommandDefinition]) -> list[dict[str, Any]]:
        payload = [c.model_dump() for c in commands]
        headers = {
            "Authorization": f"Bot {self._token}",
            "Content-Type": "application/json",
        }

        async with httpx.AsyncClient(verify=True) as client:
            resp = await client.put(self.url, json=payload, headers=headers, timeout=30.0)

        if resp.status_code >= 400:
            logger.error("Command registration failed with status %s", resp.status_code)
            self._record("failure", {"status": resp.status_code})
            raise RegistrationError(resp.status_code, resp.text)

        registered: list[dict[str, Any]] = resp.json()
        logger.info("Registered %d commands", len(registered))
        self._record("success", {"commands": [c.name for c in commands]})
        return registered

    def _record(self, result: str, details: dict[str, object]) -> None:
        if self._audit:
            self._audit.log(AuditEvent(
                event_type=AuditEventType.COMMANDS_REGISTERED,
                action="register_commands",
                result=result,
                risk_level=RiskLevel.INFO if result == "success" else RiskLevel.MEDIUM,
                details=details,
            ))

"""Flat dispatch from a verified interaction to exactly one response."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.interactions.commands import CommandHandler, build_command_registry
from src.interactions.components import ComponentHandler, build_component_registry
from src.interactions.models import (
    ApplicationCommandInteraction,
    DispatchResult,
    MessageComponentInteraction,
    ModalSubmitInteraction,
    PingInteraction,
)
from src.interactions.responses import UNKNOWN_TYPE_BODY, echo, pong
from src.models import AuditEvent, AuditEventType, GatewayConfig, RiskLevel

if TYPE_CHECKING:
    from src.audit.logger import AuditLogger
    from src.interactions.registry import HandlerRegistry
    from src.interactions.verifier import VerifiedInteraction

logger = logging.getLogger(__name__)


class InteractionDispatcher:
    """Maps each interaction variant to its response builder.

    Stateless: every request is dispatched on its own, nothing carries over
    between interactions.
    """

    def __init__(
        self,
        config: GatewayConfig,
        commands: HandlerRegistry[CommandHandler] | None = None,
        components: HandlerRegistry[ComponentHandler] | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._config = config
        self._commands = commands if commands is not None else build_command_registry()
        self._components = components if components is not None else build_component_registry()
        self._audit = audit_logger

    def dispatch(
        self, verified: VerifiedInteraction, source_ip: str | None = None,
    ) -> DispatchResult:
        interaction = verified.interaction

        if isinstance(interaction, PingInteraction):
            # Handshake used when registering the endpoint URL.
            return DispatchResult(status_code=200, body=pong().to_body())

        if isinstance(interaction, ApplicationCommandInteraction):
            name = interaction.data.name
            handler = self._commands.get(name)
            if handler is None:
                logger.warning("Unknown command: %s", name)
                self._record(
                    AuditEventType.UNKNOWN_COMMAND, "command", "rejected",
                    interaction.id, source_ip, {"name": name},
                )
                return DispatchResult(status_code=400, body=dict(UNKNOWN_TYPE_BODY))
            self._record(
                AuditEventType.INTERACTION_DISPATCHED, "command", "success",
                interaction.id, source_ip, {"name": name.lower()},
            )
            return DispatchResult(
                status_code=200, body=handler(interaction, self._config).to_body(),
            )

        if isinstance(interaction, MessageComponentInteraction):
            custom_id = interaction.data.custom_id
            component_handler = self._components.get(custom_id)
            response = (
                component_handler(interaction, self._config)
                if component_handler is not None
                else echo(verified.payload.get("data"))
            )
            self._record(
                AuditEventType.INTERACTION_DISPATCHED, "component", "success",
                interaction.id, source_ip,
                {"custom_id": custom_id, "handled": component_handler is not None},
            )
            return DispatchResult(status_code=200, body=response.to_body())

        if isinstance(interaction, ModalSubmitInteraction):
            self._record(
                AuditEventType.INTERACTION_DISPATCHED, "modal_submit", "success",
                interaction.id, source_ip, {"custom_id": interaction.data.custom_id},
            )
            return DispatchResult(
                status_code=200, body=echo(verified.payload.get("data")).to_body(),
            )

        logger.error("Unknown Type: %s", interaction.type)
        self._record(
            AuditEventType.UNKNOWN_INTERACTION, "dispatch", "rejected",
            interaction.id, source_ip, {"type": interaction.type},
        )
        return DispatchResult(status_code=400, body=dict(UNKNOWN_TYPE_BODY))

    def _record(
        self,
        event_type: AuditEventType,
        action: str,
        result: str,
        interaction_id: object,
        source_ip: str | None,
        details: dict[str, object],
    ) -> None:
        logger.debug("%s %s %s", action, result, details)
        if not self._audit:
            return
        self._audit.log(AuditEvent(
            event_type=event_type,
            source_ip=source_ip,
            interaction_id=str(interaction_id) if interaction_id is not None else None,
            action=action,
            result=result,
            risk_level=RiskLevel.INFO if result == "success" else RiskLevel.LOW,
            details=details,
        ))

"""Builders for interaction response payloads."""

from __future__ import annotations

import json
from typing import Any

from src.interactions.models import (
    ComponentType,
    InteractionResponse,
    InteractionResponseType,
    MessageFlags,
)

UNKNOWN_TYPE_BODY: dict[str, str] = {"error": "Unknown Type"}


def pong() -> InteractionResponse:
    return InteractionResponse(type=InteractionResponseType.PONG)


def channel_message(
    content: str | None = None,
    *,
    embeds: list[dict[str, Any]] | None = None,
    components: list[dict[str, Any]] | None = None,
    ephemeral: bool = False,
) -> InteractionResponse:
    """Reply in the channel the interaction came from."""
    data: dict[str, Any] = {}
    if content is not None:
        data["content"] = content
    if embeds is not None:
        data["embeds"] = embeds
    if components is not None:
        data["components"] = components
    if ephemeral:
        data["flags"] = int(MessageFlags.EPHEMERAL)
    return InteractionResponse(
        type=InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE,
        data=data,
    )


def modal(custom_id: str, title: str, components: list[dict[str, Any]]) -> InteractionResponse:
    return InteractionResponse(
        type=InteractionResponseType.MODAL,
        data={"custom_id": custom_id, "title": title, "components": components},
    )


def action_row(*components: dict[str, Any]) -> dict[str, Any]:
    return {"type": int(ComponentType.ACTION_ROW), "components": list(components)}


def echo(data: Any) -> InteractionResponse:
    """Channel message whose content is the received ``data`` as compact JSON.

    Keys keep the order they arrived in.
    """
    return channel_message(json.dumps(data, separators=(",", ":"), ensure_ascii=False))

"""Slash command definitions and their response builders."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from src.interactions.models import (
    ApplicationCommandInteraction,
    ButtonStyle,
    ComponentType,
    InteractionResponse,
)
from src.interactions.registry import HandlerRegistry
from src.interactions.responses import action_row, channel_message
from src.models import GatewayConfig

IMAGE_URL = "https://picsum.photos/200/300"
INVITE_URL_TEMPLATE = (
    "https://discord.com/oauth2/authorize?client_id={application_id}"
    "&scope=applications.commands"
)

CommandHandler = Callable[[ApplicationCommandInteraction, GatewayConfig], InteractionResponse]


class CommandDefinition(BaseModel):
    """Command metadata as uploaded to the Discord API."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    type: int = 1  # CHAT_INPUT


@dataclass(frozen=True)
class Command:
    definition: CommandDefinition
    handler: CommandHandler


def _image_embed(title: str) -> dict[str, object]:
    return {"title": title, "image": {"url": IMAGE_URL, "width": 200, "height": 300}}


def aww(interaction: ApplicationCommandInteraction, config: GatewayConfig) -> InteractionResponse:
    navigation = action_row(
        {
            "type": int(ComponentType.BUTTON),
            "style": int(ButtonStyle.SECONDARY),
            "label": "Next",
            "custom_id": "next",
        },
        {
            "type": int(ComponentType.BUTTON),
            "style": int(ButtonStyle.SECONDARY),
            "label": "Prev",
            "custom_id": "prev",
        },
    )
    picker = action_row(
        {
            "type": int(ComponentType.STRING_SELECT),
            "options": [{"label": v, "value": v} for v in ("1", "2", "3")],
            "custom_id": "refine",
            "placeholder": "Choose an item to refine",
            "min_values": 1,
            "max_values": 1,
        },
    )
    return channel_message(
        embeds=[_image_embed(title) for title in ("1", "2", "3")],
        components=[navigation, picker],
    )


def invite(interaction: ApplicationCommandInteraction, config: GatewayConfig) -> InteractionResponse:
    """Ephemeral invite link for the configured application."""
    url = INVITE_URL_TEMPLATE.format(application_id=config.application_id)
    return channel_message(url, ephemeral=True)


AWW_COMMAND = Command(
    definition=CommandDefinition(name="aww", description="Drop some cuteness on this channel."),
    handler=aww,
)
INVITE_COMMAND = Command(
    definition=CommandDefinition(
        name="invite",
        description="Get an invite link to add the bot to your server",
    ),
    handler=invite,
)

COMMANDS: tuple[Command, ...] = (AWW_COMMAND, INVITE_COMMAND)


def build_command_registry(
    commands: Iterable[Command] = COMMANDS,
) -> HandlerRegistry[CommandHandler]:
    """Command names match case-insensitively."""
    return HandlerRegistry(
        "command",
        ((c.definition.name, c.handler) for c in commands),
        case_insensitive=True,
    )


def command_definitions(commands: Iterable[Command] = COMMANDS) -> list[CommandDefinition]:
    return [c.definition for c in commands]

"""Data models for inbound interactions and outbound interaction responses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictInt,
    TypeAdapter,
)

# --- Discord API v10 wire constants ---


class InteractionResponseType(IntEnum):
    PONG = 1
    CHANNEL_MESSAGE_WITH_SOURCE = 4
    MODAL = 9


class ComponentType(IntEnum):
    ACTION_ROW = 1
    BUTTON = 2
    STRING_SELECT = 3
    TEXT_INPUT = 4


class ButtonStyle(IntEnum):
    SECONDARY = 2


class TextInputStyle(IntEnum):
    SHORT = 1


class MessageFlags(IntEnum):
    EPHEMERAL = 1 << 6


# --- Inbound payloads ---


def _exact_int(value: Any) -> Any:
    # JSON true/false must not pass for 1/0.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("interaction type must be an integer")
    return value


class _Payload(BaseModel):
    # Only lookup keys are required; everything else is carried as received.
    model_config = ConfigDict(frozen=True, extra="allow")


class CommandData(_Payload):
    name: str
    id: Any = None
    type: Any = None
    options: Any = None


class ComponentData(_Payload):
    custom_id: str
    component_type: Any = None
    values: Any = None


class ModalSubmitData(_Payload):
    custom_id: Any = None
    components: Any = None


class _InteractionBase(_Payload):
    id: Any = None
    application_id: Any = None
    token: Any = None
    version: Any = None


class PingInteraction(_InteractionBase):
    type: Annotated[Literal[1], BeforeValidator(_exact_int)]


class ApplicationCommandInteraction(_InteractionBase):
    type: Annotated[Literal[2], BeforeValidator(_exact_int)]
    data: CommandData


class MessageComponentInteraction(_InteractionBase):
    type: Annotated[Literal[3], BeforeValidator(_exact_int)]
    data: ComponentData


class ModalSubmitInteraction(_InteractionBase):
    type: Annotated[Literal[5], BeforeValidator(_exact_int)]
    data: ModalSubmitData


class UnrecognizedInteraction(_InteractionBase):
    """Any payload whose discriminant or data shape is not served."""

    type: StrictInt
    data: Any = None


Interaction = Annotated[
    Union[
        PingInteraction,
        ApplicationCommandInteraction,
        MessageComponentInteraction,
        ModalSubmitInteraction,
        UnrecognizedInteraction,
    ],
    Field(union_mode="left_to_right"),
]

_INTERACTION_ADAPTER: TypeAdapter[Interaction] = TypeAdapter(Interaction)


def parse_interaction(payload: dict[str, Any]) -> Interaction:
    """Parse a decoded JSON object into the matching interaction variant.

    Raises pydantic.ValidationError when ``type`` is missing or not an integer.
    """
    return _INTERACTION_ADAPTER.validate_python(payload)


# --- Outbound responses ---


class InteractionResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: InteractionResponseType
    data: dict[str, Any] | None = None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


@dataclass
class DispatchResult:
    """HTTP status and JSON body produced for one interaction."""

    status_code: int
    body: dict[str, Any]

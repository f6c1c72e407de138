"""Message component handlers keyed by ``custom_id``."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from src.interactions.models import (
    ComponentType,
    InteractionResponse,
    MessageComponentInteraction,
    TextInputStyle,
)
from src.interactions.registry import HandlerRegistry
from src.interactions.responses import action_row, modal
from src.models import GatewayConfig

ComponentHandler = Callable[[MessageComponentInteraction, GatewayConfig], InteractionResponse]

REFINE_MODAL_ID = "refine_modal"
PROMPT_MAX_LENGTH = 4000


def open_refine_modal(
    interaction: MessageComponentInteraction, config: GatewayConfig,
) -> InteractionResponse:
    prompt = {
        "type": int(ComponentType.TEXT_INPUT),
        "custom_id": "prompt",
        "label": "Prompt",
        "style": int(TextInputStyle.SHORT),
        "min_length": 1,
        "max_length": PROMPT_MAX_LENGTH,
    }
    return modal(REFINE_MODAL_ID, "Refine", [action_row(prompt)])


COMPONENTS: tuple[tuple[str, ComponentHandler], ...] = (
    ("refine", open_refine_modal),
)


def build_component_registry(
    components: Iterable[tuple[str, ComponentHandler]] = COMPONENTS,
) -> HandlerRegistry[ComponentHandler]:
    return HandlerRegistry("component", components)

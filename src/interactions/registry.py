"""String-keyed handler tables validated at startup."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar

from src.interactions.errors import ConfigurationError

H = TypeVar("H")


class HandlerRegistry(Generic[H]):
    """Immutable mapping from a lookup key to a handler.

    Duplicate keys raise ConfigurationError when the table is built, so a
    misconfigured table never reaches request handling.
    """

    def __init__(
        self,
        kind: str,
        entries: Iterable[tuple[str, H]],
        *,
        case_insensitive: bool = False,
    ) -> None:
        self._kind = kind
        self._case_insensitive = case_insensitive
        self._handlers: dict[str, H] = {}
        for key, handler in entries:
            normalized = self._normalize(key)
            if not normalized:
                raise ConfigurationError(f"Empty {kind} key")
            if normalized in self._handlers:
                raise ConfigurationError(f"Duplicate {kind} key: {key!r}")
            self._handlers[normalized] = handler

    def _normalize(self, key: str) -> str:
        return key.lower() if self._case_insensitive else key

    def get(self, key: str) -> H | None:
        return self._handlers.get(self._normalize(key))

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._normalize(key) in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

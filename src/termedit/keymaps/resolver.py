"""Resolve decoded key tokens into session commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from termedit.modes import Command
from termedit.runtime.telemetry import span

from .models import Binding
from .registry import KeymapRegistry


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome returned from the resolver."""

    status: Literal["binding", "text", "miss"]
    command: Optional[Command] = None
    binding: Optional[Binding] = None


def is_printable(character: Optional[str]) -> bool:
    if not character or len(character) != 1:
        return False
    return character.isprintable()


class KeymapResolver:
    """Bindings win over text; a printable character otherwise becomes an
    ``insert_char`` command."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name

    def resolve(self, token: str, character: Optional[str] = None) -> ResolutionResult:
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"token": token},
        ) as handle:
            binding = self._registry.lookup(token) if token else None
            if binding is not None:
                handle.add_metadata("status", "binding")
                handle.add_metadata("binding_id", binding.id)
                return ResolutionResult(
                    status="binding",
                    command=Command(binding.command),
                    binding=binding,
                )

            if is_printable(character):
                handle.add_metadata("status", "text")
                return ResolutionResult(
                    status="text", command=Command("insert_char", text=character)
                )

            handle.add_metadata("status", "miss")
            return ResolutionResult(status="miss")


__all__ = ["KeymapResolver", "ResolutionResult", "is_printable"]

"""Keymap registry responsible for storing bindings."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, Optional

from termedit.runtime.telemetry import span

from .models import Binding, KeyStroke


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    binding_count: int
    commands: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Raised when a new binding claims a keystroke that is already bound."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        conflicts_tuple = tuple(conflicts)
        message = (
            f"Binding '{binding.id}' conflicts with {[b.id for b in conflicts_tuple]}"
        )
        super().__init__(message)
        self.binding = binding
        self.conflicts = conflicts_tuple


class KeymapRegistry:
    """Owns bindings, indexed by their keystroke token."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._bindings: Dict[str, Binding] = {}
        self._by_signature: Dict[str, str] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError as exc:
            raise KeyError(f"Binding '{binding_id}' is not registered") from exc

    def lookup(self, token: str) -> Optional[Binding]:
        binding_id = self._by_signature.get(KeyStroke.parse(token).token)
        return self._bindings[binding_id] if binding_id else None

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "key": binding.key_signature},
        ) as handle:
            conflicts = self.detect_conflicts(binding)
            if conflicts and not replace:
                handle.add_metadata(
                    "conflicts", ",".join(conflict.id for conflict in conflicts)
                )
                raise KeymapConflictError(binding, conflicts)

            if replace:
                for conflict in conflicts:
                    self._remove(conflict)
                existing = self._bindings.get(binding.id)
                if existing:
                    self._remove(existing)
            elif binding.id in self._bindings:
                raise ValueError(f"Binding id '{binding.id}' already registered")

            self._bindings[binding.id] = binding
            self._by_signature[binding.key_signature] = binding.id
            self._touch()
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.get(binding_id)
        if binding is None:
            return None
        self._remove(binding)
        self._touch()
        return binding

    def rebind(self, binding_id: str, token: str) -> Binding:
        """Move an existing binding to another keystroke."""

        current = self.get_binding(binding_id)
        updated = replace(current, stroke=KeyStroke.parse(token))
        conflicts = [b for b in self.detect_conflicts(updated) if b.id != binding_id]
        if conflicts:
            raise KeymapConflictError(updated, conflicts)
        self._remove(current)
        self._bindings[binding_id] = updated
        self._by_signature[updated.key_signature] = binding_id
        self._touch()
        return updated

    def iter_bindings(self, command: Optional[str] = None) -> Iterator[Binding]:
        for binding in self._bindings.values():
            if command is None or binding.command == command:
                yield binding

    def stats(self) -> RegistryStats:
        return RegistryStats(
            binding_count=len(self._bindings),
            commands=tuple(sorted({b.command for b in self._bindings.values()})),
        )

    def detect_conflicts(self, binding: Binding) -> list[Binding]:
        existing_id = self._by_signature.get(binding.key_signature)
        if existing_id is None or existing_id == binding.id:
            return []
        return [self._bindings[existing_id]]

    def _remove(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        if self._by_signature.get(binding.key_signature) == binding.id:
            self._by_signature.pop(binding.key_signature, None)

    def _touch(self) -> None:
        self._revision += 1


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]

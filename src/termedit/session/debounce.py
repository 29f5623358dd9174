"""Single-slot debounce timer polled by the host event loop."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional


@dataclass
class PendingDeadline:
    deadline: float
    generation: int


class DebounceTimer:
    """Fires ``on_expire`` once ``delay_ms`` passes without a new ``schedule``.

    Only one deadline is ever armed. ``schedule`` replaces it and bumps the
    generation, so a stale poll can never fire an older burst twice. Nothing
    runs in the background; the host calls ``poll`` from its own loop.
    """

    def __init__(
        self,
        delay_ms: int,
        on_expire: Callable[[], None],
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if delay_ms < 0:
            raise ValueError("delay_ms cannot be negative")
        self.delay_ms = delay_ms
        self._on_expire = on_expire
        self._clock = clock
        self._pending: Optional[PendingDeadline] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def generation(self) -> int:
        return self._generation

    def schedule(self) -> None:
        self._generation += 1
        self._pending = PendingDeadline(
            deadline=self._clock() + self.delay_ms / 1000.0,
            generation=self._generation,
        )

    def cancel(self) -> None:
        self._pending = None

    def poll(self) -> bool:
        """Fire the callback if the armed deadline has passed."""

        timer = self._pending
        if timer is None or timer.deadline > self._clock():
            return False
        return self._fire(timer.generation)

    def flush(self) -> bool:
        """Fire immediately if anything is armed."""

        timer = self._pending
        if timer is None:
            return False
        return self._fire(timer.generation)

    def _fire(self, generation: int) -> bool:
        timer = self._pending
        if timer is None or timer.generation != generation:
            return False
        self._pending = None
        self._on_expire()
        return True


__all__ = ["DebounceTimer", "PendingDeadline"]

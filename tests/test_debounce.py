from __future__ import annotations

import pytest

from termedit.session import DebounceTimer


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms / 1000.0


def make_timer(delay_ms: int = 500) -> tuple[DebounceTimer, FakeClock, list[int]]:
    clock = FakeClock()
    fired: list[int] = []
    timer = DebounceTimer(delay_ms, lambda: fired.append(1), clock=clock)
    return timer, clock, fired


def test_fires_once_after_quiet_period() -> None:
    timer, clock, fired = make_timer()

    timer.schedule()
    clock.advance(499)
    assert timer.poll() is False

    clock.advance(2)
    assert timer.poll() is True
    assert timer.poll() is False
    assert fired == [1]
    assert timer.pending is False


def test_reschedule_replaces_pending_deadline() -> None:
    timer, clock, fired = make_timer()

    timer.schedule()
    clock.advance(400)
    timer.schedule()
    clock.advance(400)
    assert timer.poll() is False

    clock.advance(200)
    assert timer.poll() is True
    assert fired == [1]


def test_cancel_drops_pending_deadline() -> None:
    timer, clock, fired = make_timer()

    timer.schedule()
    timer.cancel()
    clock.advance(1000)

    assert timer.poll() is False
    assert fired == []


def test_flush_fires_immediately_only_when_armed() -> None:
    timer, _clock, fired = make_timer()

    assert timer.flush() is False
    timer.schedule()
    assert timer.flush() is True
    assert fired == [1]


def test_generation_increments_per_schedule() -> None:
    timer, _clock, _fired = make_timer()

    timer.schedule()
    timer.schedule()

    assert timer.generation == 2


def test_negative_delay_is_rejected() -> None:
    with pytest.raises(ValueError):
        DebounceTimer(-1, lambda: None)

"""Per-room countdowns.

Each room holds at most one ``PhaseTimer`` in ``room.timer``. Entering a phase
cancels whatever is in that slot before the new countdown is started, and the
countdown itself runs as a background task that sleeps between ticks.
"""
from __future__ import annotations

import logging
from typing import Any, Callable

from ..realtime import events
from .models import Room


logger = logging.getLogger(__name__)


class PhaseTimer:
    def __init__(
        self,
        room_id: str,
        phase: str,
        seq: int,
        seconds: int,
        on_expire: Callable[["PhaseTimer"], None],
        lock: Any,
        on_tick: Callable[["PhaseTimer"], None] | None = None,
    ) -> None:
        self.room_id = room_id
        self.phase = phase
        self.seq = seq
        self.seconds = seconds
        self.remaining = seconds
        self.cancelled = False
        self.fired = False
        self._on_expire = on_expire
        self._on_tick = on_tick
        self._lock = lock

    @property
    def done(self) -> bool:
        return self.cancelled or self.fired

    def cancel(self) -> None:
        self.cancelled = True

    def tick(self) -> bool:
        """Count down one unit. Returns True while the timer is still running."""
        with self._lock:
            if self.done:
                return False
            self.remaining = max(0, self.remaining - 1)
            if self._on_tick:
                self._on_tick(self)
            if self.remaining > 0:
                return True
            self.fired = True
            self._on_expire(self)
            return False

    def run(self, sleep: Callable[[float], Any], interval: float = 1.0) -> None:
        while not self.done:
            sleep(interval)
            try:
                self.tick()
            except Exception:
                logger.exception(f"[timer-error] room={self.room_id} phase={self.phase} seq={self.seq}")
                return


class PhaseScheduler:
    def __init__(self, transport: Any, runner: Any, lock: Any, tick_interval: float = 1.0) -> None:
        self._transport = transport
        self._runner = runner
        self._lock = lock
        self._tick_interval = tick_interval

    def clear(self, room: Room) -> None:
        timer = room.timer
        room.timer = None
        if timer is not None and not timer.done:
            timer.cancel()
            logger.info(f"[timer-cancel] room={room.id} phase={timer.phase} seq={timer.seq} remaining={timer.remaining}")

    def enter(
        self,
        room: Room,
        phase: str,
        seconds: int,
        on_expire: Callable[[PhaseTimer], None],
        notice: str | None = events.PHASE_CHANGE,
        countdown: bool = True,
    ) -> PhaseTimer:
        self.clear(room)

        room.phase = phase
        room.phase_seq += 1

        if notice:
            self._transport.broadcast(room.id, notice, {"phase": phase, "round": room.round, "seconds": seconds})
        if countdown:
            self._transport.broadcast(room.id, events.TIMER_START, {"phase": phase, "seconds": seconds})

        timer = PhaseTimer(
            room.id,
            phase,
            room.phase_seq,
            seconds,
            on_expire=on_expire,
            lock=self._lock,
            on_tick=self._broadcast_tick if countdown else None,
        )
        room.timer = timer
        self._runner.start_background_task(timer.run, self._runner.sleep, self._tick_interval)

        logger.info(f"[timer-set] room={room.id} phase={phase} seq={room.phase_seq} duration={seconds}s")
        return timer

    def _broadcast_tick(self, timer: PhaseTimer) -> None:
        self._transport.broadcast(timer.room_id, events.TIMER_TICK, {"phase": timer.phase, "remaining": timer.remaining})

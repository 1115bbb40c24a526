from __future__ import annotations

import logging
import uuid
from threading import RLock
from typing import Any

from ..config import Config
from ..realtime import events
from . import assignment, gate, history
from .errors import (
    AlreadyJoined,
    InsufficientPlayers,
    NotFound,
    Unauthorized,
    WrongPhase,
)
from .models import ACTIVE_PHASES, Player, Room, RoomSettings
from .prompts import DEFAULT_PROMPTS, random_prompt
from .scheduler import PhaseScheduler, PhaseTimer


logger = logging.getLogger(__name__)


def _int_at_least(raw: Any, minimum: int, default: int) -> int:
    if isinstance(raw, bool):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= minimum else default


class RoomRegistry:
    """Owns every live room and runs all actions and timer callbacks.

    One re-entrant lock serializes the whole registry: client actions,
    countdown ticks and phase transitions never interleave.
    """

    def __init__(self, transport: Any, runner: Any, config: Any = Config) -> None:
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}
        self.transport = transport
        self.scheduler = PhaseScheduler(transport, runner, self._lock)

        self.default_max_rounds = int(getattr(config, "DEFAULT_MAX_ROUNDS", 3))
        self.default_seconds_per_turn = int(getattr(config, "DEFAULT_SECONDS_PER_TURN", 60))
        self.min_seconds_per_turn = int(getattr(config, "MIN_SECONDS_PER_TURN", 10))
        self.default_mode = str(getattr(config, "DEFAULT_MODE", "classic"))
        self.reveal_grace_sec = int(getattr(config, "REVEAL_GRACE_SEC", 10))
        self.max_text_len = int(getattr(config, "MAX_TEXT_LEN", 140))
        self.room_code_length = int(getattr(config, "ROOM_CODE_LENGTH", 6))
        self.prompts = list(getattr(config, "PROMPTS", None) or DEFAULT_PROMPTS)

    # ------------------------------------------------------------------
    # Room bookkeeping
    # ------------------------------------------------------------------

    def normalize_settings(self, raw: Any) -> RoomSettings:
        data = raw if isinstance(raw, dict) else {}
        mode = data.get("mode")
        return RoomSettings(
            max_rounds=_int_at_least(data.get("maxRounds"), 1, self.default_max_rounds),
            seconds_per_turn=_int_at_least(
                data.get("secondsPerTurn"), self.min_seconds_per_turn, self.default_seconds_per_turn
            ),
            mode=str(mode) if mode is not None else self.default_mode,
        )

    def _new_code(self) -> str:
        code = uuid.uuid4().hex[: self.room_code_length].upper()
        while code in self._rooms:
            code = uuid.uuid4().hex[: self.room_code_length].upper()
        return code

    def create_room(self, settings: Any = None) -> Room:
        with self._lock:
            room = Room(id=self._new_code())
            room.apply_settings(self.normalize_settings(settings))
            self._rooms[room.id] = room
            logger.info(
                f"[room-create] room={room.id} maxRounds={room.max_rounds} "
                f"secondsPerTurn={room.seconds_per_turn} mode={room.mode}"
            )
            return room

    def get_room(self, code: str) -> Room | None:
        with self._lock:
            return self._rooms.get(code)

    def require_room(self, code: str) -> Room:
        room = self.get_room(code)
        if room is None:
            raise NotFound(f"room {code!r} does not exist")
        return room

    def list_rooms(self) -> list[Room]:
        with self._lock:
            return list(self._rooms.values())

    def delete_room(self, code: str) -> bool:
        with self._lock:
            room = self._rooms.pop(code, None)
            if room is None:
                return False
            self.scheduler.clear(room)
            logger.info(f"[room-destroy] room={code}")
            return True

    def room_summary(self, room: Room) -> dict:
        with self._lock:
            return {
                "id": room.id,
                "host": room.host_id,
                "phase": room.phase,
                "round": room.round,
                "maxRounds": room.max_rounds,
                "secondsPerTurn": room.seconds_per_turn,
                "mode": room.mode,
                "players": [{"id": pid, "name": room.players[pid].name} for pid in room.order + room.bench],
            }

    def _broadcast_room(self, room: Room) -> None:
        self.transport.broadcast(room.id, events.ROOM_UPDATE, self.room_summary(room))

    def join_room(self, room_id: str, player_id: str, name: str) -> Room:
        with self._lock:
            room = self.require_room(room_id)
            if player_id in room.players:
                raise AlreadyJoined(f"{player_id} is already in {room_id}")

            room.players[player_id] = Player(id=player_id, name=name)
            # Drawers and guessers were already sent their duties for this round.
            if room.phase in ("drawing", "guessing"):
                room.bench.append(player_id)
            else:
                room.order.append(player_id)
            if room.host_id is None or room.host_id not in room.players:
                room.host_id = player_id

            logger.info(f"[room-join] room={room.id} player={player_id} name={name!r} players={len(room.order)}")
            self._broadcast_room(room)
            return room

    def leave(self, player_id: str, room_id: str) -> bool:
        """Remove ``player_id`` from the room. Returns False if they were not in it."""
        with self._lock:
            room = self.require_room(room_id)
            if player_id not in room.players:
                return False

            del room.players[player_id]
            if player_id in room.order:
                room.order.remove(player_id)
            if player_id in room.bench:
                room.bench.remove(player_id)
            if room.host_id == player_id:
                seats = room.order + room.bench
                room.host_id = seats[0] if seats else None

            logger.info(f"[room-leave] room={room.id} player={player_id} players={len(room.order)} host={room.host_id}")

            if not room.players:
                self.delete_room(room.id)
                return True

            self._broadcast_room(room)

            # The departure may leave every remaining player already done.
            if room.phase in ACTIVE_PHASES and gate.is_complete(room):
                self.advance(room.id, room.phase, room.phase_seq, trigger="leave")
            return True

    def leave_all(self, player_id: str) -> list[str]:
        with self._lock:
            left = []
            for room in self.list_rooms():
                if player_id in room.players:
                    self.leave(player_id, room.id)
                    left.append(room.id)
            return left

    # ------------------------------------------------------------------
    # Game actions
    # ------------------------------------------------------------------

    def start_game(self, room_id: str, caller_id: str, settings: Any = None) -> Room:
        with self._lock:
            room = self.require_room(room_id)
            if caller_id != room.host_id:
                raise Unauthorized(f"{caller_id} is not the host of {room_id}")
            if len(room.order) < 2:
                raise InsufficientPlayers(f"room {room_id} has {len(room.order)} player(s)")
            if room.phase not in ("waiting", "finished"):
                raise WrongPhase(f"room {room_id} is already {room.phase}")

            if isinstance(settings, dict) and settings:
                room.apply_settings(self.normalize_settings(settings))

            room.round = 1
            room.history = []
            logger.info(f"[game-start] room={room.id} players={len(room.order)} maxRounds={room.max_rounds}")
            self._enter_writing(room, notice=events.GAME_STARTED)
            self._broadcast_room(room)
            return room

    def submit_prompt(self, room_id: str, caller_id: str, prompt: Any) -> None:
        with self._lock:
            room = self.require_room(room_id)
            text = gate.clean_text(prompt, self.max_text_len) or random_prompt(self.prompts)
            gate.submit_prompt(room, caller_id, text)
            self._after_submission(room, caller_id, "prompt")

    def submit_drawing(self, room_id: str, caller_id: str, target_id: str, strokes: Any) -> None:
        with self._lock:
            room = self.require_room(room_id)
            gate.submit_drawing(room, caller_id, target_id, strokes)
            self._after_submission(room, caller_id, "drawing")

    def submit_guess(self, room_id: str, caller_id: str, target_id: str, guess: Any) -> None:
        with self._lock:
            room = self.require_room(room_id)
            gate.submit_guess(room, caller_id, target_id, gate.clean_text(guess, self.max_text_len))
            self._after_submission(room, caller_id, "guess")

    def _after_submission(self, room: Room, caller_id: str, kind: str) -> None:
        self.transport.broadcast(room.id, events.PLAYER_SUBMITTED, {"playerId": caller_id, "kind": kind})
        logger.debug(
            f"[progress] room={room.id} phase={room.phase} kind={kind} "
            f"reached={history.count_reached(room, kind)} players={len(room.order)}"
        )
        if gate.is_complete(room):
            self.advance(room.id, room.phase, room.phase_seq, trigger="complete")

    # ------------------------------------------------------------------
    # Phase transitions
    # ------------------------------------------------------------------

    def advance(self, room_id: str, phase: str, seq: int, trigger: str = "timeout") -> bool:
        """Leave ``phase`` of the room, if it is still the phase instance ``seq``.

        Both the countdown and the early-advance path come through here; the
        first one wins and any later trigger for the same instance is ignored.
        """
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                logger.info(f"[timer-skip] room={room_id} phase={phase} trigger={trigger} room gone")
                return False
            if room.phase != phase or room.phase_seq != seq:
                logger.info(
                    f"[timer-skip] room={room_id} phase={phase} seq={seq} trigger={trigger} "
                    f"actual_phase={room.phase} actual_seq={room.phase_seq}"
                )
                return False

            close = {
                "writing": self._close_writing,
                "drawing": self._close_drawing,
                "guessing": self._close_guessing,
                "reveal": self._close_reveal,
            }.get(phase)
            if close is None:
                return False

            logger.info(f"[phase] room={room.id} leaving={phase} round={room.round} trigger={trigger}")
            close(room)
            return True

    def _on_timer_expire(self, timer: PhaseTimer) -> None:
        logger.info(f"[timer-fire] room={timer.room_id} phase={timer.phase} seq={timer.seq}")
        self.advance(timer.room_id, timer.phase, timer.seq, trigger="timeout")

    def _enter_writing(self, room: Room, notice: str = events.PHASE_CHANGE) -> None:
        self.scheduler.enter(room, "writing", room.seconds_per_turn, self._on_timer_expire, notice=notice)

    def _close_writing(self, room: Room) -> None:
        filled = history.fill_placeholders(room, lambda: random_prompt(self.prompts))
        if filled:
            logger.info(f"[placeholder] room={room.id} owners={[e.owner for e in filled]}")

        self.scheduler.enter(room, "drawing", room.seconds_per_turn, self._on_timer_expire)
        for entry in room.history:
            duty = assignment.drawer_for(room.order, entry.owner)
            if not duty.assigned:
                continue
            prompt = entry.step("prompt")
            self.transport.send(
                duty.player_id,
                events.DRAW_FOR,
                {"targetId": entry.owner, "prompt": prompt.data if prompt else "", "seconds": room.seconds_per_turn},
            )

    def _close_drawing(self, room: Room) -> None:
        self.scheduler.enter(room, "guessing", room.seconds_per_turn, self._on_timer_expire)
        for entry in room.history:
            drawing = entry.step("drawing")
            if drawing is None:
                continue
            duty = assignment.guesser_for(room.order, entry.owner)
            if not duty.assigned:
                continue
            self.transport.send(duty.player_id, events.GUESS_FOR, {"targetId": entry.owner, "drawing": drawing.data})

    def _close_guessing(self, room: Room) -> None:
        self._seat_bench(room)
        self.scheduler.enter(room, "reveal", self.reveal_grace_sec, self._on_timer_expire, countdown=False)
        self.transport.broadcast(room.id, events.REVEAL_DATA, history.serialize_history(room))

    def _seat_bench(self, room: Room) -> None:
        if not room.bench:
            return
        logger.info(f"[seat] room={room.id} players={room.bench}")
        room.order.extend(room.bench)
        room.bench = []

    def _close_reveal(self, room: Room) -> None:
        room.round += 1
        if room.round > room.max_rounds:
            self._finish(room)
            return
        room.history = []
        self._enter_writing(room)

    def _finish(self, room: Room) -> None:
        self.scheduler.clear(room)
        room.phase = "finished"
        room.phase_seq += 1
        logger.info(f"[game-end] room={room.id} rounds={room.max_rounds}")
        self.transport.broadcast(room.id, events.GAME_ENDED, {})
        self._broadcast_room(room)


from __future__ import annotations


class GameError(Exception):
    """Expected failure of a client action; ``code`` is sent back as ``err``."""

    code = "error"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.code)
        self.detail = detail


class InvalidPayload(GameError):
    code = "invalid_payload"


class NotFound(GameError):
    code = "room_not_found"


class AlreadyJoined(GameError):
    code = "already_joined"


class Unauthorized(GameError):
    code = "only_host"


class InsufficientPlayers(GameError):
    code = "not_enough_players"


class WrongPhase(GameError):
    code = "wrong_phase"


class NotAssigned(GameError):
    code = "not_assigned"


class DuplicateSubmission(GameError):
    code = "duplicate_submission"


class EntryMissing(GameError):
    code = "entry_missing"


class InternalError(GameError):
    code = "internal_error"

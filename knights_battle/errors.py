"""Exception hierarchy for the game engine.

Every error here is a precondition violation raised before any state is
touched. Random "failures" (maintain, destroy) are outcomes, not errors.
"""


class GameError(RuntimeError):
    """Base exception for rejected game actions."""


class AlreadyMaxLevel(GameError):
    """Raised when enhancing a weapon that is already at MAX_LEVEL."""


class AlreadyMaxElementLevel(GameError):
    """Raised when enhancing an element that is already at MAX_ELEMENT_LEVEL."""


class InsufficientGold(GameError):
    """Raised when the player cannot pay for an action."""

    def __init__(self, required: int, available: int):
        super().__init__(f"Not enough gold: {required:,}G required, {available:,}G available")
        self.required = required
        self.available = available


class NoElementAssigned(GameError):
    """Raised when enhancing the element of a weapon that has none."""


class DailyQuotaExceeded(GameError):
    """Raised when the daily battle allowance is used up."""


class OpponentNotFound(GameError):
    """Raised when no opponent can be selected or the id is unknown."""


class AttendanceNotReady(GameError):
    """Raised when the attendance reward is claimed before it is due."""


class InvariantViolation(GameError):
    """Raised when a weapon or stats record breaks a data-model invariant."""


class StaleRecord(GameError):
    """Raised when the stored gold changed under a session before it could save."""

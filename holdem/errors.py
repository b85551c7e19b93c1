from __future__ import annotations


class PokerError(Exception):
    """Base class for every error raised by the table engine."""


class IllegalActionError(PokerError, ValueError):
    """An action was rejected; the state it was applied to is unchanged."""

    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


class InsufficientCardsError(PokerError, RuntimeError):
    """The deck ran out. Never expected with nine or fewer players."""


class ExternalDecisionTimeoutError(PokerError):
    """A bot or remote seat did not answer within the move clock."""

    def __init__(self, seat_id: str, timeout_ms: int) -> None:
        super().__init__(f"Seat {seat_id} did not act within {timeout_ms} ms")
        self.seat_id = seat_id
        self.timeout_ms = timeout_ms


class TableError(PokerError, RuntimeError):
    """The table cannot do what was asked (full, not enough players, ...)."""

"""Exceptions raised by the hand engine."""


class HoldemError(Exception):
    """Base class for recoverable table errors."""


class IllegalActionError(HoldemError):
    """A decision provider returned an action the rules do not allow."""

    def __init__(self, action, reason: str):
        self.action = action
        self.reason = reason
        super().__init__(f"Illegal action {action}: {reason}")


class DeckExhaustedError(HoldemError):
    """The deck cannot supply the cards a hand needs."""


class InsufficientPlayersError(HoldemError):
    """Fewer than two players with chips are seated; no hand can start."""


class SeatError(HoldemError):
    """A seat operation could not be performed."""


class HandStateError(HoldemError):
    """An operation was requested in a stage that does not allow it."""


class StaleCursorError(AssertionError):
    """The turn cursor references a player who is no longer active."""


class LedgerInvariantError(AssertionError):
    """Chips were created or destroyed, or a balance went negative."""

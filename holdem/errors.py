from __future__ import annotations


class InputRejected(ValueError):
    """The current player asked for an action the table does not allow; ask again."""


class ActionParseError(InputRejected):
    """Raw input could not be read as an action."""


class InsufficientFunds(InputRejected):
    """A call or raise needs more chips than the player holds."""


class InvariantViolation(RuntimeError):
    """Engine state that should be unreachable. Never retried."""

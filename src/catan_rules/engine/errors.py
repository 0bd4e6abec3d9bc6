from __future__ import annotations


class CatanError(Exception):
    """Base class for engine errors."""


class RuleViolation(CatanError, ValueError):
    """An action was rejected by the rules; the game state is unchanged."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InvariantViolation(CatanError, RuntimeError):
    """The engine reached a state its own preconditions rule out."""

"""Rules engine for Catan."""

from .board import Board, generate_board
from .errors import CatanError, InvariantViolation, RuleViolation
from .events import EventKind, GameEvent
from .game_state import GameState, initial_game_state
from .types import Action, ActionType, GamePhase, ResourceType
from .game import Game

__all__ = [
    "Action",
    "ActionType",
    "Board",
    "CatanError",
    "EventKind",
    "Game",
    "GameEvent",
    "GamePhase",
    "GameState",
    "InvariantViolation",
    "ResourceType",
    "RuleViolation",
    "generate_board",
    "initial_game_state",
]

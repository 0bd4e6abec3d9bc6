from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, FrozenSet, List, Tuple

from catan_rules.utils.repro import RandomSource

from . import scoring
from .actions import EXECUTORS
from .errors import InvariantViolation, RuleViolation
from .game_state import GameState
from .rules import validate_action
from .types import Action, ActionType, DevCardType, GamePhase, SetupPhase

logger = logging.getLogger(__name__)


class MachineState(str, Enum):
    SETUP = "setup"
    WAITING_FOR_ROLL = "waiting_for_roll"
    ROBBER_DISCARD = "robber_discard"
    ROBBER_PLACEMENT = "robber_placement"
    PLAYING = "playing"
    GAME_OVER = "game_over"


def machine_state(state: GameState) -> MachineState:
    phase = state.phase
    if phase == GamePhase.GAME_OVER:
        return MachineState.GAME_OVER
    if phase == GamePhase.SETUP:
        return MachineState.SETUP
    if phase == GamePhase.ROBBER_DISCARD:
        return MachineState.ROBBER_DISCARD
    if phase == GamePhase.ROBBER_PLACEMENT:
        return MachineState.ROBBER_PLACEMENT
    return MachineState.PLAYING if state.turn.has_rolled else MachineState.WAITING_FOR_ROLL


_S = MachineState
_BUILD_OUTCOMES = frozenset({_S.PLAYING, _S.GAME_OVER})

# (state before, action) -> states the action may lead to.
TRANSITIONS: Dict[Tuple[MachineState, ActionType], FrozenSet[MachineState]] = {
    (_S.SETUP, ActionType.PLACE_SETTLEMENT): frozenset({_S.SETUP}),
    (_S.SETUP, ActionType.PLACE_ROAD): frozenset({_S.SETUP, _S.WAITING_FOR_ROLL}),
    (_S.WAITING_FOR_ROLL, ActionType.ROLL_DICE): frozenset(
        {_S.PLAYING, _S.ROBBER_DISCARD, _S.ROBBER_PLACEMENT}
    ),
    (_S.ROBBER_DISCARD, ActionType.DISCARD_RESOURCES): frozenset(
        {_S.ROBBER_DISCARD, _S.ROBBER_PLACEMENT}
    ),
    (_S.ROBBER_PLACEMENT, ActionType.MOVE_ROBBER): frozenset({_S.PLAYING}),
    (_S.PLAYING, ActionType.PLACE_SETTLEMENT): _BUILD_OUTCOMES,
    (_S.PLAYING, ActionType.PLACE_CITY): _BUILD_OUTCOMES,
    (_S.PLAYING, ActionType.PLACE_ROAD): _BUILD_OUTCOMES,
    (_S.PLAYING, ActionType.BUY_DEV_CARD): _BUILD_OUTCOMES,
    (_S.PLAYING, ActionType.PLAY_KNIGHT): _BUILD_OUTCOMES,
    (_S.PLAYING, ActionType.PLAY_ROAD_BUILDING): _BUILD_OUTCOMES,
    (_S.PLAYING, ActionType.PLAY_YEAR_OF_PLENTY): frozenset({_S.PLAYING}),
    (_S.PLAYING, ActionType.PLAY_MONOPOLY): frozenset({_S.PLAYING}),
    (_S.PLAYING, ActionType.TRADE_WITH_BANK): frozenset({_S.PLAYING}),
    (_S.PLAYING, ActionType.END_TURN): frozenset({_S.WAITING_FOR_ROLL, _S.GAME_OVER}),
}


_SETUP_STEP_ACTIONS = {
    SetupPhase.FIRST_SETTLEMENT: ActionType.PLACE_SETTLEMENT,
    SetupPhase.SECOND_SETTLEMENT: ActionType.PLACE_SETTLEMENT,
    SetupPhase.FIRST_ROAD: ActionType.PLACE_ROAD,
    SetupPhase.SECOND_ROAD: ActionType.PLACE_ROAD,
}

_DEV_CARD_PLAYS = {
    ActionType.PLAY_KNIGHT: DevCardType.KNIGHT,
    ActionType.PLAY_ROAD_BUILDING: DevCardType.ROAD_BUILDING,
    ActionType.PLAY_YEAR_OF_PLENTY: DevCardType.YEAR_OF_PLENTY,
    ActionType.PLAY_MONOPOLY: DevCardType.MONOPOLY,
}


def available_actions(state: GameState, player_id: str) -> List[ActionType]:
    """Action kinds the table allows this player in the current machine state.

    Setup offers only the piece its sub-phase asks for, and card plays are
    listed only for cards the player holds.
    """
    current = machine_state(state)
    if current == MachineState.GAME_OVER:
        return []
    if current == MachineState.ROBBER_DISCARD:
        acting = player_id in state.turn.must_discard
    else:
        acting = state.current_player.player_id == player_id
    if not acting:
        return []
    if current == MachineState.SETUP:
        step_action = _SETUP_STEP_ACTIONS.get(state.turn.setup_phase)
        return [step_action] if step_action is not None else []

    held = {card.kind for card in state.require_player(player_id).dev_cards}
    return [
        kind
        for (source, kind) in TRANSITIONS
        if source == current and (kind not in _DEV_CARD_PLAYS or _DEV_CARD_PLAYS[kind] in held)
    ]


def validate(state: GameState, player_id: str, action: Action) -> None:
    result = validate_action(state, player_id, action)
    if not result:
        raise RuleViolation(result.reason or "Action not allowed")


def step(state: GameState, player_id: str, action: Action, rng: RandomSource) -> GameState:
    """Validate, execute and score one action, returning the new state."""
    validate(state, player_id, action)

    before = machine_state(state)
    allowed = TRANSITIONS.get((before, action.action_type))
    if allowed is None:
        raise InvariantViolation(
            f"{action.action_type.value} passed validation in state {before.value}"
        )

    new_state = EXECUTORS[action.action_type](state, player_id, action.payload, rng)
    scoring.refresh(new_state)

    after = machine_state(new_state)
    if after not in allowed:
        raise InvariantViolation(
            f"{action.action_type.value} moved {before.value} to unexpected {after.value}"
        )
    logger.debug("%s: %s -> %s", action.action_type.value, before.value, after.value)
    return new_state

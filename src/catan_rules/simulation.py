from __future__ import annotations

import logging
from typing import Dict

from catan_rules.engine.game import Game
from catan_rules.engine.rules import legal_actions
from catan_rules.engine.types import RESOURCE_TYPES, Action, ActionType, GamePhase
from catan_rules.utils.repro import RandomSource

logger = logging.getLogger(__name__)


class RandomDriver:
    """Plays a game by picking uniformly among the legal actions.

    Discards are drawn unit by unit from the discarding player's hand instead of
    using the fixed plan ``legal_actions`` offers.
    """

    def __init__(self, game: Game, rng: RandomSource | None = None):
        self.game = game
        self.rng = rng or RandomSource(game.seed + 1)
        self.actions_taken = 0

    def _random_discard(self, player_id: str) -> Dict[str, int]:
        player = self.game.get_state().require_player(player_id)
        units = [res for res in RESOURCE_TYPES for _ in range(player.resources[res])]
        picked = self.rng.shuffle(units)[: len(units) // 2]
        discard: Dict[str, int] = {}
        for resource in picked:
            discard[resource.value] = discard.get(resource.value, 0) + 1
        return discard

    def step(self) -> Action | None:
        """Take one action; returns None once the game is over."""
        if self.game.is_game_over():
            return None
        if self.game.get_current_phase() == GamePhase.ROBBER_DISCARD:
            player_id = self.game.get_players_who_must_discard()[0]
            action = Action(
                ActionType.DISCARD_RESOURCES, {"resources": self._random_discard(player_id)}
            )
        else:
            state = self.game.get_state()
            player_id = state.current_player.player_id
            choices = legal_actions(state, player_id)
            if not choices:
                raise RuntimeError(f"No legal action for {player_id} in {state.phase.value}")
            action = self.rng.choice(choices)
        self.game.apply_action(player_id, action)
        self.actions_taken += 1
        return action

    def play_setup(self) -> None:
        while self.game.get_current_phase() == GamePhase.SETUP:
            self.step()

    def play_turns(self, turns: int) -> int:
        """Play until ``turns`` main-phase turns have ended or the game is over."""
        self.play_setup()
        ended = 0
        while ended < turns and not self.game.is_game_over():
            action = self.step()
            if action is not None and action.action_type == ActionType.END_TURN:
                ended += 1
        logger.debug("Played %d turns in %d actions", ended, self.actions_taken)
        return ended

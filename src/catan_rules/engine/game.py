from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from catan_rules import game_stats
from catan_rules.utils.repro import RandomSource

from . import controller, rules
from .constants import VICTORY_POINTS_TO_WIN
from .errors import InvariantViolation, RuleViolation
from .events import EventKind, EventLog, GameEvent, Subscriber
from .game_state import GameState, PlayerState, clone_state, initial_game_state
from .scoring import longest_road_length
from .serialization import export_game, resources_to_dict
from .types import RESOURCE_TYPES, Action, ActionType, GamePhase, ValidationResult

logger = logging.getLogger(__name__)

_GAIN_REASONS: Dict[ActionType, str] = {
    ActionType.ROLL_DICE: "dice_roll",
    ActionType.PLACE_SETTLEMENT: "initial_placement",
    ActionType.TRADE_WITH_BANK: "trade",
    ActionType.PLAY_YEAR_OF_PLENTY: "dev_card",
    ActionType.PLAY_MONOPOLY: "dev_card",
    ActionType.PLAY_KNIGHT: "stolen",
    ActionType.MOVE_ROBBER: "stolen",
}

_LOSS_REASONS: Dict[ActionType, str] = {
    ActionType.PLACE_SETTLEMENT: "building",
    ActionType.PLACE_CITY: "building",
    ActionType.PLACE_ROAD: "building",
    ActionType.BUY_DEV_CARD: "building",
    ActionType.TRADE_WITH_BANK: "trade",
    ActionType.PLAY_MONOPOLY: "dev_card",
    ActionType.PLAY_KNIGHT: "robber",
    ActionType.MOVE_ROBBER: "robber",
    ActionType.DISCARD_RESOURCES: "discard",
}

_DEV_CARD_ACTIONS = {
    ActionType.PLAY_KNIGHT: "knight",
    ActionType.PLAY_ROAD_BUILDING: "road_building",
    ActionType.PLAY_YEAR_OF_PLENTY: "year_of_plenty",
    ActionType.PLAY_MONOPOLY: "monopoly",
}


def _resource_delta(before: PlayerState, after: PlayerState) -> Tuple[Dict[str, int], Dict[str, int]]:
    gained: Dict[str, int] = {}
    lost: Dict[str, int] = {}
    for resource in RESOURCE_TYPES:
        diff = after.resources[resource] - before.resources[resource]
        if diff > 0:
            gained[resource.value] = diff
        elif diff < 0:
            lost[resource.value] = -diff
    return gained, lost


class Game:
    """Owns the canonical game state and exposes the command and read API.

    Commands act for the current player (``discard_resources`` names its
    player explicitly) and raise ``RuleViolation`` when the rules reject them;
    a rejected command leaves the state untouched.
    """

    def __init__(
        self,
        player_names: Sequence[str],
        seed: object = None,
        victory_points_to_win: int = VICTORY_POINTS_TO_WIN,
        clock: Callable[[], float] | None = None,
    ):
        self._rng = RandomSource(seed)
        self._state = initial_game_state(
            player_names, victory_points_to_win=victory_points_to_win, rng=self._rng
        )
        self._events = EventLog(clock)
        logger.info(
            "Created game for %d players (seed=%d, target=%d VP)",
            len(player_names),
            self._rng.seed,
            victory_points_to_win,
        )
        self._events.emit(
            EventKind.GAME_STARTED,
            self._state.turn.round,
            player_ids=[player.player_id for player in self._state.players],
            seed=self._rng.seed,
            victory_points_to_win=victory_points_to_win,
        )
        self._events.emit(
            EventKind.TURN_STARTED,
            self._state.turn.round,
            player_id=self._state.current_player.player_id,
        )

    @property
    def seed(self) -> int:
        return self._rng.seed

    # Reads

    def get_state(self) -> GameState:
        return clone_state(self._state)

    def get_current_player(self) -> PlayerState:
        return clone_state(self._state).current_player

    def get_current_phase(self) -> GamePhase:
        return self._state.phase

    def is_game_over(self) -> bool:
        return self._state.phase == GamePhase.GAME_OVER

    def get_winner(self) -> PlayerState | None:
        if self._state.winner is None:
            return None
        return clone_state(self._state).player(self._state.winner)

    def get_history(self) -> Tuple[GameEvent, ...]:
        return self._events.events

    def get_players_who_must_discard(self) -> List[str]:
        if self._state.phase != GamePhase.ROBBER_DISCARD:
            return []
        return list(self._state.turn.must_discard)

    def does_player_need_to_act(self, player_id: str) -> bool:
        if self.is_game_over():
            return False
        if self._state.phase == GamePhase.ROBBER_DISCARD:
            return player_id in self._state.turn.must_discard
        return self._state.current_player.player_id == player_id

    def get_available_actions(self) -> List[ActionType]:
        if self._state.phase == GamePhase.ROBBER_DISCARD:
            return [ActionType.DISCARD_RESOURCES] if self._state.turn.must_discard else []
        return controller.available_actions(self._state, self._state.current_player.player_id)

    def can_perform_action(self, kind: ActionType | str, *args: Any) -> ValidationResult:
        try:
            action_type = ActionType(kind)
        except ValueError:
            return ValidationResult.fail(f"Unknown action {kind}")
        player_id, action = self._build_action(action_type, args)
        return rules.validate_action(self._state, player_id, action)

    def get_statistics(self) -> game_stats.GameStatistics:
        return game_stats.calculate_statistics(self._events.events)

    def get_summary(self) -> Dict[str, Any]:
        state = self._state
        return {
            "round": state.turn.round,
            "phase": state.phase.value,
            "current_player": state.current_player.player_id,
            "winner": state.winner,
            "longest_road": state.longest_road_holder,
            "largest_army": state.largest_army_holder,
            "players": [
                {
                    "id": player.player_id,
                    "name": player.name,
                    "victory_points": player.victory_points,
                    "resources": player.resource_total,
                    "dev_cards": len(player.dev_cards),
                    "settlements": len(player.settlements),
                    "cities": len(player.cities),
                    "roads": len(player.roads),
                    "knights_played": player.knights_played,
                }
                for player in state.players
            ],
        }

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        return self._events.subscribe(callback)

    def export_game(self) -> str:
        return export_game(self.seed, self._events.events, self._state)

    # Commands

    def roll_dice(self) -> Tuple[int, int]:
        self._apply(ActionType.ROLL_DICE, ())
        dice = self._state.turn.dice_roll
        if dice is None:
            raise InvariantViolation("Roll applied without recording the dice")
        return dice

    def place_settlement(self, vertex_id: str) -> None:
        self._apply(ActionType.PLACE_SETTLEMENT, (vertex_id,))

    def place_city(self, vertex_id: str) -> None:
        self._apply(ActionType.PLACE_CITY, (vertex_id,))

    def place_road(self, edge_id: str) -> None:
        self._apply(ActionType.PLACE_ROAD, (edge_id,))

    def buy_dev_card(self) -> None:
        self._apply(ActionType.BUY_DEV_CARD, ())

    def play_knight(self, hex_id: str, target_player_id: str | None = None) -> None:
        self._apply(ActionType.PLAY_KNIGHT, (hex_id, target_player_id))

    def play_road_building(self, edge1_id: str, edge2_id: str | None = None) -> None:
        self._apply(ActionType.PLAY_ROAD_BUILDING, (edge1_id, edge2_id))

    def play_year_of_plenty(self, resource1: str, resource2: str) -> None:
        self._apply(ActionType.PLAY_YEAR_OF_PLENTY, (resource1, resource2))

    def play_monopoly(self, resource: str) -> None:
        self._apply(ActionType.PLAY_MONOPOLY, (resource,))

    def discard_resources(self, player_id: str, resources: Mapping[str, int]) -> None:
        self._apply(ActionType.DISCARD_RESOURCES, (player_id, resources))

    def move_robber(self, hex_id: str, target_player_id: str | None = None) -> None:
        self._apply(ActionType.MOVE_ROBBER, (hex_id, target_player_id))

    def trade_with_bank(self, give: Mapping[str, int], get: Mapping[str, int]) -> None:
        self._apply(ActionType.TRADE_WITH_BANK, (give, get))

    def end_turn(self) -> None:
        self._apply(ActionType.END_TURN, ())

    def apply_action(self, player_id: str, action: Action) -> None:
        """Apply a prebuilt action, as produced by ``rules.legal_actions``."""
        self._commit(player_id, action)

    # Internals

    def _build_action(self, action_type: ActionType, args: Sequence[Any]) -> Tuple[str, Action]:
        current = self._state.current_player.player_id

        def arg(index: int) -> Any:
            return args[index] if index < len(args) else None

        if action_type == ActionType.DISCARD_RESOURCES:
            return arg(0), Action(action_type, {"resources": arg(1)})
        keys: Dict[ActionType, Tuple[str, ...]] = {
            ActionType.PLACE_SETTLEMENT: ("vertex_id",),
            ActionType.PLACE_CITY: ("vertex_id",),
            ActionType.PLACE_ROAD: ("edge_id",),
            ActionType.PLAY_KNIGHT: ("hex_id", "target_player_id"),
            ActionType.PLAY_ROAD_BUILDING: ("edge1_id", "edge2_id"),
            ActionType.PLAY_YEAR_OF_PLENTY: ("resource1", "resource2"),
            ActionType.PLAY_MONOPOLY: ("resource",),
            ActionType.MOVE_ROBBER: ("hex_id", "target_player_id"),
            ActionType.TRADE_WITH_BANK: ("give", "get"),
        }
        names = keys.get(action_type, ())
        return current, Action(action_type, {name: arg(i) for i, name in enumerate(names)})

    def _apply(self, action_type: ActionType, args: Sequence[Any]) -> None:
        player_id, action = self._build_action(action_type, args)
        self._commit(player_id, action)

    def _commit(self, player_id: str, action: Action) -> None:
        before = self._state
        try:
            after = controller.step(before, player_id, action, self._rng)
        except RuleViolation as exc:
            logger.debug("Rejected %s by %s: %s", action.action_type.value, player_id, exc.reason)
            raise
        self._state = after
        logger.debug("Applied %s by %s", action.action_type.value, player_id)
        self._emit_changes(before, after, player_id, action)
        if after.winner is not None and before.winner is None:
            logger.info("Game over: %s wins in round %d", after.winner, after.turn.round)

    def _emit_changes(
        self, before: GameState, after: GameState, player_id: str, action: Action
    ) -> None:
        kind = action.action_type
        payload = action.payload
        turn_number = after.turn.round
        emit = self._events.emit
        was_setup = before.phase == GamePhase.SETUP

        if kind == ActionType.END_TURN:
            emit(EventKind.TURN_ENDED, before.turn.round, player_id=player_id)
        elif kind == ActionType.ROLL_DICE:
            dice = after.turn.dice_roll or (0, 0)
            emit(
                EventKind.DICE_ROLLED,
                turn_number,
                player_id=player_id,
                dice1=dice[0],
                dice2=dice[1],
                total=dice[0] + dice[1],
            )
        elif kind == ActionType.PLACE_SETTLEMENT:
            emit(
                EventKind.SETTLEMENT_BUILT,
                turn_number,
                player_id=player_id,
                vertex_id=payload["vertex_id"],
                is_setup=was_setup,
            )
        elif kind == ActionType.PLACE_CITY:
            emit(EventKind.CITY_BUILT, turn_number, player_id=player_id, vertex_id=payload["vertex_id"])
        elif kind == ActionType.PLACE_ROAD:
            emit(
                EventKind.ROAD_BUILT,
                turn_number,
                player_id=player_id,
                edge_id=payload["edge_id"],
                is_setup=was_setup,
            )
        elif kind == ActionType.BUY_DEV_CARD:
            card = after.require_player(player_id).dev_cards[-1]
            emit(EventKind.DEV_CARD_BOUGHT, turn_number, player_id=player_id, card_type=card.kind.value)
        elif kind == ActionType.TRADE_WITH_BANK:
            emit(
                EventKind.TRADE_WITH_BANK,
                turn_number,
                player_id=player_id,
                gave=resources_to_dict(rules.parse_bundle(payload["give"]) or {}),
                received=resources_to_dict(rules.parse_bundle(payload["get"]) or {}),
            )
        elif kind == ActionType.DISCARD_RESOURCES:
            emit(
                EventKind.RESOURCES_DISCARDED,
                turn_number,
                player_id=player_id,
                resources=resources_to_dict(rules.parse_bundle(payload["resources"]) or {}),
            )
        elif kind in _DEV_CARD_ACTIONS:
            emit(EventKind.DEV_CARD_PLAYED, turn_number, player_id=player_id, card_type=_DEV_CARD_ACTIONS[kind])
            if kind == ActionType.PLAY_ROAD_BUILDING:
                for key in ("edge1_id", "edge2_id"):
                    if payload.get(key) is not None:
                        emit(
                            EventKind.ROAD_BUILT,
                            turn_number,
                            player_id=player_id,
                            edge_id=payload[key],
                            is_setup=False,
                        )

        if kind in (ActionType.PLAY_KNIGHT, ActionType.MOVE_ROBBER):
            self._emit_robber(before, after, player_id, payload, turn_number)

        self._emit_resource_changes(before, after, kind, turn_number)
        self._emit_score_changes(before, after, kind, turn_number)

        if after.winner is not None and before.winner is None:
            emit(
                EventKind.GAME_ENDED,
                turn_number,
                winner_id=after.winner,
                final_scores=[
                    {"player_id": player.player_id, "points": player.victory_points}
                    for player in after.players
                ],
            )
        elif after.phase != GamePhase.GAME_OVER and (
            after.turn.current_player_index != before.turn.current_player_index
            or (was_setup and after.phase == GamePhase.MAIN)
        ):
            emit(EventKind.TURN_STARTED, turn_number, player_id=after.current_player.player_id)

    def _emit_robber(
        self,
        before: GameState,
        after: GameState,
        player_id: str,
        payload: Mapping[str, object],
        turn_number: int,
    ) -> None:
        self._events.emit(
            EventKind.ROBBER_MOVED,
            turn_number,
            player_id=player_id,
            from_tile_id=before.board.robber_tile(),
            to_tile_id=payload["hex_id"],
        )
        victim_id = payload.get("target_player_id")
        if not isinstance(victim_id, str):
            return
        _, lost = _resource_delta(before.require_player(victim_id), after.require_player(victim_id))
        self._events.emit(
            EventKind.PLAYER_STOLE,
            turn_number,
            stealer_id=player_id,
            victim_id=victim_id,
            resource=next(iter(lost), None),
        )

    def _emit_resource_changes(
        self, before: GameState, after: GameState, kind: ActionType, turn_number: int
    ) -> None:
        for old, new in zip(before.players, after.players):
            gained, lost = _resource_delta(old, new)
            if gained:
                self._events.emit(
                    EventKind.RESOURCES_GAINED,
                    turn_number,
                    player_id=new.player_id,
                    resources=gained,
                    reason=_GAIN_REASONS.get(kind, kind.value),
                )
            if lost:
                self._events.emit(
                    EventKind.RESOURCES_LOST,
                    turn_number,
                    player_id=new.player_id,
                    resources=lost,
                    reason=_LOSS_REASONS.get(kind, kind.value),
                )

    def _emit_score_changes(
        self, before: GameState, after: GameState, kind: ActionType, turn_number: int
    ) -> None:
        for old, new in zip(before.players, after.players):
            if old.victory_points != new.victory_points:
                self._events.emit(
                    EventKind.VICTORY_POINTS_CHANGED,
                    turn_number,
                    player_id=new.player_id,
                    old_points=old.victory_points,
                    new_points=new.victory_points,
                    reason=kind.value,
                )
        if after.longest_road_holder != before.longest_road_holder:
            holder = after.longest_road_holder
            self._events.emit(
                EventKind.LONGEST_ROAD_CHANGED,
                turn_number,
                player_id=holder,
                road_length=longest_road_length(after, holder) if holder else 0,
            )
        if after.largest_army_holder != before.largest_army_holder:
            holder = after.largest_army_holder
            self._events.emit(
                EventKind.LARGEST_ARMY_CHANGED,
                turn_number,
                player_id=holder,
                army_size=after.require_player(holder).knights_played if holder else 0,
            )

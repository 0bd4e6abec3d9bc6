from __future__ import annotations

import logging
from typing import Callable, Dict, List, Mapping, Tuple

from catan_rules.utils.repro import RandomSource

from .constants import COSTS, ROBBER_DISCARD_THRESHOLD, ROBBER_NUMBER, ResourceBank
from .errors import InvariantViolation
from .game_state import (
    DevCard,
    GameState,
    PlayerState,
    add_resources,
    clone_state,
    remove_resources,
)
from .rules import parse_bundle, parse_resource
from .types import (
    RESOURCE_TYPES,
    ActionType,
    BuildingType,
    DevCardType,
    GamePhase,
    ResourceType,
    Road,
    SetupPhase,
    Structure,
)

logger = logging.getLogger(__name__)

# Executors assume the matching validator already passed. Each one clones the
# state first and returns the clone; the input is never touched.


def distribute_resources(state: GameState, number: int) -> None:
    for tile in state.board.tiles.values():
        if tile.number_token != number or tile.has_robber or tile.resource is None:
            continue
        for vertex_id in state.board.vertices_for_tile(tile.tile_id):
            structure = state.board.vertices[vertex_id].structure
            if structure is None:
                continue
            amount = 2 if structure.kind == BuildingType.CITY else 1
            state.require_player(structure.player_id).resources[tile.resource] += amount


def roll_dice(state: GameState, player_id: str, dice: Tuple[int, int]) -> GameState:
    new_state = clone_state(state)
    total = dice[0] + dice[1]
    new_state.turn.dice_roll = (dice[0], dice[1])
    new_state.turn.has_rolled = True

    if total == ROBBER_NUMBER:
        must_discard = [
            player.player_id
            for player in new_state.players
            if player.resource_total > ROBBER_DISCARD_THRESHOLD
        ]
        new_state.turn.must_discard = must_discard
        new_state.turn.phase = (
            GamePhase.ROBBER_DISCARD if must_discard else GamePhase.ROBBER_PLACEMENT
        )
    else:
        distribute_resources(new_state, total)
    return new_state


def _advance_setup(state: GameState) -> None:
    turn = state.turn
    last_index = len(state.players) - 1
    if turn.setup_phase == SetupPhase.FIRST_ROAD:
        if turn.current_player_index < last_index:
            turn.current_player_index += 1
            turn.setup_phase = SetupPhase.FIRST_SETTLEMENT
        else:
            turn.setup_round = 2
            turn.setup_phase = SetupPhase.SECOND_SETTLEMENT
    elif turn.setup_phase == SetupPhase.SECOND_ROAD:
        if turn.current_player_index > 0:
            turn.current_player_index -= 1
            turn.setup_phase = SetupPhase.SECOND_SETTLEMENT
        else:
            turn.phase = GamePhase.MAIN
            turn.setup_phase = None
            turn.setup_round = None
            turn.current_player_index = 0
            turn.has_rolled = False
    else:
        raise InvariantViolation(f"Cannot advance setup from {turn.setup_phase}")


def place_settlement(state: GameState, player_id: str, vertex_id: str) -> GameState:
    new_state = clone_state(state)
    player = new_state.require_player(player_id)
    vertex = new_state.board.vertices.get(vertex_id)
    if vertex is None:
        raise InvariantViolation(f"Unknown vertex {vertex_id}")
    vertex.structure = Structure(player_id, BuildingType.SETTLEMENT)
    player.settlements.append(vertex_id)

    if new_state.phase == GamePhase.SETUP:
        if new_state.turn.setup_phase == SetupPhase.SECOND_SETTLEMENT:
            for tile_id in vertex.adjacent_tiles:
                resource = new_state.board.tiles[tile_id].resource
                if resource is not None:
                    player.resources[resource] += 1
            new_state.turn.setup_phase = SetupPhase.SECOND_ROAD
        else:
            new_state.turn.setup_phase = SetupPhase.FIRST_ROAD
    else:
        remove_resources(player.resources, COSTS["settlement"])
    return new_state


def place_city(state: GameState, player_id: str, vertex_id: str) -> GameState:
    new_state = clone_state(state)
    player = new_state.require_player(player_id)
    if vertex_id not in player.settlements:
        raise InvariantViolation(f"{player_id} has no settlement at {vertex_id}")
    remove_resources(player.resources, COSTS["city"])
    player.settlements.remove(vertex_id)
    player.cities.append(vertex_id)
    new_state.board.vertices[vertex_id].structure = Structure(player_id, BuildingType.CITY)
    return new_state


def _lay_road(state: GameState, player: PlayerState, edge_id: str) -> None:
    edge = state.board.edges.get(edge_id)
    if edge is None:
        raise InvariantViolation(f"Unknown edge {edge_id}")
    edge.road = Road(player.player_id)
    player.roads.append(edge_id)


def place_road(state: GameState, player_id: str, edge_id: str) -> GameState:
    new_state = clone_state(state)
    player = new_state.require_player(player_id)
    _lay_road(new_state, player, edge_id)
    if new_state.phase == GamePhase.SETUP:
        _advance_setup(new_state)
    else:
        remove_resources(player.resources, COSTS["road"])
    return new_state


def buy_dev_card(state: GameState, player_id: str) -> GameState:
    new_state = clone_state(state)
    player = new_state.require_player(player_id)
    if not new_state.dev_deck:
        raise InvariantViolation("Development deck is empty")
    remove_resources(player.resources, COSTS["dev_card"])
    kind = new_state.dev_deck.pop(0)
    player.dev_cards.append(DevCard(kind, bought_this_turn=True))
    return new_state


def _consume_dev_card(state: GameState, player: PlayerState, kind: DevCardType) -> None:
    for index, card in enumerate(player.dev_cards):
        if card.kind == kind and not card.bought_this_turn:
            del player.dev_cards[index]
            break
    else:
        raise InvariantViolation(f"{player.player_id} has no playable {kind.value} card")
    player.dev_cards_played_this_turn += 1
    state.turn.can_play_dev_card = False


def _relocate_robber(state: GameState, hex_id: str) -> None:
    if hex_id not in state.board.tiles:
        raise InvariantViolation(f"Unknown hex {hex_id}")
    for tile in state.board.tiles.values():
        tile.has_robber = tile.tile_id == hex_id


def steal_resource(
    state: GameState, thief_id: str, victim_id: str | None, rng: RandomSource
) -> ResourceType | None:
    if victim_id is None:
        return None
    thief = state.require_player(thief_id)
    victim = state.require_player(victim_id)
    units: List[ResourceType] = []
    for resource in RESOURCE_TYPES:
        units.extend([resource] * victim.resources[resource])
    if not units:
        return None
    stolen = rng.choice(units)
    logger.debug("%s stole %s from %s", thief_id, stolen.value, victim_id)
    victim.resources[stolen] -= 1
    thief.resources[stolen] += 1
    return stolen


def move_robber(
    state: GameState,
    player_id: str,
    hex_id: str,
    target_player_id: str | None,
    rng: RandomSource,
) -> GameState:
    new_state = clone_state(state)
    _relocate_robber(new_state, hex_id)
    steal_resource(new_state, player_id, target_player_id, rng)
    new_state.turn.phase = GamePhase.MAIN
    return new_state


def play_knight(
    state: GameState,
    player_id: str,
    hex_id: str,
    target_player_id: str | None,
    rng: RandomSource,
) -> GameState:
    new_state = clone_state(state)
    player = new_state.require_player(player_id)
    _consume_dev_card(new_state, player, DevCardType.KNIGHT)
    player.knights_played += 1
    _relocate_robber(new_state, hex_id)
    steal_resource(new_state, player_id, target_player_id, rng)
    return new_state


def play_road_building(
    state: GameState, player_id: str, edge1_id: str, edge2_id: str | None = None
) -> GameState:
    new_state = clone_state(state)
    player = new_state.require_player(player_id)
    _consume_dev_card(new_state, player, DevCardType.ROAD_BUILDING)
    for edge_id in (edge1_id, edge2_id):
        if edge_id is not None:
            _lay_road(new_state, player, edge_id)
    return new_state


def play_year_of_plenty(
    state: GameState, player_id: str, resource1: ResourceType, resource2: ResourceType
) -> GameState:
    new_state = clone_state(state)
    player = new_state.require_player(player_id)
    _consume_dev_card(new_state, player, DevCardType.YEAR_OF_PLENTY)
    player.resources[resource1] += 1
    player.resources[resource2] += 1
    return new_state


def play_monopoly(state: GameState, player_id: str, resource: ResourceType) -> GameState:
    new_state = clone_state(state)
    player = new_state.require_player(player_id)
    _consume_dev_card(new_state, player, DevCardType.MONOPOLY)
    for other in new_state.players:
        if other.player_id == player_id:
            continue
        player.resources[resource] += other.resources[resource]
        other.resources[resource] = 0
    return new_state


def discard_resources(state: GameState, player_id: str, resources: ResourceBank) -> GameState:
    new_state = clone_state(state)
    player = new_state.require_player(player_id)
    remove_resources(player.resources, resources)
    if player_id in new_state.turn.must_discard:
        new_state.turn.must_discard.remove(player_id)
    if not new_state.turn.must_discard:
        new_state.turn.phase = GamePhase.ROBBER_PLACEMENT
    return new_state


def trade_with_bank(
    state: GameState, player_id: str, give: ResourceBank, get: ResourceBank
) -> GameState:
    new_state = clone_state(state)
    player = new_state.require_player(player_id)
    remove_resources(player.resources, give)
    add_resources(player.resources, get)
    return new_state


def end_turn(state: GameState, player_id: str) -> GameState:
    new_state = clone_state(state)
    for player in new_state.players:
        player.dev_cards_played_this_turn = 0
        for card in player.dev_cards:
            card.bought_this_turn = False

    turn = new_state.turn
    turn.has_rolled = False
    turn.dice_roll = None
    turn.can_play_dev_card = True
    turn.current_player_index = (turn.current_player_index + 1) % len(new_state.players)
    if turn.current_player_index == 0:
        turn.round += 1
    return new_state


def _resource_arg(payload: Mapping[str, object], key: str) -> ResourceType:
    resource = parse_resource(payload.get(key))
    if resource is None:
        raise InvariantViolation(f"Bad resource in payload: {payload.get(key)!r}")
    return resource


def _bundle_arg(payload: Mapping[str, object], key: str) -> ResourceBank:
    bundle = parse_bundle(payload.get(key))
    if bundle is None:
        raise InvariantViolation(f"Bad resource bundle in payload: {payload.get(key)!r}")
    return bundle


def _roll_dice(state, player_id, payload, rng):
    dice = payload.get("dice")
    if dice is None:
        dice = rng.roll_dice()
    return roll_dice(state, player_id, tuple(dice))


_Executor = Callable[[GameState, str, Mapping[str, object], RandomSource], GameState]

EXECUTORS: Dict[ActionType, _Executor] = {
    ActionType.ROLL_DICE: _roll_dice,
    ActionType.PLACE_SETTLEMENT: lambda s, pid, p, rng: place_settlement(s, pid, p["vertex_id"]),
    ActionType.PLACE_CITY: lambda s, pid, p, rng: place_city(s, pid, p["vertex_id"]),
    ActionType.PLACE_ROAD: lambda s, pid, p, rng: place_road(s, pid, p["edge_id"]),
    ActionType.BUY_DEV_CARD: lambda s, pid, p, rng: buy_dev_card(s, pid),
    ActionType.PLAY_KNIGHT: lambda s, pid, p, rng: play_knight(
        s, pid, p["hex_id"], p.get("target_player_id"), rng
    ),
    ActionType.PLAY_ROAD_BUILDING: lambda s, pid, p, rng: play_road_building(
        s, pid, p["edge1_id"], p.get("edge2_id")
    ),
    ActionType.PLAY_YEAR_OF_PLENTY: lambda s, pid, p, rng: play_year_of_plenty(
        s, pid, _resource_arg(p, "resource1"), _resource_arg(p, "resource2")
    ),
    ActionType.PLAY_MONOPOLY: lambda s, pid, p, rng: play_monopoly(s, pid, _resource_arg(p, "resource")),
    ActionType.DISCARD_RESOURCES: lambda s, pid, p, rng: discard_resources(
        s, pid, _bundle_arg(p, "resources")
    ),
    ActionType.MOVE_ROBBER: lambda s, pid, p, rng: move_robber(
        s, pid, p["hex_id"], p.get("target_player_id"), rng
    ),
    ActionType.TRADE_WITH_BANK: lambda s, pid, p, rng: trade_with_bank(
        s, pid, _bundle_arg(p, "give"), _bundle_arg(p, "get")
    ),
    ActionType.END_TURN: lambda s, pid, p, rng: end_turn(s, pid),
}

_missing = set(ActionType) - set(EXECUTORS)
if _missing:
    raise RuntimeError(f"No executor for {sorted(kind.value for kind in _missing)}")

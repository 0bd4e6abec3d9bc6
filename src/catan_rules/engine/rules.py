from __future__ import annotations

from itertools import combinations_with_replacement
from typing import Callable, Dict, List, Mapping

from .constants import (
    COSTS,
    DEFAULT_TRADE_RATIO,
    MAX_CITIES,
    MAX_ROADS,
    MAX_SETTLEMENTS,
    ResourceBank,
)
from .game_state import GameState, PlayerState, has_resources, total_resources
from .types import (
    RESOURCE_TYPES,
    Action,
    ActionType,
    BuildingType,
    DevCardType,
    Edge,
    GamePhase,
    PortType,
    ResourceType,
    SetupPhase,
    ValidationResult,
)

_ROBBER_PHASES = (GamePhase.ROBBER_DISCARD, GamePhase.ROBBER_PLACEMENT)
_SETTLEMENT_SETUP_PHASES = (SetupPhase.FIRST_SETTLEMENT, SetupPhase.SECOND_SETTLEMENT)
_ROAD_SETUP_PHASES = (SetupPhase.FIRST_ROAD, SetupPhase.SECOND_ROAD)


def parse_resource(value: object) -> ResourceType | None:
    if isinstance(value, ResourceType):
        return value
    if isinstance(value, str):
        try:
            return ResourceType(value)
        except ValueError:
            return None
    return None


def parse_bundle(bundle: object) -> ResourceBank | None:
    """Normalise a {resource: count} mapping; None if any key or count is bad."""
    if not isinstance(bundle, Mapping):
        return None
    parsed: ResourceBank = {}
    for key, amount in bundle.items():
        resource = parse_resource(key)
        if resource is None or isinstance(amount, bool) or not isinstance(amount, int):
            return None
        if amount < 0:
            return None
        parsed[resource] = parsed.get(resource, 0) + amount
    return parsed


def _is_active(state: GameState, player_id: str) -> bool:
    return state.current_player.player_id == player_id


def _main_phase_check(state: GameState, player_id: str) -> ValidationResult:
    if not _is_active(state, player_id):
        return ValidationResult.fail("Not your turn")
    if state.phase in _ROBBER_PHASES:
        return ValidationResult.fail("Must resolve the robber first")
    if state.phase != GamePhase.MAIN:
        return ValidationResult.fail("Not in main phase")
    if not state.turn.has_rolled:
        return ValidationResult.fail("Must roll dice first")
    return ValidationResult.ok()


def _settlement_distance_ok(state: GameState, vertex_id: str) -> bool:
    for neighbor in state.board.vertices_adjacent_to(vertex_id):
        if state.board.vertices[neighbor].structure is not None:
            return False
    return True


def _player_has_road_touching(state: GameState, player: PlayerState, vertex_id: str) -> bool:
    for edge_id in state.board.edges_for_vertex(vertex_id):
        road = state.board.edges[edge_id].road
        if road is not None and road.player_id == player.player_id:
            return True
    return False


def _edge_touches_player(state: GameState, player: PlayerState, edge: Edge) -> bool:
    for vertex_id in edge.vertices:
        structure = state.board.vertices[vertex_id].structure
        if structure is not None:
            if structure.player_id == player.player_id:
                return True
            # An opponent's building cuts the network at this corner.
            continue
        for other_id in state.board.edges_for_vertex(vertex_id):
            if other_id == edge.edge_id:
                continue
            road = state.board.edges[other_id].road
            if road is not None and road.player_id == player.player_id:
                return True
    return False


def best_trade_ratio(state: GameState, player_id: str, resource: ResourceType) -> int:
    player = state.player(player_id)
    if player is None:
        return DEFAULT_TRADE_RATIO
    ratio = DEFAULT_TRADE_RATIO
    for vertex_id in player.settlements + player.cities:
        port = state.board.vertices[vertex_id].port
        if port is None:
            continue
        if port.kind == PortType.GENERIC or port.kind.value == resource.value:
            ratio = min(ratio, port.ratio)
    return ratio


def _dice_ok(dice: object) -> bool:
    if not isinstance(dice, (tuple, list)) or len(dice) != 2:
        return False
    return all(
        isinstance(die, int) and not isinstance(die, bool) and 1 <= die <= 6 for die in dice
    )


def can_roll_dice(state: GameState, player_id: str, dice: object = None) -> ValidationResult:
    """Dice may be preset (replays, tests); otherwise the game rolls them."""
    if state.player(player_id) is None:
        return ValidationResult.fail("Player not found")
    if state.phase == GamePhase.GAME_OVER:
        return ValidationResult.fail("Game is over")
    if state.phase == GamePhase.SETUP:
        return ValidationResult.fail("Cannot roll dice during setup")
    if not _is_active(state, player_id):
        return ValidationResult.fail("Not your turn")
    if state.phase in _ROBBER_PHASES:
        return ValidationResult.fail("Must resolve the robber first")
    if state.turn.has_rolled:
        return ValidationResult.fail("Dice already rolled this turn")
    if dice is not None and not _dice_ok(dice):
        return ValidationResult.fail("Dice must be two values from 1 to 6")
    return ValidationResult.ok()


def can_place_settlement(state: GameState, player_id: str, vertex_id: str) -> ValidationResult:
    player = state.player(player_id)
    if player is None:
        return ValidationResult.fail("Player not found")
    if state.phase == GamePhase.GAME_OVER:
        return ValidationResult.fail("Game is over")
    vertex = state.board.vertices.get(vertex_id)
    if vertex is None:
        return ValidationResult.fail("Invalid vertex")
    if vertex.structure is not None:
        return ValidationResult.fail("Vertex is already occupied")
    if not _settlement_distance_ok(state, vertex_id):
        return ValidationResult.fail("Too close to another settlement (distance rule)")

    if state.phase == GamePhase.SETUP:
        if not _is_active(state, player_id):
            return ValidationResult.fail("Not your turn")
        if state.turn.setup_phase not in _SETTLEMENT_SETUP_PHASES:
            return ValidationResult.fail("Must place a road first")
        if len(player.settlements) >= (state.turn.setup_round or 0):
            return ValidationResult.fail("Already placed a settlement this setup round")
        return ValidationResult.ok()

    check = _main_phase_check(state, player_id)
    if not check:
        return check
    if not _player_has_road_touching(state, player, vertex_id):
        return ValidationResult.fail("Settlement must connect to your road")
    if not has_resources(player.resources, COSTS["settlement"]):
        return ValidationResult.fail("Insufficient resources")
    if len(player.settlements) >= MAX_SETTLEMENTS:
        return ValidationResult.fail("Maximum settlements reached")
    return ValidationResult.ok()


def can_place_city(state: GameState, player_id: str, vertex_id: str) -> ValidationResult:
    player = state.player(player_id)
    if player is None:
        return ValidationResult.fail("Player not found")
    if state.phase == GamePhase.GAME_OVER:
        return ValidationResult.fail("Game is over")
    if state.phase == GamePhase.SETUP:
        return ValidationResult.fail("Cannot build cities during setup")
    check = _main_phase_check(state, player_id)
    if not check:
        return check
    vertex = state.board.vertices.get(vertex_id)
    if vertex is None:
        return ValidationResult.fail("Invalid vertex")
    structure = vertex.structure
    if structure is None or structure.kind != BuildingType.SETTLEMENT:
        return ValidationResult.fail("Must upgrade an existing settlement")
    if structure.player_id != player_id:
        return ValidationResult.fail("You don't own this settlement")
    if not has_resources(player.resources, COSTS["city"]):
        return ValidationResult.fail("Insufficient resources")
    if len(player.cities) >= MAX_CITIES:
        return ValidationResult.fail("Maximum cities reached")
    return ValidationResult.ok()


def can_place_road(state: GameState, player_id: str, edge_id: str) -> ValidationResult:
    player = state.player(player_id)
    if player is None:
        return ValidationResult.fail("Player not found")
    if state.phase == GamePhase.GAME_OVER:
        return ValidationResult.fail("Game is over")
    edge = state.board.edges.get(edge_id)
    if edge is None:
        return ValidationResult.fail("Invalid edge")
    if edge.road is not None:
        return ValidationResult.fail("Edge already has a road")

    if state.phase == GamePhase.SETUP:
        if not _is_active(state, player_id):
            return ValidationResult.fail("Not your turn")
        if state.turn.setup_phase not in _ROAD_SETUP_PHASES:
            return ValidationResult.fail("Must place a settlement first")
        if len(player.roads) >= (state.turn.setup_round or 0):
            return ValidationResult.fail("Already placed a road this setup round")
        last_settlement = player.settlements[-1] if player.settlements else None
        if last_settlement not in edge.vertices:
            return ValidationResult.fail("Road must connect to your last settlement")
        return ValidationResult.ok()

    check = _main_phase_check(state, player_id)
    if not check:
        return check
    if not _edge_touches_player(state, player, edge):
        return ValidationResult.fail("Road must connect to your network")
    if not has_resources(player.resources, COSTS["road"]):
        return ValidationResult.fail("Insufficient resources")
    if len(player.roads) >= MAX_ROADS:
        return ValidationResult.fail("Maximum roads reached")
    return ValidationResult.ok()


def can_buy_dev_card(state: GameState, player_id: str) -> ValidationResult:
    player = state.player(player_id)
    if player is None:
        return ValidationResult.fail("Player not found")
    if state.phase == GamePhase.GAME_OVER:
        return ValidationResult.fail("Game is over")
    if state.phase == GamePhase.SETUP:
        return ValidationResult.fail("Cannot buy development cards during setup")
    check = _main_phase_check(state, player_id)
    if not check:
        return check
    if not state.dev_deck:
        return ValidationResult.fail("No development cards left")
    if not has_resources(player.resources, COSTS["dev_card"]):
        return ValidationResult.fail("Insufficient resources")
    return ValidationResult.ok()


def can_play_dev_card(state: GameState, player_id: str, kind: DevCardType) -> ValidationResult:
    player = state.player(player_id)
    if player is None:
        return ValidationResult.fail("Player not found")
    if state.phase == GamePhase.GAME_OVER:
        return ValidationResult.fail("Game is over")
    if state.phase == GamePhase.SETUP:
        return ValidationResult.fail("Cannot play development cards during setup")
    check = _main_phase_check(state, player_id)
    if not check:
        return check
    held = [card for card in player.dev_cards if card.kind == kind]
    if not held:
        return ValidationResult.fail(f"You don't have a {kind.value} card")
    if all(card.bought_this_turn for card in held):
        return ValidationResult.fail("Cannot play a development card bought this turn")
    if kind != DevCardType.VICTORY_POINT and (
        player.dev_cards_played_this_turn > 0 or not state.turn.can_play_dev_card
    ):
        return ValidationResult.fail("Already played a development card this turn")
    return ValidationResult.ok()


def _robber_target_check(
    state: GameState, player_id: str, hex_id: str, target_player_id: str | None
) -> ValidationResult:
    tile = state.board.tiles.get(hex_id)
    if tile is None:
        return ValidationResult.fail("Invalid hex")
    if tile.has_robber:
        return ValidationResult.fail("Robber is already on this hex")
    if target_player_id is None:
        return ValidationResult.ok()
    target = state.player(target_player_id)
    if target is None:
        return ValidationResult.fail("Target player not found")
    if target_player_id == player_id:
        return ValidationResult.fail("Cannot steal from yourself")
    on_hex = any(
        state.board.vertices[vid].structure is not None
        and state.board.vertices[vid].structure.player_id == target_player_id
        for vid in state.board.vertices_for_tile(hex_id)
    )
    if not on_hex:
        return ValidationResult.fail("Target player has no building on this hex")
    if target.resource_total == 0:
        return ValidationResult.fail("Target player has no resources")
    return ValidationResult.ok()


def can_play_knight(
    state: GameState, player_id: str, hex_id: str, target_player_id: str | None = None
) -> ValidationResult:
    check = can_play_dev_card(state, player_id, DevCardType.KNIGHT)
    if not check:
        return check
    return _robber_target_check(state, player_id, hex_id, target_player_id)


def can_play_road_building(
    state: GameState, player_id: str, edge1_id: str, edge2_id: str | None = None
) -> ValidationResult:
    check = can_play_dev_card(state, player_id, DevCardType.ROAD_BUILDING)
    if not check:
        return check
    edge_ids = [edge1_id] if edge2_id is None else [edge1_id, edge2_id]
    for edge_id in edge_ids:
        edge = state.board.edges.get(edge_id)
        if edge is None:
            return ValidationResult.fail("Invalid edge")
        if edge.road is not None:
            return ValidationResult.fail("Edge already has a road")
    if edge2_id is not None and edge1_id == edge2_id:
        return ValidationResult.fail("Road Building needs two different edges")
    player = state.require_player(player_id)
    if len(player.roads) + len(edge_ids) > MAX_ROADS:
        return ValidationResult.fail("Maximum roads reached")
    return ValidationResult.ok()


def can_play_year_of_plenty(
    state: GameState, player_id: str, resource1: object, resource2: object
) -> ValidationResult:
    check = can_play_dev_card(state, player_id, DevCardType.YEAR_OF_PLENTY)
    if not check:
        return check
    if parse_resource(resource1) is None or parse_resource(resource2) is None:
        return ValidationResult.fail("Invalid resource")
    return ValidationResult.ok()


def can_play_monopoly(state: GameState, player_id: str, resource: object) -> ValidationResult:
    check = can_play_dev_card(state, player_id, DevCardType.MONOPOLY)
    if not check:
        return check
    if parse_resource(resource) is None:
        return ValidationResult.fail("Invalid resource")
    return ValidationResult.ok()


def can_discard_resources(state: GameState, player_id: str, resources: object) -> ValidationResult:
    player = state.player(player_id)
    if player is None:
        return ValidationResult.fail("Player not found")
    if state.phase != GamePhase.ROBBER_DISCARD:
        return ValidationResult.fail("Not in discard phase")
    if player_id not in state.turn.must_discard:
        return ValidationResult.fail("You do not need to discard")
    bundle = parse_bundle(resources)
    if bundle is None:
        return ValidationResult.fail("Invalid resources")
    required = player.resource_total // 2
    if total_resources(bundle) != required:
        return ValidationResult.fail(f"Must discard exactly {required} resources")
    if not has_resources(player.resources, bundle):
        return ValidationResult.fail("Trying to discard resources you don't have")
    return ValidationResult.ok()


def can_move_robber(
    state: GameState, player_id: str, hex_id: str, target_player_id: str | None = None
) -> ValidationResult:
    if state.player(player_id) is None:
        return ValidationResult.fail("Player not found")
    if state.phase != GamePhase.ROBBER_PLACEMENT:
        return ValidationResult.fail("Not in robber placement phase")
    if not _is_active(state, player_id):
        return ValidationResult.fail("Not your turn")
    return _robber_target_check(state, player_id, hex_id, target_player_id)


def can_trade_with_bank(
    state: GameState, player_id: str, give: object, get: object
) -> ValidationResult:
    player = state.player(player_id)
    if player is None:
        return ValidationResult.fail("Player not found")
    if state.phase == GamePhase.GAME_OVER:
        return ValidationResult.fail("Game is over")
    if state.phase == GamePhase.SETUP:
        return ValidationResult.fail("Cannot trade during setup")
    check = _main_phase_check(state, player_id)
    if not check:
        return check

    give_bundle = parse_bundle(give)
    get_bundle = parse_bundle(get)
    if give_bundle is None or get_bundle is None:
        return ValidationResult.fail("Invalid resources")
    give_entries = [(res, n) for res, n in give_bundle.items() if n > 0]
    get_entries = [(res, n) for res, n in get_bundle.items() if n > 0]
    if len(give_entries) != 1 or len(get_entries) != 1:
        return ValidationResult.fail("Bank trades must give one resource type for one type")
    give_resource, give_count = give_entries[0]
    get_resource, get_count = get_entries[0]
    if give_resource == get_resource:
        return ValidationResult.fail("Cannot trade a resource for itself")
    if get_count != 1:
        return ValidationResult.fail("Bank trades give exactly 1 resource")
    ratio = best_trade_ratio(state, player_id, give_resource)
    if give_count != ratio:
        return ValidationResult.fail(f"Invalid trade ratio. You need {ratio}:1 for this resource")
    if player.resources[give_resource] < give_count:
        return ValidationResult.fail("Insufficient resources to trade")
    return ValidationResult.ok()


def can_end_turn(state: GameState, player_id: str) -> ValidationResult:
    if state.player(player_id) is None:
        return ValidationResult.fail("Player not found")
    if state.phase == GamePhase.GAME_OVER:
        return ValidationResult.fail("Game is over")
    if not _is_active(state, player_id):
        return ValidationResult.fail("Not your turn")
    if state.phase == GamePhase.SETUP:
        return ValidationResult.fail("Cannot manually end turn during setup")
    if state.phase in _ROBBER_PHASES:
        return ValidationResult.fail("Must resolve the robber first")
    if not state.turn.has_rolled:
        return ValidationResult.fail("Must roll dice before ending turn")
    return ValidationResult.ok()


_ID_KEYS = frozenset({"vertex_id", "edge_id", "edge1_id", "edge2_id", "hex_id", "target_player_id"})

_Validator = Callable[[GameState, str, Mapping[str, object]], ValidationResult]

VALIDATORS: Dict[ActionType, _Validator] = {
    ActionType.ROLL_DICE: lambda s, pid, p: can_roll_dice(s, pid, p.get("dice")),
    ActionType.PLACE_SETTLEMENT: lambda s, pid, p: can_place_settlement(s, pid, p.get("vertex_id")),
    ActionType.PLACE_CITY: lambda s, pid, p: can_place_city(s, pid, p.get("vertex_id")),
    ActionType.PLACE_ROAD: lambda s, pid, p: can_place_road(s, pid, p.get("edge_id")),
    ActionType.BUY_DEV_CARD: lambda s, pid, p: can_buy_dev_card(s, pid),
    ActionType.PLAY_KNIGHT: lambda s, pid, p: can_play_knight(
        s, pid, p.get("hex_id"), p.get("target_player_id")
    ),
    ActionType.PLAY_ROAD_BUILDING: lambda s, pid, p: can_play_road_building(
        s, pid, p.get("edge1_id"), p.get("edge2_id")
    ),
    ActionType.PLAY_YEAR_OF_PLENTY: lambda s, pid, p: can_play_year_of_plenty(
        s, pid, p.get("resource1"), p.get("resource2")
    ),
    ActionType.PLAY_MONOPOLY: lambda s, pid, p: can_play_monopoly(s, pid, p.get("resource")),
    ActionType.DISCARD_RESOURCES: lambda s, pid, p: can_discard_resources(s, pid, p.get("resources")),
    ActionType.MOVE_ROBBER: lambda s, pid, p: can_move_robber(
        s, pid, p.get("hex_id"), p.get("target_player_id")
    ),
    ActionType.TRADE_WITH_BANK: lambda s, pid, p: can_trade_with_bank(
        s, pid, p.get("give"), p.get("get")
    ),
    ActionType.END_TURN: lambda s, pid, p: can_end_turn(s, pid),
}

_missing = set(ActionType) - set(VALIDATORS)
if _missing:
    raise RuntimeError(f"No validator for {sorted(kind.value for kind in _missing)}")


def _coerce_id(key: str, value: object) -> object:
    # Board and player ids are strings; anything else can only be an unknown id.
    if key in _ID_KEYS and value is not None and not isinstance(value, str):
        return str(value)
    return value


def validate_action(state: GameState, player_id: str, action: Action) -> ValidationResult:
    validator = VALIDATORS.get(action.action_type)
    if validator is None:
        return ValidationResult.fail(f"Unknown action {action.action_type}")
    payload = {key: _coerce_id(key, value) for key, value in action.payload.items()}
    return validator(state, player_id, payload)


def default_discard(resources: Mapping[ResourceType, int], count: int) -> ResourceBank:
    """Discard from the largest piles first."""
    remaining = dict(resources)
    discard: ResourceBank = {}
    for _ in range(count):
        resource = max(RESOURCE_TYPES, key=lambda res: remaining.get(res, 0))
        remaining[resource] -= 1
        discard[resource] = discard.get(resource, 0) + 1
    return discard


def _robber_actions(
    state: GameState, player_id: str, action_type: ActionType, validator: Callable[..., ValidationResult]
) -> List[Action]:
    actions: List[Action] = []
    for hex_id in state.board.tiles:
        if state.board.tiles[hex_id].has_robber:
            continue
        targets = sorted(
            {
                state.board.vertices[vid].structure.player_id
                for vid in state.board.vertices_for_tile(hex_id)
                if state.board.vertices[vid].structure is not None
            }
        )
        candidates: List[str | None] = [
            target for target in targets if validator(state, player_id, hex_id, target)
        ]
        if not candidates and validator(state, player_id, hex_id, None):
            candidates = [None]
        for target in candidates:
            actions.append(Action(action_type, {"hex_id": hex_id, "target_player_id": target}))
    return actions


def _setup_actions(state: GameState, player: PlayerState) -> List[Action]:
    actions: List[Action] = []
    if state.turn.setup_phase in _SETTLEMENT_SETUP_PHASES:
        for vertex_id in state.board.vertices:
            if can_place_settlement(state, player.player_id, vertex_id):
                actions.append(Action(ActionType.PLACE_SETTLEMENT, {"vertex_id": vertex_id}))
    elif player.settlements:
        for edge_id in state.board.edges_for_vertex(player.settlements[-1]):
            if can_place_road(state, player.player_id, edge_id):
                actions.append(Action(ActionType.PLACE_ROAD, {"edge_id": edge_id}))
    return actions


def _main_actions(state: GameState, player: PlayerState) -> List[Action]:
    pid = player.player_id
    if can_roll_dice(state, pid):
        return [Action(ActionType.ROLL_DICE)]

    actions: List[Action] = []
    if can_end_turn(state, pid):
        actions.append(Action(ActionType.END_TURN))

    if has_resources(player.resources, COSTS["road"]):
        for edge_id in state.board.edges:
            if can_place_road(state, pid, edge_id):
                actions.append(Action(ActionType.PLACE_ROAD, {"edge_id": edge_id}))
    if has_resources(player.resources, COSTS["settlement"]):
        for vertex_id in state.board.vertices:
            if can_place_settlement(state, pid, vertex_id):
                actions.append(Action(ActionType.PLACE_SETTLEMENT, {"vertex_id": vertex_id}))
    for vertex_id in player.settlements:
        if can_place_city(state, pid, vertex_id):
            actions.append(Action(ActionType.PLACE_CITY, {"vertex_id": vertex_id}))
    if can_buy_dev_card(state, pid):
        actions.append(Action(ActionType.BUY_DEV_CARD))

    for give in RESOURCE_TYPES:
        ratio = best_trade_ratio(state, pid, give)
        if player.resources[give] < ratio:
            continue
        for get in RESOURCE_TYPES:
            if get == give:
                continue
            actions.append(
                Action(
                    ActionType.TRADE_WITH_BANK,
                    {"give": {give.value: ratio}, "get": {get.value: 1}},
                )
            )

    if can_play_dev_card(state, pid, DevCardType.KNIGHT):
        actions.extend(_robber_actions(state, pid, ActionType.PLAY_KNIGHT, can_play_knight))
    if can_play_dev_card(state, pid, DevCardType.ROAD_BUILDING):
        for edge_id in state.board.edges:
            if can_play_road_building(state, pid, edge_id):
                actions.append(
                    Action(ActionType.PLAY_ROAD_BUILDING, {"edge1_id": edge_id, "edge2_id": None})
                )
    if can_play_dev_card(state, pid, DevCardType.YEAR_OF_PLENTY):
        for first, second in combinations_with_replacement(RESOURCE_TYPES, 2):
            actions.append(
                Action(
                    ActionType.PLAY_YEAR_OF_PLENTY,
                    {"resource1": first.value, "resource2": second.value},
                )
            )
    if can_play_dev_card(state, pid, DevCardType.MONOPOLY):
        for resource in RESOURCE_TYPES:
            actions.append(Action(ActionType.PLAY_MONOPOLY, {"resource": resource.value}))
    return actions


def legal_actions(state: GameState, player_id: str) -> List[Action]:
    player = state.player(player_id)
    if player is None or state.phase == GamePhase.GAME_OVER:
        return []

    if state.phase == GamePhase.ROBBER_DISCARD:
        if player_id not in state.turn.must_discard:
            return []
        plan = default_discard(player.resources, player.resource_total // 2)
        return [
            Action(
                ActionType.DISCARD_RESOURCES,
                {"resources": {res.value: n for res, n in plan.items()}},
            )
        ]

    if not _is_active(state, player_id):
        return []
    if state.phase == GamePhase.SETUP:
        return _setup_actions(state, player)
    if state.phase == GamePhase.ROBBER_PLACEMENT:
        return _robber_actions(state, player_id, ActionType.MOVE_ROBBER, can_move_robber)
    return _main_actions(state, player)


def legal_action_types(state: GameState, player_id: str) -> List[ActionType]:
    seen: Dict[ActionType, None] = {}
    for action in legal_actions(state, player_id):
        seen.setdefault(action.action_type, None)
    return list(seen)


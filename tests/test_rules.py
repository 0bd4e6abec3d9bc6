from catan_rules.engine import rules
from catan_rules.engine.types import Action, ActionType, GamePhase, PortType, ResourceType, SetupPhase

from helpers import give, put_city, put_road, put_settlement


def _first_vertex(state):
    return sorted(state.board.vertices)[0]


def test_setup_settlement_allowed_for_active_player_only(state):
    vertex_id = _first_vertex(state)
    assert rules.can_place_settlement(state, "player_0", vertex_id)
    result = rules.can_place_settlement(state, "player_1", vertex_id)
    assert not result
    assert result.reason == "Not your turn"


def test_setup_road_needs_settlement_first(state):
    vertex_id = _first_vertex(state)
    edge_id = state.board.edges_for_vertex(vertex_id)[0]
    result = rules.can_place_road(state, "player_0", edge_id)
    assert result.reason == "Must place a settlement first"


def test_setup_road_must_touch_last_settlement(state):
    vertex_id = _first_vertex(state)
    put_settlement(state, "player_0", vertex_id)
    state.turn.setup_phase = SetupPhase.FIRST_ROAD
    touching = state.board.edges_for_vertex(vertex_id)[0]
    far = next(
        edge.edge_id for edge in state.board.edges.values() if vertex_id not in edge.vertices
    )
    assert rules.can_place_road(state, "player_0", touching)
    assert rules.can_place_road(state, "player_0", far).reason == (
        "Road must connect to your last settlement"
    )


def test_distance_rule_and_occupancy(state):
    vertex_id = _first_vertex(state)
    put_settlement(state, "player_1", vertex_id)
    neighbor = state.board.vertices_adjacent_to(vertex_id)[0]
    assert rules.can_place_settlement(state, "player_0", vertex_id).reason == (
        "Vertex is already occupied"
    )
    assert rules.can_place_settlement(state, "player_0", neighbor).reason == (
        "Too close to another settlement (distance rule)"
    )


def test_unknown_ids_give_reasons(main_state):
    assert rules.can_place_settlement(main_state, "player_0", "v_nope").reason == "Invalid vertex"
    assert rules.can_place_road(main_state, "player_0", "e_nope").reason == "Invalid edge"
    assert rules.can_move_robber(main_state, "player_0", "9_9").reason == (
        "Not in robber placement phase"
    )
    assert rules.can_end_turn(main_state, "player_9").reason == "Player not found"
    main_state.turn.phase = GamePhase.ROBBER_PLACEMENT
    assert rules.can_move_robber(main_state, "player_0", "9_9").reason == "Invalid hex"


def test_must_roll_before_building(main_state):
    main_state.turn.has_rolled = False
    vertex_id = _first_vertex(main_state)
    put_settlement(main_state, "player_0", vertex_id)
    give(main_state, "player_0", wheat=2, ore=3)
    assert rules.can_place_city(main_state, "player_0", vertex_id).reason == "Must roll dice first"
    assert rules.can_end_turn(main_state, "player_0").reason == "Must roll dice before ending turn"
    assert rules.can_roll_dice(main_state, "player_0")


def test_preset_dice_must_be_real_dice(main_state):
    main_state.turn.has_rolled = False
    assert rules.can_roll_dice(main_state, "player_0", (1, 6))
    for dice in [(0, 0), (6,), (3, 7), (2, 3, 4), ("2", 3), (True, 2), "34"]:
        result = rules.can_roll_dice(main_state, "player_0", dice)
        assert result.reason == "Dice must be two values from 1 to 6"


def test_main_settlement_needs_own_road_and_resources(main_state):
    vertices, edges = _two_step(main_state)
    put_settlement(main_state, "player_0", vertices[0])
    put_road(main_state, "player_0", edges[0])
    put_road(main_state, "player_0", edges[1])
    target = vertices[2]

    assert rules.can_place_settlement(main_state, "player_0", target).reason == (
        "Insufficient resources"
    )
    give(main_state, "player_0", wood=1, brick=1, sheep=1, wheat=1)
    assert rules.can_place_settlement(main_state, "player_0", target)
    assert rules.can_place_settlement(main_state, "player_1", target).reason == "Not your turn"


def _two_step(state):
    start = _first_vertex(state)
    middle = state.board.vertices_adjacent_to(start)[0]
    end = next(v for v in state.board.vertices_adjacent_to(middle) if v != start)
    edges = [state.board.edge_between(start, middle), state.board.edge_between(middle, end)]
    return [start, middle, end], edges


def test_road_connectivity_blocked_by_opponent_settlement(main_state):
    vertices, edges = _two_step(main_state)
    put_road(main_state, "player_0", edges[0])
    give(main_state, "player_0", wood=2, brick=2)
    assert rules.can_place_road(main_state, "player_0", edges[1])

    put_settlement(main_state, "player_1", vertices[1])
    assert rules.can_place_road(main_state, "player_0", edges[1]).reason == (
        "Road must connect to your network"
    )


def test_city_requires_own_settlement(main_state):
    vertex_id = _first_vertex(main_state)
    give(main_state, "player_0", wheat=2, ore=3)
    assert rules.can_place_city(main_state, "player_0", vertex_id).reason == (
        "Must upgrade an existing settlement"
    )
    put_settlement(main_state, "player_1", vertex_id)
    assert rules.can_place_city(main_state, "player_0", vertex_id).reason == (
        "You don't own this settlement"
    )


def test_city_limit(main_state):
    corners = sorted(main_state.board.vertices)
    chosen = []
    for vertex_id in corners:
        if all(v not in main_state.board.vertices_adjacent_to(vertex_id) for v in chosen):
            chosen.append(vertex_id)
        if len(chosen) == 5:
            break
    for vertex_id in chosen[:4]:
        put_city(main_state, "player_0", vertex_id)
    put_settlement(main_state, "player_0", chosen[4])
    give(main_state, "player_0", wheat=2, ore=3)
    assert rules.can_place_city(main_state, "player_0", chosen[4]).reason == "Maximum cities reached"


def test_bank_trade_default_ratio(main_state):
    give(main_state, "player_0", wood=4)
    assert rules.can_trade_with_bank(main_state, "player_0", {"wood": 4}, {"ore": 1})
    assert not rules.can_trade_with_bank(main_state, "player_0", {"wood": 3}, {"ore": 1})
    assert rules.can_trade_with_bank(main_state, "player_0", {"wood": 4}, {"wood": 1}).reason == (
        "Cannot trade a resource for itself"
    )
    assert not rules.can_trade_with_bank(main_state, "player_0", {"wood": 4}, {"ore": 2})
    assert not rules.can_trade_with_bank(
        main_state, "player_0", {"wood": 4}, {"ore": 1, "wheat": 1}
    )


def test_bank_trade_port_ratios(main_state):
    generic = next(
        v.vertex_id
        for v in main_state.board.vertices.values()
        if v.port is not None and v.port.kind == PortType.GENERIC
    )
    put_settlement(main_state, "player_0", generic)
    assert rules.best_trade_ratio(main_state, "player_0", ResourceType.WOOD) == 3

    specific = next(
        v
        for v in main_state.board.vertices.values()
        if v.port is not None and v.port.kind != PortType.GENERIC
    )
    put_settlement(main_state, "player_0", specific.vertex_id)
    resource = ResourceType(specific.port.kind.value)
    assert rules.best_trade_ratio(main_state, "player_0", resource) == 2

    give(main_state, "player_0", **{resource.value: 4})
    other = next(r for r in ResourceType if r != resource)
    assert rules.can_trade_with_bank(main_state, "player_0", {resource.value: 2}, {other.value: 1})
    result = rules.can_trade_with_bank(main_state, "player_0", {resource.value: 4}, {other.value: 1})
    assert result.reason == "Invalid trade ratio. You need 2:1 for this resource"


def test_end_turn_blocked_during_robber_phases(main_state):
    main_state.turn.phase = GamePhase.ROBBER_PLACEMENT
    assert rules.can_end_turn(main_state, "player_0").reason == "Must resolve the robber first"
    main_state.turn.phase = GamePhase.ROBBER_DISCARD
    assert not rules.can_end_turn(main_state, "player_0")


def test_discard_must_match_half(main_state):
    main_state.turn.phase = GamePhase.ROBBER_DISCARD
    main_state.turn.must_discard = ["player_1"]
    give(main_state, "player_1", wood=5, ore=4)

    assert rules.can_discard_resources(main_state, "player_0", {"wood": 4}).reason == (
        "You do not need to discard"
    )
    assert rules.can_discard_resources(main_state, "player_1", {"wood": 3}).reason == (
        "Must discard exactly 4 resources"
    )
    assert rules.can_discard_resources(main_state, "player_1", {"wheat": 4}).reason == (
        "Trying to discard resources you don't have"
    )
    assert not rules.can_discard_resources(main_state, "player_1", {"wood": -1, "ore": 5})
    assert rules.can_discard_resources(main_state, "player_1", {"wood": 2, "ore": 2})


def test_robber_target_must_have_building_and_cards(main_state):
    main_state.turn.phase = GamePhase.ROBBER_PLACEMENT
    tile = next(t for t in main_state.board.tiles.values() if not t.has_robber)
    corner = main_state.board.tile_corner_ids(tile.tile_id)[0]

    assert rules.can_move_robber(main_state, "player_0", tile.tile_id, "player_1").reason == (
        "Target player has no building on this hex"
    )
    put_settlement(main_state, "player_1", corner)
    assert rules.can_move_robber(main_state, "player_0", tile.tile_id, "player_1").reason == (
        "Target player has no resources"
    )
    give(main_state, "player_1", sheep=1)
    assert rules.can_move_robber(main_state, "player_0", tile.tile_id, "player_1")
    assert rules.can_move_robber(main_state, "player_0", main_state.board.robber_tile()).reason == (
        "Robber is already on this hex"
    )


def test_legal_actions_follow_the_phase(state):
    setup_actions = rules.legal_actions(state, "player_0")
    assert setup_actions
    assert {a.action_type for a in setup_actions} == {ActionType.PLACE_SETTLEMENT}
    assert rules.legal_actions(state, "player_1") == []

    state.turn.phase = GamePhase.MAIN
    state.turn.setup_phase = None
    state.turn.setup_round = None
    assert [a.action_type for a in rules.legal_actions(state, "player_0")] == [ActionType.ROLL_DICE]

    state.turn.has_rolled = True
    types = set(rules.legal_action_types(state, "player_0"))
    assert ActionType.END_TURN in types
    assert ActionType.PLACE_ROAD not in types


def test_every_legal_action_validates(main_state):
    vertex_id = _first_vertex(main_state)
    put_settlement(main_state, "player_0", vertex_id)
    put_road(main_state, "player_0", main_state.board.edges_for_vertex(vertex_id)[0])
    give(main_state, "player_0", wood=4, brick=4, sheep=4, wheat=4, ore=4)
    actions = rules.legal_actions(main_state, "player_0")
    assert {a.action_type for a in actions} >= {
        ActionType.PLACE_ROAD,
        ActionType.PLACE_CITY,
        ActionType.BUY_DEV_CARD,
        ActionType.TRADE_WITH_BANK,
        ActionType.END_TURN,
    }
    for action in actions:
        assert rules.validate_action(main_state, "player_0", action), action


def test_validate_action_tolerates_junk_ids(main_state):
    result = rules.validate_action(
        main_state, "player_0", Action(ActionType.PLACE_ROAD, {"edge_id": ["not", "an", "id"]})
    )
    assert result.reason == "Invalid edge"

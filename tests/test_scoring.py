from catan_rules.engine import scoring
from catan_rules.engine.game_state import DevCard
from catan_rules.engine.types import DevCardType, GamePhase

from helpers import put_city, put_road, put_settlement, road_path


def _lay_path(state, player_id, edges):
    for edge_id in edges:
        put_road(state, player_id, edge_id)


def test_straight_road_length(main_state):
    _, edges = road_path(main_state, 5)
    _lay_path(main_state, "player_0", edges)
    assert scoring.longest_road_length(main_state, "player_0") == 5
    assert scoring.longest_road_length(main_state, "player_1") == 0


def test_branches_count_only_the_longest_trail(main_state):
    center_corner = main_state.board.tile_corner_ids("0_0")[0]
    vertices, edges = road_path(main_state, 3, start=center_corner)
    _lay_path(main_state, "player_0", edges)
    middle = vertices[1]
    spur = next(
        e
        for e in main_state.board.edges_for_vertex(middle)
        if e not in edges
    )
    put_road(main_state, "player_0", spur)
    assert scoring.longest_road_length(main_state, "player_0") == 3


def test_opponent_settlement_breaks_road(main_state):
    vertices, edges = road_path(main_state, 5)
    _lay_path(main_state, "player_0", edges)
    put_settlement(main_state, "player_1", vertices[2])
    assert scoring.longest_road_length(main_state, "player_0") == 3


def test_own_settlement_does_not_break_road(main_state):
    vertices, edges = road_path(main_state, 5)
    _lay_path(main_state, "player_0", edges)
    put_settlement(main_state, "player_0", vertices[2])
    assert scoring.longest_road_length(main_state, "player_0") == 5


def test_resolve_holder_policy():
    # unique leader takes the title
    assert scoring.resolve_holder({"a": 5, "b": 3}, None, 5) == "a"
    assert scoring.resolve_holder({"a": 5, "b": 6}, "a", 5) == "b"
    # tie keeps the holder only if they are part of it
    assert scoring.resolve_holder({"a": 6, "b": 6}, "a", 5) == "a"
    assert scoring.resolve_holder({"a": 4, "b": 6, "c": 6}, "a", 5) is None
    # nobody qualifies
    assert scoring.resolve_holder({"a": 4, "b": 2}, "a", 5) is None


def test_longest_road_moves_when_broken(main_state):
    _, a_edges = road_path(main_state, 6)
    _lay_path(main_state, "player_0", a_edges)
    scoring.refresh(main_state)
    assert main_state.longest_road_holder == "player_0"
    assert main_state.players[0].has_longest_road
    assert main_state.players[0].victory_points == 2

    used = {v for e in a_edges for v in main_state.board.edges[e].vertices}
    start = next(
        v
        for v in sorted(main_state.board.vertices)
        if v not in used
        and all(n not in used for n in main_state.board.vertices_adjacent_to(v))
    )
    b_vertices, b_edges = _disjoint_path(main_state, 5, start, used)
    _lay_path(main_state, "player_1", b_edges)
    scoring.refresh(main_state)
    assert main_state.longest_road_holder == "player_0"

    # Cutting A's road in the middle leaves B as the unique leader.
    middle = _shared_vertex(main_state, a_edges[2], a_edges[3])
    put_settlement(main_state, "player_2", middle)
    scoring.refresh(main_state)
    assert main_state.longest_road_holder == "player_1"
    assert main_state.players[0].victory_points == 0
    assert main_state.players[1].victory_points == 2


def _shared_vertex(state, edge_a, edge_b):
    (shared,) = set(state.board.edges[edge_a].vertices) & set(state.board.edges[edge_b].vertices)
    return shared


def _disjoint_path(state, length, start, avoid):
    board = state.board

    def extend(path):
        if len(path) == length + 1:
            return path
        for neighbor in board.vertices_adjacent_to(path[-1]):
            if neighbor in path or neighbor in avoid:
                continue
            found = extend(path + [neighbor])
            if found:
                return found
        return None

    path = extend([start])
    assert path is not None
    return path, [board.edge_between(a, b) for a, b in zip(path, path[1:])]


def test_largest_army(main_state):
    main_state.players[1].knights_played = 3
    scoring.refresh(main_state)
    assert main_state.largest_army_holder == "player_1"
    assert main_state.players[1].victory_points == 2

    # tie at the top keeps the current holder
    main_state.players[2].knights_played = 3
    scoring.refresh(main_state)
    assert main_state.largest_army_holder == "player_1"

    main_state.players[2].knights_played = 4
    scoring.refresh(main_state)
    assert main_state.largest_army_holder == "player_2"
    assert main_state.players[1].has_largest_army is False


def test_victory_points(main_state):
    vertices = sorted(main_state.board.vertices)
    put_settlement(main_state, "player_0", vertices[0])
    far = next(
        v
        for v in reversed(vertices)
        if v not in main_state.board.vertices_adjacent_to(vertices[0])
    )
    put_city(main_state, "player_0", far)
    main_state.players[0].dev_cards.append(DevCard(DevCardType.VICTORY_POINT))
    assert scoring.calculate_victory_points(main_state, "player_0") == 4


def test_first_player_in_seat_order_wins(main_state):
    main_state.players[1].victory_points = 10
    main_state.players[2].victory_points = 11
    assert scoring.check_victory(main_state) == "player_1"
    assert main_state.winner == "player_1"
    assert main_state.phase == GamePhase.GAME_OVER


def test_no_victory_during_setup(state):
    state.players[0].victory_points = 12
    assert scoring.check_victory(state) is None
    assert state.phase == GamePhase.SETUP

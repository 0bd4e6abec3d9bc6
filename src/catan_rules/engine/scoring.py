from __future__ import annotations

import logging
from typing import Dict, FrozenSet

import networkx as nx

from .constants import LARGEST_ARMY_MIN_KNIGHTS, LONGEST_ROAD_MIN_LENGTH
from .game_state import GameState
from .types import DevCardType, GamePhase

logger = logging.getLogger(__name__)

# Every function here updates the state it is given in place; callers pass a
# state they own (the executors' fresh clone).


def player_road_graph(state: GameState, player_id: str) -> nx.Graph:
    graph = nx.Graph()
    player = state.require_player(player_id)
    for edge_id in player.roads:
        vertex_a, vertex_b = state.board.edges[edge_id].vertices
        graph.add_edge(vertex_a, vertex_b, edge_id=edge_id)
    return graph


def _passable(state: GameState, vertex_id: str, player_id: str) -> bool:
    structure = state.board.vertices[vertex_id].structure
    return structure is None or structure.player_id == player_id


def _extend(
    graph: nx.Graph, state: GameState, player_id: str, vertex_id: str, visited: FrozenSet[str]
) -> int:
    best = len(visited)
    if not _passable(state, vertex_id, player_id):
        return best
    for neighbor in graph.neighbors(vertex_id):
        edge_id = graph.edges[vertex_id, neighbor]["edge_id"]
        if edge_id in visited:
            continue
        best = max(best, _extend(graph, state, player_id, neighbor, visited | {edge_id}))
    return best


def longest_road_length(state: GameState, player_id: str) -> int:
    """Longest simple trail through the player's roads.

    Opponent buildings break the trail: a walk may end at such a corner but not
    pass through it.
    """
    graph = player_road_graph(state, player_id)
    best = 0
    for vertex_a, vertex_b, data in graph.edges(data=True):
        start = frozenset({data["edge_id"]})
        best = max(
            best,
            _extend(graph, state, player_id, vertex_b, start),
            _extend(graph, state, player_id, vertex_a, start),
        )
    return best


def resolve_holder(counts: Dict[str, int], current: str | None, threshold: int) -> str | None:
    """Decide who holds a title given each player's count.

    A unique qualifying leader takes it. A tie at the top leaves it with the
    current holder if they are part of the tie, otherwise nobody holds it.
    """
    qualifying = {pid: count for pid, count in counts.items() if count >= threshold}
    if not qualifying:
        return None
    top = max(qualifying.values())
    leaders = [pid for pid, count in qualifying.items() if count == top]
    if len(leaders) == 1:
        return leaders[0]
    return current if current in leaders else None


def update_longest_road(state: GameState) -> None:
    lengths = {player.player_id: longest_road_length(state, player.player_id) for player in state.players}
    holder = resolve_holder(lengths, state.longest_road_holder, LONGEST_ROAD_MIN_LENGTH)
    if holder != state.longest_road_holder:
        logger.debug("Longest road moves from %s to %s", state.longest_road_holder, holder)
    state.longest_road_holder = holder
    for player in state.players:
        player.has_longest_road = player.player_id == holder


def update_largest_army(state: GameState) -> None:
    knights = {player.player_id: player.knights_played for player in state.players}
    holder = resolve_holder(knights, state.largest_army_holder, LARGEST_ARMY_MIN_KNIGHTS)
    if holder != state.largest_army_holder:
        logger.debug("Largest army moves from %s to %s", state.largest_army_holder, holder)
    state.largest_army_holder = holder
    for player in state.players:
        player.has_largest_army = player.player_id == holder


def calculate_victory_points(state: GameState, player_id: str) -> int:
    player = state.require_player(player_id)
    points = len(player.settlements) + 2 * len(player.cities)
    points += sum(1 for card in player.dev_cards if card.kind == DevCardType.VICTORY_POINT)
    if player.has_longest_road:
        points += 2
    if player.has_largest_army:
        points += 2
    return points


def update_victory_points(state: GameState) -> None:
    for player in state.players:
        player.victory_points = calculate_victory_points(state, player.player_id)


def check_victory(state: GameState) -> str | None:
    if state.winner is not None:
        return state.winner
    if state.phase == GamePhase.SETUP:
        return None
    for player in state.players:
        if player.victory_points >= state.config.victory_points_to_win:
            state.winner = player.player_id
            state.turn.phase = GamePhase.GAME_OVER
            return player.player_id
    return None


def refresh(state: GameState) -> None:
    update_longest_road(state)
    update_largest_army(state)
    update_victory_points(state)
    check_victory(state)

from __future__ import annotations

from typing import List, Tuple

from catan_rules.engine.game_state import GameState
from catan_rules.engine.types import BuildingType, ResourceType, Road, Structure


def put_settlement(state: GameState, player_id: str, vertex_id: str) -> None:
    state.board.vertices[vertex_id].structure = Structure(player_id, BuildingType.SETTLEMENT)
    state.require_player(player_id).settlements.append(vertex_id)


def put_city(state: GameState, player_id: str, vertex_id: str) -> None:
    state.board.vertices[vertex_id].structure = Structure(player_id, BuildingType.CITY)
    state.require_player(player_id).cities.append(vertex_id)


def put_road(state: GameState, player_id: str, edge_id: str) -> None:
    state.board.edges[edge_id].road = Road(player_id)
    state.require_player(player_id).roads.append(edge_id)


def give(state: GameState, player_id: str, **amounts: int) -> None:
    player = state.require_player(player_id)
    for name, amount in amounts.items():
        player.resources[ResourceType(name)] += amount


def producing_tile(state: GameState):
    """Some tile with a number token that does not hold the robber."""
    return next(
        tile
        for tile in state.board.tiles.values()
        if tile.number_token is not None and not tile.has_robber
    )


def road_path(state: GameState, length: int, start: str | None = None) -> Tuple[List[str], List[str]]:
    """A simple path of ``length`` edges: (vertices, edges)."""
    board = state.board
    starts = [start] if start is not None else sorted(board.vertices)

    def extend(path: List[str]) -> List[str] | None:
        if len(path) == length + 1:
            return path
        for neighbor in board.vertices_adjacent_to(path[-1]):
            if neighbor in path:
                continue
            found = extend(path + [neighbor])
            if found:
                return found
        return None

    for vertex_id in starts:
        path = extend([vertex_id])
        if path:
            edges = [board.edge_between(a, b) for a, b in zip(path, path[1:])]
            return path, edges
    raise AssertionError(f"No simple path of length {length}")

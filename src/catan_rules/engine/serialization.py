from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Mapping

from .events import GameEvent
from .game_state import GameState, PlayerState
from .types import Edge, Tile, Vertex


def resources_to_dict(resources: Mapping[Any, int]) -> Dict[str, int]:
    return {getattr(key, "value", key): int(amount) for key, amount in resources.items()}


def _tile_to_dict(tile: Tile) -> Dict[str, Any]:
    return {
        "id": tile.tile_id,
        "q": tile.axial[0],
        "r": tile.axial[1],
        "type": tile.tile_type.value,
        "number": tile.number_token,
        "has_robber": tile.has_robber,
    }


def _vertex_to_dict(vertex: Vertex) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": vertex.vertex_id,
        "x": vertex.coord[0],
        "y": vertex.coord[1],
        "tiles": list(vertex.adjacent_tiles),
        "building": None,
        "port": None,
    }
    if vertex.structure is not None:
        data["building"] = {
            "player_id": vertex.structure.player_id,
            "type": vertex.structure.kind.value,
        }
    if vertex.port is not None:
        data["port"] = {"type": vertex.port.kind.value, "ratio": vertex.port.ratio}
    return data


def _edge_to_dict(edge: Edge) -> Dict[str, Any]:
    return {
        "id": edge.edge_id,
        "vertices": list(edge.vertices),
        "road": edge.road.player_id if edge.road is not None else None,
    }


def _player_to_dict(player: PlayerState) -> Dict[str, Any]:
    return {
        "id": player.player_id,
        "name": player.name,
        "color": player.color,
        "resources": resources_to_dict(player.resources),
        "settlements": list(player.settlements),
        "cities": list(player.cities),
        "roads": list(player.roads),
        "dev_cards": [
            {"type": card.kind.value, "bought_this_turn": card.bought_this_turn}
            for card in player.dev_cards
        ],
        "knights_played": player.knights_played,
        "victory_points": player.victory_points,
        "has_longest_road": player.has_longest_road,
        "has_largest_army": player.has_largest_army,
    }


def state_to_dict(state: GameState) -> Dict[str, Any]:
    turn = state.turn
    return {
        "config": {
            "player_count": state.config.player_count,
            "victory_points_to_win": state.config.victory_points_to_win,
            "seed": state.config.seed,
        },
        "board": {
            "tiles": [_tile_to_dict(tile) for tile in state.board.tiles.values()],
            "vertices": [_vertex_to_dict(vertex) for vertex in state.board.vertices.values()],
            "edges": [_edge_to_dict(edge) for edge in state.board.edges.values()],
        },
        "players": [_player_to_dict(player) for player in state.players],
        "turn": {
            "current_player_index": turn.current_player_index,
            "round": turn.round,
            "phase": turn.phase.value,
            "setup_phase": turn.setup_phase.value if turn.setup_phase else None,
            "setup_round": turn.setup_round,
            "dice_roll": list(turn.dice_roll) if turn.dice_roll else None,
            "has_rolled": turn.has_rolled,
            "must_discard": list(turn.must_discard),
            "can_play_dev_card": turn.can_play_dev_card,
        },
        "dev_deck_remaining": len(state.dev_deck),
        "longest_road_holder": state.longest_road_holder,
        "largest_army_holder": state.largest_army_holder,
        "winner": state.winner,
    }


def event_to_dict(event: GameEvent) -> Dict[str, Any]:
    return {
        "id": event.event_id,
        "timestamp": event.timestamp,
        "turn_number": event.turn_number,
        "kind": event.kind.value,
        "payload": dict(event.payload),
    }


def export_game(seed: int, events: Iterable[GameEvent], state: GameState) -> str:
    document = {
        "seed": seed,
        "events": [event_to_dict(event) for event in events],
        "finalState": state_to_dict(state),
    }
    return json.dumps(document, sort_keys=True, indent=2)

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Tuple

import networkx as nx

from catan_rules.utils.repro import RandomSource

from .errors import InvariantViolation
from .types import Edge, Port, PortType, Tile, TileType, Vertex

logger = logging.getLogger(__name__)

AXIAL_RADIUS = 2

# Pixel scale used to canonicalise corners; large enough that rounding the
# float corner positions of neighbouring hexes lands on the same integers.
HEX_SIZE = 1000

STANDARD_TILE_TYPES = (
    [TileType.WOOD] * 4
    + [TileType.BRICK] * 3
    + [TileType.SHEEP] * 4
    + [TileType.WHEAT] * 4
    + [TileType.ORE] * 3
    + [TileType.DESERT]
)

STANDARD_NUMBER_TOKENS = [2, 3, 3, 4, 4, 5, 5, 6, 6, 8, 8, 9, 9, 10, 10, 11, 11, 12]

STANDARD_PORT_TYPES = [
    PortType.WOOD,
    PortType.BRICK,
    PortType.SHEEP,
    PortType.WHEAT,
    PortType.ORE,
    PortType.GENERIC,
    PortType.GENERIC,
    PortType.GENERIC,
    PortType.GENERIC,
]

# Corner directions are numbered clockwise from the top: N, NE, SE, S, SW, NW.
PORT_LOCATIONS: List[Tuple[Tuple[int, int], Tuple[int, int]]] = [
    ((0, -2), (4, 5)),
    ((2, -2), (0, 1)),
    ((2, -1), (1, 2)),
    ((2, 0), (1, 2)),
    ((1, 1), (2, 3)),
    ((-1, 2), (3, 4)),
    ((-2, 2), (3, 4)),
    ((-2, 1), (4, 5)),
    ((-2, 0), (4, 5)),
]

AXIAL_DIRECTIONS = [
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, 0),
    (-1, 1),
    (0, 1),
]

TOKEN_PIPS = {2: 1, 3: 2, 4: 3, 5: 4, 6: 5, 8: 5, 9: 4, 10: 3, 11: 2, 12: 1}


@dataclass(frozen=True)
class NumberShuffleConstraints:
    no_adjacent_six_eight: bool = False
    no_adjacent_same_number: bool = False
    no_adjacent_two_twelve: bool = False
    max_attempts: int = 5000


@dataclass
class Board:
    tiles: Dict[str, Tile]
    vertices: Dict[str, Vertex] = field(default_factory=dict)
    edges: Dict[str, Edge] = field(default_factory=dict)
    ports: List[Port] = field(default_factory=list)
    tile_neighbors: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    def tile_ids(self) -> Iterable[str]:
        return self.tiles.keys()

    def robber_tile(self) -> str | None:
        for tile in self.tiles.values():
            if tile.has_robber:
                return tile.tile_id
        return None

    def tile_corner_ids(self, tile_id: str) -> List[str]:
        """Corner vertex ids of a tile in clockwise order from the top."""
        q, r = self.tiles[tile_id].axial
        return [corner_id(q, r, direction) for direction in range(6)]

    def vertices_for_tile(self, tile_id: str) -> List[str]:
        return [
            vertex.vertex_id
            for vertex in self.vertices.values()
            if tile_id in vertex.adjacent_tiles
        ]

    def edge_between(self, vertex_a: str, vertex_b: str) -> str | None:
        edge_id = canonical_edge_id(vertex_a, vertex_b)
        return edge_id if edge_id in self.edges else None

    def vertices_adjacent_to(self, vertex_id: str) -> Tuple[str, ...]:
        return self.vertices[vertex_id].adjacent_vertices

    def edges_for_vertex(self, vertex_id: str) -> Tuple[str, ...]:
        return self.vertices[vertex_id].adjacent_edges


def token_pips(number_token: int | None) -> int:
    if number_token is None:
        return 0
    return TOKEN_PIPS.get(number_token, 0)


def tile_id_for(q: int, r: int) -> str:
    return f"{q}_{r}"


def axial_coords(radius: int = AXIAL_RADIUS) -> List[Tuple[int, int]]:
    """Board coordinates row by row, top to bottom."""
    coords: List[Tuple[int, int]] = []
    for r in range(-radius, radius + 1):
        for q in range(-radius, radius + 1):
            if -radius <= q + r <= radius:
                coords.append((q, r))
    return coords


def pixel_center(q: int, r: int) -> Tuple[float, float]:
    x = HEX_SIZE * (math.sqrt(3) * q + math.sqrt(3) / 2 * r)
    y = HEX_SIZE * 1.5 * r
    return (x, y)


def corner_coord(q: int, r: int, direction: int) -> Tuple[int, int]:
    cx, cy = pixel_center(q, r)
    angle = math.radians(60 * direction - 90)
    return (round(cx + HEX_SIZE * math.cos(angle)), round(cy + HEX_SIZE * math.sin(angle)))


def corner_id(q: int, r: int, direction: int) -> str:
    x, y = corner_coord(q, r, direction)
    return f"v_{x}_{y}"


def canonical_edge_id(vertex_a: str, vertex_b: str) -> str:
    first, second = sorted((vertex_a, vertex_b))
    return f"e_{first}_{second}"


def build_tile_neighbors(coords: List[Tuple[int, int]]) -> Dict[str, Tuple[str, ...]]:
    on_board = set(coords)
    neighbors: Dict[str, Tuple[str, ...]] = {}
    for q, r in coords:
        neighbors[tile_id_for(q, r)] = tuple(
            tile_id_for(q + dq, r + dr)
            for dq, dr in AXIAL_DIRECTIONS
            if (q + dq, r + dr) in on_board
        )
    return neighbors


def _numbers_valid(
    numbers_by_tile: Dict[str, int],
    neighbors: Dict[str, Tuple[str, ...]],
    constraints: NumberShuffleConstraints,
) -> bool:
    for tile_id, value in numbers_by_tile.items():
        for neighbor_id in neighbors[tile_id]:
            if neighbor_id not in numbers_by_tile:
                continue
            other = numbers_by_tile[neighbor_id]
            if constraints.no_adjacent_six_eight and value in (6, 8) and other in (6, 8):
                return False
            if constraints.no_adjacent_same_number and value == other:
                return False
            if constraints.no_adjacent_two_twelve and value in (2, 12) and other in (2, 12):
                return False
    return True


def _assign_numbers(
    tile_ids: List[str],
    neighbors: Dict[str, Tuple[str, ...]],
    rng: RandomSource,
    constraints: NumberShuffleConstraints,
) -> Dict[str, int]:
    for _ in range(constraints.max_attempts):
        numbers = rng.shuffle(STANDARD_NUMBER_TOKENS)
        numbers_by_tile = {tile_id: numbers[idx] for idx, tile_id in enumerate(tile_ids)}
        if _numbers_valid(numbers_by_tile, neighbors, constraints):
            return numbers_by_tile
    raise RuntimeError("Failed to assign numbers within constraints")


def _generate_ports(rng: RandomSource) -> List[Port]:
    kinds = rng.shuffle(STANDARD_PORT_TYPES)
    ports: List[Port] = []
    for ((q, r), directions), kind in zip(PORT_LOCATIONS, kinds):
        ratio = 3 if kind == PortType.GENERIC else 2
        vertices = tuple(corner_id(q, r, direction) for direction in directions)
        ports.append(Port(kind=kind, ratio=ratio, vertices=vertices))
    return ports


def generate_board(
    seed: object = None,
    rng: RandomSource | None = None,
    constraints: NumberShuffleConstraints | None = None,
) -> Board:
    """Lay out the 19 tiles, number tokens and ports, then build adjacency.

    Pass ``rng`` to draw from a shared stream; otherwise a fresh
    :class:`RandomSource` is seeded from ``seed``.
    """
    if rng is None:
        rng = RandomSource(seed)
    if constraints is None:
        constraints = NumberShuffleConstraints()

    coords = axial_coords()
    tile_types = rng.shuffle(STANDARD_TILE_TYPES)
    neighbors = build_tile_neighbors(coords)

    ids = [tile_id_for(q, r) for q, r in coords]
    producing = [tile_id for tile_id, kind in zip(ids, tile_types) if kind != TileType.DESERT]
    numbers_by_tile = _assign_numbers(producing, neighbors, rng, constraints)

    tiles: Dict[str, Tile] = {}
    for tile_id, (q, r), kind in zip(ids, coords, tile_types):
        tiles[tile_id] = Tile(
            tile_id=tile_id,
            axial=(q, r),
            tile_type=kind,
            number_token=numbers_by_tile.get(tile_id),
            has_robber=kind == TileType.DESERT,
        )

    board = Board(tiles=tiles, ports=_generate_ports(rng), tile_neighbors=neighbors)
    board = build_adjacency(board)
    logger.debug("Generated board with seed %d", rng.seed)
    return board


def build_adjacency(board: Board) -> Board:
    vertex_tiles: Dict[str, List[str]] = {}
    vertex_coords: Dict[str, Tuple[int, int]] = {}
    vertex_neighbors: Dict[str, List[str]] = {}
    vertex_edges: Dict[str, List[str]] = {}
    edge_vertices: Dict[str, Tuple[str, str]] = {}
    edge_tiles: Dict[str, List[str]] = {}

    for tile in board.tiles.values():
        q, r = tile.axial
        corners = []
        for direction in range(6):
            coord = corner_coord(q, r, direction)
            vid = f"v_{coord[0]}_{coord[1]}"
            corners.append(vid)
            vertex_coords.setdefault(vid, coord)
            tiles_here = vertex_tiles.setdefault(vid, [])
            if tile.tile_id not in tiles_here:
                tiles_here.append(tile.tile_id)
            vertex_neighbors.setdefault(vid, [])
            vertex_edges.setdefault(vid, [])

        for i in range(6):
            a = corners[i]
            b = corners[(i + 1) % 6]
            eid = canonical_edge_id(a, b)
            if eid not in edge_vertices:
                edge_vertices[eid] = tuple(sorted((a, b)))
                edge_tiles[eid] = []
            if tile.tile_id not in edge_tiles[eid]:
                edge_tiles[eid].append(tile.tile_id)
            for here, there in ((a, b), (b, a)):
                if eid not in vertex_edges[here]:
                    vertex_edges[here].append(eid)
                if there not in vertex_neighbors[here]:
                    vertex_neighbors[here].append(there)

    port_at: Dict[str, Port] = {}
    for port in board.ports:
        for vid in port.vertices:
            # Unresolvable port corners are skipped.
            if vid in vertex_coords:
                port_at[vid] = port

    vertices = {
        vid: Vertex(
            vertex_id=vid,
            coord=vertex_coords[vid],
            adjacent_tiles=tuple(vertex_tiles[vid]),
            adjacent_vertices=tuple(vertex_neighbors[vid]),
            adjacent_edges=tuple(vertex_edges[vid]),
            port=port_at.get(vid),
        )
        for vid in vertex_coords
    }

    edges: Dict[str, Edge] = {}
    for eid, (a, b) in edge_vertices.items():
        touching = [other for other in vertex_edges[a] + vertex_edges[b] if other != eid]
        edges[eid] = Edge(
            edge_id=eid,
            vertices=(a, b),
            adjacent_tiles=tuple(edge_tiles[eid]),
            adjacent_edges=tuple(dict.fromkeys(touching)),
        )

    return replace(board, vertices=vertices, edges=edges)


def board_graph(board: Board) -> nx.Graph:
    graph = nx.Graph()
    graph.add_nodes_from(board.vertices)
    for edge in board.edges.values():
        graph.add_edge(*edge.vertices, edge_id=edge.edge_id)
    return graph


def verify_topology(board: Board) -> None:
    """Raise :class:`InvariantViolation` if the vertex/edge arena is inconsistent."""
    for edge in board.edges.values():
        a, b = edge.vertices
        if a == b:
            raise InvariantViolation(f"Edge {edge.edge_id} joins a vertex to itself")
        for vid in (a, b):
            if vid not in board.vertices:
                raise InvariantViolation(f"Edge {edge.edge_id} references unknown vertex {vid}")
        for other in edge.adjacent_edges:
            if other not in board.edges:
                raise InvariantViolation(f"Edge {edge.edge_id} references unknown edge {other}")
        for tile_id in edge.adjacent_tiles:
            if tile_id not in board.tiles:
                raise InvariantViolation(f"Edge {edge.edge_id} references unknown tile {tile_id}")

    for vertex in board.vertices.values():
        if len(vertex.adjacent_vertices) > 3 or len(vertex.adjacent_edges) > 3:
            raise InvariantViolation(f"Vertex {vertex.vertex_id} has degree above 3")
        if not 1 <= len(vertex.adjacent_tiles) <= 3:
            raise InvariantViolation(f"Vertex {vertex.vertex_id} touches {len(vertex.adjacent_tiles)} tiles")
        for other in vertex.adjacent_vertices:
            if other not in board.vertices:
                raise InvariantViolation(f"Vertex {vertex.vertex_id} references unknown vertex {other}")
            if vertex.vertex_id not in board.vertices[other].adjacent_vertices:
                raise InvariantViolation(f"Vertex {vertex.vertex_id} has a one-sided neighbour {other}")
        for eid in vertex.adjacent_edges:
            if eid not in board.edges:
                raise InvariantViolation(f"Vertex {vertex.vertex_id} references unknown edge {eid}")

    graph = board_graph(board)
    if graph.number_of_nodes() and not nx.is_connected(graph):
        raise InvariantViolation("Board graph is not connected")
    is_planar, _ = nx.check_planarity(graph)
    if not is_planar:
        raise InvariantViolation("Board graph is not planar")

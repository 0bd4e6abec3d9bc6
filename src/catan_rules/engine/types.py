from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


class ResourceType(str, Enum):
    WOOD = "wood"
    BRICK = "brick"
    SHEEP = "sheep"
    WHEAT = "wheat"
    ORE = "ore"


RESOURCE_TYPES: Tuple[ResourceType, ...] = tuple(ResourceType)


class TileType(str, Enum):
    WOOD = "wood"
    BRICK = "brick"
    SHEEP = "sheep"
    WHEAT = "wheat"
    ORE = "ore"
    DESERT = "desert"

    @property
    def resource(self) -> Optional[ResourceType]:
        if self is TileType.DESERT:
            return None
        return ResourceType(self.value)


class PortType(str, Enum):
    WOOD = "wood"
    BRICK = "brick"
    SHEEP = "sheep"
    WHEAT = "wheat"
    ORE = "ore"
    GENERIC = "generic"


class DevCardType(str, Enum):
    KNIGHT = "knight"
    VICTORY_POINT = "victory_point"
    ROAD_BUILDING = "road_building"
    YEAR_OF_PLENTY = "year_of_plenty"
    MONOPOLY = "monopoly"


class BuildingType(str, Enum):
    SETTLEMENT = "settlement"
    CITY = "city"


class GamePhase(str, Enum):
    SETUP = "setup"
    MAIN = "main"
    ROBBER_DISCARD = "robber_discard"
    ROBBER_PLACEMENT = "robber_placement"
    GAME_OVER = "game_over"


class SetupPhase(str, Enum):
    FIRST_SETTLEMENT = "first_settlement"
    FIRST_ROAD = "first_road"
    SECOND_SETTLEMENT = "second_settlement"
    SECOND_ROAD = "second_road"


class ActionType(str, Enum):
    ROLL_DICE = "roll_dice"
    PLACE_SETTLEMENT = "place_settlement"
    PLACE_CITY = "place_city"
    PLACE_ROAD = "place_road"
    BUY_DEV_CARD = "buy_dev_card"
    PLAY_KNIGHT = "play_knight"
    PLAY_ROAD_BUILDING = "play_road_building"
    PLAY_YEAR_OF_PLENTY = "play_year_of_plenty"
    PLAY_MONOPOLY = "play_monopoly"
    DISCARD_RESOURCES = "discard_resources"
    MOVE_ROBBER = "move_robber"
    TRADE_WITH_BANK = "trade_with_bank"
    END_TURN = "end_turn"


@dataclass(frozen=True)
class Action:
    action_type: ActionType
    payload: Dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class Structure:
    player_id: str
    kind: BuildingType


@dataclass(frozen=True)
class Road:
    player_id: str


@dataclass(frozen=True)
class Port:
    kind: PortType
    ratio: int
    vertices: Tuple[str, ...]


# Topology fields are tuples so a shallow copy shares them safely; only the
# occupancy fields (robber, structure, road) change after generation.


@dataclass
class Tile:
    tile_id: str
    axial: Tuple[int, int]
    tile_type: TileType
    number_token: int | None
    has_robber: bool = False

    @property
    def resource(self) -> Optional[ResourceType]:
        return self.tile_type.resource


@dataclass
class Vertex:
    vertex_id: str
    coord: Tuple[int, int]
    adjacent_tiles: Tuple[str, ...] = ()
    adjacent_vertices: Tuple[str, ...] = ()
    adjacent_edges: Tuple[str, ...] = ()
    structure: Structure | None = None
    port: Port | None = None


@dataclass
class Edge:
    edge_id: str
    vertices: Tuple[str, str]
    adjacent_tiles: Tuple[str, ...] = ()
    adjacent_edges: Tuple[str, ...] = ()
    road: Road | None = None


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(True)

    @classmethod
    def fail(cls, reason: str) -> "ValidationResult":
        return cls(False, reason)

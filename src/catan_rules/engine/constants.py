from __future__ import annotations

from typing import Dict, Tuple

from .types import DevCardType, ResourceType

ResourceBank = Dict[ResourceType, int]

MIN_PLAYERS = 3
MAX_PLAYERS = 4

VICTORY_POINTS_TO_WIN = 10
MIN_VICTORY_POINTS_TO_WIN = 3

MAX_SETTLEMENTS = 5
MAX_CITIES = 4
MAX_ROADS = 15

LONGEST_ROAD_MIN_LENGTH = 5
LARGEST_ARMY_MIN_KNIGHTS = 3

ROBBER_NUMBER = 7
ROBBER_DISCARD_THRESHOLD = 7

DEFAULT_TRADE_RATIO = 4
GENERIC_PORT_RATIO = 3
SPECIFIC_PORT_RATIO = 2

PLAYER_COLORS: Tuple[str, ...] = ("red", "blue", "white", "orange")

DEV_CARD_COUNTS: Dict[DevCardType, int] = {
    DevCardType.KNIGHT: 14,
    DevCardType.VICTORY_POINT: 5,
    DevCardType.ROAD_BUILDING: 2,
    DevCardType.YEAR_OF_PLENTY: 2,
    DevCardType.MONOPOLY: 2,
}

COSTS: Dict[str, ResourceBank] = {
    "road": {
        ResourceType.WOOD: 1,
        ResourceType.BRICK: 1,
        ResourceType.SHEEP: 0,
        ResourceType.WHEAT: 0,
        ResourceType.ORE: 0,
    },
    "settlement": {
        ResourceType.WOOD: 1,
        ResourceType.BRICK: 1,
        ResourceType.SHEEP: 1,
        ResourceType.WHEAT: 1,
        ResourceType.ORE: 0,
    },
    "city": {
        ResourceType.WOOD: 0,
        ResourceType.BRICK: 0,
        ResourceType.SHEEP: 0,
        ResourceType.WHEAT: 2,
        ResourceType.ORE: 3,
    },
    "dev_card": {
        ResourceType.WOOD: 0,
        ResourceType.BRICK: 0,
        ResourceType.SHEEP: 1,
        ResourceType.WHEAT: 1,
        ResourceType.ORE: 1,
    },
}

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Mapping, Sequence, Tuple

from catan_rules.utils.repro import RandomSource

from .board import Board, generate_board
from .constants import (
    DEV_CARD_COUNTS,
    MAX_PLAYERS,
    MIN_PLAYERS,
    MIN_VICTORY_POINTS_TO_WIN,
    PLAYER_COLORS,
    VICTORY_POINTS_TO_WIN,
    ResourceBank,
)
from .errors import InvariantViolation
from .types import RESOURCE_TYPES, DevCardType, GamePhase, ResourceType, SetupPhase


@dataclass(frozen=True)
class GameConfig:
    player_count: int
    victory_points_to_win: int = VICTORY_POINTS_TO_WIN
    seed: int | None = None

    def __post_init__(self):
        if not MIN_PLAYERS <= self.player_count <= MAX_PLAYERS:
            raise ValueError(f"Game requires {MIN_PLAYERS} to {MAX_PLAYERS} players")
        if self.victory_points_to_win < MIN_VICTORY_POINTS_TO_WIN:
            raise ValueError(
                f"Victory point target must be at least {MIN_VICTORY_POINTS_TO_WIN}"
            )


@dataclass
class DevCard:
    kind: DevCardType
    bought_this_turn: bool = False


@dataclass
class PlayerState:
    player_id: str
    name: str
    color: str
    resources: ResourceBank = field(default_factory=lambda: empty_resources())
    settlements: List[str] = field(default_factory=list)
    cities: List[str] = field(default_factory=list)
    roads: List[str] = field(default_factory=list)
    dev_cards: List[DevCard] = field(default_factory=list)
    knights_played: int = 0
    dev_cards_played_this_turn: int = 0
    victory_points: int = 0
    has_longest_road: bool = False
    has_largest_army: bool = False

    @property
    def resource_total(self) -> int:
        return total_resources(self.resources)


@dataclass
class TurnState:
    current_player_index: int = 0
    round: int = 1
    phase: GamePhase = GamePhase.SETUP
    setup_phase: SetupPhase | None = SetupPhase.FIRST_SETTLEMENT
    setup_round: int | None = 1
    dice_roll: Tuple[int, int] | None = None
    has_rolled: bool = False
    must_discard: List[str] = field(default_factory=list)
    can_play_dev_card: bool = True


@dataclass
class GameState:
    config: GameConfig
    board: Board
    players: List[PlayerState]
    turn: TurnState
    dev_deck: List[DevCardType]
    longest_road_holder: str | None = None
    largest_army_holder: str | None = None
    winner: str | None = None

    @property
    def current_player(self) -> PlayerState:
        return self.players[self.turn.current_player_index]

    @property
    def phase(self) -> GamePhase:
        return self.turn.phase

    def player(self, player_id: str) -> PlayerState | None:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def require_player(self, player_id: str) -> PlayerState:
        player = self.player(player_id)
        if player is None:
            raise InvariantViolation(f"Unknown player {player_id}")
        return player


def empty_resources() -> ResourceBank:
    return {resource: 0 for resource in RESOURCE_TYPES}


def total_resources(resources: Mapping[ResourceType, int]) -> int:
    return sum(resources.values())


def has_resources(resources: Mapping[ResourceType, int], required: Mapping[ResourceType, int]) -> bool:
    return all(resources.get(key, 0) >= amount for key, amount in required.items())


def add_resources(resources: ResourceBank, delta: Mapping[ResourceType, int]) -> None:
    for key, amount in delta.items():
        resources[key] += amount


def remove_resources(resources: ResourceBank, delta: Mapping[ResourceType, int]) -> None:
    for key, amount in delta.items():
        if resources[key] < amount:
            raise InvariantViolation(f"Resource {key.value} would go negative")
        resources[key] -= amount


def create_dev_deck(rng: RandomSource) -> List[DevCardType]:
    deck: List[DevCardType] = []
    for kind, count in DEV_CARD_COUNTS.items():
        deck.extend([kind] * count)
    return rng.shuffle(deck)


def initial_game_state(
    player_names: Sequence[str],
    seed: object = None,
    victory_points_to_win: int = VICTORY_POINTS_TO_WIN,
    rng: RandomSource | None = None,
) -> GameState:
    if rng is None:
        rng = RandomSource(seed)
    config = GameConfig(
        player_count=len(player_names),
        victory_points_to_win=victory_points_to_win,
        seed=rng.seed,
    )

    board = generate_board(rng=rng)
    players = [
        PlayerState(
            player_id=f"player_{index}",
            name=name,
            color=PLAYER_COLORS[index % len(PLAYER_COLORS)],
        )
        for index, name in enumerate(player_names)
    ]

    return GameState(
        config=config,
        board=board,
        players=players,
        turn=TurnState(),
        dev_deck=create_dev_deck(rng),
    )


def _clone_board(board: Board) -> Board:
    return Board(
        tiles={tid: replace(tile) for tid, tile in board.tiles.items()},
        vertices={vid: replace(vertex) for vid, vertex in board.vertices.items()},
        edges={eid: replace(edge) for eid, edge in board.edges.items()},
        ports=list(board.ports),
        tile_neighbors=board.tile_neighbors,
    )


def _clone_player(player: PlayerState) -> PlayerState:
    return replace(
        player,
        resources=dict(player.resources),
        settlements=list(player.settlements),
        cities=list(player.cities),
        roads=list(player.roads),
        dev_cards=[replace(card) for card in player.dev_cards],
    )


def clone_state(state: GameState) -> GameState:
    return GameState(
        config=state.config,
        board=_clone_board(state.board),
        players=[_clone_player(player) for player in state.players],
        turn=replace(state.turn, must_discard=list(state.turn.must_discard)),
        dev_deck=list(state.dev_deck),
        longest_road_holder=state.longest_road_holder,
        largest_army_holder=state.largest_army_holder,
        winner=state.winner,
    )

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from catan_rules.engine.events import EventKind, GameEvent
from catan_rules.engine.types import RESOURCE_TYPES, DevCardType


def _per_resource() -> Dict[str, int]:
    return {resource.value: 0 for resource in RESOURCE_TYPES}


@dataclass
class PlayerStatistics:
    player_id: str
    total_resources_gained: int = 0
    total_resources_lost: int = 0
    resources_gained_by_type: Dict[str, int] = field(default_factory=_per_resource)
    resources_lost_by_type: Dict[str, int] = field(default_factory=_per_resource)
    settlements_built: int = 0
    cities_built: int = 0
    roads_built: int = 0
    dev_cards_bought: int = 0
    dev_cards_played: int = 0
    dev_cards_by_type: Dict[str, int] = field(
        default_factory=lambda: {kind.value: 0 for kind in DevCardType}
    )
    times_rolled: int = 0
    total_dice_value: int = 0
    times_stolen_from: int = 0
    times_stole: int = 0
    resources_stolen: int = 0
    resources_lost_to_robber: int = 0
    resources_discarded: int = 0
    bank_trades: int = 0
    turns_played: int = 0
    final_victory_points: int = 0

    @property
    def average_dice_roll(self) -> float:
        if self.times_rolled == 0:
            return 0.0
        return self.total_dice_value / self.times_rolled


@dataclass
class GameStatistics:
    total_turns: int
    winner: str | None
    player_stats: Dict[str, PlayerStatistics]
    longest_road_holder: str | None
    largest_army_holder: str | None
    total_events: int
    duration_ms: int


def _add_resources(totals: Dict[str, int], resources: object) -> int:
    count = 0
    if isinstance(resources, dict):
        for resource, amount in resources.items():
            totals[resource] = totals.get(resource, 0) + int(amount)
            count += int(amount)
    return count


def calculate_statistics(events: Iterable[GameEvent]) -> GameStatistics:
    """Fold an event history into per-player and game-wide counters."""
    history = list(events)
    start = next((e for e in history if e.kind == EventKind.GAME_STARTED), None)
    if start is None:
        raise ValueError("No gameStarted event in history")
    end = next((e for e in history if e.kind == EventKind.GAME_ENDED), None)

    stats = {pid: PlayerStatistics(pid) for pid in start.payload["player_ids"]}
    max_turn = 0
    longest_road_holder = None
    largest_army_holder = None
    last_timestamp = start.timestamp

    for event in history:
        max_turn = max(max_turn, event.turn_number)
        last_timestamp = event.timestamp
        data = event.payload
        player = stats.get(data.get("player_id")) if "player_id" in data else None

        if event.kind == EventKind.TURN_STARTED and player:
            player.turns_played += 1
        elif event.kind == EventKind.DICE_ROLLED and player:
            player.times_rolled += 1
            player.total_dice_value += int(data["total"])
        elif event.kind == EventKind.RESOURCES_GAINED and player:
            gained = _add_resources(player.resources_gained_by_type, data["resources"])
            player.total_resources_gained += gained
            if data.get("reason") == "stolen":
                player.resources_stolen += gained
        elif event.kind == EventKind.RESOURCES_LOST and player:
            lost = _add_resources(player.resources_lost_by_type, data["resources"])
            player.total_resources_lost += lost
            if data.get("reason") == "robber":
                player.resources_lost_to_robber += lost
        elif event.kind == EventKind.RESOURCES_DISCARDED and player:
            player.resources_discarded += sum(int(n) for n in data["resources"].values())
        elif event.kind == EventKind.SETTLEMENT_BUILT and player:
            player.settlements_built += 1
        elif event.kind == EventKind.CITY_BUILT and player:
            player.cities_built += 1
        elif event.kind == EventKind.ROAD_BUILT and player:
            player.roads_built += 1
        elif event.kind == EventKind.DEV_CARD_BOUGHT and player:
            player.dev_cards_bought += 1
            player.dev_cards_by_type[str(data["card_type"])] += 1
        elif event.kind == EventKind.DEV_CARD_PLAYED and player:
            player.dev_cards_played += 1
        elif event.kind == EventKind.PLAYER_STOLE:
            stats[data["stealer_id"]].times_stole += 1
            stats[data["victim_id"]].times_stolen_from += 1
        elif event.kind == EventKind.TRADE_WITH_BANK and player:
            player.bank_trades += 1
        elif event.kind == EventKind.VICTORY_POINTS_CHANGED and player:
            player.final_victory_points = int(data["new_points"])
        elif event.kind == EventKind.LONGEST_ROAD_CHANGED:
            longest_road_holder = data["player_id"]
        elif event.kind == EventKind.LARGEST_ARMY_CHANGED:
            largest_army_holder = data["player_id"]
        elif event.kind == EventKind.GAME_ENDED:
            for score in data["final_scores"]:
                stats[score["player_id"]].final_victory_points = int(score["points"])

    end_timestamp = end.timestamp if end is not None else last_timestamp
    return GameStatistics(
        total_turns=max_turn,
        winner=end.payload["winner_id"] if end is not None else None,
        player_stats=stats,
        longest_road_holder=longest_road_holder,
        largest_army_holder=largest_army_holder,
        total_events=len(history),
        duration_ms=end_timestamp - start.timestamp,
    )


def player_ranking(stats: GameStatistics) -> List[Tuple[str, int]]:
    ranking = [(pid, player.final_victory_points) for pid, player in stats.player_stats.items()]
    return sorted(ranking, key=lambda item: item[1], reverse=True)


def format_duration(ms: int) -> str:
    seconds = ms // 1000
    minutes = seconds // 60
    hours = minutes // 60
    if hours:
        return f"{hours}h {minutes % 60}m"
    if minutes:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"

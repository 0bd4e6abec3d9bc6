from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Iterator, List, Mapping, Tuple

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    GAME_STARTED = "gameStarted"
    TURN_STARTED = "turnStarted"
    TURN_ENDED = "turnEnded"
    DICE_ROLLED = "diceRolled"
    RESOURCES_GAINED = "resourcesGained"
    RESOURCES_LOST = "resourcesLost"
    RESOURCES_DISCARDED = "resourcesDiscarded"
    SETTLEMENT_BUILT = "settlementBuilt"
    CITY_BUILT = "cityBuilt"
    ROAD_BUILT = "roadBuilt"
    DEV_CARD_BOUGHT = "devCardBought"
    DEV_CARD_PLAYED = "devCardPlayed"
    ROBBER_MOVED = "robberMoved"
    PLAYER_STOLE = "playerStole"
    TRADE_WITH_BANK = "tradeWithBank"
    VICTORY_POINTS_CHANGED = "victoryPointsChanged"
    LONGEST_ROAD_CHANGED = "longestRoadChanged"
    LARGEST_ARMY_CHANGED = "largestArmyChanged"
    GAME_ENDED = "gameEnded"


@dataclass(frozen=True)
class GameEvent:
    event_id: str
    timestamp: int
    turn_number: int
    kind: EventKind
    payload: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def player_id(self) -> str | None:
        value = self.payload.get("player_id")
        return value if isinstance(value, str) else None


Subscriber = Callable[[GameEvent], None]


class EventLog:
    """Append-only event history with push delivery to subscribers."""

    def __init__(self, clock: Callable[[], float] | None = None):
        self._clock = clock or time.time
        self._events: List[GameEvent] = []
        self._subscribers: List[Subscriber] = []

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[GameEvent]:
        return iter(self._events)

    @property
    def events(self) -> Tuple[GameEvent, ...]:
        return tuple(self._events)

    def events_of_kind(self, kind: EventKind) -> List[GameEvent]:
        return [event for event in self._events if event.kind == kind]

    def events_for_player(self, player_id: str) -> List[GameEvent]:
        return [event for event in self._events if event.player_id == player_id]

    def events_for_turn(self, turn_number: int) -> List[GameEvent]:
        return [event for event in self._events if event.turn_number == turn_number]

    def emit(self, kind: EventKind, turn_number: int, **payload: object) -> GameEvent:
        event = GameEvent(
            event_id=f"evt_{len(self._events) + 1}",
            timestamp=int(self._clock() * 1000),
            turn_number=turn_number,
            kind=kind,
            payload=MappingProxyType(dict(payload)),
        )
        self._events.append(event)
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("Event subscriber %r failed on %s", callback, event.event_id)
        return event

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

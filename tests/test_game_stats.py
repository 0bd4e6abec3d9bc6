import pytest

from catan_rules.engine.events import EventKind, EventLog
from catan_rules.game_stats import calculate_statistics, format_duration, player_ranking


class StepClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        self.now += 1.5
        return self.now


def sample_history():
    log = EventLog(clock=StepClock())
    emit = log.emit
    emit(EventKind.GAME_STARTED, 1, player_ids=["player_0", "player_1"], seed=3, victory_points_to_win=10)
    emit(EventKind.TURN_STARTED, 1, player_id="player_0")
    emit(EventKind.DICE_ROLLED, 1, player_id="player_0", dice1=4, dice2=4, total=8)
    emit(EventKind.RESOURCES_GAINED, 1, player_id="player_0", resources={"wood": 2}, reason="dice_roll")
    emit(EventKind.DICE_ROLLED, 2, player_id="player_1", dice1=1, dice2=1, total=2)
    emit(EventKind.ROBBER_MOVED, 2, player_id="player_1", from_tile_id="0_0", to_tile_id="1_0")
    emit(EventKind.PLAYER_STOLE, 2, stealer_id="player_1", victim_id="player_0", resource="wood")
    emit(EventKind.RESOURCES_GAINED, 2, player_id="player_1", resources={"wood": 1}, reason="stolen")
    emit(EventKind.RESOURCES_LOST, 2, player_id="player_0", resources={"wood": 1}, reason="robber")
    emit(EventKind.DEV_CARD_BOUGHT, 2, player_id="player_1", card_type="knight")
    emit(EventKind.LARGEST_ARMY_CHANGED, 2, player_id="player_1", army_size=3)
    emit(
        EventKind.GAME_ENDED,
        3,
        winner_id="player_1",
        final_scores=[
            {"player_id": "player_0", "points": 4},
            {"player_id": "player_1", "points": 10},
        ],
    )
    return log.events


def test_counts_per_player():
    stats = calculate_statistics(sample_history())
    alice = stats.player_stats["player_0"]
    bob = stats.player_stats["player_1"]

    assert stats.total_turns == 3
    assert stats.winner == "player_1"
    assert stats.largest_army_holder == "player_1"
    assert stats.longest_road_holder is None
    assert stats.total_events == 12

    assert alice.turns_played == 1
    assert alice.times_rolled == 1
    assert alice.average_dice_roll == 8
    assert alice.total_resources_gained == 2
    assert alice.resources_lost_to_robber == 1
    assert alice.times_stolen_from == 1

    assert bob.times_stole == 1
    assert bob.resources_stolen == 1
    assert bob.dev_cards_bought == 1
    assert bob.dev_cards_by_type["knight"] == 1
    assert bob.final_victory_points == 10


def test_duration_spans_start_to_end():
    stats = calculate_statistics(sample_history())
    # twelve events one and a half seconds apart
    assert stats.duration_ms == 16_500


def test_ranking_orders_by_points():
    stats = calculate_statistics(sample_history())
    assert player_ranking(stats) == [("player_1", 10), ("player_0", 4)]


def test_history_needs_a_start():
    with pytest.raises(ValueError):
        calculate_statistics([])


def test_average_without_rolls():
    stats = calculate_statistics(sample_history()[:2])
    assert stats.player_stats["player_1"].average_dice_roll == 0.0
    assert stats.winner is None


@pytest.mark.parametrize(
    "ms, expected",
    [(999, "0s"), (61_000, "1m 1s"), (3_720_000, "1h 2m")],
)
def test_format_duration(ms, expected):
    assert format_duration(ms) == expected

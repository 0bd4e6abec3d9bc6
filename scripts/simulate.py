#!/usr/bin/env python3
"""
Run random self-play games and report outcomes.

Usage:
    python scripts/simulate.py --games 20 --players 4
    python scripts/simulate.py --games 5 --seed 42 --export-dir exports
"""

import argparse
import logging
from pathlib import Path

from tqdm import tqdm

from catan_rules.engine.game import Game
from catan_rules.game_stats import format_duration, player_ranking
from catan_rules.settings import configure_logging, settings
from catan_rules.simulation import RandomDriver
from catan_rules.utils.repro import coerce_seed

logger = logging.getLogger(__name__)

PLAYER_NAMES = ["Alice", "Bob", "Carol", "Dave"]


def run_game(seed: int, players: int, max_turns: int, victory_points: int) -> Game:
    game = Game(PLAYER_NAMES[:players], seed=seed, victory_points_to_win=victory_points)
    RandomDriver(game).play_turns(max_turns)
    return game


def main():
    parser = argparse.ArgumentParser(description="Simulate random Catan games")
    parser.add_argument("--games", type=int, default=10, help="Number of games to play")
    parser.add_argument("--players", type=int, choices=[3, 4], default=4)
    parser.add_argument("--seed", type=str, default=settings.SEED, help="Base seed")
    parser.add_argument("--max-turns", type=int, default=settings.MAX_TURNS)
    parser.add_argument("--victory-points", type=int, default=settings.VICTORY_POINTS)
    parser.add_argument("--export-dir", type=str, help="Write each game export here")
    parser.add_argument("--log-level", type=str, default=settings.LOG_LEVEL)
    args = parser.parse_args()

    configure_logging(args.log_level)
    base_seed = coerce_seed(args.seed)
    export_dir = Path(args.export_dir) if args.export_dir else None
    if export_dir is not None:
        export_dir.mkdir(parents=True, exist_ok=True)

    wins = {}
    finished = 0
    for index in tqdm(range(args.games), desc="games"):
        seed = base_seed + index
        game = run_game(seed, args.players, args.max_turns, args.victory_points)
        stats = game.get_statistics()
        if stats.winner is not None:
            finished += 1
            wins[stats.winner] = wins.get(stats.winner, 0) + 1
        logger.info(
            "Game %d (seed %d): winner=%s turns=%d duration=%s ranking=%s",
            index,
            seed,
            stats.winner,
            stats.total_turns,
            format_duration(stats.duration_ms),
            player_ranking(stats),
        )
        if export_dir is not None:
            (export_dir / f"game_{seed}.json").write_text(game.export_game())

    print(f"Finished {finished}/{args.games} games within {args.max_turns} turns")
    for player_id, count in sorted(wins.items()):
        print(f"  {player_id}: {count} wins")


if __name__ == "__main__":
    main()

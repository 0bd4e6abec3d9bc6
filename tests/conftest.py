import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from catan_rules.engine.game_state import initial_game_state  # noqa: E402
from catan_rules.engine.types import GamePhase  # noqa: E402


@pytest.fixture
def state():
    return initial_game_state(["Alice", "Bob", "Carol"], seed=42)


@pytest.fixture
def main_state():
    """Past setup, player_0 to act, dice already rolled."""
    state = initial_game_state(["Alice", "Bob", "Carol"], seed=42)
    state.turn.phase = GamePhase.MAIN
    state.turn.setup_phase = None
    state.turn.setup_round = None
    state.turn.has_rolled = True
    state.turn.dice_roll = (3, 4)
    return state

from catan_rules.engine.game import Game
from catan_rules.engine.types import ActionType, GamePhase
from catan_rules.simulation import RandomDriver


def no_adjacent_buildings(state):
    board = state.board
    for vertex_id, vertex in board.vertices.items():
        if vertex.structure is None:
            continue
        for neighbor in board.vertices_adjacent_to(vertex_id):
            if board.vertices[neighbor].structure is not None:
                return False
    return True


def resources_never_negative(state):
    return all(amount >= 0 for player in state.players for amount in player.resources.values())


def test_random_setup_places_everything():
    game = Game(["Alice", "Bob", "Carol"], seed=7)
    RandomDriver(game).play_setup()
    state = game.get_state()

    assert state.phase == GamePhase.MAIN
    assert state.turn.current_player_index == 0
    assert sum(len(player.settlements) for player in state.players) == 6
    assert sum(len(player.roads) for player in state.players) == 6
    assert no_adjacent_buildings(state)


def test_random_play_keeps_rules():
    game = Game(["Alice", "Bob", "Carol"], seed=7)
    driver = RandomDriver(game)
    driver.play_setup()

    ended = 0
    while ended < 50 and not game.is_game_over():
        action = driver.step()
        state = game.get_state()
        assert no_adjacent_buildings(state)
        assert resources_never_negative(state)
        for player in state.players:
            assert len(player.settlements) <= 5
            assert len(player.cities) <= 4
            assert len(player.roads) <= 15
        if action.action_type == ActionType.END_TURN:
            ended += 1

    assert ended == 50 or game.is_game_over()
    turns = [event for event in game.get_history() if event.kind.value == "turnEnded"]
    assert len(turns) == ended


def test_same_seed_same_game():
    def run():
        game = Game(["Alice", "Bob", "Carol", "Dave"], seed=21, clock=lambda: 0.0)
        RandomDriver(game).play_turns(10)
        return game.export_game()

    assert run() == run()

# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.

import random
from typing import Sequence

import pytest

from nimby import StickGame, GamePhase, Player, FixedPlayer, RandomPlayer
from nimby.exceptions import ConfigurationError, ContractViolation, GameOver


class RecordingPlayer(Player):
    '''Takes as many sticks as possible, and remembers what it was offered.'''
    def __init__(self) -> None:
        Player.__init__(self)
        self.offers = []

    def play(self, state: int, legal_next_states: Sequence[int]) -> int:
        self.offers.append((state, tuple(legal_next_states)))
        return legal_next_states[-1]


class CheatingPlayer(Player):
    def play(self, state: int, legal_next_states: Sequence[int]) -> int:
        return 42


def test_legal_next_states_include_overshoot():
    recording_player = RecordingPlayer()
    game = StickGame(recording_player, FixedPlayer(), pile_size=2)
    assert game.legal_next_states == (1, 0, -1)
    game.advance_one_turn()
    assert recording_player.offers == [(2, (1, 0, -1))]
    assert game.pile == -1
    assert game.is_finished
    assert game.phase == GamePhase.finished
    assert game.loser is recording_player
    (transition,) = recording_player.history
    assert transition.action == 3
    assert transition.reward == -1


def test_legal_next_states_follow_action_order():
    recording_player = RecordingPlayer()
    game = StickGame(recording_player, FixedPlayer(), pile_size=10, actions=(3, 1, 1))
    game.advance_one_turn()
    assert recording_player.offers == [(10, (7, 9, 9))]
    assert game.pile == 9


def test_turns_alternate():
    first_player, second_player = FixedPlayer(), FixedPlayer()
    game = StickGame(first_player, second_player, pile_size=3, starting_player_index=1)
    assert game.get_player() is second_player
    assert game.get_player(opponent=True) is first_player
    game.advance_one_turn()
    assert game.pile == 2
    assert game.get_player() is first_player
    assert len(second_player.history) == 1
    assert first_player.history == []
    game.advance_one_turn()
    game.advance_one_turn()
    assert game.pile == 0
    assert game.is_finished
    assert game.loser is second_player
    assert game.winner is first_player
    # The pointer flips even after the last move:
    assert game.active_player_index == 0
    with pytest.raises(GameOver):
        game.advance_one_turn()


def test_cheating_player_is_caught():
    cheating_player = CheatingPlayer()
    game = StickGame(cheating_player, FixedPlayer(), pile_size=5)
    with pytest.raises(ContractViolation) as exception_info:
        game.advance_one_turn()
    assert 'CheatingPlayer' in str(exception_info.value)
    assert exception_info.value.next_state == 42
    assert exception_info.value.legal_next_states == (4, 3, 2)
    assert game.pile == 5
    assert not game.is_finished


@pytest.mark.parametrize('kwargs', (
    {'actions': ()},
    {'actions': (1, 0)},
    {'actions': (1, -2)},
    {'actions': (1.5,)},
    {'pile_size': 0},
    {'pile_size': -3},
    {'pile_size': 2.5},
    {'starting_player_index': 2},
))
def test_bad_configuration(kwargs):
    with pytest.raises(ConfigurationError):
        StickGame(FixedPlayer(), FixedPlayer(), **kwargs)


def test_restart():
    first_player, second_player = FixedPlayer(), FixedPlayer()
    game = StickGame(first_player, second_player, pile_size=4)
    assert game.winner is game.loser is None
    game.play_out()
    assert game.is_finished
    assert first_player.history and second_player.history

    game.restart(1)
    assert game.pile == 4
    assert game.phase == GamePhase.in_progress
    assert game.get_player() is second_player
    assert game.winner is game.loser is None
    assert first_player.history == second_player.history == []
    # Statistics are not the engine's business:
    assert first_player.win_count + second_player.win_count == 1
    with pytest.raises(ConfigurationError):
        game.restart(-1)


def test_rewards_are_symmetric():
    random_source = random.Random(0)
    first_player = RandomPlayer(random_source)
    second_player = RandomPlayer(random_source)
    game = StickGame(first_player, second_player)
    n_games = 200
    for i in range(n_games):
        game.restart(random_source.randrange(2))
        game.play_out()
        assert sorted((first_player.rewards[-1], second_player.rewards[-1])) == [-1, 1]
        assert game.winner.rewards[-1] == 1
        assert game.loser.rewards[-1] == -1
        for player in (first_player, second_player):
            for transition in player.history:
                assert transition.next_state is not None
                assert transition.reward in (-1, 0, 1)
            assert all(transition.reward == 0 for transition in player.history[:-1])

    assert first_player.win_count + second_player.win_count == n_games
    assert first_player.lose_count + second_player.lose_count == n_games
    assert len(first_player.rewards) == len(second_player.rewards) == n_games


def test_render():
    game = StickGame(FixedPlayer(), FixedPlayer(), pile_size=5)
    assert game.render() == '| | | | |'
    game.advance_one_turn()
    assert game.render() == '| | | |'
    game.play_out()
    assert game.render() == ''
    assert 'finished' in repr(game)


@pytest.mark.parametrize('pile_size', (1, 2, 3))
def test_rewards_are_symmetric_when_the_opening_move_can_end_the_game(pile_size):
    random_source = random.Random(pile_size)
    first_player = RandomPlayer(random_source)
    second_player = RandomPlayer(random_source)
    game = StickGame(first_player, second_player, pile_size=pile_size)
    n_games = 50
    for i in range(n_games):
        game.restart(random_source.randrange(2))
        game.play_out()
        assert sorted((first_player.rewards[-1], second_player.rewards[-1])) == [-1, 1]
        assert game.winner.rewards[-1] == 1
        assert game.loser.rewards[-1] == -1

    assert first_player.win_count + second_player.win_count == n_games
    assert first_player.lose_count + second_player.lose_count == n_games


def test_winning_without_moving():
    first_player, second_player = FixedPlayer(), FixedPlayer()
    game = StickGame(first_player, second_player, pile_size=1)
    game.advance_one_turn()
    assert game.is_finished
    assert game.winner is second_player
    assert second_player.history == []
    assert second_player.win_count == 1
    assert second_player.rewards == [1]
    assert first_player.rewards == [-1]

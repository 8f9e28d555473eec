# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.

import random

import pytest

from nimby import training, LearningPlayer, FixedPlayer, RandomPlayer, HumanPlayer
from nimby.exceptions import ConfigurationError


def make_trained_player(seed: int, n_epochs: int = 5_000) -> LearningPlayer:
    random_source = random.Random(seed)
    player = LearningPlayer(learning_rate=0.1, random_source=random_source)
    opponent = LearningPlayer(learning_rate=0.1, random_source=random_source)
    training.train(player, opponent, n_epochs=n_epochs, random_source=random_source)
    return player


def test_train_iterate_decays_epsilon():
    random_source = random.Random(0)
    player = LearningPlayer(epsilon=0.99, random_source=random_source)
    opponent = LearningPlayer(epsilon=0.5, random_source=random_source)
    epochs = tuple(training.train_iterate(player, opponent, n_epochs=200,
                                          random_source=random_source))
    assert epochs == tuple(range(200))
    assert player.epsilon == pytest.approx(0.99 * 0.996 ** 200)
    assert opponent.epsilon == pytest.approx(0.5 * 0.996 ** 200)
    assert player.win_count + opponent.win_count == 200
    assert player.values and opponent.values

    training.train(player, opponent, n_epochs=1_000, random_source=random_source)
    assert player.epsilon == opponent.epsilon == 0.05


def test_train_against_non_learning_opponent():
    random_source = random.Random(1)
    player = LearningPlayer(random_source=random_source)
    fixed_player = FixedPlayer()
    assert training.train(player, fixed_player, n_epochs=50, pile_size=9, actions=(1, 2),
                          random_source=random_source) is player
    assert player.win_count + fixed_player.win_count == 50
    assert set(player.values) <= set(range(1, 10))


def test_training_is_reproducible():
    assert make_trained_player(3, 500).get_values() == make_trained_player(3, 500).get_values()


def test_trained_player_beats_random_player():
    reports = []
    for _ in range(2):
        player = make_trained_player(seed=0)
        player.epsilon = 0
        reports.append(training.evaluate(player, n_games=1_000,
                                         random_source=random.Random(1)))
    first_report, second_report = reports
    assert first_report == second_report
    assert first_report.n_games == 1_000
    assert first_report.win_rate > 0.6
    assert first_report.mean_reward > 0.2


def test_evaluate():
    player = FixedPlayer()
    player.turn_finished(True, True, 1, 0, 1)
    assert player.lose_count == 1

    opponent = FixedPlayer()
    report = training.evaluate(player, n_games=10, opponent=opponent, pile_size=4,
                               random_source=random.Random(0))
    # Both take one stick every time, so whoever moves second takes the last stick.
    assert report.win_count + report.lose_count == 10
    assert report.win_count == player.win_count
    assert report.lose_count == opponent.win_count
    assert report.win_rate == report.win_count / 10
    assert report.mean_reward == pytest.approx((report.win_count - report.lose_count) / 10)
    assert 'out of 10 games' in str(report)

    with pytest.raises(ConfigurationError):
        training.evaluate(player, n_games=0)


def test_evaluate_against_random_player_by_default():
    report = training.evaluate(RandomPlayer(random.Random(2)), n_games=300,
                               random_source=random.Random(3))
    assert 0.35 < report.win_rate < 0.65


@pytest.mark.parametrize('pile_size,expected_ending', ((4, 'You win !'), (5, 'Game Over...')))
def test_play_interactively(pile_size, expected_ending):
    lines = []
    human = HumanPlayer(prompt=lambda text: '1', emit=lines.append)
    agent = FixedPlayer()
    training.play_interactively(human, agent, emit=lines.append, n_games=1,
                                pile_size=pile_size)
    assert lines[0] == ' '.join('|' * pile_size)
    assert expected_ending in lines
    assert lines[-2] == training.SEPARATOR
    assert lines.count(training.SEPARATOR) == 1


def test_play_interactively_with_learning_agent():
    lines = []
    human = HumanPlayer(prompt=lambda text: '1', emit=lines.append)
    agent = LearningPlayer({1: -1.0, 5: -1.0}, epsilon=0.9, random_source=random.Random(0))
    training.play_interactively(human, agent, emit=lines.append, n_games=2, human_first=False,
                                pile_size=6)
    assert agent.epsilon == 0
    # The agent leaves 5, then 1, and the human has to take the last stick, twice.
    assert lines.count('Game Over...') == 2
    assert lines.count(training.SEPARATOR) == 2
    assert agent.win_count == 1 # Statistics are reset before each game.


@pytest.mark.parametrize('pile_size', (1, 2, 3))
def test_evaluate_when_the_opening_move_can_end_the_game(pile_size):
    player = FixedPlayer()
    opponent = RandomPlayer(random.Random(4))
    report = training.evaluate(player, n_games=50, opponent=opponent, pile_size=pile_size,
                               random_source=random.Random(0))
    assert report.n_games == report.win_count + report.lose_count == 50
    assert opponent.win_count + player.win_count == 50
    assert report.win_rate == player.ledger.win_rate
    assert report.mean_reward == player.ledger.mean_reward


def test_training_on_a_short_pile():
    random_source = random.Random(6)
    player = LearningPlayer(random_source=random_source)
    opponent = LearningPlayer(random_source=random_source)
    training.train(player, opponent, n_epochs=100, pile_size=3, random_source=random_source)
    assert player.win_count + opponent.win_count == 100
    assert player.lose_count + opponent.lose_count == 100

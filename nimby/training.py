# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.

'''The loops that train learning players, evaluate them, and let people play against them.'''

from __future__ import annotations

import dataclasses
import itertools
import numbers
import random
import logging
from typing import Iterable, Iterator, Optional, Callable, Any

import click
import more_itertools

from . import constants
from .exceptions import ConfigurationError
from .playing import Player, RandomPlayer
from .learning import LearningPlayer
from .gaming import StickGame

logger = logging.getLogger(__name__)

SEPARATOR = '=' * 23


def train_iterate(player: Player, opponent: Player, *,
                  n_epochs: Optional[int] = constants.DEFAULT_N_EPOCHS,
                  pile_size: int = constants.DEFAULT_PILE_SIZE,
                  actions: Iterable[int] = constants.DEFAULT_ACTIONS,
                  epsilon_decay: numbers.Real = constants.DEFAULT_EPSILON_DECAY,
                  min_epsilon: numbers.Real = constants.DEFAULT_MIN_EPSILON,
                  random_source: Optional[random.Random] = None) -> Iterator[int]:
    '''
    Let two players play each other over and over, training the ones that can learn.

    Yields the number of each epoch after it's done. Pass `n_epochs=None` to go on forever.
    '''
    random_source = random_source or random.Random()
    learning_players = tuple(p for p in (player, opponent) if isinstance(p, LearningPlayer))
    game = StickGame(player, opponent, starting_player_index=random_source.randrange(2),
                     pile_size=pile_size, actions=actions)
    epochs = range(n_epochs) if n_epochs is not None else itertools.count()
    for epoch in epochs:
        game.play_out()
        for learning_player in learning_players:
            learning_player.train()
            learning_player.decay_epsilon(epsilon_decay, min_epsilon)
        game.restart(random_source.randrange(2))
        if epoch % 1_000 == 0:
            logger.debug(f'Finished epoch {epoch} out of {n_epochs or "infinity"}, '
                         f'{player} won {player.win_count} games so far.')
        yield epoch


def train(player: Player, opponent: Player, **kwargs) -> Player:
    more_itertools.consume(train_iterate(player, opponent, **kwargs))
    return player


def train_progress_bar(player: Player, opponent: Player, *, label: Optional[str] = None,
                       n_epochs: int = constants.DEFAULT_N_EPOCHS, **kwargs) -> Player:
    if label is None:
        label = repr(player)
    logger.info(f'Training {label} for {n_epochs:,} epochs...')
    progress_bar = click.progressbar(train_iterate(player, opponent, n_epochs=n_epochs,
                                                   **kwargs),
                                     length=n_epochs, label='Training')
    with progress_bar:
        more_itertools.consume(progress_bar)
    logger.info(f'Finished training {label}.')
    return player


@dataclasses.dataclass(frozen=True)
class EvaluationReport:
    n_games: int
    win_count: int
    lose_count: int
    win_rate: float
    mean_reward: float

    def __str__(self) -> str:
        return (f'Won {self.win_count:,} out of {self.n_games:,} games. '
                f'Win rate: {self.win_rate:.3f}, win mean: {self.mean_reward:.3f}')


def evaluate(player: Player, *, n_games: int = constants.DEFAULT_N_EVALUATION_GAMES,
             opponent: Optional[Player] = None,
             pile_size: int = constants.DEFAULT_PILE_SIZE,
             actions: Iterable[int] = constants.DEFAULT_ACTIONS,
             random_source: Optional[random.Random] = None) -> EvaluationReport:
    '''
    Play `n_games` games against `opponent` (a random player by default) and report the result.

    Both players' statistics are reset first. Learning players aren't trained and their epsilon
    is left alone, so set it to 0 beforehand if you want to see them at their best.
    '''
    if n_games <= 0:
        raise ConfigurationError(f'Need at least one game to evaluate, got {n_games}.')
    random_source = random_source or random.Random()
    if opponent is None:
        opponent = RandomPlayer(random_source)
    player.reset_statistics()
    opponent.reset_statistics()

    game = StickGame(player, opponent, pile_size=pile_size, actions=actions)
    for _ in range(n_games):
        game.restart(random_source.randrange(2))
        game.play_out()

    ledger = player.ledger
    return EvaluationReport(
        n_games=ledger.n_games,
        win_count=ledger.win_count,
        lose_count=ledger.lose_count,
        win_rate=ledger.win_rate,
        mean_reward=ledger.mean_reward,
    )


def play_interactively(human: Player, agent: Player, *,
                       emit: Callable[[str], Any] = click.echo,
                       n_games: Optional[int] = None, human_first: bool = True,
                       pile_size: int = constants.DEFAULT_PILE_SIZE,
                       actions: Iterable[int] = constants.DEFAULT_ACTIONS) -> None:
    '''
    Let a person play against `agent`, game after game.

    The agent plays its best moves only. Pass `n_games` to stop after that many games, otherwise
    this goes on until the person aborts.
    '''
    if isinstance(agent, LearningPlayer):
        agent.epsilon = 0
    game = StickGame(human, agent, pile_size=pile_size, actions=actions)
    games = range(n_games) if n_games is not None else itertools.count()
    for _ in games:
        agent.reset_statistics()
        game.restart(0 if human_first else 1)
        while not game.is_finished:
            emit(game.render())
            game.advance_one_turn()
            emit('')
        if game.winner is agent:
            emit('Game Over...')
        else:
            emit('You win !')
        emit(SEPARATOR)
        emit('')

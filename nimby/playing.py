# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.

from __future__ import annotations

import abc
import enum
import inspect
import random
import logging
from typing import Sequence, Optional, Callable, List, Any

import click

from . import utils
from .base import Ledger, Transition

logger = logging.getLogger(__name__)


def _prompt(text: str) -> str:
    return click.prompt(text, type=str)


class PlayerKind(enum.Enum):
    fixed = 'fixed'
    random = 'random'
    human = 'human'
    learning = 'learning'


class Player(abc.ABC):
    '''
    Something that can sit at the table and play the stick game.

    Subclasses decide which pile to leave for the opponent in `play`. The end-of-turn bookkeeping
    is done by the player's `ledger`, which is the same for every kind of player.
    '''

    kind: PlayerKind

    def __init__(self) -> None:
        self.ledger = Ledger()

    @abc.abstractmethod
    def play(self, state: int, legal_next_states: Sequence[int]) -> int:
        '''Given the pile and the piles we could leave behind, pick one of the latter.'''
        raise NotImplementedError

    def turn_finished(self, is_self: bool, is_terminal: bool, previous_state: int,
                      next_state: int, action: int) -> None:
        self.ledger.turn_finished(is_self, is_terminal, previous_state, next_state, action)

    def reset_game_history(self) -> None:
        self.ledger.reset_history()

    def reset_statistics(self) -> None:
        self.ledger.reset_statistics()

    history: List[Transition] = property(lambda self: self.ledger.history)
    rewards: List[int] = property(lambda self: self.ledger.rewards)
    win_count: int = property(lambda self: self.ledger.win_count)
    lose_count: int = property(lambda self: self.ledger.lose_count)

    def __repr__(self) -> str:
        return f'{type(self).__name__}{self._extra_repr()}'

    def _extra_repr(self) -> str:
        return ('(<...>)' if inspect.signature(self.__init__).parameters else '()')


class FixedPlayer(Player):
    '''A player that always removes the first allowed amount of sticks.'''

    kind = PlayerKind.fixed

    def play(self, state: int, legal_next_states: Sequence[int]) -> int:
        return legal_next_states[0]


class RandomPlayer(Player):

    kind = PlayerKind.random

    def __init__(self, random_source: Optional[random.Random] = None) -> None:
        Player.__init__(self)
        self.random_source = random_source or random.Random()

    def play(self, state: int, legal_next_states: Sequence[int]) -> int:
        return utils.random_choice(legal_next_states, self.random_source)

    def _extra_repr(self) -> str:
        return '()'


class HumanPlayer(Player):
    '''
    A player that asks a person which move to make.

    `prompt` is called with a short text and should return what the person typed; `emit` is
    called with lines to show them. Both default to the terminal. Bad answers are reported
    through `emit` and the question is asked again, for as long as it takes.
    '''

    kind = PlayerKind.human

    def __init__(self, prompt: Optional[Callable[[str], str]] = None,
                 emit: Optional[Callable[[str], Any]] = None) -> None:
        Player.__init__(self)
        self.prompt = prompt or _prompt
        self.emit = emit or click.echo

    def play(self, state: int, legal_next_states: Sequence[int]) -> int:
        n_options = len(legal_next_states)
        for i, next_state in enumerate(legal_next_states, start=1):
            self.emit(f'{i}: Take {state - next_state}, leaving {max(next_state, 0)}')
        while True:
            raw_answer = self.prompt('Action')
            try:
                index = int(raw_answer.strip())
            except ValueError:
                logger.debug(f'Ignoring non-numeric answer {raw_answer!r}.')
                self.emit(f'{raw_answer!r} is not a number, try again.')
                continue
            if 1 <= index <= n_options:
                return legal_next_states[index - 1]
            self.emit(f'Bad action {index}, pick a number between 1 and {n_options}.')

    def _extra_repr(self) -> str:
        return '()'


def make_player(kind: PlayerKind, **kwargs) -> Player:
    player_types = {
        PlayerKind.fixed: FixedPlayer,
        PlayerKind.random: RandomPlayer,
        PlayerKind.human: HumanPlayer,
        PlayerKind.learning: LearningPlayer,
    }
    return player_types[PlayerKind(kind)](**kwargs)


from .learning import LearningPlayer

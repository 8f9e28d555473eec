# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.

from __future__ import annotations

import collections
import numbers
import random
import logging
from typing import Sequence, Optional, Mapping, Iterable, Union

from immutabledict import immutabledict as ImmutableDict

from . import utils
from . import constants
from .exceptions import ConfigurationError
from .playing import Player, PlayerKind

logger = logging.getLogger(__name__)


class ValueTable(collections.UserDict):
    '''
    How good each pile is for the player who's about to move from it.

    Piles that were never seen are worth 0. Use `get_value` to read with that default; indexing
    with `[]` raises `KeyError` on unseen piles like any other dict.
    '''

    def get_value(self, state: Optional[int]) -> float:
        return self.data.get(state, 0)

    def snapshot(self) -> ImmutableDict:
        return ImmutableDict(sorted(self.data.items()))


class LearningPlayer(Player):
    '''
    A player that learns the value of each pile by playing, temporal-difference style.

    It moves epsilon-greedily: with probability `epsilon` it explores with a random move,
    otherwise it leaves the pile that's worst for the opponent. Call `train` after each game to
    update the value table from that game's transitions.
    '''

    kind = PlayerKind.learning

    def __init__(self, values: Optional[Union[Mapping[int, numbers.Real], ValueTable]] = None, *,
                 epsilon: numbers.Real = constants.DEFAULT_EPSILON,
                 learning_rate: numbers.Real = constants.DEFAULT_LEARNING_RATE,
                 random_source: Optional[random.Random] = None) -> None:
        Player.__init__(self)
        if not 0 <= epsilon <= 1:
            raise ConfigurationError(f'Epsilon must be between 0 and 1, got {epsilon}.')
        if not learning_rate > 0:
            raise ConfigurationError(f'Learning rate must be positive, got {learning_rate}.')
        self.values = values if isinstance(values, ValueTable) else ValueTable(values or {})
        self.epsilon = epsilon
        self.learning_rate = learning_rate
        self.random_source = random_source or random.Random()

    def play(self, state: int, legal_next_states: Sequence[int]) -> int:
        if self.random_source.random() < self.epsilon:
            return utils.random_choice(legal_next_states, self.random_source)
        else:
            return self.greedy_step(state, legal_next_states)

    def greedy_step(self, state: int, legal_next_states: Sequence[int]) -> int:
        # `min` keeps the first of equally-valued piles.
        return min(legal_next_states, key=self.values.get_value)

    def train(self) -> None:
        # Going backwards, so the final reward reaches earlier piles within this same game.
        for transition in reversed(self.history):
            previous_value = self.values.get_value(transition.previous_state)
            if transition.is_terminal:
                target = transition.reward
            else:
                target = self.values.get_value(transition.next_state)
            previous_value += self.learning_rate * (target - previous_value)
            self.values[transition.previous_state] = previous_value
        logger.debug(f'{self} trained on {len(self.history)} transitions.')

    def decay_epsilon(self, factor: numbers.Real = constants.DEFAULT_EPSILON_DECAY,
                      minimum: numbers.Real = constants.DEFAULT_MIN_EPSILON) -> None:
        self.epsilon = max(self.epsilon * factor, minimum)

    def get_values(self) -> ImmutableDict:
        return self.values.snapshot()

    def get_greedy_moves(self, states: Iterable[int],
                         actions: Sequence[int] = constants.DEFAULT_ACTIONS) -> ImmutableDict:
        '''Map each of `states` to the amount of sticks we'd take there when not exploring.'''
        return ImmutableDict(
            (state, state - self.greedy_step(state, tuple(state - action for action in actions)))
            for state in states
        )

    def _extra_repr(self) -> str:
        return f'(epsilon={self.epsilon:.3f}, learning_rate={self.learning_rate})'

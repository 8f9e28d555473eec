# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.

from __future__ import annotations

import enum
import numbers
import logging
from typing import Iterable, Optional, Tuple

from . import constants
from .exceptions import ConfigurationError, ContractViolation, GameOver
from .playing import Player

logger = logging.getLogger(__name__)


class GamePhase(enum.Enum):
    in_progress = 'in_progress'
    finished = 'finished'


def _validate_actions(actions: Iterable[int]) -> Tuple[int, ...]:
    actions = tuple(actions)
    if not actions:
        raise ConfigurationError('There must be at least one allowed action.')
    for action in actions:
        if not isinstance(action, numbers.Integral) or isinstance(action, bool) or action <= 0:
            raise ConfigurationError(f'Actions must be positive integers, got {action!r}.')
    return actions


class StickGame:
    '''
    A pile of sticks and two players who take turns removing some of them.

    Each turn the active player takes one of the allowed amounts. The player who empties the pile
    (or would overshoot past empty) loses. Call `advance_one_turn` until `is_finished`, or just
    call `play_out`.
    '''

    def __init__(self, first_player: Player, second_player: Player, *,
                 starting_player_index: int = 0,
                 pile_size: int = constants.DEFAULT_PILE_SIZE,
                 actions: Iterable[int] = constants.DEFAULT_ACTIONS) -> None:
        if isinstance(pile_size, bool) or not isinstance(pile_size, numbers.Integral) or \
                                                                                  pile_size <= 0:
            raise ConfigurationError(f'Pile size must be a positive integer, got {pile_size!r}.')
        self.players = (first_player, second_player)
        self.pile_size = pile_size
        self.actions = _validate_actions(actions)
        self.restart(starting_player_index)

    def restart(self, starting_player_index: int = 0) -> None:
        if starting_player_index not in (0, 1):
            raise ConfigurationError(f'The starting player index must be 0 or 1, got '
                                     f'{starting_player_index!r}.')
        self.pile = self.pile_size
        self.phase = GamePhase.in_progress
        self.active_player_index = starting_player_index
        self.loser_index: Optional[int] = None
        for player in self.players:
            player.reset_game_history()

    @property
    def is_finished(self) -> bool:
        return self.phase == GamePhase.finished

    def get_player(self, opponent: bool = False) -> Player:
        return self.players[self.active_player_index ^ opponent]

    @property
    def legal_next_states(self) -> Tuple[int, ...]:
        return tuple(self.pile - action for action in self.actions)

    def advance_one_turn(self) -> None:
        if self.is_finished:
            raise GameOver
        player = self.get_player()
        opponent = self.get_player(opponent=True)

        legal_next_states = self.legal_next_states
        if not legal_next_states:
            raise ConfigurationError('There are no legal moves, check the allowed actions.')

        previous_pile = self.pile
        next_pile = player.play(previous_pile, legal_next_states)
        if next_pile not in legal_next_states:
            raise ContractViolation(player, next_pile, legal_next_states)

        self.pile = next_pile
        if self.pile <= 0:
            self.phase = GamePhase.finished
            self.loser_index = self.active_player_index

        action = previous_pile - next_pile
        logger.debug(f'{player} took {action} sticks, {previous_pile} -> {next_pile}.')
        player.turn_finished(True, self.is_finished, previous_pile, next_pile, action)
        opponent.turn_finished(False, self.is_finished, previous_pile, next_pile, action)

        self.active_player_index ^= 1

    def play_out(self) -> None:
        while not self.is_finished:
            self.advance_one_turn()

    @property
    def loser(self) -> Optional[Player]:
        return None if self.loser_index is None else self.players[self.loser_index]

    @property
    def winner(self) -> Optional[Player]:
        return None if self.loser_index is None else self.players[self.loser_index ^ 1]

    def render(self) -> str:
        return ' '.join('|' * max(self.pile, 0))

    def __repr__(self) -> str:
        return (f'<{type(self).__name__}: pile={self.pile}, actions={self.actions}, '
                f'{self.phase.value}>')

# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.

from __future__ import annotations

from typing import Any


class NimbyException(Exception):
    pass


class ConfigurationError(NimbyException):
    '''The game or the program was set up with values that can't work.'''


class ContractViolation(NimbyException):
    def __init__(self, player: Any, next_state: Any, legal_next_states: tuple) -> None:
        self.player = player
        self.next_state = next_state
        self.legal_next_states = legal_next_states
        NimbyException.__init__(
            self,
            f'{player!r} returned {next_state!r}, which is not one of the legal next states '
            f'{legal_next_states!r}.'
        )


class GameOver(NimbyException):
    '''You tried to go forward in a game that's already over.'''
    pass

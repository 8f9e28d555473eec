# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.

'''
Nimby is a cute reinforcement learning playground for the stick game.

Two players take turns removing sticks from a pile; whoever takes the last stick loses. Nimby
defines players, a game engine that runs them against each other, and a learning player that
figures out the game by playing against itself.

See `nimby.training` for the loops that train, evaluate and play against the learning player.
'''

import collections

from . import exceptions
from . import utils
from .base import Transition, Ledger
from .playing import Player, PlayerKind, FixedPlayer, RandomPlayer, HumanPlayer, make_player
from .learning import LearningPlayer, ValueTable
from .gaming import StickGame, GamePhase

__VersionInfo = collections.namedtuple('VersionInfo',
                                       ('major', 'minor', 'micro'))

__version__ = '0.1.0'
__version_info__ = __VersionInfo(*(map(int, __version__.split('.'))))

del collections, __VersionInfo # Avoid polluting the namespace

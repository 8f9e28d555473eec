# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.

from __future__ import annotations

import dataclasses
from typing import Optional, List

import numpy as np

LOSE_REWARD = -1
WIN_REWARD = 1
NOTHING_REWARD = 0


@dataclasses.dataclass
class Transition:
    '''
    One move made by a player, from that player's point of view.

    `next_state` is the pile the player will face on its next turn, so it's only known once the
    opponent has moved. Until then it's `None`.
    '''
    previous_state: int
    action: int
    next_state: Optional[int] = None
    reward: int = NOTHING_REWARD

    @property
    def is_pending(self) -> bool:
        return self.next_state is None

    @property
    def is_terminal(self) -> bool:
        return self.reward != NOTHING_REWARD


class Ledger:
    '''
    The bookkeeping that every player does at the end of each turn.

    A ledger keeps the transitions of the current game, plus win/lose statistics that survive
    across games until `reset_statistics` is called.
    '''
    def __init__(self) -> None:
        self.history: List[Transition] = []
        self.rewards: List[int] = []
        self.win_count = 0
        self.lose_count = 0

    def reset_history(self) -> None:
        self.history = []

    def reset_statistics(self) -> None:
        self.win_count = 0
        self.lose_count = 0
        self.rewards = []

    def turn_finished(self, is_self: bool, is_terminal: bool, previous_state: int,
                      next_state: int, action: int) -> None:
        if is_self:
            transition = Transition(previous_state=previous_state, action=action)
            self.history.append(transition)
            if is_terminal: # We took the last stick, so we lost.
                transition.next_state = next_state
                transition.reward = LOSE_REWARD
                self.rewards.append(LOSE_REWARD)
                self.lose_count += 1
        else:
            # With no history, the opponent's opening move may still end the game.
            if self.history:
                transition = self.history[-1]
                transition.next_state = next_state
                if is_terminal:
                    transition.reward = WIN_REWARD
            if is_terminal: # The opponent took the last stick, so we won.
                self.rewards.append(WIN_REWARD)
                self.win_count += 1

    @property
    def n_games(self) -> int:
        return self.win_count + self.lose_count

    @property
    def win_rate(self) -> float:
        return (self.win_count / self.n_games) if self.n_games else float('nan')

    @property
    def mean_reward(self) -> float:
        return float(np.mean(self.rewards)) if self.rewards else float('nan')

    def __repr__(self) -> str:
        return (f'<{type(self).__name__}: {len(self.history)} transitions, '
                f'{self.win_count} wins, {self.lose_count} losses>')

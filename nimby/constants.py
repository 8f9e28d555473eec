# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.

import pathlib
import functools
import json
from typing import Any

from .exceptions import ConfigurationError

DEFAULT_PILE_SIZE = 24
DEFAULT_ACTIONS = (1, 2, 3)

DEFAULT_EPSILON = 0.99
DEFAULT_LEARNING_RATE = 0.001
DEFAULT_EPSILON_DECAY = 0.996
DEFAULT_MIN_EPSILON = 0.05

DEFAULT_N_EPOCHS = 10_000
DEFAULT_N_EVALUATION_GAMES = 1_000

defaults = {
    'pile_size': DEFAULT_PILE_SIZE,
    'actions': DEFAULT_ACTIONS,
    'epsilon': DEFAULT_EPSILON,
    'learning_rate': DEFAULT_LEARNING_RATE,
    'epsilon_decay': DEFAULT_EPSILON_DECAY,
    'min_epsilon': DEFAULT_MIN_EPSILON,
    'n_epochs': DEFAULT_N_EPOCHS,
    'n_evaluation_games': DEFAULT_N_EVALUATION_GAMES,
}

nimby_folder: pathlib.Path = pathlib.Path.home() / '.nimby'
config_path: pathlib.Path = nimby_folder / 'config.json'
logs_folder: pathlib.Path = nimby_folder / 'logs'


@functools.cache
def read_config() -> dict:
    try:
        content = config_path.read_text()
    except FileNotFoundError:
        return {}
    try:
        config = json.loads(content)
    except json.JSONDecodeError as json_decode_error:
        raise ConfigurationError(f"Can't parse {config_path}: {json_decode_error}") \
                                                                     from json_decode_error
    if not isinstance(config, dict):
        raise ConfigurationError(f'{config_path} should contain a JSON object.')
    return config


def get_setting(name: str) -> Any:
    '''Get a setting from the user's `config.json`, falling back to the built-in default.'''
    default = defaults[name]
    value = read_config().get(name, default)
    if name == 'actions':
        if not (isinstance(value, (list, tuple)) and
                all(isinstance(item, int) and not isinstance(item, bool) for item in value)):
            raise ConfigurationError(f'The actions in {config_path} should be a list of '
                                     f'integers, like [1, 2, 3], got {value!r}.')
        return tuple(value)
    return value

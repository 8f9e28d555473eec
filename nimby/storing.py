# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.

'''Reading and writing value tables as JSON files.'''

from __future__ import annotations

import json
import numbers
import os
import pathlib
import logging
from typing import Mapping, Union

from .exceptions import ConfigurationError
from .learning import ValueTable

logger = logging.getLogger(__name__)


def save_values(values: Mapping[int, numbers.Real], path: Union[str, os.PathLike]) -> None:
    path = pathlib.Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    content = {str(state): float(value) for state, value in sorted(values.items())}
    path.write_text(json.dumps(content, indent=4))
    logger.info(f'Saved {len(content)} values to {path}.')


def load_values(path: Union[str, os.PathLike]) -> ValueTable:
    path = pathlib.Path(path)
    try:
        content = json.loads(path.read_text())
    except FileNotFoundError as file_not_found_error:
        raise ConfigurationError(f"There's no value file at {path}.") from file_not_found_error
    except json.JSONDecodeError as json_decode_error:
        raise ConfigurationError(f"Can't parse {path}: {json_decode_error}") \
                                                                      from json_decode_error
    if not isinstance(content, dict):
        raise ConfigurationError(f'{path} should contain a JSON object.')
    try:
        values = ValueTable({int(state): float(value) for state, value in content.items()})
    except (TypeError, ValueError) as error:
        raise ConfigurationError(f'{path} should map piles to numbers: {error}') from error
    logger.debug(f'Loaded {len(values)} values from {path}.')
    return values

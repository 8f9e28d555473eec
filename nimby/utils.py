# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.

'''A collection of general-purpose tools.'''

from __future__ import annotations

import tempfile
import shutil
import pathlib
import contextlib
import random
from typing import Sequence, Optional, TypeVar

T = TypeVar('T')


def random_choice(sequence: Sequence[T], random_source: Optional[random.Random] = None) -> T:
    '''
    Pick one item of `sequence`, uniformly at random.

    Pass a seeded `random.Random` as `random_source` to get reproducible picks. Items that appear
    more than once in `sequence` are separate choices, so they're more likely to be picked.
    '''
    if random_source is None:
        random_source = random.Random()
    return random_source.choice(sequence)


@contextlib.contextmanager
def create_temp_folder(prefix: str = tempfile.template, suffix: str = '',
                       parent_folder: Optional[str] = None) -> pathlib.Path:
    '''
    Context manager that creates a temporary folder and deletes it after usage.

    Example:

        with create_temp_folder() as temp_folder:

            # We have a temporary folder!
            assert temp_folder.is_dir()

            # We can create files in it:
            (temp_folder / 'values.json').write_text('{}')

        # The suite is finished, now it's all cleaned:
        assert not temp_folder.exists()

    '''
    temp_folder = pathlib.Path(tempfile.mkdtemp(prefix=prefix, suffix=suffix,
                                                dir=parent_folder))
    try:
        yield temp_folder
    finally:
        shutil.rmtree(str(temp_folder))

# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.

import pathlib
import logging.config
import datetime as datetime_module
import re
import shlex
from typing import Optional


from . import constants


MAX_LOG_FILES_TO_KEEP = 100


def clean_logs_folder() -> None:
    logs = tuple(constants.logs_folder.glob('*.log'))
    if len(logs) >= MAX_LOG_FILES_TO_KEEP:
        logs_to_delete = sorted(logs, key=lambda path: path.stat().st_mtime)[
                                                                 : -(MAX_LOG_FILES_TO_KEEP - 1)]
        for log_to_delete in logs_to_delete:
            log_to_delete.unlink()


def make_log_file_path() -> pathlib.Path:
    constants.logs_folder.mkdir(parents=True, exist_ok=True)
    clean_logs_folder()
    now = datetime_module.datetime.now()
    log_file_stem = re.sub('[^0-9]+', '-', now.isoformat(timespec='milliseconds'))
    assert re.fullmatch('[0-9-]+', log_file_stem)
    return constants.logs_folder / f'{log_file_stem}.log'


log_file_path: Optional[pathlib.Path] = None
did_logging_setup: bool = False


def setup(*, verbose: bool = False, log_to_file: bool = True) -> None:
    '''Configure logging for a Nimby run. Calling this again does nothing.'''
    global log_file_path, did_logging_setup
    if did_logging_setup:
        return

    handlers = {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'DEBUG' if verbose else 'INFO',
            'formatter': 'simple',
        },
    }
    if log_to_file:
        log_file_path = make_log_file_path()
        handlers['file'] = {
            'level': 'DEBUG',
            'class': 'logging.FileHandler',
            'filename': log_file_path,
            'mode': 'a',
            'formatter': 'verbose',
        }

    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'verbose': {
                    'format': '{levelname} {asctime} {module} | {message}',
                    'style': '{',
                },
                'simple': {
                    'format': '{message}',
                    'style': '{',
                },
            },
            'handlers': handlers,
            'loggers': {
                'nimby': {
                    'handlers': tuple(handlers),
                    'level': 'DEBUG',
                },
            },
        }
    )

    logger = logging.getLogger(__name__)
    if log_to_file:
        logger.info(f'Log file: {shlex.quote(str(log_file_path))}')
    did_logging_setup = True

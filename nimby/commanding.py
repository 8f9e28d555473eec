# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.

import contextlib
import functools
import logging
import platform
import random
import sys
from typing import Optional, Tuple, Any

import click

from . import constants
from . import logging_setup
from . import storing
from . import training
from .exceptions import NimbyException
from .learning import LearningPlayer
from .playing import HumanPlayer

logger = logging.getLogger(__name__)


def _setting(name: str):
    return functools.partial(constants.get_setting, name)


def _actions_setting() -> str:
    return ','.join(map(str, constants.get_setting('actions')))


def parse_actions(context: click.Context, parameter: click.Parameter,
                  value: Any) -> Tuple[int, ...]:
    try:
        return tuple(int(item) for item in value.split(','))
    except ValueError as value_error:
        raise click.BadParameter(f'{value!r} should be comma-separated integers, like 1,2,3.') \
                                                                            from value_error


def make_random_source(seed: Optional[int]) -> random.Random:
    if seed is not None:
        logger.debug(f'Using random seed {seed}.')
    return random.Random(seed)


def echo_values(player: LearningPlayer, pile_size: int, actions: Tuple[int, ...]) -> None:
    click.echo('Values:')
    greedy_moves = player.get_greedy_moves(range(1, pile_size + 1), actions)
    for state, value in player.get_values().items():
        move = greedy_moves.get(state)
        click.echo(f'    {state:>4}: {value: .4f}' +
                   (f'    (takes {move})' if move is not None else ''))


game_options = (
    click.option('--pile-size', type=int, default=_setting('pile_size'), show_default=True),
    click.option('--actions', default=_actions_setting, callback=parse_actions,
                 help='Comma-separated amounts of sticks a player may take.'),
    click.option('--seed', type=int, default=None, help='Seed for reproducible runs.'),
)


def add_game_options(function):
    for option in reversed(game_options):
        function = option(function)
    return function


@click.group()
@click.option('-v', '--verbose', is_flag=True)
@click.option('--log-to-file/--dont-log-to-file', is_flag=True, default=True)
def nimby_command_group(*, verbose: bool = False, log_to_file: bool = True) -> None:
    from nimby import __version__
    logging_setup.setup(verbose=verbose, log_to_file=log_to_file)
    logger.debug(f'Starting Nimby {__version__}, Python version {platform.python_version()}')
    logger.debug(f'{sys.argv=}')


@nimby_command_group.result_callback()
def nimby_done(result: Any, *, verbose: bool = False, log_to_file: bool = True) -> None:
    logger.debug(f'Nimby finished, exiting.')


@nimby_command_group.command()
@add_game_options
@click.option('-n', '--n-epochs', type=int, default=_setting('n_epochs'), show_default=True)
@click.option('--epsilon', type=float, default=_setting('epsilon'), show_default=True)
@click.option('--learning-rate', type=float, default=_setting('learning_rate'),
              show_default=True)
@click.option('--epsilon-decay', type=float, default=_setting('epsilon_decay'),
              show_default=True)
@click.option('--min-epsilon', type=float, default=_setting('min_epsilon'), show_default=True)
@click.option('--load-values', type=click.Path(dir_okay=False), default=None)
@click.option('--save-values', type=click.Path(dir_okay=False), default=None)
@click.option('--n-evaluation-games', type=int, default=_setting('n_evaluation_games'),
              show_default=True)
@click.option('--progress-bar/--no-progress-bar', default=True)
def train(*, pile_size: int, actions: Tuple[int, ...], seed: Optional[int], n_epochs: int,
          epsilon: float, learning_rate: float, epsilon_decay: float, min_epsilon: float,
          load_values: Optional[str], save_values: Optional[str], n_evaluation_games: int,
          progress_bar: bool) -> None:
    '''Train a learning player against another learning player, then evaluate it.'''
    random_source = make_random_source(seed)
    values = storing.load_values(load_values) if load_values else None
    player = LearningPlayer(values, epsilon=epsilon, learning_rate=learning_rate,
                            random_source=random_source)
    opponent = LearningPlayer(epsilon=epsilon, learning_rate=learning_rate,
                              random_source=random_source)
    train_function = training.train_progress_bar if progress_bar else training.train
    train_function(player, opponent, n_epochs=n_epochs, pile_size=pile_size, actions=actions,
                   epsilon_decay=epsilon_decay, min_epsilon=min_epsilon,
                   random_source=random_source)

    echo_values(player, pile_size, actions)
    if n_evaluation_games:
        report = training.evaluate(player, n_games=n_evaluation_games, pile_size=pile_size,
                                   actions=actions, random_source=random_source)
        click.echo(f'Win rate: {report.win_rate}')
        click.echo(f'Win mean: {report.mean_reward}')

    if save_values:
        storing.save_values(player.values, save_values)


@nimby_command_group.command()
@add_game_options
@click.argument('values_path', type=click.Path(dir_okay=False))
@click.option('-n', '--n-games', type=int, default=_setting('n_evaluation_games'),
              show_default=True)
def evaluate(*, values_path: str, pile_size: int, actions: Tuple[int, ...],
             seed: Optional[int], n_games: int) -> None:
    '''Pit a trained player, loaded from VALUES_PATH, against a random player.'''
    random_source = make_random_source(seed)
    player = LearningPlayer(storing.load_values(values_path), epsilon=0,
                            random_source=random_source)
    report = training.evaluate(player, n_games=n_games, pile_size=pile_size, actions=actions,
                               random_source=random_source)
    click.echo(str(report))


@nimby_command_group.command()
@add_game_options
@click.option('--load-values', type=click.Path(dir_okay=False), default=None,
              help="A trained player's values. If missing, a player is trained first.")
@click.option('--n-epochs', type=int, default=_setting('n_epochs'), show_default=True,
              help='Training epochs when there are no values to load.')
@click.option('--human-first/--agent-first', default=True)
@click.option('--n-games', type=int, default=None, help='Stop after this many games.')
def play(*, pile_size: int, actions: Tuple[int, ...], seed: Optional[int],
         load_values: Optional[str], n_epochs: int, human_first: bool,
         n_games: Optional[int]) -> None:
    '''Play against a trained player in the terminal.'''
    random_source = make_random_source(seed)
    if load_values:
        agent = LearningPlayer(storing.load_values(load_values), random_source=random_source)
    else:
        agent = LearningPlayer(random_source=random_source)
        training.train_progress_bar(
            agent, LearningPlayer(random_source=random_source), n_epochs=n_epochs,
            pile_size=pile_size, actions=actions, random_source=random_source
        )
    training.play_interactively(HumanPlayer(), agent, n_games=n_games,
                                human_first=human_first, pile_size=pile_size, actions=actions)


@nimby_command_group.command()
def show_config() -> None:
    '''Show the settings in effect, after reading the config file.'''
    click.echo(f'Config file: {constants.config_path}')
    for name in constants.defaults:
        click.echo(f'    {name}: {constants.get_setting(name)!r}')

####################################################################################################

def is_exit_0_exception(exception: BaseException) -> bool:
    return (
        (isinstance(exception, SystemExit) and exception.code in (0, None)) or
        (isinstance(exception, click.exceptions.Exit) and exception.exit_code == 0)
    )


@contextlib.contextmanager
def run_and_log_exception():
    try:
        yield
    except NimbyException as nimby_exception:
        logger.error(f'Nimby stopped: {nimby_exception}')
        raise SystemExit(1) from nimby_exception
    except BaseException as base_exception:
        if not is_exit_0_exception(base_exception):
            logger.exception('Nimby exited because of an exception.')
            raise SystemExit(1) from base_exception
        raise


def nimby(*args: Any, **kwargs: Any) -> None:
    with run_and_log_exception():
        nimby_command_group(*args, **kwargs)

# Copyright 2020 Ram Rachum and collaborators.
# This program is distributed under the MIT license.

'''Entry point for running Nimby with `python -m nimby`.'''

from nimby.commanding import nimby

if __name__ == '__main__':
    nimby(prog_name='nimby')

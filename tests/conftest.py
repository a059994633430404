import itertools

import pytest

from balance_board import Board
from balance_config import GameConfig
from balance_piece import Kind


class ScriptedRandom:
    """Replays fixed randrange picks and random() floats, cycling forever."""

    def __init__(self, picks=(0,), coins=(0.25,)):
        self._picks = itertools.cycle(picks)
        self._coins = itertools.cycle(coins)

    def randrange(self, n):
        return next(self._picks) % n

    def random(self):
        return next(self._coins)


def fill_row(board, row, kind=Kind.INFLOW, skip=()):
    for c in range(board.cols):
        if c not in skip:
            board.grid[row][c] = kind


@pytest.fixture
def board():
    return Board(GameConfig())


@pytest.fixture
def zone_config():
    return GameConfig.zone_variant(grace_period_blocks=0)


@pytest.fixture
def single_inflow():
    # 1x1 shape, inflow, column 0
    return ScriptedRandom(picks=(0, 0), coins=(0.1,))

"""Shared test fixtures and helpers."""

import random

import pytest

from models import BoardState


class ScriptedDice:
    """Stands in for `random`: each choice() returns the next scripted die."""

    def __init__(self, values):
        self.values = list(values)

    def choice(self, seq):
        return self.values.pop(0)


def build_board(size, covered=()):
    board = BoardState.fresh(size)
    for square in covered:
        board.cover(square)
    return board


# --- Fixtures ---


@pytest.fixture
def make_board():
    """Factory: make_board(size, covered=(...))."""
    return build_board


@pytest.fixture
def scripted_dice():
    """Factory: scripted_dice([d1, d2, ...])."""
    return ScriptedDice


@pytest.fixture
def rng():
    """Deterministic RNG seeded at 42."""
    return random.Random(42)

"""Dice used to pick the producing number each turn."""

from __future__ import annotations

import abc
import random
from collections.abc import Iterable


class Dice(abc.ABC):
    """Source of trigger values."""

    @abc.abstractmethod
    def roll(self, sides: int) -> int:
        """Return a value in ``[1, sides]``."""

    def roll_two(self, sides: int) -> int:
        """Roll twice and return the sum."""
        return self.roll(sides) + self.roll(sides)


class DiceRoller(Dice):
    """Fair dice backed by :class:`random.Random`."""

    def __init__(self, seed: int | None = None) -> None:
        """Initialise with an optional RNG seed for reproducibility."""
        self._rng = random.Random(seed)

    def roll(self, sides: int) -> int:
        if sides < 1:
            raise ValueError(f'a die needs at least one side, got {sides}')
        return self._rng.randint(1, sides)


class FixedDice(Dice):
    """Replays a scripted sequence of single-die values, cycling when exhausted."""

    def __init__(self, values: Iterable[int]) -> None:
        self._values = list(values)
        if not self._values:
            raise ValueError('FixedDice needs at least one value')
        self._next = 0

    def roll(self, sides: int) -> int:
        if sides < 1:
            raise ValueError(f'a die needs at least one side, got {sides}')
        value = self._values[self._next % len(self._values)]
        self._next += 1
        if not 1 <= value <= sides:
            raise ValueError(f'scripted value {value} is not on a {sides}-sided die')
        return value

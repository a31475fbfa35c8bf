"""
Injectable Random Source

Every generator draws through a ``RandomSource``: a zero-argument callable
returning a uniform float in [0, 1). Production code uses a numpy Generator;
tests pass fixed sequences to assert exact outputs.
"""

import math
from typing import Callable, Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")

RandomSource = Callable[[], float]


def make_random_source(seed: Optional[int] = None) -> RandomSource:
    """Create a numpy-backed random source, optionally seeded"""
    rng = np.random.default_rng(seed)
    return lambda: float(rng.random())


def random_int(rand: RandomSource, low: int, high: int) -> int:
    """Uniform integer in [low, high], both inclusive"""
    return math.floor(rand() * (high - low + 1)) + low


def uniform(rand: RandomSource, low: float, high: float) -> float:
    """Uniform float in [low, high)"""
    return low + rand() * (high - low)


def pick(rand: RandomSource, choices: Sequence[T]) -> T:
    return choices[math.floor(rand() * len(choices))]


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)

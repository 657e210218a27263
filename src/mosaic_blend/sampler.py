"""
Seeded pseudo-random sampler.

The generator is Mulberry32. Its arithmetic is part of the reproducibility
contract of the mosaic: every step wraps to unsigned 32 bits exactly like
the reference implementation, so a seed selects the same tiles and patches
everywhere.
"""
import logging
import math
import random
from typing import Optional

logger = logging.getLogger(__name__)

MASK32 = 0xFFFFFFFF
GOLDEN_GAMMA = 0x6D2B79F5


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply, low word."""
    return (a * b) & MASK32


def mulberry32(state: int) -> tuple[int, float]:
    """
    Advance a Mulberry32 state by one step.

    Returns the new state and the drawn value in ``[0, 1)``.
    """
    state = (state + GOLDEN_GAMMA) & MASK32
    t = _imul(state ^ (state >> 15), state | 1)
    t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK32
    return state, ((t ^ (t >> 14)) & MASK32) / 4294967296.0


class Sampler(object):
    """
    Reproducible stream of floats in ``[0, 1)``.

    Example::

        sampler = Sampler(42)
        sampler.random()       # 0.6011037519201636
        sampler.randint(0, 9)  # 4

    Without a seed, a random 32-bit seed is chosen, so unseeded runs are not
    reproducible unless the logged seed is passed back in.
    """

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = random.getrandbits(32)
            logger.debug("Using random seed %d" % seed)
        self._seed = seed & MASK32
        self._state = self._seed or 1
        self._draws = 0

    @property
    def seed(self) -> int:
        """Effective unsigned 32-bit seed."""
        return self._seed

    @property
    def draws(self) -> int:
        """Number of values drawn so far."""
        return self._draws

    def random(self) -> float:
        """Draw the next float in ``[0, 1)``."""
        self._state, value = mulberry32(self._state)
        self._draws += 1
        return value

    def randint(self, minimum: int, maximum: int) -> int:
        """Draw an integer in ``[minimum, maximum]``, both inclusive."""
        return int(math.floor(self.random() * (maximum - minimum + 1))) + minimum

    def __repr__(self) -> str:
        return "%s(seed=%d, draws=%d)" % (self.__class__.__name__, self._seed, self._draws)

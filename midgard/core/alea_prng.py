"""
Alea pseudo-random number generator.

Based on Johannes Baagøe's Alea algorithm. Unlike Python's ``random``
module the sequence is fully specified, so a seed produces the same
point sets on every platform and interpreter version.
"""

import math

_TWO_POW_32 = 0x100000000
_TWO_POW_MINUS_32 = 2.3283064365386963e-10


def _uint32(n) -> int:
    """Truncate to an unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class _Mash:
    """Alea's string hashing function; stateful across calls."""

    def __init__(self):
        self.n = 0xEFC8249D

    def __call__(self, data) -> float:
        for char in str(data):
            self.n += ord(char)
            h = 0.02519603282416938 * self.n
            self.n = _uint32(h)
            h -= self.n
            h *= self.n
            self.n = _uint32(h)
            h -= self.n
            self.n += h * _TWO_POW_32
        return _uint32(self.n) * _TWO_POW_MINUS_32


class AleaPRNG:
    """
    Seeded generator of floats in ``[0, 1)``.

    Any seed is accepted; integers and strings are hashed through their
    string form, so ``AleaPRNG(42)`` and ``AleaPRNG("42")`` agree.
    """

    def __init__(self, seed):
        self.seed = seed
        self.call_count = 0

        mash = _Mash()
        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        self.s0 = self._reduce(self.s0 - mash(seed))
        self.s1 = self._reduce(self.s1 - mash(seed))
        self.s2 = self._reduce(self.s2 - mash(seed))

    @staticmethod
    def _reduce(value: float) -> float:
        return value + 1 if value < 0 else value

    def random(self) -> float:
        """Next float in ``[0, 1)``."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * _TWO_POW_MINUS_32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def uniform(self, low: float, high: float) -> float:
        """Float in ``[low, high)``."""
        return low + (high - low) * self.random()

    def open_uniform(self, low: float, high: float) -> float:
        """Float strictly inside ``(low, high)``.

        Zero draws are rejected so the lower bound is never returned.
        """
        value = self.random()
        while value == 0.0:
            value = self.random()
        return low + (high - low) * value

    def randrange(self, stop: int) -> int:
        """Integer in ``[0, stop)``."""
        if stop <= 0:
            raise ValueError("randrange() stop must be positive")
        return min(int(self.random() * stop), stop - 1)

    def angle(self) -> float:
        """Angle in radians in ``[0, 2*pi)``."""
        return self.random() * 2.0 * math.pi

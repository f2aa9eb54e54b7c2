"""Linear congruential pseudo-random generator with a 64-bit state."""

from __future__ import annotations

_MASK32 = (1 << 32) - 1
_MASK64 = (1 << 64) - 1
_MULTIPLIER = 6364136223846793005


class Rand:
    """A generator whose state starts at zero until seeded."""

    def __init__(self) -> None:
        self._seed = 0

    def srand(self, s: int) -> None:
        """Seed the generator from an unsigned 32-bit value."""
        self._seed = (s - 1) & _MASK32

    def rand(self) -> int:
        """Advance the state and return a value in ``[0, 2**31)``."""
        self._seed = (_MULTIPLIER * self._seed + 1) & _MASK64
        return self._seed >> 33


_default = Rand()


def srand(s: int) -> None:
    """Seed the shared generator."""
    _default.srand(s)


def rand() -> int:
    """Return the next value from the shared generator."""
    return _default.rand()
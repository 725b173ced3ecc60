"""
Explicit, seedable random source.

The simulation never touches the module-level `random` generator. Its
state is a plain integer stored in GameState and threaded through every
call that needs randomness:

    source = RandomSource(state.rng_state)
    ... draw ...
    new_state = source.next_state()

Two runs from the same seed and the same commands therefore produce the
same events, decisions and ids.
"""

from typing import Optional, Sequence, TypeVar
from uuid import UUID
import random
import secrets

T = TypeVar("T")

STATE_BITS = 63


def initial_state(seed: Optional[int] = None) -> int:
    """Turn an optional seed into a starting rng state."""
    if seed is None:
        return secrets.randbits(STATE_BITS)
    return random.Random(seed).getrandbits(STATE_BITS)


class RandomSource:
    """A generator bound to one rng state."""

    def __init__(self, state: int):
        self._rng = random.Random(state)

    def random(self) -> float:
        return self._rng.random()

    def chance(self, probability: float) -> bool:
        return self._rng.random() < probability

    def uniform(self, low: float, high: float) -> float:
        return self._rng.uniform(low, high)

    def randint(self, low: int, high: int) -> int:
        return self._rng.randint(low, high)

    def choice(self, items: Sequence[T]) -> T:
        return self._rng.choice(items)

    def sample(self, items: Sequence[T], k: int) -> list[T]:
        return self._rng.sample(list(items), k)

    def uuid(self) -> UUID:
        """A random (version 4) UUID drawn from this source."""
        return UUID(int=self._rng.getrandbits(128), version=4)

    def next_state(self) -> int:
        """State to hand to the next consumer."""
        return self._rng.getrandbits(STATE_BITS)

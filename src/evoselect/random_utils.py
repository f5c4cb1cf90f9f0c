"""Sampling helpers built on RandomEngine.

These helpers consume draws in a fixed pattern so that algorithms using them
stay reproducible for a given seed.
"""

from collections.abc import MutableSequence, Sequence
from typing import TypeVar

from evoselect.random_engine import RandomEngine

T = TypeVar("T")


def shuffle(seq: MutableSequence[T], random: RandomEngine, max_count: int | None = None) -> None:
    """Shuffle seq in place.

    Position i is swapped with a uniform draw from [i, len(seq)), one draw per
    position. With max_count, only the first max_count positions are settled,
    which is enough to pick a uniform prefix.

    Args:
        seq: Sequence to shuffle in place.
        random: Engine supplying the draws.
        max_count: Number of leading positions to settle. Defaults to all.
    """
    n = len(seq)
    if max_count is None:
        max_count = n
    for i in range(min(max_count, n)):
        pos = random.get_uint(i, n)
        if pos == i:
            continue
        seq[i], seq[pos] = seq[pos], seq[i]


def get_permutation(random: RandomEngine, size: int) -> list[int]:
    """Return a uniformly random permutation of range(size)."""
    order = list(range(size))
    shuffle(order, random)
    return order


def choose(random: RandomEngine, n: int, k: int) -> list[int]:
    """Pick k distinct indices from range(n), in draw order.

    Raises:
        ValueError: If k is negative or exceeds n.
    """
    if k < 0 or k > n:
        raise ValueError(f"cannot choose {k} distinct items from {n}")
    order = list(range(n))
    shuffle(order, random, max_count=k)
    return order[:k]


def sample_with_replacement(seq: Sequence[T], k: int, random: RandomEngine) -> list[T]:
    """Draw k items from seq with replacement.

    Raises:
        ValueError: If seq is empty and k > 0.
    """
    if k > 0 and len(seq) == 0:
        raise ValueError("cannot sample from an empty sequence")
    return [seq[random.get_uint(len(seq))] for _ in range(k)]

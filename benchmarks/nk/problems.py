"""NK fitness landscapes for benchmarking selection strategies.

An NK landscape scores an N-bit genome as the sum of N local contributions.
Contribution i looks at bit i and the K bits that follow it (wrapping around),
so K tunes how rugged the landscape is:

- K = 0: every bit contributes independently (single smooth peak)
- K = N - 1: every contribution depends on every bit (maximally rugged)

References:
    Kauffman, S. A., & Weinberger, E. D. (1989). The NK model of rugged fitness
    landscapes and its application to maturation of the immune response.
    Journal of Theoretical Biology, 141(2), 211-245.
"""

import numpy as np

from evoselect import RandomEngine

# Problem configuration
N_BITS: int = 32
K_VALUES: tuple[int, ...] = (0, 3, 8)


class NKLandscape:
    """Random NK landscape.

    Args:
        n: Number of bits per genome.
        k: Epistatic neighbours per bit (0 <= k < n).
        random: Engine used to draw the contribution table.
    """

    def __init__(self, n: int, k: int, random: RandomEngine) -> None:
        if n <= 0:
            raise ValueError(f"n must be positive, got {n}")
        if not 0 <= k < n:
            raise ValueError(f"k must be in [0, {n}), got {k}")
        self.n = n
        self.k = k
        self.table = np.array([[random.get_double() for _ in range(2 ** (k + 1))] for _ in range(n)])
        self._weights = 1 << np.arange(k + 1)

    def get_fitness(self, genome: tuple[int, ...]) -> float:
        bits = np.asarray(genome, dtype=np.intp)
        positions = (np.arange(self.n)[:, None] + np.arange(self.k + 1)) % self.n
        idx = bits[positions] @ self._weights
        return float(self.table[np.arange(self.n), idx].sum())

    def __call__(self, genome: tuple[int, ...]) -> float:
        return self.get_fitness(genome)


def random_genome(n: int, random: RandomEngine) -> tuple[int, ...]:
    return tuple(int(random.p(0.5)) for _ in range(n))


def bit_flip_mutation(rate: float):
    """Create a mutation that flips each bit with probability rate."""

    def mutate(genome: tuple[int, ...], random: RandomEngine) -> tuple[int, ...]:
        return tuple(1 - bit if random.p(rate) else bit for bit in genome)

    return mutate


def bit_segment(start: int, stop: int):
    """Create a fitness function that counts ones in genome[start:stop]."""

    def segment_fitness(genome: tuple[int, ...]) -> float:
        return float(sum(genome[start:stop]))

    return segment_fitness

"""Middle-square Weyl-sequence pseudo-random engine.

This module provides the deterministic random source used by every selection
strategy in evoselect:

- RandomEngine: 32-bit generator plus derived samplers (uniform, Bernoulli,
  normal, Poisson, binomial, geometric)
- EngineState: immutable snapshot of the full engine state for replays
- Prob: fixed bit densities for rand_bytes

The generator squares a 64-bit accumulator, adds the next term of a Weyl
sequence, and returns the middle 32 bits. The Weyl term keeps the sequence
from collapsing into the short cycles of a plain middle-square generator.

Reproducibility depends on the exact number of draws each caller consumes, so
the samplers keep their draw counts (and the small bias of get_uint for
bounds that are not powers of two) stable.
"""

import math
import time
from dataclasses import dataclass
from enum import IntEnum

RAND_CAP: int = 4294967296  # 2^32
STEP_SIZE: int = 0xB5AD4ECEDA1CE2A9
INFINITE_DRAW: int = RAND_CAP - 1

_MASK32 = RAND_CAP - 1
_MASK64 = (1 << 64) - 1


class Prob(IntEnum):
    """Bit densities (per mille) supported by RandomEngine.rand_bytes."""

    PROB_0 = 0
    PROB_12_5 = 125
    PROB_25 = 250
    PROB_37_5 = 375
    PROB_50 = 500
    PROB_62_5 = 625
    PROB_75 = 750
    PROB_87_5 = 875
    PROB_100 = 1000


@dataclass(frozen=True)
class EngineState:
    """Snapshot of a RandomEngine.

    Attributes:
        value: Current squaring accumulator (64-bit).
        weyl_state: Current Weyl sequence counter (64-bit).
        seed: Seed that started the sequence.
        exp_rv: Leftover exponential variate carried between normal draws.
    """

    value: int
    weyl_state: int
    seed: int
    exp_rv: float


def _neg_log(x: float) -> float:
    # -log(0) is +inf; the normal sampler relies on that to reject the draw.
    return math.inf if x == 0.0 else -math.log(x)


class RandomEngine:
    """Deterministic pseudo-random generator with statistical samplers.

    Two engines built from the same positive seed produce identical outputs
    for identical call sequences. A seed <= 0 derives one from the wall clock
    and the engine's identity; get_seed() reports it so the run can be
    replayed.

    Note:
        get_rand_normal() keeps a leftover exponential variate between calls,
        so consecutive normal draws are coupled through engine state. This is
        part of the algorithm and is captured by get_state().

    Example:
        >>> random = RandomEngine(1)
        >>> 0.0 <= random.get_double() < 1.0
        True
        >>> random.get_uint(10) < 10
        True
    """

    def __init__(self, seed: int = -1) -> None:
        self._value = 0
        self._weyl_state = 0
        self._seed = 0
        self._exp_rv = 0.0
        self.reset_seed(seed)

    def __repr__(self) -> str:
        return f"RandomEngine(seed={self._seed})"

    # Seeding and state ------------------------------------------------------

    def get_seed(self) -> int:
        """Return the seed that started the current sequence."""
        return self._seed

    def reset_seed(self, seed: int) -> None:
        """Start a new pseudo-random sequence.

        Args:
            seed: Positive values are used directly. Zero or negative values
                derive a seed from the current time mixed with this engine's
                identity, which is unique per process but not reproducible.
        """
        if seed <= 0:
            seed_time = int(time.time())
            seed_mem = id(self)
            weyl_state = (seed_time ^ seed_mem) & _MASK64
        else:
            weyl_state = seed & _MASK64

        self._seed = weyl_state
        self._weyl_state = (weyl_state * 2) & _MASK64  # Starting state must be even.
        self._value = 0
        self._exp_rv = 0.0

    def get_state(self) -> EngineState:
        """Capture the full engine state."""
        return EngineState(
            value=self._value,
            weyl_state=self._weyl_state,
            seed=self._seed,
            exp_rv=self._exp_rv,
        )

    def set_state(self, state: EngineState) -> None:
        """Restore a state previously returned by get_state().

        Raises:
            TypeError: If state is not an EngineState.
        """
        if not isinstance(state, EngineState):
            raise TypeError(f"state must be an EngineState, got {type(state).__name__}")
        self._value = state.value & _MASK64
        self._weyl_state = state.weyl_state & _MASK64
        self._seed = state.seed
        self._exp_rv = state.exp_rv

    # Raw draws --------------------------------------------------------------

    def get(self) -> int:
        """Return a raw 32-bit draw in [0, 2^32)."""
        value = (self._value * self._value) & _MASK64
        self._weyl_state = (self._weyl_state + STEP_SIZE) & _MASK64
        value = (value + self._weyl_state) & _MASK64
        self._value = ((value >> 32) | (value << 32)) & _MASK64
        return self._value & _MASK32

    def get_double(self, lo: float | None = None, hi: float | None = None) -> float:
        """Return a uniform double.

        get_double() draws from [0, 1), get_double(max) from [0, max) and
        get_double(min, max) from [min, max).
        """
        x = self.get() / RAND_CAP
        if lo is None:
            return x
        if hi is None:
            return x * lo
        return x * (hi - lo) + lo

    def get_uint(self, lo: int | None = None, hi: int | None = None) -> int:
        """Return an unsigned 32-bit integer.

        get_uint() returns a raw draw, get_uint(max) a value in [0, max) and
        get_uint(min, max) a value in [min, max). Bounded draws scale a double
        and truncate, which carries a small bias for bounds that are not
        powers of two.
        """
        if lo is None:
            return self.get()
        if hi is None:
            return int(self.get_double() * lo)
        return self.get_uint(hi - lo) + lo

    def get_uint64(self, max_value: int | None = None) -> int:
        """Return an unsigned 64-bit integer, optionally in [0, max_value).

        Bounds up to 2^32 reuse the 32-bit path. Larger bounds mask two raw
        draws down to the bits max_value needs and reject values out of range.
        """
        if max_value is None:
            high = self.get()
            return (high << 32) + self.get()
        if max_value <= RAND_CAP:
            return self.get_uint(max_value)

        mask = (1 << max_value.bit_length()) - 1
        val = self.get_uint64() & mask
        while val >= max_value:
            val = self.get_uint64() & mask
        return val

    def get_int(self, lo: int, hi: int | None = None) -> int:
        """Return an int in [0, lo) or, with two arguments, in [lo, hi)."""
        if hi is None:
            return self.get_uint(lo)
        return self.get_int(hi - lo) + lo

    # Biased bit words -------------------------------------------------------

    def get_bits_12_5(self) -> int:
        return self.get() & self.get() & self.get()

    def get_bits_25(self) -> int:
        return self.get() & self.get()

    def get_bits_37_5(self) -> int:
        return (self.get() | self.get()) & self.get()

    def get_bits_50(self) -> int:
        return self.get()

    def get_bits_62_5(self) -> int:
        return (self.get() & self.get()) | self.get()

    def get_bits_75(self) -> int:
        return self.get() | self.get()

    def get_bits_87_5(self) -> int:
        return self.get() | self.get() | self.get()

    def rand_bytes(self, num_bytes: int, prob: Prob = Prob.PROB_50) -> bytearray:
        """Fill num_bytes with random bits set at the given density.

        Each 32-bit word is written little-endian; the last word is truncated
        when num_bytes is not a multiple of four.

        Raises:
            ValueError: If num_bytes is negative.
        """
        if num_bytes < 0:
            raise ValueError(f"num_bytes must be non-negative, got {num_bytes}")

        word_funs = {
            Prob.PROB_0: lambda: 0,
            Prob.PROB_12_5: self.get_bits_12_5,
            Prob.PROB_25: self.get_bits_25,
            Prob.PROB_37_5: self.get_bits_37_5,
            Prob.PROB_50: self.get_bits_50,
            Prob.PROB_62_5: self.get_bits_62_5,
            Prob.PROB_75: self.get_bits_75,
            Prob.PROB_87_5: self.get_bits_87_5,
            Prob.PROB_100: lambda: _MASK32,
        }
        next_word = word_funs[Prob(prob)]

        out = bytearray()
        while len(out) < num_bytes:
            out += next_word().to_bytes(4, "little")
        del out[num_bytes:]
        return out

    # Random events ----------------------------------------------------------

    def p(self, prob: float) -> bool:
        """Return True with probability prob (one raw draw).

        Raises:
            ValueError: If prob is outside [0, 1].
        """
        if not 0.0 <= prob <= 1.0:
            raise ValueError(f"probability must be in [0, 1], got {prob}")
        return self.get() < prob * RAND_CAP

    # Distributions ----------------------------------------------------------

    def get_rand_normal(self, mean: float = 0.0, std: float = 1.0) -> float:
        """Draw from a normal distribution.

        Uses the exponential rejection method. The accepted comparison
        variate's remainder is again exponential and is kept in the engine
        for the next call.
        """
        while True:
            exp_rv2 = _neg_log(self.get_double())
            self._exp_rv -= (exp_rv2 - 1) * (exp_rv2 - 1) / 2
            if self._exp_rv > 0:
                break
            self._exp_rv = _neg_log(self.get_double())

        if self.p(0.5):
            return mean + exp_rv2 * std
        return mean - exp_rv2 * std

    def get_rand_poisson(self, mean: float, p: float | None = None) -> int:
        """Draw from a Poisson distribution.

        get_rand_poisson(mean) uses the multiplication (rejection) method and
        returns INFINITE_DRAW when exp(-mean) underflows. get_rand_poisson(n, p)
        approximates Binomial(n, p); for p > 0.5 it draws the failures instead
        and returns n minus them, clamped at zero.

        Raises:
            ValueError: If p is given and lies outside [0, 1].
        """
        if p is not None:
            if not 0.0 <= p <= 1.0:
                raise ValueError(f"probability must be in [0, 1], got {p}")
            n = mean
            if p > 0.5:
                return max(0, int(n) - self.get_rand_poisson(n * (1 - p)))
            return self.get_rand_poisson(n * p)

        a = math.exp(-mean)
        if a <= 0:
            return INFINITE_DRAW
        k = 0
        u = self.get_double()
        while u >= a:
            u *= self.get_double()
            k += 1
        return k

    def get_rand_binomial(self, n: float, p: float) -> int:
        """Draw from Binomial(n, p) by running n Bernoulli trials.

        This is exact and costs O(n) draws.

        Raises:
            ValueError: If p is outside [0, 1] or n is negative.
        """
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"probability must be in [0, 1], got {p}")
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        return sum(1 for _ in range(math.ceil(n)) if self.p(p))

    def get_rand_geometric(self, p: float) -> int:
        """Count Bernoulli(p) trials up to and including the first success.

        Returns INFINITE_DRAW for p == 0.

        Raises:
            ValueError: If p is outside [0, 1].
        """
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"probability must be in [0, 1], got {p}")
        if p == 0:
            return INFINITE_DRAW
        result = 1
        while not self.p(p):
            result += 1
        return result

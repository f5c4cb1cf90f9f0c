"""Cumulative-weight index for fitness-proportional sampling.

WeightedIndex keeps one non-negative weight per id in a binary indexed
(Fenwick) tree, so that both updating a weight and finding the id at a
cumulative position cost O(log N).

Example:
    >>> index = WeightedIndex(4)
    >>> for i in range(4):
    ...     index.adjust(i, 1.0)
    >>> index.get_weight()
    4.0
    >>> index.index(2.5)
    2
"""

import numpy as np


class WeightedIndex:
    """Binary indexed tree over a fixed number of weights.

    Id i owns the half-open interval [W(i), W(i) + w_i) where W(i) is the sum
    of the weights of ids below i. Ids with zero weight own an empty interval
    and are never returned by index().

    Attributes:
        _weights: Individual weights, shape (n,).
        _tree: Fenwick partial sums, 1-based, shape (n + 1,).
    """

    def __init__(self, size: int = 0, weights: np.ndarray | None = None) -> None:
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        self._weights = np.zeros(size, dtype=np.float64)
        self._tree = np.zeros(size + 1, dtype=np.float64)
        if weights is not None:
            self.adjust_all(weights)

    def __len__(self) -> int:
        return self._weights.shape[0]

    def __getitem__(self, id: int) -> float:
        return float(self._weights[self._check_id(id)])

    def __repr__(self) -> str:
        return f"WeightedIndex(size={len(self)}, total={self.get_weight():g})"

    def _check_id(self, id: int) -> int:
        n = len(self)
        if not isinstance(id, (int, np.integer)):
            raise TypeError(f"ids must be integers, got {type(id).__name__}")
        if id < 0 or id >= n:
            raise IndexError(f"id {id} is out of bounds for index of size {n}")
        return int(id)

    def _rebuild(self) -> None:
        n = len(self)
        prefix = np.concatenate(([0.0], np.cumsum(self._weights)))
        i = np.arange(1, n + 1)
        self._tree = np.empty(n + 1, dtype=np.float64)
        self._tree[0] = 0.0
        self._tree[1:] = prefix[i] - prefix[i - (i & -i)]

    def adjust(self, id: int, weight: float) -> None:
        """Set the weight of one id.

        Raises:
            IndexError: If id is out of range.
            ValueError: If weight is negative or not finite.
        """
        id = self._check_id(id)
        if not np.isfinite(weight) or weight < 0:
            raise ValueError(f"weight must be finite and non-negative, got {weight}")

        delta = weight - self._weights[id]
        self._weights[id] = weight
        n = len(self)
        i = id + 1
        while i <= n:
            self._tree[i] += delta
            i += i & -i

    def adjust_all(self, weights: np.ndarray) -> None:
        """Replace every weight at once in O(N).

        Raises:
            ValueError: If the shape does not match or any weight is negative.
        """
        weights = np.asarray(weights, dtype=np.float64)
        if weights.shape != self._weights.shape:
            raise ValueError(f"weights must have shape {self._weights.shape}, got {weights.shape}")
        if not np.all(np.isfinite(weights)) or np.any(weights < 0):
            raise ValueError("weights must be finite and non-negative")
        self._weights = weights.copy()
        self._rebuild()

    def resize(self, size: int) -> None:
        """Change the number of ids, keeping existing weights; new ids get 0."""
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        weights = np.zeros(size, dtype=np.float64)
        keep = min(size, len(self))
        weights[:keep] = self._weights[:keep]
        self._weights = weights
        self._rebuild()

    def clear(self) -> None:
        """Set every weight to zero."""
        self._weights[:] = 0.0
        self._tree[:] = 0.0

    def get_weight(self, id: int | None = None) -> float:
        """Return the weight of one id, or the total weight with no argument."""
        if id is not None:
            return self[id]
        total = 0.0
        i = len(self)
        while i > 0:
            total += self._tree[i]
            i -= i & -i
        return float(total)

    def index(self, x: float) -> int:
        """Return the id whose cumulative interval contains x.

        Raises:
            ValueError: If x is outside [0, total weight).
        """
        total = self.get_weight()
        if not 0.0 <= x < total:
            raise ValueError(f"position {x} is outside [0, {total})")

        n = len(self)
        pos = 0
        remaining = x
        step = 1 << (n.bit_length() - 1)
        while step:
            nxt = pos + step
            if nxt <= n and self._tree[nxt] <= remaining:
                pos = nxt
                remaining -= self._tree[nxt]
            step >>= 1

        # Rounding in the partial sums can land on an id with zero weight.
        if pos >= n or self._weights[pos] == 0.0:
            pos = self._nearest_weighted(pos)
        return pos

    def _nearest_weighted(self, pos: int) -> int:
        """Return the last positive-weight id at or below pos, else the first above it."""
        weighted = np.flatnonzero(self._weights > 0.0)
        below = weighted[weighted <= pos]
        if below.size:
            return int(below[-1])
        return int(weighted[0])

"""Result type for generational runs.

EvolveResult is immutable (frozen dataclass); its numpy arrays are copied on
construction.
"""

from dataclasses import dataclass

import numpy as np

from evoselect.protocols import Genome


@dataclass(frozen=True)
class EvolveResult:
    """Summary of an evolve() run.

    Attributes:
        generations: Number of generations completed.
        best_fitness: Highest fitness after each generation, shape (generations,).
        mean_fitness: Mean fitness after each generation, shape (generations,).
        best_genome: Genome of the fittest organism in the final population.
        best_id: Slot id of that organism.

    Example:
        >>> result = EvolveResult(
        ...     generations=2,
        ...     best_fitness=np.array([3.0, 4.0]),
        ...     mean_fitness=np.array([1.5, 2.0]),
        ...     best_genome=(1, 1, 1, 1),
        ...     best_id=7,
        ... )
        >>> result.final_best
        4.0
    """

    generations: int
    best_fitness: np.ndarray
    mean_fitness: np.ndarray
    best_genome: Genome
    best_id: int

    def __post_init__(self) -> None:
        """Validate shapes and copy arrays for immutability.

        Raises:
            TypeError: If the fitness histories are not numpy arrays.
            ValueError: If their shapes do not match generations.
        """
        if self.generations < 0:
            raise ValueError(f"generations must be non-negative, got {self.generations}")
        for name in ("best_fitness", "mean_fitness"):
            values = getattr(self, name)
            if not isinstance(values, np.ndarray):
                raise TypeError(f"{name} must be a numpy array, got {type(values).__name__}")
            if values.shape != (self.generations,):
                raise ValueError(f"{name} must have shape ({self.generations},), got {values.shape}")
            object.__setattr__(self, name, values.copy())

    @property
    def final_best(self) -> float | None:
        """Best fitness of the last generation, or None if none ran."""
        if self.generations == 0:
            return None
        return float(self.best_fitness[-1])

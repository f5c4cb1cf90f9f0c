"""Reference population for the selection strategies.

This module provides World, an in-memory population of genome slots that
implements the GridView protocol:

- Slots are addressed by index and may be empty.
- Synchronous worlds collect births in a next-generation buffer that replaces
  the population on update(); asynchronous worlds write each birth over a
  uniformly drawn slot right away.
- Fitness can be cached per slot; a birth or injection into a slot drops its
  cached value.

Example:
    >>> from evoselect import RandomEngine, World
    >>> random = RandomEngine(5)
    >>> world = World(random, fit_fun=sum)
    >>> world.inject((1, 0, 1), copy_count=3)
    [0, 1, 2]
    >>> world.calc_fitness_id(0)
    2.0
"""

import copy
import logging
from collections.abc import Callable, Iterator

import numpy as np

from evoselect.protocols import FitnessFunction, Genome, LexicaseHook
from evoselect.random_engine import RandomEngine

logger = logging.getLogger(__name__)

MutateFunction = Callable[[Genome, RandomEngine], Genome]


class World:
    """Mutable population of genomes with well-mixed replacement.

    Args:
        random: Engine used for random slot draws, birth placement and
            mutation.
        fit_fun: Base fitness function mapping a genome to a float.
        synchronous: If True, births go to the next generation buffer.
        cache: If True, fitness values are cached per slot.
        mutate: Optional function applied to every offspring copy.
            Signature: (genome, random) -> genome
        on_lexicase_select: Optional callback for lexicase selection.
            Signature: (fitness_ids_used, organism_id) -> None

    Attributes:
        update_count: Number of completed update() calls.
    """

    def __init__(
        self,
        random: RandomEngine,
        fit_fun: FitnessFunction | None = None,
        *,
        synchronous: bool = False,
        cache: bool = False,
        mutate: MutateFunction | None = None,
        on_lexicase_select: LexicaseHook | None = None,
    ) -> None:
        if not isinstance(random, RandomEngine):
            raise TypeError(f"random must be a RandomEngine, got {type(random).__name__}")
        self.random = random
        self.mutate = mutate
        self.on_lexicase_select = on_lexicase_select
        self.update_count = 0
        self._fit_fun = fit_fun
        self._synchronous = synchronous
        self._cache_on = cache
        self._pop: list[Genome | None] = []
        self._next: list[Genome] = []
        self._num_orgs = 0
        self._fit_cache: dict[int, float] = {}

    def __len__(self) -> int:
        return len(self._pop)

    def __iter__(self) -> Iterator[Genome]:
        """Iterate over the genomes of occupied slots."""
        return (genome for genome in self._pop if genome is not None)

    def __getitem__(self, id: int) -> Genome:
        return self.get_genome_at(id)

    def __repr__(self) -> str:
        mode = "sync" if self._synchronous else "async"
        return f"World(size={self.get_size()}, orgs={self._num_orgs}, {mode})"

    def _check_id(self, id: int) -> int:
        n = len(self._pop)
        if not isinstance(id, (int, np.integer)):
            raise TypeError(f"ids must be integers, got {type(id).__name__}")
        if id < 0 or id >= n:
            raise IndexError(f"id {id} is out of bounds for world with {n} slots")
        return int(id)

    def _place(self, genome: Genome, id: int) -> None:
        if self._pop[id] is None:
            self._num_orgs += 1
        self._pop[id] = genome
        self._fit_cache.pop(id, None)

    # Configuration ----------------------------------------------------------

    def get_fit_fun(self) -> FitnessFunction | None:
        return self._fit_fun

    def set_fit_fun(self, fit_fun: FitnessFunction | None) -> None:
        self._fit_fun = fit_fun
        self.clear_cache()

    def is_synchronous(self) -> bool:
        return self._synchronous

    def is_cache_on(self) -> bool:
        return self._cache_on

    def set_cache(self, on: bool = True) -> None:
        self._cache_on = on
        if not on:
            self.clear_cache()

    def clear_cache(self) -> None:
        if self._fit_cache:
            logger.debug("Clearing %d cached fitness values", len(self._fit_cache))
        self._fit_cache.clear()

    # Slots ------------------------------------------------------------------

    def get_size(self) -> int:
        return len(self._pop)

    def get_num_orgs(self) -> int:
        return self._num_orgs

    def get_next_size(self) -> int:
        """Return the number of offspring waiting for the next generation."""
        return len(self._next)

    def is_occupied(self, id: int) -> bool:
        return self._pop[self._check_id(id)] is not None

    def get_genome_at(self, id: int) -> Genome:
        """Return the genome in slot id.

        Raises:
            IndexError: If id is out of range.
            ValueError: If the slot is empty.
        """
        genome = self._pop[self._check_id(id)]
        if genome is None:
            raise ValueError(f"slot {id} is empty")
        return genome

    def resize(self, size: int) -> None:
        """Grow with empty slots or shrink by dropping trailing slots."""
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        if size < len(self._pop):
            dropped = self._pop[size:]
            self._num_orgs -= sum(genome is not None for genome in dropped)
            del self._pop[size:]
            self._fit_cache = {i: f for i, f in self._fit_cache.items() if i < size}
        else:
            self._pop.extend([None] * (size - len(self._pop)))

    def inject(self, genome: Genome, copy_count: int = 1) -> list[int]:
        """Append copy_count copies of genome to the current population.

        Returns:
            Slot ids of the new organisms.
        """
        if genome is None:
            raise ValueError("genome must not be None")
        if copy_count <= 0:
            raise ValueError(f"copy_count must be positive, got {copy_count}")
        ids = []
        for _ in range(copy_count):
            self._pop.append(None)
            id = len(self._pop) - 1
            self._place(copy.deepcopy(genome), id)
            ids.append(id)
        return ids

    def inject_at(self, genome: Genome, id: int) -> None:
        """Place genome into slot id of the current population."""
        if genome is None:
            raise ValueError("genome must not be None")
        self._place(genome, self._check_id(id))

    def remove_org(self, id: int) -> None:
        """Empty slot id."""
        id = self._check_id(id)
        if self._pop[id] is not None:
            self._pop[id] = None
            self._num_orgs -= 1
        self._fit_cache.pop(id, None)

    # Fitness ----------------------------------------------------------------

    def calc_fitness_id(self, id: int) -> float:
        """Return the fitness of the organism in slot id.

        Raises:
            ValueError: If no fitness function is set or the slot is empty.
        """
        if self._fit_fun is None:
            raise ValueError("world has no fitness function")
        id = self._check_id(id)
        if self._cache_on and id in self._fit_cache:
            return self._fit_cache[id]
        fitness = float(self._fit_fun(self.get_genome_at(id)))
        if self._cache_on:
            self._fit_cache[id] = fitness
        return fitness

    def fitness_values(self) -> np.ndarray:
        """Return fitness of every occupied slot, in slot order."""
        return np.array(
            [self.calc_fitness_id(id) for id in range(len(self._pop)) if self._pop[id] is not None],
            dtype=np.float64,
        )

    # Reproduction -----------------------------------------------------------

    def get_random_org_id(self) -> int:
        """Return a uniformly drawn occupied slot id.

        Raises:
            ValueError: If the world has no organisms.
        """
        if self._num_orgs == 0:
            raise ValueError("cannot draw an organism from an empty world")
        size = len(self._pop)
        id = self.random.get_uint(size)
        while self._pop[id] is None:
            id = self.random.get_uint(size)
        return id

    def do_birth(self, genome: Genome, parent_id: int, copy_count: int = 1) -> list[int]:
        """Create copy_count offspring of genome.

        Each copy is deep-copied and passed through mutate, if set.
        Synchronous worlds append offspring to the next generation and return
        their positions there; asynchronous worlds overwrite uniformly drawn
        slots of the current population.

        Args:
            genome: Genome to copy.
            parent_id: Slot id of the parent.
            copy_count: Number of offspring.

        Returns:
            Slot ids of the offspring.
        """
        if copy_count <= 0:
            raise ValueError(f"copy_count must be positive, got {copy_count}")
        if not self._synchronous and not self._pop:
            raise ValueError("asynchronous birth needs at least one slot")

        ids = []
        for _ in range(copy_count):
            child = copy.deepcopy(genome)
            if self.mutate is not None:
                child = self.mutate(child, self.random)
            if self._synchronous:
                self._next.append(child)
                ids.append(len(self._next) - 1)
            else:
                id = self.random.get_uint(len(self._pop))
                self._place(child, id)
                ids.append(id)
        logger.debug("Parent %d produced offspring %s", parent_id, ids)
        return ids

    def update(self) -> None:
        """Close the current generation.

        Synchronous worlds replace the population with the offspring buffer
        and drop the fitness cache.
        """
        if self._synchronous:
            self._pop = list(self._next)
            self._next = []
            self._num_orgs = len(self._pop)
            self.clear_cache()
        self.update_count += 1

"""Protocol definitions for populations and selection strategies.

Selection algorithms in evoselect are written once against these protocols
and work with any population implementation that satisfies them:

1. **PopulationView**: the operations a selection algorithm may call on a
   population (size, occupancy, fitness, genomes, random draws, births).

2. **GridView**: a PopulationView that can also place a genome directly into
   a given slot. MAP-Elites needs this to keep one elite per cell.

3. **Selector**: a configured selection strategy, called once per
   generation with the population and the random engine.

Example usage:
    ```python
    def my_selector(world: PopulationView, random: RandomEngine) -> list[int]:
        parent_id = world.get_random_org_id()
        world.do_birth(world.get_genome_at(parent_id), parent_id)
        return [parent_id]
    ```
"""

from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

from evoselect.random_engine import RandomEngine

Genome = Any
FitnessFunction = Callable[[Genome], float]
LexicaseHook = Callable[[Sequence[int], int], None]


@runtime_checkable
class PopulationView(Protocol):
    """Operations selection algorithms require from a population.

    Slot ids are stable for the duration of one selection call. Births in a
    synchronous population go to a separate next-generation buffer and are
    invisible until the generation boundary; births in an asynchronous
    population overwrite slots immediately.

    Attributes:
        on_lexicase_select: Optional callback invoked by lexicase selection
            with the fitness function ids it consulted and the chosen
            organism id. None disables the notification.
    """

    on_lexicase_select: LexicaseHook | None

    def get_size(self) -> int:
        """Return the number of slots, occupied or not."""
        ...

    def get_num_orgs(self) -> int:
        """Return the number of occupied slots."""
        ...

    def is_occupied(self, id: int) -> bool:
        """Return True if slot id holds an organism."""
        ...

    def calc_fitness_id(self, id: int) -> float:
        """Return the fitness of the organism in slot id."""
        ...

    def get_genome_at(self, id: int) -> Genome:
        """Return the genome in slot id."""
        ...

    def get_random_org_id(self) -> int:
        """Return a uniformly drawn occupied slot id."""
        ...

    def do_birth(self, genome: Genome, parent_id: int, copy_count: int = 1) -> list[int]:
        """Place copy_count offspring of genome and return their slot ids."""
        ...

    def is_synchronous(self) -> bool:
        """Return True if births wait for the next generation."""
        ...

    def get_fit_fun(self) -> FitnessFunction | None:
        """Return the base fitness function, if one is set."""
        ...

    def is_cache_on(self) -> bool:
        """Return True if fitness values are cached per slot."""
        ...

    def clear_cache(self) -> None:
        """Drop every cached fitness value."""
        ...


@runtime_checkable
class GridView(PopulationView, Protocol):
    """PopulationView that supports placing a genome into a chosen slot."""

    def inject_at(self, genome: Genome, id: int) -> None:
        """Place genome into slot id, replacing any current occupant."""
        ...


@runtime_checkable
class Selector(Protocol):
    """Protocol for configured selection strategies.

    Parameters:
        world: Population to select from and give birth into.
        random: Engine supplying every random draw of the strategy.

    Returns:
        Slot ids of the reproducing parents, in birth order.
    """

    def __call__(self, world: PopulationView, random: RandomEngine) -> list[int]:
        ...

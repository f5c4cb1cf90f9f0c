"""MAP-Elites selection over a discretized phenotype grid.

Each phenotype dimension sorts an organism into one of id_count categories.
The grid cell of an organism is the mixed-radix number formed by its
categories:

    cell = Σ(category_i × scale_i),  scale_0 = 1,  scale_{i+1} = scale_i × id_count_i

The world is used as the grid: slot id == cell id, and each cell keeps only
the fittest organism seen for it.
"""

import copy
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from evoselect.protocols import Genome, GridView
from evoselect.random_engine import RandomEngine

logger = logging.getLogger(__name__)

PhenotypeFunction = Callable[[Genome], int]
MutateFunction = Callable[[Genome, RandomEngine], Genome]


@dataclass(frozen=True)
class MapElitesPhenotype:
    """One phenotype dimension of the grid.

    Attributes:
        pheno_fun: Maps a genome to a category in [0, id_count).
        id_count: Number of categories along this dimension.
    """

    pheno_fun: PhenotypeFunction | None = None
    id_count: int = 0

    def ok(self) -> bool:
        return self.pheno_fun is not None and self.id_count > 0

    def get_id(self, genome: Genome) -> int:
        """Return the category of genome.

        Raises:
            ValueError: If the phenotype function returns an out-of-range id.
        """
        pid = int(self.pheno_fun(genome))
        if pid < 0 or pid >= self.id_count:
            raise ValueError(f"phenotype id {pid} is outside [0, {self.id_count})")
        return pid


@dataclass(frozen=True)
class MapElitesConfig:
    """Phenotype dimensions that define the MAP-Elites grid.

    Example:
        >>> config = MapElitesConfig([
        ...     MapElitesPhenotype(lambda g: g[0], 3),
        ...     MapElitesPhenotype(lambda g: g[1], 4),
        ... ])
        >>> config.get_id_count()
        12
        >>> config.get_id((2, 1))
        5
    """

    phenotypes: Sequence[MapElitesPhenotype] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "phenotypes", tuple(self.phenotypes))

    def ok(self) -> bool:
        return all(p.ok() for p in self.phenotypes)

    def get_id(self, genome: Genome) -> int:
        """Return the grid cell of genome."""
        cell, scale = 0, 1
        for phenotype in self.phenotypes:
            cell += phenotype.get_id(genome) * scale
            scale *= phenotype.id_count
        return cell

    def get_id_count(self) -> int:
        """Return the number of grid cells."""
        id_count = 1
        for phenotype in self.phenotypes:
            id_count *= phenotype.id_count
        return id_count


def _check_grid(world: GridView, config: MapElitesConfig) -> None:
    if not config.ok():
        raise ValueError("every MAP-Elites phenotype needs a function and a positive id_count")
    if world.get_size() == 0:
        raise ValueError("MAP-Elites requires a world with at least one slot")
    if world.get_size() < config.get_id_count():
        raise ValueError(
            f"world has {world.get_size()} slots, MAP-Elites grid needs {config.get_id_count()}"
        )


def map_elites_seed(world: GridView, config: MapElitesConfig, genome: Genome) -> bool:
    """Place genome into its grid cell if that cell is empty.

    Returns:
        True if the genome was placed.

    Raises:
        ValueError: If the config is incomplete or the world is smaller than
            the grid.
    """
    _check_grid(world, config)
    cell = config.get_id(genome)
    if world.is_occupied(cell):
        return False
    world.inject_at(genome, cell)
    return True


def map_elites_grow(
    world: GridView,
    random: RandomEngine,
    config: MapElitesConfig,
    repro_count: int = 1,
    mutate: MutateFunction | None = None,
) -> list[int]:
    """Replicate random elites and keep offspring that improve their cell.

    The grid lives in the current population, so the world must be
    asynchronous; a synchronous update() would replace it with the empty
    offspring buffer.

    For each reproduction a parent is drawn uniformly from the occupied cells
    and copied, then mutated. The offspring moves into its own cell if the
    cell is empty or its fitness is strictly higher than the occupant's;
    otherwise it is discarded.

    Args:
        world: Grid population with a base fitness function.
        random: Engine passed to mutate.
        config: Phenotype dimensions of the grid.
        repro_count: Number of offspring to try.
        mutate: Mutation applied to each copy. Signature: (genome, random) -> genome.
            Defaults to the world's mutate attribute, if any.

    Returns:
        Parent slot ids in reproduction order.

    Raises:
        ValueError: If the grid is misconfigured, the world is synchronous,
            has no organisms or no fitness function, or repro_count is not
            positive.
    """
    _check_grid(world, config)
    if world.is_synchronous():
        raise ValueError("MAP-Elites grows the grid in place and requires an asynchronous world")
    fit_fun = world.get_fit_fun()
    if fit_fun is None:
        raise ValueError("MAP-Elites requires a base fitness function")
    if world.get_num_orgs() == 0:
        raise ValueError("MAP-Elites grow requires at least one seeded organism")
    if repro_count <= 0:
        raise ValueError(f"repro_count must be positive, got {repro_count}")
    if mutate is None:
        mutate = getattr(world, "mutate", None)

    parents = []
    placed = 0
    for _ in range(repro_count):
        parent_id = world.get_random_org_id()
        child = copy.deepcopy(world.get_genome_at(parent_id))
        if mutate is not None:
            child = mutate(child, random)

        cell = config.get_id(child)
        if not world.is_occupied(cell) or fit_fun(child) > world.calc_fitness_id(cell):
            world.inject_at(child, cell)
            placed += 1
        parents.append(parent_id)

    logger.debug("MAP-Elites grow placed %d of %d offspring", placed, repro_count)
    return parents


def map_elites_selector(config: MapElitesConfig, repro_count: int = 1, mutate: MutateFunction | None = None):
    """Create a MAP-Elites grow selector.

    Args:
        config: Phenotype dimensions of the grid.
        repro_count: Offspring tried per call.
        mutate: Optional mutation; defaults to the world's.

    Returns:
        A Selector callable.
    """

    def selector(world: GridView, random: RandomEngine) -> list[int]:
        return map_elites_grow(world, random, config, repro_count, mutate)

    return selector

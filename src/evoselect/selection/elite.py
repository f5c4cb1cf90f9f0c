"""Elite selection: copy the fittest organisms into the next generation."""

import logging

from evoselect.protocols import PopulationView
from evoselect.random_engine import RandomEngine

logger = logging.getLogger(__name__)


def elite_select(
    world: PopulationView,
    random: RandomEngine,
    e_count: int = 1,
    copy_count: int = 1,
) -> list[int]:
    """Reproduce the e_count fittest distinct organisms.

    Occupied slots are ordered by fitness, highest first. Equal fitness is
    broken by slot id, lowest first, so the cutoff between tied organisms is
    deterministic. No random draws are consumed here (births may still draw).

    Args:
        world: Population to select from.
        random: Unused by the ordering; accepted for a uniform signature.
        e_count: Number of distinct elite organisms.
        copy_count: Offspring produced per elite organism.

    Returns:
        Slot ids of the elite organisms, best first.

    Raises:
        ValueError: If e_count or copy_count is not positive, or e_count
            exceeds the number of organisms.

    Example:
        >>> # fitness [1, 5, 5, 2] -> slot 1 wins the tie with slot 2
        >>> elite_select(world, random, e_count=1)
        [1]
    """
    if e_count <= 0:
        raise ValueError(f"e_count must be positive, got {e_count}")
    if copy_count <= 0:
        raise ValueError(f"copy_count must be positive, got {copy_count}")
    num_orgs = world.get_num_orgs()
    if e_count > num_orgs:
        raise ValueError(f"e_count ({e_count}) cannot exceed number of organisms ({num_orgs})")

    ranked = sorted(
        ((world.calc_fitness_id(id), id) for id in range(world.get_size()) if world.is_occupied(id)),
        key=lambda pair: (-pair[0], pair[1]),
    )
    elite_ids = [id for _, id in ranked[:e_count]]

    for repro_id in elite_ids:
        world.do_birth(world.get_genome_at(repro_id), repro_id, copy_count)

    logger.debug("Elite selection reproduced %s (%d copies each)", elite_ids, copy_count)
    return elite_ids


def elite_selector(e_count: int = 1, copy_count: int = 1):
    """Create an elite selector.

    Args:
        e_count: Number of distinct elite organisms per call.
        copy_count: Offspring per elite organism.

    Returns:
        A Selector callable.

    Example:
        >>> selector = elite_selector(e_count=2, copy_count=5)
        >>> parents = selector(world, random)
    """
    if e_count <= 0:
        raise ValueError(f"e_count must be positive, got {e_count}")
    if copy_count <= 0:
        raise ValueError(f"copy_count must be positive, got {copy_count}")

    def selector(world: PopulationView, random: RandomEngine) -> list[int]:
        return elite_select(world, random, e_count, copy_count)

    return selector

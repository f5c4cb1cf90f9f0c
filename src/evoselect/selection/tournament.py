"""Tournament selection for single-objective maximization."""

import logging
from collections.abc import Callable

from evoselect.protocols import PopulationView
from evoselect.random_engine import RandomEngine

logger = logging.getLogger(__name__)


def run_tournaments(
    world: PopulationView,
    fitness_of: Callable[[int], float],
    t_size: int,
    tourny_count: int,
) -> list[int]:
    """Run tourny_count tournaments and reproduce each winner once.

    Entrants are drawn with replacement through world.get_random_org_id().
    They are scanned in draw order and a later entrant only replaces the
    current best on strictly higher fitness, so the first-drawn of tied
    entrants wins.

    Args:
        world: Population to draw entrants from and give birth into.
        fitness_of: Maps a slot id to the fitness used for comparison.
        t_size: Entrants per tournament.
        tourny_count: Number of tournaments.

    Returns:
        Winning slot ids in tournament order.
    """
    winners = []
    for _ in range(tourny_count):
        entries = [world.get_random_org_id() for _ in range(t_size)]

        best_id = entries[0]
        best_fit = fitness_of(best_id)
        for entry in entries[1:]:
            cur_fit = fitness_of(entry)
            if cur_fit > best_fit:
                best_fit = cur_fit
                best_id = entry

        world.do_birth(world.get_genome_at(best_id), best_id, 1)
        winners.append(best_id)
    return winners


def tournament_select(
    world: PopulationView,
    random: RandomEngine,
    t_size: int,
    tourny_count: int = 1,
) -> list[int]:
    """Reproduce the fittest entrant of each random tournament.

    With t_size=1 every tournament has a single entrant, which makes this
    uniform random selection over occupied slots.

    Args:
        world: Population to select from.
        random: Engine behind the population's random slot draws.
        t_size: Entrants per tournament (drawn with replacement).
        tourny_count: Number of tournaments, one offspring each.

    Returns:
        Winning slot ids in tournament order.

    Raises:
        ValueError: If t_size or tourny_count is not positive, or the world
            has no organisms.
    """
    if t_size <= 0:
        raise ValueError(f"t_size must be positive, got {t_size}")
    if tourny_count <= 0:
        raise ValueError(f"tourny_count must be positive, got {tourny_count}")
    if world.get_num_orgs() == 0:
        raise ValueError("tournament selection requires a non-empty population")

    winners = run_tournaments(world, world.calc_fitness_id, t_size, tourny_count)
    logger.debug("Tournament selection (t_size=%d) winners: %s", t_size, winners)
    return winners


def tournament_selector(t_size: int = 2, tourny_count: int = 1):
    """Create a tournament selector.

    Args:
        t_size: Entrants per tournament (default: 2).
        tourny_count: Tournaments per call (default: 1).

    Returns:
        A Selector callable.

    Example:
        >>> selector = tournament_selector(t_size=4, tourny_count=100)
        >>> winners = selector(world, random)
    """
    if t_size <= 0:
        raise ValueError(f"t_size must be positive, got {t_size}")
    if tourny_count <= 0:
        raise ValueError(f"tourny_count must be positive, got {tourny_count}")

    def selector(world: PopulationView, random: RandomEngine) -> list[int]:
        return tournament_select(world, random, t_size, tourny_count)

    return selector

"""evoselect: Selection and sampling core for evolutionary computation.

Population-replacement strategies (elite, tournament, roulette, lexicase,
eco, MAP-Elites) written against an abstract population protocol, on top of
a deterministic middle-square Weyl-sequence random engine.

Example (tournament selection on a bit-string population):
    >>> from evoselect import RandomEngine, World, tournament_select
    >>> random = RandomEngine(42)
    >>> world = World(random, fit_fun=sum)
    >>> for genome in [(0, 0, 1), (1, 1, 0), (1, 1, 1)]:
    ...     _ = world.inject(genome)
    >>> winners = tournament_select(world, random, t_size=2, tourny_count=5)
    >>> len(winners)
    5

Example (lexicase selection over several test cases):
    >>> from evoselect import lexicase_select
    >>> tests = [lambda g: g[0], lambda g: g[1], lambda g: g[2]]
    >>> chosen = lexicase_select(world, random, tests, repro_count=3)
    >>> len(chosen)
    3
"""

from evoselect.algorithms import evolve
from evoselect.population import World
from evoselect.protocols import GridView, PopulationView, Selector
from evoselect.random_engine import INFINITE_DRAW, EngineState, Prob, RandomEngine
from evoselect.random_utils import choose, get_permutation, sample_with_replacement, shuffle
from evoselect.registry import SelectionRegistry, list_selections
from evoselect.results import EvolveResult
from evoselect.selection import (
    MapElitesConfig,
    MapElitesPhenotype,
    eco_select,
    eco_selector,
    elite_select,
    elite_selector,
    lexicase_select,
    lexicase_selector,
    map_elites_grow,
    map_elites_seed,
    map_elites_selector,
    roulette_select,
    roulette_selector,
    tournament_select,
    tournament_selector,
)
from evoselect.weighted_index import WeightedIndex

__all__ = [
    # Driver
    "evolve",
    # Selection strategies
    "elite_select",
    "tournament_select",
    "roulette_select",
    "lexicase_select",
    "eco_select",
    "map_elites_seed",
    "map_elites_grow",
    # Selector factories
    "elite_selector",
    "tournament_selector",
    "roulette_selector",
    "lexicase_selector",
    "eco_selector",
    "map_elites_selector",
    "MapElitesConfig",
    "MapElitesPhenotype",
    # Random engine
    "RandomEngine",
    "EngineState",
    "Prob",
    "INFINITE_DRAW",
    "shuffle",
    "get_permutation",
    "choose",
    "sample_with_replacement",
    # Data structures
    "WeightedIndex",
    "World",
    # Protocols
    "PopulationView",
    "GridView",
    "Selector",
    # Registry system
    "SelectionRegistry",
    "list_selections",
    # Result types
    "EvolveResult",
]

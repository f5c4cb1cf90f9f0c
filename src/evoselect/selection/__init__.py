"""Selection strategies for evolving populations."""

from evoselect.registry import SelectionRegistry
from evoselect.selection.eco import eco_select, eco_selector
from evoselect.selection.elite import elite_select, elite_selector
from evoselect.selection.lexicase import lexicase_select, lexicase_selector
from evoselect.selection.map_elites import (
    MapElitesConfig,
    MapElitesPhenotype,
    map_elites_grow,
    map_elites_seed,
    map_elites_selector,
)
from evoselect.selection.roulette import roulette_select, roulette_selector
from evoselect.selection.tournament import tournament_select, tournament_selector

# Register built-in selection strategies
SelectionRegistry.register("eco", eco_selector)
SelectionRegistry.register("elite", elite_selector)
SelectionRegistry.register("lexicase", lexicase_selector)
SelectionRegistry.register("map_elites", map_elites_selector)
SelectionRegistry.register("roulette", roulette_selector)
SelectionRegistry.register("tournament", tournament_selector)

__all__ = [
    "eco_select",
    "eco_selector",
    "elite_select",
    "elite_selector",
    "lexicase_select",
    "lexicase_selector",
    "map_elites_grow",
    "map_elites_seed",
    "map_elites_selector",
    "roulette_select",
    "roulette_selector",
    "tournament_select",
    "tournament_selector",
    "MapElitesConfig",
    "MapElitesPhenotype",
]

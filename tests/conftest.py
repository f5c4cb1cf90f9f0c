"""Shared test fixtures for evoselect tests.

This module provides common fixtures used across test modules:
- random: Seeded RandomEngine
- RecordingWorld: World that logs every birth
- make_world: Factory building populated worlds from genome lists
"""

import pytest

from evoselect import RandomEngine, World


class RecordingWorld(World):
    """World that records (parent_id, copy_count, offspring_ids) per birth."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.births: list[tuple[int, int, list[int]]] = []

    def do_birth(self, genome, parent_id, copy_count=1):
        ids = super().do_birth(genome, parent_id, copy_count)
        self.births.append((parent_id, copy_count, ids))
        return ids


def first_gene(genome) -> float:
    """Fitness function that scores a genome by its first element."""
    return float(genome[0])


@pytest.fixture
def random() -> RandomEngine:
    """Provide a seeded engine for deterministic tests."""
    return RandomEngine(42)


@pytest.fixture
def make_world(random):
    """Build a RecordingWorld holding the given genomes.

    Defaults to a synchronous world scored by first_gene, so births do not
    disturb the population being selected from.
    """

    def factory(genomes, fit_fun=first_gene, synchronous=True, engine=None, **kwargs) -> RecordingWorld:
        world = RecordingWorld(engine or random, fit_fun=fit_fun, synchronous=synchronous, **kwargs)
        for genome in genomes:
            world.inject(genome)
        return world

    return factory


@pytest.fixture
def fitness_world(make_world) -> RecordingWorld:
    """Synchronous world with fitness [1, 5, 5, 2]."""
    return make_world([(1.0,), (5.0,), (5.0,), (2.0,)])

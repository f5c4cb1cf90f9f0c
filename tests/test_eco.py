"""Tests for eco (resource pool) selection."""

import numpy as np
import pytest

from evoselect import RandomEngine
from evoselect.selection import eco_select, eco_selector
from evoselect.selection.eco import resource_bonuses


def second_gene(genome) -> float:
    return float(genome[1])


def predict_tournaments(engine, fitness, t_size, tourny_count):
    """Replay tournament draws against known adjusted fitness."""
    winners = []
    for _ in range(tourny_count):
        entries = [engine.get_uint(len(fitness)) for _ in range(t_size)]
        best = entries[0]
        for entry in entries[1:]:
            if fitness[entry] > fitness[best]:
                best = entry
        winners.append(best)
    return winners


class TestResourceBonuses:
    """Tests for splitting resource pools."""

    def test_pool_split_among_best(self) -> None:
        """Each of the k best scorers receives pool / k."""
        extra = np.array([[3.0, 3.0, 1.0]])

        np.testing.assert_allclose(resource_bonuses(extra, np.array([6.0])), [3.0, 3.0, 0.0])

    def test_bonuses_add_across_resources(self) -> None:
        extra = np.array([[1.0, 0.0, 0.0], [0.0, 2.0, 2.0]])

        np.testing.assert_allclose(resource_bonuses(extra, np.array([4.0, 10.0])), [4.0, 5.0, 5.0])

    def test_negative_scores_never_win(self) -> None:
        """A resource where everyone scores below zero is not handed out."""
        extra = np.array([[-1.0, -2.0, -1.0]])

        np.testing.assert_allclose(resource_bonuses(extra, np.array([5.0])), [0.0, 0.0, 0.0])

    def test_zero_scores_share_pool(self) -> None:
        extra = np.array([[0.0, 0.0, -1.0]])

        np.testing.assert_allclose(resource_bonuses(extra, np.array([4.0])), [2.0, 2.0, 0.0])


class TestEcoSelect:
    """Tests for tournaments on resource-adjusted fitness."""

    @pytest.mark.parametrize(("pool", "adjusted"), [(10.0, [4.0, 5.0, 5.0]), (6.0, [4.0, 3.0, 3.0])])
    def test_tournaments_use_adjusted_fitness(self, make_world, pool, adjusted) -> None:
        """Base fitness [4, 0, 0] plus a shared pool on the second gene."""
        world = make_world([(4.0, 0.0), (0.0, 5.0), (0.0, 5.0)], engine=RandomEngine(6))
        twin = RandomEngine(6)

        winners = eco_select(world, world.random, [second_gene], pool, t_size=2, tourny_count=30)

        assert winners == predict_tournaments(twin, adjusted, 2, 30)

    def test_scalar_pool_applies_to_every_resource(self, make_world, random) -> None:
        world = make_world([(0.0, 1.0), (0.0, 0.0)])

        winners = eco_selector([second_gene, lambda g: -g[1]], pool_sizes=3.0, t_size=2, tourny_count=10)(
            world, random
        )

        assert len(winners) == 10

    def test_clears_fitness_cache(self, make_world, random) -> None:
        """Cached base fitness is dropped before evaluating."""
        world = make_world([[1.0, 0.0], [2.0, 0.0]], cache=True)
        assert world.calc_fitness_id(0) == 1.0
        world[0][0] = 9.0

        eco_select(world, random, [second_gene], [1.0], t_size=2)

        assert world.calc_fitness_id(0) == 9.0

    def test_one_birth_per_tournament(self, make_world, random) -> None:
        world = make_world([(1.0, 0.0), (2.0, 1.0)])

        eco_select(world, random, [second_gene], [1.0], t_size=1, tourny_count=4)

        assert world.get_next_size() == 4
        assert all(copies == 1 for _, copies, _ in world.births)

    def test_rejects_missing_fitness_function(self, make_world, random) -> None:
        world = make_world([(1.0, 0.0)], fit_fun=None)
        with pytest.raises(ValueError, match="base fitness function"):
            eco_select(world, random, [second_gene], [1.0], t_size=1)

    def test_rejects_empty_world(self, make_world, random) -> None:
        with pytest.raises(ValueError, match="non-empty population"):
            eco_select(make_world([]), random, [second_gene], [1.0], t_size=1)

    @pytest.mark.parametrize("t_size", [0, 3])
    def test_rejects_out_of_range_tournament(self, make_world, random, t_size) -> None:
        world = make_world([(1.0, 0.0), (2.0, 0.0)])
        with pytest.raises(ValueError, match="t_size must be in"):
            eco_select(world, random, [second_gene], [1.0], t_size=t_size)

    def test_rejects_bad_pools(self, make_world, random) -> None:
        world = make_world([(1.0, 0.0), (2.0, 0.0)])
        with pytest.raises(ValueError, match="expected 1 pool sizes"):
            eco_select(world, random, [second_gene], [1.0, 2.0], t_size=1)
        with pytest.raises(ValueError, match="pool sizes must be non-negative"):
            eco_select(world, random, [second_gene], [-1.0], t_size=1)

    def test_asynchronous_offspring_in_empty_slots_can_compete(self, make_world) -> None:
        """Offspring born into empty slots enter later tournaments on base fitness."""
        world = make_world([(1.0, 0.0), (2.0, 1.0)], synchronous=False, engine=RandomEngine(15))
        world.resize(20)

        winners = eco_select(world, world.random, [second_gene], [1.0], t_size=2, tourny_count=50)

        assert len(winners) == 50
        assert world.get_num_orgs() > 2
        assert set(winners) - {0, 1}
        assert all(world.is_occupied(id) for id in winners)

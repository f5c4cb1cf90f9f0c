"""Tests for the Fenwick-tree WeightedIndex."""

import numpy as np
import pytest

from evoselect.random_engine import RandomEngine
from evoselect.weighted_index import WeightedIndex


class TestWeights:
    """Tests for adjusting and reading weights."""

    def test_empty_index(self) -> None:
        index = WeightedIndex()
        assert len(index) == 0
        assert index.get_weight() == 0.0

    def test_adjust_updates_total(self) -> None:
        """The total tracks every adjustment."""
        index = WeightedIndex(5)
        index.adjust(0, 2.0)
        index.adjust(3, 1.5)
        index.adjust(0, 0.5)

        assert index.get_weight() == pytest.approx(2.0)
        assert index.get_weight(0) == 0.5
        assert index[3] == 1.5

    def test_construct_from_weights(self) -> None:
        index = WeightedIndex(3, np.array([1.0, 2.0, 3.0]))

        assert index.get_weight() == pytest.approx(6.0)
        assert index.get_weight(2) == 3.0

    def test_adjust_all_matches_individual_adjusts(self) -> None:
        """Bulk and incremental construction give the same sampling map."""
        weights = np.array([0.3, 0.0, 1.7, 4.0, 0.25, 2.0, 0.0, 1.1])
        bulk = WeightedIndex(len(weights))
        bulk.adjust_all(weights)
        incremental = WeightedIndex(len(weights))
        for i, w in enumerate(weights):
            incremental.adjust(i, float(w))

        assert bulk.get_weight() == pytest.approx(incremental.get_weight())
        for x in np.linspace(0.0, weights.sum(), 200, endpoint=False):
            assert bulk.index(x) == incremental.index(x)

    def test_resize_keeps_existing_weights(self) -> None:
        index = WeightedIndex(2, np.array([1.0, 2.0]))
        index.resize(4)
        index.adjust(3, 4.0)

        assert len(index) == 4
        assert index.get_weight() == pytest.approx(7.0)

        index.resize(1)
        assert index.get_weight() == pytest.approx(1.0)

    def test_clear(self) -> None:
        index = WeightedIndex(3, np.array([1.0, 2.0, 3.0]))
        index.clear()

        assert index.get_weight() == 0.0
        assert index[1] == 0.0

    @pytest.mark.parametrize("weight", [-1.0, float("nan"), float("inf")])
    def test_rejects_invalid_weight(self, weight) -> None:
        index = WeightedIndex(2)
        with pytest.raises(ValueError, match="weight must be finite and non-negative"):
            index.adjust(0, weight)

    def test_rejects_out_of_range_id(self) -> None:
        index = WeightedIndex(2)
        with pytest.raises(IndexError, match="out of bounds"):
            index.adjust(2, 1.0)
        with pytest.raises(IndexError):
            index.get_weight(-1)

    def test_rejects_non_integer_id(self) -> None:
        index = WeightedIndex(2)
        with pytest.raises(TypeError, match="ids must be integers"):
            index.adjust(0.5, 1.0)

    def test_adjust_all_rejects_bad_shape(self) -> None:
        index = WeightedIndex(3)
        with pytest.raises(ValueError, match="weights must have shape"):
            index.adjust_all(np.ones(4))


class TestIndex:
    """Tests for locating the id at a cumulative position."""

    def test_unit_weights(self) -> None:
        """Each id owns one unit of the cumulative range."""
        index = WeightedIndex(4, np.ones(4))

        assert index.index(0.5) == 0
        assert index.index(1.5) == 1
        assert index.index(2.5) == 2
        assert index.index(3.5) == 3

    def test_interval_boundaries(self) -> None:
        """An id owns [W(i), W(i) + w_i)."""
        index = WeightedIndex(3, np.array([1.0, 2.0, 3.0]))

        assert index.index(0.0) == 0
        assert index.index(1.0) == 1
        assert index.index(2.999) == 1
        assert index.index(3.0) == 2
        assert index.index(5.999) == 2

    def test_zero_weight_ids_are_never_returned(self) -> None:
        index = WeightedIndex(5, np.array([0.0, 2.0, 0.0, 0.0, 1.0]))

        for x in np.linspace(0.0, 3.0, 300, endpoint=False):
            assert index.index(x) in (1, 4)

    def test_matches_linear_scan(self) -> None:
        """index(x) agrees with a cumulative-sum search for random weights."""
        engine = RandomEngine(99)
        weights = np.array([engine.get_double(5.0) if engine.p(0.7) else 0.0 for _ in range(37)])
        index = WeightedIndex(len(weights), weights)
        bounds = np.cumsum(weights)

        for _ in range(500):
            x = engine.get_double(float(bounds[-1]))
            expected = int(np.searchsorted(bounds, x, side="right"))
            assert index.index(x) == expected

    def test_sampling_frequency_tracks_weights(self) -> None:
        """Uniform positions pick ids in proportion to their weight."""
        engine = RandomEngine(7)
        index = WeightedIndex(3, np.array([1.0, 3.0, 6.0]))
        counts = np.zeros(3)
        for _ in range(10000):
            counts[index.index(engine.get_double(index.get_weight()))] += 1

        np.testing.assert_allclose(counts / counts.sum(), [0.1, 0.3, 0.6], atol=0.02)

    @pytest.mark.parametrize("x", [-0.1, 4.0, 10.0])
    def test_rejects_position_outside_total(self, x) -> None:
        index = WeightedIndex(4, np.ones(4))
        with pytest.raises(ValueError, match="is outside"):
            index.index(x)

    def test_rejects_lookup_on_empty_index(self) -> None:
        with pytest.raises(ValueError, match="is outside"):
            WeightedIndex(3).index(0.0)


class TestRoundingFallback:
    """Tests for recovering when the tree walk stops on a zero weight."""

    def test_prefers_weighted_id_at_or_below(self) -> None:
        index = WeightedIndex(5, np.array([0.0, 1.0, 0.0, 2.0, 0.0]))

        assert index._nearest_weighted(2) == 1
        assert index._nearest_weighted(4) == 3
        assert index._nearest_weighted(5) == 3

    def test_searches_forward_when_nothing_below(self) -> None:
        """Leading zero weights send the lookup to the first weighted id."""
        index = WeightedIndex(4, np.array([0.0, 0.0, 2.0, 1.0]))

        assert index._nearest_weighted(0) == 2
        assert index._nearest_weighted(1) == 2

"""Tests for merging nested populations into a view.

Merging a population's view must give the same statistics as folding its
genomes directly, whatever the grouping.
"""

import numpy as np
import pytest

from evoview.config import PoolSettings
from evoview.genomes import StaticPopulation, genomes_from_values
from evoview.stats.pool import ViewPool
from evoview.stats.view import new_view


class TestNestedStatistics:
    """Test statistics over populations."""

    def test_two_groups_match_flat(self, pool, make_population):
        """[1, 2, 3] + [4, 5] as populations equals the flat list."""
        nested = new_view([make_population([1, 2, 3]), make_population([4, 5])], pool=pool)
        flat = new_view(genomes_from_values([1, 2, 3, 4, 5]), pool=pool)

        assert nested.mean() == pytest.approx(3.0)
        assert nested.variance() == pytest.approx(2.0)
        assert nested.mean() == pytest.approx(flat.mean())
        assert nested.variance() == pytest.approx(flat.variance())
        assert nested.max().fitness() == 5
        assert nested.min().fitness() == 1
        nested.close()
        flat.close()

    def test_population_members_are_flattened(self, pool, make_population):
        """Members of a population view are its genomes, not the population."""
        population = make_population([1, 2, 3])
        view = new_view([population], pool=pool)

        assert view.members() == population.members
        assert len(view) == 3
        assert view.count == 3.0
        view.close()

    def test_view_of_population_equals_population_view(self, pool, make_population):
        """new_view([population]) has the same statistics as population.view()."""
        population = make_population([2.5, -1.0, 9.0, 4.0])
        wrapped = new_view([population], pool=pool)
        direct = population.view()

        assert wrapped.mean() == pytest.approx(direct.mean())
        assert wrapped.variance() == pytest.approx(direct.variance())
        assert wrapped.max() is direct.max()
        assert wrapped.min() is direct.min()
        wrapped.close()
        direct.close()

    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
    def test_random_partition_matches_flat(self, pool, seed):
        """Any partition into groups merges to the flat statistics."""
        rng = np.random.default_rng(seed)
        genomes = genomes_from_values(rng.normal(scale=4.0, size=200))
        cuts = sorted(rng.choice(np.arange(1, 200), size=7, replace=False))
        groups = np.split(np.arange(200), cuts)
        populations = [
            StaticPopulation([genomes[i] for i in group], pool=pool) for group in groups
        ]

        nested = new_view(populations, pool=pool)
        flat = new_view(genomes, pool=pool)

        assert nested.members() == flat.members()
        assert nested.mean() == pytest.approx(flat.mean(), rel=1e-9)
        assert nested.variance() == pytest.approx(flat.variance(), rel=1e-9)
        assert nested.max() is flat.max()
        assert nested.min() is flat.min()
        nested.close()
        flat.close()

    def test_mixed_genomes_and_populations(self, pool, make_population):
        """Genomes and populations can be interleaved."""
        genomes = genomes_from_values([10, 0])
        entities = [genomes[0], make_population([1, 2, 3]), genomes[1], make_population([4])]
        view = new_view(entities, pool=pool)
        values = [10, 1, 2, 3, 0, 4]

        assert [g.fitness() for g in view.members()] == values
        assert view.mean() == pytest.approx(np.mean(values))
        assert view.variance() == pytest.approx(np.var(values))
        assert view.max() is genomes[0]
        assert view.min() is genomes[1]
        view.close()

    def test_deep_nesting(self, pool, make_population):
        """Populations of populations merge recursively."""
        inner = StaticPopulation([make_population([1, 2]), make_population([3])], pool=pool)
        outer = StaticPopulation([inner, make_population([4, 5])], pool=pool)
        view = new_view([outer, *genomes_from_values([6])], pool=pool)

        assert len(view) == 6
        assert view.mean() == pytest.approx(3.5)
        assert view.variance() == pytest.approx(np.var([1, 2, 3, 4, 5, 6]))
        view.close()

    def test_empty_population_contributes_nothing(self, pool, make_population):
        """Empty sub-populations are skipped without dividing by zero."""
        view = new_view(
            [make_population([]), make_population([2, 4]), make_population([])], pool=pool
        )

        assert len(view) == 2
        assert view.mean() == pytest.approx(3.0)
        assert view.variance() == pytest.approx(1.0)
        view.close()

    def test_only_empty_populations(self, pool, make_population):
        """A view over empty populations is empty."""
        view = new_view([make_population([]), make_population([])], pool=pool)

        assert len(view) == 0
        assert view.count == 0.0
        view.close()


class TestNestedExtremes:
    """Test max/min index offsetting across merged views."""

    def test_max_in_later_group(self, pool, make_population):
        """Extreme indices are offset by the members already present."""
        second = make_population([4, 5])
        view = new_view([make_population([1, 2, 3]), second], pool=pool)

        assert view.max() is second.members[1]
        assert view.members().index(view.max()) == 4
        assert view.members().index(view.min()) == 0
        view.close()

    def test_ties_across_groups_keep_first(self, pool, make_population):
        """Equal extremes in later groups do not replace earlier ones."""
        first = make_population([5, 1])
        view = new_view([first, make_population([5, 1])], pool=pool)

        assert view.max() is first.members[0]
        assert view.min() is first.members[1]
        view.close()


class TestSubViewRelease:
    """Test that merged sub-views are returned to their pools."""

    def test_sub_views_return_to_pool(self, pool, make_population):
        """Sub-views are closed during construction; the outer view is not."""
        view = new_view([make_population([1, 2]), make_population([3, 4])], pool=pool)

        # Second sub-view reuses the slot released by the first
        assert pool.idle_count == 1
        assert not view.released
        view.close()
        assert pool.idle_count == 2

    def test_sub_view_from_other_pool(self, pool):
        """A population bound to another pool gets its view back."""
        other = ViewPool(PoolSettings(max_idle=4))
        population = StaticPopulation(genomes_from_values([1, 2, 3]), pool=other)

        view = new_view([population], pool=pool)

        assert other.idle_count == 1
        assert pool.idle_count == 0
        assert view.mean() == pytest.approx(2.0)
        view.close()
        assert pool.idle_count == 1

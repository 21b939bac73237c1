"""Views: pooled, mergeable fitness statistics over genomes.

A view is a static snapshot of genomes with statistics computed once,
during construction, so every accessor is constant time:
- max/min: best and worst genome (first occurrence wins on ties)
- mean: arithmetic mean of fitness
- variance/std_deviation: population variance (divisor = number of genomes)

Construction folds each entity left to right. Genomes are folded with
Knuth's online update; populations are summarized as a sub-view and merged
with the pairwise update of Chan, Golub & LeVeque, of which Knuth's update
is the single-element case.

References:
    Knuth, D. E. (1998). The Art of Computer Programming, vol. 2:
        Seminumerical Algorithms, 3rd ed., p. 232.
    Chan, T. F., Golub, G. H., LeVeque, R. J. (1983). Algorithms for
        Computing the Sample Variance: Analysis and Recommendations.
        The American Statistician 37, 242-247.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Sequence

import numpy as np

from evoview.errors import EmptyViewError, ViewReleasedError
from evoview.models.domain import Entity, Genome, Population
from evoview.models.types import ViewSummary

if TYPE_CHECKING:
    from evoview.stats.pool import ViewPool


class View:
    """Statistics over a fixed collection of genomes.

    Views are obtained from new_view() or Population.view(), never by
    calling the constructor directly. A view has a single owner from the
    moment it is acquired until it is closed; closing hands its storage
    back to the pool it came from. Any use after close raises
    ViewReleasedError.

    Usage:
        with new_view(genomes) as view:
            print(view.mean(), view.std_deviation())
    """

    def __init__(self, pool: ViewPool, slots: list[Genome | None]):
        """Initialize an empty view over pooled slot storage.

        Args:
            pool: Pool that owns the slot storage and receives it on close.
            slots: Slot list handed out by the pool, all entries None.
        """
        self._pool = pool
        self._slots: list[Genome | None] | None = slots
        self._len = 0
        self._released = False
        self._max = 0  # Index of the best genome
        self._min = 0  # Index of the worst genome
        self._max_fitness = -math.inf
        self._min_fitness = math.inf
        self._mean = 0.0
        self._m2 = 0.0  # Sum of squared deviations from the mean
        self._count = 0.0  # Number of genomes, as a float for merge arithmetic

    # ------------------------------------------------------------------
    # Pool lifecycle
    # ------------------------------------------------------------------

    def _detach(self) -> list[Genome | None]:
        """Hand the slot storage back and retire this handle for good.

        Called by the owning pool on release, with the pool lock held.
        The returned slots hold no genome references.
        """
        slots = self._slots
        slots[: self._len] = [None] * self._len
        self._slots = None
        self._len = 0
        self._released = True
        return slots

    def _check_live(self) -> None:
        if self._released:
            raise ViewReleasedError("View used after close")

    def _check_nonempty(self) -> None:
        self._check_live()
        if self._len == 0:
            raise EmptyViewError("View has no members")

    @property
    def capacity(self) -> int:
        """Number of member slots backing this view."""
        self._check_live()
        return len(self._slots)

    @property
    def released(self) -> bool:
        """Whether the view has been closed."""
        return self._released

    @property
    def pool(self) -> ViewPool:
        """Pool that owns this view."""
        return self._pool

    def close(self) -> None:
        """Return this view to its pool.

        Members and statistics are cleared; the slot storage is kept by the
        pool for the next view. The view must not be used afterwards.

        Raises:
            ViewReleasedError: If the view was already closed.
        """
        self._pool.release(self)

    def __enter__(self) -> View:
        self._check_live()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if not self._released:
            self.close()

    # ------------------------------------------------------------------
    # Folding
    # ------------------------------------------------------------------

    def _put(self, genome: Genome) -> None:
        if self._len < len(self._slots):
            self._slots[self._len] = genome
        else:
            self._slots.append(genome)
        self._len += 1

    def _fold_genome(self, genome: Genome) -> None:
        """Fold one atomic genome (Knuth's online update)."""
        fitness = float(genome.fitness())
        delta = fitness - self._mean
        new_count = self._count + 1

        if fitness > self._max_fitness:
            self._max = self._len
            self._max_fitness = fitness
        if fitness < self._min_fitness:
            self._min = self._len
            self._min_fitness = fitness

        self._mean += delta / new_count
        self._m2 += delta * delta * (self._count / new_count)
        self._count = new_count
        self._put(genome)

    def _fold_view(self, sub: View) -> None:
        """Merge a sub-view into this view and close the sub-view.

        Uses the pairwise update of Chan et al. Empty sub-views contribute
        nothing.
        """
        sub._check_live()
        if sub._len == 0:
            sub.close()
            return

        offset = self._len
        delta = sub._mean - self._mean
        new_count = self._count + sub._count

        if sub._max_fitness > self._max_fitness:
            self._max = offset + sub._max
            self._max_fitness = sub._max_fitness
        if sub._min_fitness < self._min_fitness:
            self._min = offset + sub._min
            self._min_fitness = sub._min_fitness

        self._mean += delta * (sub._count / new_count)
        self._m2 += sub._m2 + delta * delta * (sub._count * self._count / new_count)
        self._count = new_count

        # Slice assignment grows the slot list when the range runs past its end
        self._slots[offset : offset + sub._len] = sub._slots[: sub._len]
        self._len += sub._len

        sub.close()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def members(self) -> list[Genome]:
        """Return the genomes in the view, in fold order."""
        self._check_live()
        return self._slots[: self._len]  # type: ignore[return-value]

    def max(self) -> Genome:
        """Return the genome with the best fitness."""
        self._check_nonempty()
        return self._slots[self._max]  # type: ignore[return-value]

    def min(self) -> Genome:
        """Return the genome with the worst fitness."""
        self._check_nonempty()
        return self._slots[self._min]  # type: ignore[return-value]

    def range(self) -> float:
        """Return the difference between the best and worst fitness."""
        return self.max().fitness() - self.min().fitness()

    def mean(self) -> float:
        """Return the average fitness."""
        self._check_nonempty()
        return self._mean

    def variance(self) -> float:
        """Return the population variance of fitness."""
        self._check_nonempty()
        return self._m2 / self._count

    def std_deviation(self) -> float:
        """Return the population standard deviation of fitness."""
        return math.sqrt(self.variance())

    @property
    def count(self) -> float:
        """Number of genomes folded in, as a float."""
        self._check_live()
        return self._count

    def fitness_values(self) -> np.ndarray:
        """Return member fitness values as a float64 array, in fold order."""
        self._check_live()
        return np.fromiter(
            (genome.fitness() for genome in self._slots[: self._len]),  # type: ignore[union-attr]
            dtype=np.float64,
            count=self._len,
        )

    def summary(self) -> ViewSummary:
        """Return a snapshot of the statistics that outlives the view."""
        self._check_nonempty()
        variance = self._m2 / self._count
        return ViewSummary(
            size=self._len,
            max_fitness=self.max().fitness(),
            min_fitness=self.min().fitness(),
            mean=self._mean,
            variance=variance,
            std_deviation=math.sqrt(variance),
        )

    def __len__(self) -> int:
        self._check_live()
        return self._len

    def __str__(self) -> str:
        return (
            f"Max: {self.max().fitness():f} | "
            f"Min: {self.min().fitness():f} | "
            f"SD: {self.std_deviation():f}"
        )

    def __repr__(self) -> str:
        if self._released:
            return "<View released>"
        return f"<View size={self._len} capacity={len(self._slots)}>"


def new_view(genomes: Sequence[Entity], pool: ViewPool | None = None) -> View:
    """Construct a view over genomes in a single pass.

    Populations are not added as members themselves: their own view is
    merged in, so `new_view([population])` has the same statistics as
    `population.view()`.

    Args:
        genomes: Genomes and/or populations, folded left to right.
        pool: Pool to acquire the view from. Defaults to the shared pool.

    Returns:
        A live view owned by the caller, who must close it.
    """
    if pool is None:
        from evoview.stats.pool import default_pool

        pool = default_pool()

    view = pool.acquire(size_hint=len(genomes))
    try:
        for entity in genomes:
            if isinstance(entity, Population):
                view._fold_view(entity.view())
            else:
                view._fold_genome(entity)
    except Exception:
        view.close()
        raise
    return view

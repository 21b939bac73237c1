"""Static genomes and populations.

Entities whose fitness never changes. Useful for reporting on fitness
values computed elsewhere, and for tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from evoview.models.domain import Entity, Genome, Population
from evoview.stats.pool import ViewPool
from evoview.stats.view import View, new_view


@dataclass(eq=False)
class StaticGenome(Genome):
    """Genome with a constant fitness."""

    value: float

    def fitness(self) -> float:
        return self.value


@dataclass(eq=False)
class StaticPopulation(Population):
    """Population over a fixed list of genomes and/or populations.

    Attributes:
        members: Entities viewed, in order.
        pool: Pool for views of this population (None = shared pool).
    """

    members: list[Entity] = field(default_factory=list)
    pool: ViewPool | None = None

    def view(self) -> View:
        return new_view(self.members, pool=self.pool)


def genomes_from_values(values: Iterable[float]) -> list[StaticGenome]:
    """Wrap each fitness value in a StaticGenome."""
    return [StaticGenome(value) for value in values]

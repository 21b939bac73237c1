"""Entity interfaces consumed by the view engine.

Two shapes exist and no others:
- Genome: an atomic entity with a fitness value
- Population: a nested collection that can summarize itself as a View

Fitness computation and population membership belong to the caller;
the engine only reads these two capabilities.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from evoview.stats.view import View


class Genome(ABC):
    """Atomic entity with a fitness value."""

    @abstractmethod
    def fitness(self) -> float:
        """Return the fitness of this genome.

        Must be side-effect free and stable for the duration of one
        view construction.
        """
        pass


class Population(ABC):
    """Nested collection of genomes and/or populations."""

    @abstractmethod
    def view(self) -> View:
        """Return a freshly constructed view over the members.

        The view is handed over to the caller, which is responsible for
        closing it. When a population is folded into a larger view, the
        larger view closes it.
        """
        pass


Entity = Genome | Population

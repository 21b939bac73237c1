"""Ready-made entities for fixed fitness values."""

from evoview.genomes.static import StaticGenome, StaticPopulation, genomes_from_values

__all__ = [
    "StaticGenome",
    "StaticPopulation",
    "genomes_from_values",
]

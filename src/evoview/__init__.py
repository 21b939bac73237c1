"""evoview: pooled fitness statistics for genomes and nested populations.

Typical use, once per generation:

    with new_view(population_members) as view:
        best = view.max()
        logger.info(str(view))
"""

from evoview.config import PoolSettings
from evoview.errors import EmptyViewError, ViewReleasedError
from evoview.models.domain import Entity, Genome, Population
from evoview.models.types import ViewSummary
from evoview.stats import View, ViewPool, default_pool, new_view

__all__ = [
    # Entities
    "Entity",
    "Genome",
    "Population",
    # Views
    "View",
    "ViewPool",
    "ViewSummary",
    "default_pool",
    "new_view",
    # Configuration
    "PoolSettings",
    # Errors
    "EmptyViewError",
    "ViewReleasedError",
]

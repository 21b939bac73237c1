"""Tests for entity interfaces and summary models."""

import pytest
from pydantic import ValidationError

from evoview.models.domain import Genome, Population
from evoview.models.types import ViewSummary


class TestEntityInterfaces:
    """Test the abstract entity base classes."""

    def test_genome_is_abstract(self):
        """Genome cannot be instantiated without fitness()."""
        with pytest.raises(TypeError):
            Genome()

    def test_population_is_abstract(self):
        """Population cannot be instantiated without view()."""
        with pytest.raises(TypeError):
            Population()

    def test_population_is_not_a_genome(self):
        """The two entity shapes are distinct."""
        assert not issubclass(Population, Genome)


class TestViewSummary:
    """Test ViewSummary model."""

    def test_valid_summary(self):
        """Valid data should create model."""
        summary = ViewSummary(
            size=3,
            max_fitness=3.0,
            min_fitness=1.0,
            mean=2.0,
            variance=2.0 / 3.0,
            std_deviation=(2.0 / 3.0) ** 0.5,
        )
        assert summary.size == 3
        assert summary.model_dump()["mean"] == 2.0

    def test_missing_field_rejected(self):
        """All statistics are required."""
        with pytest.raises(ValidationError):
            ViewSummary(size=3, max_fitness=3.0, min_fitness=1.0, mean=2.0)

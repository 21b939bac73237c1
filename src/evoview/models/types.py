"""Pydantic models for view statistics."""

from pydantic import BaseModel


class ViewSummary(BaseModel):
    """Detached snapshot of a view's statistics.

    Unlike the view it was taken from, a summary stays valid after the
    view is closed.
    """

    size: int
    max_fitness: float
    min_fitness: float
    mean: float
    variance: float  # Population variance (divisor = size)
    std_deviation: float

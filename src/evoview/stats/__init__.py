"""View construction and pooling.

- view.py: View and new_view(), the single-pass aggregator
- pool.py: ViewPool, the thread-safe recycling store
"""

from evoview.stats.pool import ViewPool, default_pool
from evoview.stats.view import View, new_view

__all__ = [
    "View",
    "ViewPool",
    "default_pool",
    "new_view",
]

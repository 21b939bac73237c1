"""Recycling store for view storage.

Building a view once per generation would otherwise allocate a fresh
member list every time. The pool keeps the slot lists of closed views,
ordered by capacity, and wraps them in a new View on every acquire.
Handles are never reused: a closed view stays closed even after its
storage has gone to a new owner.

The pool is shared and thread-safe. Individual views are not: each view
has exactly one owner between acquire and release.
"""

from __future__ import annotations

import bisect
import logging
import threading

from evoview.config import PoolSettings
from evoview.errors import ViewReleasedError
from evoview.models.domain import Genome
from evoview.stats.view import View

logger = logging.getLogger(__name__)

# Shared pool used by new_view() when no pool is given
_default_pool: ViewPool | None = None
_default_pool_lock = threading.Lock()


class ViewPool:
    """Thread-safe store of idle slot storage keyed by capacity."""

    def __init__(self, settings: PoolSettings | None = None):
        """Initialize an empty pool.

        Args:
            settings: Pool tuning. Defaults to PoolSettings().
        """
        self.settings = settings if settings is not None else PoolSettings()
        self._lock = threading.Lock()
        # Parallel lists, ascending by capacity
        self._idle: list[list[Genome | None]] = []
        self._capacities: list[int] = []

    @property
    def idle_count(self) -> int:
        """Number of slot lists waiting for reuse."""
        with self._lock:
            return len(self._idle)

    def acquire(self, size_hint: int = 0) -> View:
        """Get a new, empty view with room for at least size_hint members.

        The view reuses the smallest idle slot list that already fits, then
        the largest idle one (grown to fit), then fresh storage.

        Args:
            size_hint: Expected number of members.

        Returns:
            A view owned by the caller until it is released.

        Raises:
            ValueError: If size_hint is negative.
        """
        if size_hint < 0:
            raise ValueError(f"size_hint must be >= 0, got {size_hint}")

        with self._lock:
            slots = self._take(size_hint)

        if slots is None:
            capacity = max(size_hint, self.settings.initial_capacity)
            logger.debug(f"Allocating new view storage with capacity {capacity}")
            slots = [None] * capacity
        elif len(slots) < size_hint:
            slots.extend([None] * (size_hint - len(slots)))

        return View(self, slots)

    def _take(self, size_hint: int) -> list[Genome | None] | None:
        """Pop the best-fitting idle slot list. Caller holds the lock."""
        if not self._idle:
            return None
        i = bisect.bisect_left(self._capacities, size_hint)
        if i == len(self._idle):
            i -= 1
        self._capacities.pop(i)
        return self._idle.pop(i)

    def release(self, view: View) -> None:
        """Retire a view and keep its slot storage for reuse.

        The storage is dropped instead when settings.max_idle slot lists
        are already idle. Either way the view stays released.

        Args:
            view: A live view acquired from this pool.

        Raises:
            ValueError: If the view belongs to another pool.
            ViewReleasedError: If the view was already released.
        """
        if view.pool is not self:
            raise ValueError("View was acquired from a different pool")

        with self._lock:
            if view.released:
                raise ViewReleasedError("View released twice")
            slots = view._detach()

            if len(self._idle) >= self.settings.max_idle:
                dropped = True
            else:
                dropped = False
                capacity = len(slots)
                i = bisect.bisect_right(self._capacities, capacity)
                self._capacities.insert(i, capacity)
                self._idle.insert(i, slots)

        if dropped:
            logger.debug(f"Pool full ({self.settings.max_idle} idle), dropping view storage")

    def clear(self) -> None:
        """Drop all idle slot storage."""
        with self._lock:
            self._idle.clear()
            self._capacities.clear()


def default_pool() -> ViewPool:
    """Get or create the shared pool.

    Settings are read from the environment on first use.
    """
    global _default_pool
    with _default_pool_lock:
        if _default_pool is None:
            _default_pool = ViewPool(PoolSettings.from_env())
        return _default_pool

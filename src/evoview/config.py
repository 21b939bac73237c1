"""Pool configuration.

Settings are read from the environment once, when the default pool is
created. Explicit pools take a PoolSettings instance directly.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

ENV_MAX_IDLE = "EVOVIEW_POOL_MAX_IDLE"
ENV_INITIAL_CAPACITY = "EVOVIEW_POOL_INITIAL_CAPACITY"


class PoolSettings(BaseModel):
    """Tuning knobs for a ViewPool."""

    max_idle: int = Field(default=64, ge=0)  # Idle views kept for reuse
    initial_capacity: int = Field(default=0, ge=0)  # Slots for a brand new view

    @classmethod
    def from_env(cls) -> PoolSettings:
        """Build settings from EVOVIEW_POOL_* environment variables.

        Unset variables fall back to the field defaults.

        Raises:
            pydantic.ValidationError: If a variable is not a non-negative integer.
        """
        values: dict[str, str] = {}
        max_idle = os.environ.get(ENV_MAX_IDLE)
        if max_idle is not None:
            values["max_idle"] = max_idle
        initial_capacity = os.environ.get(ENV_INITIAL_CAPACITY)
        if initial_capacity is not None:
            values["initial_capacity"] = initial_capacity
        return cls(**values)

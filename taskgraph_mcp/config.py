"""Engine configuration.

Defaults can be overridden through ``TASKGRAPH_<FIELD>`` environment
variables, e.g. ``TASKGRAPH_MAX_LEVEL=4``.
"""

import os
from functools import lru_cache

from pydantic import BaseModel, Field

ENV_PREFIX = "TASKGRAPH_"


class EngineConfig(BaseModel):
    """Tunable constants shared by the hierarchy, dependency and schedule engines."""

    max_level: int = Field(default=3, ge=0, description="Deepest allowed nesting level (root is 0)")
    order_step: float = Field(default=1000, gt=0, description="Spacing between sibling order keys")
    default_duration_days: float = Field(default=7, gt=0, description="Window length when a task has no end date")
    min_duration_days: float = Field(default=1, gt=0, description="Shortest window a scheduled task may have")
    timeline_padding_days: float = Field(default=7, ge=0, description="Margin added around the timeline bounds")
    empty_timeline_days: float = Field(default=30, gt=0, description="Timeline length when there are no tasks")
    critical_tolerance_days: float = Field(
        default=1, gt=0, description="Max early/late start gap for a task to count as critical"
    )

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from ``TASKGRAPH_*`` environment variables."""
        overrides = {}
        for name in cls.model_fields:
            value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if value is not None and value.strip():
                overrides[name] = value.strip()
        return cls.model_validate(overrides)


@lru_cache(maxsize=1)
def get_config() -> EngineConfig:
    """Return the process-wide config, read once from the environment."""
    return EngineConfig.from_env()


def resolve_config(config: EngineConfig | None) -> EngineConfig:
    return config if config is not None else get_config()

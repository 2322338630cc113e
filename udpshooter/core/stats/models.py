from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field


class SourceStats(BaseModel):
    """Cumulative counters for one local source IP."""

    model_config = ConfigDict(extra="forbid")

    bytes_sent: int = 0
    packets_sent: int = 0
    last_active: float = Field(default_factory=time.time)


class TargetStats(BaseModel):
    model_config = ConfigDict(extra="forbid")

    bytes_sent: int = 0
    packets_sent: int = 0
    last_active: float = Field(default_factory=time.time)

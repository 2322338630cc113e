from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class TotalStats(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    bytes_sent: int = 0
    packets_sent: int = 0
    bandwidth_mbps: float = 0.0
    uptime_seconds: float = 0.0


class SourceIPStats(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    bytes_sent: int = 0
    packets_sent: int = 0
    bandwidth_mbps: float = 0.0
    last_active: float = 0.0


class SystemStats(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    cpu_usage: float = 0.0  # heuristic, see SystemSampler
    memory_usage: float = 0.0
    cpu_count: int = 0
    memory_usage_mb: float = 0.0
    memory_total_mb: float = 0.0
    goroutine_count: int = 0  # live threads; name kept for collector compatibility
    gc_count: int = 0
    gc_pause_ms: float = 0.0


class StatsSnapshot(BaseModel):
    """Totals and per-source stats copied under one read lock."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    total: TotalStats
    source_ip_stats: Dict[str, SourceIPStats] = Field(default_factory=dict)
    target_stats: Dict[str, Any] = Field(default_factory=dict)


class ReportData(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    timestamp: datetime
    management_ip: str = ""
    total_stats: TotalStats
    source_ip_stats: Dict[str, SourceIPStats] = Field(default_factory=dict)
    target_stats: Dict[str, Any] = Field(default_factory=dict)
    system_stats: SystemStats

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional

from udpshooter.core.stats.store import TrafficStats
from udpshooter.core.telemetry.models import SourceIPStats, StatsSnapshot, TotalStats


def bandwidth_mbps(bytes_sent: int, uptime_seconds: float) -> float:
    if uptime_seconds <= 0:
        return 0.0
    return float(bytes_sent * 8) / (uptime_seconds * 1_000_000)


class StatsSnapshotter:
    """
    Copies the shared counters into an immutable StatsSnapshot.

    The store's read lock is held for the entire copy so totals and the
    per-source map describe the same instant. Uptime is measured from
    `start_time` on the injected monotonic clock.
    """

    def __init__(self, stats: TrafficStats, *, clock: Callable[[], float] = time.monotonic, start_time: Optional[float] = None):
        self.stats = stats
        self._clock = clock
        self.start_time = float(clock() if start_time is None else start_time)

    def uptime_seconds(self) -> float:
        return float(self._clock() - self.start_time)

    def snapshot(self) -> StatsSnapshot:
        with self.stats.read_locked() as st:
            uptime = self.uptime_seconds()
            total = TotalStats(
                bytes_sent=int(st.bytes_sent),
                packets_sent=int(st.packets_sent),
                bandwidth_mbps=bandwidth_mbps(st.bytes_sent, uptime),
                uptime_seconds=uptime,
            )
            sources: Dict[str, SourceIPStats] = {}
            for ip, src in st.source_ip_stats.items():
                sources[ip] = SourceIPStats(
                    bytes_sent=int(src.bytes_sent),
                    packets_sent=int(src.packets_sent),
                    bandwidth_mbps=bandwidth_mbps(src.bytes_sent, uptime),
                    last_active=float(src.last_active),
                )
            targets: Dict[str, Any] = {key: _copy_opaque(tgt) for key, tgt in st.target_stats.items()}
        return StatsSnapshot(total=total, source_ip_stats=sources, target_stats=targets)


def _copy_opaque(value: Any) -> Any:
    # target entries belong to the store; copy without interpreting them
    if hasattr(value, "model_dump"):
        return value.model_dump()
    if isinstance(value, dict):
        return dict(value)
    return value

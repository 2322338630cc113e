from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from udpshooter.core.telemetry.models import ReportData, StatsSnapshot, SystemStats


def build_report(snapshot: StatsSnapshot, system: SystemStats, *, management_ip: str = "", timestamp: Optional[datetime] = None) -> ReportData:
    return ReportData(
        timestamp=timestamp or datetime.now(timezone.utc),
        management_ip=str(management_ip or ""),
        total_stats=snapshot.total,
        source_ip_stats=dict(snapshot.source_ip_stats),
        target_stats=dict(snapshot.target_stats),
        system_stats=system,
    )

"""
Traffic reporter.

Every interval it snapshots the shared traffic counters, samples host and
process resources (TTL-cached), logs a summary and, when a collector URL is
configured, POSTs the report as JSON. Delivery is best effort: no retries.
"""

from udpshooter.core.telemetry.reporter import Reporter, ReporterState

__all__ = ["Reporter", "ReporterState"]

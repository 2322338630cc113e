"""
Traffic counters shared between the sender threads and the reporter.
"""

from udpshooter.core.stats.models import SourceStats, TargetStats
from udpshooter.core.stats.rwlock import ReadWriteLock
from udpshooter.core.stats.store import TrafficStats

__all__ = ["ReadWriteLock", "SourceStats", "TargetStats", "TrafficStats"]

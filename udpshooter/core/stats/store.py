from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterator

from udpshooter.core.stats.models import SourceStats, TargetStats
from udpshooter.core.stats.rwlock import ReadWriteLock


class TrafficStats:
    """
    Shared traffic counters mutated by the sender threads.

    Writers go through record_send()/reset() (exclusive access). Readers must
    hold read_locked() for the whole time they look at more than one field,
    otherwise totals and per-source maps can disagree.
    """

    def __init__(self, *, wall_clock: Callable[[], float] = time.time):
        self._wall_clock = wall_clock
        self.lock = ReadWriteLock()
        self.bytes_sent = 0
        self.packets_sent = 0
        self.source_ip_stats: Dict[str, SourceStats] = {}
        self.target_stats: Dict[str, TargetStats] = {}

    @contextmanager
    def read_locked(self) -> Iterator["TrafficStats"]:
        with self.lock.read_locked():
            yield self

    def record_send(self, source_ip: str, target_key: str, nbytes: int, packets: int = 1) -> None:
        if nbytes < 0 or packets < 0:
            raise ValueError("nbytes and packets must be non-negative")
        now = self._wall_clock()
        with self.lock.write_locked():
            self.bytes_sent += int(nbytes)
            self.packets_sent += int(packets)

            src = self.source_ip_stats.get(source_ip)
            if src is None:
                src = SourceStats(last_active=now)
                self.source_ip_stats[source_ip] = src
            src.bytes_sent += int(nbytes)
            src.packets_sent += int(packets)
            src.last_active = now

            tgt = self.target_stats.get(target_key)
            if tgt is None:
                tgt = TargetStats(last_active=now)
                self.target_stats[target_key] = tgt
            tgt.bytes_sent += int(nbytes)
            tgt.packets_sent += int(packets)
            tgt.last_active = now

    def register_source(self, source_ip: str) -> None:
        # a source bound but not yet sending still shows up with zero rate
        with self.lock.write_locked():
            self.source_ip_stats.setdefault(source_ip, SourceStats(last_active=self._wall_clock()))

    def reset(self) -> None:
        with self.lock.write_locked():
            self.bytes_sent = 0
            self.packets_sent = 0
            self.source_ip_stats.clear()
            self.target_stats.clear()

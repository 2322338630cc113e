from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from typing import Callable, Optional

from udpshooter.core.config.models import ReportConfig
from udpshooter.core.errors import ReporterStateError, SerializationError
from udpshooter.core.stats.store import TrafficStats
from udpshooter.core.telemetry.assembler import build_report
from udpshooter.core.telemetry.delivery import RemoteDelivery, encode_report
from udpshooter.core.telemetry.formatting import format_bytes, format_number
from udpshooter.core.telemetry.models import ReportData
from udpshooter.core.telemetry.snapshot import StatsSnapshotter
from udpshooter.core.telemetry.system import SystemSampler


class ReporterState(str, Enum):
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    STOPPING = "STOPPING"
    STOPPED = "STOPPED"


class Reporter:
    """
    Periodic traffic/resource reporter.

    One background thread ticks every `interval` seconds and runs
    generate_report() to completion before waiting again, so ticks never
    overlap. stop() sets the cancel event and joins that thread; nothing is
    logged or sent after it returns.
    """

    def __init__(
        self,
        *,
        cfg: ReportConfig,
        stats: TrafficStats,
        logger: Optional[logging.Logger] = None,
        sampler: Optional[SystemSampler] = None,
        delivery: Optional[RemoteDelivery] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.cfg = cfg
        self.logger = logger or logging.getLogger("udpshooter.reporter")
        self.interval = cfg.interval_seconds()
        self.snapshotter = StatsSnapshotter(stats, clock=clock)
        self.sampler = sampler or SystemSampler(ttl_seconds=cfg.cache_ttl_seconds)
        self.delivery = delivery or RemoteDelivery(cfg.url, timeout_seconds=cfg.timeout_seconds, logger=self.logger)
        self.reports_generated = 0

        self._lock = threading.Lock()
        self._state = ReporterState.IDLE
        self._stop = threading.Event()
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> ReporterState:
        with self._lock:
            return self._state

    # -------- lifecycle --------
    def start(self) -> None:
        with self._lock:
            if self._state != ReporterState.IDLE:
                raise ReporterStateError("Reporter can only be started once.", state=self._state.value)
            self._thread = threading.Thread(target=self._loop, name="reporter", daemon=True)
            self._state = ReporterState.RUNNING
            self._thread.start()

        if self.delivery.configured:
            self.logger.info("reporter started, interval: %gs, url: %s", self.interval, self.delivery.url)
        else:
            self.logger.info("reporter started, interval: %gs (local log only)", self.interval)

    def stop(self) -> None:
        with self._lock:
            if self._state == ReporterState.STOPPED:
                return
            first = self._state != ReporterState.STOPPING
            thread = self._thread
            self._state = ReporterState.STOPPING
            self._stop.set()

        if not first:
            # another caller is joining; return only once it has finished
            if thread is not threading.current_thread():
                self._stopped.wait()
            return

        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self.delivery.close()

        with self._lock:
            self._state = ReporterState.STOPPED
        self._stopped.set()
        self.logger.info("reporter stopped")

    def __enter__(self) -> "Reporter":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()

    # -------- loop --------
    def _loop(self) -> None:
        next_tick = time.monotonic() + self.interval
        while True:
            if self._stop.wait(max(0.0, next_tick - time.monotonic())):
                return
            # a stop racing the tick wins
            if self._stop.is_set():
                return
            try:
                self.generate_report()
            except Exception:  # noqa: BLE001
                self.logger.exception("report tick failed")
            next_tick += self.interval
            now = time.monotonic()
            if next_tick < now:
                # overran: fire once right away, no catch-up burst
                next_tick = now

    def generate_report(self) -> Optional[ReportData]:
        """Run one tick synchronously. Returns None when the tick was abandoned."""
        snap = self.snapshotter.snapshot()
        system = self.sampler.sample()
        report = build_report(snap, system, management_ip=self.cfg.management_ip)

        try:
            body = encode_report(report)
        except SerializationError as e:
            self.logger.error("report generation failed: %s", e.context.get("detail"))
            return None

        if self.delivery.configured:
            self.delivery.send(body, cancel=self._stop)

        self._log_report(report)
        self.reports_generated += 1
        return report

    def _log_report(self, report: ReportData) -> None:
        t = report.total_stats
        self.logger.info("traffic report:")
        self.logger.info(
            "total sent: %s (%s packets) | bandwidth: %.2f Mbps | uptime: %.1fs",
            format_bytes(t.bytes_sent),
            format_number(t.packets_sent),
            t.bandwidth_mbps,
            t.uptime_seconds,
        )
        for ip in sorted(report.source_ip_stats):
            s = report.source_ip_stats[ip]
            self.logger.info(
                "source [%s]: %s | %.2f Mbps | %s packets",
                ip,
                format_bytes(s.bytes_sent),
                s.bandwidth_mbps,
                format_number(s.packets_sent),
            )
        sysst = report.system_stats
        self.logger.info(
            "system: cpu cores: %d | cpu est: %.1f%% | memory: %.1f/%.1f MB (%.1f%%) | threads: %d | gc: %d (last pause %.2f ms)",
            sysst.cpu_count,
            sysst.cpu_usage,
            sysst.memory_usage_mb,
            sysst.memory_total_mb,
            sysst.memory_usage,
            sysst.goroutine_count,
            sysst.gc_count,
            sysst.gc_pause_ms,
        )

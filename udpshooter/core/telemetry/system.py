from __future__ import annotations

import gc
import os
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

import psutil

from udpshooter.core.telemetry.models import SystemStats

GC_PAUSE_RING_SIZE = 256
DEFAULT_CACHE_TTL_SECONDS = 30.0
_MB = 1024.0 * 1024.0


class GCPauseRecorder:
    """
    Tracks garbage collection cycles through gc.callbacks.

    Every completed collection bumps a monotonic counter and writes its pause
    into a fixed ring at (count - 1) % capacity.
    """

    def __init__(self, *, capacity: int = GC_PAUSE_RING_SIZE, clock: Callable[[], float] = time.perf_counter):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = int(capacity)
        self._clock = clock
        self._lock = threading.RLock()  # the collector can fire while this thread holds it
        self._pauses_ms: List[float] = [0.0] * self.capacity
        self._count = 0
        self._started_at: Optional[float] = None
        self._installed = False

    def install(self) -> None:
        with self._lock:
            if self._installed:
                return
            gc.callbacks.append(self._on_gc)
            self._installed = True

    def uninstall(self) -> None:
        with self._lock:
            if not self._installed:
                return
            try:
                gc.callbacks.remove(self._on_gc)
            except ValueError:
                pass
            self._installed = False

    def _on_gc(self, phase: str, info: Dict[str, Any]) -> None:
        # runs inside the collector: no allocation-heavy work, no logging
        if phase == "start":
            self._started_at = self._clock()
        elif phase == "stop" and self._started_at is not None:
            self.record_pause((self._clock() - self._started_at) * 1000.0)
            self._started_at = None

    def record_pause(self, pause_ms: float) -> None:
        with self._lock:
            self._count += 1
            self._pauses_ms[(self._count - 1) % self.capacity] = float(pause_ms)

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    def last_pause_ms(self) -> float:
        with self._lock:
            if self._count == 0:
                return 0.0
            return self._pauses_ms[(self._count - 1) % self.capacity]

    def read(self) -> Tuple[int, float]:
        """Return (cycle count, last pause ms) read together."""
        with self._lock:
            if self._count == 0:
                return 0, 0.0
            return self._count, self._pauses_ms[(self._count - 1) % self.capacity]


_default_recorder: Optional[GCPauseRecorder] = None
_default_recorder_lock = threading.Lock()


def default_gc_recorder() -> GCPauseRecorder:
    global _default_recorder
    with _default_recorder_lock:
        if _default_recorder is None:
            _default_recorder = GCPauseRecorder()
            _default_recorder.install()
        return _default_recorder


def estimate_cpu_usage(task_count: int, core_count: int) -> float:
    """
    Live-thread/core ratio scaled by 10 and clamped to [0, 100].

    A cheap load proxy, not a measurement of CPU time.
    """
    if core_count <= 0:
        return 0.0
    return max(0.0, min(100.0, float(task_count) / float(core_count) * 10.0))


class SystemSampler:
    """
    Host/process resource sample with a TTL cache.

    The cache has its own lock, independent of the traffic counter lock, so
    repeat reads never wait behind the senders.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        gc_recorder: Optional[GCPauseRecorder] = None,
    ):
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._gc = gc_recorder if gc_recorder is not None else default_gc_recorder()
        self._proc = psutil.Process(os.getpid())
        self._lock = threading.Lock()
        self._last_sample_time: Optional[float] = None
        self._cached: Optional[SystemStats] = None

    def sample(self) -> SystemStats:
        with self._lock:
            now = self._clock()
            if self._cached is not None and self._last_sample_time is not None and (now - self._last_sample_time) < self.ttl_seconds:
                return self._cached.model_copy()

            fresh = self._compute()
            self._cached = fresh
            self._last_sample_time = now
            return fresh.model_copy()

    def invalidate(self) -> None:
        with self._lock:
            self._cached = None
            self._last_sample_time = None

    def _compute(self) -> SystemStats:
        cores = os.cpu_count() or 1
        tasks = threading.active_count()
        used_mb, total_mb = self._memory_mb()
        pct = (used_mb / total_mb * 100.0) if total_mb > 0 else 0.0
        gc_count, gc_pause_ms = self._gc.read()
        return SystemStats(
            cpu_usage=estimate_cpu_usage(tasks, cores),
            memory_usage=pct,
            cpu_count=int(cores),
            memory_usage_mb=used_mb,
            memory_total_mb=total_mb,
            goroutine_count=int(tasks),
            gc_count=int(gc_count),
            gc_pause_ms=float(gc_pause_ms),
        )

    def _memory_mb(self) -> Tuple[float, float]:
        try:
            used = float(self._proc.memory_info().rss) / _MB
        except psutil.Error:
            used = 0.0
        try:
            total = float(psutil.virtual_memory().total) / _MB
        except psutil.Error:
            total = 0.0
        return used, total

from __future__ import annotations

import logging

import pytest
import requests

from udpshooter.core.stats.store import TrafficStats
from udpshooter.core.telemetry.system import GCPauseRecorder, SystemSampler

from tests.helpers.fakes import FakeClock, FakePost


@pytest.fixture
def clock():
    return FakeClock(start=1000.0)


@pytest.fixture
def traffic():
    return TrafficStats()


@pytest.fixture
def gc_recorder():
    # not hooked into gc.callbacks; tests feed it directly
    return GCPauseRecorder(capacity=8)


@pytest.fixture
def sampler(clock, gc_recorder):
    return SystemSampler(ttl_seconds=30.0, clock=clock.time, gc_recorder=gc_recorder)


@pytest.fixture
def test_logger():
    lg = logging.getLogger("tests.reporter")
    lg.setLevel(logging.DEBUG)
    return lg


@pytest.fixture
def fake_post(monkeypatch):
    fp = FakePost()
    monkeypatch.setattr(requests.Session, "post", lambda _session, url, **kw: fp(url, **kw))
    return fp

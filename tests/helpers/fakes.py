from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import requests


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self._t = float(start)

    def time(self) -> float:
        return self._t

    def advance(self, seconds: float) -> None:
        self._t += float(seconds)


class StubResponse:
    def __init__(self, status_code: int = 200, text: str = ""):
        self.status_code = status_code
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


@dataclass
class FakePost:
    """
    Drop-in for requests.post. Records calls; optionally blocks until released
    or raises a transport error.
    """

    status_code: int = 200
    error: Optional[Exception] = None
    block: bool = False
    calls: List[Dict[str, Any]] = field(default_factory=list)
    called: threading.Event = field(default_factory=threading.Event)
    release: threading.Event = field(default_factory=threading.Event)

    def __call__(self, url, data=None, headers=None, timeout=None, **_kw):  # noqa: ANN001
        self.calls.append({"url": url, "data": data, "headers": dict(headers or {}), "timeout": timeout})
        self.called.set()
        if self.block:
            self.release.wait(5.0)
        if self.error is not None:
            raise self.error
        return StubResponse(self.status_code)


def wait_until(pred: Callable[[], bool], timeout: float = 3.0, step: float = 0.01) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if pred():
            return True
        time.sleep(step)
    return pred()

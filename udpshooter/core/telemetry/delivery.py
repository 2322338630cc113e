from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Optional, Union

import requests

from udpshooter.core.errors import DeliveryError, SerializationError
from udpshooter.core.telemetry.models import ReportData

USER_AGENT = "UDP-Shooter/1.0"
DEFAULT_TIMEOUT_SECONDS = 30.0
_CANCEL_POLL_SECONDS = 0.05


@dataclass(frozen=True)
class DeliveryResult:
    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
    cancelled: bool = False


def encode_report(report: ReportData) -> bytes:
    try:
        return report.to_json().encode("utf-8")
    except Exception as e:  # noqa: BLE001
        raise SerializationError(detail=str(e)) from e


class RemoteDelivery:
    """
    Best-effort POST of a report to a collector.

    One attempt per report: failures are logged and dropped, the next tick's
    report supersedes them. The request runs on a private worker thread so the
    caller can stop waiting as soon as `cancel` is set.
    """

    def __init__(self, url: str, *, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS, logger: Optional[logging.Logger] = None):
        self.url = str(url or "")
        self.timeout_seconds = float(timeout_seconds)
        self.logger = logger or logging.getLogger("udpshooter.reporter")
        self._session = requests.Session()
        self._exec = ThreadPoolExecutor(max_workers=1, thread_name_prefix="report-delivery")

    @property
    def configured(self) -> bool:
        return bool(self.url)

    def send(self, payload: Union[ReportData, bytes], *, cancel: Optional[threading.Event] = None) -> DeliveryResult:
        if not self.configured:
            return DeliveryResult(ok=False, error="not_configured")
        if isinstance(payload, ReportData):
            try:
                payload = encode_report(payload)
            except SerializationError as e:
                self.logger.error("report encoding failed: %s", e.context.get("detail"))
                return DeliveryResult(ok=False, error=e.code)
        if cancel is not None and cancel.is_set():
            return DeliveryResult(ok=False, error="cancelled", cancelled=True)

        try:
            fut = self._exec.submit(self._post, payload)
        except RuntimeError as e:
            # executor already closed
            self.logger.error("report delivery unavailable: %s", e)
            return DeliveryResult(ok=False, error="closed")

        deadline = time.monotonic() + self.timeout_seconds
        while not fut.done():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                fut.cancel()
                self.logger.error("report delivery failed: %s (timed out after %.1fs)", self.url, self.timeout_seconds)
                return DeliveryResult(ok=False, error="timeout")
            if cancel is None:
                wait([fut], timeout=remaining)
            elif cancel.wait(min(_CANCEL_POLL_SECONDS, remaining)):
                fut.cancel()
                # drop pooled sockets; the worker result is discarded either way
                self._session.close()
                self.logger.warning("report delivery aborted: %s", self.url)
                return DeliveryResult(ok=False, error="cancelled", cancelled=True)

        try:
            resp = fut.result()
        except requests.RequestException as e:
            err = DeliveryError(url=self.url, detail=str(e))
            self.logger.error("report delivery failed: %s (%s)", self.url, err.context["detail"])
            return DeliveryResult(ok=False, error=err.code)

        if 200 <= resp.status_code < 300:
            self.logger.debug("report delivered: %s (status %d)", self.url, resp.status_code)
            return DeliveryResult(ok=True, status_code=resp.status_code)
        self.logger.warning("report delivery rejected: %s (status %d)", self.url, resp.status_code)
        return DeliveryResult(ok=False, status_code=resp.status_code, error=f"HTTP {resp.status_code}")

    def _post(self, body: bytes) -> requests.Response:
        return self._session.post(
            self.url,
            data=body,
            headers={"Content-Type": "application/json", "User-Agent": USER_AGENT},
            timeout=self.timeout_seconds,
        )

    def close(self) -> None:
        self._exec.shutdown(wait=False, cancel_futures=True)
        self._session.close()

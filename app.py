from __future__ import annotations

import argparse
import signal
import sys
import threading
from typing import List, Optional

from udpshooter.core.config import load_report_config
from udpshooter.core.errors import ConfigError
from udpshooter.core.logger import get_reporter_logger, setup_logging
from udpshooter.core.stats.store import TrafficStats
from udpshooter.core.telemetry.reporter import Reporter


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Run the traffic reporter against an (idle) counter store.")
    ap.add_argument("--config", default="config.json", help="JSON config file; the \"report\" section is used")
    ap.add_argument("--log-dir", default="logs")
    ap.add_argument("--interval", type=float, default=None, help="override report interval (seconds)")
    ap.add_argument("--url", default=None, help="override collector URL")
    args = ap.parse_args(argv)

    setup_logging(args.log_dir)
    logger = get_reporter_logger()
    try:
        cfg = load_report_config(args.config)
    except ConfigError as e:
        logger.error("%s (%s)", e.user_message, e.context.get("path"))
        return 2
    overrides = {k: v for k, v in (("interval", args.interval), ("url", args.url)) if v is not None}
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    done = threading.Event()
    signal.signal(signal.SIGINT, lambda *_a: done.set())
    signal.signal(signal.SIGTERM, lambda *_a: done.set())

    reporter = Reporter(cfg=cfg, stats=TrafficStats(), logger=logger)
    reporter.start()
    try:
        done.wait()
    finally:
        reporter.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())

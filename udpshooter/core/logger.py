from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

REPORTER_LOGGER = "udpshooter.reporter"


def setup_logging(log_dir: Optional[str] = "logs", *, level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Configure the `udpshooter` logger tree once.

    Child loggers (e.g. the reporter's) propagate into it. Pass log_dir=None for console only.
    """
    logger = logging.getLogger("udpshooter")
    logger.setLevel(level)
    logger.propagate = False

    if log_dir and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        os.makedirs(log_dir, exist_ok=True)
        fh = RotatingFileHandler(os.path.join(log_dir, "udpshooter.log"), maxBytes=1_000_000, backupCount=5, encoding="utf-8")
        fh.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"))
        logger.addHandler(fh)

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        sh = logging.StreamHandler()
        sh.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(sh)

    return logger


def get_reporter_logger() -> logging.Logger:
    return logging.getLogger(REPORTER_LOGGER)

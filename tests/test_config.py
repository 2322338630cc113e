from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler

import pytest

from udpshooter.core.config import DEFAULT_INTERVAL_SECONDS, ReportConfig, load_report_config
from udpshooter.core.errors import ConfigError
from udpshooter.core.logger import setup_logging


def test_defaults():
    cfg = ReportConfig()
    assert cfg.interval_seconds() == DEFAULT_INTERVAL_SECONDS
    assert cfg.url == ""
    assert cfg.timeout_seconds == 30.0
    assert cfg.cache_ttl_seconds == 30.0


def test_missing_file_gives_defaults(tmp_path):
    assert load_report_config(str(tmp_path / "nope.json")) == ReportConfig()


def test_loads_nested_report_section(tmp_path):
    p = tmp_path / "config.json"
    p.write_text(json.dumps({"report": {"interval": 60, "url": "http://c.local/r", "management_ip": "10.1.1.1"}}), encoding="utf-8")
    cfg = load_report_config(str(p))
    assert cfg.interval_seconds() == 60.0
    assert cfg.url == "http://c.local/r"
    assert cfg.management_ip == "10.1.1.1"


def test_loads_bare_section(tmp_path):
    p = tmp_path / "report.json"
    p.write_text(json.dumps({"interval": -1}), encoding="utf-8")
    assert load_report_config(str(p)).interval_seconds() == DEFAULT_INTERVAL_SECONDS


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[1, 2]",
        json.dumps({"report": {"url": "ftp://x"}}),
        json.dumps({"report": {"unknown_key": 1}}),
        json.dumps({"report": 5}),
    ],
)
def test_bad_config_raises_config_error(tmp_path, content):
    p = tmp_path / "config.json"
    p.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError) as ei:
        load_report_config(str(p))
    assert ei.value.to_dict()["code"] == "config_error"
    assert ei.value.recoverable is False


@pytest.fixture
def restore_logger():
    lg = logging.getLogger("udpshooter")
    saved = (list(lg.handlers), lg.level, lg.propagate)
    yield lg
    for h in list(lg.handlers):
        if h not in saved[0]:
            lg.removeHandler(h)
            h.close()
    lg.setLevel(saved[1])
    lg.propagate = saved[2]


def test_setup_logging_is_idempotent(tmp_path, restore_logger):
    lg = restore_logger
    setup_logging(str(tmp_path / "logs"))
    setup_logging(str(tmp_path / "logs"))
    files = [h for h in lg.handlers if isinstance(h, RotatingFileHandler)]
    streams = [h for h in lg.handlers if type(h) is logging.StreamHandler]
    assert len(files) == 1
    assert len(streams) == 1
    assert (tmp_path / "logs").is_dir()


def test_app_exits_on_bad_config(tmp_path, restore_logger):
    import app

    p = tmp_path / "config.json"
    p.write_text("{broken", encoding="utf-8")
    assert app.main(["--config", str(p), "--log-dir", str(tmp_path / "logs")]) == 2

from __future__ import annotations

import json
import os
from typing import Any, Dict

from pydantic import ValidationError

from udpshooter.core.config.models import ReportConfig
from udpshooter.core.errors import ConfigError


def read_json_object(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            obj = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError("Config file is not valid JSON.", path=path, error=str(e)) from e
    if not isinstance(obj, dict):
        raise ConfigError("Config file must contain a JSON object.", path=path)
    return obj


def load_report_config(path: str) -> ReportConfig:
    """
    Load the reporter section of the tool's config file.

    Accepts either the bare section or a full file with a "report" key.
    A missing file gives the defaults.
    """
    if not os.path.exists(path):
        return ReportConfig()
    obj = read_json_object(path)
    section = obj.get("report", obj)
    if not isinstance(section, dict):
        raise ConfigError("\"report\" must be a JSON object.", path=path)
    try:
        return ReportConfig.model_validate(section)
    except ValidationError as e:
        raise ConfigError("Invalid report configuration.", path=path, errors=e.errors(include_url=False)) from e

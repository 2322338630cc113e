from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_INTERVAL_SECONDS = 600


class ReportConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    interval: float = DEFAULT_INTERVAL_SECONDS  # seconds; <= 0 falls back to the default
    url: str = ""  # empty: local log only
    management_ip: str = ""
    timeout_seconds: float = Field(default=30.0, gt=0, le=300)
    cache_ttl_seconds: float = Field(default=30.0, ge=0)

    @field_validator("url")
    @classmethod
    def _url_scheme(cls, v: str) -> str:
        v = (v or "").strip()
        if v and not v.lower().startswith(("http://", "https://")):
            raise ValueError("url must be http(s)")
        return v

    def interval_seconds(self) -> float:
        if self.interval <= 0:
            return float(DEFAULT_INTERVAL_SECONDS)
        return float(self.interval)

from udpshooter.core.config.io import load_report_config
from udpshooter.core.config.models import DEFAULT_INTERVAL_SECONDS, ReportConfig

__all__ = ["DEFAULT_INTERVAL_SECONDS", "ReportConfig", "load_report_config"]

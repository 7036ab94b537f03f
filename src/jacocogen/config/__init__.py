"""Config module exports."""

from jacocogen.config.loader import load_config
from jacocogen.config.models import (
    DEFAULT_REPORT_FILE,
    JacocoGenConfig,
    LoggingConfig,
    LogOutputConfig,
    ReportConfig,
)

__all__ = [
    "load_config",
    "DEFAULT_REPORT_FILE",
    "JacocoGenConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ReportConfig",
]

"""Core module exports."""

from jacocogen.core.errors import (
    ConfigError,
    CoverageError,
    ErrorCode,
    InternalError,
    JacocoGenError,
    ReportError,
)
from jacocogen.core.logging import (
    clear_report_id,
    configure_logging,
    get_logger,
    get_report_id,
    set_report_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "CoverageError",
    "ErrorCode",
    "InternalError",
    "JacocoGenError",
    "ReportError",
    # Logging
    "clear_report_id",
    "configure_logging",
    "get_logger",
    "get_report_id",
    "set_report_id",
]

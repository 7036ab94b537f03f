"""jacocogen error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Coverage input
- 4xxx: Report output
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Coverage input (3xxx)
    COVERAGE_PARSE_ERROR = 3001
    COVERAGE_MISSING_RECORD = 3002
    COVERAGE_DANGLING_REFERENCE = 3003

    # Report output (4xxx)
    REPORT_WRITE_FAILED = 4001

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class JacocoGenError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'COVERAGE_MISSING_RECORD')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(JacocoGenError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class CoverageError(JacocoGenError):
    """Errors in the coverage data feeding a report."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "CoverageError":
        return cls(
            code=ErrorCode.COVERAGE_PARSE_ERROR,
            message=f"Failed to parse coverage data at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def missing_record(cls, path: str) -> "CoverageError":
        return cls(
            code=ErrorCode.COVERAGE_MISSING_RECORD,
            message=f"No coverage record for file in report tree: {path}",
            details={"path": path},
        )

    @classmethod
    def dangling_reference(cls, path: str, kind: str, ref_id: str) -> "CoverageError":
        return cls(
            code=ErrorCode.COVERAGE_DANGLING_REFERENCE,
            message=f"Hit data for undefined {kind} {ref_id!r} in {path}",
            details={"path": path, "kind": kind, "id": ref_id},
        )


class ReportError(JacocoGenError):
    """Errors producing the report artifact."""

    @classmethod
    def write_failed(cls, path: str, reason: str) -> "ReportError":
        return cls(
            code=ErrorCode.REPORT_WRITE_FAILED,
            message=f"Failed to write report to {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class InternalError(JacocoGenError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )

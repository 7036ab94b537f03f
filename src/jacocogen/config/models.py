"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (JACOCOGEN__SECTION__KEY)
3. Project YAML (<project_root>/.jacocogen.yaml)
4. Global YAML (~/.config/jacocogen/config.yaml)
5. Built-in defaults (this file)

Examples:
    JACOCOGEN__LOGGING__LEVEL=DEBUG
    JACOCOGEN__REPORT__FILE=coverage/jacoco.xml
    JACOCOGEN__REPORT__SYNC=false
"""

import socket
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_REPORT_FILE = "jacoco-coverage.xml"


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        JACOCOGEN__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every skipped method.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ReportConfig(BaseModel):
    """JaCoCo report output configuration.

    Env vars:
        JACOCOGEN__REPORT__DIR: Output directory
        JACOCOGEN__REPORT__FILE: Output file name
        JACOCOGEN__REPORT__PROJECT_ROOT: Value of the <report name="..."> attribute
        JACOCOGEN__REPORT__HOST_ID: Value of the <sessioninfo id="..."> attribute
        JACOCOGEN__REPORT__SYNC: Write synchronously (default) or on a worker thread
    """

    dir: Path = Field(
        default_factory=Path.cwd,
        description="Directory the report is written to.",
    )
    file: str = Field(
        default=DEFAULT_REPORT_FILE,
        description="Report file name, relative to dir.",
    )
    project_root: str = Field(
        default_factory=lambda: str(Path.cwd()),
        description="Project root recorded as the report name.",
    )
    host_id: str = Field(
        default_factory=socket.gethostname,
        description="Session id recorded in <sessioninfo>.",
    )
    sync: bool = Field(
        default=True,
        description="Write the report before returning. False hands the write to a worker thread.",
    )
    session_start: int | None = Field(
        default=None,
        description="Session start, epoch milliseconds. Defaults to generation time.",
    )
    session_dump: int | None = Field(
        default=None,
        description="Session dump, epoch milliseconds. Defaults to generation time.",
    )

    @field_validator("file")
    @classmethod
    def validate_file(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Report file name must not be empty")
        return v

    @field_validator("session_start", "session_dump")
    @classmethod
    def validate_timestamp(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError(f"Timestamp must be non-negative, got {v}")
        return v

    @property
    def output_path(self) -> Path:
        return self.dir / self.file


class JacocoGenConfig(BaseModel):
    """Root configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

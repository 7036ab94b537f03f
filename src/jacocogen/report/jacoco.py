"""JaCoCo report generation.

Builds the directory tree for a collector's files, walks it into a complete
XML document, and only then hands the document to a writer. A missing or
malformed record aborts generation before the writer sees any content.

Usage:
    config = load_config(Path("."))
    with JacocoReport(config.report) as report:
        future = report.write_report(parse_istanbul(Path("coverage")))
        future.result()  # raises ReportError if the write failed
"""

from __future__ import annotations

import time
from concurrent.futures import Future
from pathlib import Path
from typing import Any

import structlog

from jacocogen.config.models import DEFAULT_REPORT_FILE, ReportConfig
from jacocogen.core.logging import set_report_id
from jacocogen.coverage.collector import Collector
from jacocogen.coverage.models import TreeNode
from jacocogen.coverage.tree import TreeSummarizer
from jacocogen.report.walker import SessionInfo, walk
from jacocogen.report.writer import FileWriter, Writer
from jacocogen.report.xml import XmlEmitter

log = structlog.get_logger(__name__)


class JacocoReport:
    """Report type producing a JaCoCo-style XML file (report.dtd)."""

    TYPE = "jacoco"

    def __init__(self, config: ReportConfig | None = None, writer: Writer | None = None) -> None:
        self.config = config or ReportConfig()
        self._owned_writer: FileWriter | None = None
        if writer is None:
            writer = self._owned_writer = FileWriter(sync=self.config.sync)
        self.writer: Writer = writer

    def close(self) -> None:
        """Wait for pending writes and stop the writer this report created.

        A writer passed in by the caller is left open.
        """
        if self._owned_writer is not None:
            self._owned_writer.close()

    def __enter__(self) -> JacocoReport:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @staticmethod
    def synopsis() -> str:
        return "XML coverage report that can be consumed by the jacoco tool"

    @staticmethod
    def default_config() -> dict[str, Any]:
        return {"file": DEFAULT_REPORT_FILE}

    @property
    def output_path(self) -> Path:
        return self.config.output_path

    def _session(self) -> SessionInfo:
        now = int(time.time() * 1000)
        start = self.config.session_start if self.config.session_start is not None else now
        dump = self.config.session_dump if self.config.session_dump is not None else now
        return SessionInfo(id=self.config.host_id, start=start, dump=dump)

    def build_tree(self, collector: Collector) -> TreeNode:
        summarizer = TreeSummarizer()
        for path in collector.files():
            summarizer.add_file(path)
        return summarizer.get_tree()

    def render(self, collector: Collector, tree: TreeNode | None = None) -> list[str]:
        """Return the complete document as lines, without writing it.

        Raises:
            CoverageError: If the tree names a file the collector has no
                record for, or a record is malformed.
        """
        root = tree if tree is not None else self.build_tree(collector)
        return walk(
            root,
            collector.get,
            XmlEmitter(),
            project_root=self.config.project_root,
            session=self._session(),
        )

    def write_report(self, collector: Collector, tree: TreeNode | None = None) -> Future[Path]:
        """Render the report and hand it to the writer.

        Args:
            collector: Source of CoverageRecords.
            tree: Report tree. Built from ``collector.files()`` when omitted.

        Returns:
            The writer's future, resolving to the output path.

        Raises:
            CoverageError: Raised before anything is written.
        """
        report_id = set_report_id()
        output_file = self.output_path
        log.info(
            "report_started",
            report_id=report_id,
            files=len(collector.files()),
            output=str(output_file),
        )

        lines = self.render(collector, tree)

        future = self.writer.write_file(output_file, lines)
        future.add_done_callback(
            lambda f: _log_completion(f, report_id=report_id, lines=len(lines))
        )
        return future


def _log_completion(future: Future[Path], *, report_id: str, lines: int) -> None:
    error = future.exception()
    if error is not None:
        log.error("report_failed", report_id=report_id, error=str(error))
    else:
        log.info("report_written", report_id=report_id, path=str(future.result()), lines=lines)

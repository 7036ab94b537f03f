"""Tests for JacocoReport generation."""

from collections.abc import Sequence
from concurrent.futures import Future
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from jacocogen.config.models import ReportConfig
from jacocogen.core.errors import CoverageError
from jacocogen.coverage.collector import Collector
from jacocogen.coverage.models import CoverageRecord, FunctionInfo, Location
from jacocogen.coverage.tree import summarize
from jacocogen.report.jacoco import JacocoReport
from jacocogen.report.writer import FileWriter, MemoryWriter


def _record(path: str) -> CoverageRecord:
    return CoverageRecord(
        path=path,
        statements={"0": Location(1, 0, 3, 1)},
        statement_hits={"0": 1},
        functions={"0": FunctionInfo(name="main", line=1)},
        function_hits={"0": 1},
        line_hits={1: 1, 2: 1, 3: 0},
    )


def _config(tmp_path: Path, **kwargs) -> ReportConfig:
    return ReportConfig(dir=tmp_path, project_root="/proj", host_id="host-1", **kwargs)


class TestJacocoReportMetadata:
    def test_type_and_synopsis(self) -> None:
        assert JacocoReport.TYPE == "jacoco"
        assert "jacoco" in JacocoReport.synopsis()
        assert JacocoReport.default_config() == {"file": "jacoco-coverage.xml"}

    def test_default_writer_follows_sync_flag(self, tmp_path: Path) -> None:
        report = JacocoReport(_config(tmp_path, sync=False))
        assert isinstance(report.writer, FileWriter)
        assert report.writer.sync is False

    def test_output_path(self, tmp_path: Path) -> None:
        report = JacocoReport(_config(tmp_path, file="x.xml"))
        assert report.output_path == tmp_path / "x.xml"


class TestWriteReport:
    """End-to-end generation."""

    def test_writes_report_to_configured_path(self, tmp_path: Path) -> None:
        collector = Collector([_record("lib/a.js"), _record("lib/b.js")])

        output = JacocoReport(_config(tmp_path)).write_report(collector).result()

        assert output == tmp_path / "jacoco-coverage.xml"
        text = output.read_text(encoding="utf-8")
        assert text.startswith('<?xml version="1.0" ?>\n<!DOCTYPE report')
        assert '<report name="/proj">' in text
        assert '<sessioninfo id="host-1"' in text
        assert text.count("<class ") == 2
        assert text.rstrip().endswith("</report>")

    def test_configured_session_timestamps(self, tmp_path: Path) -> None:
        writer = MemoryWriter()
        config = _config(tmp_path, session_start=111, session_dump=222)
        JacocoReport(config, writer=writer).write_report(Collector([_record("a.js")])).result()
        assert '<sessioninfo id="host-1" start="111" dump="222"/>' in writer.text(
            config.output_path
        )

    def test_repeat_runs_are_byte_identical(self, tmp_path: Path) -> None:
        config = _config(tmp_path, session_start=1, session_dump=2)
        collector = Collector([_record("lib/a.js"), _record("main.js")])
        first, second = MemoryWriter(), MemoryWriter()

        JacocoReport(config, writer=first).write_report(collector).result()
        JacocoReport(config, writer=second).write_report(collector).result()

        assert first.text(config.output_path) == second.text(config.output_path)

    def test_missing_record_aborts_before_writer(self, tmp_path: Path) -> None:
        writer = MagicMock()
        collector = Collector([_record("lib/a.js")])
        tree = summarize(["lib/a.js", "lib/ghost.js"])

        with pytest.raises(CoverageError):
            JacocoReport(_config(tmp_path), writer=writer).write_report(collector, tree)

        writer.write_file.assert_not_called()
        assert not (tmp_path / "jacoco-coverage.xml").exists()

    def test_alternate_writer_receives_lines(self, tmp_path: Path) -> None:
        received: list[Sequence[str]] = []

        class RecordingWriter:
            def write_file(self, path: Path, lines: Sequence[str]) -> Future[Path]:
                received.append(lines)
                future: Future[Path] = Future()
                future.set_result(path)
                return future

        JacocoReport(_config(tmp_path), writer=RecordingWriter()).write_report(
            Collector([_record("a.js")])
        )

        assert len(received) == 1
        assert received[0][-1] == "</report>"

    def test_render_does_not_write(self, tmp_path: Path) -> None:
        writer = MagicMock()
        lines = JacocoReport(_config(tmp_path), writer=writer).render(
            Collector([_record("a.js")])
        )
        assert lines[0] == '<?xml version="1.0" ?>'
        writer.write_file.assert_not_called()


class TestClose:
    """Writer lifecycle."""

    def test_context_manager_stops_async_worker(self, tmp_path: Path) -> None:
        with JacocoReport(_config(tmp_path, sync=False)) as report:
            output = report.write_report(Collector([_record("a.js")])).result()
            writer = report.writer
            assert isinstance(writer, FileWriter)
            assert writer._executor is not None

        assert writer._executor is None
        assert output.exists()

    def test_close_leaves_caller_writer_open(self, tmp_path: Path) -> None:
        writer = MagicMock()
        JacocoReport(_config(tmp_path), writer=writer).close()
        writer.close.assert_not_called()

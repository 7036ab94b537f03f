"""Report writers.

A writer takes the finished document lines and a destination and returns a
Future that resolves to the written path, or raises ReportError. Callers
wait on it with ``result()`` or attach ``add_done_callback``.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
import threading
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Protocol

import structlog

from jacocogen.core.errors import ReportError

log = structlog.get_logger(__name__)


def _render(lines: Sequence[str]) -> str:
    return "\n".join(lines) + "\n"


class Writer(Protocol):
    """Protocol for report destinations."""

    def write_file(self, path: Path, lines: Sequence[str]) -> Future[Path]:
        """Write ``lines`` to ``path``.

        Returns:
            Future resolving to ``path`` once the content is fully flushed.
            Failures are set on the future as ReportError.
        """
        ...


class FileWriter:
    """Writes reports to disk, synchronously or on a worker thread.

    Content goes to a temporary file in the target directory that is renamed
    over the destination, so a failed write never leaves a partial report.
    """

    def __init__(self, sync: bool = True) -> None:
        self.sync = sync
        self._executor: ThreadPoolExecutor | None = None
        self._lock = threading.Lock()

    def write_file(self, path: Path, lines: Sequence[str]) -> Future[Path]:
        content = _render(lines)
        if self.sync:
            future: Future[Path] = Future()
            try:
                future.set_result(self._write(path, content))
            except ReportError as e:
                future.set_exception(e)
            return future

        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="jacocogen-writer"
                )
            return self._executor.submit(self._write, path, content)

    def close(self) -> None:
        """Wait for pending writes and stop the worker thread."""
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None

    def _write(self, path: Path, content: str) -> Path:
        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(content)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    Path(tmp_name).unlink(missing_ok=True)
            log.error("report_write_failed", path=str(path), error=str(e))
            raise ReportError.write_failed(str(path), str(e)) from e
        log.debug("report_flushed", path=str(path), bytes=len(content.encode("utf-8")))
        return path


class MemoryWriter:
    """Keeps written reports in memory, keyed by destination path."""

    def __init__(self) -> None:
        self.outputs: dict[Path, str] = {}

    def write_file(self, path: Path, lines: Sequence[str]) -> Future[Path]:
        self.outputs[path] = _render(lines)
        future: Future[Path] = Future()
        future.set_result(path)
        return future

    def text(self, path: Path) -> str:
        return self.outputs[path]

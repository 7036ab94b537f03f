"""JaCoCo XML tree walk.

Emits, depth-first and pre-order:

    report > sessioninfo, package* > class* > (method* > counter{4}, lines > line*)

A package is emitted for every directory that directly holds files; its
classes follow the tree's child order. Subdirectories are visited after the
directory's own package, whether or not it emitted one.
"""

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from jacocogen.core.errors import CoverageError
from jacocogen.coverage.aggregate import branch_coverage_by_line, method_counters
from jacocogen.coverage.models import (
    CoverageRecord,
    DirectoryNode,
    FileNode,
    LineBranchSummary,
    TreeNode,
)
from jacocogen.report.xml import XmlEmitter

log = structlog.get_logger(__name__)

XML_DECLARATION = '<?xml version="1.0" ?>'
REPORT_DOCTYPE = '<!DOCTYPE report PUBLIC "-//JACOCO//DTD Report 1.0//EN" "report.dtd">'

# No signatures exist in the source model; consumers still require a descriptor.
METHOD_DESC = "()V"

RecordLookup = Callable[[str], CoverageRecord | None]


@dataclass(frozen=True, slots=True)
class SessionInfo:
    """Values for the single <sessioninfo> element."""

    id: str
    start: int
    dump: int


def as_java_package(node: DirectoryNode) -> str:
    """``lib/util/`` → ``lib.util``."""
    name = node.relative_name.replace("/", ".").replace("\\", ".")
    return name.removesuffix(".")


def _format_percent(value: float) -> str:
    return str(int(value)) if value.is_integer() else str(value)


def condition_coverage(summary: LineBranchSummary) -> str:
    """``25% (1/4)``"""
    return f"{_format_percent(summary.coverage)}% ({summary.covered}/{summary.total})"


def emit_class(node: FileNode, record: CoverageRecord, emitter: XmlEmitter) -> None:
    """Emit one <class> with its methods and lines."""
    record.check_references()
    branch_by_line = branch_coverage_by_line(record)

    emitter.open("class", ("name", node.name))

    for fn_id, fn in record.functions.items():
        counters = method_counters(record, fn_id)
        if counters is None:
            log.debug("method_skipped", path=record.path, function=fn.name, line=fn.line)
            continue
        emitter.open("method", ("name", fn.name), ("desc", METHOD_DESC), ("line", fn.line))
        for counter_type, counter in counters.items():
            emitter.empty(
                "counter",
                ("type", counter_type),
                ("missed", counter.missed),
                ("covered", counter.covered),
            )
        emitter.close("method")

    emitter.open("lines")
    for line in sorted(record.line_hits):
        summary = branch_by_line.get(line)
        if summary is None:
            emitter.empty(
                "line", ("number", line), ("hits", record.line_hits[line]), ("branch", False)
            )
        else:
            emitter.empty(
                "line",
                ("number", line),
                ("hits", record.line_hits[line]),
                ("branch", True),
                ("condition-coverage", condition_coverage(summary)),
            )
    emitter.close("lines")

    emitter.close("class")


def _lookup(lookup: RecordLookup, node: FileNode) -> CoverageRecord:
    record = lookup(node.path)
    if record is None:
        raise CoverageError.missing_record(node.path)
    return record


def _walk_directory(node: DirectoryNode, lookup: RecordLookup, emitter: XmlEmitter) -> None:
    files = node.files
    if files:
        emitter.open("package", ("name", as_java_package(node)))
        for child in files:
            emit_class(child, _lookup(lookup, child), emitter)
        emitter.close("package")

    for child_dir in node.directories:
        _walk_directory(child_dir, lookup, emitter)


def walk(
    root: TreeNode,
    lookup: RecordLookup,
    emitter: XmlEmitter,
    *,
    project_root: str,
    session: SessionInfo,
) -> list[str]:
    """Emit a complete JaCoCo document for ``root`` and return its lines.

    Args:
        root: Tree root. A bare FileNode is reported in the default package.
        lookup: Returns the CoverageRecord for a file path, or None.
        emitter: Receives the document lines.
        project_root: Value of the report name attribute.
        session: Values for the sessioninfo element.

    Raises:
        CoverageError: If a file in the tree has no record or a record
            references undefined ids. Nothing is returned in that case.
    """
    if isinstance(root, FileNode):
        root = DirectoryNode(path="", relative_name="", children=[root])

    emitter.println(XML_DECLARATION)
    emitter.println(REPORT_DOCTYPE)
    emitter.open("report", ("name", project_root))
    emitter.empty(
        "sessioninfo", ("id", session.id), ("start", session.start), ("dump", session.dump)
    )

    _walk_directory(root, lookup, emitter)

    emitter.close("report")
    return emitter.finish()

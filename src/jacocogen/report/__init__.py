"""JaCoCo XML report emission."""

from jacocogen.report.jacoco import JacocoReport
from jacocogen.report.walker import (
    METHOD_DESC,
    SessionInfo,
    as_java_package,
    condition_coverage,
    emit_class,
    walk,
)
from jacocogen.report.writer import FileWriter, MemoryWriter, Writer
from jacocogen.report.xml import XmlEmitter, attr, quote

__all__ = [
    "JacocoReport",
    "METHOD_DESC",
    "SessionInfo",
    "as_java_package",
    "condition_coverage",
    "emit_class",
    "walk",
    "FileWriter",
    "MemoryWriter",
    "Writer",
    "XmlEmitter",
    "attr",
    "quote",
]

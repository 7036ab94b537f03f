"""Coverage records, aggregation, and report trees.

Usage:
    from jacocogen.coverage import parse_istanbul, summarize, method_counters

    collector = parse_istanbul(Path("coverage/coverage-final.json"))
    tree = summarize(collector.files())
    counters = method_counters(collector.file_coverage_for(path), "0")
"""

from jacocogen.coverage.aggregate import (
    branch_coverage_by_line,
    method_counters,
    resolve_body_range,
)
from jacocogen.coverage.collector import Collector, merge_records
from jacocogen.coverage.istanbul import parse_istanbul, record_from_istanbul
from jacocogen.coverage.models import (
    BranchInfo,
    Counter,
    CoverageRecord,
    DirectoryNode,
    FileNode,
    FunctionInfo,
    LineBranchSummary,
    Location,
    MethodCounters,
    TreeNode,
)
from jacocogen.coverage.tree import TreeSummarizer, summarize

__all__ = [
    # Models
    "BranchInfo",
    "Counter",
    "CoverageRecord",
    "DirectoryNode",
    "FileNode",
    "FunctionInfo",
    "LineBranchSummary",
    "Location",
    "MethodCounters",
    "TreeNode",
    # Aggregation
    "branch_coverage_by_line",
    "method_counters",
    "resolve_body_range",
    # Collection
    "Collector",
    "merge_records",
    "parse_istanbul",
    "record_from_istanbul",
    # Tree
    "TreeSummarizer",
    "summarize",
]

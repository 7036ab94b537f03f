"""Coverage data model.

One CoverageRecord per source file carries the raw facts an instrumenter
produced: statement, function and branch definitions keyed by id, plus the
matching hit maps and a derived line-hit map. Report trees are built from
DirectoryNode/FileNode; the remaining types are derived per emission pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from jacocogen.core.errors import CoverageError


@dataclass(frozen=True, slots=True)
class Location:
    """Source span. Lines are 1-based, columns 0-based."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int


@dataclass(frozen=True, slots=True)
class FunctionInfo:
    """Function definition.

    ``line`` is the declaration line. ``body_statement`` optionally names the
    statement that spans the function; when absent the span is resolved from
    the statement starting at ``line``.
    """

    name: str
    line: int
    body_statement: str | None = None


@dataclass(frozen=True, slots=True)
class BranchInfo:
    """Branch point with its outcome ids, in evaluation order."""

    line: int
    outcomes: tuple[str, ...]
    type: str = ""


@dataclass(slots=True)
class CoverageRecord:
    """Raw coverage facts for a single file."""

    path: str
    statements: dict[str, Location] = field(default_factory=dict)
    statement_hits: dict[str, int] = field(default_factory=dict)
    functions: dict[str, FunctionInfo] = field(default_factory=dict)
    function_hits: dict[str, int] = field(default_factory=dict)
    branches: dict[str, BranchInfo] = field(default_factory=dict)
    branch_hits: dict[str, list[int]] = field(default_factory=dict)
    line_hits: dict[int, int] = field(default_factory=dict)  # line_number → hit_count

    def check_references(self) -> None:
        """Raise CoverageError if a hit map names an undefined id.

        Also rejects branch hit lists whose length differs from the branch's
        outcome list, since per-outcome counts would no longer line up.
        """
        for stmt_id in self.statement_hits:
            if stmt_id not in self.statements:
                raise CoverageError.dangling_reference(self.path, "statement", stmt_id)
        for fn_id in self.function_hits:
            if fn_id not in self.functions:
                raise CoverageError.dangling_reference(self.path, "function", fn_id)
        for branch_id, hits in self.branch_hits.items():
            branch = self.branches.get(branch_id)
            if branch is None:
                raise CoverageError.dangling_reference(self.path, "branch", branch_id)
            if len(hits) != len(branch.outcomes):
                raise CoverageError.dangling_reference(
                    self.path, "branch outcome", f"{branch_id}[{len(hits) - 1}]"
                )
        for fn_id, fn in self.functions.items():
            if fn.body_statement is not None and fn.body_statement not in self.statements:
                raise CoverageError.dangling_reference(
                    self.path, "statement", f"{fn.body_statement} (body of {fn_id})"
                )

    @property
    def lines_found(self) -> int:
        return len(self.line_hits)

    @property
    def lines_hit(self) -> int:
        return sum(1 for hits in self.line_hits.values() if hits > 0)


@dataclass(frozen=True, slots=True)
class LineBranchSummary:
    """Outcome coverage of all branches declared on one line."""

    covered: int
    total: int

    @property
    def coverage(self) -> float:
        """Percent of outcomes taken (0.0 to 100.0)."""
        if self.total == 0:
            return 0.0
        return self.covered / self.total * 100


@dataclass(frozen=True, slots=True)
class Counter:
    """JaCoCo counter: a missed/covered pair for one metric."""

    missed: int = 0
    covered: int = 0


@dataclass(frozen=True, slots=True)
class MethodCounters:
    """Counters for one method, in JaCoCo emission order."""

    instruction: Counter
    line: Counter
    complexity: Counter
    method: Counter

    def items(self) -> tuple[tuple[str, Counter], ...]:
        return (
            ("INSTRUCTION", self.instruction),
            ("LINE", self.line),
            ("COMPLEXITY", self.complexity),
            ("METHOD", self.method),
        )


@dataclass(frozen=True, slots=True)
class FileNode:
    """Report tree leaf. ``path`` is the collector key for the file."""

    path: str
    relative_name: str

    @property
    def name(self) -> str:
        return self.path.replace("\\", "/").rsplit("/", 1)[-1]


@dataclass(slots=True)
class DirectoryNode:
    """Report tree directory. ``relative_name`` is relative to the tree root."""

    path: str
    relative_name: str
    children: list[TreeNode] = field(default_factory=list)

    @property
    def files(self) -> list[FileNode]:
        return [c for c in self.children if isinstance(c, FileNode)]

    @property
    def directories(self) -> list[DirectoryNode]:
        return [c for c in self.children if isinstance(c, DirectoryNode)]


TreeNode = DirectoryNode | FileNode

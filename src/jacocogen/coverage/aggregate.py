"""Per-line branch and per-method counter aggregation.

Pure functions over a CoverageRecord. Two counters are approximations,
because the source model only carries line and branch data:

- INSTRUCTION mirrors LINE. There is no instruction granularity, so both
  counters are computed from the same line walk and are always equal.
- COMPLEXITY is ``missed`` = branches declared inside the method body with
  at least one untaken outcome, ``covered`` = 1 for the method's own path.
  This is not JaCoCo's control-flow-graph complexity.
"""

from jacocogen.coverage.models import (
    BranchInfo,
    Counter,
    CoverageRecord,
    FunctionInfo,
    LineBranchSummary,
    MethodCounters,
)


def _outcome_hits(record: CoverageRecord, branch_id: str, branch: BranchInfo) -> list[int]:
    # A branch with no recorded hits was never reached: every outcome is zero.
    return record.branch_hits.get(branch_id, [0] * len(branch.outcomes))


def branch_coverage_by_line(record: CoverageRecord) -> dict[int, LineBranchSummary]:
    """Group branch outcome hits by declared line.

    Several branches may share a line (e.g. ``a && b || c``); their outcomes
    are pooled before counting.
    """
    outcomes_by_line: dict[int, list[int]] = {}
    for branch_id, branch in record.branches.items():
        outcomes_by_line.setdefault(branch.line, []).extend(
            _outcome_hits(record, branch_id, branch)
        )

    return {
        line: LineBranchSummary(
            covered=sum(1 for hits in outcomes if hits > 0),
            total=len(outcomes),
        )
        for line, outcomes in outcomes_by_line.items()
        if outcomes
    }


def resolve_body_range(record: CoverageRecord, fn: FunctionInfo) -> tuple[int, int] | None:
    """Return the ``(start_line, end_line)`` span of a function body.

    Uses the function's explicit body statement when it names one, otherwise
    the widest statement starting on the declaration line. Returns None when
    neither exists.
    """
    if fn.body_statement is not None:
        loc = record.statements.get(fn.body_statement)
        if loc is None:
            return None
        return loc.start_line, loc.end_line

    candidates = [loc for loc in record.statements.values() if loc.start_line == fn.line]
    if not candidates:
        return None
    widest = max(candidates, key=lambda loc: loc.end_line)
    return widest.start_line, widest.end_line


def method_counters(record: CoverageRecord, function_id: str) -> MethodCounters | None:
    """Compute JaCoCo counters for one function.

    Returns None when the function body cannot be resolved to a statement
    span. Callers omit such methods; their lines are still reported.

    Raises:
        KeyError: If ``function_id`` is not defined in the record.
    """
    fn = record.functions[function_id]
    body = resolve_body_range(record, fn)
    if body is None:
        return None
    body_start, body_end = body

    covered_lines = 0
    missed_lines = 0
    for line in range(body_start, body_end + 1):
        if record.line_hits.get(line, 0) >= 1:
            covered_lines += 1
        else:
            missed_lines += 1

    partial_branches = sum(
        1
        for branch_id, branch in record.branches.items()
        if body_start <= branch.line <= body_end
        and any(hits == 0 for hits in _outcome_hits(record, branch_id, branch))
    )

    lines = Counter(missed=missed_lines, covered=covered_lines)
    return MethodCounters(
        instruction=lines,
        line=lines,
        complexity=Counter(missed=partial_branches, covered=1),
        method=Counter(
            missed=0 if covered_lines > 0 else 1,
            covered=1 if covered_lines > 0 else 0,
        ),
    )

"""Coverage record collector.

Holds one CoverageRecord per file path. When a file is added twice (for
example from parallel test shards) the records are merged with max-hit
semantics:

- line[i] = max(line[i] across records)
- statement[j], function[k] = max hits across records
- branch outcome[b][n] = max hits across records
"""

from collections.abc import Iterable, Iterator

from jacocogen.core.errors import CoverageError
from jacocogen.coverage.models import CoverageRecord


def _max_merge(base: dict, extra: dict) -> dict:
    merged = dict(base)
    for key, hits in extra.items():
        merged[key] = max(merged.get(key, 0), hits)
    return merged


def merge_records(first: CoverageRecord, second: CoverageRecord) -> CoverageRecord:
    """Merge two records for the same file.

    Definitions from ``first`` win when both define the same id. Branch hit
    lists are merged element-wise when their lengths agree, otherwise the
    first record's list is kept.
    """
    branch_hits = dict(first.branch_hits)
    for branch_id, hits in second.branch_hits.items():
        existing = branch_hits.get(branch_id)
        if existing is None:
            branch_hits[branch_id] = list(hits)
        elif len(existing) == len(hits):
            branch_hits[branch_id] = [max(a, b) for a, b in zip(existing, hits, strict=True)]

    return CoverageRecord(
        path=first.path,
        statements={**second.statements, **first.statements},
        statement_hits=_max_merge(first.statement_hits, second.statement_hits),
        functions={**second.functions, **first.functions},
        function_hits=_max_merge(first.function_hits, second.function_hits),
        branches={**second.branches, **first.branches},
        branch_hits=branch_hits,
        line_hits=_max_merge(first.line_hits, second.line_hits),
    )


class Collector:
    """File path → CoverageRecord store with a total order over paths."""

    def __init__(self, records: Iterable[CoverageRecord] = ()) -> None:
        self._records: dict[str, CoverageRecord] = {}
        for record in records:
            self.add(record)

    def add(self, record: CoverageRecord) -> None:
        existing = self._records.get(record.path)
        self._records[record.path] = (
            record if existing is None else merge_records(existing, record)
        )

    def files(self) -> list[str]:
        """File paths in sorted order."""
        return sorted(self._records)

    def file_coverage_for(self, path: str) -> CoverageRecord:
        """Return the record for ``path``.

        Raises:
            CoverageError: If no record exists for the path.
        """
        try:
            return self._records[path]
        except KeyError:
            raise CoverageError.missing_record(path) from None

    def get(self, path: str) -> CoverageRecord | None:
        return self._records.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._records

    def __iter__(self) -> Iterator[CoverageRecord]:
        return (self._records[p] for p in self.files())

    def __len__(self) -> int:
        return len(self._records)

"""Tests for the Istanbul coverage-final.json loader."""

import json
from pathlib import Path
from typing import Any

import pytest

from jacocogen.core.errors import CoverageError
from jacocogen.coverage.istanbul import parse_istanbul, record_from_istanbul
from jacocogen.coverage.aggregate import branch_coverage_by_line
from jacocogen.coverage.models import FunctionInfo, LineBranchSummary, Location


def _loc(start: int, end: int, start_col: int = 0, end_col: int = 10) -> dict[str, Any]:
    return {
        "start": {"line": start, "column": start_col},
        "end": {"line": end, "column": end_col},
    }


SAMPLE: dict[str, Any] = {
    "path": "/proj/lib/util.js",
    "statementMap": {"0": _loc(1, 1), "1": _loc(2, 4), "2": _loc(3, 3), "3": _loc(3, 3)},
    "s": {"0": 1, "1": 1, "2": 0, "3": 2},
    "fnMap": {
        "0": {"name": "add", "line": 2, "decl": _loc(2, 2), "loc": _loc(2, 4)},
        "1": {"name": "", "decl": _loc(9, 9), "loc": _loc(9, 10)},
    },
    "f": {"0": 1, "1": 0},
    "branchMap": {
        "0": {"type": "if", "line": 3, "locations": [_loc(3, 3), _loc(3, 3)]},
        "1": {"type": "cond-expr", "locations": [_loc(4, 4), _loc(4, 4)]},
    },
    "b": {"0": [1, 0], "1": [0, 0]},
}


class TestRecordFromIstanbul:
    """Tests for record_from_istanbul."""

    def test_statements_and_hits(self) -> None:
        record = record_from_istanbul("lib/util.js", SAMPLE)
        assert record.path == "lib/util.js"
        assert record.statements["1"] == Location(2, 0, 4, 10)
        assert record.statement_hits == {"0": 1, "1": 1, "2": 0, "3": 2}

    def test_functions_fall_back_to_decl_line_and_anonymous_name(self) -> None:
        record = record_from_istanbul("lib/util.js", SAMPLE)
        assert record.functions["0"] == FunctionInfo(name="add", line=2)
        assert record.functions["1"] == FunctionInfo(name="(anonymous_1)", line=9)
        assert record.function_hits == {"0": 1, "1": 0}

    def test_branches_keep_outcome_order_and_line_fallback(self) -> None:
        record = record_from_istanbul("lib/util.js", SAMPLE)
        assert record.branches["0"].line == 3
        assert record.branches["0"].outcomes == ("0.0", "0.1")
        assert record.branches["0"].type == "if"
        assert record.branches["1"].line == 4
        assert record.branch_hits == {"0": [1, 0], "1": [0, 0]}

    def test_line_hits_derived_from_statement_starts(self) -> None:
        record = record_from_istanbul("lib/util.js", SAMPLE)
        # Line 3 carries statements with 0 and 2 hits: the max wins
        assert record.line_hits == {1: 1, 2: 1, 3: 2}

    def test_skipped_statement_counts_as_hit(self) -> None:
        data = {"statementMap": {"0": {**_loc(5, 5), "skip": True}}, "s": {"0": 0}}
        assert record_from_istanbul("a.js", data).line_hits == {5: 1}
        assert record_from_istanbul("a.js", data).statement_hits == {"0": 1}

    def test_skipped_branch_outcome_counts_as_covered(self) -> None:
        data = {
            "branchMap": {
                "0": {
                    "type": "if",
                    "line": 5,
                    "locations": [_loc(5, 5), {**_loc(5, 5), "skip": True}],
                }
            },
            "b": {"0": [3, 0]},
        }
        record = record_from_istanbul("a.js", data)
        assert record.branch_hits == {"0": [3, 1]}
        assert branch_coverage_by_line(record)[5] == LineBranchSummary(covered=2, total=2)

    def test_skipped_function_counts_as_hit(self) -> None:
        data = {
            "fnMap": {
                "0": {"name": "a", "line": 1, "skip": True},
                "1": {"name": "b", "line": 2},
            },
            "f": {"0": 0, "1": 0},
        }
        assert record_from_istanbul("a.js", data).function_hits == {"0": 1, "1": 0}

    def test_explicit_line_map_is_used(self) -> None:
        data = {**SAMPLE, "l": {"1": 5, "3": 0}}
        assert record_from_istanbul("a.js", data).line_hits == {1: 5, 3: 0}

    def test_branch_without_hits_uses_location_count(self) -> None:
        data = {"branchMap": {"0": {"line": 2, "locations": [_loc(2, 2)] * 3}}}
        record = record_from_istanbul("a.js", data)
        assert len(record.branches["0"].outcomes) == 3
        assert record.branch_hits == {}

    def test_loaded_record_passes_reference_check(self) -> None:
        record_from_istanbul("lib/util.js", SAMPLE).check_references()

    def test_non_object_entry_raises(self) -> None:
        with pytest.raises(CoverageError):
            record_from_istanbul("a.js", [])  # type: ignore[arg-type]

    def test_non_numeric_hits_raise(self) -> None:
        with pytest.raises(CoverageError):
            record_from_istanbul("a.js", {"statementMap": {}, "s": {"0": "many"}})


class TestParseIstanbul:
    """Tests for parse_istanbul."""

    def test_parses_file(self, tmp_path: Path) -> None:
        json_file = tmp_path / "coverage-final.json"
        json_file.write_text(json.dumps({"/proj/lib/util.js": SAMPLE}))

        collector = parse_istanbul(json_file)

        assert collector.files() == ["/proj/lib/util.js"]

    def test_parses_directory_and_relativizes(self, tmp_path: Path) -> None:
        (tmp_path / "coverage-final.json").write_text(
            json.dumps({"/proj/lib/util.js": SAMPLE, "/elsewhere/x.js": SAMPLE})
        )

        collector = parse_istanbul(tmp_path, base_path=Path("/proj"))

        assert collector.files() == ["/elsewhere/x.js", "lib/util.js"]

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(CoverageError):
            parse_istanbul(tmp_path / "nope.json")

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        bad = tmp_path / "coverage-final.json"
        bad.write_text("{not json")
        with pytest.raises(CoverageError):
            parse_istanbul(bad)

    def test_top_level_array_raises(self, tmp_path: Path) -> None:
        bad = tmp_path / "coverage-final.json"
        bad.write_text("[]")
        with pytest.raises(CoverageError):
            parse_istanbul(bad)

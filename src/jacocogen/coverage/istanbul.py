"""Istanbul/NYC JSON format loader.

Istanbul (used by Jest, Vitest, NYC) writes per-file coverage to
coverage-final.json:
{
  "/path/to/file.js": {
    "path": "/path/to/file.js",
    "statementMap": { "0": {"start": {"line": 1, "column": 0}, "end": ...}, ... },
    "s": { "0": 1, "1": 0, ... },  // statement hit counts
    "branchMap": { "0": {"type": "if", "locations": [...], "line": 5}, ... },
    "b": { "0": [1, 0], ... },  // branch hit counts per location
    "fnMap": { "0": {"name": "foo", "line": 1, "decl": {...}, "loc": {...}}, ... },
    "f": { "0": 1, ... },  // function hit counts
    "l": { "1": 1, ... }  // optional derived line hit counts
  }
}
"""

import contextlib
import json
from pathlib import Path
from typing import Any

from jacocogen.core.errors import CoverageError
from jacocogen.coverage.collector import Collector
from jacocogen.coverage.models import BranchInfo, CoverageRecord, FunctionInfo, Location


def _location(info: dict[str, Any]) -> Location:
    start = info.get("start", {})
    end = info.get("end", {})
    start_line = int(start.get("line", 0))
    return Location(
        start_line=start_line,
        start_column=int(start.get("column", 0)),
        end_line=int(end.get("line", start_line)),
        end_column=int(end.get("column", 0)),
    )


def _unless_ignored(count: int, info: dict[str, Any]) -> int:
    # Code under "istanbul ignore" counts as executed
    if count == 0 and info.get("skip"):
        return 1
    return count


def _derive_line_hits(statements: dict[str, Location], hits: dict[str, int]) -> dict[int, int]:
    """Line hits as Istanbul derives them: max statement count per start line."""
    lines: dict[int, int] = {}
    for stmt_id, loc in statements.items():
        count = hits.get(stmt_id, 0)
        if loc.start_line not in lines or lines[loc.start_line] < count:
            lines[loc.start_line] = count
    return lines


def record_from_istanbul(path: str, file_data: dict[str, Any]) -> CoverageRecord:
    """Build a CoverageRecord from one file entry of coverage-final.json.

    Raises:
        CoverageError: If the entry is structurally invalid.
    """
    if not isinstance(file_data, dict):
        raise CoverageError.parse_error(path, "file entry is not an object")

    try:
        statement_map = file_data.get("statementMap", {})
        statements = {str(k): _location(v) for k, v in statement_map.items()}
        statement_hits = {
            str(k): _unless_ignored(int(v), statement_map.get(k, {}))
            for k, v in file_data.get("s", {}).items()
        }

        functions: dict[str, FunctionInfo] = {}
        for fn_id, fn_info in file_data.get("fnMap", {}).items():
            line = fn_info.get("line")
            if not line:
                # Newer Istanbul drops "line" in favour of decl/loc
                anchor = fn_info.get("decl") or fn_info.get("loc") or {}
                line = anchor.get("start", {}).get("line", 0)
            functions[str(fn_id)] = FunctionInfo(
                name=fn_info.get("name") or f"(anonymous_{fn_id})",
                line=int(line),
            )
        fn_map = file_data.get("fnMap", {})
        function_hits = {
            str(k): _unless_ignored(int(v), fn_map.get(k, {}))
            for k, v in file_data.get("f", {}).items()
        }

        branches: dict[str, BranchInfo] = {}
        branch_hits: dict[str, list[int]] = {}
        raw_hits = file_data.get("b", {})
        for branch_id, branch_info in file_data.get("branchMap", {}).items():
            locations = branch_info.get("locations", [])
            line = branch_info.get("line", 0)
            # Fallback to first location if line not set
            if not line and locations:
                line = locations[0].get("start", {}).get("line", 0)
            hits = [
                _unless_ignored(int(h), locations[idx] if idx < len(locations) else {})
                for idx, h in enumerate(raw_hits.get(branch_id, []))
            ]
            count = len(hits) if branch_id in raw_hits else len(locations)
            branches[str(branch_id)] = BranchInfo(
                line=int(line),
                outcomes=tuple(f"{branch_id}.{idx}" for idx in range(count)),
                type=branch_info.get("type", ""),
            )
            if branch_id in raw_hits:
                branch_hits[str(branch_id)] = hits

        if "l" in file_data:
            line_hits = {int(k): int(v) for k, v in file_data["l"].items()}
        else:
            line_hits = _derive_line_hits(statements, statement_hits)
    except (AttributeError, TypeError, ValueError) as e:
        raise CoverageError.parse_error(path, f"malformed Istanbul entry: {e}") from e

    return CoverageRecord(
        path=path,
        statements=statements,
        statement_hits=statement_hits,
        functions=functions,
        function_hits=function_hits,
        branches=branches,
        branch_hits=branch_hits,
        line_hits=line_hits,
    )


def parse_istanbul(path: Path, *, base_path: Path | None = None) -> Collector:
    """Load coverage-final.json (or a directory containing it) into a Collector.

    Args:
        path: Path to the JSON file or its directory.
        base_path: Project root. File paths under it are made relative.

    Raises:
        CoverageError: If the file is missing or not valid Istanbul JSON.
    """
    json_file = path / "coverage-final.json" if path.is_dir() else path
    if not json_file.exists():
        raise CoverageError.parse_error(str(json_file), "file not found")

    try:
        with json_file.open() as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CoverageError.parse_error(str(json_file), str(e)) from e

    if not isinstance(data, dict):
        raise CoverageError.parse_error(str(json_file), "top-level value is not an object")

    collector = Collector()
    for file_path, file_data in data.items():
        normalized_path = file_path
        if base_path:
            with contextlib.suppress(ValueError):
                normalized_path = str(Path(file_path).relative_to(base_path))
        collector.add(record_from_istanbul(normalized_path, file_data))
    return collector

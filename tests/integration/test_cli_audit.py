from __future__ import annotations

import io
import json
from pathlib import Path

from search_scope.cli import main


def _run(argv: list[str]) -> tuple[int, dict[str, object]]:
    stream = io.StringIO()
    status = main(argv, out_stream=stream)
    return status, json.loads(stream.getvalue())


def test_audit_lists_recent_scope_commands(tmp_path: Path) -> None:
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "guide.md").write_text("# guide\n", encoding="utf-8")
    workspace = ["--workspace", str(tmp_path)]
    _run([*workspace, "list", "--root", "docs"])
    _run([*workspace, "describe"])
    _run([*workspace, "list", "--pattern", "bad\\"])

    status, everything = _run([*workspace, "audit"])
    _, lists_only = _run([*workspace, "audit", "--only", "list", "--limit", "1"])

    assert status == 0
    events = everything["result"]["events"]
    assert [event["command"] for event in events] == ["list", "describe", "list"]
    assert events[0]["scope_description"] == "'docs'"
    assert events[0]["file_count"] == 1
    assert events[1]["file_count"] is None
    assert lists_only["result"]["event_count"] == 1
    assert lists_only["result"]["events"][0]["error_code"] == "INVALID_PATTERN"


def test_audit_reading_is_not_recorded(tmp_path: Path) -> None:
    workspace = ["--workspace", str(tmp_path)]
    _run([*workspace, "audit"])
    _, response = _run([*workspace, "audit"])

    assert response["result"]["events"] == []


def test_audit_rejects_non_positive_limit(tmp_path: Path) -> None:
    status, response = _run(["--workspace", str(tmp_path), "audit", "--limit", "0"])

    assert status == 2
    assert response["error"]["code"] == "INVALID_ARGUMENT"

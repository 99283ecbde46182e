from __future__ import annotations

import io
import json
from pathlib import Path

from search_scope.cli import main


def test_describe_reports_scope_and_effective_config(tmp_path: Path) -> None:
    (tmp_path / "proj").mkdir()
    stream = io.StringIO()

    status = main(
        [
            "--workspace",
            str(tmp_path),
            "--case-sensitive",
            "false",
            "describe",
            "--pattern",
            "*.txt",
            "--pattern",
            "*.java",
        ],
        out_stream=stream,
    )
    response = json.loads(stream.getvalue())

    assert status == 0
    scope = response["result"]["scope"]
    assert scope == {
        "description": "Workspace",
        "filter_description": "*.java, *.txt",
        "roots": ["/"],
        "include_derived": False,
        "case_sensitive": False,
        "working_sets": None,
    }
    config = response["result"]["config"]
    assert config["workspace_root"] == str(tmp_path.resolve())
    assert config["workspace"]["case_sensitive"] is False

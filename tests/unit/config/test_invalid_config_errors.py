from __future__ import annotations

from pathlib import Path

import pytest

from search_scope.config import load_effective_config


def _write(tmp_path: Path, *lines: str) -> None:
    (tmp_path / "search_scope.toml").write_text("\n".join(lines), encoding="utf-8")


def test_invalid_include_derived_type(tmp_path: Path) -> None:
    _write(tmp_path, "[scope]", 'include_derived = "yes"')

    with pytest.raises(ValueError, match="scope.include_derived"):
        load_effective_config(tmp_path)


def test_invalid_section_type(tmp_path: Path) -> None:
    _write(tmp_path, 'scope = "not-a-table"')

    with pytest.raises(ValueError, match="section 'scope'"):
        load_effective_config(tmp_path)


def test_patterns_must_be_strings(tmp_path: Path) -> None:
    _write(tmp_path, "[scope]", 'file_name_patterns = ["*.py", 3]')

    with pytest.raises(ValueError, match="scope.file_name_patterns"):
        load_effective_config(tmp_path)


def test_working_set_needs_exactly_one_source(tmp_path: Path) -> None:
    _write(tmp_path, "[working_sets.mixed]", 'paths = ["a"]', 'aggregate = ["b"]')

    with pytest.raises(ValueError, match="exactly one of 'paths' or 'aggregate'"):
        load_effective_config(tmp_path)


def test_case_sensitive_must_be_boolean(tmp_path: Path) -> None:
    _write(tmp_path, "[workspace]", "case_sensitive = 1")

    with pytest.raises(ValueError, match="workspace.case_sensitive"):
        load_effective_config(tmp_path)

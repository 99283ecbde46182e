from __future__ import annotations

from pathlib import Path

import pytest

from search_scope.config import WorkingSetDefinition
from search_scope.resources import (
    AggregateWorkingSet,
    StaticWorkingSet,
    Workspace,
    build_working_sets,
    select_working_sets,
)


def test_definitions_resolve_static_and_aggregate_sets(tmp_path: Path) -> None:
    (tmp_path / "core").mkdir()
    (tmp_path / "docs").mkdir()
    workspace = Workspace(tmp_path)
    definitions = (
        WorkingSetDefinition(name="code", paths=("core",)),
        WorkingSetDefinition(name="all", aggregate_of=("code", "text")),
        WorkingSetDefinition(name="text", paths=("docs",)),
    )

    resolved = build_working_sets(workspace, definitions)

    assert list(resolved) == ["code", "all", "text"]
    assert isinstance(resolved["code"], StaticWorkingSet)
    aggregate = resolved["all"]
    assert isinstance(aggregate, AggregateWorkingSet)
    assert aggregate.is_aggregate() is True
    assert aggregate.is_empty() is False
    assert [element.path.as_posix() for element in aggregate.elements()] == ["/core", "/docs"]


def test_aggregate_of_empty_sets_is_empty() -> None:
    aggregate = AggregateWorkingSet(name="none", components=(StaticWorkingSet(name="a"),))

    assert aggregate.is_empty() is True
    assert aggregate.elements() == ()
    assert AggregateWorkingSet(name="bare").is_empty() is True


def test_unknown_aggregate_component_is_config_error(tmp_path: Path) -> None:
    workspace = Workspace(tmp_path)
    definitions = (WorkingSetDefinition(name="all", aggregate_of=("ghost",)),)

    with pytest.raises(ValueError, match="working_sets.all.aggregate"):
        build_working_sets(workspace, definitions)


def test_select_working_sets_keeps_request_order(tmp_path: Path) -> None:
    first = StaticWorkingSet(name="first")
    second = StaticWorkingSet(name="second")
    available = {"first": first, "second": second}

    assert select_working_sets(available, ["second", "first"]) == [second, first]
    with pytest.raises(ValueError, match="Unknown working set: third"):
        select_working_sets(available, ["third"])


def test_aggregate_may_reference_aggregate_defined_later(tmp_path: Path) -> None:
    (tmp_path / "core").mkdir()
    workspace = Workspace(tmp_path)
    definitions = (
        WorkingSetDefinition(name="outer", aggregate_of=("inner",)),
        WorkingSetDefinition(name="inner", aggregate_of=("code",)),
        WorkingSetDefinition(name="code", paths=("core",)),
    )

    resolved = build_working_sets(workspace, definitions)

    assert list(resolved) == ["outer", "inner", "code"]
    outer = resolved["outer"]
    assert isinstance(outer, AggregateWorkingSet)
    assert outer.components == (resolved["inner"],)
    assert [element.path.as_posix() for element in outer.elements()] == ["/core"]


def test_aggregate_cycles_rejected(tmp_path: Path) -> None:
    workspace = Workspace(tmp_path)
    definitions = (
        WorkingSetDefinition(name="a", aggregate_of=("b",)),
        WorkingSetDefinition(name="b", aggregate_of=("a",)),
    )

    with pytest.raises(ValueError, match="forms a cycle: a -> b -> a"):
        build_working_sets(workspace, definitions)
    with pytest.raises(ValueError, match="forms a cycle: self -> self"):
        build_working_sets(
            workspace, (WorkingSetDefinition(name="self", aggregate_of=("self",)),)
        )

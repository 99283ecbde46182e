from __future__ import annotations

from pathlib import Path

from search_scope.resources import AggregateWorkingSet, Resource, StaticWorkingSet, Workspace
from search_scope.scope import SearchScope, convert_to_resources


class ElementWithAdapter:
    def __init__(self, resource: object) -> None:
        self._resource = resource

    def as_resource(self) -> object:
        return self._resource


def _workspace(tmp_path: Path) -> Workspace:
    for rel in ("alpha/src", "alpha/build", "beta/docs"):
        (tmp_path / rel).mkdir(parents=True)
    return Workspace(tmp_path, derived_globs=("**/build",))


def _paths(resources: list[Resource]) -> list[str]:
    return [resource.path.as_posix() for resource in resources]


def test_working_sets_expand_and_deduplicate(tmp_path: Path) -> None:
    workspace = _workspace(tmp_path)
    first = StaticWorkingSet(
        name="first",
        members=(workspace.resource_for("alpha/src"), workspace.resource_for("beta")),
    )
    second = StaticWorkingSet(name="second", members=(workspace.resource_for("alpha"),))

    scope = SearchScope.new_working_set_scope(
        [first, second], workspace.root, ["*.md"], include_derived=False, case_sensitive=True
    )

    assert _paths(list(scope.roots)) == ["/beta", "/alpha"]
    assert scope.description == "Working Set - 'first', 'second'"
    assert scope.working_sets == (first, second)


def test_elements_adapted_or_skipped(tmp_path: Path) -> None:
    workspace = _workspace(tmp_path)
    working_set = StaticWorkingSet(
        name="mixed",
        members=(
            ElementWithAdapter(workspace.resource_for("beta/docs")),
            ElementWithAdapter(None),
            "not-a-resource",
        ),
    )

    roots = convert_to_resources([working_set], workspace.root, include_derived=False)

    assert _paths(roots) == ["/beta/docs"]


def test_derived_working_set_members_follow_flag(tmp_path: Path) -> None:
    workspace = _workspace(tmp_path)
    working_set = StaticWorkingSet(name="gen", members=(workspace.resource_for("alpha/build"),))

    assert convert_to_resources([working_set], workspace.root, include_derived=False) == []
    assert _paths(convert_to_resources([working_set], workspace.root, include_derived=True)) == [
        "/alpha/build"
    ]


def test_empty_aggregate_working_set_means_whole_workspace(tmp_path: Path) -> None:
    workspace = _workspace(tmp_path)
    populated = StaticWorkingSet(name="populated", members=(workspace.resource_for("beta"),))
    empty_aggregate = AggregateWorkingSet(
        name="window", components=(StaticWorkingSet(name="nothing"),)
    )

    scope = SearchScope.new_working_set_scope(
        [populated, empty_aggregate], workspace.root, None, include_derived=False
    )

    assert scope.roots == (workspace.root,)


def test_empty_static_working_set_yields_empty_scope(tmp_path: Path) -> None:
    workspace = _workspace(tmp_path)
    scope = SearchScope.new_working_set_scope(
        [StaticWorkingSet(name="nothing")], workspace.root, None, include_derived=False
    )

    assert scope.roots == ()

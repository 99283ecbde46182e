"""In-memory working sets resolved from configuration."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from search_scope.config import WorkingSetDefinition
from search_scope.resources.filesystem import Workspace
from search_scope.resources.models import WorkingSet


@dataclass(slots=True, frozen=True)
class StaticWorkingSet:
    """Manually assembled working set."""

    name: str
    members: tuple[object, ...] = field(default_factory=tuple)

    def elements(self) -> tuple[object, ...]:
        return self.members

    def is_aggregate(self) -> bool:
        return False

    def is_empty(self) -> bool:
        return not self.members


@dataclass(slots=True, frozen=True)
class AggregateWorkingSet:
    """Working set computed as the union of other working sets."""

    name: str
    components: tuple[WorkingSet, ...] = field(default_factory=tuple)

    def elements(self) -> tuple[object, ...]:
        output: list[object] = []
        for component in self.components:
            output.extend(component.elements())
        return tuple(output)

    def is_aggregate(self) -> bool:
        return True

    def is_empty(self) -> bool:
        return all(component.is_empty() for component in self.components)


def build_working_sets(
    workspace: Workspace, definitions: Sequence[WorkingSetDefinition]
) -> dict[str, WorkingSet]:
    """Resolve configured definitions into working sets keyed by name.

    Aggregates may reference sets defined anywhere in the configuration,
    including other aggregates; reference cycles are rejected.
    """
    by_name = {definition.name: definition for definition in definitions}
    resolved: dict[str, WorkingSet] = {}
    in_progress: list[str] = []

    def resolve(name: str) -> WorkingSet:
        existing = resolved.get(name)
        if existing is not None:
            return existing
        definition = by_name[name]
        if definition.aggregate_of is None:
            members = tuple(workspace.resource_for(path) for path in definition.paths)
            resolved[name] = StaticWorkingSet(name=name, members=members)
            return resolved[name]
        if name in in_progress:
            cycle = " -> ".join([*in_progress[in_progress.index(name) :], name])
            raise ValueError(
                f"Config field 'working_sets.{name}.aggregate' forms a cycle: {cycle}."
            )
        in_progress.append(name)
        components: list[WorkingSet] = []
        for component_name in definition.aggregate_of:
            if component_name not in by_name:
                raise ValueError(
                    f"Config field 'working_sets.{name}.aggregate' references "
                    f"unknown working set '{component_name}'."
                )
            components.append(resolve(component_name))
        in_progress.pop()
        resolved[name] = AggregateWorkingSet(name=name, components=tuple(components))
        return resolved[name]

    for definition in definitions:
        resolve(definition.name)
    return {definition.name: resolved[definition.name] for definition in definitions}


def select_working_sets(available: dict[str, WorkingSet], names: Iterable[str]) -> list[WorkingSet]:
    """Pick working sets by name in request order."""
    output: list[WorkingSet] = []
    for name in names:
        working_set = available.get(name)
        if working_set is None:
            raise ValueError(f"Unknown working set: {name}")
        output.append(working_set)
    return output

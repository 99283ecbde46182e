"""File text search scope: roots, file name patterns and derived filtering."""

from __future__ import annotations

import re
import threading
from collections.abc import Iterable, Sequence

from search_scope.resources.models import (
    Resource,
    WorkingSet,
    adapt_to_resource,
    is_prefix_of,
)
from search_scope.scope.patterns import compile_name_patterns, is_case_sensitive_filesystem

WORKSPACE_DESCRIPTION = "Workspace"
WORKING_SET_DESCRIPTION = "Working Set - {0}"
_DESCRIBED_ROOTS = 3


class SearchScope:
    """Decides which workspace resources a file search visits.

    Instances are created through the ``new_*`` constructors and are immutable
    afterwards, except for the file name matcher which is compiled on first use.
    """

    def __init__(
        self,
        description: str,
        roots: Sequence[Resource],
        working_sets: Sequence[WorkingSet] | None,
        file_name_patterns: Sequence[str] | None,
        include_derived: bool,
        case_sensitive: bool | None = None,
    ) -> None:
        self._description = description
        self._roots = tuple(roots)
        self._working_sets = tuple(working_sets) if working_sets is not None else None
        self._file_name_patterns = (
            tuple(file_name_patterns) if file_name_patterns is not None else None
        )
        self._include_derived = include_derived
        self._case_sensitive = (
            is_case_sensitive_filesystem() if case_sensitive is None else case_sensitive
        )
        self._matcher: re.Pattern[str] | None = None
        self._matcher_lock = threading.Lock()

    @classmethod
    def new_workspace_scope(
        cls,
        workspace_root: Resource,
        file_name_patterns: Sequence[str] | None,
        include_derived: bool,
        case_sensitive: bool | None = None,
    ) -> SearchScope:
        """Scope covering the whole workspace."""
        return cls(
            WORKSPACE_DESCRIPTION,
            (workspace_root,),
            None,
            file_name_patterns,
            include_derived,
            case_sensitive,
        )

    @classmethod
    def new_search_scope(
        cls,
        roots: Sequence[Resource] | None,
        file_name_patterns: Sequence[str] | None,
        include_derived: bool,
        case_sensitive: bool | None = None,
    ) -> SearchScope:
        """Scope covering the given roots and everything below them."""
        candidates = list(roots or ())
        return cls(
            describe_roots(candidates),
            remove_redundant_entries(candidates, include_derived),
            None,
            file_name_patterns,
            include_derived,
            case_sensitive,
        )

    @classmethod
    def new_working_set_scope(
        cls,
        working_sets: Sequence[WorkingSet] | None,
        workspace_root: Resource,
        file_name_patterns: Sequence[str] | None,
        include_derived: bool,
        case_sensitive: bool | None = None,
    ) -> SearchScope:
        """Scope covering the resources of the given working sets."""
        sets = list(working_sets or ())
        names = ", ".join(f"'{working_set.name}'" for working_set in sets)
        return cls(
            WORKING_SET_DESCRIPTION.format(names),
            convert_to_resources(sets, workspace_root, include_derived),
            sets,
            file_name_patterns,
            include_derived,
            case_sensitive,
        )

    @property
    def description(self) -> str:
        return self._description

    @property
    def roots(self) -> tuple[Resource, ...]:
        return self._roots

    @property
    def file_name_patterns(self) -> tuple[str, ...] | None:
        """Configured patterns, or None when every file name matches."""
        return self._file_name_patterns

    @property
    def include_derived(self) -> bool:
        return self._include_derived

    @property
    def working_sets(self) -> tuple[WorkingSet, ...] | None:
        """Working sets the scope was built from, or None."""
        return self._working_sets

    @property
    def case_sensitive(self) -> bool:
        return self._case_sensitive

    @property
    def filter_description(self) -> str:
        """Sorted, comma separated patterns; '*' when unfiltered."""
        if self._file_name_patterns is None:
            return "*"
        return ", ".join(sorted(self._file_name_patterns))

    def contains(self, resource: Resource) -> bool:
        """Return True when the traversal should accept the resource."""
        # Everything inside a derived folder is derived too.
        if not self._include_derived and resource.is_derived():
            return False
        if not resource.kind.is_container:
            return self.matches_file_name(resource.name)
        return True

    def matches_file_name(self, file_name: str) -> bool:
        return self._file_name_matcher().fullmatch(file_name) is not None

    def validate(self) -> None:
        """Compile the file name matcher now, raising InvalidPatternError on bad input."""
        self._file_name_matcher()

    def _file_name_matcher(self) -> re.Pattern[str]:
        matcher = self._matcher
        if matcher is not None:
            return matcher
        with self._matcher_lock:
            if self._matcher is None:
                self._matcher = compile_name_patterns(
                    self._file_name_patterns, self._case_sensitive
                )
            return self._matcher

    def __repr__(self) -> str:
        return (
            f"SearchScope(description={self._description!r}, "
            f"roots={[root.path.as_posix() for root in self._roots]!r}, "
            f"filter={self.filter_description!r}, include_derived={self._include_derived})"
        )


def describe_roots(roots: Sequence[Resource]) -> str:
    """Quote the first few root names, appending '...' when more were given."""
    shown = ", ".join(f"'{root.name}'" for root in roots[:_DESCRIBED_ROOTS])
    if len(roots) > _DESCRIBED_ROOTS:
        return f"{shown}..."
    return shown


def remove_redundant_entries(
    candidates: Iterable[Resource], include_derived: bool
) -> list[Resource]:
    """Drop derived candidates and roots nested inside other roots."""
    accepted: list[Resource] = []
    for candidate in candidates:
        _add_root(accepted, candidate, include_derived)
    return accepted


def convert_to_resources(
    working_sets: Iterable[WorkingSet], workspace_root: Resource, include_derived: bool
) -> list[Resource]:
    """Expand working sets into deduplicated roots.

    An empty aggregate working set stands for the whole workspace.
    """
    accepted: list[Resource] = []
    for working_set in working_sets:
        if working_set.is_aggregate() and working_set.is_empty():
            return [workspace_root]
        for element in working_set.elements():
            resource = adapt_to_resource(element)
            if resource is not None:
                _add_root(accepted, resource, include_derived)
    return accepted


def _add_root(accepted: list[Resource], candidate: Resource, include_derived: bool) -> None:
    if not include_derived and is_derived_or_inside_derived(candidate):
        return
    candidate_path = candidate.path
    for index in range(len(accepted) - 1, -1, -1):
        other_path = accepted[index].path
        if is_prefix_of(other_path, candidate_path):
            return
        if is_prefix_of(candidate_path, other_path):
            del accepted[index]
    accepted.append(candidate)


def is_derived_or_inside_derived(resource: Resource) -> bool:
    """Return True when the resource or any of its ancestors is derived."""
    current: Resource | None = resource
    while current is not None:
        if current.is_derived():
            return True
        current = current.parent()
    return False

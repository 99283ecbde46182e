"""Narrow resource and working-set protocols consumed by search scopes."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath
from typing import Protocol, runtime_checkable


class ResourceKind(Enum):
    """Structural kind of a workspace resource."""

    FILE = "file"
    FOLDER = "folder"
    PROJECT = "project"
    ROOT = "root"

    @property
    def is_container(self) -> bool:
        return self is not ResourceKind.FILE


@runtime_checkable
class Resource(Protocol):
    """Path-identified file or container supplied by the hosting workspace."""

    @property
    def path(self) -> PurePosixPath: ...

    @property
    def name(self) -> str: ...

    @property
    def kind(self) -> ResourceKind: ...

    def is_derived(self) -> bool: ...

    def parent(self) -> Resource | None: ...


@runtime_checkable
class WorkingSet(Protocol):
    """Named group of workspace elements, possibly computed from other sets."""

    @property
    def name(self) -> str: ...

    def elements(self) -> tuple[object, ...]: ...

    def is_aggregate(self) -> bool: ...

    def is_empty(self) -> bool: ...


def adapt_to_resource(element: object) -> Resource | None:
    """Return the resource behind a working-set element, or None."""
    if isinstance(element, Resource):
        return element
    adapter = getattr(element, "as_resource", None)
    if callable(adapter):
        adapted = adapter()
        if isinstance(adapted, Resource):
            return adapted
    return None


def is_prefix_of(ancestor: PurePosixPath, descendant: PurePosixPath) -> bool:
    """Segment-wise prefix test; equal paths are prefixes of each other."""
    return descendant.parts[: len(ancestor.parts)] == ancestor.parts

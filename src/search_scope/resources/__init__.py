"""Workspace resource protocols and the local filesystem adapter."""

from .filesystem import (
    WORKSPACE_ROOT_PATH,
    FsResource,
    ResourceNotFoundError,
    Workspace,
    matches_derived_glob,
)
from .models import Resource, ResourceKind, WorkingSet, adapt_to_resource, is_prefix_of
from .working_sets import (
    AggregateWorkingSet,
    StaticWorkingSet,
    build_working_sets,
    select_working_sets,
)

__all__ = [
    "AggregateWorkingSet",
    "FsResource",
    "Resource",
    "ResourceKind",
    "ResourceNotFoundError",
    "StaticWorkingSet",
    "WORKSPACE_ROOT_PATH",
    "WorkingSet",
    "Workspace",
    "adapt_to_resource",
    "build_working_sets",
    "is_prefix_of",
    "matches_derived_glob",
    "select_working_sets",
]

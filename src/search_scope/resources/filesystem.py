"""Local filesystem adapter exposing directories and files as workspace resources."""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path, PurePosixPath

from search_scope.resources.models import ResourceKind

WORKSPACE_ROOT_PATH = PurePosixPath("/")


class ResourceNotFoundError(Exception):
    """Raised when a requested path does not map to a workspace resource."""

    def __init__(self, reason: str, hint: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint


def matches_derived_glob(relative_path: str, derived_globs: tuple[str, ...]) -> bool:
    """Return True when a workspace-relative path matches a derived glob."""
    anchored = f"/{relative_path}"
    return any(
        fnmatch.fnmatchcase(relative_path, pattern) or fnmatch.fnmatchcase(anchored, pattern)
        for pattern in derived_globs
    )


class Workspace:
    """On-disk directory acting as the workspace root."""

    def __init__(self, root_dir: Path, derived_globs: tuple[str, ...] = ()) -> None:
        self._root_dir = root_dir.resolve()
        self._derived_globs = derived_globs
        self._root = FsResource(self, WORKSPACE_ROOT_PATH)

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    @property
    def derived_globs(self) -> tuple[str, ...]:
        return self._derived_globs

    @property
    def root(self) -> FsResource:
        """Return the workspace root resource."""
        return self._root

    def resource_for(self, candidate: str | Path) -> FsResource:
        """Map an absolute or workspace-relative on-disk path to a resource."""
        raw = Path(candidate)
        full = raw if raw.is_absolute() else self._root_dir / raw
        resolved = full.resolve(strict=False)
        if not resolved.is_relative_to(self._root_dir):
            raise ResourceNotFoundError(
                reason=f"Path is outside the workspace: {candidate}",
                hint="Use a path located under the workspace root.",
            )
        if not resolved.exists():
            raise ResourceNotFoundError(
                reason=f"Path does not exist: {candidate}",
                hint="Check the path relative to the workspace root.",
            )
        relative = resolved.relative_to(self._root_dir)
        return FsResource(self, WORKSPACE_ROOT_PATH / PurePosixPath(relative.as_posix()))

    def to_disk_path(self, path: PurePosixPath) -> Path:
        """Return the on-disk location of a workspace path."""
        relative = path.relative_to(WORKSPACE_ROOT_PATH)
        return self._root_dir.joinpath(*relative.parts)

    def is_derived_path(self, path: PurePosixPath) -> bool:
        """Return True when the path or one of its ancestors matches a derived glob."""
        if not self._derived_globs:
            return False
        parts = path.relative_to(WORKSPACE_ROOT_PATH).parts
        for depth in range(1, len(parts) + 1):
            if matches_derived_glob("/".join(parts[:depth]), self._derived_globs):
                return True
        return False


class FsResource:
    """Resource backed by a file or directory below a workspace root."""

    __slots__ = ("_workspace", "_path", "_kind")

    def __init__(self, workspace: Workspace, path: PurePosixPath) -> None:
        self._workspace = workspace
        self._path = path
        self._kind = self._classify()

    def _classify(self) -> ResourceKind:
        depth = len(self._path.parts) - 1
        if depth == 0:
            return ResourceKind.ROOT
        if not self.disk_path.is_dir():
            return ResourceKind.FILE
        if depth == 1:
            return ResourceKind.PROJECT
        return ResourceKind.FOLDER

    @property
    def path(self) -> PurePosixPath:
        return self._path

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def kind(self) -> ResourceKind:
        return self._kind

    @property
    def disk_path(self) -> Path:
        return self._workspace.to_disk_path(self._path)

    def is_derived(self) -> bool:
        return self._workspace.is_derived_path(self._path)

    def parent(self) -> FsResource | None:
        if self._path == WORKSPACE_ROOT_PATH:
            return None
        return FsResource(self._workspace, self._path.parent)

    def children(self) -> list[FsResource]:
        """List direct children in name order, skipping links and special files."""
        if not self._kind.is_container:
            return []
        output: list[FsResource] = []
        with os.scandir(self.disk_path) as entries:
            ordered = sorted(entries, key=lambda item: item.name)
        for entry in ordered:
            if entry.is_symlink():
                continue
            if not (entry.is_dir(follow_symlinks=False) or entry.is_file(follow_symlinks=False)):
                continue
            output.append(FsResource(self._workspace, self._path / entry.name))
        return output

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FsResource):
            return NotImplemented
        return self._workspace is other._workspace and self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __repr__(self) -> str:
        return f"FsResource({self._path.as_posix()!r}, {self._kind.value})"

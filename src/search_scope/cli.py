"""Command-line host that builds scopes over a local workspace and walks them."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Collection, Iterator
from pathlib import Path, PurePosixPath
from typing import TextIO

from search_scope.config import CliOverrides, ScopeConfig, load_effective_config
from search_scope.logging import (
    AuditEvent,
    JsonlAuditLogger,
    summarize_arguments,
    utc_timestamp,
)
from search_scope.resources import (
    WORKSPACE_ROOT_PATH,
    FsResource,
    ResourceNotFoundError,
    WorkingSet,
    Workspace,
    build_working_sets,
    select_working_sets,
)
from search_scope.scope import InvalidPatternError, SearchScope

SCOPE_COMMANDS = ("list", "describe")


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for scope commands."""
    parser = argparse.ArgumentParser(prog="search-scope")
    parser.add_argument("--workspace", required=False, default=".")
    parser.add_argument("--data-dir", required=False, default=None)
    parser.add_argument(
        "--case-sensitive", choices=("true", "false"), required=False, default=None
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    for name in SCOPE_COMMANDS:
        sub = subparsers.add_parser(name)
        sub.add_argument("--root", action="append", dest="roots", default=None)
        sub.add_argument("--working-set", action="append", dest="working_sets", default=None)
        sub.add_argument("--pattern", action="append", dest="patterns", default=None)
        derived = sub.add_mutually_exclusive_group()
        derived.add_argument(
            "--include-derived", action="store_const", const=True, dest="include_derived"
        )
        derived.add_argument(
            "--exclude-derived", action="store_const", const=False, dest="include_derived"
        )
    audit = subparsers.add_parser("audit")
    audit.add_argument("--limit", type=int, default=20)
    audit.add_argument("--since", default=None)
    audit.add_argument("--only", choices=SCOPE_COMMANDS, default=None)
    return parser


def walk_scope(
    scope: SearchScope, skipped: Collection[PurePosixPath] = ()
) -> Iterator[FsResource]:
    """Yield files in scope depth-first, pruning rejected and skipped containers."""
    for root in scope.roots:
        if not isinstance(root, FsResource):
            continue
        stack: list[FsResource] = [root]
        while stack:
            current = stack.pop()
            if current.path in skipped or not scope.contains(current):
                continue
            if not current.kind.is_container:
                yield current
                continue
            stack.extend(reversed(current.children()))


class ScopeCommandRunner:
    """Run scope commands against one workspace and audit each invocation."""

    def __init__(self, config: ScopeConfig) -> None:
        self._config = config
        self._workspace = Workspace(
            config.workspace_root, derived_globs=config.workspace.derived_globs
        )
        self._working_sets: dict[str, WorkingSet] = build_working_sets(
            self._workspace, config.working_sets
        )
        self._audit_logger = JsonlAuditLogger(path=config.data_dir / "audit.jsonl")
        self._skipped = _paths_inside_workspace(config.workspace_root, (config.data_dir,))
        self._request_counter = 0

    @property
    def workspace(self) -> Workspace:
        return self._workspace

    @property
    def audit_logger(self) -> JsonlAuditLogger:
        return self._audit_logger

    def build_scope(
        self,
        roots: list[str] | None = None,
        working_sets: list[str] | None = None,
        patterns: list[str] | None = None,
        include_derived: bool | None = None,
    ) -> SearchScope:
        """Build a roots, working-set or workspace scope from command arguments."""
        defaults = self._config.defaults
        file_name_patterns = patterns if patterns is not None else defaults.file_name_patterns
        derived = include_derived if include_derived is not None else defaults.include_derived
        case_sensitive = self._config.workspace.case_sensitive
        if roots:
            resources = [self._workspace.resource_for(root) for root in roots]
            return SearchScope.new_search_scope(
                resources, file_name_patterns, derived, case_sensitive
            )
        if working_sets:
            selected = select_working_sets(self._working_sets, working_sets)
            return SearchScope.new_working_set_scope(
                selected, self._workspace.root, file_name_patterns, derived, case_sensitive
            )
        return SearchScope.new_workspace_scope(
            self._workspace.root, file_name_patterns, derived, case_sensitive
        )

    def run(self, command: str, arguments: dict[str, object]) -> dict[str, object]:
        """Execute one scope command and return a response envelope."""
        self._request_counter += 1
        request_id = f"req-{self._request_counter:06d}"
        scope: SearchScope | None = None
        file_count: int | None = None
        if command not in SCOPE_COMMANDS:
            response = error_response(
                request_id, "UNKNOWN_COMMAND", f"Unknown command: {command}"
            )
            self._log(request_id, command, arguments, response, scope, file_count)
            return response
        try:
            scope = self.build_scope(
                roots=_string_list(arguments.get("roots")),
                working_sets=_string_list(arguments.get("working_sets")),
                patterns=_string_list(arguments.get("patterns")),
                include_derived=_optional_bool(arguments.get("include_derived")),
            )
            scope.validate()
            if command == "list":
                files = [
                    resource.path.as_posix() for resource in walk_scope(scope, self._skipped)
                ]
                file_count = len(files)
                result: dict[str, object] = {
                    "scope": scope_summary(scope),
                    "files": files,
                    "file_count": file_count,
                }
            else:
                result = {"scope": scope_summary(scope), "config": self._config.to_public_dict()}
        except InvalidPatternError as error:
            response = error_response(request_id, "INVALID_PATTERN", f"{error} {error.hint}")
        except ResourceNotFoundError as error:
            response = error_response(
                request_id, "RESOURCE_NOT_FOUND", f"{error.reason} {error.hint}"
            )
        except ValueError as error:
            response = error_response(request_id, "INVALID_CONFIG", str(error))
        else:
            response = {"request_id": request_id, "ok": True, "result": result}
        self._log(request_id, command, arguments, response, scope, file_count)
        return response

    def audit(
        self, limit: int = 20, since: str | None = None, only: str | None = None
    ) -> dict[str, object]:
        """Return recent audit events; reading the trail is not itself audited."""
        if limit < 1:
            return error_response("req-audit", "INVALID_ARGUMENT", "--limit must be >= 1.")
        events = self._audit_logger.recent(limit=limit, since=since, command=only)
        return {
            "request_id": "req-audit",
            "ok": True,
            "result": {"events": events, "event_count": len(events)},
        }

    def _log(
        self,
        request_id: str,
        command: str,
        arguments: dict[str, object],
        response: dict[str, object],
        scope: SearchScope | None,
        file_count: int | None,
    ) -> None:
        error_payload = response.get("error")
        error_code: str | None = None
        if isinstance(error_payload, dict):
            code_value = error_payload.get("code")
            if isinstance(code_value, str):
                error_code = code_value
        self._audit_logger.append(
            AuditEvent(
                timestamp=utc_timestamp(),
                request_id=request_id,
                command=command,
                ok=bool(response.get("ok", False)),
                error_code=error_code,
                scope_description=scope.description if scope is not None else None,
                root_count=len(scope.roots) if scope is not None else None,
                file_count=file_count,
                arguments=summarize_arguments(arguments),
            )
        )


def _paths_inside_workspace(
    workspace_root: Path, directories: tuple[Path, ...]
) -> frozenset[PurePosixPath]:
    """Workspace paths of tool-owned directories that live below the workspace."""
    output: set[PurePosixPath] = set()
    for directory in directories:
        resolved = directory.resolve()
        if resolved != workspace_root and resolved.is_relative_to(workspace_root):
            relative = resolved.relative_to(workspace_root).as_posix()
            output.add(WORKSPACE_ROOT_PATH / relative)
    return frozenset(output)


def scope_summary(scope: SearchScope) -> dict[str, object]:
    """Serializable view of a scope."""
    working_sets = scope.working_sets
    return {
        "description": scope.description,
        "filter_description": scope.filter_description,
        "roots": [root.path.as_posix() for root in scope.roots],
        "include_derived": scope.include_derived,
        "case_sensitive": scope.case_sensitive,
        "working_sets": (
            [working_set.name for working_set in working_sets]
            if working_sets is not None
            else None
        ),
    }


def error_response(request_id: str, code: str, message: str) -> dict[str, object]:
    """Build explicit error envelope."""
    return {
        "request_id": request_id,
        "ok": False,
        "result": {},
        "error": {"code": code, "message": message},
    }


def create_runner(
    workspace_root: str = ".", cli_overrides: CliOverrides | None = None
) -> ScopeCommandRunner:
    """Create a runner from the effective workspace configuration."""
    config = load_effective_config(Path(workspace_root), overrides=cli_overrides)
    return ScopeCommandRunner(config)


def main(argv: list[str] | None = None, out_stream: TextIO | None = None) -> int:
    """Entrypoint for the search-scope command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    stream = out_stream or sys.stdout
    case_sensitive: bool | None = None
    if args.case_sensitive == "true":
        case_sensitive = True
    if args.case_sensitive == "false":
        case_sensitive = False
    overrides = CliOverrides(
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        case_sensitive=case_sensitive,
    )
    try:
        runner = create_runner(workspace_root=args.workspace, cli_overrides=overrides)
    except (ValueError, ResourceNotFoundError) as error:
        response = error_response("req-000000", "INVALID_CONFIG", str(error))
        stream.write(f"{json.dumps(response, sort_keys=True)}\n")
        return 2
    if args.command == "audit":
        response = runner.audit(limit=args.limit, since=args.since, only=args.only)
        stream.write(f"{json.dumps(response, sort_keys=True)}\n")
        return 0 if response["ok"] else 2
    arguments: dict[str, object] = {
        "roots": args.roots,
        "working_sets": args.working_sets,
        "patterns": args.patterns,
        "include_derived": args.include_derived,
    }
    response = runner.run(args.command, arguments)
    stream.write(f"{json.dumps(response, sort_keys=True)}\n")
    return 0 if response["ok"] else 2


def _string_list(value: object) -> list[str] | None:
    if not isinstance(value, list):
        return None
    return [item for item in value if isinstance(item, str)]


def _optional_bool(value: object) -> bool | None:
    return value if isinstance(value, bool) else None


if __name__ == "__main__":
    raise SystemExit(main())

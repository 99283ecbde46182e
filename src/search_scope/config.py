"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "search_scope.toml"
DEFAULT_DATA_DIR_NAME = ".search_scope"
DEFAULT_DERIVED_GLOBS = ("**/build", "**/dist", "**/__pycache__", "**/*.egg-info")


@dataclass(slots=True, frozen=True)
class ScopeDefaults:
    """Scope settings used when a command does not override them."""

    file_name_patterns: tuple[str, ...] | None
    include_derived: bool


@dataclass(slots=True, frozen=True)
class WorkspaceConfig:
    """How the workspace tree is interpreted."""

    derived_globs: tuple[str, ...]
    case_sensitive: bool | None


@dataclass(slots=True, frozen=True)
class WorkingSetDefinition:
    """Named working set; either explicit paths or an aggregate of other sets."""

    name: str
    paths: tuple[str, ...] = ()
    aggregate_of: tuple[str, ...] | None = None


@dataclass(slots=True, frozen=True)
class ScopeConfig:
    """Fully merged configuration."""

    workspace_root: Path
    data_dir: Path
    defaults: ScopeDefaults
    workspace: WorkspaceConfig
    working_sets: tuple[WorkingSetDefinition, ...]

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for command output."""
        patterns = self.defaults.file_name_patterns
        return {
            "workspace_root": str(self.workspace_root),
            "data_dir": str(self.data_dir),
            "scope": {
                "file_name_patterns": list(patterns) if patterns is not None else None,
                "include_derived": self.defaults.include_derived,
            },
            "workspace": {
                "derived_globs": list(self.workspace.derived_globs),
                "case_sensitive": self.workspace.case_sensitive,
            },
            "working_sets": {
                definition.name: (
                    {"aggregate": list(definition.aggregate_of)}
                    if definition.aggregate_of is not None
                    else {"paths": list(definition.paths)}
                )
                for definition in self.working_sets
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    file_name_patterns: tuple[str, ...] | None = None
    include_derived: bool | None = None
    case_sensitive: bool | None = None


def default_config(workspace_root: Path) -> ScopeConfig:
    """Build default config for a given workspace root."""
    resolved_root = workspace_root.resolve()
    return ScopeConfig(
        workspace_root=resolved_root,
        data_dir=resolved_root / DEFAULT_DATA_DIR_NAME,
        defaults=ScopeDefaults(file_name_patterns=None, include_derived=False),
        workspace=WorkspaceConfig(derived_globs=DEFAULT_DERIVED_GLOBS, case_sensitive=None),
        working_sets=(),
    )


def load_workspace_config_file(workspace_root: Path) -> dict[str, object]:
    """Load optional search_scope.toml from the workspace root."""
    config_path = workspace_root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_bool(value: object, name: str, default: bool | None) -> bool | None:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def _working_set_definitions(payload: dict[str, object]) -> tuple[WorkingSetDefinition, ...]:
    output: list[WorkingSetDefinition] = []
    for name, raw in payload.items():
        section = f"working_sets.{name}"
        if not isinstance(raw, dict):
            raise ValueError(f"Config section '{section}' must be a table.")
        has_paths = "paths" in raw
        has_aggregate = "aggregate" in raw
        if has_paths == has_aggregate:
            raise ValueError(
                f"Config section '{section}' must define exactly one of 'paths' or 'aggregate'."
            )
        if has_aggregate:
            output.append(
                WorkingSetDefinition(
                    name=name,
                    aggregate_of=_tuple_of_strings(raw["aggregate"], section, "aggregate"),
                )
            )
            continue
        output.append(
            WorkingSetDefinition(name=name, paths=_tuple_of_strings(raw["paths"], section, "paths"))
        )
    return tuple(output)


def merge_config(
    base: ScopeConfig, workspace_payload: dict[str, object], overrides: CliOverrides
) -> ScopeConfig:
    """Merge defaults, workspace config, then CLI overrides."""
    scope_payload = _get_table(workspace_payload, "scope")
    workspace_section = _get_table(workspace_payload, "workspace")
    working_sets_payload = _get_table(workspace_payload, "working_sets")

    file_name_patterns = base.defaults.file_name_patterns
    if "file_name_patterns" in scope_payload:
        file_name_patterns = _tuple_of_strings(
            scope_payload["file_name_patterns"], "scope", "file_name_patterns"
        )
    include_derived = _optional_bool(
        scope_payload.get("include_derived"),
        "scope.include_derived",
        base.defaults.include_derived,
    )

    derived_globs = base.workspace.derived_globs
    if "derived_globs" in workspace_section:
        derived_globs = _tuple_of_strings(
            workspace_section["derived_globs"], "workspace", "derived_globs"
        )
    case_sensitive = _optional_bool(
        workspace_section.get("case_sensitive"),
        "workspace.case_sensitive",
        base.workspace.case_sensitive,
    )

    merged = ScopeConfig(
        workspace_root=base.workspace_root,
        data_dir=base.data_dir,
        defaults=ScopeDefaults(
            file_name_patterns=file_name_patterns,
            include_derived=bool(include_derived),
        ),
        workspace=WorkspaceConfig(derived_globs=derived_globs, case_sensitive=case_sensitive),
        working_sets=base.working_sets + _working_set_definitions(working_sets_payload),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: ScopeConfig, overrides: CliOverrides) -> ScopeConfig:
    """Apply startup overrides at highest precedence."""
    defaults = ScopeDefaults(
        file_name_patterns=(
            overrides.file_name_patterns
            if overrides.file_name_patterns is not None
            else config.defaults.file_name_patterns
        ),
        include_derived=(
            overrides.include_derived
            if overrides.include_derived is not None
            else config.defaults.include_derived
        ),
    )
    workspace = WorkspaceConfig(
        derived_globs=config.workspace.derived_globs,
        case_sensitive=(
            overrides.case_sensitive
            if overrides.case_sensitive is not None
            else config.workspace.case_sensitive
        ),
    )
    data_dir = overrides.data_dir or config.data_dir
    return ScopeConfig(
        workspace_root=config.workspace_root,
        data_dir=data_dir.resolve(),
        defaults=defaults,
        workspace=workspace,
        working_sets=config.working_sets,
    )


def load_effective_config(
    workspace_root: Path, overrides: CliOverrides | None = None
) -> ScopeConfig:
    """Load effective config using merge order defaults -> workspace config -> overrides."""
    resolved_root = workspace_root.resolve()
    base = default_config(resolved_root)
    payload = load_workspace_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())

"""Audit trail of scope commands, one JSON object per line."""

from __future__ import annotations

import json
from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """One scope command: what scope it built and what it produced."""

    timestamp: str
    request_id: str
    command: str
    ok: bool
    error_code: str | None
    scope_description: str | None = None
    root_count: int | None = None
    file_count: int | None = None
    arguments: dict[str, object] = field(default_factory=dict)


def utc_timestamp() -> str:
    """Millisecond UTC timestamp ending in 'Z'; sorts lexically by time."""
    now = datetime.now(tz=UTC)
    return f"{now:%Y-%m-%dT%H:%M:%S}.{now.microsecond // 1000:03d}Z"


def summarize_arguments(arguments: dict[str, object]) -> dict[str, object]:
    """Keep the scope-shaping arguments; workspace paths are reduced to a count."""
    roots = arguments.get("roots")
    return {
        "root_args": len(roots) if isinstance(roots, list) else 0,
        "working_sets": _names(arguments.get("working_sets")),
        "patterns": _names(arguments.get("patterns")),
        "include_derived": (
            arguments.get("include_derived")
            if isinstance(arguments.get("include_derived"), bool)
            else None
        ),
    }


def _names(value: object) -> list[str] | None:
    if not isinstance(value, list):
        return None
    return [item for item in value if isinstance(item, str)]


class JsonlAuditLogger:
    """Appends scope command events and serves the most recent ones back."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def append(self, event: AuditEvent) -> None:
        line = json.dumps(asdict(event), sort_keys=True)
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(f"{line}\n")

    def recent(
        self, limit: int = 20, since: str | None = None, command: str | None = None
    ) -> list[dict[str, object]]:
        """Return up to ``limit`` newest events, oldest first.

        Unparseable lines are skipped. ``since`` is an inclusive lower bound on
        the timestamp; ``command`` keeps only events of that command.
        """
        if limit < 1 or not self._path.exists():
            return []
        tail: deque[dict[str, object]] = deque(maxlen=limit)
        with self._path.open("r", encoding="utf-8") as handle:
            for line in filter(None, map(str.strip, handle)):
                try:
                    record = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if not isinstance(record, dict):
                    continue
                if command is not None and record.get("command") != command:
                    continue
                if since is not None and str(record.get("timestamp", "")) < since:
                    continue
                tail.append(record)
        return list(tail)

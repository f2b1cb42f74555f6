from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

MODE_SEMVER = "semver"
MODE_STRICT = "strict"
MODES = (MODE_SEMVER, MODE_STRICT)

VIOLATION_BREAKING_CHANGE = "breaking_change"
VIOLATION_STRICT = "strict_violation"


@dataclass(frozen=True)
class Snapshot:
    target: str
    created_at: str
    symbols: dict[str, str] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "createdAt": self.created_at,
            "symbols": dict(self.symbols),
        }


@dataclass(frozen=True)
class ApiDiff:
    added: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()
    changed: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.changed)

    @property
    def has_breaking(self) -> bool:
        return bool(self.removed or self.changed)

    def as_dict(self) -> dict[str, Any]:
        return {
            "added": list(self.added),
            "removed": list(self.removed),
            "changed": list(self.changed),
        }


@dataclass(frozen=True)
class Decision:
    target: str
    mode: str
    fail_on_additions: bool
    diff: ApiDiff
    passed: bool
    violation: str | None
    report: str

    @property
    def status(self) -> str:
        return "pass" if self.passed else "fail"

    def as_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "status": self.status,
            "mode": self.mode,
            "fail_on_additions": self.fail_on_additions,
            "violation": self.violation,
            "added_symbols": list(self.diff.added),
            "removed_symbols": list(self.diff.removed),
            "changed_signatures": list(self.diff.changed),
        }

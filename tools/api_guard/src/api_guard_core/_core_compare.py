from __future__ import annotations

from pathlib import Path

from ._core_base import *  # noqa: F401,F403
from ._core_models import (
    MODE_SEMVER,
    MODE_STRICT,
    MODES,
    VIOLATION_BREAKING_CHANGE,
    VIOLATION_STRICT,
    ApiDiff,
    Decision,
    Snapshot,
)


def diff_snapshots(old: Snapshot, new: Snapshot) -> ApiDiff:
    old_ids = old.symbols.keys()
    new_ids = new.symbols.keys()
    added = sorted(new_ids - old_ids)
    removed = sorted(old_ids - new_ids)
    changed = sorted(
        identifier
        for identifier in (old_ids & new_ids)
        if old.symbols[identifier] != new.symbols[identifier]
    )
    return ApiDiff(added=tuple(added), removed=tuple(removed), changed=tuple(changed))


def validate_mode(mode: str) -> str:
    if mode not in MODES:
        raise ConfigError(f"Unknown mode '{mode}'. Expected one of: {', '.join(MODES)}")
    return mode


def _append_identifiers(lines: list[str], label: str, identifiers: tuple[str, ...]) -> None:
    lines.append(f"  {label}: {len(identifiers)}")
    for identifier in identifiers:
        lines.append(f"    - {identifier}")


def render_decision_report(
    target: str,
    mode: str,
    fail_on_additions: bool,
    diff: ApiDiff,
    violation: str | None,
) -> str:
    lines = [f"Target: {target}"]
    lines.append(f"  Mode: {mode} (fail on additions: {'yes' if fail_on_additions else 'no'})")
    _append_identifiers(lines, "BREAKING removed" if diff.removed else "Removed", diff.removed)
    _append_identifiers(lines, "BREAKING changed" if diff.changed else "Changed", diff.changed)
    _append_identifiers(lines, "Added", diff.added)

    if violation == VIOLATION_STRICT:
        lines.append("  Result: FAIL (strict mode: any API change is disallowed)")
    elif violation == VIOLATION_BREAKING_CHANGE:
        if diff.has_breaking:
            lines.append("  Result: FAIL (semver mode: breaking API change)")
        else:
            lines.append("  Result: FAIL (semver mode: additions are disallowed by failOnAdditions)")
    elif diff.is_empty:
        lines.append("  Result: OK (no API changes)")
    else:
        lines.append("  Result: OK")
    return "\n".join(lines)


def evaluate_policy(target: str, diff: ApiDiff, mode: str, fail_on_additions: bool) -> Decision:
    validate_mode(mode)

    violation: str | None = None
    if mode == MODE_STRICT:
        if not diff.is_empty:
            violation = VIOLATION_STRICT
    elif mode == MODE_SEMVER:
        if diff.has_breaking or (fail_on_additions and diff.added):
            violation = VIOLATION_BREAKING_CHANGE

    return Decision(
        target=target,
        mode=mode,
        fail_on_additions=fail_on_additions,
        diff=diff,
        passed=violation is None,
        violation=violation,
        report=render_decision_report(target, mode, fail_on_additions, diff, violation),
    )


def write_markdown_report(path: Path, decisions: list[Decision], errors: dict[str, str]) -> None:
    failed = any(not decision.passed for decision in decisions) or bool(errors)
    lines: list[str] = []
    lines.append(f"# API Guard Report ({'fail' if failed else 'pass'})")
    lines.append("")

    for decision in decisions:
        lines.append(f"## {decision.target} ({decision.status})")
        lines.append("")
        lines.append(f"- Mode: `{decision.mode}`")
        lines.append(f"- Fail on additions: `{str(decision.fail_on_additions).lower()}`")
        lines.append(f"- Removed symbols: `{len(decision.diff.removed)}`")
        lines.append(f"- Changed signatures: `{len(decision.diff.changed)}`")
        lines.append(f"- Added symbols: `{len(decision.diff.added)}`")
        lines.append("")
        for title, identifiers in (
            ("Removed", decision.diff.removed),
            ("Changed", decision.diff.changed),
            ("Added", decision.diff.added),
        ):
            if identifiers:
                lines.append(f"### {title}")
                for identifier in identifiers:
                    lines.append(f"- `{identifier}`")
                lines.append("")

    if errors:
        lines.append("## Errors")
        for target in sorted(errors):
            lines.append(f"- {target}: {errors[target]}")
        lines.append("")

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def build_aggregate_summary(decisions: list[Decision], errors: dict[str, str]) -> dict[str, int]:
    summary = {
        "target_count": len(decisions) + len(errors),
        "pass_count": 0,
        "fail_count": 0,
        "error_count": len(errors),
        "added_count": 0,
        "removed_count": 0,
        "changed_count": 0,
    }
    for decision in decisions:
        if decision.passed:
            summary["pass_count"] += 1
        else:
            summary["fail_count"] += 1
        summary["added_count"] += len(decision.diff.added)
        summary["removed_count"] += len(decision.diff.removed)
        summary["changed_count"] += len(decision.diff.changed)
    return summary

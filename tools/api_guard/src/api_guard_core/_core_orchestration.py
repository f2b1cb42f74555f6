from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ._core_base import *  # noqa: F401,F403
from ._core_baseline import load_baseline, save_baseline
from ._core_compare import build_aggregate_summary, diff_snapshots, evaluate_policy, validate_mode
from ._core_config import ApiGuardConfig, resolve_target_names
from ._core_export import dump_symbol_graph
from ._core_models import Decision, Snapshot
from ._core_symbols import build_snapshot, load_symbol_graph
from .log import get_logger

logger = get_logger("orchestration")


@dataclass(frozen=True)
class TargetResult:
    target: str
    decision: Decision | None = None
    baseline_path: Path | None = None
    error: ApiGuardError | None = None

    @property
    def passed(self) -> bool:
        if self.error is not None:
            return False
        return self.decision is None or self.decision.passed


@dataclass
class RunResult:
    results: list[TargetResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def decisions(self) -> list[Decision]:
        return [result.decision for result in self.results if result.decision is not None]

    @property
    def errors(self) -> dict[str, str]:
        return {result.target: str(result.error) for result in self.results if result.error is not None}

    def summary(self) -> dict[str, int]:
        return build_aggregate_summary(self.decisions, self.errors)

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": "pass" if self.passed else "fail",
            "summary": self.summary(),
            "targets": {decision.target: decision.as_dict() for decision in self.decisions},
            "errors": self.errors,
        }


def produce_snapshot(
    config: ApiGuardConfig,
    target: str,
    repo_root: Path,
    symbol_graph: Path | None = None,
) -> Snapshot:
    if symbol_graph is None:
        symbol_graph = dump_symbol_graph(
            target=target,
            repo_root=repo_root,
            output_dir=config.output_path(repo_root),
            command=list(config.export.command),
            symbol_graph_dir=config.symbol_graph_path(repo_root),
            timeout=config.export.timeout_seconds,
        )
    payload = load_symbol_graph(symbol_graph)
    return build_snapshot(target, payload)


def update_baseline(
    config: ApiGuardConfig,
    target: str,
    repo_root: Path,
    symbol_graph: Path | None = None,
) -> Path:
    snapshot = produce_snapshot(config, target, repo_root, symbol_graph=symbol_graph)
    return save_baseline(snapshot, config.baseline_path(repo_root))


def check_target(
    config: ApiGuardConfig,
    target: str,
    repo_root: Path,
    mode: str | None = None,
    fail_on_additions: bool | None = None,
    symbol_graph: Path | None = None,
) -> Decision:
    effective_mode = validate_mode(mode or config.mode)
    effective_fail_on_additions = config.fail_on_additions if fail_on_additions is None else fail_on_additions

    # A missing baseline fails before the toolchain runs.
    baseline = load_baseline(config.baseline_path(repo_root), target)
    current = produce_snapshot(config, target, repo_root, symbol_graph=symbol_graph)
    diff = diff_snapshots(baseline, current)
    return evaluate_policy(target, diff, effective_mode, effective_fail_on_additions)


def run_update(
    config: ApiGuardConfig,
    repo_root: Path,
    target_name: str | None = None,
    symbol_graphs: dict[str, Path] | None = None,
) -> RunResult:
    run = RunResult()
    for target in resolve_target_names(config, target_name):
        try:
            path = update_baseline(
                config,
                target,
                repo_root,
                symbol_graph=(symbol_graphs or {}).get(target),
            )
        except ApiGuardError as exc:
            logger.debug("Update failed for target '%s': %s", target, exc)
            run.results.append(TargetResult(target=target, error=exc))
            continue
        run.results.append(TargetResult(target=target, baseline_path=path))
    return run


def run_check(
    config: ApiGuardConfig,
    repo_root: Path,
    target_name: str | None = None,
    mode: str | None = None,
    fail_on_additions: bool | None = None,
    symbol_graphs: dict[str, Path] | None = None,
) -> RunResult:
    validate_mode(mode or config.mode)
    run = RunResult()
    for target in resolve_target_names(config, target_name):
        try:
            decision = check_target(
                config,
                target,
                repo_root,
                mode=mode,
                fail_on_additions=fail_on_additions,
                symbol_graph=(symbol_graphs or {}).get(target),
            )
        except ApiGuardError as exc:
            logger.debug("Check failed for target '%s': %s", target, exc)
            run.results.append(TargetResult(target=target, error=exc))
            continue
        run.results.append(TargetResult(target=target, decision=decision))
    return run

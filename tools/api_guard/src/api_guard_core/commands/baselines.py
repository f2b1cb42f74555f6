from __future__ import annotations

import argparse

from ..core import *  # noqa: F401,F403
from .common import load_config_from_args, parse_symbol_graph_overrides, print_target_errors


def write_json_report(path: Path, run: RunResult) -> None:
    try:
        write_bytes_atomic(path, encode(run.as_dict()) + b"\n")
    except OSError as exc:
        raise ApiGuardError(f"Unable to write report '{path}': {exc}") from exc


def command_update(args: argparse.Namespace) -> int:
    repo_root, config = load_config_from_args(args)
    run = run_update(
        config,
        repo_root,
        target_name=args.target,
        symbol_graphs=parse_symbol_graph_overrides(repo_root, args.symbol_graph),
    )

    for result in run.results:
        if result.baseline_path is not None:
            print(f"Updated baseline: {result.target} ({to_repo_relative(result.baseline_path, repo_root)})")
    print_target_errors(run)

    if not run.passed:
        print(f"APIGuard: baseline update failed for {len(run.errors)} target(s).")
        return 1
    print("APIGuard: baseline updated.")
    return 0


def command_check(args: argparse.Namespace) -> int:
    repo_root, config = load_config_from_args(args)
    run = run_check(
        config,
        repo_root,
        target_name=args.target,
        mode=args.mode,
        fail_on_additions=args.fail_on_additions,
        symbol_graphs=parse_symbol_graph_overrides(repo_root, args.symbol_graph),
    )

    for decision in run.decisions:
        print(decision.report)
    print_target_errors(run)

    if args.report:
        write_json_report(Path(args.report).resolve(), run)
    if args.markdown_report:
        write_markdown_report(Path(args.markdown_report).resolve(), run.decisions, run.errors)

    summary = run.summary()
    if not run.passed:
        print(
            f"APIGuard: FAIL ({summary['fail_count']} failed, {summary['error_count']} errored "
            f"of {summary['target_count']} targets)"
        )
        return 1
    print(f"APIGuard: OK ({summary['pass_count']} of {summary['target_count']} targets)")
    return 0

from __future__ import annotations

import argparse
import sys

from ..core import *  # noqa: F401,F403
from .common import load_config_from_args


def command_list_targets(args: argparse.Namespace) -> int:
    _, config = load_config_from_args(args)
    for name in config.targets:
        print(name)
    return 0


def command_snapshot(args: argparse.Namespace) -> int:
    repo_root, config = load_config_from_args(args)
    target = resolve_target_names(config, args.target)[0]
    symbol_graph = ensure_relative_path(repo_root, args.symbol_graph).resolve() if args.symbol_graph else None

    snapshot = produce_snapshot(config, target, repo_root, symbol_graph=symbol_graph)
    data = encode_snapshot(snapshot)

    if args.output:
        output = Path(args.output).resolve()
        try:
            write_bytes_atomic(output, data)
        except OSError as exc:
            raise ApiGuardError(f"Unable to write snapshot '{output}': {exc}") from exc
    else:
        sys.stdout.write(data.decode("utf-8"))

    print(
        f"Snapshot created for target '{target}' with {len(snapshot.symbols)} public symbols.",
        file=sys.stderr,
    )
    return 0


def command_diff(args: argparse.Namespace) -> int:
    baseline = load_snapshot_file(Path(args.baseline).resolve())
    current = load_snapshot_file(Path(args.current).resolve())
    if baseline.target != current.target:
        print(
            f"api_guard warning: comparing snapshots of different targets "
            f"('{baseline.target}' vs '{current.target}')",
            file=sys.stderr,
        )

    decision = evaluate_policy(
        current.target,
        diff_snapshots(baseline, current),
        args.mode,
        bool(args.fail_on_additions),
    )
    print(decision.report)
    return 0 if decision.passed else 1

from __future__ import annotations

import argparse
import sys

from .core import MODES, TOOL_VERSION, ApiGuardError
from .commands import (
    command_check,
    command_diff,
    command_list_targets,
    command_snapshot,
    command_update,
)
from .log import configure_logging


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--repo-root",
        default=".",
        help="Repository root used to resolve relative paths (default: current directory).",
    )
    parser.add_argument(
        "--config",
        help="Path to API guard config JSON (default: .apiguard.json under --repo-root).",
    )


def _add_symbol_graph_override(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--symbol-graph",
        action="append",
        metavar="TARGET=PATH",
        help="Use an existing symbol graph file for TARGET instead of running the export tool (repeatable).",
    )


def _add_additions_arguments(parser: argparse.ArgumentParser, default: bool | None) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--fail-on-additions",
        dest="fail_on_additions",
        action="store_true",
        help="Treat added public symbols as a failure in semver mode.",
    )
    group.add_argument(
        "--allow-additions",
        dest="fail_on_additions",
        action="store_false",
        help="Allow added public symbols in semver mode.",
    )
    parser.set_defaults(fail_on_additions=default)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="api-guard",
        description="Block breaking public API changes by comparing symbol snapshots against stored baselines.",
    )
    parser.add_argument("--version", action="version", version=f"api-guard {TOOL_VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging on stderr.")

    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Compare current public API with stored baselines.")
    _add_config_arguments(check)
    check.add_argument("--target", help="Check only this target (default: all configured targets).")
    check.add_argument("--mode", choices=MODES, help="Override the configured comparison mode.")
    _add_additions_arguments(check, default=None)
    _add_symbol_graph_override(check)
    check.add_argument("--report", help="Write the run report as canonical JSON to path.")
    check.add_argument("--markdown-report", help="Write the run report as Markdown to path.")
    check.set_defaults(func=command_check)

    update = sub.add_parser("update", help="Regenerate baseline snapshots from the current public API.")
    _add_config_arguments(update)
    update.add_argument("--target", help="Update only this target (default: all configured targets).")
    _add_symbol_graph_override(update)
    update.set_defaults(func=command_update)

    snapshot = sub.add_parser("snapshot", help="Print or write the current snapshot of one target.")
    _add_config_arguments(snapshot)
    snapshot.add_argument("--target", required=True, help="Target name from config targets list.")
    snapshot.add_argument("--symbol-graph", help="Normalize this symbol graph file instead of running the export tool.")
    snapshot.add_argument("--output", help="Write snapshot JSON to path.")
    snapshot.set_defaults(func=command_snapshot)

    diff = sub.add_parser("diff", help="Compare two snapshot files.")
    diff.add_argument("--baseline", required=True, help="Path to baseline snapshot JSON.")
    diff.add_argument("--current", required=True, help="Path to current snapshot JSON.")
    diff.add_argument("--mode", choices=MODES, default="semver", help="Comparison mode (default: semver).")
    _add_additions_arguments(diff, default=False)
    diff.set_defaults(func=command_diff)

    list_targets = sub.add_parser("list-targets", help="List configured targets.")
    _add_config_arguments(list_targets)
    list_targets.set_defaults(func=command_list_targets)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)
    try:
        return int(args.func(args))
    except ApiGuardError as exc:
        print(f"api_guard error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import argparse
import sys

from ..core import *  # noqa: F401,F403


def resolve_repo_root(args: argparse.Namespace) -> Path:
    return Path(args.repo_root).resolve()


def load_config_from_args(args: argparse.Namespace) -> tuple[Path, ApiGuardConfig]:
    repo_root = resolve_repo_root(args)
    config = load_config(resolve_config_path(repo_root, args.config))
    return repo_root, config


def parse_symbol_graph_overrides(repo_root: Path, values: list[str] | None) -> dict[str, Path]:
    overrides: dict[str, Path] = {}
    for value in values or []:
        target, sep, path_value = value.partition("=")
        if not sep or not target or not path_value:
            raise ConfigError(f"--symbol-graph expects TARGET=PATH, got '{value}'")
        overrides[target] = ensure_relative_path(repo_root, path_value).resolve()
    return overrides


def print_target_errors(run: RunResult) -> None:
    for target, message in sorted(run.errors.items()):
        print(f"api_guard error [{target}]: {message}", file=sys.stderr)

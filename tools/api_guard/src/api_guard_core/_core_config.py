from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ._core_base import *  # noqa: F401,F403
from ._core_export import (
    DEFAULT_EXPORT_COMMAND,
    DEFAULT_EXPORT_TIMEOUT_SECONDS,
    DEFAULT_SYMBOL_GRAPH_DIR,
)
from ._core_models import MODE_SEMVER

DEFAULT_CONFIG_NAME = ".apiguard.json"
DEFAULT_BASELINE_DIR = "api-baseline"
DEFAULT_OUTPUT_DIR = ".build/apiguard"


@dataclass(frozen=True)
class ExportSettings:
    command: tuple[str, ...] = DEFAULT_EXPORT_COMMAND
    symbol_graph_dir: str = DEFAULT_SYMBOL_GRAPH_DIR
    timeout_seconds: float = DEFAULT_EXPORT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class ApiGuardConfig:
    targets: tuple[str, ...]
    mode: str = MODE_SEMVER
    baseline_dir: str = DEFAULT_BASELINE_DIR
    output_dir: str = DEFAULT_OUTPUT_DIR
    fail_on_additions: bool = False
    export: ExportSettings = ExportSettings()

    def baseline_path(self, repo_root: Path) -> Path:
        return ensure_relative_path(repo_root, self.baseline_dir)

    def output_path(self, repo_root: Path) -> Path:
        return ensure_relative_path(repo_root, self.output_dir)

    def symbol_graph_path(self, repo_root: Path) -> Path:
        return ensure_relative_path(repo_root, self.export.symbol_graph_dir)

    def as_dict(self) -> dict[str, Any]:
        return {
            "targets": list(self.targets),
            "mode": self.mode,
            "baselineDir": self.baseline_dir,
            "outputDir": self.output_dir,
            "failOnAdditions": self.fail_on_additions,
            "export": {
                "command": list(self.export.command),
                "symbolGraphDir": self.export.symbol_graph_dir,
                "timeoutSeconds": self.export.timeout_seconds,
            },
        }


def config_from_payload(payload: Any, label: str = "config") -> ApiGuardConfig:
    validate_with_jsonschema("config", payload, label, error_cls=ConfigError)

    export_raw = payload.get("export") or {}
    export = ExportSettings(
        command=tuple(export_raw.get("command", DEFAULT_EXPORT_COMMAND)),
        symbol_graph_dir=export_raw.get("symbolGraphDir", DEFAULT_SYMBOL_GRAPH_DIR),
        timeout_seconds=float(export_raw.get("timeoutSeconds", DEFAULT_EXPORT_TIMEOUT_SECONDS)),
    )
    return ApiGuardConfig(
        targets=tuple(payload["targets"]),
        mode=payload.get("mode", MODE_SEMVER),
        baseline_dir=payload.get("baselineDir", DEFAULT_BASELINE_DIR),
        output_dir=payload.get("outputDir", DEFAULT_OUTPUT_DIR),
        fail_on_additions=payload.get("failOnAdditions", False),
        export=export,
    )


def load_config(path: Path) -> ApiGuardConfig:
    if not path.is_file():
        raise ConfigError(f"Config not found: {path}")
    payload = load_json(path, error_cls=ConfigError)
    return config_from_payload(payload, f"config '{path}'")


def resolve_config_path(repo_root: Path, value: str | None) -> Path:
    return ensure_relative_path(repo_root, value or DEFAULT_CONFIG_NAME).resolve()


def resolve_target_names(config: ApiGuardConfig, target_name: str | None) -> list[str]:
    if target_name is None:
        return [validate_target_name(name) for name in config.targets]
    if target_name not in config.targets:
        known = ", ".join(config.targets)
        raise ConfigError(f"Unknown target '{target_name}'. Known targets: {known or '<none>'}")
    return [validate_target_name(target_name)]

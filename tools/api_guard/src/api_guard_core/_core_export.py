from __future__ import annotations

import shlex
import shutil
import subprocess
import time
from pathlib import Path

from ._core_base import *  # noqa: F401,F403
from .log import get_logger

DEFAULT_EXPORT_COMMAND = ("swift", "package", "dump-symbol-graph")
DEFAULT_SYMBOL_GRAPH_DIR = ".build/symbol-graphs"
DEFAULT_EXPORT_TIMEOUT_SECONDS = 600.0
SYMBOL_GRAPH_SUFFIX = ".symbols.json"

logger = get_logger("export")


def run_export_command(command: list[str], cwd: Path, timeout: float) -> str:
    display = " ".join(shlex.quote(item) for item in command)
    logger.debug("Running export command in %s: %s", cwd, display)
    start = time.perf_counter()
    try:
        proc = subprocess.run(
            command,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        captured = _as_text(exc.stdout) + _as_text(exc.stderr)
        raise ExportUnavailable(
            f"Export command exceeded {timeout:g}s timeout: {display}", captured
        ) from exc
    except OSError as exc:
        raise ExportUnavailable(f"Unable to run export tool '{command[0]}': {exc}") from exc
    elapsed_ms = round((time.perf_counter() - start) * 1000.0, 3)
    logger.debug("Export command finished with code %d in %sms", proc.returncode, elapsed_ms)

    if proc.returncode != 0:
        raise ExportUnavailable(
            f"Export command failed ({proc.returncode}): {display}",
            (proc.stdout or "") + (proc.stderr or ""),
        )
    return proc.stdout


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _matches_target(file_name: str, target: str) -> bool:
    if not file_name.endswith(SYMBOL_GRAPH_SUFFIX):
        return False
    # TargetName.symbols.json or TargetName@swift-x.y-platform.symbols.json
    return file_name.startswith(f"{target}.") or file_name.startswith(f"{target}@")


def find_symbol_graph(symbol_graph_dir: Path, target: str) -> Path:
    if not symbol_graph_dir.is_dir():
        raise ExportUnavailable(f"Symbol graphs directory not found at {symbol_graph_dir}")

    candidates = [
        path for path in symbol_graph_dir.iterdir() if path.is_file() and _matches_target(path.name, target)
    ]
    if not candidates:
        raise ExportUnavailable(f"No {SYMBOL_GRAPH_SUFFIX} produced for target {target} in {symbol_graph_dir}")

    newest = max(candidates, key=lambda path: (path.stat().st_mtime, path.name))
    logger.debug("Using symbol graph %s for target '%s'", newest, target)
    return newest


def dump_symbol_graph(
    target: str,
    repo_root: Path,
    output_dir: Path,
    command: list[str] | None = None,
    symbol_graph_dir: Path | None = None,
    timeout: float = DEFAULT_EXPORT_TIMEOUT_SECONDS,
) -> Path:
    per_target_dir = output_dir / validate_target_name(target)
    if per_target_dir.exists():
        shutil.rmtree(per_target_dir)
    per_target_dir.mkdir(parents=True, exist_ok=True)

    run_export_command(list(command or DEFAULT_EXPORT_COMMAND), cwd=repo_root, timeout=timeout)

    graphs_dir = symbol_graph_dir or ensure_relative_path(repo_root, DEFAULT_SYMBOL_GRAPH_DIR)
    newest = find_symbol_graph(graphs_dir, target)

    destination = per_target_dir / f"{target}{SYMBOL_GRAPH_SUFFIX}"
    try:
        shutil.copyfile(newest, destination)
    except OSError as exc:
        raise ExportUnavailable(f"Unable to copy symbol graph '{newest}' to '{destination}': {exc}") from exc
    return destination

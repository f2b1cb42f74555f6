from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

from ._core_base import *  # noqa: F401,F403
from ._core_canonical import encode
from ._core_models import Snapshot
from .log import get_logger

BASELINE_SUFFIX = ".json"

logger = get_logger("baseline")


def baseline_path_for(baseline_dir: Path, target: str) -> Path:
    return baseline_dir / f"{validate_target_name(target)}{BASELINE_SUFFIX}"


def snapshot_from_payload(payload: Any, label: str) -> Snapshot:
    validate_with_jsonschema("baseline", payload, label, error_cls=MalformedBaseline)
    return Snapshot(
        target=payload["target"],
        created_at=payload["createdAt"],
        symbols=dict(payload["symbols"]),
    )


def load_snapshot_file(path: Path) -> Snapshot:
    payload = load_json(path, error_cls=MalformedBaseline)
    return snapshot_from_payload(payload, f"snapshot '{path}'")


def load_baseline(baseline_dir: Path, target: str) -> Snapshot:
    path = baseline_path_for(baseline_dir, target)
    if not path.is_file():
        raise BaselineMissing(target)
    return load_snapshot_file(path)


def encode_snapshot(snapshot: Snapshot) -> bytes:
    return encode(snapshot.as_dict()) + b"\n"


def write_bytes_atomic(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def save_baseline(snapshot: Snapshot, baseline_dir: Path) -> Path:
    data = encode_snapshot(snapshot)
    path = baseline_path_for(baseline_dir, snapshot.target)
    try:
        write_bytes_atomic(path, data)
    except OSError as exc:
        raise ApiGuardError(f"Unable to write baseline '{path}': {exc}") from exc
    logger.info("Wrote baseline for target '%s' (%d symbols) to %s", snapshot.target, len(snapshot.symbols), path)
    return path

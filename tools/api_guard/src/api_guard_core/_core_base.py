from __future__ import annotations

import datetime as dt
import json
import re
from pathlib import Path
from typing import Any

import jsonschema

TOOL_VERSION = "1.1.0"
PUBLIC_ACCESS_LEVELS = frozenset({"public", "open"})


class ApiGuardError(Exception):
    pass


class ConfigError(ApiGuardError):
    pass


class ExportUnavailable(ApiGuardError):
    def __init__(self, message: str, output: str = "") -> None:
        detail = f"{message}\n{output.rstrip()}" if output.strip() else message
        super().__init__(detail)
        self.output = output


class MalformedExport(ApiGuardError):
    pass


class MalformedBaseline(ApiGuardError):
    pass


class BaselineMissing(ApiGuardError):
    def __init__(self, target: str) -> None:
        super().__init__(
            f"API baseline missing for target: {target}. Run 'api-guard update' to create it."
        )
        self.target = target


class SerializationError(ApiGuardError):
    pass


def normalize_ws(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


def validate_target_name(target: str) -> str:
    # Target names become single path components under baselineDir and outputDir.
    if not target or target in {".", ".."} or "/" in target or "\\" in target:
        raise ConfigError(f"Invalid target name '{target}': must be a single path component")
    return target


def load_json(path: Path, error_cls: type[ApiGuardError] = ApiGuardError) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise error_cls(f"Unable to read JSON file '{path}': {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise error_cls(f"Invalid JSON in '{path}': {exc}") from exc


def get_schema_path(kind: str) -> Path:
    base = Path(__file__).resolve().parent / "schemas"
    mapping = {
        "config": base / "config.schema.json",
        "symbol_graph": base / "symbol_graph.schema.json",
        "baseline": base / "baseline.schema.json",
    }
    if kind not in mapping:
        raise ApiGuardError(f"Unknown schema kind: {kind}")
    return mapping[kind]


def validate_with_jsonschema(
    kind: str,
    payload: Any,
    label: str,
    error_cls: type[ApiGuardError] = ApiGuardError,
) -> None:
    schema_payload = load_json(get_schema_path(kind))
    try:
        jsonschema.validate(payload, schema_payload)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        raise error_cls(f"{label} failed JSON schema validation at {location}: {exc.message}") from exc


def now_utc() -> dt.datetime:
    return dt.datetime.now(tz=dt.timezone.utc)


def utc_timestamp_now() -> str:
    return now_utc().replace(microsecond=0).isoformat().replace("+00:00", "Z")


def ensure_relative_path(root: Path, value: str) -> Path:
    path = Path(value)
    if path.is_absolute():
        return path
    return root / path


def to_repo_relative(path: Path, repo_root: Path) -> str:
    try:
        return str(path.resolve().relative_to(repo_root.resolve()))
    except ValueError:
        return str(path.resolve())

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ._core_base import *  # noqa: F401,F403
from ._core_models import Snapshot
from .log import get_logger

logger = get_logger("symbols")


@dataclass(frozen=True)
class DeclarationFragment:
    kind: str
    spelling: str


@dataclass(frozen=True)
class Symbol:
    identifier: str
    name: str
    kind: str
    kind_display: str | None
    access_level: str | None
    fragments: tuple[DeclarationFragment, ...] | None

    @property
    def is_public(self) -> bool:
        return self.access_level in PUBLIC_ACCESS_LEVELS


def _symbol_from_payload(raw: dict[str, Any]) -> Symbol:
    fragments_raw = raw.get("declarationFragments")
    fragments: tuple[DeclarationFragment, ...] | None = None
    if fragments_raw is not None:
        fragments = tuple(
            DeclarationFragment(kind=item["kind"], spelling=item["spelling"]) for item in fragments_raw
        )
    kind = raw["kind"]
    return Symbol(
        identifier=raw["identifier"]["precise"],
        name=raw["names"]["title"],
        kind=kind["identifier"],
        kind_display=kind.get("displayName"),
        access_level=raw.get("accessLevel"),
        fragments=fragments,
    )


def parse_symbol_graph(payload: Any, label: str = "symbol graph") -> list[Symbol]:
    validate_with_jsonschema("symbol_graph", payload, label, error_cls=MalformedExport)
    return [_symbol_from_payload(raw) for raw in payload["symbols"]]


def load_symbol_graph(path: Path) -> Any:
    if not path.is_file():
        raise ExportUnavailable(f"Symbol graph file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ExportUnavailable(f"Unable to read symbol graph '{path}': {exc}") from exc
    except UnicodeDecodeError as exc:
        raise MalformedExport(f"Symbol graph '{path}' is not valid UTF-8: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedExport(f"Invalid JSON in symbol graph '{path}': {exc}") from exc


def normalize_declaration(symbol: Symbol) -> str:
    if symbol.fragments:
        return normalize_ws("".join(fragment.spelling for fragment in symbol.fragments))
    # No fragments: coarser, still deterministic.
    return f"{symbol.kind} {symbol.name}"


def build_snapshot(target: str, payload: Any, created_at: str | None = None) -> Snapshot:
    symbols = parse_symbol_graph(payload, label=f"symbol graph for target '{target}'")

    signatures: dict[str, str] = {}
    duplicates: list[str] = []
    for symbol in symbols:
        if not symbol.is_public:
            continue
        if symbol.identifier in signatures:
            duplicates.append(symbol.identifier)
        signatures[symbol.identifier] = normalize_declaration(symbol)

    if duplicates:
        logger.warning(
            "Target '%s': %d duplicate symbol identifier(s) in export, keeping the last occurrence: %s",
            target,
            len(duplicates),
            ", ".join(sorted(set(duplicates))),
        )
    logger.debug(
        "Target '%s': kept %d public/open symbols out of %d",
        target,
        len(signatures),
        len(symbols),
    )

    return Snapshot(
        target=target,
        created_at=created_at or utc_timestamp_now(),
        symbols=signatures,
    )

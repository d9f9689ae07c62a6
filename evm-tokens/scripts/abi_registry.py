"""ABI lookup tables, one JSON file per contract schema."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from schema_resolver import ALL_SCHEMAS

DEFAULT_ABI_DIR = (Path(__file__).resolve().parent.parent / "references" / "abi").resolve()


class AbiLookupError(ValueError):
    """A schema or method is not present in the ABI tables."""


def load_json(path: Path) -> dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


@lru_cache(maxsize=None)
def _load_abi_cached(abi_dir: str, schema: str) -> tuple[dict[str, Any], ...]:
    if schema not in ALL_SCHEMAS:
        raise AbiLookupError(f"unknown schema {schema}")
    path = Path(abi_dir) / f"{schema}.json"
    if not path.exists():
        raise AbiLookupError(f"no ABI found for schema {schema}")
    raw = load_json(path)
    entries = raw.get("abi", [])
    if not isinstance(entries, list):
        raise AbiLookupError(f"ABI file for {schema} must contain an 'abi' array")
    return tuple(entries)


def load_abi(schema: str, abi_dir: Path | None = None) -> list[dict[str, Any]]:
    directory = str((abi_dir or DEFAULT_ABI_DIR).resolve())
    return [dict(entry) for entry in _load_abi_cached(directory, schema)]


def find_method(schema: str, name: str, abi_dir: Path | None = None) -> dict[str, Any]:
    for entry in load_abi(schema, abi_dir):
        if entry.get("type") == "function" and entry.get("name") == name:
            return entry
    raise AbiLookupError(f"method {name} not found in {schema} ABI")


def find_event(schema: str, name: str, abi_dir: Path | None = None) -> dict[str, Any]:
    for entry in load_abi(schema, abi_dir):
        if entry.get("type") == "event" and entry.get("name") == name:
            return entry
    raise AbiLookupError(f"event {name} not found in {schema} ABI")


def method_names(schema: str, abi_dir: Path | None = None) -> list[str]:
    return sorted(
        str(e.get("name")) for e in load_abi(schema, abi_dir) if e.get("type") == "function"
    )


def event_names(schema: str, abi_dir: Path | None = None) -> list[str]:
    return [str(e.get("name")) for e in load_abi(schema, abi_dir) if e.get("type") == "event"]

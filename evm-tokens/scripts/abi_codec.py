"""ABI type parsing and argument checks for resolved contract calls."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

HEX_RE = re.compile(r"^0x[0-9a-fA-F]*$")


class AbiArgumentError(ValueError):
    """Positional arguments do not fit an ABI method's inputs."""


@dataclass(frozen=True)
class AbiType:
    kind: str
    bits: int | None = None
    size: int | None = None


def _parse_int_like(value: Any, *, signed: bool) -> int:
    if isinstance(value, bool):
        raise ValueError("numeric value cannot be boolean")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError("numeric value must be int or string")
    raw = value.strip()
    if not raw:
        raise ValueError("numeric value cannot be empty")

    if raw.startswith("-"):
        if not signed:
            raise ValueError("unsigned integer cannot be negative")
        digits = raw[1:]
        if not digits:
            raise ValueError("invalid negative integer")
        return -int(digits, 16 if digits.startswith("0x") else 10)

    if raw.startswith("0x"):
        if len(raw) == 2:
            raise ValueError("hex integer cannot be empty")
        return int(raw, 16)
    return int(raw, 10)


def parse_type(raw_type: str) -> AbiType:
    t = str(raw_type).strip()
    if not t:
        raise ValueError("type cannot be empty")
    if "[" in t or "]" in t:
        raise ValueError(f"unsupported ABI type (arrays/tuples not supported): {raw_type}")

    if t == "address":
        return AbiType(kind="address")
    if t == "bool":
        return AbiType(kind="bool")
    if t == "string":
        return AbiType(kind="string")
    if t == "bytes":
        return AbiType(kind="bytes_dyn")

    m_bytes = re.fullmatch(r"bytes([0-9]{1,2})", t)
    if m_bytes:
        n = int(m_bytes.group(1), 10)
        if n < 1 or n > 32:
            raise ValueError(f"invalid fixed bytes size: {t}")
        return AbiType(kind="bytes_fixed", size=n)

    m_uint = re.fullmatch(r"uint([0-9]{0,3})", t)
    if m_uint:
        bits = int(m_uint.group(1) or "256", 10)
        if bits < 8 or bits > 256 or (bits % 8) != 0:
            raise ValueError(f"invalid uint bit size: {t}")
        return AbiType(kind="uint", bits=bits)

    m_int = re.fullmatch(r"int([0-9]{0,3})", t)
    if m_int:
        bits = int(m_int.group(1) or "256", 10)
        if bits < 8 or bits > 256 or (bits % 8) != 0:
            raise ValueError(f"invalid int bit size: {t}")
        return AbiType(kind="int", bits=bits)

    raise ValueError(f"unsupported ABI type: {raw_type}")


def format_type(t: AbiType) -> str:
    if t.kind in {"address", "bool", "string"}:
        return t.kind
    if t.kind == "bytes_dyn":
        return "bytes"
    if t.kind == "bytes_fixed":
        return f"bytes{t.size}"
    if t.kind == "uint":
        return f"uint{t.bits}"
    if t.kind == "int":
        return f"int{t.bits}"
    raise ValueError(f"unsupported abi type: {t.kind}")


def _hex_payload(value: Any, *, field: str) -> bytes:
    if not isinstance(value, str) or not HEX_RE.fullmatch(value):
        raise ValueError(f"{field} must be 0x-prefixed hex string")
    data = value[2:]
    if len(data) % 2 != 0:
        raise ValueError(f"{field} hex length must be even")
    return bytes.fromhex(data)


def check_value(t: AbiType, value: Any) -> None:
    """Raise ValueError when `value` cannot be sent as an argument of type `t`."""
    if t.kind == "address":
        # Addresses and identity names are resolved by the RPC gateway.
        if not isinstance(value, str) or not value.strip():
            raise ValueError("address value must be a non-empty string")
        return

    if t.kind == "bool":
        if isinstance(value, bool):
            return
        if isinstance(value, str) and value.strip().lower() in {"true", "false", "1", "0"}:
            return
        raise ValueError("bool value must be true/false/1/0")

    if t.kind == "uint":
        as_int = _parse_int_like(value, signed=False)
        if as_int < 0:
            raise ValueError("uint cannot be negative")
        if as_int >= (1 << int(t.bits or 256)):
            raise ValueError("uint value exceeds declared bit width")
        return

    if t.kind == "int":
        bits = int(t.bits or 256)
        as_int = _parse_int_like(value, signed=True)
        if as_int < -(1 << (bits - 1)) or as_int > (1 << (bits - 1)) - 1:
            raise ValueError("int value exceeds declared bit width")
        return

    if t.kind == "bytes_fixed":
        raw = _hex_payload(value, field="bytesN value")
        if len(raw) != int(t.size or 0):
            raise ValueError(f"bytes{t.size} must be exactly {t.size} bytes")
        return

    if t.kind == "bytes_dyn":
        _hex_payload(value, field="bytes value")
        return

    if t.kind == "string":
        if not isinstance(value, str):
            raise ValueError("string value must be a string")
        return

    raise ValueError(f"unsupported type for encoding: {t.kind}")


def method_signature(method: dict[str, Any]) -> str:
    types = [format_type(parse_type(item.get("type", ""))) for item in method.get("inputs", [])]
    return f"{method.get('name', '')}({','.join(types)})"


def check_arguments(method: dict[str, Any], args: list[Any]) -> None:
    """Check positional arguments against an ABI method fragment's inputs."""
    inputs = method.get("inputs", [])
    signature = method_signature(method)
    if len(inputs) != len(args):
        raise AbiArgumentError(f"{signature} expects {len(inputs)} arguments, got {len(args)}")
    for idx, (item, value) in enumerate(zip(inputs, args)):
        label = item.get("name") or f"arg{idx}"
        try:
            check_value(parse_type(item.get("type", "")), value)
        except ValueError as err:
            raise AbiArgumentError(f"{signature} argument '{label}': {err}") from err

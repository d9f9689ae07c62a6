"""Request parsing and boundary validation for token operations."""

from __future__ import annotations

import json
from argparse import Namespace
from typing import Any

from schema_resolver import TokenOperation, TokenType

POOL_FIELDS = ("type", "signer", "name", "symbol", "data", "config", "requestId")
POOL_CONFIG_FIELDS = ("address", "withData", "decimals")
ACTIVATE_FIELDS = ("poolLocator", "config", "requestId")
TRANSFER_FIELDS = ("poolLocator", "signer", "from", "to", "amount", "tokenIndex", "data", "requestId")
APPROVAL_FIELDS = ("poolLocator", "signer", "operator", "approved", "config", "data", "requestId")
APPROVAL_CONFIG_FIELDS = ("allowance", "tokenIndex")
BALANCE_FIELDS = ("poolLocator", "account", "requestId")

# Which parties each transfer-like operation names.
PARTY_FIELDS: dict[str, tuple[str, ...]] = {
    TokenOperation.MINT.value: ("to",),
    TokenOperation.TRANSFER.value: ("from", "to"),
    TokenOperation.BURN.value: ("from",),
}


class RequestValidationError(ValueError):
    """A request failed boundary validation."""


def require_valid(result: tuple[bool, str]) -> None:
    ok, err = result
    if not ok:
        raise RequestValidationError(err)


def parse_request_from_args(args: Namespace) -> dict[str, Any]:
    if getattr(args, "request_file", None):
        with open(args.request_file, encoding="utf-8") as f:
            return json.load(f)
    if getattr(args, "request_json", None):
        return json.loads(args.request_json)
    raise ValueError("either --request-json or --request-file is required")


def strip_unknown(req: dict[str, Any], allowed: tuple[str, ...]) -> dict[str, Any]:
    """Drop fields the operation does not know about."""
    return {k: v for k, v in req.items() if k in allowed}


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _optional_str(req: dict[str, Any], field: str) -> tuple[bool, str]:
    value = req.get(field)
    if value is not None and not isinstance(value, str):
        return False, f"{field} must be a string"
    return True, ""


def validate_pool_request(req: Any) -> tuple[bool, str]:
    if not isinstance(req, dict):
        return False, "request must be an object"

    if req.get("type") not in {t.value for t in TokenType}:
        return False, "type must be a valid enum value"

    for field in ("signer", "name", "symbol", "requestId"):
        ok, err = _optional_str(req, field)
        if not ok:
            return ok, err

    config = req.get("config")
    if config is None:
        return True, ""
    if not isinstance(config, dict):
        return False, "config must be an object"
    address = config.get("address")
    if address is not None and not _is_non_empty_str(address):
        return False, "config.address must be a non-empty string"
    with_data = config.get("withData")
    if with_data is not None and not isinstance(with_data, bool):
        return False, "config.withData must be a boolean"
    decimals = config.get("decimals")
    if decimals is not None:
        if isinstance(decimals, bool) or not isinstance(decimals, int) or not 0 <= decimals <= 255:
            return False, "config.decimals must be an integer between 0 and 255"
    return True, ""


def validate_activate_request(req: Any) -> tuple[bool, str]:
    if not isinstance(req, dict):
        return False, "request must be an object"
    if not _is_non_empty_str(req.get("poolLocator")):
        return False, "poolLocator should not be empty"
    config = req.get("config")
    if config is not None and not isinstance(config, dict):
        return False, "config must be an object"
    return True, ""


def validate_transfer_request(req: Any, operation: TokenOperation | str) -> tuple[bool, str]:
    if not isinstance(req, dict):
        return False, "request must be an object"
    op = operation.value if isinstance(operation, TokenOperation) else str(operation)
    parties = PARTY_FIELDS.get(op)
    if parties is None:
        return False, f"unsupported transfer operation: {op}"

    for field in ("poolLocator", "signer", *parties):
        if not _is_non_empty_str(req.get(field)):
            return False, f"{field} should not be empty"

    if req.get("amount") is None and req.get("tokenIndex") is None:
        return False, "amount or tokenIndex is required"
    for field in ("amount", "tokenIndex", "data", "requestId"):
        ok, err = _optional_str(req, field)
        if not ok:
            return ok, err
    return True, ""


def validate_approval_request(req: Any) -> tuple[bool, str]:
    if not isinstance(req, dict):
        return False, "request must be an object"
    for field in ("poolLocator", "signer", "operator"):
        if not _is_non_empty_str(req.get(field)):
            return False, f"{field} should not be empty"
    if not isinstance(req.get("approved"), bool):
        return False, "approved must be a boolean"
    for field in ("data", "requestId"):
        ok, err = _optional_str(req, field)
        if not ok:
            return ok, err

    config = req.get("config")
    if config is None:
        return True, ""
    if not isinstance(config, dict):
        return False, "config must be an object"
    for field in APPROVAL_CONFIG_FIELDS:
        ok, err = _optional_str(config, field)
        if not ok:
            return False, f"config.{err}"
    return True, ""


def validate_balance_request(req: Any) -> tuple[bool, str]:
    if not isinstance(req, dict):
        return False, "request must be an object"
    for field in ("poolLocator", "account"):
        if not _is_non_empty_str(req.get(field)):
            return False, f"{field} should not be empty"
    return _optional_str(req, "requestId")

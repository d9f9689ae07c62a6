#!/usr/bin/env python3
"""Agent-facing JSON wrapper translating generic token requests into ERC20/ERC721 calls."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Callable

# Local imports for script execution (python3 scripts/tokens_cli.py ...)
SCRIPT_DIR = Path(__file__).resolve().parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from abi_codec import AbiArgumentError  # noqa: E402
from abi_registry import AbiLookupError  # noqa: E402
from connector_config import ConfigError, ConnectorConfig, load_config  # noqa: E402
from error_map import (  # noqa: E402
    ERR_ABI_ARGUMENT_MISMATCH,
    ERR_ABI_LOOKUP_FAILED,
    ERR_CONFIG_INVALID,
    ERR_EVENT_NOT_MAPPED,
    ERR_INTERNAL,
    ERR_INVALID_POOL_LOCATOR,
    ERR_INVALID_REQUEST,
    ERR_POOL_CREATION_FAILED,
    ERR_UNSUPPORTED_OPERATION,
)
from event_mapping import map_event  # noqa: E402
from hex_codec import decode_hex, encode_hex  # noqa: E402
from logging_utils import setup_logging  # noqa: E402
from pool_locator import Invalid, InvalidPoolLocatorError, check_pool_locator, unpack_pool_locator  # noqa: E402
from schema_resolver import (  # noqa: E402
    MissingArgumentError,
    TokenType,
    UnsupportedOperationError,
    get_token_schema,
    resolve_method,
    token_standard,
)
from subscription_names import unpack_subscription_name  # noqa: E402
from token_operations import (  # noqa: E402
    PoolCreationError,
    activate_pool,
    build_approval,
    build_balance_query,
    build_burn,
    build_mint,
    build_transfer,
    create_pool,
)
from token_requests import RequestValidationError, parse_request_from_args  # noqa: E402

logger = logging.getLogger("evm_tokens.cli")


class EventNotMappedError(LookupError):
    """The event does not translate into a token event."""


# Any other ValueError is reported as an invalid request.
ERROR_CODES: tuple[tuple[type[Exception], str], ...] = (
    (EventNotMappedError, ERR_EVENT_NOT_MAPPED),
    (RequestValidationError, ERR_INVALID_REQUEST),
    (MissingArgumentError, ERR_INVALID_REQUEST),
    (InvalidPoolLocatorError, ERR_INVALID_POOL_LOCATOR),
    (UnsupportedOperationError, ERR_UNSUPPORTED_OPERATION),
    (AbiLookupError, ERR_ABI_LOOKUP_FAILED),
    (AbiArgumentError, ERR_ABI_ARGUMENT_MISMATCH),
    (PoolCreationError, ERR_POOL_CREATION_FAILED),
    (ConfigError, ERR_CONFIG_INVALID),
)

Handler = Callable[[dict[str, Any], ConnectorConfig], dict[str, Any]]


def _json_dump(payload: Any, pretty: bool = True) -> str:
    return json.dumps(payload, indent=2 if pretty else None, sort_keys=False)


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


def _error_code(err: Exception) -> str:
    for exc_type, code in ERROR_CODES:
        if isinstance(err, exc_type):
            return code
    if isinstance(err, ValueError):
        return ERR_INVALID_REQUEST
    return ERR_INTERNAL


def _build_payload(
    *,
    method: str,
    request: Any = None,
    result: Any = None,
    code: str | None = None,
    message: str | None = None,
) -> dict[str, Any]:
    ok = code is None
    payload: dict[str, Any] = {
        "timestamp_utc": _timestamp(),
        "method": method,
        "status": "ok" if ok else "error",
        "ok": ok,
        "error_code": code,
        "error_message": message,
    }
    if request is not None:
        payload["request"] = request
    if ok:
        payload["result"] = result
    return payload


def _load_config_from_args(args: argparse.Namespace) -> ConnectorConfig:
    path = Path(args.config).resolve() if getattr(args, "config", None) else None
    return load_config(path)


def _run_command(args: argparse.Namespace, method: str, handler: Handler) -> int:
    pretty = not args.compact
    try:
        req = parse_request_from_args(args)
    except (OSError, ValueError) as err:
        print(_json_dump(_build_payload(method=method, code=ERR_INVALID_REQUEST, message=str(err)), pretty))
        return 2

    try:
        config = _load_config_from_args(args)
        result = handler(req, config)
    except Exception as err:  # noqa: BLE001
        code = _error_code(err)
        if code == ERR_INTERNAL:
            logger.exception("%s failed", method)
        else:
            logger.info("%s rejected: %s", method, err)
        payload = _build_payload(method=method, request=req, code=code, message=str(err))
        print(_json_dump(payload, pretty))
        return 2

    print(_json_dump(_build_payload(method=method, request=req, result=result), pretty))
    return 0


def run_decode_event(req: dict[str, Any], config: ConnectorConfig) -> dict[str, Any]:
    if not isinstance(req, dict):
        raise RequestValidationError("request must be an object")
    event = req.get("event")
    subscription = req.get("subscription")
    if not isinstance(event, dict):
        raise RequestValidationError("event must be an object")
    if not isinstance(subscription, str) or not subscription:
        raise RequestValidationError("subscription should not be empty")
    mapped = map_event(event, subscription, config)
    if mapped is None:
        raise EventNotMappedError(f"event is not a token event for subscription {subscription}")
    return mapped


def run_codec_operation(req: dict[str, Any], config: ConnectorConfig) -> dict[str, Any]:
    if not isinstance(req, dict):
        raise RequestValidationError("request must be an object")
    operation = str(req.get("operation", "")).strip().lower()
    value = req.get("value")
    if not isinstance(value, str):
        raise RequestValidationError(f"{operation or 'codec'} requires a string value")

    if operation == "unpack_locator":
        locator = unpack_pool_locator(value)
        checked = check_pool_locator(locator)
        return {
            "address": locator.address,
            "schema": locator.schema,
            "type": locator.type,
            "valid": not isinstance(checked, Invalid),
            "missing": list(checked.missing) if isinstance(checked, Invalid) else [],
        }
    if operation == "unpack_subscription":
        prefix = req.get("prefix") or config.prefix
        sub = unpack_subscription_name(str(prefix), value)
        return {"prefix": sub.prefix, "poolLocator": sub.pool_locator, "event": sub.event}
    if operation == "encode_hex":
        return {"hex": encode_hex(value)}
    if operation == "decode_hex":
        return {"text": decode_hex(value)}
    raise RequestValidationError(
        "codec operation must be one of unpack_locator|unpack_subscription|encode_hex|decode_hex"
    )


def run_schema_lookup(req: dict[str, Any], config: ConnectorConfig) -> dict[str, Any]:
    if not isinstance(req, dict):
        raise RequestValidationError("request must be an object")
    if req.get("type") not in {t.value for t in TokenType}:
        raise RequestValidationError("type must be a valid enum value")
    with_data = req.get("withData")
    if with_data is not None and not isinstance(with_data, bool):
        raise RequestValidationError("withData must be a boolean")
    if with_data is None:
        with_data = config.default_with_data

    schema = get_token_schema(req["type"], with_data)
    result: dict[str, Any] = {"schema": schema, "standard": token_standard(schema)}
    operation = req.get("operation")
    if operation is not None:
        result["operation"] = operation
        result["method"] = resolve_method(schema, str(operation))
    return result


def cmd_create_pool(args: argparse.Namespace) -> int:
    return _run_command(args, "create_pool", create_pool)


def cmd_activate_pool(args: argparse.Namespace) -> int:
    return _run_command(args, "activate_pool", activate_pool)


def cmd_mint(args: argparse.Namespace) -> int:
    return _run_command(args, "mint", build_mint)


def cmd_transfer(args: argparse.Namespace) -> int:
    return _run_command(args, "transfer", build_transfer)


def cmd_burn(args: argparse.Namespace) -> int:
    return _run_command(args, "burn", build_burn)


def cmd_approve(args: argparse.Namespace) -> int:
    return _run_command(args, "approval", build_approval)


def cmd_balance(args: argparse.Namespace) -> int:
    return _run_command(args, "balance", build_balance_query)


def cmd_decode_event(args: argparse.Namespace) -> int:
    return _run_command(args, "decode_event", run_decode_event)


def cmd_codec(args: argparse.Namespace) -> int:
    return _run_command(args, "codec", run_codec_operation)


def cmd_schema(args: argparse.Namespace) -> int:
    return _run_command(args, "schema", run_schema_lookup)


def _add_request_output_args(parser: argparse.ArgumentParser, *, label: str) -> None:
    parser.add_argument("--request-file", help=f"{label} request JSON file")
    parser.add_argument("--request-json", help=f"{label} request JSON string")
    parser.add_argument("--config", help="connector YAML config path")
    parser.add_argument("--compact", action="store_true", help="compact JSON output")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--log-level", default="WARNING", help="stderr log level")
    sub = parser.add_subparsers(dest="command", required=True)

    commands: list[tuple[str, str, Callable[[argparse.Namespace], int]]] = [
        ("create-pool", "Resolve a token pool and issue its pool locator", cmd_create_pool),
        ("activate-pool", "List event subscriptions for a pool", cmd_activate_pool),
        ("mint", "Build a mint transaction", cmd_mint),
        ("transfer", "Build a transfer transaction", cmd_transfer),
        ("burn", "Build a burn transaction", cmd_burn),
        ("approve", "Build an approval transaction", cmd_approve),
        ("balance", "Build a balanceOf query for an account", cmd_balance),
        ("decode-event", "Map a blockchain event to a token event", cmd_decode_event),
        ("codec", "Inspect locators, subscription names and hex payloads", cmd_codec),
        ("schema", "Resolve the ABI schema and method for a token type", cmd_schema),
    ]
    for name, help_text, func in commands:
        cmd_parser = sub.add_parser(name, help=help_text)
        _add_request_output_args(cmd_parser, label=name)
        cmd_parser.set_defaults(func=func)
    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    setup_logging(args.log_level)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())

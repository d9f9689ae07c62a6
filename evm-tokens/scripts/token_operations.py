"""Generic token operations expressed as contract calls.

Pool creation resolves the schema and packs the pool locator. Every later
operation receives that locator as an opaque string, unpacks it and lets the
schema decide the contract method and argument list. The resulting
SendTransaction message is handed to the RPC gateway by the caller.
"""

from __future__ import annotations

import logging
from typing import Any

from abi_codec import check_arguments
from abi_registry import event_names, find_method
from connector_config import ConnectorConfig
from pool_locator import ValidPoolLocator, pack_pool_locator, unpack_pool_locator
from schema_resolver import (
    FUNGIBLE_SCHEMAS,
    TokenOperation,
    TokenType,
    build_arguments,
    get_token_schema,
    resolve_method,
    schema_has_data,
    token_standard,
)
from subscription_names import pack_subscription_name
from token_requests import (
    ACTIVATE_FIELDS,
    APPROVAL_FIELDS,
    BALANCE_FIELDS,
    POOL_CONFIG_FIELDS,
    POOL_FIELDS,
    TRANSFER_FIELDS,
    require_valid,
    strip_unknown,
    validate_activate_request,
    validate_approval_request,
    validate_balance_request,
    validate_pool_request,
    validate_transfer_request,
)

logger = logging.getLogger(__name__)

SEND_TRANSACTION = "SendTransaction"
QUERY = "Query"
BALANCE_METHOD = "balanceOf"
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
MAX_UINT256 = str((1 << 256) - 1)


class PoolCreationError(ValueError):
    """A pool cannot be created from the given request."""


def _resolve_locator(pool_locator: str) -> ValidPoolLocator:
    """Unpack a locator and check its schema is one this connector serves."""
    locator = unpack_pool_locator(pool_locator).require_valid()
    token_standard(locator.schema)

    try:
        expected = get_token_schema(locator.type, schema_has_data(locator.schema))
    except ValueError:
        expected = None
    if expected != locator.schema:
        logger.warning("pool %s: schema %s does not match type %s", pool_locator, locator.schema, locator.type)
    return locator


def create_pool(request: dict[str, Any], config: ConnectorConfig) -> dict[str, Any]:
    """Resolve a new pool and issue its locator.

    This is the only place a locator is packed.
    """
    require_valid(validate_pool_request(request))
    req = strip_unknown(request, POOL_FIELDS)
    pool_config = strip_unknown(req.get("config") or {}, POOL_CONFIG_FIELDS)

    address = pool_config.get("address")
    if not address:
        raise PoolCreationError("config.address is required: contract deployment is not supported")

    with_data = pool_config.get("withData")
    if with_data is None:
        with_data = config.default_with_data
    token_type = TokenType(req["type"])
    schema = get_token_schema(token_type, with_data)
    locator = pack_pool_locator(ValidPoolLocator(address=address, schema=schema, type=token_type.value))
    logger.debug("created pool %s with schema %s", locator, schema)

    info: dict[str, Any] = {"address": address, "schema": schema}
    if req.get("name"):
        info["name"] = req["name"]
    event: dict[str, Any] = {
        "poolLocator": locator,
        "standard": token_standard(schema),
        "type": token_type.value,
        "info": info,
    }
    if req.get("symbol"):
        event["symbol"] = req["symbol"]
    if pool_config.get("decimals") is not None:
        event["decimals"] = pool_config["decimals"]
    if req.get("data") is not None:
        event["data"] = req["data"]
    return event


def activate_pool(request: dict[str, Any], config: ConnectorConfig) -> dict[str, Any]:
    """List the event subscriptions that track a pool."""
    require_valid(validate_activate_request(request))
    req = strip_unknown(request, ACTIVATE_FIELDS)
    pool_locator = req["poolLocator"]
    locator = _resolve_locator(pool_locator)
    events = event_names(locator.schema, config.abi_dir)
    return {
        "poolLocator": pool_locator,
        "topic": config.topic,
        "subscriptions": [pack_subscription_name(config.prefix, pool_locator, e) for e in events],
    }


def _send_transaction(
    *,
    signer: str,
    locator: ValidPoolLocator,
    operation: TokenOperation,
    fields: dict[str, Any],
    config: ConnectorConfig,
    request_id: str | None = None,
) -> dict[str, Any]:
    method_name = resolve_method(locator.schema, operation)
    params = build_arguments(locator.schema, operation, fields)
    method = find_method(locator.schema, method_name, config.abi_dir)
    check_arguments(method, params)
    logger.debug("%s on %s resolved to %s", operation.value, locator.schema, method_name)

    headers: dict[str, Any] = {"type": SEND_TRANSACTION}
    if request_id:
        headers["id"] = request_id
    return {
        "headers": headers,
        "from": signer,
        "to": locator.address,
        "method": method,
        "params": params,
    }


def _build_transfer_like(
    request: dict[str, Any],
    config: ConnectorConfig,
    operation: TokenOperation,
) -> dict[str, Any]:
    require_valid(validate_transfer_request(request, operation))
    req = strip_unknown(request, TRANSFER_FIELDS)
    return _send_transaction(
        signer=req["signer"],
        locator=_resolve_locator(req["poolLocator"]),
        operation=operation,
        fields=req,
        config=config,
        request_id=req.get("requestId"),
    )


def build_mint(request: dict[str, Any], config: ConnectorConfig) -> dict[str, Any]:
    return _build_transfer_like(request, config, TokenOperation.MINT)


def build_transfer(request: dict[str, Any], config: ConnectorConfig) -> dict[str, Any]:
    return _build_transfer_like(request, config, TokenOperation.TRANSFER)


def build_burn(request: dict[str, Any], config: ConnectorConfig) -> dict[str, Any]:
    return _build_transfer_like(request, config, TokenOperation.BURN)


def build_approval(request: dict[str, Any], config: ConnectorConfig) -> dict[str, Any]:
    """Build an approval call.

    Fungible pools set an allowance (unlimited unless configured, zero when
    revoking). Non-fungible pools approve a single token when
    `config.tokenIndex` is given, otherwise the operator for all tokens.
    """
    require_valid(validate_approval_request(request))
    req = strip_unknown(request, APPROVAL_FIELDS)
    locator = _resolve_locator(req["poolLocator"])
    approval_config = req.get("config") or {}
    approved = req["approved"]
    fields: dict[str, Any] = {"operator": req["operator"], "data": req.get("data")}

    if locator.schema in FUNGIBLE_SCHEMAS:
        operation = TokenOperation.APPROVE
        fields["allowance"] = (approval_config.get("allowance") or MAX_UINT256) if approved else "0"
    elif approval_config.get("tokenIndex") is not None:
        operation = TokenOperation.APPROVE
        fields["tokenIndex"] = approval_config["tokenIndex"]
        if not approved:
            fields["operator"] = ZERO_ADDRESS
    else:
        operation = TokenOperation.APPROVE_ALL
        fields["approved"] = approved

    return _send_transaction(
        signer=req["signer"],
        locator=locator,
        operation=operation,
        fields=fields,
        config=config,
        request_id=req.get("requestId"),
    )


def build_balance_query(request: dict[str, Any], config: ConnectorConfig) -> dict[str, Any]:
    """Build a read-only `balanceOf` call for an account in a pool."""
    require_valid(validate_balance_request(request))
    req = strip_unknown(request, BALANCE_FIELDS)
    locator = _resolve_locator(req["poolLocator"])
    method = find_method(locator.schema, BALANCE_METHOD, config.abi_dir)
    params = [req["account"]]
    check_arguments(method, params)

    headers: dict[str, Any] = {"type": QUERY}
    if req.get("requestId"):
        headers["id"] = req["requestId"]
    return {
        "headers": headers,
        "to": locator.address,
        "method": method,
        "params": params,
    }

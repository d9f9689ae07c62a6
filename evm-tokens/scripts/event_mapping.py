"""Correlate blockchain events with the pools that subscribed to them."""

from __future__ import annotations

import logging
from typing import Any

from connector_config import ConnectorConfig
from hex_codec import decode_hex
from pool_locator import Invalid, ValidPoolLocator, check_pool_locator, unpack_pool_locator
from schema_resolver import FUNGIBLE_SCHEMAS, METHOD_TABLE, schema_has_data
from subscription_names import unpack_subscription_name

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

EVENT_MINT = "token-mint"
EVENT_TRANSFER = "token-transfer"
EVENT_BURN = "token-burn"
EVENT_APPROVAL = "token-approval"

_BLOCKCHAIN_FIELDS = (
    "address",
    "blockNumber",
    "transactionIndex",
    "transactionHash",
    "logIndex",
    "signature",
)


def _quantity(raw: Any) -> int:
    value = str(raw if raw is not None else "0").strip()
    if value.startswith("0x"):
        return int(value, 16)
    if not value.isdigit():
        raise ValueError(f"invalid quantity: {raw}")
    return int(value, 10)


def protocol_id(event: dict[str, Any]) -> str:
    """Sortable id: zero-padded block number / transaction index / log index."""
    block = _quantity(event.get("blockNumber"))
    tx_index = _quantity(event.get("transactionIndex"))
    log_index = _quantity(event.get("logIndex"))
    return f"{block:012d}/{tx_index:06d}/{log_index:06d}"


def event_name(signature: str) -> str:
    return signature.split("(", 1)[0].strip()


def _with_data_methods(schema: str) -> set[str]:
    return {m for m in METHOD_TABLE.get(schema, {}).values() if m.endswith("WithData")}


def _decoded_data(locator: ValidPoolLocator, event: dict[str, Any]) -> str:
    if not schema_has_data(locator.schema):
        return ""
    if event.get("inputMethod") not in _with_data_methods(locator.schema):
        return ""
    input_args = event.get("inputArgs")
    if not isinstance(input_args, dict) or not isinstance(input_args.get("data"), str):
        return ""
    return decode_hex(input_args["data"])


def _blockchain_info(event: dict[str, Any], name: str, event_id: str) -> dict[str, Any]:
    return {
        "id": event_id,
        "name": name,
        "timestamp": event.get("timestamp"),
        "output": event.get("data", {}),
        "info": {k: event.get(k) for k in _BLOCKCHAIN_FIELDS if k in event},
    }


def _transfer_event(locator: ValidPoolLocator, output: dict[str, Any]) -> tuple[str, dict[str, Any]] | None:
    from_address = str(output.get("from", ""))
    to_address = str(output.get("to", ""))
    if from_address == ZERO_ADDRESS and to_address == ZERO_ADDRESS:
        return None

    fields: dict[str, Any] = {}
    if locator.schema in FUNGIBLE_SCHEMAS:
        fields["amount"] = str(output.get("value"))
    else:
        fields["tokenIndex"] = str(output.get("tokenId"))
        fields["amount"] = "1"

    if from_address == ZERO_ADDRESS:
        fields["to"] = to_address
        return EVENT_MINT, fields
    if to_address == ZERO_ADDRESS:
        fields["from"] = from_address
        return EVENT_BURN, fields
    fields["from"] = from_address
    fields["to"] = to_address
    return EVENT_TRANSFER, fields


def _approval_event(locator: ValidPoolLocator, name: str, output: dict[str, Any]) -> tuple[str, dict[str, Any]]:
    owner = str(output.get("owner", ""))
    if name == "ApprovalForAll":
        operator = str(output.get("operator", ""))
        approved = output.get("approved") in (True, "true")
        return EVENT_APPROVAL, {
            "signer": owner,
            "operator": operator,
            "approved": approved,
            "subject": f"{owner}:{operator}",
        }

    if locator.schema in FUNGIBLE_SCHEMAS:
        spender = str(output.get("spender", ""))
        value = str(output.get("value", "0"))
        return EVENT_APPROVAL, {
            "signer": owner,
            "operator": spender,
            "approved": value != "0",
            "subject": f"{owner}:{spender}",
            "info": {"value": value},
        }

    operator = str(output.get("approved", ""))
    token_id = str(output.get("tokenId"))
    return EVENT_APPROVAL, {
        "signer": owner,
        "operator": operator,
        "approved": operator != ZERO_ADDRESS,
        "tokenIndex": token_id,
        "subject": f"{owner}:{token_id}",
    }


def map_event(
    event: dict[str, Any],
    subscription_name: str,
    config: ConnectorConfig,
) -> dict[str, Any] | None:
    """Translate one event-stream event into a token event.

    Returns None for events that belong to other connectors, carry an
    invalid locator or are not token events.
    """
    sub = unpack_subscription_name(config.prefix, subscription_name)
    if sub.pool_locator is None:
        logger.debug("ignoring event for foreign subscription %s", subscription_name)
        return None

    checked = check_pool_locator(unpack_pool_locator(sub.pool_locator))
    if isinstance(checked, Invalid):
        logger.warning(
            "ignoring event for subscription %s: locator missing %s",
            subscription_name,
            ", ".join(checked.missing),
        )
        return None
    locator = checked.locator

    name = event_name(str(event.get("signature", "")))
    if sub.event is not None and sub.event != name:
        logger.warning("subscription %s received unexpected %s event", subscription_name, name)
        return None

    output = event.get("data")
    if not isinstance(output, dict):
        output = {}
    if name == "Transfer":
        mapped = _transfer_event(locator, output)
    elif name in {"Approval", "ApprovalForAll"}:
        mapped = _approval_event(locator, name, output)
    else:
        mapped = None
    if mapped is None:
        logger.debug("ignoring %s event on %s", name, sub.pool_locator)
        return None

    kind, fields = mapped
    event_id = protocol_id(event)
    fields.update(
        {
            "id": event_id,
            "poolLocator": sub.pool_locator,
            "data": _decoded_data(locator, event),
            "blockchain": _blockchain_info(event, name, event_id),
        }
    )
    return {"event": kind, "data": fields}

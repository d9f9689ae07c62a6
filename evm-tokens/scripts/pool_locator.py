"""Pool locator encoding.

A pool locator is the durable identifier handed out when a token pool is
created. It carries the contract address, the ABI schema the contract
implements and the fungibility type, packed as a query string:

    address=0x123456&schema=ERC20WithData&type=fungible

Locators are packed once, at pool creation. Every later request and event
echoes the string it was given; re-packing a decoded locator could produce a
different string than the one already issued.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union
from urllib.parse import parse_qsl, quote_plus

KEY_ADDRESS = "address"
KEY_SCHEMA = "schema"
KEY_TYPE = "type"
# Locators issued before the "schema" rename carry the schema under this key.
LEGACY_KEY_SCHEMA = "standard"

_LOCATOR_FIELDS = ("address", "schema", "type")


class InvalidPoolLocatorError(ValueError):
    """Raised when an invalid locator is used where a valid one is required."""


@dataclass(frozen=True)
class ValidPoolLocator:
    address: str
    schema: str
    type: str


@dataclass(frozen=True)
class PoolLocator:
    address: str | None = None
    schema: str | None = None
    type: str | None = None

    def require_valid(self) -> ValidPoolLocator:
        result = check_pool_locator(self)
        if isinstance(result, Invalid):
            raise InvalidPoolLocatorError(
                f"pool locator is missing: {', '.join(result.missing)}"
            )
        return result.locator


@dataclass(frozen=True)
class Valid:
    locator: ValidPoolLocator


@dataclass(frozen=True)
class Invalid:
    locator: PoolLocator
    missing: tuple[str, ...]


LocatorCheck = Union[Valid, Invalid]


def _quote_form(value: str) -> str:
    # application/x-www-form-urlencoded as serialized by URLSearchParams:
    # "*" stays literal and "~" is escaped.
    return quote_plus(value, safe="*").replace("~", "%7E")


def pack_pool_locator(locator: ValidPoolLocator) -> str:
    """Given a valid pool locator, create its packed string representation.

    Only call this once, when the pool is first created.
    """
    if not isinstance(locator, ValidPoolLocator):
        raise TypeError("pack_pool_locator requires a ValidPoolLocator")
    pairs = (
        (KEY_ADDRESS, locator.address),
        (KEY_SCHEMA, locator.schema),
        (KEY_TYPE, locator.type),
    )
    return "&".join(f"{_quote_form(k)}={_quote_form(v)}" for k, v in pairs)


def unpack_pool_locator(data: str) -> PoolLocator:
    """Unpack a pool locator string into its parts.

    Missing keys decode to None; the result may be invalid.
    """
    query = data[1:] if data.startswith("?") else data
    values: dict[str, str] = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        values.setdefault(key, value)

    schema = values.get(KEY_SCHEMA)
    if schema is None:
        schema = values.get(LEGACY_KEY_SCHEMA)
    return PoolLocator(
        address=values.get(KEY_ADDRESS),
        schema=schema,
        type=values.get(KEY_TYPE),
    )


def is_valid_pool_locator(locator: PoolLocator) -> bool:
    return locator.address is not None and locator.schema is not None and locator.type is not None


def check_pool_locator(locator: PoolLocator) -> LocatorCheck:
    if is_valid_pool_locator(locator):
        return Valid(
            ValidPoolLocator(
                address=str(locator.address),
                schema=str(locator.schema),
                type=str(locator.type),
            )
        )
    missing = tuple(name for name in _LOCATOR_FIELDS if getattr(locator, name) is None)
    return Invalid(locator=locator, missing=missing)

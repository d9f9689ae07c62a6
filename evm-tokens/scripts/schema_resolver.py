"""Schema resolution: token type -> ABI schema -> contract method + arguments."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from hex_codec import encode_hex


class TokenType(str, Enum):
    FUNGIBLE = "fungible"
    NONFUNGIBLE = "nonfungible"


class TokenOperation(str, Enum):
    CREATE = "create"
    MINT = "mint"
    TRANSFER = "transfer"
    BURN = "burn"
    APPROVE = "approve"
    APPROVE_ALL = "approve_all"


class UnsupportedOperationError(ValueError):
    """No contract method exists for a (schema, operation) pair."""


class MissingArgumentError(ValueError):
    """An operation was requested without a field its method requires."""


ERC20_WITH_DATA = "ERC20WithData"
ERC20_NO_DATA = "ERC20NoData"
ERC721_WITH_DATA = "ERC721WithData"
ERC721_NO_DATA = "ERC721NoData"

ALL_SCHEMAS = (ERC20_WITH_DATA, ERC20_NO_DATA, ERC721_WITH_DATA, ERC721_NO_DATA)
WITH_DATA_SCHEMAS = frozenset({ERC20_WITH_DATA, ERC721_WITH_DATA})
FUNGIBLE_SCHEMAS = frozenset({ERC20_WITH_DATA, ERC20_NO_DATA})

_STANDARD_BY_SCHEMA = MappingProxyType(
    {
        ERC20_WITH_DATA: "ERC20",
        ERC20_NO_DATA: "ERC20",
        ERC721_WITH_DATA: "ERC721",
        ERC721_NO_DATA: "ERC721",
    }
)


def _freeze(table: dict[str, dict[str, str]]) -> Mapping[str, Mapping[str, str]]:
    return MappingProxyType({schema: MappingProxyType(dict(ops)) for schema, ops in table.items()})


METHOD_TABLE: Mapping[str, Mapping[str, str]] = _freeze(
    {
        ERC20_WITH_DATA: {
            TokenOperation.CREATE.value: "create",
            TokenOperation.MINT.value: "mintWithData",
            TokenOperation.TRANSFER.value: "transferWithData",
            TokenOperation.BURN.value: "burnWithData",
            TokenOperation.APPROVE.value: "approveWithData",
        },
        ERC20_NO_DATA: {
            TokenOperation.CREATE.value: "create",
            TokenOperation.MINT.value: "mint",
            TokenOperation.TRANSFER.value: "transferFrom",
            TokenOperation.BURN.value: "burn",
            TokenOperation.APPROVE.value: "approve",
        },
        ERC721_WITH_DATA: {
            TokenOperation.CREATE.value: "create",
            TokenOperation.MINT.value: "mintWithData",
            TokenOperation.TRANSFER.value: "transferWithData",
            TokenOperation.BURN.value: "burnWithData",
            TokenOperation.APPROVE.value: "approveWithData",
            TokenOperation.APPROVE_ALL.value: "setApprovalForAllWithData",
        },
        ERC721_NO_DATA: {
            TokenOperation.CREATE.value: "create",
            TokenOperation.MINT.value: "mint",
            TokenOperation.TRANSFER.value: "safeTransferFrom",
            TokenOperation.BURN.value: "burn",
            TokenOperation.APPROVE.value: "approve",
            TokenOperation.APPROVE_ALL.value: "setApprovalForAll",
        },
    }
)

# Positional request fields per operation, before the optional data argument.
_FUNGIBLE_FIELDS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        TokenOperation.CREATE.value: ("name", "symbol"),
        TokenOperation.MINT.value: ("to", "amount"),
        TokenOperation.TRANSFER.value: ("from", "to", "amount"),
        TokenOperation.BURN.value: ("from", "amount"),
        TokenOperation.APPROVE.value: ("operator", "allowance"),
    }
)
_NONFUNGIBLE_FIELDS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        TokenOperation.CREATE.value: ("name", "symbol"),
        TokenOperation.MINT.value: ("to", "tokenIndex"),
        TokenOperation.TRANSFER.value: ("from", "to", "tokenIndex"),
        TokenOperation.BURN.value: ("from", "tokenIndex"),
        TokenOperation.APPROVE.value: ("operator", "tokenIndex"),
        TokenOperation.APPROVE_ALL.value: ("operator", "approved"),
    }
)


def _operation_name(operation: TokenOperation | str) -> str:
    return operation.value if isinstance(operation, TokenOperation) else str(operation)


def get_token_schema(token_type: TokenType | str, with_data: bool | None = True) -> str:
    """Return the ABI schema name for a token type and data flag.

    The with-data variant is the default when no flag is configured.
    """
    kind = TokenType(token_type)
    if with_data is None:
        with_data = True
    if kind is TokenType.FUNGIBLE:
        return ERC20_WITH_DATA if with_data else ERC20_NO_DATA
    return ERC721_WITH_DATA if with_data else ERC721_NO_DATA


def token_standard(schema: str) -> str:
    standard = _STANDARD_BY_SCHEMA.get(schema)
    if standard is None:
        raise UnsupportedOperationError(f"unknown schema: {schema}")
    return standard


def schema_has_data(schema: str) -> bool:
    return schema in WITH_DATA_SCHEMAS


def resolve_method(schema: str, operation: TokenOperation | str) -> str:
    methods = METHOD_TABLE.get(schema)
    if methods is None:
        raise UnsupportedOperationError(f"unknown schema: {schema}")
    op = _operation_name(operation)
    method = methods.get(op)
    if method is None:
        raise UnsupportedOperationError(f"operation '{op}' is not supported by schema {schema}")
    return method


def build_arguments(
    schema: str,
    operation: TokenOperation | str,
    fields: Mapping[str, Any],
) -> list[Any]:
    """Assemble positional contract arguments in method order.

    With-data schemas always end with the encoded data argument (the empty
    sentinel when no data was supplied); no-data schemas never carry one.
    """
    resolve_method(schema, operation)
    op = _operation_name(operation)
    fungible = schema in FUNGIBLE_SCHEMAS
    names = (_FUNGIBLE_FIELDS if fungible else _NONFUNGIBLE_FIELDS)[op]

    args: list[Any] = []
    for name in names:
        value = fields.get(name)
        if value is None:
            raise MissingArgumentError(f"{op} on {schema} requires '{name}'")
        args.append(value)
    if op == TokenOperation.CREATE.value:
        args.append(fungible)

    if schema_has_data(schema):
        data = fields.get("data")
        args.append(encode_hex(data if data is not None else ""))
    return args

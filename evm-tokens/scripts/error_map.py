"""Stable error codes surfaced in evm-tokens JSON envelopes."""

from __future__ import annotations

ERR_INVALID_REQUEST = "INVALID_REQUEST"
ERR_INVALID_POOL_LOCATOR = "INVALID_POOL_LOCATOR"
ERR_UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"
ERR_ABI_LOOKUP_FAILED = "ABI_LOOKUP_FAILED"
ERR_ABI_ARGUMENT_MISMATCH = "ABI_ARGUMENT_MISMATCH"
ERR_POOL_CREATION_FAILED = "POOL_CREATION_FAILED"
ERR_EVENT_NOT_MAPPED = "EVENT_NOT_MAPPED"
ERR_CONFIG_INVALID = "CONFIG_INVALID"
ERR_INTERNAL = "INTERNAL_ERROR"

"""Event subscription names: `<prefix>:<poolLocator>[:<event>]`."""

from __future__ import annotations

from typing import NamedTuple

SUBSCRIPTION_DELIMITER = ":"


class SubscriptionName(NamedTuple):
    prefix: str
    pool_locator: str | None = None
    event: str | None = None


def pack_subscription_name(prefix: str, pool_locator: str, event: str | None = None) -> str:
    if event is None:
        return SUBSCRIPTION_DELIMITER.join([prefix, pool_locator])
    return SUBSCRIPTION_DELIMITER.join([prefix, pool_locator, event])


def unpack_subscription_name(prefix: str, data: str) -> SubscriptionName:
    """Split a subscription name created with `pack_subscription_name`.

    Names that do not start with `prefix:` belong to someone else; they come
    back with no locator and no event rather than raising.
    """
    head = prefix + SUBSCRIPTION_DELIMITER
    if not data.startswith(head):
        return SubscriptionName(prefix)
    parts = data[len(head) :].split(SUBSCRIPTION_DELIMITER)[:2]
    return SubscriptionName(
        prefix,
        parts[0],
        parts[1] if len(parts) > 1 else None,
    )

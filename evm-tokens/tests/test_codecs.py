from __future__ import annotations

import pytest

from hex_codec import EMPTY_DATA, decode_hex, encode_hex
from pool_locator import (
    Invalid,
    InvalidPoolLocatorError,
    PoolLocator,
    Valid,
    ValidPoolLocator,
    check_pool_locator,
    is_valid_pool_locator,
    pack_pool_locator,
    unpack_pool_locator,
)
from subscription_names import SubscriptionName, pack_subscription_name, unpack_subscription_name


def test_encode_hex_and_empty_sentinel():
    assert encode_hex("test") == "0x74657374"
    assert encode_hex("") == EMPTY_DATA == "0x00"


def test_decode_hex_and_empty_sentinel():
    assert decode_hex("0x74657374") == "test"
    assert decode_hex("0x00") == ""
    assert decode_hex("0x") == ""
    assert decode_hex("74657374") == "test"


@pytest.mark.parametrize("text", ["hello", '{"tx":tx123}', "snowman ☃", "a:b&c=d"])
def test_hex_round_trip(text):
    assert decode_hex(encode_hex(text)) == text


def test_decode_hex_is_lenient_with_malformed_input():
    # odd trailing digit ignored, decoding stops at the first non-hex pair
    assert decode_hex("0x7465737") == "tes"
    assert decode_hex("0x7465zz74") == "te"
    assert decode_hex("0xff") == "\ufffd"


def test_pack_pool_locator_key_order():
    locator = ValidPoolLocator(address="0x123456", schema="ERC20WithData", type="fungible")
    assert pack_pool_locator(locator) == "address=0x123456&schema=ERC20WithData&type=fungible"


def test_pack_pool_locator_form_encoding():
    locator = ValidPoolLocator(address="a b~*&=:", schema="ERC20NoData", type="fungible")
    packed = pack_pool_locator(locator)
    assert packed == "address=a+b%7E*%26%3D%3A&schema=ERC20NoData&type=fungible"
    assert ":" not in packed
    assert unpack_pool_locator(packed) == PoolLocator("a b~*&=:", "ERC20NoData", "fungible")


def test_pack_pool_locator_rejects_partial_locator():
    with pytest.raises(TypeError):
        pack_pool_locator(PoolLocator(address="0x1", schema="ERC20WithData"))  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "locator",
    [
        ValidPoolLocator("0x123456", "ERC20WithData", "fungible"),
        ValidPoolLocator("0xabc", "ERC721NoData", "nonfungible"),
    ],
)
def test_locator_round_trip(locator):
    unpacked = unpack_pool_locator(pack_pool_locator(locator))
    assert (unpacked.address, unpacked.schema, unpacked.type) == (
        locator.address,
        locator.schema,
        locator.type,
    )
    assert unpacked.require_valid() == locator


def test_unpack_legacy_standard_key():
    locator = unpack_pool_locator("address=0x123456&standard=ERC20WithData&type=fungible")
    assert locator.schema == "ERC20WithData"
    assert is_valid_pool_locator(locator)


def test_unpack_prefers_schema_over_legacy_key():
    locator = unpack_pool_locator("address=0x1&standard=ERC20&schema=ERC20NoData&type=fungible")
    assert locator.schema == "ERC20NoData"


def test_unpack_first_value_wins_and_leading_question_mark():
    locator = unpack_pool_locator("?address=0x1&address=0x2&schema=ERC20NoData&type=fungible")
    assert locator.address == "0x1"


def test_unpack_missing_keys_is_invalid_not_error():
    locator = unpack_pool_locator("address=0x1&type=fungible")
    assert locator == PoolLocator(address="0x1", schema=None, type="fungible")
    assert is_valid_pool_locator(locator) is False

    checked = check_pool_locator(locator)
    assert isinstance(checked, Invalid)
    assert checked.missing == ("schema",)
    with pytest.raises(InvalidPoolLocatorError):
        locator.require_valid()


def test_unpack_garbage_is_invalid():
    checked = check_pool_locator(unpack_pool_locator("not a locator"))
    assert isinstance(checked, Invalid)
    assert checked.missing == ("address", "schema", "type")


@pytest.mark.parametrize(
    "address,schema,token_type,expected",
    [
        ("0x1", "ERC20WithData", "fungible", True),
        (None, "ERC20WithData", "fungible", False),
        ("0x1", None, "fungible", False),
        ("0x1", "ERC20WithData", None, False),
        ("", "", "", True),
    ],
)
def test_is_valid_pool_locator(address, schema, token_type, expected):
    locator = PoolLocator(address, schema, token_type)
    assert is_valid_pool_locator(locator) is expected
    assert isinstance(check_pool_locator(locator), Valid) is expected


def test_pack_subscription_name():
    assert pack_subscription_name("fly", "LOCATORSTR") == "fly:LOCATORSTR"
    assert pack_subscription_name("fly", "LOCATORSTR", "Transfer") == "fly:LOCATORSTR:Transfer"


def test_unpack_subscription_name():
    assert unpack_subscription_name("fly", "fly:LOCATORSTR:Transfer") == SubscriptionName(
        prefix="fly", pool_locator="LOCATORSTR", event="Transfer"
    )
    assert unpack_subscription_name("fly", "fly:LOCATORSTR") == SubscriptionName("fly", "LOCATORSTR", None)


def test_unpack_subscription_name_soft_failure():
    assert unpack_subscription_name("fly", "other:x") == SubscriptionName("fly", None, None)
    # prefix must be a whole leading segment
    assert unpack_subscription_name("fly", "flyer:x:Transfer").pool_locator is None


def test_unpack_subscription_name_keeps_two_fields():
    sub = unpack_subscription_name("fly", "fly:LOC:Transfer:extra")
    assert sub.pool_locator == "LOC"
    assert sub.event == "Transfer"


def test_subscription_name_carries_packed_locator():
    locator = pack_pool_locator(ValidPoolLocator("0x123456", "ERC20WithData", "fungible"))
    sub = unpack_subscription_name("fly", pack_subscription_name("fly", locator, "Approval"))
    assert sub.pool_locator == locator
    assert sub.event == "Approval"

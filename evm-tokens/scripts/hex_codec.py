"""UTF-8 text <-> 0x-prefixed hex bytes for the contract `data` argument."""

from __future__ import annotations

import re

# The RPC gateway rejects zero-length byte arguments, so "no data" travels as
# a single NUL byte.
EMPTY_DATA = "0x00"

_HEX_PAIR_RE = re.compile(r"[0-9a-fA-F]{2}")


def encode_hex(text: str) -> str:
    """Encode a UTF-8 string into hex bytes with a leading 0x."""
    encoded = text.encode("utf-8").hex()
    if not encoded:
        return EMPTY_DATA
    return f"0x{encoded}"


def _leading_hex_bytes(digits: str) -> bytes:
    out = bytearray()
    for idx in range(0, len(digits) - 1, 2):
        pair = digits[idx : idx + 2]
        if not _HEX_PAIR_RE.fullmatch(pair):
            break
        out.append(int(pair, 16))
    return bytes(out)


def decode_hex(data: str) -> str:
    """Decode a series of hex bytes into a UTF-8 string.

    Decoding is best effort: only the first "0x" is removed, bytes are read up
    to the first pair that is not hex (a trailing odd digit is ignored) and
    invalid UTF-8 sequences become replacement characters.
    """
    raw = _leading_hex_bytes(data.replace("0x", "", 1))
    decoded = raw.decode("utf-8", errors="replace")
    return "" if decoded == "\x00" else decoded

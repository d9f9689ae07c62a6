from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Any


ROOT = Path(__file__).resolve().parents[1]
SCRIPTS = ROOT / "scripts"
ABI_DIR = ROOT / "references" / "abi"

CONTRACT_ADDRESS = "0x123456"
IDENTITY = "0x1"
PREFIX = "fly"
REQUEST = "request123"
TX = "tx123"
NAME = "abcTest"
SYMBOL = "abc"
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

ERC20_NO_DATA_POOL_ID = f"address={CONTRACT_ADDRESS}&schema=ERC20NoData&type=fungible"
ERC20_WITH_DATA_POOL_ID = f"address={CONTRACT_ADDRESS}&schema=ERC20WithData&type=fungible"
ERC721_NO_DATA_POOL_ID = f"address={CONTRACT_ADDRESS}&schema=ERC721NoData&type=nonfungible"
ERC721_WITH_DATA_POOL_ID = f"address={CONTRACT_ADDRESS}&schema=ERC721WithData&type=nonfungible"


def _abi_method(schema: str, name: str) -> dict[str, Any]:
    raw = json.loads((ABI_DIR / f"{schema}.json").read_text(encoding="utf-8"))
    for entry in raw["abi"]:
        if entry.get("type") == "function" and entry.get("name") == name:
            return entry
    raise AssertionError(f"{name} missing from {schema} ABI")


def _transfer_event(
    *,
    from_address: str,
    to_address: str,
    value_key: str = "value",
    value: str = "5",
    input_method: str | None = None,
    input_data: str | None = None,
) -> dict[str, Any]:
    event: dict[str, Any] = {
        "subId": "sb123",
        "signature": "Transfer(address,address,uint256)",
        "address": CONTRACT_ADDRESS,
        "blockNumber": "1",
        "transactionIndex": "0x0",
        "transactionHash": "0x123",
        "logIndex": "1",
        "timestamp": "2020-01-01 00:00:00Z",
        "data": {"from": from_address, "to": to_address, value_key: value},
    }
    if input_method is not None:
        event["inputMethod"] = input_method
    if input_data is not None:
        event["inputArgs"] = {"data": input_data}
    return event


def _run_cmd(
    command: str,
    request: Any,
    extra_env: dict[str, str] | None = None,
    extra_args: list[str] | None = None,
) -> subprocess.CompletedProcess[str]:
    cmd = [
        sys.executable,
        str(SCRIPTS / "tokens_cli.py"),
        command,
        "--request-json",
        json.dumps(request),
    ]
    if extra_args:
        cmd.extend(extra_args)
    env = os.environ.copy()
    for key in ("EVM_TOKENS_PREFIX", "EVM_TOKENS_TOPIC", "EVM_TOKENS_WITH_DATA", "EVM_TOKENS_ABI_DIR"):
        env.pop(key, None)
    if extra_env:
        env.update(extra_env)
    return subprocess.run(cmd, capture_output=True, text=True, check=False, env=env)

"""
JSON-RPC Client for Starknet nodes.

Lightweight read path: uses httpx for HTTP and starknet.py only for selector
hashing.  Supports read-only contract calls and transaction receipt polling.
Transactions are built and signed in :mod:`cofiblocks.pneuma.tx`.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional, Sequence

import httpx
from starknet_py.hash.selector import get_selector_from_name

from ..utils import format_felt

# Starknet JSON-RPC error code for TXN_HASH_NOT_FOUND
TXN_HASH_NOT_FOUND = 29

DEFAULT_BLOCK_ID = "latest"


class RpcError(RuntimeError):
    """A JSON-RPC ``error`` object returned by the node."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        detail = f"RPC error {code}: {message}"
        if data:
            detail += f" ({data})"
        super().__init__(detail)
        self.code = code
        self.message = message
        self.data = data


class TransactionRevertedError(RuntimeError):
    def __init__(self, tx_hash: int, reason: str) -> None:
        super().__init__(f"Transaction reverted, reason: {reason}")
        self.tx_hash = tx_hash
        self.reason = reason


def _rpc_call(method: str, params: Any, rpc_url: str) -> Any:
    """
    Make a JSON-RPC call.

    Args:
        method: RPC method name (e.g., "starknet_call")
        params: RPC parameters (named or positional)
        rpc_url: RPC endpoint URL

    Returns:
        Result field from the RPC response

    Raises:
        RpcError: If the node returns an error object
        httpx.HTTPError: On transport / HTTP status failures
    """
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": 1,
    }

    with httpx.Client(timeout=30) as client:
        response = client.post(rpc_url, json=payload)
        response.raise_for_status()
        data = response.json()

    if "error" in data:
        error = data["error"] or {}
        raise RpcError(
            code=int(error.get("code", 0)),
            message=str(error.get("message", "unknown error")),
            data=error.get("data"),
        )

    return data.get("result")


def call_contract(
    contract_address: int,
    function_name: str,
    calldata: Sequence[int],
    rpc_url: str,
    block_id: str = DEFAULT_BLOCK_ID,
) -> list[int]:
    """
    Call a view function (starknet_call).

    Args:
        contract_address: Contract address felt
        function_name: Entry point name, hashed into a selector
        calldata: Serialized arguments
        rpc_url: RPC endpoint URL
        block_id: Block tag ("latest", "pre_confirmed", ...)

    Returns:
        Returned felts
    """
    request = {
        "contract_address": hex(contract_address),
        "entry_point_selector": hex(get_selector_from_name(function_name)),
        "calldata": [hex(felt) for felt in calldata],
    }
    result = _rpc_call(
        "starknet_call",
        {"request": request, "block_id": block_id},
        rpc_url=rpc_url,
    )
    return [int(felt, 16) for felt in result or []]


def get_transaction_receipt(tx_hash: int, rpc_url: str) -> dict:
    """Fetch a transaction receipt (raises RpcError code 29 if unknown)."""
    return _rpc_call(
        "starknet_getTransactionReceipt",
        {"transaction_hash": hex(tx_hash)},
        rpc_url=rpc_url,
    )


def wait_for_receipt(
    tx_hash: int,
    rpc_url: str,
    poll_interval: float = 1.0,
    timeout: float = 300.0,
    on_pending: Optional[Callable[[int], None]] = None,
) -> dict:
    """
    Wait for a transaction to be executed.

    A receipt only exists once the sequencer has executed the transaction,
    so "hash not found" means "not yet" and is polled again; any other RPC
    failure aborts.

    Args:
        tx_hash: Transaction hash
        rpc_url: RPC endpoint URL
        poll_interval: Seconds between polls
        timeout: Maximum wait time in seconds
        on_pending: Called with the attempt number while the receipt is missing

    Returns:
        Receipt of the successfully executed transaction

    Raises:
        TransactionRevertedError: If execution reverted
        TimeoutError: If no receipt appeared within timeout
    """
    start = time.monotonic()
    attempt = 0
    while True:
        attempt += 1
        try:
            receipt = get_transaction_receipt(tx_hash, rpc_url)
        except RpcError as exc:
            if exc.code != TXN_HASH_NOT_FOUND:
                raise
            receipt = None

        if receipt is not None:
            status = receipt.get("execution_status")
            if status == "REVERTED":
                raise TransactionRevertedError(
                    tx_hash, receipt.get("revert_reason") or "unknown"
                )
            if status == "SUCCEEDED":
                return receipt

        if on_pending is not None:
            on_pending(attempt)

        if time.monotonic() - start + poll_interval > timeout:
            raise TimeoutError(
                f"Transaction {format_felt(tx_hash)} not confirmed within {timeout}s"
            )
        time.sleep(poll_interval)

"""
Pneuma - On-chain interaction layer for cofiblocks.

Provides felt serialization, network resolution, a JSON-RPC client with
receipt polling, and deployment transactions for the ERC-1155 contract
on Starknet.

Uses httpx for raw JSON-RPC reads and starknet.py for signing and
submitting transactions.
"""

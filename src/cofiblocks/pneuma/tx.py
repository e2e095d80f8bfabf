"""
Deployment Transactions - Deploy the ERC-1155 class through the UDC.

Uses starknet.py for account handling, signing, fee estimation and
submission.  Confirmation polling lives in :mod:`cofiblocks.pneuma.rpc`.
"""

from __future__ import annotations

import asyncio
import secrets
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from starknet_py.net.account.account import Account
from starknet_py.net.client_models import ResourceBoundsMapping
from starknet_py.net.full_node_client import FullNodeClient
from starknet_py.net.signer.stark_curve_signer import KeyPair
from starknet_py.net.udc_deployer.deployer import Deployer

from .network import NetworkConfig


@dataclass(frozen=True)
class DeploymentResult:
    class_hash: int
    salt: int
    address: int
    transaction_hash: int
    estimated_fee: int
    fee_unit: str


@dataclass(frozen=True)
class FeeEstimate:
    class_hash: int
    salt: int
    address: int
    overall_fee: int
    unit: str


def random_salt() -> int:
    """Random 251-bit salt (always a valid felt)."""
    return secrets.randbits(251)


def build_account(config: NetworkConfig, account_address: int, key_pair: KeyPair) -> Account:
    client = FullNodeClient(node_url=config.rpc_url)
    return Account(
        address=account_address,
        client=client,
        key_pair=key_pair,
        chain=config.chain_id,
    )


async def submit_deployment(
    config: NetworkConfig,
    account_address: int,
    key_pair: KeyPair,
    constructor_calldata: Sequence[int],
    salt: Optional[int] = None,
    on_estimate: Optional[Callable[[FeeEstimate], None]] = None,
) -> DeploymentResult:
    """
    Sign and send a deployment of the network's ERC-1155 class.

    The deployment goes through the Universal Deployer Contract with
    ``unique=True``, so the resulting address depends on the deployer
    account as well as on the salt.

    Args:
        config: Resolved network parameters
        account_address: Address of the signing account contract
        key_pair: Signing key of that account
        constructor_calldata: Serialized constructor arguments
        salt: Deployment salt (default: random)
        on_estimate: Called with the fee estimate before the transaction is sent

    Returns:
        DeploymentResult (the transaction is sent but not yet confirmed)
    """
    class_hash = config.class_hash
    salt = random_salt() if salt is None else salt

    account = build_account(config, account_address, key_pair)
    deployer = Deployer(account_address=account.address)
    deployment = deployer.create_contract_deployment_raw(
        class_hash=class_hash,
        salt=salt,
        raw_calldata=list(constructor_calldata),
    )

    # Estimate once and sign with bounds derived from that same estimate
    nonce = await account.get_nonce()
    query_tx = await account.sign_invoke_v3(
        calls=deployment.call,
        nonce=nonce,
        resource_bounds=ResourceBoundsMapping.init_with_zeros(),
    )
    fee = await account.estimate_fee(tx=query_tx)
    estimate = FeeEstimate(
        class_hash=class_hash,
        salt=salt,
        address=deployment.address,
        overall_fee=fee.overall_fee,
        unit=fee.unit.value,
    )
    if on_estimate is not None:
        on_estimate(estimate)

    invoke_tx = await account.sign_invoke_v3(
        calls=deployment.call,
        nonce=nonce,
        resource_bounds=fee.to_resource_bounds(),
    )
    response = await account.client.send_transaction(invoke_tx)

    return DeploymentResult(
        class_hash=class_hash,
        salt=salt,
        address=deployment.address,
        transaction_hash=response.transaction_hash,
        estimated_fee=estimate.overall_fee,
        fee_unit=estimate.unit,
    )


def deploy_contract(
    config: NetworkConfig,
    account_address: int,
    key_pair: KeyPair,
    constructor_calldata: Sequence[int],
    salt: Optional[int] = None,
    on_estimate: Optional[Callable[[FeeEstimate], None]] = None,
) -> DeploymentResult:
    """Synchronous wrapper around :func:`submit_deployment`."""
    return asyncio.run(
        submit_deployment(
            config,
            account_address,
            key_pair,
            constructor_calldata,
            salt=salt,
            on_estimate=on_estimate,
        )
    )

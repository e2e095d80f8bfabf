"""Tests for deployment transactions with a mocked starknet.py account."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from starknet_py.net.signer.stark_curve_signer import KeyPair

from cofiblocks.pneuma.network import Network, NetworkNotSupportedError, resolve_network
from cofiblocks.pneuma.tx import FeeEstimate, deploy_contract, random_salt
from cofiblocks.pneuma.serde import FIELD_PRIME

ACCOUNT = 0x04A1
DEPLOYED = 0x0DEAD
TX_HASH = 0x0ABC
KEY_PAIR = KeyPair.from_private_key(0x1234)


@pytest.fixture()
def starknet() -> Iterator[SimpleNamespace]:
    """Patch Account / Deployer / FullNodeClient in the tx module."""
    account = MagicMock()
    account.address = ACCOUNT
    account.get_nonce = AsyncMock(return_value=3)
    account.sign_invoke_v3 = AsyncMock(side_effect=["query-invoke", "signed-invoke"])
    account.estimate_fee = AsyncMock(
        return_value=SimpleNamespace(
            overall_fee=1_000,
            unit=SimpleNamespace(value="FRI"),
            to_resource_bounds=MagicMock(return_value="bounds"),
        )
    )
    account.client.send_transaction = AsyncMock(
        return_value=SimpleNamespace(transaction_hash=TX_HASH)
    )

    deployer = MagicMock()
    deployer.create_contract_deployment_raw.return_value = SimpleNamespace(
        call="udc-call", address=DEPLOYED
    )

    with patch("cofiblocks.pneuma.tx.Account", return_value=account) as account_cls, patch(
        "cofiblocks.pneuma.tx.Deployer", return_value=deployer
    ) as deployer_cls, patch("cofiblocks.pneuma.tx.FullNodeClient") as client_cls:
        yield SimpleNamespace(
            account=account,
            account_cls=account_cls,
            deployer=deployer,
            deployer_cls=deployer_cls,
            client_cls=client_cls,
        )


class TestDeployContract:
    """Tests for deploy_contract."""

    def test_signs_estimates_and_sends(self, starknet: SimpleNamespace) -> None:
        config = resolve_network(Network.SEPOLIA, rpc_url="http://node")
        estimates: list[FeeEstimate] = []

        result = deploy_contract(
            config, ACCOUNT, KEY_PAIR, [1, 2, 3], salt=0x5A17, on_estimate=estimates.append
        )

        assert result.address == DEPLOYED
        assert result.transaction_hash == TX_HASH
        assert result.salt == 0x5A17
        assert result.class_hash == config.class_hash
        assert result.estimated_fee == 1_000
        assert result.fee_unit == "FRI"

        starknet.client_cls.assert_called_once_with(node_url="http://node")
        kwargs = starknet.account_cls.call_args.kwargs
        assert kwargs["address"] == ACCOUNT
        assert kwargs["key_pair"] is KEY_PAIR
        assert kwargs["chain"] == config.chain_id

        starknet.deployer_cls.assert_called_once_with(account_address=ACCOUNT)
        starknet.deployer.create_contract_deployment_raw.assert_called_once_with(
            class_hash=config.class_hash, salt=0x5A17, raw_calldata=[1, 2, 3]
        )
        starknet.account.get_nonce.assert_awaited_once()
        starknet.account.estimate_fee.assert_awaited_once_with(tx="query-invoke")
        query_call, signed_call = starknet.account.sign_invoke_v3.await_args_list
        assert query_call.kwargs["calls"] == "udc-call"
        assert query_call.kwargs["nonce"] == 3
        # the sent transaction is bounded by the estimate that was reported
        assert signed_call.kwargs == {"calls": "udc-call", "nonce": 3, "resource_bounds": "bounds"}
        starknet.account.client.send_transaction.assert_awaited_once_with("signed-invoke")

        assert estimates == [
            FeeEstimate(class_hash=config.class_hash, salt=0x5A17, address=DEPLOYED, overall_fee=1_000, unit="FRI")
        ]

    def test_random_salt_when_omitted(self, starknet: SimpleNamespace) -> None:
        config = resolve_network(Network.SEPOLIA, rpc_url="http://node")
        with patch("cofiblocks.pneuma.tx.random_salt", return_value=77):
            result = deploy_contract(config, ACCOUNT, KEY_PAIR, [])
        assert result.salt == 77

    def test_mainnet_without_class_hash(self, starknet: SimpleNamespace) -> None:
        with patch.dict("os.environ", {}, clear=True):
            config = resolve_network(Network.MAINNET, rpc_url="http://node")
            with pytest.raises(NetworkNotSupportedError):
                deploy_contract(config, ACCOUNT, KEY_PAIR, [])
        starknet.account.client.send_transaction.assert_not_called()


def test_random_salt_is_a_felt() -> None:
    for _ in range(20):
        assert 0 <= random_salt() < FIELD_PRIME

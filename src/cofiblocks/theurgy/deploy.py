"""
Theurgy Deploy - Deploy the ERC-1155 contract.

Flow:
1. Load and validate the TOML contract specification
2. Resolve the network (RPC endpoint, chain id, class hash)
3. Decrypt the signing key from the keystore
4. Serialize constructor arguments and send a UDC deployment
5. Poll until the deployment transaction is confirmed
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
import httpx
from starknet_py.net.client_errors import ClientError

from ..pneuma.network import NetworkNotSupportedError, resolve_network
from ..pneuma.rpc import RpcError, TransactionRevertedError, wait_for_receipt
from ..pneuma.serde import encode_constructor_args, parse_felt
from ..pneuma.tx import FeeEstimate, deploy_contract
from ..sigil.keystore import KeystoreError, key_pair_from_keystore, read_keystore
from ..spec.models import load_spec
from ..utils import format_felt


def _fail(message: str) -> NoReturn:
    click.secho(f"ERROR: {message}", fg="red", err=True)
    sys.exit(1)


def _report_estimate(estimate: FeeEstimate) -> None:
    click.echo(
        f"Deploying class {format_felt(estimate.class_hash)} with salt "
        f"{format_felt(estimate.salt)}, estimated fee "
        f"{estimate.overall_fee} {estimate.unit}...",
        err=True,
    )
    click.echo(
        f"The contract will be deployed at address {format_felt(estimate.address)}",
        err=True,
    )


def _report_pending(attempt: int) -> None:
    click.secho("Transaction not confirmed yet...", dim=True, err=True)


@click.command()
@click.argument("spec", type=click.Path(path_type=Path))
@click.argument("recipient")
@click.option(
    "--account",
    "address",
    envvar="STARKNET_ACCOUNT_ADDRESS",
    required=True,
    help="Address of the signing account",
)
@click.option(
    "--keystore",
    envvar="STARKNET_KEYSTORE",
    required=True,
    type=click.Path(path_type=Path),
    help="JSON keystore of the signing account",
)
@click.option(
    "--class-hash",
    envvar="COFIBLOCKS_CLASS_HASH",
    default=None,
    help="ERC-1155 class hash (default: the class declared on the network)",
)
@click.option(
    "--keystore-password",
    envvar="STARKNET_KEYSTORE_PASSWORD",
    default=None,
    help="Keystore password (prompted for if omitted)",
)
@click.option("--salt", default=None, help="Deployment salt as hex (default: random)")
@click.option("--no-wait", is_flag=True, help="Return after sending the transaction")
@click.option("--poll-interval", default=1.0, type=float, show_default=True, help="Seconds between receipt polls")
@click.option("--timeout", default=300.0, type=float, show_default=True, help="Confirmation timeout in seconds")
@click.pass_context
def deploy(
    ctx: click.Context,
    spec: Path,
    recipient: str,
    address: str,
    keystore: Path,
    class_hash: Optional[str],
    keystore_password: Optional[str],
    salt: Optional[str],
    no_wait: bool,
    poll_interval: float,
    timeout: float,
) -> None:
    """Deploy an ERC-1155 contract from a contract specification.

    SPEC is the TOML token specification and RECIPIENT receives the minted
    tokens. The signing account and its keystore come from --account and
    --keystore (or STARKNET_ACCOUNT_ADDRESS and STARKNET_KEYSTORE).

    \b
    Examples:
      cofiblocks deploy tokens.toml 0x05b2... --account 0x04a1... --keystore ~/.starkli/keystore.json
      cofiblocks --network sepolia deploy tokens.toml 0x05b2... --account 0x04a1... --keystore key.json --no-wait
    """
    options = ctx.obj or {}

    try:
        contract_spec = load_spec(spec)
        config = resolve_network(
            options.get("network"),
            rpc_url=options.get("rpc_url"),
            class_hash=class_hash,
        )
        # Fail on unknown classes before asking for a password
        deploy_class = config.class_hash
        account_address = parse_felt(address)
        calldata = encode_constructor_args(contract_spec, parse_felt(recipient))
        deploy_salt = parse_felt(salt) if salt else None
        keystore_json = read_keystore(keystore)
    except (FileNotFoundError, ValueError, NetworkNotSupportedError) as exc:
        _fail(str(exc))

    click.echo(
        f"Network {config.network.value} ({config.rpc_url}), class {format_felt(deploy_class)}",
        err=True,
    )

    if keystore_password is None:
        keystore_password = click.prompt("Enter keystore password", hide_input=True, err=True)

    try:
        key_pair = key_pair_from_keystore(keystore_json, keystore_password)
    except KeystoreError as exc:
        _fail(str(exc))

    try:
        result = deploy_contract(
            config,
            account_address,
            key_pair,
            calldata,
            salt=deploy_salt,
            on_estimate=_report_estimate,
        )
    except (ClientError, OSError, ValueError) as exc:
        _fail(f"Deployment failed: {exc}")

    tx_hash = format_felt(result.transaction_hash)
    click.echo(f"Contract deployment transaction: {tx_hash}", err=True)

    if not no_wait:
        click.echo(f"Waiting for transaction {tx_hash} to confirm...", err=True)
        try:
            wait_for_receipt(
                result.transaction_hash,
                config.rpc_url,
                poll_interval=poll_interval,
                timeout=timeout,
                on_pending=_report_pending,
            )
        except TransactionRevertedError as exc:
            _fail(str(exc))
        except (RpcError, TimeoutError, httpx.HTTPError, ValueError) as exc:
            _fail(f"Could not confirm {tx_hash}: {exc}")
        click.secho(f"Transaction {tx_hash} confirmed", fg="green", err=True)

    click.echo(format_felt(result.address))

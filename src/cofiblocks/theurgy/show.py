"""
Theurgy Show - Query ERC-1155 balances.

Both commands call ``balance_of_batch`` once and print a JSON array on
stdout, either decoded per token or as the raw returned felts (--raw).
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import NoReturn, Sequence

import click
import httpx

from ..pneuma.network import resolve_network
from ..pneuma.rpc import RpcError, call_contract
from ..pneuma.serde import decode_u256_array, encode_balance_query, parse_felt, parse_token_id
from ..spec.models import load_spec
from ..utils import format_felt

BALANCE_OF_BATCH = "balance_of_batch"

_raw_option = click.option(
    "--raw",
    is_flag=True,
    help="Print the returned felts instead of decoded balances",
)


def _fail(message: str) -> NoReturn:
    click.secho(f"ERROR: {message}", fg="red", err=True)
    sys.exit(1)


def query_balances(
    rpc_url: str,
    contract_address: int,
    accounts: Sequence[int],
    token_ids: Sequence[int],
) -> list[int]:
    """Return the raw felts of ``balance_of_batch(accounts, token_ids)``."""
    calldata = encode_balance_query(accounts, token_ids)
    return call_contract(contract_address, BALANCE_OF_BATCH, calldata, rpc_url=rpc_url)


def render_balances(
    felts: Sequence[int],
    accounts: Sequence[int],
    token_ids: Sequence[int],
    raw: bool = False,
) -> str:
    if raw:
        return json.dumps([format_felt(felt) for felt in felts], indent=4)

    balances = decode_u256_array(felts)
    if len(balances) != len(token_ids):
        raise ValueError(f"Node returned {len(balances)} balances for {len(token_ids)} tokens")
    if len(accounts) == 1:
        accounts = list(accounts) * len(token_ids)
    rows = [
        {
            "account": format_felt(account),
            "token": format_felt(token_id),
            "balance": str(balance),
        }
        for account, token_id, balance in zip(accounts, token_ids, balances)
    ]
    return json.dumps(rows, indent=4)


def _show(ctx: click.Context, contract_address: str, account: str, token_ids: list[int], raw: bool) -> None:
    options = ctx.obj or {}
    try:
        config = resolve_network(options.get("network"), rpc_url=options.get("rpc_url"))
        contract = parse_felt(contract_address)
        accounts = [parse_felt(account)]
        felts = query_balances(config.rpc_url, contract, accounts, token_ids)
        output = render_balances(felts, accounts, token_ids, raw=raw)
    except (RpcError, httpx.HTTPError) as exc:
        _fail(f"Balance query failed: {exc}")
    except ValueError as exc:
        _fail(str(exc))

    click.echo(output)


@click.command()
@click.argument("contract_address")
@click.argument("account")
@click.argument("token")
@_raw_option
@click.pass_context
def show(ctx: click.Context, contract_address: str, account: str, token: str, raw: bool) -> None:
    """Show the balance of one token for an account.

    TOKEN is the token id as hex, as written in the contract specification.
    """
    try:
        token_ids = [parse_token_id(token)]
    except ValueError as exc:
        _fail(str(exc))
    _show(ctx, contract_address, account, token_ids, raw)


@click.command("show-all")
@click.argument("contract_address")
@click.argument("account")
@click.argument("spec", type=click.Path(path_type=Path))
@_raw_option
@click.pass_context
def show_all(ctx: click.Context, contract_address: str, account: str, spec: Path, raw: bool) -> None:
    """Show the balances of every token in a contract specification."""
    try:
        token_ids = load_spec(spec).token_ids()
    except (FileNotFoundError, ValueError) as exc:
        _fail(str(exc))

    if not token_ids:
        click.echo("[]")
        return
    _show(ctx, contract_address, account, token_ids, raw)

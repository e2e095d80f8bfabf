"""
cofiblocks CLI

Command-line interface for deploying and querying the cofiblocks ERC-1155
contract on Starknet.

Commands:
  deploy    - Deploy the contract from a TOML token specification
  show      - Show one token balance of an account
  show-all  - Show every token balance of an account
  info      - Show the resolved network configuration
"""

from __future__ import annotations

from typing import Optional

import click

from .pneuma.network import COFIBLOCKS_ENV, Network, NetworkNotSupportedError, load_config, resolve_network
from .utils import format_felt


# ============ Constants ============

VERSION = "0.1.0"


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="cofiblocks")
@click.option(
    "--network",
    type=click.Choice([n.value for n in Network], case_sensitive=False),
    envvar="STARKNET_NETWORK",
    default=Network.default().value,
    show_default=True,
    help="Starknet network",
)
@click.option(
    "--rpc-url",
    envvar="STARKNET_RPC_URL",
    default=None,
    help="JSON-RPC endpoint (default: public endpoint of the network)",
)
@click.pass_context
def cli(ctx: click.Context, network: str, rpc_url: Optional[str]) -> None:
    """cofiblocks — ERC-1155 deployment tool for Starknet."""
    ctx.ensure_object(dict)
    ctx.obj["network"] = network.lower()
    ctx.obj["rpc_url"] = rpc_url


# ============ Top-level Commands ============

from .theurgy.deploy import deploy
from .theurgy.show import show, show_all

cli.add_command(deploy)
cli.add_command(show)
cli.add_command(show_all)


# ============ Info ============


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show the resolved network configuration."""
    try:
        config = resolve_network(ctx.obj["network"], rpc_url=ctx.obj["rpc_url"])
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(click.style("Network:    ", dim=True) + config.network.value)
    click.echo(click.style("RPC URL:    ", dim=True) + config.rpc_url)
    click.echo(click.style("Chain ID:   ", dim=True) + hex(config.chain_id))
    try:
        class_hash = format_felt(config.class_hash)
    except NetworkNotSupportedError:
        class_hash = click.style("not declared", fg="yellow")
    click.echo(click.style("Class hash: ", dim=True) + class_hash)
    click.echo(click.style("Config:     ", dim=True) + str(COFIBLOCKS_ENV))


# ============ Entry Points ============


def main() -> None:
    """cofiblocks CLI entry point."""
    load_config()
    cli()


if __name__ == "__main__":
    main()

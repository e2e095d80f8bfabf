"""
Network Resolution - RPC endpoint, chain id and contract class per network.

Defaults are baked in for each supported network and can be overridden
through ``~/.cofiblocks/.env``, the environment, or explicit CLI options
(in increasing order of priority).
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from starknet_py.net.models import StarknetChainId

from .serde import parse_felt

# Default config directory
COFIBLOCKS_DIR = Path.home() / ".cofiblocks"
COFIBLOCKS_ENV = COFIBLOCKS_DIR / ".env"

RPC_URL_ENV = "STARKNET_RPC_URL"
CLASS_HASH_ENV = "COFIBLOCKS_CLASS_HASH"


class NetworkNotSupportedError(RuntimeError):
    pass


class Network(str, enum.Enum):
    MAINNET = "mainnet"
    SEPOLIA = "sepolia"

    @classmethod
    def default(cls) -> "Network":
        return cls.SEPOLIA


_RPC_URLS: dict[Network, str] = {
    Network.MAINNET: "https://starknet-mainnet.public.blastapi.io/rpc/v0_8",
    Network.SEPOLIA: "https://starknet-sepolia.public.blastapi.io/rpc/v0_8",
}

_CHAIN_IDS: dict[Network, int] = {
    Network.MAINNET: StarknetChainId.MAINNET,
    Network.SEPOLIA: StarknetChainId.SEPOLIA,
}

# Declared ERC-1155 class.  Mainnet has not been declared yet.
_CLASS_HASHES: dict[Network, int] = {
    Network.SEPOLIA: 0x0120D1F2225704B003E77077B8507907D2A84239BEF5E0ABB67462495EDD644F,
}


@dataclass(frozen=True)
class NetworkConfig:
    network: Network
    rpc_url: str
    chain_id: int
    class_hash_override: Optional[int] = None

    @property
    def class_hash(self) -> int:
        """Class hash of the ERC-1155 contract on this network.

        Raises:
            NetworkNotSupportedError: If no class is known for the network
        """
        if self.class_hash_override is not None:
            return self.class_hash_override
        try:
            return _CLASS_HASHES[self.network]
        except KeyError:
            raise NetworkNotSupportedError(
                f"No ERC-1155 class hash known for {self.network.value}. "
                f"Pass --class-hash or set {CLASS_HASH_ENV}."
            ) from None


def load_config(env_path: Optional[Path] = None) -> Optional[Path]:
    """Load ``~/.cofiblocks/.env`` into the process environment.

    Values already present in the environment win.  Returns the loaded
    path, or None if there is no config file.
    """
    env_path = env_path or COFIBLOCKS_ENV
    if not env_path.exists():
        return None
    load_dotenv(env_path, override=False)
    return env_path


def resolve_network(
    network: Network | str | None = None,
    rpc_url: Optional[str] = None,
    class_hash: Optional[str] = None,
) -> NetworkConfig:
    """
    Resolve the parameters of a network.

    Args:
        network: Network name (default: sepolia)
        rpc_url: RPC endpoint override (falls back to STARKNET_RPC_URL)
        class_hash: Hex class hash override (falls back to COFIBLOCKS_CLASS_HASH)

    Returns:
        NetworkConfig with every parameter resolved except a missing class hash,
        which only fails when a deployment asks for it.
    """
    network = Network(network) if network is not None else Network.default()

    rpc_url = rpc_url or os.environ.get(RPC_URL_ENV) or _RPC_URLS[network]
    class_hash = class_hash or os.environ.get(CLASS_HASH_ENV)

    return NetworkConfig(
        network=network,
        rpc_url=rpc_url,
        chain_id=_CHAIN_IDS[network],
        class_hash_override=parse_felt(class_hash) if class_hash else None,
    )

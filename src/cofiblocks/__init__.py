__all__ = [
    # Specification
    "ContractSpec",
    "TokenInfo",
    "load_spec",
    "SchemaRegistry",
    "SchemaValidationError",
    # Felt encoding
    "FIELD_PRIME",
    "decode_u256_array",
    "encode_balance_query",
    "encode_constructor_args",
    "parse_felt",
    "parse_token_id",
    "split_u256",
    # Network
    "Network",
    "NetworkConfig",
    "NetworkNotSupportedError",
    "resolve_network",
    # Keystore
    "KeystoreError",
    "load_key_pair",
    # RPC
    "RpcError",
    "TransactionRevertedError",
    "call_contract",
    "wait_for_receipt",
    # Deployment
    "DeploymentResult",
    "deploy_contract",
]

from .pneuma.network import Network, NetworkConfig, NetworkNotSupportedError, resolve_network
from .pneuma.rpc import RpcError, TransactionRevertedError, call_contract, wait_for_receipt
from .pneuma.serde import (
    FIELD_PRIME,
    decode_u256_array,
    encode_balance_query,
    encode_constructor_args,
    parse_felt,
    parse_token_id,
    split_u256,
)
from .pneuma.tx import DeploymentResult, deploy_contract
from .sigil.keystore import KeystoreError, load_key_pair
from .spec.models import ContractSpec, TokenInfo, load_spec
from .spec.schemas import SchemaRegistry, SchemaValidationError

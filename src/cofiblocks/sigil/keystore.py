"""
Keystore Loading for Starknet signing accounts.

Starknet tooling (starkli, sncast) stores account keys in the Ethereum V3
JSON keystore format: scrypt/pbkdf2 key derivation + AES-128-CTR.  The
decryption itself is delegated to eth-account; the recovered secret is a
Stark curve private key and is wrapped in a starknet.py KeyPair.
"""

from __future__ import annotations

import json
from pathlib import Path

from eth_account import Account
from starknet_py.constants import EC_ORDER
from starknet_py.net.signer.stark_curve_signer import KeyPair

_CRYPTO_FIELDS = ("cipher", "cipherparams", "ciphertext", "kdf", "kdfparams", "mac")


class KeystoreError(ValueError):
    pass


def read_keystore(path: Path) -> dict:
    """
    Read a V3 keystore file.

    Raises:
        FileNotFoundError: If the keystore doesn't exist
        KeystoreError: If the file is not a JSON keystore
    """
    if not path.is_file():
        raise FileNotFoundError(f"keystore file not found: {path}")

    try:
        keystore = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise KeystoreError(f"Keystore {path} is not valid JSON: {exc}") from exc

    if not isinstance(keystore, dict):
        raise KeystoreError(f"Keystore {path} is not a JSON object")
    if keystore.get("version") != 3:
        raise KeystoreError(f"Keystore {path} is not a version 3 keystore")

    crypto = keystore.get("crypto", keystore.get("Crypto"))
    if not isinstance(crypto, dict):
        raise KeystoreError(f"Keystore {path} has no 'crypto' section")
    missing = [field for field in _CRYPTO_FIELDS if field not in crypto]
    if missing:
        raise KeystoreError(f"Keystore {path} 'crypto' section is missing: {', '.join(missing)}")
    return keystore


def decrypt_private_key(keystore: dict, password: str) -> int:
    """Decrypt a keystore and return the private key as an integer."""
    try:
        secret = Account.decrypt(keystore, password)
    except ValueError as exc:
        # eth-account raises ValueError("MAC mismatch") on a wrong password
        raise KeystoreError(f"Unable to decrypt keystore: {exc}") from exc
    except (KeyError, TypeError) as exc:
        raise KeystoreError(f"Unable to decrypt keystore: malformed field {exc}") from exc

    private_key = int.from_bytes(bytes(secret), "big")
    if not 0 < private_key < EC_ORDER:
        raise KeystoreError("Keystore does not contain a valid Stark private key")
    return private_key


def key_pair_from_keystore(keystore: dict, password: str) -> KeyPair:
    return KeyPair.from_private_key(decrypt_private_key(keystore, password))


def load_key_pair(path: Path, password: str) -> KeyPair:
    """
    Build a Stark key pair from a keystore file.

    Args:
        path: Path to the V3 JSON keystore
        password: Keystore password

    Returns:
        KeyPair for signing transactions
    """
    return key_pair_from_keystore(read_keystore(path), password)

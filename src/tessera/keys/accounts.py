"""
Account resolution - ECDSA/secp256k1 accounts for signing.

Produces an ``Account`` from a private key, a BIP-39 mnemonic, an encrypted
(v3) keystore, or fresh entropy.  Nothing here is persisted.

Keystore encryption and decryption run the KDF (scrypt/pbkdf2) on a worker
thread so they do not stall other coroutines on the event loop.

Dependencies: eth-account (signing, HD derivation, keystore v3)
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from eth_account import Account as EthAccount
from eth_account.signers.local import LocalAccount

from ..config import TesseraConfig, default_config
from ..errors import DecryptionError, InvalidKeyError, InvalidMnemonicError
from ..schemas import KEYSTORE_SCHEMA, SchemaRegistry, SchemaValidationError
from ..utils import normalize_private_key

logger = logging.getLogger(__name__)

EthAccount.enable_unaudited_hdwallet_features()


@dataclass(frozen=True)
class Account:
    address: str
    private_key: str
    signer: LocalAccount
    mnemonic: Optional[str] = None
    derivation_path: Optional[str] = None

    @classmethod
    def from_local(
        cls,
        local: LocalAccount,
        mnemonic: Optional[str] = None,
        derivation_path: Optional[str] = None,
    ) -> "Account":
        return cls(
            address=local.address,
            private_key="0x" + bytes(local.key).hex(),
            signer=local,
            mnemonic=mnemonic,
            derivation_path=derivation_path,
        )

    def __repr__(self) -> str:
        return f"Account(address={self.address!r})"


def from_private_key(private_key: str) -> Account:
    """
    Resolve an account from a hex private key.

    Args:
        private_key: 32-byte hex private key, with or without 0x prefix

    Raises:
        InvalidKeyError: If the key is not a well-formed secp256k1 key
    """
    if not isinstance(private_key, str) or not private_key.strip():
        raise InvalidKeyError("Private key is empty")
    try:
        local = EthAccount.from_key(normalize_private_key(private_key))
    except Exception as exc:
        raise InvalidKeyError(f"Invalid private key: {exc}") from exc
    return Account.from_local(local)


def address_of(private_key: str) -> str:
    return from_private_key(private_key).address


def generate(
    derivation_path: Optional[str] = None,
    config: Optional[TesseraConfig] = None,
) -> Account:
    """
    Generate a new account with a 12-word recovery phrase.

    Entropy comes from the OS CSPRNG (via eth-account's mnemonic generator).
    """
    config = config or default_config()
    path = derivation_path or config.default_derivation_path
    local, mnemonic = EthAccount.create_with_mnemonic(account_path=path)
    logger.info("Generated account %s at %s", local.address, path)
    return Account.from_local(local, mnemonic=mnemonic, derivation_path=path)


def from_mnemonic(
    mnemonic: str,
    derivation_path: Optional[str] = None,
    config: Optional[TesseraConfig] = None,
) -> Account:
    """
    Derive an account from a BIP-39 phrase.

    Raises:
        InvalidMnemonicError: Unknown words, wrong length or bad checksum
    """
    config = config or default_config()
    path = derivation_path or config.default_derivation_path
    phrase = " ".join(mnemonic.split())
    try:
        local = EthAccount.from_mnemonic(phrase, account_path=path)
    except Exception as exc:
        raise InvalidMnemonicError(f"Invalid mnemonic: {exc}") from exc
    return Account.from_local(local, mnemonic=phrase, derivation_path=path)


def _load_keystore(keystore: Union[str, dict[str, Any]]) -> dict[str, Any]:
    if isinstance(keystore, str):
        try:
            keystore = json.loads(keystore)
        except json.JSONDecodeError as exc:
            raise DecryptionError(f"Keystore is not valid JSON: {exc}") from exc
    if isinstance(keystore, dict) and "crypto" not in keystore and "Crypto" in keystore:
        # ethers and older geth write "Crypto"; eth-keyfile reads only "crypto"
        keystore = {**keystore, "crypto": keystore["Crypto"]}
        del keystore["Crypto"]
    try:
        SchemaRegistry.default().validate_instance(keystore, KEYSTORE_SCHEMA)
    except SchemaValidationError as exc:
        raise DecryptionError(f"Malformed keystore: {exc}") from exc
    return keystore  # type: ignore[return-value]


def _decrypt(keystore: dict[str, Any], password: str) -> Account:
    try:
        key = EthAccount.decrypt(keystore, password)
    except Exception as exc:
        raise DecryptionError(f"Could not decrypt keystore: {exc}") from exc
    return Account.from_local(EthAccount.from_key(key))


async def from_encrypted_keystore(
    keystore: Union[str, dict[str, Any]],
    password: str,
) -> Account:
    """
    Decrypt a v3 keystore.

    Raises:
        DecryptionError: Wrong password or malformed keystore
    """
    document = _load_keystore(keystore)
    return await asyncio.to_thread(_decrypt, document, password)


async def to_encrypted_keystore(
    private_key: str,
    password: str,
    kdf: Optional[str] = None,
    iterations: Optional[int] = None,
) -> str:
    """
    Encrypt a private key into a v3 keystore.

    Args:
        private_key: Hex private key
        password: Keystore password
        kdf: "scrypt" (default) or "pbkdf2"
        iterations: KDF work factor override

    Returns:
        Keystore JSON text
    """
    account = from_private_key(private_key)
    keystore = await asyncio.to_thread(
        EthAccount.encrypt,
        account.private_key,
        password,
        kdf=kdf,
        iterations=iterations,
    )
    return json.dumps(keystore)

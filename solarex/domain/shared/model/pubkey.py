"""Public key value helpers.

Keys travel through the domain as base58 strings, the same form used for
index keys and in the name-override table. Raw 32-byte keys found inside
account data are converted with solders.
"""

from typing import NewType

from solders.pubkey import Pubkey

PublicKeyString = NewType("PublicKeyString", str)

PUBKEY_LENGTH = 32


def pubkey_from_bytes(raw: bytes) -> PublicKeyString:
    """Encode 32 raw key bytes as a base58 string."""
    return PublicKeyString(str(Pubkey.from_bytes(raw)))


def pubkey_to_bytes(key: str) -> bytes:
    """Decode a base58 key string back into its 32 raw bytes."""
    return bytes(Pubkey.from_string(key))

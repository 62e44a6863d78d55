"""Virtual accounts that let one NFT own another.

An NFT is given an account id made of a fixed salt followed by the
little-endian collection id and NFT id, padded with zero bytes to the
width of an ordinary account id.
"""

from __future__ import annotations

import struct
from typing import Optional, Tuple

SALT_RMRK_NFT = b"RmrkNft/"
ACCOUNT_ID_LENGTH = 32
_U32_MAX = 0xFFFF_FFFF
_IDS = struct.Struct("<II")
_ENCODED_LENGTH = len(SALT_RMRK_NFT) + _IDS.size


def _check_u32(name: str, value: int) -> None:
    if not 0 <= value <= _U32_MAX:
        raise ValueError(f"{name} must fit in an unsigned 32-bit integer, got {value}")


def nft_to_account_id(collection_id: int, nft_id: int) -> bytes:
    """Return the virtual account id that stands for the given NFT."""
    _check_u32("collection_id", collection_id)
    _check_u32("nft_id", nft_id)
    encoded = SALT_RMRK_NFT + _IDS.pack(collection_id, nft_id)
    return encoded.ljust(ACCOUNT_ID_LENGTH, b"\x00")


def decode_nft_account_id(account_id: bytes) -> Optional[Tuple[int, int]]:
    """Return ``(collection_id, nft_id)`` if the account is an NFT's virtual account.

    Ordinary accounts yield ``None``. The salt prefix and an all-zero suffix
    are both required, so a real account cannot pass for an NFT by accident.
    """
    raw = bytes(account_id)
    if len(raw) < _ENCODED_LENGTH:
        return None
    prefix = raw[: len(SALT_RMRK_NFT)]
    suffix = raw[_ENCODED_LENGTH:]
    if prefix != SALT_RMRK_NFT or any(suffix):
        return None
    collection_id, nft_id = _IDS.unpack_from(raw, len(SALT_RMRK_NFT))
    return collection_id, nft_id


def account_from_byte(value: int) -> bytes:
    """Return an account id whose every byte is ``value``."""
    if not 0 <= value <= 0xFF:
        raise ValueError(f"byte value out of range: {value}")
    return bytes([value]) * ACCOUNT_ID_LENGTH
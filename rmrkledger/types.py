"""Records stored by the NFT ledger."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

PERMILL_ACCURACY = 1_000_000


def permill_from_float(value: float) -> int:
    """Convert a fraction to parts per million, clamped to [0, 1] and truncated."""
    if math.isnan(value):
        return 0
    clamped = min(max(value, 0.0), 1.0)
    return int(clamped * PERMILL_ACCURACY)


@dataclass(frozen=True)
class AccountOwner:
    """An NFT owned directly by an account."""

    account_id: bytes


@dataclass(frozen=True)
class NftOwner:
    """An NFT owned by another NFT."""

    collection_id: int
    nft_id: int


Owner = Union[AccountOwner, NftOwner]


@dataclass
class RoyaltyInfo:
    """Royalty recipient and amount in parts per million."""

    recipient: bytes
    amount: int


@dataclass
class CollectionInfo:
    """A collection of NFTs."""

    issuer: bytes
    metadata: bytes
    max: Optional[int]
    symbol: bytes
    nfts_count: int = 0


@dataclass
class NftInfo:
    """A single NFT's record."""

    owner: Owner
    royalty: Optional[RoyaltyInfo]
    metadata: bytes
    equipped: bool
    pending: bool
    transferable: bool


@dataclass
class BasicResource:
    """A plain media resource."""

    src: Optional[bytes] = None
    metadata: Optional[bytes] = None
    license: Optional[bytes] = None
    thumb: Optional[bytes] = None


@dataclass
class ComposableResource:
    """A resource built from parts of a base, optionally fitting a slot."""

    parts: Tuple[int, ...]
    base: int
    src: Optional[bytes] = None
    metadata: Optional[bytes] = None
    slot: Optional[Tuple[int, int]] = None
    license: Optional[bytes] = None
    thumb: Optional[bytes] = None


@dataclass
class SlotResource:
    """A resource that fits a particular slot of a base."""

    base: int
    slot: int
    src: Optional[bytes] = None
    metadata: Optional[bytes] = None
    license: Optional[bytes] = None
    thumb: Optional[bytes] = None


Resource = Union[BasicResource, ComposableResource, SlotResource]


@dataclass
class ResourceInfo:
    """A resource attached to an NFT along with its approval state."""

    id: int
    pending: bool
    pending_removal: bool
    resource: Resource


@dataclass(frozen=True)
class ClassInfo:
    """Legacy class record: issuer, metadata, maximum and symbol."""

    issuer: bytes
    metadata: bytes
    max: int
    symbol: bytes


@dataclass(frozen=True)
class InstanceInfo:
    """Legacy instance record: royalty recipient, royalty and metadata."""

    recipient: bytes
    royalty: int
    metadata: bytes
"""Events emitted by the NFT ledger."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rmrkledger.types import Owner


@dataclass(frozen=True, kw_only=True)
class CollectionCreated:
    issuer: bytes
    collection_id: int


@dataclass(frozen=True, kw_only=True)
class NftMinted:
    owner: Owner
    collection_id: int
    nft_id: int


@dataclass(frozen=True, kw_only=True)
class NftBurned:
    owner: bytes
    nft_id: int


@dataclass(frozen=True, kw_only=True)
class CollectionDestroyed:
    issuer: bytes
    collection_id: int


@dataclass(frozen=True, kw_only=True)
class NftSent:
    sender: bytes
    recipient: Owner
    collection_id: int
    nft_id: int
    approval_required: bool


@dataclass(frozen=True, kw_only=True)
class NftAccepted:
    sender: bytes
    recipient: Owner
    collection_id: int
    nft_id: int


@dataclass(frozen=True, kw_only=True)
class NftRejected:
    sender: bytes
    collection_id: int
    nft_id: int


@dataclass(frozen=True, kw_only=True)
class IssuerChanged:
    old_issuer: bytes
    new_issuer: bytes
    collection_id: int


@dataclass(frozen=True, kw_only=True)
class PropertySet:
    collection_id: int
    maybe_nft_id: Optional[int]
    key: bytes
    value: bytes


@dataclass(frozen=True, kw_only=True)
class CollectionLocked:
    issuer: bytes
    collection_id: int


@dataclass(frozen=True, kw_only=True)
class ResourceAdded:
    nft_id: int
    resource_id: int


@dataclass(frozen=True, kw_only=True)
class ResourceAccepted:
    nft_id: int
    resource_id: int


@dataclass(frozen=True, kw_only=True)
class ResourceRemoval:
    nft_id: int
    resource_id: int


@dataclass(frozen=True, kw_only=True)
class ResourceRemovalAccepted:
    nft_id: int
    resource_id: int


@dataclass(frozen=True, kw_only=True)
class PrioritySet:
    collection_id: int
    nft_id: int
"""Signed ledger operations, each applied atomically and announced by an event."""

from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from rmrkledger.accounts import nft_to_account_id
from rmrkledger.errors import ErrorCode, RmrkError
from rmrkledger.events import (
    CollectionCreated,
    CollectionDestroyed,
    CollectionLocked,
    IssuerChanged,
    NftAccepted,
    NftBurned,
    NftMinted,
    NftRejected,
    NftSent,
    PrioritySet,
    PropertySet,
    ResourceAccepted,
    ResourceAdded,
    ResourceRemoval,
    ResourceRemovalAccepted,
)
from rmrkledger.ledger import Ledger
from rmrkledger.types import (
    AccountOwner,
    BasicResource,
    ComposableResource,
    NftOwner,
    Owner,
    Resource,
    SlotResource,
)

Event = Union[
    CollectionCreated,
    CollectionDestroyed,
    CollectionLocked,
    IssuerChanged,
    NftAccepted,
    NftBurned,
    NftMinted,
    NftRejected,
    NftSent,
    PrioritySet,
    PropertySet,
    ResourceAccepted,
    ResourceAdded,
    ResourceRemoval,
    ResourceRemovalAccepted,
]


@dataclass(frozen=True)
class Limits:
    """Size limits and recursion depth the ledger enforces."""

    max_recursions: int = 4
    resource_symbol_limit: int = 10
    parts_limit: int = 50
    max_priorities: int = 3
    collection_symbol_limit: int = 100
    max_resources_on_mint: int = 3
    string_limit: int = 32
    key_limit: int = 32
    value_limit: int = 64


def _bounded(value, limit: int):
    if value is not None and len(value) > limit:
        raise RmrkError(ErrorCode.TOO_LONG)
    return value


class RmrkCore:
    """Entry points for collection, NFT, resource, property and priority operations.

    Every operation either succeeds completely and records an event, or raises
    and leaves the ledger exactly as it was.
    """

    def __init__(self, limits: Optional[Limits] = None) -> None:
        self.limits = limits if limits is not None else Limits()
        self.ledger = Ledger(self.limits.max_recursions)
        self.events: List[Event] = []

    def last_event(self) -> Optional[Event]:
        """Return the most recent event, or ``None`` if nothing has happened yet."""
        return self.events[-1] if self.events else None

    @contextmanager
    def _transaction(self) -> Iterator[Ledger]:
        snapshot = copy.deepcopy(self.ledger)
        try:
            yield self.ledger
        except BaseException:
            self.ledger = snapshot
            raise

    def _check_issuer(self, collection_id: int, sender: bytes) -> None:
        issuer = self.ledger.uniques.collection_owner(collection_id)
        if issuer is None:
            raise RmrkError(ErrorCode.COLLECTION_UNKNOWN)
        if issuer != sender:
            raise RmrkError(ErrorCode.NO_PERMISSION)

    def _check_resource(self, resource: Resource) -> Resource:
        limit = self.limits.string_limit
        for name in ("src", "metadata", "license", "thumb"):
            _bounded(getattr(resource, name, None), limit)
        if isinstance(resource, ComposableResource):
            _bounded(resource.parts, self.limits.parts_limit)
        return resource

    def _check_resources(self, resources: Optional[Sequence[Resource]]) -> List[Resource]:
        if resources is None:
            return []
        _bounded(resources, self.limits.max_resources_on_mint)
        return [self._check_resource(res) for res in resources]

    def create_collection(
        self, sender: bytes, metadata: bytes, max: Optional[int], symbol: bytes
    ) -> int:
        """Create a collection issued by ``sender`` and return its id."""
        _bounded(metadata, self.limits.string_limit)
        _bounded(symbol, self.limits.collection_symbol_limit)
        with self._transaction() as ledger:
            collection_id = ledger.collection_create(sender, metadata, max, symbol)
            ledger.uniques.create_collection(collection_id, sender)
        self.events.append(CollectionCreated(issuer=sender, collection_id=collection_id))
        return collection_id

    def mint_nft(
        self,
        sender: bytes,
        owner: Optional[bytes],
        collection_id: int,
        royalty_recipient: Optional[bytes],
        royalty: Optional[int],
        metadata: bytes,
        transferable: bool,
        resources: Optional[Sequence[Resource]] = None,
    ) -> Tuple[int, int]:
        """Mint an NFT to ``owner`` (the sender if ``None``)."""
        _bounded(metadata, self.limits.string_limit)
        to_add = self._check_resources(resources)
        with self._transaction() as ledger:
            self._check_issuer(collection_id, sender)
            nft_owner = owner if owner is not None else sender
            collection_id, nft_id = ledger.nft_mint(
                sender,
                nft_owner,
                collection_id,
                royalty_recipient,
                royalty,
                metadata,
                transferable,
            )
            ledger.uniques.mint(collection_id, nft_id, nft_owner)
            for res in to_add:
                ledger.resource_add(sender, collection_id, nft_id, res, True)
        self.events.append(
            NftMinted(owner=AccountOwner(nft_owner), collection_id=collection_id, nft_id=nft_id)
        )
        return collection_id, nft_id

    def mint_nft_directly_to_nft(
        self,
        sender: bytes,
        owner: Tuple[int, int],
        collection_id: int,
        royalty_recipient: Optional[bytes],
        royalty: Optional[int],
        metadata: bytes,
        transferable: bool,
        resources: Optional[Sequence[Resource]] = None,
    ) -> Tuple[int, int]:
        """Mint an NFT owned by the NFT ``owner``."""
        _bounded(metadata, self.limits.string_limit)
        to_add = self._check_resources(resources)
        owner_cid, owner_nid = owner
        with self._transaction() as ledger:
            self._check_issuer(collection_id, sender)
            collection_id, nft_id = ledger.nft_mint_directly_to_nft(
                sender,
                (owner_cid, owner_nid),
                collection_id,
                royalty_recipient,
                royalty,
                metadata,
                transferable,
            )
            ledger.uniques.mint(collection_id, nft_id, nft_to_account_id(owner_cid, owner_nid))
            for res in to_add:
                ledger.resource_add(sender, collection_id, nft_id, res, True)
        self.events.append(
            NftMinted(
                owner=NftOwner(owner_cid, owner_nid),
                collection_id=collection_id,
                nft_id=nft_id,
            )
        )
        return collection_id, nft_id

    def burn_nft(self, sender: bytes, collection_id: int, nft_id: int, max_burns: int) -> None:
        """Burn an NFT root-owned by ``sender``, along with its descendants."""
        with self._transaction() as ledger:
            root_owner, _ = ledger.lookup_root_owner(collection_id, nft_id)
            if sender != root_owner:
                raise RmrkError(ErrorCode.NO_PERMISSION)
            _, nft_id = ledger.nft_burn(collection_id, nft_id, max_burns)
            ledger.uniques.burn(collection_id, nft_id)
        self.events.append(NftBurned(owner=sender, nft_id=nft_id))

    def destroy_collection(self, sender: bytes, collection_id: int) -> None:
        """Destroy an empty collection."""
        with self._transaction() as ledger:
            ledger.collection_burn(sender, collection_id)
            items = ledger.uniques.items_count(collection_id)
            if items is None:
                raise RmrkError(ErrorCode.NO_WITNESS)
            if items != 0:
                raise RmrkError(ErrorCode.COLLECTION_NOT_EMPTY)
            ledger.uniques.destroy_collection(collection_id)
        self.events.append(CollectionDestroyed(issuer=sender, collection_id=collection_id))

    def send(self, sender: bytes, collection_id: int, nft_id: int, new_owner: Owner) -> bool:
        """Send an NFT to an account or NFT; return whether approval is required."""
        with self._transaction() as ledger:
            account, approval_required = ledger.nft_send(sender, collection_id, nft_id, new_owner)
            ledger.uniques.transfer(collection_id, nft_id, account)
        self.events.append(
            NftSent(
                sender=sender,
                recipient=new_owner,
                collection_id=collection_id,
                nft_id=nft_id,
                approval_required=approval_required,
            )
        )
        return approval_required

    def accept_nft(
        self, sender: bytes, collection_id: int, nft_id: int, new_owner: Owner
    ) -> None:
        """Accept an NFT sent to ``sender`` or to an NFT ``sender`` root-owns."""
        with self._transaction() as ledger:
            account, collection_id, nft_id = ledger.nft_accept(
                sender, collection_id, nft_id, new_owner
            )
            ledger.uniques.transfer(collection_id, nft_id, account)
        self.events.append(
            NftAccepted(
                sender=sender, recipient=new_owner, collection_id=collection_id, nft_id=nft_id
            )
        )

    def reject_nft(self, sender: bytes, collection_id: int, nft_id: int) -> None:
        """Reject a pending NFT, burning it."""
        with self._transaction() as ledger:
            sender, collection_id, nft_id = ledger.nft_reject(
                sender, collection_id, nft_id, self.limits.max_recursions
            )
        self.events.append(NftRejected(sender=sender, collection_id=collection_id, nft_id=nft_id))

    def change_collection_issuer(
        self, sender: bytes, collection_id: int, new_issuer: bytes
    ) -> None:
        """Hand a collection over to ``new_issuer``."""
        with self._transaction() as ledger:
            collection = ledger.collections.get(collection_id)
            if collection is None:
                raise RmrkError(ErrorCode.COLLECTION_UNKNOWN)
            if collection.issuer != sender:
                raise RmrkError(ErrorCode.NO_PERMISSION)
            new_owner, collection_id = ledger.collection_change_issuer(collection_id, new_issuer)
            ledger.uniques.transfer_ownership(sender, collection_id, new_issuer)
        self.events.append(
            IssuerChanged(old_issuer=sender, new_issuer=new_owner, collection_id=collection_id)
        )

    def set_property(
        self,
        sender: bytes,
        collection_id: int,
        maybe_nft_id: Optional[int],
        key: bytes,
        value: bytes,
    ) -> None:
        """Set a property on a collection or one of its NFTs."""
        _bounded(key, self.limits.key_limit)
        _bounded(value, self.limits.value_limit)
        with self._transaction() as ledger:
            ledger.property_set(sender, collection_id, maybe_nft_id, key, value)
        self.events.append(
            PropertySet(
                collection_id=collection_id, maybe_nft_id=maybe_nft_id, key=key, value=value
            )
        )

    def lock_collection(self, sender: bytes, collection_id: int) -> None:
        """Prevent any further minting in a collection."""
        with self._transaction() as ledger:
            collection_id = ledger.collection_lock(sender, collection_id)
        self.events.append(CollectionLocked(issuer=sender, collection_id=collection_id))

    def _add_resource(
        self, sender: bytes, collection_id: int, nft_id: int, resource: Resource
    ) -> int:
        self._check_resource(resource)
        with self._transaction() as ledger:
            resource_id = ledger.resource_add(sender, collection_id, nft_id, resource, False)
        self.events.append(ResourceAdded(nft_id=nft_id, resource_id=resource_id))
        return resource_id

    def add_basic_resource(
        self, sender: bytes, collection_id: int, nft_id: int, resource: BasicResource
    ) -> int:
        """Add a basic resource to an NFT and return its id."""
        if not isinstance(resource, BasicResource):
            raise TypeError(f"expected a BasicResource, got {resource!r}")
        return self._add_resource(sender, collection_id, nft_id, resource)

    def add_composable_resource(
        self, sender: bytes, collection_id: int, nft_id: int, resource: ComposableResource
    ) -> int:
        """Add a composable resource to an NFT and return its id."""
        if not isinstance(resource, ComposableResource):
            raise TypeError(f"expected a ComposableResource, got {resource!r}")
        return self._add_resource(sender, collection_id, nft_id, resource)

    def add_slot_resource(
        self, sender: bytes, collection_id: int, nft_id: int, resource: SlotResource
    ) -> int:
        """Add a slot resource to an NFT and return its id."""
        if not isinstance(resource, SlotResource):
            raise TypeError(f"expected a SlotResource, got {resource!r}")
        return self._add_resource(sender, collection_id, nft_id, resource)

    def accept_resource(
        self, sender: bytes, collection_id: int, nft_id: int, resource_id: int
    ) -> None:
        """Accept a pending resource on an NFT ``sender`` root-owns."""
        with self._transaction() as ledger:
            info = ledger.resources.get((collection_id, nft_id, resource_id))
            if info is None:
                raise RmrkError(ErrorCode.RESOURCE_DOESNT_EXIST)
            owner, _ = ledger.lookup_root_owner(collection_id, nft_id)
            if owner != sender:
                raise RmrkError(ErrorCode.NO_PERMISSION)
            if not info.pending:
                raise RmrkError(ErrorCode.RESOURCE_NOT_PENDING)
            info.pending = False
        self.events.append(ResourceAccepted(nft_id=nft_id, resource_id=resource_id))

    def remove_resource(
        self, sender: bytes, collection_id: int, nft_id: int, resource_id: int
    ) -> None:
        """Remove a resource, or request its removal from the root owner."""
        with self._transaction() as ledger:
            ledger.resource_remove(sender, collection_id, nft_id, resource_id)
        self.events.append(ResourceRemoval(nft_id=nft_id, resource_id=resource_id))

    def accept_resource_removal(
        self, sender: bytes, collection_id: int, nft_id: int, resource_id: int
    ) -> None:
        """Confirm a requested resource removal."""
        with self._transaction() as ledger:
            ledger.accept_removal(sender, collection_id, nft_id, resource_id)
        self.events.append(ResourceRemovalAccepted(nft_id=nft_id, resource_id=resource_id))

    def set_priority(
        self, sender: bytes, collection_id: int, nft_id: int, priorities: Sequence[int]
    ) -> None:
        """Set the order in which an NFT's resources take priority."""
        _bounded(priorities, self.limits.max_priorities)
        with self._transaction() as ledger:
            ledger.priority_set(sender, collection_id, nft_id, list(priorities))
        self.events.append(PrioritySet(collection_id=collection_id, nft_id=nft_id))
"""Storage and rules for collections, nestable NFTs, resources, properties and priorities."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Set, Tuple

from rmrkledger.accounts import decode_nft_account_id, nft_to_account_id
from rmrkledger.errors import ErrorCode, RmrkError, UniquesError, UniquesErrorCode
from rmrkledger.types import (
    AccountOwner,
    BasicResource,
    CollectionInfo,
    ComposableResource,
    NftInfo,
    NftOwner,
    Owner,
    Resource,
    ResourceInfo,
    RoyaltyInfo,
    SlotResource,
)
from rmrkledger.uniques import Uniques

U32_MAX = 0xFFFF_FFFF

NftKey = Tuple[int, int]


def _fail(code: ErrorCode) -> RmrkError:
    return RmrkError(code)


class Ledger:
    """Holds the ledger's storage and applies its rules.

    The underlying item registry is kept in ``uniques`` and consults this
    ledger's locks before any transfer.
    """

    def __init__(self, max_recursions: int) -> None:
        self.max_recursions = max_recursions
        self.uniques = Uniques(locker=self.is_locked)
        self.collection_index = 0
        self.collections: Dict[int, CollectionInfo] = {}
        self.nfts: Dict[NftKey, NftInfo] = {}
        self.next_nft_id: Dict[int, int] = {}
        self.next_resource_id: Dict[NftKey, int] = {}
        self.priorities: Dict[Tuple[int, int, int], int] = {}
        self.resources: Dict[Tuple[int, int, int], ResourceInfo] = {}
        self.equippable_bases: Set[Tuple[int, int, int]] = set()
        self.equippable_slots: Set[Tuple[int, int, int, int, int]] = set()
        self.properties: Dict[Tuple[int, Optional[int], bytes], bytes] = {}
        self.locks: Dict[NftKey, bool] = {}
        self._children: Dict[NftKey, Dict[NftKey, None]] = {}

    # ----------------------------------------------------------------- locks

    def is_locked(self, collection_id: int, nft_id: int) -> bool:
        """Return whether the NFT is locked."""
        return self.locks.get((collection_id, nft_id), False)

    def set_lock(self, nft: NftKey, lock_status: bool) -> bool:
        """Set the lock state of an NFT and return it."""
        self.locks[tuple(nft)] = lock_status
        return lock_status

    def _ensure_unlocked(self, collection_id: int, nft_id: int) -> None:
        if self.is_locked(collection_id, nft_id):
            raise UniquesError(UniquesErrorCode.LOCKED)

    # ------------------------------------------------------------- ownership

    def lookup_root_owner(self, collection_id: int, nft_id: int) -> Tuple[bytes, NftKey]:
        """Follow NFT ownership up to an ordinary account.

        Returns the account and the topmost NFT below it.
        """
        while True:
            owner = self.uniques.owner(collection_id, nft_id)
            if owner is None:
                raise _fail(ErrorCode.NO_AVAILABLE_NFT_ID)
            parent = decode_nft_account_id(owner)
            if parent is None:
                return owner, (collection_id, nft_id)
            collection_id, nft_id = parent

    def is_x_descendent_of_y(
        self,
        child_collection_id: int,
        child_nft_id: int,
        parent_collection_id: int,
        parent_nft_id: int,
    ) -> bool:
        """Return whether the first NFT lies somewhere below the second."""
        current = (child_collection_id, child_nft_id)
        target = (parent_collection_id, parent_nft_id)
        while True:
            owner = self.uniques.owner(*current)
            if owner is None:
                return False
            parent = decode_nft_account_id(owner)
            if parent is None:
                return False
            if parent == target:
                return True
            current = parent

    def add_child(self, parent: NftKey, child: NftKey) -> None:
        """Record ``child`` as held by ``parent``."""
        self._children.setdefault(tuple(parent), {})[tuple(child)] = None

    def remove_child(self, parent: NftKey, child: NftKey) -> None:
        """Forget that ``parent`` holds ``child``."""
        parent = tuple(parent)
        children = self._children.get(parent)
        if children is None:
            return
        children.pop(tuple(child), None)
        if not children:
            del self._children[parent]

    def children_of(self, parent: NftKey) -> List[NftKey]:
        """Return the NFTs directly held by ``parent``."""
        return list(self._children.get(tuple(parent), {}))

    # ------------------------------------------------------------ id counters

    def get_next_nft_id(self, collection_id: int) -> int:
        """Reserve and return the next NFT id of a collection."""
        current = self.next_nft_id.get(collection_id, 0)
        if current >= U32_MAX:
            raise _fail(ErrorCode.NO_AVAILABLE_NFT_ID)
        self.next_nft_id[collection_id] = current + 1
        return current

    def get_next_resource_id(self, collection_id: int, nft_id: int) -> int:
        """Reserve and return the next resource id of an NFT."""
        key = (collection_id, nft_id)
        current = self.next_resource_id.get(key, 0)
        if current >= U32_MAX:
            raise _fail(ErrorCode.NO_AVAILABLE_RESOURCE_ID)
        self.next_resource_id[key] = current + 1
        return current

    # ---------------------------------------------------------------- checks

    def check_is_transferable(self, nft: NftInfo) -> None:
        """Raise unless the NFT may be transferred."""
        if not nft.transferable:
            raise _fail(ErrorCode.NON_TRANSFERABLE)

    def check_is_not_equipped(self, nft: NftInfo) -> None:
        """Raise if the NFT is currently equipped."""
        if nft.equipped:
            raise _fail(ErrorCode.CANNOT_SEND_EQUIPPED_ITEM)

    def _collection(self, collection_id: int) -> CollectionInfo:
        collection = self.collections.get(collection_id)
        if collection is None:
            raise _fail(ErrorCode.COLLECTION_UNKNOWN)
        return collection

    @staticmethod
    def _drop_prefix(storage: dict, prefix: NftKey) -> None:
        for key in [k for k in storage if k[:2] == prefix]:
            del storage[key]

    # ------------------------------------------------ priorities, properties

    def priority_set(
        self, sender: bytes, collection_id: int, nft_id: int, priorities: Iterable[int]
    ) -> None:
        """Replace the NFT's resource priorities with the given order."""
        root_owner, _ = self.lookup_root_owner(collection_id, nft_id)
        if sender != root_owner:
            raise _fail(ErrorCode.NO_PERMISSION)
        self._ensure_unlocked(collection_id, nft_id)
        self._drop_prefix(self.priorities, (collection_id, nft_id))
        for index, resource_id in enumerate(priorities):
            self.priorities[(collection_id, nft_id, resource_id)] = index

    def property_set(
        self,
        sender: bytes,
        collection_id: int,
        maybe_nft_id: Optional[int],
        key: bytes,
        value: bytes,
    ) -> None:
        """Set a property on a collection or on one of its NFTs."""
        collection = self._collection(collection_id)
        if collection.issuer != sender:
            raise _fail(ErrorCode.NO_PERMISSION)
        if maybe_nft_id is not None:
            self._ensure_unlocked(collection_id, maybe_nft_id)
            root_owner, _ = self.lookup_root_owner(collection_id, maybe_nft_id)
            if root_owner != collection.issuer:
                raise _fail(ErrorCode.NO_PERMISSION)
        self.properties[(collection_id, maybe_nft_id, key)] = value

    # ------------------------------------------------------------- resources

    def resource_add(
        self,
        sender: bytes,
        collection_id: int,
        nft_id: int,
        resource: Resource,
        adding_on_mint: bool,
    ) -> int:
        """Attach a resource to an NFT and return its id.

        The resource is pending when the sender is not the NFT's root owner,
        unless it is being added while the NFT is minted.
        """
        collection = self._collection(collection_id)
        resource_id = self.get_next_resource_id(collection_id, nft_id)
        if collection.issuer != sender:
            raise _fail(ErrorCode.NO_PERMISSION)
        root_owner, _ = self.lookup_root_owner(collection_id, nft_id)
        self._ensure_unlocked(collection_id, nft_id)

        if isinstance(resource, ComposableResource):
            self.equippable_bases.add((collection_id, nft_id, resource.base))
            if resource.slot is not None:
                base, slot = resource.slot
                self.equippable_slots.add((collection_id, nft_id, resource_id, base, slot))
        elif isinstance(resource, SlotResource):
            self.equippable_slots.add(
                (collection_id, nft_id, resource_id, resource.base, resource.slot)
            )
        elif not isinstance(resource, BasicResource):
            raise TypeError(f"unsupported resource: {resource!r}")

        pending = root_owner != sender and not adding_on_mint
        self.resources[(collection_id, nft_id, resource_id)] = ResourceInfo(
            id=resource_id, pending=pending, pending_removal=False, resource=resource
        )
        return resource_id

    def resource_accept(
        self, sender: bytes, collection_id: int, nft_id: int, resource_id: int
    ) -> None:
        """Clear the pending flag of a resource on an NFT the sender root-owns."""
        root_owner, _ = self.lookup_root_owner(collection_id, nft_id)
        if root_owner != sender:
            raise _fail(ErrorCode.NO_PERMISSION)
        self._ensure_unlocked(collection_id, nft_id)
        info = self.resources.get((collection_id, nft_id, resource_id))
        if info is not None:
            info.pending = False

    def resource_remove(
        self, sender: bytes, collection_id: int, nft_id: int, resource_id: int
    ) -> None:
        """Remove a resource, or mark it for removal if the issuer is not the root owner."""
        collection = self._collection(collection_id)
        root_owner, _ = self.lookup_root_owner(collection_id, nft_id)
        if collection.issuer != sender:
            raise _fail(ErrorCode.NO_PERMISSION)
        key = (collection_id, nft_id, resource_id)
        if key not in self.resources:
            raise _fail(ErrorCode.RESOURCE_DOESNT_EXIST)
        if root_owner == sender:
            del self.resources[key]
        else:
            self.resources[key].pending_removal = True

    def accept_removal(
        self, sender: bytes, collection_id: int, nft_id: int, resource_id: int
    ) -> None:
        """Confirm a pending resource removal."""
        root_owner, _ = self.lookup_root_owner(collection_id, nft_id)
        if root_owner != sender:
            raise _fail(ErrorCode.NO_PERMISSION)
        key = (collection_id, nft_id, resource_id)
        info = self.resources.get(key)
        if info is None:
            raise _fail(ErrorCode.RESOURCE_DOESNT_EXIST)
        if not info.pending_removal:
            raise _fail(ErrorCode.RESOURCE_NOT_PENDING)
        del self.resources[key]

    # ----------------------------------------------------------- collections

    def collection_create(
        self, issuer: bytes, metadata: bytes, max: Optional[int], symbol: bytes
    ) -> int:
        """Create a collection and return its id."""
        collection_id = self.collection_index
        if collection_id >= U32_MAX:
            raise _fail(ErrorCode.NO_AVAILABLE_COLLECTION_ID)
        self.collection_index = collection_id + 1
        self.collections[collection_id] = CollectionInfo(
            issuer=issuer, metadata=metadata, max=max, symbol=symbol, nfts_count=0
        )
        return collection_id

    def collection_burn(self, issuer: bytes, collection_id: int) -> None:
        """Delete an empty collection."""
        collection = self._collection(collection_id)
        if collection.nfts_count != 0:
            raise _fail(ErrorCode.COLLECTION_NOT_EMPTY)
        del self.collections[collection_id]

    def collection_change_issuer(
        self, collection_id: int, new_issuer: bytes
    ) -> Tuple[bytes, int]:
        """Give a collection a new issuer."""
        collection = self.collections.get(collection_id)
        if collection is None:
            raise _fail(ErrorCode.NO_AVAILABLE_COLLECTION_ID)
        collection.issuer = new_issuer
        return new_issuer, collection_id

    def collection_lock(self, sender: bytes, collection_id: int) -> int:
        """Cap a collection at its current number of NFTs."""
        collection = self._collection(collection_id)
        if collection.issuer != sender:
            raise _fail(ErrorCode.NO_PERMISSION)
        collection.max = collection.nfts_count
        return collection_id

    # ------------------------------------------------------------------ NFTs

    def _reserve_nft(self, collection_id: int) -> Tuple[int, CollectionInfo]:
        nft_id = self.get_next_nft_id(collection_id)
        collection = self._collection(collection_id)
        if collection.max is not None and nft_id >= collection.max:
            raise _fail(ErrorCode.COLLECTION_FULL_OR_LOCKED)
        return nft_id, collection

    def _store_minted(
        self, collection: CollectionInfo, collection_id: int, nft_id: int, nft: NftInfo
    ) -> None:
        self.nfts[(collection_id, nft_id)] = nft
        if collection.nfts_count >= U32_MAX:
            raise OverflowError("collection NFT count overflow")
        collection.nfts_count += 1

    @staticmethod
    def _royalty(
        recipient: Optional[bytes], amount: Optional[int], fallback: bytes
    ) -> Optional[RoyaltyInfo]:
        if amount is None:
            return None
        return RoyaltyInfo(recipient=recipient if recipient is not None else fallback, amount=amount)

    def nft_mint(
        self,
        sender: bytes,
        owner: bytes,
        collection_id: int,
        royalty_recipient: Optional[bytes],
        royalty_amount: Optional[int],
        metadata: bytes,
        transferable: bool,
    ) -> NftKey:
        """Mint an NFT to an account; pending when the owner is not the sender."""
        nft_id, collection = self._reserve_nft(collection_id)
        nft = NftInfo(
            owner=AccountOwner(owner),
            royalty=self._royalty(royalty_recipient, royalty_amount, sender),
            metadata=metadata,
            equipped=False,
            pending=owner != sender,
            transferable=transferable,
        )
        self._store_minted(collection, collection_id, nft_id, nft)
        return collection_id, nft_id

    def nft_mint_directly_to_nft(
        self,
        sender: bytes,
        owner: NftKey,
        collection_id: int,
        royalty_recipient: Optional[bytes],
        royalty_amount: Optional[int],
        metadata: bytes,
        transferable: bool,
    ) -> NftKey:
        """Mint an NFT owned by another NFT; pending when that NFT's root owner is not the sender."""
        nft_id, collection = self._reserve_nft(collection_id)
        owner_cid, owner_nid = owner
        root_owner, _ = self.lookup_root_owner(owner_cid, owner_nid)
        nft = NftInfo(
            owner=NftOwner(owner_cid, owner_nid),
            royalty=self._royalty(royalty_recipient, royalty_amount, root_owner),
            metadata=metadata,
            equipped=False,
            pending=root_owner != sender,
            transferable=transferable,
        )
        self._store_minted(collection, collection_id, nft_id, nft)
        return collection_id, nft_id

    def nft_burn(self, collection_id: int, nft_id: int, max_recursions: int) -> NftKey:
        """Burn an NFT together with everything nested inside it."""
        if max_recursions <= 0:
            raise _fail(ErrorCode.TOO_MANY_RECURSIONS)
        key = (collection_id, nft_id)
        nft = self.nfts.get(key)
        if nft is not None and isinstance(nft.owner, NftOwner):
            self.remove_child((nft.owner.collection_id, nft.owner.nft_id), key)
        self.nfts.pop(key, None)
        self._drop_prefix(self.resources, key)
        for child_cid, child_nid in self._children.pop(key, {}):
            self.nft_burn(child_cid, child_nid, max_recursions - 1)
        collection = self._collection(collection_id)
        collection.nfts_count = max(collection.nfts_count - 1, 0)
        return key

    def _target_account(
        self, collection_id: int, nft_id: int, target: NftOwner
    ) -> Tuple[bytes, bytes]:
        cid, nid = target.collection_id, target.nft_id
        if (cid, nid) not in self.nfts:
            raise _fail(ErrorCode.NO_AVAILABLE_NFT_ID)
        if (collection_id, nft_id) == (cid, nid):
            raise _fail(ErrorCode.CANNOT_SEND_TO_DESCENDENT_OR_SELF)
        if self.is_x_descendent_of_y(cid, nid, collection_id, nft_id):
            raise _fail(ErrorCode.CANNOT_SEND_TO_DESCENDENT_OR_SELF)
        recipient_root, _ = self.lookup_root_owner(cid, nid)
        return nft_to_account_id(cid, nid), recipient_root

    def nft_send(
        self, sender: bytes, collection_id: int, nft_id: int, new_owner: Owner
    ) -> Tuple[bytes, bool]:
        """Prepare sending an NFT to an account or NFT.

        Returns the account the item registry should transfer to and whether
        the recipient must approve the transfer.
        """
        parent = self.uniques.owner(collection_id, nft_id)
        if parent is None:
            raise _fail(ErrorCode.NO_AVAILABLE_NFT_ID)
        root_owner, _ = self.lookup_root_owner(collection_id, nft_id)
        if sender != root_owner:
            raise _fail(ErrorCode.NO_PERMISSION)
        key = (collection_id, nft_id)
        nft = self.nfts.get(key)
        if nft is None:
            raise _fail(ErrorCode.NO_AVAILABLE_NFT_ID)
        self.check_is_transferable(nft)
        self.check_is_not_equipped(nft)

        if isinstance(new_owner, AccountOwner):
            approval_required = False
            new_owner_account = new_owner.account_id
        elif isinstance(new_owner, NftOwner):
            new_owner_account, recipient_root = self._target_account(
                collection_id, nft_id, new_owner
            )
            approval_required = recipient_root != root_owner
        else:
            raise TypeError(f"unsupported owner: {new_owner!r}")

        if approval_required:
            nft.pending = True
        else:
            self.nfts[key] = replace(nft, owner=new_owner)

        current_parent = decode_nft_account_id(parent)
        if current_parent is not None:
            self.remove_child(current_parent, key)
        new_parent = decode_nft_account_id(new_owner_account)
        if new_parent is not None:
            self.add_child(new_parent, key)

        return new_owner_account, approval_required

    def nft_accept(
        self, sender: bytes, collection_id: int, nft_id: int, new_owner: Owner
    ) -> Tuple[bytes, int, int]:
        """Accept a pending NFT for an account or an NFT the sender root-owns."""
        root_owner, _ = self.lookup_root_owner(collection_id, nft_id)
        if sender != root_owner:
            raise _fail(ErrorCode.NO_PERMISSION)
        nft = self.nfts.get((collection_id, nft_id))
        if nft is None:
            raise _fail(ErrorCode.NO_AVAILABLE_NFT_ID)

        if isinstance(new_owner, AccountOwner):
            new_owner_account = new_owner.account_id
        elif isinstance(new_owner, NftOwner):
            new_owner_account, recipient_root = self._target_account(
                collection_id, nft_id, new_owner
            )
            if recipient_root != root_owner:
                raise _fail(ErrorCode.CANNOT_ACCEPT_NON_OWNED_NFT)
        else:
            raise TypeError(f"unsupported owner: {new_owner!r}")

        nft.pending = False
        return new_owner_account, collection_id, nft_id

    def nft_reject(
        self, sender: bytes, collection_id: int, nft_id: int, max_recursions: int
    ) -> Tuple[bytes, int, int]:
        """Reject a pending NFT, which burns it along with its children."""
        root_owner, _ = self.lookup_root_owner(collection_id, nft_id)
        nft = self.nfts.get((collection_id, nft_id))
        if nft is None:
            raise _fail(ErrorCode.NO_AVAILABLE_NFT_ID)
        if not nft.pending:
            raise _fail(ErrorCode.CANNOT_REJECT_NON_PENDING_NFT)
        if sender != root_owner:
            raise _fail(ErrorCode.CANNOT_REJECT_NON_OWNED_NFT)

        parent_account = self.uniques.owner(collection_id, nft_id)
        if parent_account is not None:
            parent = decode_nft_account_id(parent_account)
            if parent is not None:
                self.remove_child(parent, (collection_id, nft_id))

        self.nft_burn(collection_id, nft_id, max_recursions)
        return sender, collection_id, nft_id
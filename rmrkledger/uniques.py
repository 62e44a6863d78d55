"""A registry of unique items grouped into collections."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from rmrkledger.errors import UniquesError, UniquesErrorCode

Locker = Callable[[int, int], bool]


@dataclass
class _Collection:
    owner: bytes
    items: Dict[int, bytes] = field(default_factory=dict)


class Uniques:
    """Keeps collection owners and item owners.

    ``locker`` is asked whether an item is locked before it is transferred.
    """

    def __init__(self, locker: Optional[Locker] = None) -> None:
        self._locker: Locker = locker if locker is not None else (lambda _c, _i: False)
        self._collections: Dict[int, _Collection] = {}
        self._ownership_acceptance: Dict[bytes, int] = {}

    def _collection(self, collection_id: int) -> _Collection:
        try:
            return self._collections[collection_id]
        except KeyError:
            raise UniquesError(UniquesErrorCode.UNKNOWN_COLLECTION) from None

    def create_collection(self, collection_id: int, owner: bytes) -> None:
        """Register a new collection owned by ``owner``."""
        if collection_id in self._collections:
            raise UniquesError(UniquesErrorCode.IN_USE)
        self._collections[collection_id] = _Collection(owner=owner)

    def destroy_collection(self, collection_id: int) -> None:
        """Remove an empty collection."""
        collection = self._collection(collection_id)
        if collection.items:
            raise UniquesError(UniquesErrorCode.IN_USE)
        del self._collections[collection_id]

    def collection_owner(self, collection_id: int) -> Optional[bytes]:
        """Return the owner of a collection, or ``None`` if it does not exist."""
        collection = self._collections.get(collection_id)
        return collection.owner if collection is not None else None

    def items_count(self, collection_id: int) -> Optional[int]:
        """Return how many items a collection holds, or ``None`` if it does not exist."""
        collection = self._collections.get(collection_id)
        return len(collection.items) if collection is not None else None

    def owner(self, collection_id: int, item_id: int) -> Optional[bytes]:
        """Return the owner of an item, or ``None`` if it does not exist."""
        collection = self._collections.get(collection_id)
        if collection is None:
            return None
        return collection.items.get(item_id)

    def mint(self, collection_id: int, item_id: int, owner: bytes) -> None:
        """Create an item in a collection."""
        collection = self._collection(collection_id)
        if item_id in collection.items:
            raise UniquesError(UniquesErrorCode.ALREADY_EXISTS)
        collection.items[item_id] = owner

    def burn(self, collection_id: int, item_id: int) -> None:
        """Remove an item."""
        collection = self._collection(collection_id)
        if item_id not in collection.items:
            raise UniquesError(UniquesErrorCode.UNKNOWN_ITEM)
        del collection.items[item_id]

    def transfer(self, collection_id: int, item_id: int, new_owner: bytes) -> None:
        """Give an item to a new owner unless it is locked."""
        if self._locker(collection_id, item_id):
            raise UniquesError(UniquesErrorCode.LOCKED)
        collection = self._collection(collection_id)
        if item_id not in collection.items:
            raise UniquesError(UniquesErrorCode.UNKNOWN_ITEM)
        collection.items[item_id] = new_owner

    def set_accept_ownership(self, who: bytes, collection_id: Optional[int]) -> None:
        """Declare which collection ``who`` is willing to take over, or none."""
        if collection_id is None:
            self._ownership_acceptance.pop(who, None)
        else:
            self._ownership_acceptance[who] = collection_id

    def transfer_ownership(self, sender: bytes, collection_id: int, new_owner: bytes) -> None:
        """Hand a collection to ``new_owner``, who must have agreed to take it."""
        if self._ownership_acceptance.get(new_owner) != collection_id:
            raise UniquesError(UniquesErrorCode.UNACCEPTED)
        collection = self._collection(collection_id)
        if collection.owner != sender:
            raise UniquesError(UniquesErrorCode.NO_PERMISSION)
        if collection.owner == new_owner:
            return
        self._ownership_acceptance.pop(new_owner, None)
        collection.owner = new_owner
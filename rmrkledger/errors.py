"""Error codes and exceptions raised by the NFT ledger."""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Reasons the core ledger refuses an operation."""

    NONE_VALUE = "NoneValue"
    STORAGE_OVERFLOW = "StorageOverflow"
    TOO_LONG = "TooLong"
    NO_AVAILABLE_COLLECTION_ID = "NoAvailableCollectionId"
    NO_AVAILABLE_RESOURCE_ID = "NoAvailableResourceId"
    METADATA_NOT_SET = "MetadataNotSet"
    RECIPIENT_NOT_SET = "RecipientNotSet"
    NO_AVAILABLE_NFT_ID = "NoAvailableNftId"
    NOT_IN_RANGE = "NotInRange"
    ROYALTY_NOT_SET = "RoyaltyNotSet"
    COLLECTION_UNKNOWN = "CollectionUnknown"
    NO_PERMISSION = "NoPermission"
    NO_WITNESS = "NoWitness"
    COLLECTION_NOT_EMPTY = "CollectionNotEmpty"
    COLLECTION_FULL_OR_LOCKED = "CollectionFullOrLocked"
    CANNOT_SEND_TO_DESCENDENT_OR_SELF = "CannotSendToDescendentOrSelf"
    RESOURCE_ALREADY_EXISTS = "ResourceAlreadyExists"
    EMPTY_RESOURCE = "EmptyResource"
    TOO_MANY_RECURSIONS = "TooManyRecursions"
    NFT_IS_LOCKED = "NftIsLocked"
    CANNOT_ACCEPT_NON_OWNED_NFT = "CannotAcceptNonOwnedNft"
    CANNOT_REJECT_NON_OWNED_NFT = "CannotRejectNonOwnedNft"
    CANNOT_REJECT_NON_PENDING_NFT = "CannotRejectNonPendingNft"
    RESOURCE_DOESNT_EXIST = "ResourceDoesntExist"
    RESOURCE_NOT_PENDING = "ResourceNotPending"
    NON_TRANSFERABLE = "NonTransferable"
    CANNOT_SEND_EQUIPPED_ITEM = "CannotSendEquippedItem"


class UniquesErrorCode(Enum):
    """Reasons the underlying unique-item registry refuses an operation."""

    LOCKED = "Locked"
    UNACCEPTED = "Unaccepted"
    UNKNOWN_COLLECTION = "UnknownCollection"
    UNKNOWN_ITEM = "UnknownItem"
    ALREADY_EXISTS = "AlreadyExists"
    IN_USE = "InUse"
    NO_PERMISSION = "NoPermission"
    WRONG_OWNER = "WrongOwner"


class RmrkError(Exception):
    """Raised when a core ledger operation fails."""

    def __init__(self, code: ErrorCode) -> None:
        if not isinstance(code, ErrorCode):
            raise TypeError(f"expected an ErrorCode, got {code!r}")
        super().__init__(code.value)
        self.code = code

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RmrkError):
            return self.code is other.code
        return NotImplemented

    def __hash__(self) -> int:
        return hash((RmrkError, self.code))


class UniquesError(Exception):
    """Raised when an operation on the unique-item registry fails."""

    def __init__(self, code: UniquesErrorCode) -> None:
        if not isinstance(code, UniquesErrorCode):
            raise TypeError(f"expected a UniquesErrorCode, got {code!r}")
        super().__init__(code.value)
        self.code = code

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UniquesError):
            return self.code is other.code
        return NotImplemented

    def __hash__(self) -> int:
        return hash((UniquesError, self.code))
import dataclasses

import pytest

from rmrkledger.events import (
    CollectionCreated,
    IssuerChanged,
    NftAccepted,
    NftMinted,
    NftSent,
    PropertySet,
    ResourceAccepted,
    ResourceAdded,
    ResourceRemoval,
    ResourceRemovalAccepted,
)
from rmrkledger.types import AccountOwner, NftOwner

ALICE = bytes([1] * 32)
BOB = bytes([2] * 32)


def test_events_compare_by_value():
    assert CollectionCreated(issuer=ALICE, collection_id=0) == CollectionCreated(
        issuer=ALICE, collection_id=0
    )
    assert CollectionCreated(issuer=ALICE, collection_id=0) != CollectionCreated(
        issuer=BOB, collection_id=0
    )


def test_events_of_different_kinds_differ():
    assert ResourceAdded(nft_id=0, resource_id=0) != ResourceAccepted(nft_id=0, resource_id=0)
    assert ResourceRemoval(nft_id=0, resource_id=0) != ResourceRemovalAccepted(
        nft_id=0, resource_id=0
    )


def test_events_require_keywords():
    with pytest.raises(TypeError):
        CollectionCreated(ALICE, 0)


def test_events_are_frozen():
    event = NftMinted(owner=AccountOwner(ALICE), collection_id=0, nft_id=99)
    with pytest.raises(dataclasses.FrozenInstanceError):
        event.nft_id = 0
    assert event.nft_id == 99


def test_nft_sent_carries_recipient_kind():
    to_account = NftSent(
        sender=ALICE,
        recipient=AccountOwner(BOB),
        collection_id=0,
        nft_id=0,
        approval_required=False,
    )
    to_nft = NftSent(
        sender=ALICE,
        recipient=NftOwner(0, 0),
        collection_id=0,
        nft_id=1,
        approval_required=True,
    )
    assert to_account.recipient == AccountOwner(BOB)
    assert to_nft.recipient == NftOwner(0, 0)
    assert to_nft.approval_required is True


def test_events_are_hashable():
    first = NftAccepted(sender=BOB, recipient=NftOwner(0, 0), collection_id=0, nft_id=1)
    second = NftAccepted(sender=BOB, recipient=NftOwner(0, 0), collection_id=0, nft_id=1)
    assert len({first, second}) == 1


def test_property_set_optional_nft():
    event = PropertySet(collection_id=0, maybe_nft_id=None, key=b"test-key", value=b"test-value")
    assert event.maybe_nft_id is None
    assert event.key == b"test-key"


def test_issuer_changed_fields():
    event = IssuerChanged(old_issuer=ALICE, new_issuer=BOB, collection_id=0)
    assert (event.old_issuer, event.new_issuer) == (ALICE, BOB)
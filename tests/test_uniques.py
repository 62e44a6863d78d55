import pytest

from rmrkledger.accounts import account_from_byte
from rmrkledger.errors import UniquesError, UniquesErrorCode
from rmrkledger.uniques import Uniques

ALICE = account_from_byte(1)
BOB = account_from_byte(2)
CHARLIE = account_from_byte(3)


@pytest.fixture
def registry():
    uniques = Uniques()
    uniques.create_collection(0, ALICE)
    return uniques


def test_create_collection_sets_owner(registry):
    assert registry.collection_owner(0) == ALICE
    assert registry.items_count(0) == 0


def test_create_collection_twice_fails(registry):
    with pytest.raises(UniquesError) as info:
        registry.create_collection(0, BOB)
    assert info.value.code is UniquesErrorCode.IN_USE


def test_unknown_collection_queries_return_none(registry):
    assert registry.collection_owner(999) is None
    assert registry.items_count(999) is None
    assert registry.owner(999, 0) is None


def test_mint_and_owner(registry):
    registry.mint(0, 5, BOB)
    assert registry.owner(0, 5) == BOB
    assert registry.items_count(0) == 1


def test_mint_duplicate_fails(registry):
    registry.mint(0, 0, ALICE)
    with pytest.raises(UniquesError) as info:
        registry.mint(0, 0, BOB)
    assert info.value.code is UniquesErrorCode.ALREADY_EXISTS
    assert registry.owner(0, 0) == ALICE


def test_mint_into_unknown_collection_fails(registry):
    with pytest.raises(UniquesError) as info:
        registry.mint(7, 0, ALICE)
    assert info.value.code is UniquesErrorCode.UNKNOWN_COLLECTION


def test_burn_removes_item(registry):
    registry.mint(0, 0, ALICE)
    registry.burn(0, 0)
    assert registry.owner(0, 0) is None
    assert registry.items_count(0) == 0


def test_burn_unknown_item_fails(registry):
    with pytest.raises(UniquesError) as info:
        registry.burn(0, 3)
    assert info.value.code is UniquesErrorCode.UNKNOWN_ITEM


def test_transfer_changes_owner(registry):
    registry.mint(0, 0, ALICE)
    registry.transfer(0, 0, CHARLIE)
    assert registry.owner(0, 0) == CHARLIE


def test_transfer_unknown_item_fails(registry):
    with pytest.raises(UniquesError) as info:
        registry.transfer(0, 1, BOB)
    assert info.value.code is UniquesErrorCode.UNKNOWN_ITEM


def test_transfer_respects_locker():
    locked = {(0, 0)}
    uniques = Uniques(lambda c, i: (c, i) in locked)
    uniques.create_collection(0, ALICE)
    uniques.mint(0, 0, ALICE)
    uniques.mint(0, 1, ALICE)
    with pytest.raises(UniquesError) as info:
        uniques.transfer(0, 0, BOB)
    assert info.value.code is UniquesErrorCode.LOCKED
    assert uniques.owner(0, 0) == ALICE
    uniques.transfer(0, 1, BOB)
    assert uniques.owner(0, 1) == BOB


def test_destroy_empty_collection(registry):
    registry.destroy_collection(0)
    assert registry.collection_owner(0) is None


def test_destroy_non_empty_collection_fails(registry):
    registry.mint(0, 0, ALICE)
    with pytest.raises(UniquesError) as info:
        registry.destroy_collection(0)
    assert info.value.code is UniquesErrorCode.IN_USE
    assert registry.collection_owner(0) == ALICE


def test_destroy_unknown_collection_fails(registry):
    with pytest.raises(UniquesError) as info:
        registry.destroy_collection(42)
    assert info.value.code is UniquesErrorCode.UNKNOWN_COLLECTION


def test_transfer_ownership_requires_acceptance(registry):
    with pytest.raises(UniquesError) as info:
        registry.transfer_ownership(ALICE, 0, BOB)
    assert info.value.code is UniquesErrorCode.UNACCEPTED
    assert registry.collection_owner(0) == ALICE


def test_transfer_ownership_after_acceptance(registry):
    registry.set_accept_ownership(BOB, 0)
    registry.transfer_ownership(ALICE, 0, BOB)
    assert registry.collection_owner(0) == BOB
    # Former owner has not accepted anything, so handing it back to herself fails.
    with pytest.raises(UniquesError) as info:
        registry.transfer_ownership(ALICE, 0, ALICE)
    assert info.value.code is UniquesErrorCode.UNACCEPTED


def test_acceptance_is_consumed(registry):
    registry.set_accept_ownership(BOB, 0)
    registry.transfer_ownership(ALICE, 0, BOB)
    registry.set_accept_ownership(ALICE, 0)
    registry.transfer_ownership(BOB, 0, ALICE)
    with pytest.raises(UniquesError) as info:
        registry.transfer_ownership(ALICE, 0, BOB)
    assert info.value.code is UniquesErrorCode.UNACCEPTED


def test_transfer_ownership_by_non_owner_fails(registry):
    registry.set_accept_ownership(CHARLIE, 0)
    with pytest.raises(UniquesError) as info:
        registry.transfer_ownership(BOB, 0, CHARLIE)
    assert info.value.code is UniquesErrorCode.NO_PERMISSION
    assert registry.collection_owner(0) == ALICE


def test_clearing_acceptance(registry):
    registry.set_accept_ownership(BOB, 0)
    registry.set_accept_ownership(BOB, None)
    with pytest.raises(UniquesError) as info:
        registry.transfer_ownership(ALICE, 0, BOB)
    assert info.value.code is UniquesErrorCode.UNACCEPTED


def test_transfer_ownership_of_unknown_collection(registry):
    registry.set_accept_ownership(BOB, 9)
    with pytest.raises(UniquesError) as info:
        registry.transfer_ownership(ALICE, 9, BOB)
    assert info.value.code is UniquesErrorCode.UNKNOWN_COLLECTION
# rmrkledger

An in-memory ledger for nestable NFTs. NFTs belong to collections and are
owned either by an account or by another NFT. An NFT can carry resources
(basic, composable or slot), key/value properties and a resource priority
order.

Accounts are plain `bytes` values, normally 32 bytes long. Royalty amounts are
integers in parts per million.

## Installation

```
pip install rmrkledger
```

## Usage

`rmrkledger.pallet.RmrkCore` is the entry point. Each call takes the sending
account first. A successful call appends an event to `core.events`
(`core.last_event()` returns the newest). A failed call raises `RmrkError` or
`UniquesError` and leaves all state exactly as it was before the call.

```python
from rmrkledger.pallet import RmrkCore, Limits
from rmrkledger.accounts import account_from_byte
from rmrkledger.types import AccountOwner, NftOwner, BasicResource, permill_from_float

alice = account_from_byte(1)
bob = account_from_byte(2)

core = RmrkCore(Limits())
collection_id = core.create_collection(alice, b"meta", 5, b"SYM")    # 0
core.mint_nft(alice, None, collection_id, alice, permill_from_float(0.05), b"nft", True, None)
core.mint_nft(alice, None, collection_id, None, None, b"child", True, None)

# Nest NFT (0, 1) inside NFT (0, 0); both are Alice's, so no approval is needed
core.send(alice, 0, 1, NftOwner(0, 0))            # returns False

# Hand the parent to Bob; the nested child goes with it
core.send(alice, 0, 0, AccountOwner(bob))
print(core.last_event())
print(core.ledger.lookup_root_owner(0, 1))        # (bob, (0, 0))

# Alice, as issuer, adds a resource to Bob's NFT; it waits for Bob's approval
resource_id = core.add_basic_resource(alice, 0, 0, BasicResource(src=b"ipfs://x"))
core.accept_resource(bob, 0, 0, resource_id)
```

### Behaviour worth knowing

- Minting to another account, sending to an NFT whose root owner is someone
  else, and adding a resource to an NFT the issuer does not root-own all leave
  the item *pending* until the root owner accepts it. `reject_nft` burns a
  pending NFT together with everything nested inside it.
- Burning follows nested NFTs down at most `max_burns` levels (for
  `reject_nft`, `Limits.max_recursions`); deeper trees raise
  `ErrorCode.TOO_MANY_RECURSIONS`.
- A collection's `max` counts NFT ids ever minted, so burning does not free
  room. `lock_collection` caps the collection at its current count.
- `change_collection_issuer` only succeeds after the new issuer has called
  `core.ledger.uniques.set_accept_ownership(new_issuer, collection_id)`.
- Values longer than the bounds in `Limits` (metadata, symbols, keys, values,
  resource fields, parts, priorities, resources on mint) raise
  `ErrorCode.TOO_LONG`.
- A failed call restores a snapshot, so `core.ledger` may be a new object
  afterwards; look it up through `core` rather than holding on to it.

### Modules

- `rmrkledger.pallet`: `RmrkCore` with `create_collection`, `mint_nft`,
  `mint_nft_directly_to_nft`, `send`, `accept_nft`, `reject_nft`, `burn_nft`,
  `destroy_collection`, `change_collection_issuer`, `lock_collection`,
  `set_property`, `add_basic_resource`, `add_composable_resource`,
  `add_slot_resource`, `accept_resource`, `remove_resource`,
  `accept_resource_removal`, `set_priority` and `last_event`; and `Limits`,
  the size bounds and recursion depth.
- `rmrkledger.ledger`: `Ledger`, the storage (`collections`, `nfts`,
  `resources`, `properties`, `priorities`, `locks`, `equippable_bases`,
  `equippable_slots`) and the rules behind the calls, including
  `lookup_root_owner`, `is_x_descendent_of_y`, `children_of` and `set_lock`.
- `rmrkledger.uniques`: `Uniques`, the registry of collection and item owners.
  Transfers of locked items raise `UniquesErrorCode.LOCKED`.
- `rmrkledger.accounts`: `nft_to_account_id` and `decode_nft_account_id`, the
  encoding of an NFT as a virtual account, and `account_from_byte`.
- `rmrkledger.types`: records such as `CollectionInfo`, `NftInfo`,
  `ResourceInfo`, the resource kinds, the owners `AccountOwner` and
  `NftOwner`, and `permill_from_float`.
- `rmrkledger.events`: the event records.
- `rmrkledger.errors`: `RmrkError` and `UniquesError` with their `ErrorCode`
  and `UniquesErrorCode` values.

## What it does not do

The ledger lives in memory only: nothing is saved to disk, there is no
network service and no command-line program. Balances, deposits and fees are
not tracked, and equipping items is not implemented beyond recording which
bases and slots a resource makes equippable.

## Running the tests

```
pip install -e ".[test]"
pytest
```
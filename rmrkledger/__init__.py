"""In-memory ledger of nestable NFTs with collections, resources, properties and priorities."""

__version__ = "0.1.0"

__all__ = ["accounts", "errors", "events", "ledger", "pallet", "types", "uniques"]
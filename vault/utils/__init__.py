"""Utilities package."""

from vault.utils.hashing import make_item_hash, normalize_item_name

__all__ = [
    "make_item_hash",
    "normalize_item_name",
]

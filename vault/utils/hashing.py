"""Item name normalization for duplicate detection."""

import hashlib
import re

# Characters ignored when comparing item names, whitespace included
IGNORED_NAME_CHARS = re.compile(r"[\s._,\-;'\":()|/]")


def normalize_item_name(name: str) -> str:
    """Normalize an item name for comparison.

    Drops whitespace and punctuation and lowercases the rest, so that
    differently typed versions of the same name compare equal.

    Args:
        name: Item name as entered by a user

    Returns:
        Normalized name

    Example:
        >>> normalize_item_name(" Web. ")
        'web'
    """
    return IGNORED_NAME_CHARS.sub("", name).lower()


def make_item_hash(name: str) -> str:
    """Return the stable identity hash of an item name.

    Example:
        >>> make_item_hash("Web") == make_item_hash(" web. ") == make_item_hash("WEB")
        True
    """
    return hashlib.sha256(normalize_item_name(name).encode("utf-8")).hexdigest()
